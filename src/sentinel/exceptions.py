"""
Exception hierarchy for Sentinel.

OTP errors are raised by the internal generation steps and converted to the
fallback code at the public ``generate_code`` edge. Registry errors reach
the caller.
"""


class SentinelError(Exception):
    """Base class for all Sentinel errors."""


class OtpError(SentinelError):
    """A step of one-time-password generation failed."""


class Base32DecodeError(OtpError):
    """The shared secret could not be decoded."""


class CounterRangeError(OtpError):
    """The step counter is outside the unsigned 64-bit range."""


class HashProviderError(OtpError):
    """The keyed-hash provider failed or returned an unusable digest."""


class TruncationError(OtpError):
    """The digest is too short for dynamic truncation."""


class RegistryError(SentinelError):
    """A service registry operation was rejected."""


class ServiceNotFoundError(RegistryError):
    """No service with the requested id exists."""

    def __init__(self, service_id):
        super().__init__(f"No service with id {service_id!r}")
        self.service_id = service_id


class InvalidSecretError(RegistryError):
    """A secret offered at enrollment is not valid Base32."""


class SlotIndexError(RegistryError):
    """A recovery slot index is outside the vault."""


class EmptySlotError(RegistryError):
    """A recovery slot holds no code."""


class StorageError(SentinelError):
    """The backing key-value store could not be read or written."""
