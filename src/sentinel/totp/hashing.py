"""
Keyed-hash providers for OTP generation.

The engine never computes HMAC itself; it asks a provider. Two providers
ship with the package:

- ``CryptographyHmacProvider`` (default) uses the ``cryptography``
  package's HMAC primitive, the same backend the rest of the security
  code relies on.
- ``StdlibHmacProvider`` uses ``hmac``/``hashlib`` from the standard
  library; it serves as an independent cross-check of the default
  provider.

Any object with a ``hmac_sha1(key, message) -> bytes`` method can be passed
to the engine instead, for example a hardware-backed signer. A provider
may also define ``async def ahmac_sha1`` which the async engine path
awaits directly.
"""

import hashlib
import hmac
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from ..exceptions import HashProviderError

SHA1_DIGEST_SIZE = 20


@runtime_checkable
class KeyedHashProvider(Protocol):
    """Anything able to compute HMAC-SHA1 over a message."""

    def hmac_sha1(self, key: bytes, message: bytes) -> bytes:
        ...


class CryptographyHmacProvider:
    """HMAC-SHA1 backed by ``cryptography.hazmat.primitives.hmac``."""

    def hmac_sha1(self, key: bytes, message: bytes) -> bytes:
        # SHA-1 is mandated by RFC 4226/6238 here, not used as a collision-resistant hash
        signer = crypto_hmac.HMAC(key, hashes.SHA1())
        signer.update(message)
        return signer.finalize()


class StdlibHmacProvider:
    """HMAC-SHA1 backed by the standard library."""

    def hmac_sha1(self, key: bytes, message: bytes) -> bytes:
        return hmac.new(key, message, hashlib.sha1).digest()


def compute_digest(provider, key: bytes, message: bytes) -> bytes:
    """
    Run the provider and check that it produced a full SHA-1 digest.

    Raises:
        HashProviderError: If the provider fails or returns something other
            than 20 bytes
    """
    try:
        digest = provider.hmac_sha1(key, message)
    except Exception as e:
        raise HashProviderError(f"{type(provider).__name__} failed: {e}") from e
    return check_digest(digest)


def check_digest(digest) -> bytes:
    """Validate a provider result; shared by the sync and async paths."""
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != SHA1_DIGEST_SIZE:
        size = len(digest) if isinstance(digest, (bytes, bytearray)) else type(digest).__name__
        raise HashProviderError(f"expected a {SHA1_DIGEST_SIZE}-byte digest, got {size}")
    return bytes(digest)


def default_provider():
    """The provider used when none is injected."""
    return CryptographyHmacProvider()
