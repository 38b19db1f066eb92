"""
Sentinel TOTP Engine

RFC 4226 (HOTP) and RFC 6238 (TOTP) code generation:

1. Derive the step counter from the clock: ``floor(now / 30) + offset``
2. Decode the Base32 shared secret into key bytes
3. Encode the counter as an 8-byte big-endian message
4. HMAC-SHA1 the message with the key (through a KeyedHashProvider)
5. Dynamic truncation of the digest to a 31-bit integer
6. Reduce modulo 10^6 and left-pad to six digits

The internal steps raise ``OtpError`` subclasses. ``generate_code`` and
``generate_code_async`` are the UI-facing edge: they never raise and
return ``"000000"`` instead, logging the cause.
"""

import asyncio
import logging

from . import base32
from . import counter as counter_codec
from .clock import ClockWindow
from .hashing import KeyedHashProvider, check_digest, compute_digest, default_provider
from ..config import CODE_DIGITS, FALLBACK_CODE, TIME_STEP
from ..exceptions import CounterRangeError, HashProviderError, OtpError, TruncationError

logger = logging.getLogger(__name__)

_MODULUS = 10 ** CODE_DIGITS


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 section 5.3 dynamic truncation.

    The low nibble of the last byte selects an offset; the four bytes at
    that offset, with the top bit cleared, form a big-endian 31-bit
    integer.

    Raises:
        TruncationError: If the digest is shorter than the selected window
    """
    if not digest:
        raise TruncationError("empty digest")
    offset = digest[-1] & 0x0F
    if len(digest) < offset + 4:
        raise TruncationError(f"digest of {len(digest)} bytes too short for offset {offset}")
    return (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )


def format_code(binary: int) -> str:
    """Reduce a truncated value to a zero-padded six-digit code."""
    return str(binary % _MODULUS).zfill(CODE_DIGITS)


class TotpEngine:
    """
    Time-based one-time password generator.

    Holds no per-call state: concurrent calls with the same secret and
    counter return the same code, so one engine can be shared freely.

    Args:
        provider: KeyedHashProvider computing HMAC-SHA1
            (``CryptographyHmacProvider`` when omitted)
        clock: Zero-argument callable returning Unix seconds
        step: Time-step length in seconds
    """

    def __init__(self, provider=None, clock=None, step=TIME_STEP):
        self.provider = provider or default_provider()
        if not isinstance(self.provider, KeyedHashProvider):
            raise TypeError(f"{type(self.provider).__name__} has no hmac_sha1 method")
        self.window = ClockWindow(clock=clock, step=step)

    @property
    def step(self):
        return self.window.step

    def counter_at(self, epoch, window_offset: int = 0) -> int:
        """
        Step counter for a Unix time, shifted by ``window_offset`` steps.

        Raises:
            CounterRangeError: If the offset is not an integer
        """
        if isinstance(window_offset, bool) or not isinstance(window_offset, int):
            raise CounterRangeError(f"window offset must be int, not {type(window_offset).__name__}")
        return int(epoch // self.step) + window_offset

    def hotp(self, key: bytes, counter: int) -> str:
        """HOTP value for raw key bytes and a counter (RFC 4226)."""
        message = counter_codec.encode(counter)
        digest = compute_digest(self.provider, key, message)
        return format_code(dynamic_truncate(digest))

    def code_at(self, secret: str, epoch, window_offset: int = 0) -> str:
        """
        TOTP value for ``secret`` at a given Unix time.

        Unlike ``generate_code`` this raises on failure.

        Raises:
            OtpError: If any generation step fails
        """
        counter = self.counter_at(epoch, window_offset)
        return self.hotp(base32.decode(secret), counter)

    def generate_code(self, secret: str, window_offset: int = 0) -> str:
        """
        Current six-digit code for ``secret``.

        ``window_offset`` selects an adjacent step (``-1`` previous,
        ``1`` next) to tolerate clock drift.

        Returns:
            str: The code, or ``"000000"`` if generation failed
        """
        try:
            return self.code_at(secret, self.window.now(), window_offset)
        except OtpError as e:
            logger.error(f"TOTP generation error: {e}")
            return FALLBACK_CODE

    async def generate_code_async(self, secret: str, window_offset: int = 0) -> str:
        """
        Coroutine form of ``generate_code``.

        The keyed-hash call is the only await point. Providers exposing an
        ``ahmac_sha1`` coroutine are awaited directly; synchronous
        providers run in a worker thread. No timeout is applied.
        """
        try:
            counter = self.counter_at(self.window.now(), window_offset)
            key = base32.decode(secret)
            message = counter_codec.encode(counter)
            digest = await self._digest_async(key, message)
            return format_code(dynamic_truncate(digest))
        except OtpError as e:
            logger.error(f"TOTP generation error: {e}")
            return FALLBACK_CODE

    async def _digest_async(self, key, message):
        ahmac = getattr(self.provider, "ahmac_sha1", None)
        if ahmac is None:
            return await asyncio.to_thread(compute_digest, self.provider, key, message)
        try:
            digest = await ahmac(key, message)
        except Exception as e:
            raise HashProviderError(f"{type(self.provider).__name__} failed: {e}") from e
        return check_digest(digest)

    def remaining_seconds(self) -> int:
        """Seconds until the current code rotates, in ``[1, step]``."""
        return self.window.remaining_seconds()


_default_engine = None


def get_engine():
    """Process-wide engine using the default provider and system clock."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TotpEngine()
    return _default_engine


def generate_code(secret: str, window_offset: int = 0) -> str:
    """Current code for ``secret`` from the process-wide engine; never raises."""
    return get_engine().generate_code(secret, window_offset)
