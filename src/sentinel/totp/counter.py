"""
Moving-factor encoding for HOTP.

RFC 4226 feeds the counter to HMAC as an 8-byte big-endian unsigned
integer. Python integers are unbounded, so the only concern here is
keeping the value inside the unsigned 64-bit range instead of letting it
wrap or silently lose high bits.
"""

import struct

from ..exceptions import CounterRangeError

COUNTER_BYTES = 8
MAX_COUNTER = 2 ** 64 - 1

_COUNTER = struct.Struct(">Q")


def encode(counter: int) -> bytes:
    """
    Pack a step counter into the 8-byte big-endian HMAC message.

    Args:
        counter: Value in ``[0, 2**64 - 1]``

    Returns:
        bytes: 8 bytes, most significant first

    Raises:
        CounterRangeError: If the counter is not an int or is out of range
    """
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise CounterRangeError(f"counter must be int, not {type(counter).__name__}")
    if counter < 0 or counter > MAX_COUNTER:
        raise CounterRangeError(f"counter {counter} is outside the unsigned 64-bit range")
    return _COUNTER.pack(counter)
