"""
Lenient Base32 decoding for shared secrets.

Authenticator secrets are typed or pasted by people, so they arrive in any
case, with spaces or dashes between groups and with or without ``=``
padding. ``decode`` accepts all of that: it keeps only characters of the
RFC 4648 alphabet and never rejects the input. Strict checking is done
separately by ``is_valid`` when a service is enrolled.
"""

import re

from ..exceptions import Base32DecodeError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_VALUES = {char: index for index, char in enumerate(ALPHABET)}

_SECRET_PATTERN = re.compile(r'^[A-Z2-7]+=*$')
_WHITESPACE = re.compile(r'\s')


def decode(secret: str) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Characters outside ``A-Z2-7`` (after upper-casing) are dropped and
    trailing bits that do not fill a whole byte are discarded, so the
    result is ``len(cleaned) * 5 // 8`` bytes long.

    Args:
        secret: Base32 text, any case, padding optional

    Returns:
        bytes: The decoded key (possibly empty)

    Raises:
        Base32DecodeError: If ``secret`` is not a string
    """
    if not isinstance(secret, str):
        raise Base32DecodeError(f"secret must be str, not {type(secret).__name__}")

    cleaned = secret.upper().rstrip("=")

    buffer = bytearray()
    value = 0
    bits = 0
    for char in cleaned:
        index = _VALUES.get(char)
        if index is None:
            continue
        value = ((value << 5) | index) & 0xFFF
        bits += 5
        if bits >= 8:
            bits -= 8
            buffer.append((value >> bits) & 0xFF)

    return bytes(buffer)


def normalize(secret: str) -> str:
    """Canonical stored form of a secret: whitespace removed, upper-cased."""
    return _WHITESPACE.sub("", secret).upper()


def is_valid(secret: str) -> bool:
    """
    Check a secret the way enrollment does.

    The secret is normalized first, then must consist of Base32 alphabet
    characters followed by optional ``=`` padding.
    """
    if not isinstance(secret, str):
        return False
    return bool(_SECRET_PATTERN.match(normalize(secret)))
