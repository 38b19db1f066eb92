"""
Password protection for backup files.

AES-256-GCM with a key derived from the password by PBKDF2-HMAC-SHA256.
The encrypted backup is a small JSON wrapper around the ciphertext:

    {"format": "AES256-GCM", "kdf": "PBKDF2-SHA256", "iterations": ...,
     "saltBase64": ..., "nonceBase64": ..., "contentBase64": ...}
"""

import base64
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config import BACKUP_KDF_ITERATIONS

WRAPPER_FORMAT = "AES256-GCM"
WRAPPER_KEYS = ("format", "iterations", "saltBase64", "nonceBase64", "contentBase64")


def derive_key(password, salt, iterations=BACKUP_KDF_ITERATIONS):
    """
    Derive a 32-byte key from a password using PBKDF2-HMAC-SHA256.

    Args:
        password (str or bytes): Backup password
        salt (bytes): 16-byte salt
        iterations (int): PBKDF2 iteration count

    Returns:
        bytes: The derived key
    """
    if isinstance(password, str):
        password = password.encode('utf-8')
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password)


def encrypt_payload(plaintext: bytes, password, iterations=BACKUP_KDF_ITERATIONS) -> dict:
    """Encrypt ``plaintext`` and return the JSON-ready wrapper."""
    salt = os.urandom(16)
    nonce = os.urandom(12)
    key = derive_key(password, salt, iterations)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    return {
        "format": WRAPPER_FORMAT,
        "kdf": "PBKDF2-SHA256",
        "iterations": iterations,
        "saltBase64": base64.b64encode(salt).decode('ascii'),
        "nonceBase64": base64.b64encode(nonce).decode('ascii'),
        "contentBase64": base64.b64encode(ciphertext).decode('ascii'),
    }


def is_encrypted_wrapper(data) -> bool:
    return isinstance(data, dict) and all(key in data for key in WRAPPER_KEYS)


def decrypt_payload(wrapper: dict, password) -> bytes:
    """
    Decrypt a wrapper produced by ``encrypt_payload``.

    Raises:
        ValueError: If the wrapper is malformed, or the password is wrong
            or the content was altered
    """
    if wrapper.get("format") != WRAPPER_FORMAT:
        raise ValueError(f"Unsupported encryption format: {wrapper.get('format')}")
    try:
        salt = base64.b64decode(wrapper["saltBase64"])
        nonce = base64.b64decode(wrapper["nonceBase64"])
        ciphertext = base64.b64decode(wrapper["contentBase64"])
        iterations = int(wrapper["iterations"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed encrypted backup: {e}") from e

    key = derive_key(password, salt, iterations)
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise ValueError("Decryption failed: wrong password or corrupted backup") from e
