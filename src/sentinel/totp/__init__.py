"""
One-time password modules for Sentinel
"""

from .clock import ClockWindow, remaining_seconds
from .engine import TotpEngine, dynamic_truncate, generate_code, get_engine
from .hashing import CryptographyHmacProvider, KeyedHashProvider, StdlibHmacProvider

__all__ = [
    'ClockWindow',
    'CryptographyHmacProvider',
    'KeyedHashProvider',
    'StdlibHmacProvider',
    'TotpEngine',
    'dynamic_truncate',
    'generate_code',
    'get_engine',
    'remaining_seconds',
]
