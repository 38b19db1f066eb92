"""
Debug Utility Module

Debug printing that can be switched on globally, so trace statements stay in
the code but are silent in normal use. Messages are routed through the
package logger at DEBUG level.
"""

import os

from .logger import debug as _log_debug

# Can be enabled via environment variable or set_debug()
_debug_enabled = os.environ.get('SENTINEL_DEBUG', '').lower() in ('1', 'true', 'yes')


def set_debug(enabled=True):
    """
    Enable or disable debug output.

    Args:
        enabled (bool): Whether to enable debug output
    """
    global _debug_enabled
    _debug_enabled = enabled


def debug_print(*args):
    """
    Log the given values at DEBUG level when debug mode is on.

    Args:
        *args: Values to join with spaces into one message
    """
    if not _debug_enabled:
        return
    _log_debug(" ".join(str(arg) for arg in args))
