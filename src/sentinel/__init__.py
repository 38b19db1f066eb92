"""
Sentinel: TOTP codes and an authenticator service registry

Callers use three entry points:
- ``generate_code(secret, window_offset=0)``: current six-digit code
- ``remaining_seconds()``: seconds until that code rotates
- ``load_all()`` / ``save_all(services)``: the stored service registry
"""

from .config import APP_VERSION as __version__
from .security.models import AuthenticatorService
from .security.registry import ServiceRegistry, load_all, save_all
from .totp.clock import remaining_seconds
from .totp.engine import TotpEngine, generate_code

__all__ = [
    'AuthenticatorService',
    'ServiceRegistry',
    'TotpEngine',
    'generate_code',
    'load_all',
    'remaining_seconds',
    'save_all',
]
