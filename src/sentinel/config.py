"""
Sentinel Configuration

Application constants and platform-aware path resolution:
- Data directory per platform, overridable through environment variables
- Portable mode that keeps everything next to the working directory
- OTP parameters shared by the engine, the countdown and the registry

Directories are created on demand by the functions below, never at import
time, so importing the package has no side effects on disk.
"""

import os
import platform

APP_NAME = "Sentinel"
APP_VERSION = "0.1.0"

# OTP parameters (RFC 6238 defaults used by every common authenticator)
TIME_STEP = 30
CODE_DIGITS = 6
FALLBACK_CODE = "0" * CODE_DIGITS

# Service registry layout
VAULT_SLOTS = 10
EMPTY_SLOT = "EMPTY_SLOT"
STORE_KEY = "nexus_sentinel_services"

# Backup files
BACKUP_FORMAT_VERSION = 2
BACKUP_EXTENSION = ".nexus"
BACKUP_KDF_ITERATIONS = 200_000


def _env_flag(name):
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def get_data_directory(create=True):
    """
    Resolve the platform-appropriate data directory:
    - Windows: %APPDATA%\\Sentinel
    - macOS: ~/Library/Application Support/Sentinel
    - Linux: ~/.sentinel

    ``SENTINEL_DATA_DIR`` overrides the location and ``SENTINEL_PORTABLE``
    switches to ``./.sentinel`` in the working directory.

    Args:
        create (bool): Create the directory if it is missing

    Returns:
        str: Path to the data directory
    """
    data_dir = os.environ.get('SENTINEL_DATA_DIR')
    if not data_dir:
        if _env_flag('SENTINEL_PORTABLE'):
            data_dir = os.path.join(os.getcwd(), '.sentinel')
        elif platform.system() == "Windows":
            base_dir = os.environ.get('APPDATA') or os.path.join(os.path.expanduser('~'), 'AppData', 'Roaming')
            data_dir = os.path.join(base_dir, APP_NAME)
        elif platform.system() == "Darwin":
            data_dir = os.path.join(os.path.expanduser('~'), 'Library', 'Application Support', APP_NAME)
        else:
            data_dir = os.path.join(os.path.expanduser('~'), '.sentinel')

    if create:
        os.makedirs(data_dir, mode=0o700, exist_ok=True)
    return data_dir


def get_store_file():
    """Path of the JSON file backing the service registry."""
    return os.environ.get('SENTINEL_STORE_FILE') or os.path.join(get_data_directory(), "store.json")


def get_exports_directory():
    """Default directory for backup exports (created if needed)."""
    exports_dir = os.environ.get('SENTINEL_EXPORTS_DIR') or os.path.join(get_data_directory(), "exports")
    os.makedirs(exports_dir, exist_ok=True)
    return exports_dir


def get_log_directory():
    """Directory for log files when file logging is enabled."""
    return os.path.join(get_data_directory(), "logs")
