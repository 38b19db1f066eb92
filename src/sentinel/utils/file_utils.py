"""
File Utilities

Atomic, owner-only file writes for the service store and backup files.
"""

import os
import shutil
import platform
import logging

logger = logging.getLogger(__name__)


def secure_file_permissions(file_path):
    """
    Restrict a file to owner read/write.

    Args:
        file_path: Path to the file

    Returns:
        bool: True if successful (always True on Windows), False otherwise
    """
    if platform.system() == "Windows":
        return True
    try:
        os.chmod(file_path, 0o600)
        return True
    except OSError as e:
        logger.warning(f"Could not set secure permissions on {file_path}: {e}")
        return False


def secure_atomic_write(file_path, content, mode="w"):
    """
    Write content to a file atomically and securely.

    The content goes to a temporary file next to the target which is then
    renamed over it, so readers never observe a half-written file.

    Args:
        file_path: Target file path
        content: Content to write
        mode: File mode ('w' for text, 'wb' for binary)

    Returns:
        bool: True if successful, False otherwise
    """
    dir_path = os.path.dirname(os.path.abspath(file_path))
    temp_file = file_path + ".tmp"

    try:
        os.makedirs(dir_path, mode=0o700, exist_ok=True)

        if "b" in mode:
            with open(temp_file, mode) as f:
                f.write(content)
        else:
            with open(temp_file, mode, encoding="utf-8") as f:
                f.write(content)

        secure_file_permissions(temp_file)
        shutil.move(temp_file, file_path)
        return True
    except OSError as e:
        logger.error(f"Error during secure atomic write to {file_path}: {e}")
        if os.path.exists(temp_file):
            safe_delete(temp_file)
        return False


def safe_delete(path):
    """
    Delete a file, logging instead of raising on failure.

    Args:
        path: Path to the file

    Returns:
        bool: True if deleted, False otherwise
    """
    try:
        if os.path.isfile(path):
            os.remove(path)
            return True
        return False
    except OSError as e:
        logger.error(f"Error deleting {path}: {e}")
        return False
