"""
Backup import for the service registry

Recognised inputs:
- version 1: a bare JSON array of service records (legacy, services only)
- version 2: ``{"sentinel": [...], "observer": [...]}``
- either of the above inside the AES-GCM password wrapper

Imported records go through the same migration as stored records. An
import replaces the whole registry; it never merges.
"""

import json
import os
from dataclasses import dataclass, field
from typing import List

from .backup_crypto import decrypt_payload, is_encrypted_wrapper
from .migration import migrate_records
from ..utils.logger import debug, info, error


@dataclass
class ImportedBackup:
    """Services and pass-through observer records read from a backup."""

    services: List = field(default_factory=list)
    observer: List = field(default_factory=list)
    format_version: int = 2


class BackupImporter:
    """
    Reads backup files written by ``BackupExporter`` or older clients.
    """

    def import_from_file(self, import_path, password=None):
        """
        Read a backup file.

        Args:
            import_path: Path to the backup file
            password: Password for encrypted backups

        Returns:
            tuple: (backup, error_message)
                - backup: ImportedBackup, or None if the import failed
                - error_message: None on success
        """
        if not import_path or not os.path.isfile(import_path):
            error(f"Import file not found: {import_path}")
            return None, f"File not found: {import_path}"

        try:
            with open(import_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            error(f"Cannot read {import_path}: {e}")
            return None, f"Could not read {import_path}"

        return self.import_from_text(text, password)

    def import_from_text(self, text, password=None):
        """Parse backup content; same result convention as ``import_from_file``."""
        try:
            data = json.loads(text)
        except ValueError:
            return None, "Corrupt backup file"

        if is_encrypted_wrapper(data):
            if not password:
                return None, "This backup is encrypted; a password is required"
            try:
                data = json.loads(decrypt_payload(data, password).decode('utf-8'))
            except ValueError as e:
                error(f"Backup decryption failed: {e}")
                return None, str(e)

        detected = self._detect_format(data)
        debug(f"Detected backup format: {detected}")

        if detected == "v1":
            backup = ImportedBackup(services=migrate_records(data), format_version=1)
        elif detected == "v2":
            observer = data.get("observer") or []
            backup = ImportedBackup(
                services=migrate_records(data.get("sentinel") or []),
                observer=observer if isinstance(observer, list) else [],
                format_version=2,
            )
        else:
            return None, "Unsupported backup format"

        info(f"Read {len(backup.services)} services from a v{backup.format_version} backup")
        return backup, None

    def _detect_format(self, data):
        if isinstance(data, list):
            return "v1"
        if isinstance(data, dict) and isinstance(data.get("sentinel"), list):
            return "v2"
        return "unknown"


def restore_backup(registry, import_path, password=None):
    """
    Replace the contents of ``registry`` with a backup file.

    Returns:
        tuple: (backup, error_message) as returned by the importer; the
        registry is only written when the import succeeded
    """
    backup, message = BackupImporter().import_from_file(import_path, password)
    if backup is not None:
        registry.save_all(backup.services)
    return backup, message
