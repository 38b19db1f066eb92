"""
Backup export for the service registry

Writes the global backup file (format version 2):

    {"version": 2, "sentinel": [service records], "observer": [...]}

``observer`` carries records owned by the evidence/observer subsystem;
this package passes them through without interpreting them. When a
password is given the JSON is wrapped with AES-GCM encryption.
"""

import json
import os
import time

from .backup_crypto import encrypt_payload
from ..config import BACKUP_EXTENSION, BACKUP_FORMAT_VERSION, get_exports_directory
from ..utils.file_utils import secure_atomic_write
from ..utils.logger import debug, info, error


def build_payload(services, observer=None):
    """Backup document for ``services`` and pass-through ``observer`` data."""
    return {
        "version": BACKUP_FORMAT_VERSION,
        "sentinel": [service.to_record() for service in services],
        "observer": list(observer or []),
    }


class BackupExporter:
    """
    Exports services to a backup file.

    Args:
        exports_path: Directory used for relative or omitted export paths;
            the configured exports directory when None
    """

    def __init__(self, exports_path=None):
        self.exports_path = exports_path

    def _base_dir(self):
        return self.exports_path or get_exports_directory()

    def _resolve_path(self, export_path):
        if not export_path:
            name = f"nexus_global_backup_{int(time.time() * 1000)}{BACKUP_EXTENSION}"
            return os.path.join(self._base_dir(), name)

        export_path = export_path.strip('"').strip("'")
        if os.path.isdir(export_path):
            export_path = os.path.join(export_path, f"nexus_global_backup{BACKUP_EXTENSION}")
        elif not os.path.isabs(export_path):
            export_path = os.path.join(self._base_dir(), export_path)
        return export_path

    def export_to_file(self, services, export_path=None, password=None, observer=None):
        """
        Write a backup of ``services``.

        Args:
            services: Services to export
            export_path: Target file or directory; a timestamped file in the
                exports directory when omitted
            password: Encrypt the backup with this password when given
            observer: Observer records to include unchanged

        Returns:
            tuple: (path, error_message)
                - path: Written file path, or None if the export failed
                - error_message: None on success
        """
        path = self._resolve_path(export_path)
        payload = build_payload(services, observer)
        content = json.dumps(payload, indent=2)
        debug(f"Exporting {len(payload['sentinel'])} services to {path}")

        if password:
            content = json.dumps(encrypt_payload(content.encode('utf-8'), password), indent=2)

        if not secure_atomic_write(path, content):
            error(f"Export to {path} failed")
            return None, f"Could not write {path}. Try a different location."

        info(f"Exported {len(payload['sentinel'])} services to {path}")
        return path, None
