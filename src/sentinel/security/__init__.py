"""
Service registry and storage for Sentinel

This package provides:
- The authenticator service record and its migration from older shapes
- The service registry repository over a pluggable key-value store
- Backup export and import, optionally password protected
"""

from .exporters import BackupExporter
from .importers import BackupImporter, restore_backup
from .migration import migrate_record
from .models import AuthenticatorService
from .registry import ServiceRegistry
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    'AuthenticatorService',
    'BackupExporter',
    'BackupImporter',
    'JsonFileStore',
    'KeyValueStore',
    'MemoryStore',
    'ServiceRegistry',
    'migrate_record',
    'restore_backup',
]
