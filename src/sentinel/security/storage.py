"""
Key-value storage backends for the service registry.

The registry keeps its whole collection as one JSON string under one key,
the same way the browser client kept it in local storage. Backends only
need ``get`` and ``set`` on string values:

- ``MemoryStore`` keeps values in a dict (tests, embedding)
- ``JsonFileStore`` keeps all keys in one JSON object file, rewritten
  atomically with owner-only permissions
"""

import json
import logging
import os
from typing import Optional, Protocol

from ..exceptions import StorageError
from ..utils.file_utils import secure_atomic_write

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Process-wide keyed string store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-memory store."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value

    def __contains__(self, key):
        return key in self._data


class JsonFileStore:
    """
    File-backed store holding every key in a single JSON object.

    Args:
        path: Location of the store file; created on first write
    """

    def __init__(self, path):
        self.path = os.fspath(path)

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store file {self.path} does not contain a JSON object")
        return data

    def _write_all(self, data):
        content = json.dumps(data, indent=2)
        if not secure_atomic_write(self.path, content):
            raise StorageError(f"Cannot write store file {self.path}")

    def get(self, key):
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Value for {key!r} in {self.path} is not a string")
        return value

    def set(self, key, value):
        try:
            data = self._read_all()
        except StorageError as e:
            # an unreadable file must not block saving; keep it aside for inspection
            backup_path = self.path + ".corrupt"
            logger.warning(f"{e}; moving it to {backup_path} and starting a new store")
            os.replace(self.path, backup_path)
            data = {}
        data[key] = value
        self._write_all(data)
