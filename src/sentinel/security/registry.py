"""
Service Registry

Persistent collection of authenticator services. The full list is stored
as a JSON array under a single key of a KeyValueStore; every change loads
the list, edits it and writes the whole list back. There is one logical
writer (the local user), so concurrent saves are not merged and the last
write wins.
"""

import json
import logging
import re

from . import migration
from .models import AuthenticatorService
from .storage import JsonFileStore
from ..config import EMPTY_SLOT, STORE_KEY, VAULT_SLOTS, get_store_file
from ..exceptions import (
    EmptySlotError,
    InvalidSecretError,
    ServiceNotFoundError,
    SlotIndexError,
    StorageError,
)
from ..totp import base32

logger = logging.getLogger(__name__)

_PASTE_SEPARATORS = re.compile(r'[\n, ]+')


class ServiceRegistry:
    """
    Repository over the stored service list.

    Args:
        backend: KeyValueStore to persist into; a ``JsonFileStore`` at the
            configured store file when omitted
        key: Store key holding the JSON array
    """

    def __init__(self, backend=None, key=STORE_KEY):
        self.backend = backend if backend is not None else JsonFileStore(get_store_file())
        self.key = key

    def load_all(self):
        """
        Load and migrate every stored service.

        A missing key yields an empty list. An unreadable or corrupt payload
        is logged and also yields an empty list, so a damaged store never
        takes the caller down.

        A corrupt payload is copied to ``<key>.corrupt`` first. Records that
        had no id are saved back with the ids generated during migration.

        Returns:
            list[AuthenticatorService]: Services in stored order
        """
        try:
            payload = self.backend.get(self.key)
        except StorageError as e:
            logger.error(f"Service store unavailable: {e}")
            return []
        if not payload:
            return []

        try:
            records = json.loads(payload)
        except ValueError as e:
            logger.error(f"Database corruption detected: {e}")
            self._quarantine(payload)
            return []
        if not isinstance(records, list):
            logger.error(f"Database corruption detected: expected a list, got {type(records).__name__}")
            self._quarantine(payload)
            return []

        services = migration.migrate_records(records)
        if any(isinstance(raw, dict) and not raw.get("id") for raw in records):
            # generated ids must survive to the next load to stay addressable
            try:
                self.save_all(services)
            except StorageError as e:
                logger.error(f"Could not persist generated service ids: {e}")
        return services

    def _quarantine(self, payload):
        """Copy an unreadable payload to ``<key>.corrupt`` before it can be overwritten."""
        try:
            self.backend.set(self.key + ".corrupt", payload)
        except StorageError as e:
            logger.error(f"Could not keep a copy of the corrupt payload: {e}")
            return
        logger.warning(f"Kept a copy of the unreadable payload under {self.key}.corrupt")

    def save_all(self, services):
        """
        Overwrite the stored list with ``services``.

        Raises:
            StorageError: If the backend cannot be written
        """
        payload = json.dumps([service.to_record() for service in services])
        self.backend.set(self.key, payload)
        logger.debug(f"Saved {len(services)} services")

    def get_service(self, service_id):
        """The service with ``service_id``, or None."""
        for service in self.load_all():
            if service.id == service_id:
                return service
        return None

    def filter_by_tag(self, tag=None):
        """Services carrying ``tag``; all services when ``tag`` is None."""
        services = self.load_all()
        if tag is None:
            return services
        return [service for service in services if tag in service.tags]

    def add_service(self, name, secret, issuer=None, note="", hidden_description="", tags=None):
        """
        Enroll a new service.

        The secret is stored in canonical form (whitespace removed,
        upper-cased) and must be valid Base32.

        Returns:
            AuthenticatorService: The stored service

        Raises:
            InvalidSecretError: If name or secret is missing, or the secret
                is not Base32
        """
        if not name or not secret:
            raise InvalidSecretError("A name and a secret are required")
        if not base32.is_valid(secret):
            raise InvalidSecretError("Invalid secret (Base32 required)")

        service = AuthenticatorService.create(
            name=name,
            secret=base32.normalize(secret),
            issuer=issuer,
            note=note,
            hidden_description=hidden_description,
            tags=tags,
        )
        services = self.load_all()
        services.append(service)
        self.save_all(services)
        logger.info(f"Added service {service.name!r}")
        return service

    def delete_service(self, service_id):
        """
        Remove a service.

        Returns:
            bool: True if a service was removed, False if none matched
        """
        services = self.load_all()
        remaining = [service for service in services if service.id != service_id]
        if len(remaining) == len(services):
            return False
        self.save_all(remaining)
        logger.info(f"Deleted service {service_id}")
        return True

    def _update(self, service_id, change):
        services = self.load_all()
        for service in services:
            if service.id == service_id:
                result = change(service)
                self.save_all(services)
                return result
        raise ServiceNotFoundError(service_id)

    def toggle_tag(self, service_id, tag):
        """Add ``tag`` to the service, or remove it if already present."""
        def change(service):
            if tag in service.tags:
                service.tags = [t for t in service.tags if t != tag]
            else:
                service.tags = service.tags + [tag]
            return service
        return self._update(service_id, change)

    def update_note(self, service_id, note):
        def change(service):
            service.note = note
            return service
        return self._update(service_id, change)

    def update_hidden_description(self, service_id, text):
        def change(service):
            service.hidden_description = text
            return service
        return self._update(service_id, change)

    def set_recovery_slot(self, service_id, index, value):
        """
        Store a recovery code in one slot; a blank value empties the slot.

        Raises:
            SlotIndexError: If ``index`` is outside the vault
            ServiceNotFoundError: If no service has ``service_id``
        """
        _check_slot(index)

        def change(service):
            service.recovery_vault[index] = value.strip() or EMPTY_SLOT
            return service
        return self._update(service_id, change)

    def paste_recovery_codes(self, service_id, start_index, text):
        """
        Fill consecutive slots from pasted text.

        Codes are separated by newlines, commas or spaces. Filling starts at
        ``start_index`` and stops at the last slot; surplus codes are
        ignored.

        Returns:
            list[int]: Indices of the slots that were written
        """
        _check_slot(start_index)
        tokens = [token.strip() for token in _PASTE_SEPARATORS.split(text)]
        tokens = [token for token in tokens if token]

        def change(service):
            filled = []
            for offset, token in enumerate(tokens):
                index = start_index + offset
                if index >= VAULT_SLOTS:
                    break
                service.recovery_vault[index] = token
                filled.append(index)
            return filled
        return self._update(service_id, change)

    def consume_recovery_code(self, service_id, index):
        """
        Take a recovery code out of its slot, leaving the slot empty.

        Returns:
            str: The code that was stored

        Raises:
            EmptySlotError: If the slot holds no code
        """
        _check_slot(index)

        def change(service):
            code = service.recovery_vault[index]
            if code == EMPTY_SLOT:
                raise EmptySlotError(f"Slot {index} of {service.name!r} is empty")
            service.recovery_vault[index] = EMPTY_SLOT
            return code
        return self._update(service_id, change)


def _check_slot(index):
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < VAULT_SLOTS:
        raise SlotIndexError(f"Recovery slot index must be between 0 and {VAULT_SLOTS - 1}, got {index!r}")


_default_registry = None


def get_registry():
    """Process-wide registry over the configured store file."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ServiceRegistry()
    return _default_registry


def load_all():
    """Load every service from the process-wide registry."""
    return get_registry().load_all()


def save_all(services):
    """Overwrite the process-wide registry with ``services``."""
    get_registry().save_all(services)
