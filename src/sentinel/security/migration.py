"""
Record migration for the service store.

Older clients wrote services without a recovery vault, note, hidden
description or tags, and some wrote vaults of the wrong length. Loading
repairs such records with documented defaults rather than rejecting them.
Nothing beyond those defaults is inferred.
"""

import logging

from .models import AuthenticatorService, empty_vault, new_service_id
from ..config import VAULT_SLOTS

logger = logging.getLogger(__name__)

# Schema every record is brought up to on load
MIGRATION_VERSION = 1

KNOWN_KEYS = frozenset({
    "id", "name", "secret", "issuer", "vault", "note", "hiddenDescription", "tags",
})


def migrate_record(raw: dict) -> AuthenticatorService:
    """
    Turn a raw persisted record into a fully defaulted service.

    - ``vault``: kept only if it is a list of exactly 10 entries, otherwise
      replaced by 10 empty slots
    - ``note`` / ``hiddenDescription``: empty string when missing or falsy
    - ``tags``: empty list unless a list
    - ``id``: a fresh id when missing, so the record stays addressable
    - unknown keys are preserved in ``extra``

    Args:
        raw: One decoded JSON object

    Returns:
        AuthenticatorService: The migrated service

    Raises:
        TypeError: If ``raw`` is not a dict
    """
    if not isinstance(raw, dict):
        raise TypeError(f"service record must be an object, not {type(raw).__name__}")

    vault = raw.get("vault")
    if isinstance(vault, list) and len(vault) == VAULT_SLOTS:
        vault = list(vault)
    else:
        if vault is not None:
            logger.debug(f"Resetting recovery vault of {raw.get('name')!r}: unexpected shape")
        vault = empty_vault()

    tags = raw.get("tags")

    return AuthenticatorService(
        id=raw.get("id") or new_service_id(),
        name=raw.get("name") or "",
        secret=raw.get("secret") or "",
        issuer=raw.get("issuer"),
        recovery_vault=vault,
        note=raw.get("note") or "",
        hidden_description=raw.get("hiddenDescription") or "",
        tags=list(tags) if isinstance(tags, list) else [],
        extra={key: value for key, value in raw.items() if key not in KNOWN_KEYS},
    )


def migrate_records(raw_records) -> list:
    """
    Migrate a decoded JSON array, skipping entries that are not objects.

    Args:
        raw_records: List of raw records

    Returns:
        list[AuthenticatorService]: Migrated services in their stored order
    """
    services = []
    for position, raw in enumerate(raw_records):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping service record {position}: not an object")
            continue
        services.append(migrate_record(raw))
    logger.debug(f"Migrated {len(services)} service records to schema v{MIGRATION_VERSION}")
    return services
