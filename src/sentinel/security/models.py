"""
Authenticator service record.
"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import EMPTY_SLOT, VAULT_SLOTS


def empty_vault() -> List[str]:
    """A recovery vault with every slot empty."""
    return [EMPTY_SLOT] * VAULT_SLOTS


def new_service_id() -> str:
    return str(uuid.uuid4())


@dataclass
class AuthenticatorService:
    """
    One enrolled account: its TOTP secret plus a fixed ten-slot vault of
    recovery codes and free-form metadata.

    ``extra`` carries persisted keys this version does not know about so
    that a load/save cycle does not drop them.
    """

    id: str
    name: str
    secret: str = field(repr=False)
    issuer: Optional[str] = None
    recovery_vault: List[str] = field(default_factory=empty_vault, repr=False)
    note: str = ""
    hidden_description: str = field(default="", repr=False)
    tags: List[str] = field(default_factory=list)
    extra: Dict[str, object] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        if len(self.recovery_vault) != VAULT_SLOTS:
            raise ValueError(
                f"recovery vault must have {VAULT_SLOTS} slots, got {len(self.recovery_vault)}"
            )

    @classmethod
    def create(cls, name, secret, issuer=None, note="", hidden_description="", tags=None):
        """New service with a fresh id and an empty recovery vault."""
        return cls(
            id=new_service_id(),
            name=name,
            secret=secret,
            issuer=issuer,
            note=note,
            hidden_description=hidden_description,
            tags=list(tags or []),
        )

    @property
    def filled_slots(self) -> int:
        return sum(1 for slot in self.recovery_vault if slot != EMPTY_SLOT)

    def to_record(self) -> dict:
        """Persisted JSON shape (camelCase keys, vault stored as ``vault``)."""
        record = dict(self.extra)
        record.update({
            "id": self.id,
            "name": self.name,
            "secret": self.secret,
            "vault": list(self.recovery_vault),
            "note": self.note,
            "hiddenDescription": self.hidden_description,
            "tags": list(self.tags),
        })
        if self.issuer is not None:
            record["issuer"] = self.issuer
        return record
