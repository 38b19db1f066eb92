import pytest

from sentinel.config import EMPTY_SLOT
from sentinel.security.migration import migrate_record, migrate_records
from sentinel.security.models import AuthenticatorService

LEGACY = {"id": "svc-1", "name": "GitHub", "secret": "JBSWY3DPEHPK3PXP"}


@pytest.mark.parametrize("length", [0, 3, 9, 11, 12])
def test_wrong_vault_length_is_reset(length: int) -> None:
    service = migrate_record({**LEGACY, "vault": ["code"] * length})
    assert service.recovery_vault == [EMPTY_SLOT] * 10


def test_ten_slot_vault_is_kept() -> None:
    vault = [f"code-{i}" for i in range(9)] + [EMPTY_SLOT]
    service = migrate_record({**LEGACY, "vault": vault})
    assert service.recovery_vault == vault
    assert service.filled_slots == 9


def test_missing_fields_get_defaults() -> None:
    service = migrate_record(dict(LEGACY))
    assert service.recovery_vault == [EMPTY_SLOT] * 10
    assert service.note == ""
    assert service.hidden_description == ""
    assert service.tags == []
    assert service.issuer is None


def test_wrong_types_get_defaults() -> None:
    service = migrate_record({**LEGACY, "vault": "nope", "tags": "MAIN", "note": None, "hiddenDescription": 0})
    assert service.recovery_vault == [EMPTY_SLOT] * 10
    assert service.tags == []
    assert service.note == ""
    assert service.hidden_description == ""


def test_present_fields_are_kept() -> None:
    service = migrate_record({
        **LEGACY,
        "issuer": "GitHub Inc.",
        "note": "work account",
        "hiddenDescription": "me@example.com",
        "tags": ["MAIN", "ALT"],
    })
    assert service.issuer == "GitHub Inc."
    assert service.note == "work account"
    assert service.hidden_description == "me@example.com"
    assert service.tags == ["MAIN", "ALT"]


def test_missing_id_is_generated() -> None:
    first = migrate_record({"name": "a", "secret": "MZXW6"})
    second = migrate_record({"name": "a", "secret": "MZXW6"})
    assert first.id and second.id and first.id != second.id


def test_unknown_keys_survive_round_trip() -> None:
    service = migrate_record({**LEGACY, "color": "amber"})
    assert service.extra == {"color": "amber"}
    assert service.to_record()["color"] == "amber"


def test_record_uses_persisted_key_names() -> None:
    record = migrate_record({**LEGACY, "hiddenDescription": "x"}).to_record()
    assert set(record) == {"id", "name", "secret", "vault", "note", "hiddenDescription", "tags"}
    assert record["hiddenDescription"] == "x"


def test_non_object_rejected_and_skipped_in_lists() -> None:
    with pytest.raises(TypeError):
        migrate_record(["not", "a", "record"])
    services = migrate_records([LEGACY, "junk", 42, {"name": "b", "secret": "MZXW6"}])
    assert [service.name for service in services] == ["GitHub", "b"]


def test_service_enforces_vault_size() -> None:
    with pytest.raises(ValueError):
        AuthenticatorService(id="x", name="x", secret="x", recovery_vault=["a"])


def test_secret_not_in_repr() -> None:
    assert "JBSWY3DPEHPK3PXP" not in repr(migrate_record(dict(LEGACY)))
