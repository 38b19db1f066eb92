import json

import pytest

from sentinel.config import EMPTY_SLOT, STORE_KEY
from sentinel.exceptions import (
    EmptySlotError,
    InvalidSecretError,
    ServiceNotFoundError,
    SlotIndexError,
)
from sentinel.security import AuthenticatorService, MemoryStore, ServiceRegistry


def test_empty_store_loads_nothing(registry: ServiceRegistry) -> None:
    assert registry.load_all() == []


def test_corrupt_payload_loads_nothing(store: MemoryStore, registry: ServiceRegistry) -> None:
    store.set(STORE_KEY, "{not json")
    assert registry.load_all() == []
    assert store.get(STORE_KEY + ".corrupt") == "{not json"
    store.set(STORE_KEY, json.dumps({"id": "x"}))
    assert registry.load_all() == []


def test_legacy_records_are_migrated_on_load(store: MemoryStore, registry: ServiceRegistry) -> None:
    store.set(STORE_KEY, json.dumps([
        {"id": "a", "name": "Old", "secret": "MZXW6", "vault": ["x", "y", "z"]},
        {"id": "b", "name": "New", "secret": "MZXW6", "vault": ["c"] * 10, "tags": ["MAIN"]},
    ]))
    services = registry.load_all()
    assert [service.id for service in services] == ["a", "b"]
    assert all(len(service.recovery_vault) == 10 for service in services)
    assert services[0].recovery_vault == [EMPTY_SLOT] * 10
    assert services[1].recovery_vault == ["c"] * 10


def test_save_all_overwrites(store: MemoryStore, registry: ServiceRegistry) -> None:
    first = AuthenticatorService.create("One", "MZXW6")
    second = AuthenticatorService.create("Two", "MZXW6")
    registry.save_all([first, second])
    registry.save_all([second])
    assert [service.name for service in registry.load_all()] == ["Two"]
    assert json.loads(store.get(STORE_KEY))[0]["vault"] == [EMPTY_SLOT] * 10


def test_custom_key_is_used(store: MemoryStore) -> None:
    registry = ServiceRegistry(store, key="other")
    registry.save_all([AuthenticatorService.create("One", "MZXW6")])
    assert STORE_KEY not in store
    assert "other" in store


def test_add_service_normalizes_secret(registry: ServiceRegistry) -> None:
    service = registry.add_service("GitHub", "jbsw y3dp ehpk 3pxp", issuer="GitHub", tags=["MAIN"])
    assert service.secret == "JBSWY3DPEHPK3PXP"
    assert service.recovery_vault == [EMPTY_SLOT] * 10
    stored = registry.get_service(service.id)
    assert stored == service


@pytest.mark.parametrize("name, secret", [("", "MZXW6"), ("Svc", ""), ("Svc", "not-base32!"), ("Svc", "1234")])
def test_add_service_rejects_bad_input(registry: ServiceRegistry, name: str, secret: str) -> None:
    with pytest.raises(InvalidSecretError):
        registry.add_service(name, secret)
    assert registry.load_all() == []


def test_delete_service(registry: ServiceRegistry) -> None:
    keep = registry.add_service("Keep", "MZXW6")
    drop = registry.add_service("Drop", "MZXW6")
    assert registry.delete_service(drop.id) is True
    assert registry.delete_service(drop.id) is False
    assert [service.id for service in registry.load_all()] == [keep.id]


def test_toggle_tag_and_filter(registry: ServiceRegistry) -> None:
    main = registry.add_service("Main", "MZXW6", tags=["MAIN"])
    alt = registry.add_service("Alt", "MZXW6")
    registry.toggle_tag(alt.id, "ALT")
    registry.toggle_tag(main.id, "MAIN")

    assert registry.get_service(main.id).tags == []
    assert [service.id for service in registry.filter_by_tag("ALT")] == [alt.id]
    assert len(registry.filter_by_tag(None)) == 2
    assert registry.filter_by_tag("MAIN") == []


def test_update_note_and_hidden_description(registry: ServiceRegistry) -> None:
    service = registry.add_service("Svc", "MZXW6")
    registry.update_note(service.id, "uplink")
    registry.update_hidden_description(service.id, "me@example.com")
    stored = registry.get_service(service.id)
    assert stored.note == "uplink"
    assert stored.hidden_description == "me@example.com"


def test_set_recovery_slot(registry: ServiceRegistry) -> None:
    service = registry.add_service("Svc", "MZXW6")
    registry.set_recovery_slot(service.id, 3, "  abcd-1234 ")
    assert registry.get_service(service.id).recovery_vault[3] == "abcd-1234"
    registry.set_recovery_slot(service.id, 3, "   ")
    assert registry.get_service(service.id).recovery_vault[3] == EMPTY_SLOT


def test_paste_fills_consecutive_slots(registry: ServiceRegistry) -> None:
    service = registry.add_service("Svc", "MZXW6")
    filled = registry.paste_recovery_codes(service.id, 2, "aaaa, bbbb\ncccc   dddd,,\n")
    assert filled == [2, 3, 4, 5]
    vault = registry.get_service(service.id).recovery_vault
    assert vault[2:6] == ["aaaa", "bbbb", "cccc", "dddd"]
    assert len(vault) == 10


def test_paste_stops_at_last_slot(registry: ServiceRegistry) -> None:
    service = registry.add_service("Svc", "MZXW6")
    assert registry.paste_recovery_codes(service.id, 8, "a b c d") == [8, 9]
    assert len(registry.get_service(service.id).recovery_vault) == 10


def test_paste_of_blank_text_changes_nothing(registry: ServiceRegistry) -> None:
    service = registry.add_service("Svc", "MZXW6")
    assert registry.paste_recovery_codes(service.id, 0, " ,\n ") == []


def test_paste_of_blank_text_into_unknown_service(registry: ServiceRegistry) -> None:
    with pytest.raises(ServiceNotFoundError):
        registry.paste_recovery_codes("nope", 0, "   ")


def test_consume_recovery_code(registry: ServiceRegistry) -> None:
    service = registry.add_service("Svc", "MZXW6")
    registry.set_recovery_slot(service.id, 0, "one-time")
    assert registry.consume_recovery_code(service.id, 0) == "one-time"
    assert registry.get_service(service.id).recovery_vault[0] == EMPTY_SLOT
    with pytest.raises(EmptySlotError):
        registry.consume_recovery_code(service.id, 0)


@pytest.mark.parametrize("index", [-1, 10, 1.0, True])
def test_slot_index_is_checked(registry: ServiceRegistry, index) -> None:
    service = registry.add_service("Svc", "MZXW6")
    with pytest.raises(SlotIndexError):
        registry.set_recovery_slot(service.id, index, "x")


def test_unknown_service_is_reported(registry: ServiceRegistry) -> None:
    with pytest.raises(ServiceNotFoundError):
        registry.update_note("missing", "x")
    with pytest.raises(ServiceNotFoundError):
        registry.set_recovery_slot("missing", 0, "x")
    assert registry.get_service("missing") is None


def test_module_level_entry_points(monkeypatch: pytest.MonkeyPatch, registry: ServiceRegistry) -> None:
    import sentinel
    from sentinel.security import registry as registry_module

    monkeypatch.setattr(registry_module, "_default_registry", registry)
    sentinel.save_all([AuthenticatorService.create("One", "MZXW6")])
    assert [service.name for service in sentinel.load_all()] == ["One"]


def test_record_without_id_can_be_deleted_by_listed_id(store: MemoryStore, registry: ServiceRegistry) -> None:
    store.set(STORE_KEY, json.dumps([{"name": "Old", "secret": "MZXW6"}]))
    listed = registry.load_all()[0]
    assert json.loads(store.get(STORE_KEY))[0]["id"] == listed.id
    assert registry.get_service(listed.id).name == "Old"
    assert registry.delete_service(listed.id) is True
    assert registry.load_all() == []


def test_corrupt_payload_survives_next_save(store: MemoryStore, registry: ServiceRegistry) -> None:
    truncated = json.dumps([{"id": "a", "name": "Old", "secret": "MZXW6"}])[:-5]
    store.set(STORE_KEY, truncated)
    registry.add_service("New", "MZXW6")
    assert [service.name for service in registry.load_all()] == ["New"]
    assert store.get(STORE_KEY + ".corrupt") == truncated
