"""Tests for append-entry, rotate-coil and seeding."""

from datetime import date, datetime, timezone

import pytest

from app.core.errors import ValidationFailed
from app.storage.memory_store import MemoryStore
from app.tracker.operations import (
    add_entry,
    daily_puffs_from_counter,
    duration_days,
    rotate_coil,
    seed_if_empty,
)

NOW = datetime(2026, 2, 1, 15, 30, tzinfo=timezone.utc)


def _store_with_coil(**overrides) -> MemoryStore:
    store = MemoryStore()
    payload = {"name": "R#3", "startedAt": "2026-01-02", "initialOhms": 0.4}
    payload.update(overrides)
    rotate_coil(store, payload, now=NOW)
    return store


def _entry(**overrides) -> dict:
    payload = {
        "coilId": 1,
        "date": "2026-01-03",
        "puffs": 559,
        "mlAdded": 10,
        "measuredOhms": 0.4,
    }
    payload.update(overrides)
    return payload


# ── Append entry ───────────────────────────────────────────────────

def test_add_entry_returns_day_log():
    store = _store_with_coil()
    log = add_entry(store, _entry(), now=NOW)
    assert log == {"date": "2026-01-03", "taffes": 559, "ml_ajoutes": 10.0, "ohms": 0.4}


def test_add_entry_assigns_increasing_ids():
    store = _store_with_coil()
    add_entry(store, _entry(), now=NOW)
    add_entry(store, _entry(date="2026-01-04", puffs=24, mlAdded=0), now=NOW)
    entries = store.load().entries
    assert [e.id for e in entries] == [1, 2]
    assert entries[0].created_at == NOW


def test_add_entry_defaults_ml_added():
    store = _store_with_coil()
    payload = _entry()
    del payload["mlAdded"]
    log = add_entry(store, payload)
    assert log["ml_ajoutes"] == 0.0


def test_add_entry_accepts_numeric_strings():
    store = _store_with_coil()
    log = add_entry(store, _entry(puffs="42", measuredOhms="0.41"))
    assert log["taffes"] == 42
    assert log["ohms"] == 0.41


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"puffs": -1}, "puffs"),
        ({"mlAdded": -0.5}, "mlAdded"),
        ({"measuredOhms": 0}, "measuredOhms"),
        ({"measuredOhms": "abc"}, "measuredOhms"),
        ({"date": "not-a-date"}, "date"),
        ({"coilId": 99}, "coilId"),
        ({"puffs": True}, "puffs"),
        ({"measuredOhms": True}, "measuredOhms"),
        ({"mlAdded": False}, "mlAdded"),
        ({"coilId": True}, "coilId"),
    ],
)
def test_add_entry_rejects_invalid_input(overrides, field):
    store = _store_with_coil()
    add_entry(store, _entry(), now=NOW)

    with pytest.raises(ValidationFailed) as info:
        add_entry(store, _entry(**overrides))

    assert info.value.field == field
    assert len(store.load().entries) == 1


def test_add_entry_missing_required_field():
    store = _store_with_coil()
    payload = _entry()
    del payload["measuredOhms"]
    with pytest.raises(ValidationFailed) as info:
        add_entry(store, payload)
    assert info.value.field == "measuredOhms"
    assert store.load().entries == []


def test_add_entry_requires_puffs_or_counter():
    store = _store_with_coil()
    payload = _entry()
    del payload["puffs"]
    with pytest.raises(ValidationFailed) as info:
        add_entry(store, payload)
    assert info.value.field == "puffs"
    assert store.load().entries == []


def test_add_entry_from_pod_counter():
    store = _store_with_coil()
    add_entry(store, _entry(), now=NOW)

    payload = _entry(date="2026-01-04", mlAdded=0)
    del payload["puffs"]
    payload["podCounter"] = 583
    log = add_entry(store, payload)

    assert log["taffes"] == 24


def test_puffs_take_precedence_over_counter():
    store = _store_with_coil()
    log = add_entry(store, _entry(puffs=7, podCounter=900))
    assert log["taffes"] == 7


def test_daily_puffs_from_counter():
    assert daily_puffs_from_counter(583, 559) == 24
    assert daily_puffs_from_counter(559, 559) == 0
    # counter reset on the device
    assert daily_puffs_from_counter(40, 559) == 40


# ── Rotate coil ────────────────────────────────────────────────────

def test_first_rotation_creates_active_coil():
    store = MemoryStore()
    status = rotate_coil(
        store, {"name": "R#1", "startedAt": "2026-01-02", "initialOhms": 0.4}, now=NOW
    )
    assert status.id == 1
    coils = store.load().coils
    assert len(coils) == 1
    assert coils[0].is_active
    assert coils[0].ended_at is None


def test_rotation_archives_previous_coil():
    store = _store_with_coil()
    add_entry(store, _entry(), now=NOW)
    add_entry(store, _entry(date="2026-01-04", puffs=24, mlAdded=0), now=NOW)

    status = rotate_coil(
        store, {"name": "R#4", "startedAt": "2026-02-01", "initialOhms": 0.45}, now=NOW
    )

    d = status.to_dict()
    assert d["id"] == 2
    assert d["compteur_pod"] == 0
    assert d["usure_pourcent"] == 0
    assert d["ml_restants"] == 0
    assert d["taffes_restants"] == 6024
    assert d["ohms_initial"] == d["ohms_actuel"] == 0.45

    coils = store.load().coils
    assert [c.is_active for c in coils] == [False, True]
    old = coils[0]
    assert old.ended_at == date(2026, 2, 1)
    assert old.total_puffs == 583
    assert old.total_duration_days == 31


def test_archived_totals_are_frozen():
    store = _store_with_coil()
    add_entry(store, _entry(), now=NOW)
    rotate_coil(store, {"name": "R#4", "startedAt": "2026-02-01", "initialOhms": 0.45}, now=NOW)
    # a late entry for the archived coil does not touch its frozen totals
    add_entry(store, _entry(puffs=100), now=NOW)
    rotate_coil(store, {"name": "R#5", "startedAt": "2026-02-10", "initialOhms": 0.45}, now=NOW)

    first = store.load().get_coil(1)
    assert first.total_puffs == 559
    assert first.ended_at == date(2026, 2, 1)


def test_rotation_always_leaves_one_active():
    store = MemoryStore()
    for i in range(4):
        rotate_coil(store, {"name": f"R#{i}", "startedAt": "2026-01-01", "initialOhms": 0.4}, now=NOW)
        active = [c for c in store.load().coils if c.is_active]
        assert len(active) == 1
        assert active[0].name == f"R#{i}"


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"name": "", "startedAt": "2026-02-01", "initialOhms": 0.45}, "name"),
        ({"name": "   ", "startedAt": "2026-02-01", "initialOhms": 0.45}, "name"),
        ({"name": "R#4", "startedAt": "yesterday", "initialOhms": 0.45}, "startedAt"),
        ({"name": "R#4", "startedAt": "2026-02-01", "initialOhms": 0}, "initialOhms"),
        ({"name": "R#4", "startedAt": "2026-02-01"}, "initialOhms"),
        ({"name": "R#4", "startedAt": "2026-02-01", "initialOhms": True}, "initialOhms"),
    ],
)
def test_rotation_rejects_invalid_input(payload, field):
    store = _store_with_coil()
    with pytest.raises(ValidationFailed) as info:
        rotate_coil(store, payload, now=NOW)
    assert info.value.field == field
    coils = store.load().coils
    assert len(coils) == 1
    assert coils[0].is_active


def test_duration_days():
    assert duration_days(date(2026, 1, 2), NOW) == 31
    # same day still counts as one day
    assert duration_days(date(2026, 2, 1), NOW) == 1
    assert duration_days(date(2026, 3, 1), NOW) == 1
    assert duration_days(date(2026, 1, 31), datetime(2026, 2, 1)) == 1


# ── Seeding ────────────────────────────────────────────────────────

def test_seed_if_empty():
    store = MemoryStore()
    assert seed_if_empty(store, now=NOW) is True

    data = store.load()
    assert [c.name for c in data.coils] == ["R#1"]
    assert data.coils[0].started_at == date(2026, 2, 1)
    assert len(data.entries) == 1
    assert data.entries[0].puffs == 150


def test_seed_skips_non_empty_store():
    store = _store_with_coil()
    assert seed_if_empty(store, now=NOW) is False
    assert [c.name for c in store.load().coils] == ["R#3"]
