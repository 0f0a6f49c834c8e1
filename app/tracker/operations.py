"""
Tracker operations — append-entry, rotate-coil and first-run seeding.

Every mutation follows the same shape:

    load → validate → mutate a private copy → save once

so a rejected or failed call never leaves a partial change behind.
Derived metrics are never stored; readers recompute them.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Any

from app.core.errors import ValidationFailed
from app.core.metrics import CoilStatus, initial_status
from app.core.models import Coil, Entry, TrackerData
from app.storage.interface import TrackerStore
from app.tracker.inputs import CoilInput, EntryInput, parse_input

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def daily_puffs_from_counter(counter: int, current_total: int) -> int:
    """
    Convert a cumulative pod-counter reading into the puffs of one day.

    A reading below the running total means the counter was reset, in
    which case the reading itself is the day's count.
    """
    if counter >= current_total:
        return counter - current_total
    return counter


def duration_days(started_at: date, now: datetime) -> int:
    """Whole days from *started_at* (midnight UTC) to *now*, at least 1."""
    start = datetime.combine(started_at, time.min, tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = (now - start).total_seconds() / SECONDS_PER_DAY
    return max(1, math.ceil(elapsed))


# ── Append entry ───────────────────────────────────────────────────

def add_entry(
    store: TrackerStore,
    payload: EntryInput | dict[str, Any],
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Append one observation to the entry log.

    Returns the day-log projection of the new entry (not the recomputed
    status; callers re-read the state for that).
    """
    data_in = parse_input(EntryInput, payload)
    data = store.load()

    coil = data.get_coil(data_in.coil_id)
    if coil is None:
        raise ValidationFailed(f"Unknown coil {data_in.coil_id}", "coilId")

    if data_in.puffs is not None:
        puffs = data_in.puffs
    elif data_in.pod_counter is not None:
        current_total = sum(e.puffs for e in data.entries_for(coil.id))
        puffs = daily_puffs_from_counter(data_in.pod_counter, current_total)
    else:
        raise ValidationFailed("Field required", "puffs")

    entry = Entry(
        id=data.next_entry_id(),
        coil_id=coil.id,
        date=data_in.entry_date,
        puffs=puffs,
        ml_added=data_in.ml_added,
        measured_ohms=data_in.measured_ohms,
        created_at=now or _utcnow(),
    )
    data.entries.append(entry)
    store.save(data)

    logger.info(
        "Entry %d on coil %d: %s  puffs=%d  ml=%.1f  ohms=%.2f",
        entry.id, coil.id, entry.date, entry.puffs,
        entry.ml_added, entry.measured_ohms,
    )
    return entry.to_day_log()


# ── Rotate coil ────────────────────────────────────────────────────

def archive_coil(data: TrackerData, coil: Coil, now: datetime) -> None:
    """
    Freeze *coil*'s lifetime totals and mark it archived.

    The totals are written once and never recomputed afterwards.
    """
    coil.total_puffs = sum(e.puffs for e in data.entries_for(coil.id))
    coil.total_duration_days = duration_days(coil.started_at, now)
    coil.ended_at = now.date()
    coil.is_active = False


def rotate_coil(
    store: TrackerStore,
    payload: CoilInput | dict[str, Any],
    now: datetime | None = None,
) -> CoilStatus:
    """
    Archive the active coil (if any) and start tracking a new one.

    Always leaves exactly one active coil.  Returns the initial status
    of the new coil.
    """
    data_in = parse_input(CoilInput, payload)
    now = now or _utcnow()
    data = store.load()

    previous = data.active_coil()
    if previous is not None:
        archive_coil(data, previous, now)

    coil = Coil(
        id=data.next_coil_id(),
        name=data_in.name,
        started_at=data_in.started_at,
        initial_ohms=data_in.initial_ohms,
        is_active=True,
    )
    data.coils.append(coil)
    store.save(data)

    if previous is not None:
        logger.info(
            "Archived coil %d (%s): %d puffs over %d days",
            previous.id, previous.name,
            previous.total_puffs, previous.total_duration_days,
        )
    logger.info(
        "Started coil %d (%s) at %.2f ohms", coil.id, coil.name, coil.initial_ohms,
    )
    return initial_status(coil)


# ── Seeding ────────────────────────────────────────────────────────

def seed_if_empty(store: TrackerStore, now: datetime | None = None) -> bool:
    """
    Give a brand-new store a first coil with one logged day.

    Returns True if the store was seeded.
    """
    if store.load().coils:
        return False

    now = now or _utcnow()
    today = now.date().isoformat()
    logger.info("Seeding empty store")

    status = rotate_coil(
        store, {"name": "R#1", "startedAt": today, "initialOhms": 0.40}, now=now
    )
    add_entry(
        store,
        {
            "coilId": status.id,
            "date": today,
            "puffs": 150,
            "mlAdded": 5,
            "measuredOhms": 0.40,
        },
        now=now,
    )
    return True
