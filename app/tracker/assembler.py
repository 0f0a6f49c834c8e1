"""
State Assembler — builds the full read-side view.

    current   : status of the active coil (or None)
    history   : the 5 most recently archived coils
    dailyLogs : day-logs of the active coil, latest first
"""

from __future__ import annotations

from datetime import date
from typing import Any

from app.core.metrics import compute_status, latest_first
from app.core.models import Coil, TrackerData
from app.core.usage import assess_alerts, summarize_usage
from app.storage.interface import TrackerStore

HISTORY_LIMIT = 5


def archived_history(data: TrackerData, limit: int = HISTORY_LIMIT) -> list[Coil]:
    """Archived coils, most recently ended first (then newest id first)."""
    archived = [c for c in data.coils if not c.is_active]
    archived.sort(key=lambda c: (c.ended_at or date.min, c.id), reverse=True)
    return archived[:limit]


def historical_view(coil: Coil) -> dict[str, Any]:
    return {
        "id": coil.id,
        "name": coil.name,
        "date_debut": coil.started_at.isoformat(),
        "duree_jours": coil.total_duration_days or 0,
        "taffes_total": coil.total_puffs or 0,
    }


def assemble_state(data: TrackerData) -> dict[str, Any]:
    """Pure assembly over an already loaded data set."""
    current = None
    daily_logs: list[dict[str, Any]] = []

    active = data.active_coil()
    if active is not None:
        entries = data.entries_for(active.id)
        current = compute_status(active, entries).to_dict()
        daily_logs = [e.to_day_log() for e in latest_first(entries)]

    return {
        "current": current,
        "history": [historical_view(c) for c in archived_history(data)],
        "dailyLogs": daily_logs,
    }


def get_state(store: TrackerStore) -> dict[str, Any]:
    """Read the store and assemble the view.  No side effects."""
    return assemble_state(store.load())


def get_usage(store: TrackerStore) -> dict[str, Any]:
    """Usage statistics and alert flags for the active coil."""
    data = store.load()
    active = data.active_coil()
    if active is None:
        return {"current_id": None, "summary": None, "alerts": None}

    entries = data.entries_for(active.id)
    status = compute_status(active, entries)
    return {
        "current_id": active.id,
        "summary": summarize_usage(entries, status.puffs_remaining),
        "alerts": assess_alerts(status),
    }
