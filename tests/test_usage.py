"""Tests for the usage summary and alert flags."""

from datetime import date

from app.core.metrics import CoilStatus
from app.core.models import Entry
from app.core.usage import assess_alerts, summarize_usage


def _entry(entry_id: int, day: date, puffs: int) -> Entry:
    return Entry(id=entry_id, coil_id=1, date=day, puffs=puffs, measured_ohms=0.4)


def _status(wear: float, ohms_current: float = 0.4) -> CoilStatus:
    return CoilStatus(
        id=1,
        name="R#1",
        started_at="2026-01-02",
        total_puffs=0,
        puffs_remaining=6024,
        ml_remaining=0.0,
        wear_percent=wear,
        ohms_initial=0.4,
        ohms_current=ohms_current,
    )


def test_summary_empty():
    summary = summarize_usage([], 6024)
    assert summary["days_logged"] == 0
    assert summary["projected_days_remaining"] is None


def test_summary_aggregates_same_day():
    entries = [
        _entry(1, date(2026, 1, 3), 150),
        _entry(2, date(2026, 1, 3), 100),
        _entry(3, date(2026, 1, 4), 50),
    ]
    summary = summarize_usage(entries, 5724)

    assert summary["days_logged"] == 2
    assert summary["mean_daily_puffs"] == 150.0
    assert summary["peak_daily_puffs"] == 250
    assert summary["heavy_days"] == 1
    assert summary["projected_days_remaining"] == 38


def test_summary_zero_usage_has_no_projection():
    summary = summarize_usage([_entry(1, date(2026, 1, 3), 0)], 6024)
    assert summary["mean_daily_puffs"] == 0.0
    assert summary["projected_days_remaining"] is None


def test_mean_rounds_halves_up():
    entries = [_entry(i + 1, date(2026, 1, 3 + i), p) for i, p in enumerate([0, 0, 0, 1])]
    assert summarize_usage(entries, 6023)["mean_daily_puffs"] == 0.3


def test_wear_levels():
    assert assess_alerts(_status(10.0))["wear_level"] == "ok"
    assert assess_alerts(_status(60.0))["wear_level"] == "ok"
    assert assess_alerts(_status(60.1))["wear_level"] == "warning"
    assert assess_alerts(_status(80.0))["wear_level"] == "warning"
    assert assess_alerts(_status(80.1))["wear_level"] == "critical"


def test_ohms_drift():
    assert assess_alerts(_status(10.0, ohms_current=0.42))["ohms_drift"] is False
    assert assess_alerts(_status(10.0, ohms_current=0.5))["ohms_drift"] is True
