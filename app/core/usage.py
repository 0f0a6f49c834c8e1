"""
Usage summary — statistics over the active coil's day-logs, plus
advisory flags derived from its status.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

import numpy as np

from app.core.metrics import CoilStatus, round1
from app.core.models import Entry

logger = logging.getLogger(__name__)

HEAVY_DAY_PUFFS = 200
WEAR_WARNING = 60.0
WEAR_CRITICAL = 80.0
OHMS_DRIFT_TOLERANCE = 0.05


def summarize_usage(
    entries: Sequence[Entry], puffs_remaining: int
) -> dict[str, Any]:
    """
    Per-day statistics for one coil.

    Returns
    -------
    dict with:
      days_logged              : int
      mean_daily_puffs         : float
      peak_daily_puffs         : int
      heavy_days               : int   (days above HEAVY_DAY_PUFFS)
      projected_days_remaining : int | None
    """
    if not entries:
        return {
            "days_logged": 0,
            "mean_daily_puffs": 0.0,
            "peak_daily_puffs": 0,
            "heavy_days": 0,
            "projected_days_remaining": None,
        }

    # Several entries can share a date; aggregate per calendar day first.
    per_day: dict[str, int] = {}
    for entry in entries:
        key = entry.date.isoformat()
        per_day[key] = per_day.get(key, 0) + entry.puffs

    daily = np.asarray(list(per_day.values()), dtype=np.float64)
    mean = float(np.mean(daily))

    projected = None
    if mean > 0:
        projected = math.floor(puffs_remaining / mean)

    return {
        "days_logged": int(daily.size),
        "mean_daily_puffs": round1(mean),
        "peak_daily_puffs": int(np.max(daily)),
        "heavy_days": int(np.count_nonzero(daily > HEAVY_DAY_PUFFS)),
        "projected_days_remaining": projected,
    }


def assess_alerts(status: CoilStatus) -> dict[str, Any]:
    """Wear level and resistance drift flags for the dashboard."""
    if status.wear_percent > WEAR_CRITICAL:
        wear_level = "critical"
    elif status.wear_percent > WEAR_WARNING:
        wear_level = "warning"
    else:
        wear_level = "ok"

    ohms_drift = status.ohms_current > status.ohms_initial + OHMS_DRIFT_TOLERANCE

    if wear_level != "ok" or ohms_drift:
        logger.info(
            "Coil %s alerts: wear=%s (%.1f%%)  drift=%s",
            status.id, wear_level, status.wear_percent, ohms_drift,
        )

    return {"wear_level": wear_level, "ohms_drift": ohms_drift}
