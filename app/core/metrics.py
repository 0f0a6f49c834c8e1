"""
Metrics Calculator — derives coil status from the entry log.

Pure arithmetic over (coil, entries).  Nothing here is cached or stored:
the status is recomputed from scratch on every read.

Calibrated model
----------------
    consumed_ml   = total_puffs / PUFF_RATIO
    wear %        = (consumed_ml / V_MAX) × FOULING × 100
    max_puffs     = (V_MAX / FOULING) × PUFF_RATIO      (= 6024)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

from app.core.models import Coil, Entry

# ── Constants ──────────────────────────────────────────────────────

V_MAX = 45.0          # ml a coil processes before end-of-life
FOULING = 0.75        # wear coefficient
PUFF_RATIO = 100.4    # puffs per ml of liquid

MAX_ML_LIFE = V_MAX / FOULING
MAX_PUFFS_LIFE = MAX_ML_LIFE * PUFF_RATIO


def round1(value: float) -> float:
    """One-decimal rounding, halves rounded up."""
    return math.floor(value * 10 + 0.5) / 10


def latest_first(entries: Iterable[Entry]) -> list[Entry]:
    """
    Order entries most-recent date first.

    On equal dates the entry inserted last comes first.
    """
    indexed = list(enumerate(entries))
    indexed.sort(key=lambda pair: (pair[1].date, pair[0]), reverse=True)
    return [entry for _, entry in indexed]


@dataclass
class CoilStatus:
    """Derived status of the active coil."""

    id: int
    name: str
    started_at: str
    total_puffs: int
    puffs_remaining: int
    ml_remaining: float
    wear_percent: float
    ohms_initial: float
    ohms_current: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date_debut": self.started_at,
            "compteur_pod": self.total_puffs,
            "taffes_restants": self.puffs_remaining,
            "ml_restants": self.ml_remaining,
            "usure_pourcent": self.wear_percent,
            "ohms_initial": self.ohms_initial,
            "ohms_actuel": self.ohms_current,
        }


def compute_status(coil: Coil, entries: Iterable[Entry]) -> CoilStatus:
    """
    Compute the status of *coil* from its *entries*.

    Entries may arrive in any order; the most recent one (by date, then
    insertion) supplies the current resistance.
    """
    ordered = latest_first(entries)

    total_puffs = sum(e.puffs for e in ordered)
    total_ml_added = sum(e.ml_added for e in ordered)

    consumed_ml = total_puffs / PUFF_RATIO
    ml_remaining = max(0.0, round1(total_ml_added - consumed_ml))

    wear_raw = (consumed_ml / V_MAX) * FOULING * 100
    wear_percent = min(100.0, round1(wear_raw))

    puffs_remaining = max(0, math.floor(MAX_PUFFS_LIFE - total_puffs))

    ohms_current = ordered[0].measured_ohms if ordered else coil.initial_ohms

    return CoilStatus(
        id=coil.id,
        name=coil.name,
        started_at=coil.started_at.isoformat(),
        total_puffs=total_puffs,
        puffs_remaining=puffs_remaining,
        ml_remaining=ml_remaining,
        wear_percent=wear_percent,
        ohms_initial=coil.initial_ohms,
        ohms_current=ohms_current,
    )


def initial_status(coil: Coil) -> CoilStatus:
    """Status of a freshly installed coil with no entries."""
    return compute_status(coil, [])
