"""
Domain records — Coil and Entry, plus the TrackerData container.

Records are plain dataclasses.  ``to_dict`` / ``from_dict`` convert to and
from the persisted camelCase layout (ISO dates, ISO timestamps).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any


@dataclass
class Coil:
    """
    One physical resistance unit over its usable lifetime.

    ``ended_at``, ``total_puffs`` and ``total_duration_days`` stay ``None``
    while the coil is active and are written once, at archival.
    """

    id: int
    name: str
    started_at: date
    initial_ohms: float
    is_active: bool = True
    ended_at: date | None = None
    total_puffs: int | None = None
    total_duration_days: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "startedAt": self.started_at.isoformat(),
            "initialOhms": self.initial_ohms,
            "isActive": self.is_active,
            "endedAt": self.ended_at.isoformat() if self.ended_at else None,
            "totalPuffs": self.total_puffs,
            "totalDurationDays": self.total_duration_days,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Coil:
        ended = raw.get("endedAt")
        return cls(
            id=int(raw["id"]),
            name=str(raw["name"]),
            started_at=date.fromisoformat(raw["startedAt"]),
            initial_ohms=float(raw["initialOhms"]),
            is_active=bool(raw.get("isActive", False)),
            ended_at=date.fromisoformat(ended) if ended else None,
            total_puffs=raw.get("totalPuffs"),
            total_duration_days=raw.get("totalDurationDays"),
        )


@dataclass
class Entry:
    """One logged observation for a coil on a given date."""

    id: int
    coil_id: int
    date: date
    puffs: int
    measured_ohms: float
    ml_added: float = 0.0
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "coilId": self.coil_id,
            "date": self.date.isoformat(),
            "puffs": self.puffs,
            "mlAdded": self.ml_added,
            "measuredOhms": self.measured_ohms,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Entry:
        created = raw.get("createdAt")
        return cls(
            id=int(raw["id"]),
            coil_id=int(raw["coilId"]),
            date=date.fromisoformat(raw["date"]),
            puffs=int(raw["puffs"]),
            measured_ohms=float(raw["measuredOhms"]),
            ml_added=float(raw.get("mlAdded") or 0.0),
            created_at=(
                datetime.fromisoformat(created.replace("Z", "+00:00"))
                if created
                else datetime.now(timezone.utc)
            ),
        )

    def to_day_log(self) -> dict[str, Any]:
        """Projection used by the read side and by append-entry."""
        return {
            "date": self.date.isoformat(),
            "taffes": self.puffs,
            "ml_ajoutes": self.ml_added,
            "ohms": self.measured_ohms,
        }


@dataclass
class TrackerData:
    """The two persisted collections: ``coils`` and ``entries``."""

    coils: list[Coil] = field(default_factory=list)
    entries: list[Entry] = field(default_factory=list)

    # ── Lookups ────────────────────────────────────────────────────

    def active_coil(self) -> Coil | None:
        """Return the active coil, or None when nothing is being tracked."""
        for coil in self.coils:
            if coil.is_active:
                return coil
        return None

    def get_coil(self, coil_id: int) -> Coil | None:
        for coil in self.coils:
            if coil.id == coil_id:
                return coil
        return None

    def entries_for(self, coil_id: int) -> list[Entry]:
        """Entries of *coil_id* in insertion order."""
        return [e for e in self.entries if e.coil_id == coil_id]

    def next_coil_id(self) -> int:
        return max((c.id for c in self.coils), default=0) + 1

    def next_entry_id(self) -> int:
        return max((e.id for e in self.entries), default=0) + 1

    # ── Serialization ──────────────────────────────────────────────

    def copy(self) -> TrackerData:
        """Deep copy, so a failed mutation never touches the original."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "coils": [c.to_dict() for c in self.coils],
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TrackerData:
        return cls(
            coils=[Coil.from_dict(c) for c in raw.get("coils", [])],
            entries=[Entry.from_dict(e) for e in raw.get("entries", [])],
        )

    def __len__(self) -> int:
        return len(self.coils) + len(self.entries)
