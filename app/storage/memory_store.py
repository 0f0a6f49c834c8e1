"""
MemoryStore — in-process store, used by tests and ``COIL_TRACKER_STORAGE=memory``.
"""

from __future__ import annotations

from app.core.models import TrackerData
from app.storage.interface import TrackerStore


class MemoryStore(TrackerStore):
    """Holds the data set in memory; load and save hand out deep copies."""

    def __init__(self, initial: TrackerData | None = None) -> None:
        self._data = initial.copy() if initial else TrackerData()

    def load(self) -> TrackerData:
        return self._data.copy()

    def save(self, data: TrackerData) -> None:
        self._data = data.copy()

    def __len__(self) -> int:
        return len(self._data)
