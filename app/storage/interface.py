"""
Store Interface — abstract base for all persistence backends.

Design: Strategy pattern.  Tracker operations receive a TrackerStore
instance, so the in-memory store, the JSON file store, or any other
backend can be swapped in without touching the domain code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.core.models import TrackerData


class TrackerStore(ABC):
    """
    Loads and saves the whole data set (coils + entries) as one unit.
    """

    @abstractmethod
    def load(self) -> TrackerData:
        """
        Return the persisted data set.

        The returned object is private to the caller: mutating it has no
        effect until it is passed back to ``save``.
        """
        ...

    @abstractmethod
    def save(self, data: TrackerData) -> None:
        """
        Replace the persisted data set with *data*.

        Raises StorageError if the write fails; the previous data set
        is then left in place.
        """
        ...
