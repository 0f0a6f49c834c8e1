"""
JSONFileStore — flat-file persistence for the coil tracker.

The file holds one JSON object with ``coils`` and ``entries`` lists.
A missing or unreadable file is treated as an empty data set; an
unreadable one is first renamed to ``<name>.corrupt-<timestamp>``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from app.core.errors import StorageError
from app.core.models import TrackerData
from app.storage.interface import TrackerStore

logger = logging.getLogger(__name__)


class JSONFileStore(TrackerStore):
    """
    Reads the file on every ``load`` so reads always reflect the latest
    persisted state.  Writes go to a temporary file which then replaces
    the target, so a failed write never leaves a truncated file behind.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._blocked = False

    def load(self) -> TrackerData:
        try:
            with self.path.open(encoding="utf-8") as f:
                raw = json.load(f)
            return TrackerData.from_dict(raw)
        except FileNotFoundError:
            logger.info("No data file at %s, starting empty", self.path)
            return TrackerData()
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning(
                "Could not read %s (%s), falling back to an empty data set",
                self.path, exc,
            )
            self._set_aside()
            return TrackerData()

    def _set_aside(self) -> None:
        """
        Move an unreadable data file out of the way so the next save
        cannot overwrite it.  If it cannot be moved, saving is refused.
        """
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, target)
        except OSError as exc:
            logger.error("Could not move %s aside: %s", self.path, exc)
            self._blocked = True
            return
        logger.warning("Kept unreadable data file as %s", target)

    def save(self, data: TrackerData) -> None:
        if self._blocked:
            raise StorageError(
                str(self.path), "unreadable data file could not be moved aside"
            )
        payload = json.dumps(data.to_dict(), indent=2)
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(str(self.path), str(exc)) from exc
        logger.debug(
            "Saved %d coils / %d entries to %s",
            len(data.coils), len(data.entries), self.path,
        )
