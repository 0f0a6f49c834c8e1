"""
Settings — environment-driven configuration for the tracker service.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from app.storage.interface import TrackerStore
from app.storage.json_store import JSONFileStore
from app.storage.memory_store import MemoryStore


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


@dataclass
class Settings:
    """Service configuration."""

    storage: str = "json"  # "json" or "memory"
    data_path: str = "data.json"
    seed: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from COIL_TRACKER_* environment variables."""
        origins = os.getenv("COIL_TRACKER_CORS_ORIGINS", "*")
        return cls(
            storage=os.getenv("COIL_TRACKER_STORAGE", "json").strip().lower(),
            data_path=os.getenv("COIL_TRACKER_DATA_PATH", "data.json"),
            seed=_env_bool("COIL_TRACKER_SEED", "true"),
            log_level=os.getenv("COIL_TRACKER_LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )

    def build_store(self) -> TrackerStore:
        """Instantiate the configured storage backend."""
        if self.storage == "memory":
            return MemoryStore()
        if self.storage == "json":
            return JSONFileStore(self.data_path)
        raise ValueError(
            f"Unknown storage backend {self.storage!r}. Expected 'json' or 'memory'."
        )
