"""
Pydantic schemas for the FastAPI endpoints.

Request bodies are the tracker's boundary input models; responses use
the dashboard's field names.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.tracker.inputs import CoilInput, EntryInput

__all__ = [
    "AppState",
    "CoilInput",
    "CurrentStatus",
    "DailyLog",
    "EntryInput",
    "ErrorBody",
    "HistoricalCoil",
    "UsageAlerts",
    "UsageResult",
    "UsageSummary",
]


# ── State ──────────────────────────────────────────────────────────

class CurrentStatus(BaseModel):
    """Derived status of the active coil."""

    id: int
    name: str
    date_debut: str
    compteur_pod: int = Field(..., description="Total puffs on this coil")
    taffes_restants: int
    ml_restants: float
    usure_pourcent: float
    ohms_initial: float
    ohms_actuel: float


class HistoricalCoil(BaseModel):
    """An archived coil with its frozen totals."""

    id: int
    name: str
    date_debut: str
    duree_jours: int
    taffes_total: int


class DailyLog(BaseModel):
    date: str
    taffes: int
    ml_ajoutes: float
    ohms: float


class AppState(BaseModel):
    """Full read-side view."""

    current: CurrentStatus | None
    history: list[HistoricalCoil] = Field(default_factory=list)
    dailyLogs: list[DailyLog] = Field(default_factory=list)


# ── Usage ──────────────────────────────────────────────────────────

class UsageSummary(BaseModel):
    days_logged: int
    mean_daily_puffs: float
    peak_daily_puffs: int
    heavy_days: int
    projected_days_remaining: int | None


class UsageAlerts(BaseModel):
    wear_level: str = Field(..., description="ok, warning or critical")
    ohms_drift: bool


class UsageResult(BaseModel):
    current_id: int | None
    summary: UsageSummary | None
    alerts: UsageAlerts | None


# ── Errors ─────────────────────────────────────────────────────────

class ErrorBody(BaseModel):
    message: str
    field: str | None = None
