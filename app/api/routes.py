"""
FastAPI routes for the coil tracker.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.schemas import (
    AppState,
    CoilInput,
    CurrentStatus,
    DailyLog,
    EntryInput,
    ErrorBody,
    UsageResult,
)
from app.config import Settings
from app.storage.interface import TrackerStore
from app.tracker.assembler import get_state, get_usage
from app.tracker.operations import add_entry, rotate_coil

router = APIRouter()


# ── Shared instances ───────────────────────────────────────────────
# Tests swap the store through app.dependency_overrides[get_store].

settings = Settings.from_env()
default_store = settings.build_store()


def get_store() -> TrackerStore:
    return default_store


_ERRORS = {
    400: {"model": ErrorBody, "description": "Validation error"},
    500: {"model": ErrorBody, "description": "Storage error"},
}


# ── Read side ──────────────────────────────────────────────────────

@router.get("/state", response_model=AppState)
async def read_state(store: TrackerStore = Depends(get_store)) -> AppState:
    """
    Current coil status, the 5 most recently archived coils and the
    active coil's day-logs.  Recomputed on every call.
    """
    return AppState(**get_state(store))


@router.get("/usage", response_model=UsageResult)
async def read_usage(store: TrackerStore = Depends(get_store)) -> UsageResult:
    """Per-day usage statistics and wear / resistance alerts."""
    return UsageResult(**get_usage(store))


# ── Mutations ──────────────────────────────────────────────────────

@router.post("/entries", response_model=DailyLog, status_code=201, responses=_ERRORS)
async def create_entry(
    payload: EntryInput, store: TrackerStore = Depends(get_store)
) -> DailyLog:
    """Log one day of usage for a coil."""
    return DailyLog(**add_entry(store, payload))


@router.post(
    "/coils/reset", response_model=CurrentStatus, status_code=201, responses=_ERRORS
)
async def reset_coil(
    payload: CoilInput, store: TrackerStore = Depends(get_store)
) -> CurrentStatus:
    """Archive the active coil and start tracking a new one."""
    status = rotate_coil(store, payload)
    return CurrentStatus(**status.to_dict())
