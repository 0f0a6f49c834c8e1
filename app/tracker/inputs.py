"""
Boundary input models for the tracker operations.

Loosely typed payloads (JSON bodies, form dicts) are parsed here, once,
into typed records.  Anything that fails becomes a ValidationFailed
carrying the offending field name.
"""

import datetime as dt
from typing import Any, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.core.errors import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise be read as 1/0.
    if isinstance(value, bool):
        raise ValueError("Expected a number, received a boolean")
    return value


class EntryInput(BaseModel):
    """Append-entry payload.  Either ``puffs`` or ``podCounter`` is needed."""

    model_config = ConfigDict(populate_by_name=True)

    coil_id: int = Field(..., alias="coilId")
    entry_date: dt.date = Field(..., alias="date")
    puffs: int | None = Field(default=None, ge=0)
    pod_counter: int | None = Field(
        default=None,
        ge=0,
        alias="podCounter",
        description="Cumulative counter shown by the device",
    )
    ml_added: float = Field(default=0.0, ge=0, alias="mlAdded", allow_inf_nan=False)
    measured_ohms: float = Field(..., gt=0, alias="measuredOhms", allow_inf_nan=False)

    @field_validator(
        "coil_id", "puffs", "pod_counter", "ml_added", "measured_ohms", mode="before"
    )
    @classmethod
    def numbers_only(cls, value: Any) -> Any:
        return _reject_bool(value)


class CoilInput(BaseModel):
    """Rotate-coil payload."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    started_at: dt.date = Field(..., alias="startedAt")
    initial_ohms: float = Field(..., gt=0, alias="initialOhms", allow_inf_nan=False)

    @field_validator("initial_ohms", mode="before")
    @classmethod
    def numbers_only(cls, value: Any) -> Any:
        return _reject_bool(value)


def first_error(errors: Sequence[dict[str, Any]]) -> ValidationFailed:
    """
    Build a ValidationFailed from the first pydantic error.

    Non-field prefixes in ``loc`` (e.g. FastAPI's ``"body"``) are skipped.
    """
    if not errors:
        return ValidationFailed("Invalid input")
    err = errors[0]
    loc = [part for part in err.get("loc", ()) if part not in ("body", "query")]
    field = loc[0] if loc and isinstance(loc[0], str) else None
    return ValidationFailed(err.get("msg", "Invalid input"), field)


def parse_input(model: Type[ModelT], payload: ModelT | dict[str, Any]) -> ModelT:
    """Validate *payload* against *model*, raising ValidationFailed."""
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, dict):
        raise ValidationFailed("Payload must be an object")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise first_error(exc.errors()) from exc
