"""
Request payload validation using Pydantic.

Validation failures are reported as the domain ``ValidationError`` with the
first problem's message, so callers see one error taxonomy.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Type, TypeVar

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .domain.exceptions import ValidationError
from .domain.models import AppointmentStatus

NOTES_MAX_LENGTH = 500
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_local_datetime(value: Any) -> DateTime:
    """
    Coerce a string or datetime into a naive local ``pendulum.DateTime``.

    Any offset carried by the input is dropped, keeping the wall-clock time.
    """
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid date/time '{value}'") from exc
    elif isinstance(value, datetime):
        parsed = pendulum.instance(value)
    else:
        raise ValueError(f"Invalid date/time '{value}'")

    if not isinstance(parsed, DateTime):
        raise ValueError(f"Expected a date and time, got '{value}'")

    return parsed.naive()


def parse_day(value: Any) -> date:
    """
    Parse a ``YYYY-MM-DD`` calendar date.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return pendulum.from_format(str(value).strip(), "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD") from exc


class BookingRequest(BaseModel):
    """Payload for booking a new appointment."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    salon_id: int = Field(gt=0)
    service_id: int = Field(gt=0)
    appointment_date: DateTime
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("appointment_date", mode="before")
    @classmethod
    def parse_appointment_date(cls, value: Any) -> DateTime:
        return to_local_datetime(value)


class StatusUpdateRequest(BaseModel):
    """Payload for changing an appointment's status."""
    status: AppointmentStatus
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)


class AppointmentListQuery(BaseModel):
    """Filter and paging options for listing appointments."""
    status: Optional[AppointmentStatus] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


def validate_payload(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Validate ``data`` against ``model``.

    Raises:
        ValidationError: With the first reported problem
    """
    try:
        return model(**data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "Validation failed")
        raise ValidationError(f"{location}: {message}" if location else message) from exc
