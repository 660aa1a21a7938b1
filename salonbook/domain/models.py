"""
Domain models for business hours, appointments and bookable slots.

All instants are naive local ``pendulum.DateTime`` values: a salon's
``HH:MM`` hours are combined with a calendar date without any timezone
conversion, and callers pass "now" in the same implicit zone.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Dict, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import MalformedTimeError, ValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DEFAULT_SERVICE_DURATION = 60
DEFAULT_OPENING_TIME = "09:00"
DEFAULT_CLOSING_TIME = "17:00"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED)


# Statuses that occupy time on a salon's calendar.
ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


class ActorRole(str, Enum):
    OWNER = "owner"
    GUEST = "guest"


def parse_time_of_day(value: str) -> time:
    """
    Parse a zero-padded 24-hour ``HH:MM`` string.

    A trailing ``:SS`` (as stored by SQL ``TIME`` columns) is tolerated and
    dropped before matching.

    Raises:
        MalformedTimeError: If the string is not a valid time of day
    """
    if not isinstance(value, str):
        raise MalformedTimeError(value)

    candidate = value.strip()
    if len(candidate) == 8 and candidate[5] == ":" and candidate[6:].isdigit():
        candidate = candidate[:5]

    match = TIME_PATTERN.match(candidate)
    if not match:
        raise MalformedTimeError(value)

    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def at_time_of_day(day: date, hour: int, minute: int) -> DateTime:
    """Combine a calendar date with an hour/minute as a naive local instant."""
    return pendulum.naive(day.year, day.month, day.day, hour, minute)


def is_same_day(instant: date, day: date) -> bool:
    """Compare calendar days only, ignoring time of day and zone."""
    return (instant.year, instant.month, instant.day) == (day.year, day.month, day.day)


def format_time(dt: DateTime) -> str:
    """
    Format a time of day for display, 12-hour with AM/PM.

    Example: ``9:00 AM``, ``2:30 PM``, ``12:15 AM``
    """
    hour = dt.hour % 12 or 12
    suffix = "PM" if dt.hour >= 12 else "AM"
    return f"{hour}:{dt.minute:02d} {suffix}"


@dataclass(frozen=True)
class BusinessHours:
    """
    A salon's daily opening/closing window.

    Invariant: opening must be strictly before closing.
    """
    opening: time
    closing: time

    def __post_init__(self):
        if self.opening >= self.closing:
            raise ValidationError(
                f"Opening time {self.opening:%H:%M} must be before "
                f"closing time {self.closing:%H:%M}"
            )

    @classmethod
    def parse(cls, opening: str, closing: str) -> "BusinessHours":
        """Build business hours from stored ``HH:MM`` strings."""
        return cls(opening=parse_time_of_day(opening), closing=parse_time_of_day(closing))

    @property
    def opening_hour(self) -> int:
        return self.opening.hour

    @property
    def opening_minute(self) -> int:
        return self.opening.minute

    @property
    def closing_hour(self) -> int:
        return self.closing.hour

    @property
    def closing_minute(self) -> int:
        return self.closing.minute

    def window_for(self, day: date) -> Tuple[DateTime, DateTime]:
        """Return the (opening, closing) instants for a calendar day."""
        start = at_time_of_day(day, self.opening_hour, self.opening_minute)
        end = at_time_of_day(day, self.closing_hour, self.closing_minute)
        return start, end

    def format_display(self, day: date) -> Dict[str, str]:
        start, end = self.window_for(day)
        return {"opening_time": format_time(start), "closing_time": format_time(end)}


@dataclass(frozen=True)
class Salon:
    id: int
    name: str
    owner_id: int
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None

    def business_hours(self) -> BusinessHours:
        """Parse the stored hours, falling back to the 09:00-17:00 default."""
        return BusinessHours.parse(
            self.opening_time or DEFAULT_OPENING_TIME,
            self.closing_time or DEFAULT_CLOSING_TIME,
        )


@dataclass(frozen=True)
class Service:
    id: int
    salon_id: int
    name: str = ""
    duration_minutes: Optional[int] = None

    @property
    def effective_duration(self) -> int:
        """Stored duration, or 60 minutes when unset."""
        return self.duration_minutes or DEFAULT_SERVICE_DURATION


@dataclass(frozen=True)
class ExistingAppointment:
    """
    A booking that occupies calendar time, as supplied by the gateway.

    Only pending/confirmed appointments are ever represented here.
    """
    start_time: DateTime
    duration_minutes: int = DEFAULT_SERVICE_DURATION

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ValidationError(
                f"Appointment duration must be positive, got {self.duration_minutes}"
            )

    @property
    def end_time(self) -> DateTime:
        return self.start_time.add(minutes=self.duration_minutes)


@dataclass(frozen=True)
class CandidateSlot:
    """A possible appointment start; generated and discarded per query."""
    start_time: DateTime
    duration_minutes: int

    @property
    def end_time(self) -> DateTime:
        return self.start_time.add(minutes=self.duration_minutes)

    def format_display(self) -> str:
        return format_time(self.start_time)


@dataclass(frozen=True)
class Actor:
    """The authenticated principal attempting an action."""
    user_id: int
    role: ActorRole


@dataclass
class Appointment:
    id: int
    guest_id: int
    salon_id: int
    service_id: int
    appointment_date: DateTime
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None


@dataclass(frozen=True)
class AppointmentContext:
    """An appointment together with the owner of the salon it belongs to."""
    appointment: Appointment
    salon_owner_id: int


@dataclass(frozen=True)
class AppointmentDraft:
    """A new booking; the store assigns the id and the pending status."""
    guest_id: int
    salon_id: int
    service_id: int
    appointment_date: DateTime
    notes: Optional[str] = None


@dataclass(frozen=True)
class AppointmentPatch:
    """
    Field-level changes for a single appointment row.

    ``None`` means "leave unchanged"; the store applies only present fields.
    """
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    def as_changes(self) -> Dict[str, object]:
        """Return the mapping of field name to new value."""
        changes: Dict[str, object] = {}
        if self.status is not None:
            changes["status"] = self.status
        if self.notes is not None:
            changes["notes"] = self.notes
        return changes


@dataclass(frozen=True)
class AppointmentPage:
    """One page of an actor's appointments, newest first."""
    appointments: List[Appointment] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)
