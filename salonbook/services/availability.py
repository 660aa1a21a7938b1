"""
Application service computing a salon's bookable slots for a day.

The service fetches business hours, the optional service and the day's
occupying appointments through the gateway, then delegates slot generation
and conflict filtering to the domain. It holds no state between calls, so
concurrent queries need no coordination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import SalonBookError
from ..domain.models import (
    DEFAULT_SERVICE_DURATION,
    BusinessHours,
    ExistingAppointment,
)
from ..domain.overlap import is_available
from ..domain.result import Err, Ok, Result
from ..domain.slot_generator import SlotGenerator
from ..schemas import parse_day
from .gateway import SalonGatewayProtocol

logger = logging.getLogger(__name__)


def resolve_now(now: Optional[datetime] = None, timezone: Optional[str] = None) -> DateTime:
    """
    Return "now" as a naive local instant.

    Business hours carry no zone, so the current time is reduced to its
    wall-clock reading before any comparison.
    """
    if now is None:
        current = pendulum.now(timezone) if timezone else pendulum.now()
    else:
        current = pendulum.instance(now)
    return current.naive()


@dataclass(frozen=True)
class AvailableSlot:
    start_time: DateTime
    formatted_time: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "time": self.start_time.to_iso8601_string(),
            "formatted_time": self.formatted_time,
        }


@dataclass(frozen=True)
class Availability:
    """Bookable slots of one salon for one day."""
    salon_id: int
    salon_name: str
    date: date
    business_hours: BusinessHours
    service_id: Optional[int] = None
    service_name: Optional[str] = None
    slots: List[AvailableSlot] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "saloon_id": self.salon_id,
            "saloon_name": self.salon_name,
            "service_id": self.service_id,
            "service_name": self.service_name,
            "date": self.date.isoformat(),
            "business_hours": self.business_hours.format_display(self.date),
            "available_slots": [slot.to_dict() for slot in self.slots],
        }


class AvailabilityService:
    """
    Orchestrates gateway reads and slot computation.

    The gateway is any object satisfying SalonGatewayProtocol.
    """

    def __init__(
        self,
        gateway: SalonGatewayProtocol,
        slot_generator: Optional[SlotGenerator] = None,
        default_service_duration_minutes: int = DEFAULT_SERVICE_DURATION,
        timezone: Optional[str] = None,
    ) -> None:
        self._gateway = gateway
        self._slot_generator = slot_generator or SlotGenerator()
        self._default_duration = default_service_duration_minutes
        self._timezone = timezone

    def compute_availability(
        self,
        salon_id: int,
        day: Any = None,
        service_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Result[Availability]:
        """
        Compute the available slots of a salon for a day.

        Args:
            salon_id: Salon to query
            day: ``date`` or ``YYYY-MM-DD`` string; defaults to today
            service_id: Optional service whose duration sizes each slot
            now: Current instant; defaults to the clock

        Returns:
            ``Ok(Availability)``, or ``Err`` wrapping ``NotFoundError`` /
            ``ValidationError``
        """
        try:
            current = resolve_now(now, self._timezone)
            target_day = parse_day(day) if day is not None else current.date()

            logger.info(
                "Fetching availability for salon ID: %s, date: %s", salon_id, target_day
            )

            salon = self._gateway.get_salon(salon_id)
            business_hours = salon.business_hours()

            service = None
            duration = self._default_duration
            if service_id:
                service = self._gateway.get_service(salon_id, service_id)
                duration = service.duration_minutes or self._default_duration

            existing = self._gateway.list_active_appointments(
                salon_id, target_day, service_id=service_id
            )

            slots = self.find_available_slots(
                day=target_day,
                business_hours=business_hours,
                existing_appointments=existing,
                service_duration_minutes=duration,
                now=current,
            )
        except SalonBookError as exc:
            logger.warning("Availability request for salon ID %s rejected: %s", salon_id, exc)
            return Err(exc)

        return Ok(
            Availability(
                salon_id=salon.id,
                salon_name=salon.name,
                date=target_day,
                business_hours=business_hours,
                service_id=service.id if service else None,
                service_name=service.name if service else None,
                slots=slots,
            )
        )

    def find_available_slots(
        self,
        *,
        day: date,
        business_hours: BusinessHours,
        existing_appointments: Iterable[ExistingAppointment],
        service_duration_minutes: int,
        now: Optional[DateTime] = None,
    ) -> List[AvailableSlot]:
        """Generate candidates for the day and keep those free of conflicts."""
        existing = list(existing_appointments)

        return [
            AvailableSlot(start_time=candidate.start_time, formatted_time=candidate.format_display())
            for candidate in self._slot_generator.generate_slots(
                day=day,
                business_hours=business_hours,
                service_duration_minutes=service_duration_minutes,
                now=now,
            )
            if is_available(candidate, existing)
        ]
