"""
In-memory salon gateway, optionally seeded from a JSON file.

Useful for local runs of the CLI and for tests: it honours the full gateway
contract (status filtering, duration fallback, booking conflicts) without a
database.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import replace
from datetime import date
from itertools import count
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..domain.exceptions import ConflictError, NotFoundError
from ..domain.models import (
    ACTIVE_STATUSES,
    DEFAULT_SERVICE_DURATION,
    Appointment,
    AppointmentContext,
    Actor,
    ActorRole,
    AppointmentDraft,
    AppointmentPage,
    AppointmentPatch,
    AppointmentStatus,
    ExistingAppointment,
    Salon,
    Service,
    is_same_day,
)
from ..schemas import to_local_datetime

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_data.json"


class InMemorySalonGateway:
    """
    Gateway backed by plain dictionaries.

    Reads and writes of appointments go through a lock; two bookings for the same salon and
    start instant collide with a ``ConflictError``, like a uniqueness
    constraint would in a real store.
    """

    def __init__(
        self,
        salons: Iterable[Salon] = (),
        services: Iterable[Service] = (),
        appointments: Iterable[Appointment] = (),
    ):
        self.salons: Dict[int, Salon] = {salon.id: salon for salon in salons}
        self.services: Dict[int, Service] = {service.id: service for service in services}
        self.appointments: Dict[int, Appointment] = {appt.id: appt for appt in appointments}
        self._ids = count(max(self.appointments, default=0) + 1)
        self._lock = threading.Lock()

    @classmethod
    def from_json(cls, data_file: Optional[Path] = None) -> "InMemorySalonGateway":
        """
        Load salons, services and appointments from a JSON file.

        Args:
            data_file: Path to the JSON data; defaults to the bundled sample

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not valid JSON or has a bad shape
        """
        path = data_file or SAMPLE_DATA_FILE
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Data file must contain a mapping at the root level.")

        try:
            salons = [_salon_from_dict(item) for item in data.get("salons", [])]
            services = [_service_from_dict(item) for item in data.get("services", [])]
            appointments = [_appointment_from_dict(item) for item in data.get("appointments", [])]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed record in {path}: {exc}") from exc

        logger.debug(
            "Loaded %d salon(s), %d service(s), %d appointment(s) from %s",
            len(salons), len(services), len(appointments), path,
        )
        return cls(salons=salons, services=services, appointments=appointments)

    def save_json(self, data_file: Path) -> None:
        """Write the current state back to a JSON file."""
        with self._lock:
            data = {
                "salons": [_salon_to_dict(salon) for salon in self.salons.values()],
                "services": [_service_to_dict(service) for service in self.services.values()],
                "appointments": [_appointment_to_dict(appt) for appt in self.appointments.values()],
            }

        with open(data_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get_salon(self, salon_id: int) -> Salon:
        salon = self.salons.get(salon_id)
        if salon is None:
            raise NotFoundError(f"Salon with ID {salon_id} not found")
        return salon

    def get_service(self, salon_id: int, service_id: int) -> Service:
        service = self.services.get(service_id)
        if service is None or service.salon_id != salon_id:
            raise NotFoundError(f"Service with ID {service_id} not found in this salon")
        return service

    def list_active_appointments(
        self,
        salon_id: int,
        day: date,
        service_id: Optional[int] = None,
    ) -> List[ExistingAppointment]:
        matching = [
            appt for appt in self._snapshot()
            if appt.salon_id == salon_id
            and appt.status in ACTIVE_STATUSES
            and is_same_day(appt.appointment_date, day)
            and (service_id is None or appt.service_id == service_id)
        ]
        matching.sort(key=lambda appt: appt.appointment_date)

        return [
            ExistingAppointment(
                start_time=appt.appointment_date,
                duration_minutes=self._duration_of(appt.service_id),
            )
            for appt in matching
        ]

    def get_appointment(self, appointment_id: int) -> AppointmentContext:
        with self._lock:
            appointment = self.appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment with ID {appointment_id} not found")
        salon = self.get_salon(appointment.salon_id)
        return AppointmentContext(appointment=appointment, salon_owner_id=salon.owner_id)

    def update_appointment(self, appointment_id: int, patch: AppointmentPatch) -> Appointment:
        with self._lock:
            current = self.appointments.get(appointment_id)
            if current is None:
                raise NotFoundError(f"Appointment with ID {appointment_id} not found")
            updated = replace(current, **patch.as_changes())
            self.appointments[appointment_id] = updated
        return updated

    def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        with self._lock:
            for existing in self.appointments.values():
                if (
                    existing.salon_id == draft.salon_id
                    and existing.status in ACTIVE_STATUSES
                    and existing.appointment_date == draft.appointment_date
                ):
                    raise ConflictError(
                        f"An appointment at {draft.appointment_date.to_datetime_string()} "
                        f"already exists for salon ID {draft.salon_id}"
                    )

            appointment = Appointment(
                id=next(self._ids),
                guest_id=draft.guest_id,
                salon_id=draft.salon_id,
                service_id=draft.service_id,
                appointment_date=draft.appointment_date,
                status=AppointmentStatus.PENDING,
                notes=draft.notes,
            )
            self.appointments[appointment.id] = appointment
        return appointment

    def list_appointments(
        self,
        actor: Actor,
        status: Optional[AppointmentStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> AppointmentPage:
        if actor.role == ActorRole.OWNER:
            owned = {salon.id for salon in self.salons.values() if salon.owner_id == actor.user_id}
            visible = [appt for appt in self._snapshot() if appt.salon_id in owned]
        else:
            visible = [appt for appt in self._snapshot() if appt.guest_id == actor.user_id]

        if status is not None:
            visible = [appt for appt in visible if appt.status == status]

        visible.sort(key=lambda appt: appt.appointment_date, reverse=True)
        offset = (page - 1) * limit

        return AppointmentPage(
            appointments=visible[offset:offset + limit],
            page=page,
            limit=limit,
            total=len(visible),
        )

    def _snapshot(self) -> List[Appointment]:
        with self._lock:
            return list(self.appointments.values())

    def _duration_of(self, service_id: int) -> int:
        service = self.services.get(service_id)
        if service is None:
            return DEFAULT_SERVICE_DURATION
        return service.effective_duration


def _salon_from_dict(item: Dict[str, Any]) -> Salon:
    return Salon(
        id=int(item["id"]),
        name=item["name"],
        owner_id=int(item["owner_id"]),
        opening_time=item.get("opening_time"),
        closing_time=item.get("closing_time"),
    )


def _service_from_dict(item: Dict[str, Any]) -> Service:
    duration = item.get("duration")
    return Service(
        id=int(item["id"]),
        salon_id=int(item["salon_id"]),
        name=item.get("name", ""),
        duration_minutes=int(duration) if duration is not None else None,
    )


def _appointment_from_dict(item: Dict[str, Any]) -> Appointment:
    return Appointment(
        id=int(item["id"]),
        guest_id=int(item["guest_id"]),
        salon_id=int(item["salon_id"]),
        service_id=int(item["service_id"]),
        appointment_date=to_local_datetime(item["appointment_date"]),
        status=AppointmentStatus(item.get("status", AppointmentStatus.PENDING.value)),
        notes=item.get("notes"),
    )


def _salon_to_dict(salon: Salon) -> Dict[str, Any]:
    return {
        "id": salon.id,
        "name": salon.name,
        "owner_id": salon.owner_id,
        "opening_time": salon.opening_time,
        "closing_time": salon.closing_time,
    }


def _service_to_dict(service: Service) -> Dict[str, Any]:
    return {
        "id": service.id,
        "salon_id": service.salon_id,
        "name": service.name,
        "duration": service.duration_minutes,
    }


def _appointment_to_dict(appt: Appointment) -> Dict[str, Any]:
    return {
        "id": appt.id,
        "guest_id": appt.guest_id,
        "salon_id": appt.salon_id,
        "service_id": appt.service_id,
        "appointment_date": appt.appointment_date.to_iso8601_string(),
        "status": appt.status.value,
        "notes": appt.notes,
    }
