"""
Contract for the storage collaborator that feeds the engine.

The engine never talks to a database itself: salons, services and
appointments are read (and single rows written) through an object matching
``SalonGatewayProtocol``, injected into the services.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..domain.models import (
    Actor,
    Appointment,
    AppointmentContext,
    AppointmentDraft,
    AppointmentPage,
    AppointmentPatch,
    AppointmentStatus,
    ExistingAppointment,
    Salon,
    Service,
)


class SalonGatewayProtocol(Protocol):
    """Protocol describing the storage behaviour needed by the services."""

    def get_salon(self, salon_id: int) -> Salon:
        """Return the salon or raise ``NotFoundError``."""

    def get_service(self, salon_id: int, service_id: int) -> Service:
        """Return a service of the salon or raise ``NotFoundError``."""

    def list_active_appointments(
        self,
        salon_id: int,
        day: date,
        service_id: Optional[int] = None,
    ) -> List[ExistingAppointment]:
        """
        Return the pending/confirmed appointments of a salon on ``day``.

        Cancelled and completed appointments must never be included. Each
        entry's duration falls back to 60 minutes when its service has none.
        """

    def get_appointment(self, appointment_id: int) -> AppointmentContext:
        """Return the appointment and its salon's owner, or raise ``NotFoundError``."""

    def update_appointment(self, appointment_id: int, patch: AppointmentPatch) -> Appointment:
        """Apply ``patch`` to one appointment row and return the updated row."""

    def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        """Insert a pending appointment; may raise ``ConflictError``."""

    def list_appointments(
        self,
        actor: Actor,
        status: Optional[AppointmentStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> AppointmentPage:
        """
        Return one page of the appointments visible to ``actor``.

        Owners see every appointment of the salons they own, guests see
        their own bookings. Entries are ordered by start, newest first.
        """
