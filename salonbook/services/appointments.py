"""
Application service for booking, listing and updating appointments.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..domain.exceptions import AuthorizationError, SalonBookError, ValidationError
from ..domain.models import (
    Actor,
    ActorRole,
    Appointment,
    AppointmentDraft,
    AppointmentPage,
    AppointmentStatus,
)
from ..domain.result import Err, Ok, Result
from ..domain.state_machine import transition
from ..schemas import (
    DEFAULT_PAGE_SIZE,
    AppointmentListQuery,
    BookingRequest,
    StatusUpdateRequest,
    validate_payload,
)
from .availability import resolve_now
from .gateway import SalonGatewayProtocol

logger = logging.getLogger(__name__)


class AppointmentService:
    """Validates requests, consults the state machine and writes through the gateway."""

    def __init__(self, gateway: SalonGatewayProtocol, timezone: Optional[str] = None) -> None:
        self._gateway = gateway
        self._timezone = timezone

    def request_transition(
        self,
        appointment_id: int,
        target_status: Union[str, AppointmentStatus],
        actor: Actor,
        notes: Optional[str] = None,
    ) -> Result[AppointmentStatus]:
        """
        Move an appointment to ``target_status`` on behalf of ``actor``.

        Eligibility is checked before the transition table: an actor who is
        neither the salon's owner nor the booking guest gets an
        ``AuthorizationError`` regardless of the requested status.

        Returns:
            ``Ok(new_status)``, or ``Err`` wrapping ``ValidationError``,
            ``NotFoundError``, ``AuthorizationError`` or
            ``InvalidTransitionError``
        """
        logger.info("Updating appointment ID: %s status to: %s", appointment_id, target_status)

        try:
            request = validate_payload(
                StatusUpdateRequest, {"status": target_status, "notes": notes}
            )
            context = self._gateway.get_appointment(appointment_id)
            patch = transition(
                context.appointment,
                request.status,
                actor,
                context.salon_owner_id,
                notes=request.notes,
            )
            updated = self._gateway.update_appointment(appointment_id, patch)
        except SalonBookError as exc:
            logger.warning("Status update for appointment ID %s rejected: %s", appointment_id, exc)
            return Err(exc)

        logger.info("Appointment ID: %s status updated to %s", appointment_id, updated.status.value)
        return Ok(updated.status)

    def book_appointment(
        self,
        request: Union[BookingRequest, Mapping[str, Any]],
        actor: Actor,
        now: Optional[datetime] = None,
    ) -> Result[Appointment]:
        """
        Book a new appointment for a guest; it starts out ``pending``.

        A ``ConflictError`` raised by the store (another booking won the
        race) comes back as an ``Err`` the caller may retry.
        """
        try:
            if actor.role != ActorRole.GUEST:
                raise AuthorizationError("Only guests can book appointments")

            booking = (
                request
                if isinstance(request, BookingRequest)
                else validate_payload(BookingRequest, dict(request))
            )

            if booking.appointment_date <= resolve_now(now, self._timezone):
                raise ValidationError("appointment_date must be in the future")

            logger.info(
                "Creating new appointment for guest ID: %s, salon ID: %s",
                actor.user_id,
                booking.salon_id,
            )

            self._gateway.get_salon(booking.salon_id)
            self._gateway.get_service(booking.salon_id, booking.service_id)

            appointment = self._gateway.create_appointment(
                AppointmentDraft(
                    guest_id=actor.user_id,
                    salon_id=booking.salon_id,
                    service_id=booking.service_id,
                    appointment_date=booking.appointment_date,
                    notes=booking.notes or None,
                )
            )
        except SalonBookError as exc:
            logger.warning("Booking by user ID %s rejected: %s", actor.user_id, exc)
            return Err(exc)

        logger.info("Appointment booked successfully, ID: %s", appointment.id)
        return Ok(appointment)

    def list_appointments(
        self,
        actor: Actor,
        status: Union[str, AppointmentStatus, None] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Result[AppointmentPage]:
        """
        List the appointments an actor may see, newest first.

        Owners get the appointments of their salons, guests their own
        bookings. ``status`` narrows the list to one status.

        Returns:
            ``Ok(AppointmentPage)``, or ``Err`` wrapping ``ValidationError``
        """
        logger.info("Fetching appointments for user ID: %s, role: %s", actor.user_id, actor.role.value)

        try:
            query = validate_payload(
                AppointmentListQuery, {"status": status, "page": page, "limit": limit}
            )
            found = self._gateway.list_appointments(
                actor, status=query.status, page=query.page, limit=query.limit
            )
        except SalonBookError as exc:
            logger.warning("Listing appointments for user ID %s rejected: %s", actor.user_id, exc)
            return Err(exc)

        return Ok(found)
