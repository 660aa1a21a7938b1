"""
Appointment status state machine.

Appointments start ``pending`` at booking time. Owners move them forward
(confirm, complete) or cancel them; guests may only cancel. ``cancelled``
and ``completed`` are terminal.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from .exceptions import AuthorizationError, InvalidTransitionError
from .models import (
    Actor,
    ActorRole,
    Appointment,
    AppointmentPatch,
    AppointmentStatus,
)

_S = AppointmentStatus

TRANSITIONS: Dict[ActorRole, Dict[AppointmentStatus, FrozenSet[AppointmentStatus]]] = {
    ActorRole.OWNER: {
        _S.PENDING: frozenset({_S.CONFIRMED, _S.CANCELLED}),
        _S.CONFIRMED: frozenset({_S.COMPLETED, _S.CANCELLED}),
        _S.CANCELLED: frozenset(),
        _S.COMPLETED: frozenset(),
    },
    ActorRole.GUEST: {
        _S.PENDING: frozenset({_S.CANCELLED}),
        _S.CONFIRMED: frozenset({_S.CANCELLED}),
        _S.CANCELLED: frozenset(),
        _S.COMPLETED: frozenset(),
    },
}


def allowed_targets(current: AppointmentStatus, role: ActorRole) -> FrozenSet[AppointmentStatus]:
    """Return the statuses an actor with ``role`` may move ``current`` to."""
    return TRANSITIONS.get(role, {}).get(current, frozenset())


def authorize(actor: Actor, appointment: Appointment, salon_owner_id: int) -> None:
    """
    Ensure the actor may act on the appointment at all.

    Only the owner of the appointment's salon, or the guest who booked it,
    is eligible.

    Raises:
        AuthorizationError: If the actor is neither
    """
    is_salon_owner = actor.role == ActorRole.OWNER and actor.user_id == salon_owner_id
    is_booking_guest = actor.role == ActorRole.GUEST and actor.user_id == appointment.guest_id

    if not (is_salon_owner or is_booking_guest):
        raise AuthorizationError("You can only update your own appointments")


def check_transition(
    current: AppointmentStatus,
    target: AppointmentStatus,
    role: ActorRole
) -> None:
    """
    Consult the transition table.

    Raises:
        InvalidTransitionError: If the table has no entry for the move
    """
    if target not in allowed_targets(current, role):
        raise InvalidTransitionError(current=current, target=target, role=role)


def transition(
    appointment: Appointment,
    target: AppointmentStatus,
    actor: Actor,
    salon_owner_id: int,
    notes: Optional[str] = None
) -> AppointmentPatch:
    """
    Decide a status change and describe the resulting single-row write.

    The appointment itself is left untouched; the returned patch is handed
    to the storage collaborator.
    """
    authorize(actor, appointment, salon_owner_id)
    check_transition(appointment.status, target, actor.role)
    return AppointmentPatch(status=target, notes=notes)
