"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    MalformedTimeError,
    NotFoundError,
    SalonBookError,
    ValidationError,
)
from .models import (
    Actor,
    ActorRole,
    Appointment,
    AppointmentPage,
    AppointmentStatus,
    BusinessHours,
    CandidateSlot,
    ExistingAppointment,
    Service,
)
from .overlap import is_available
from .result import Err, Ok, Result
from .slot_generator import SlotGenerator

__all__ = [
    "Actor",
    "ActorRole",
    "Appointment",
    "AppointmentPage",
    "AppointmentStatus",
    "AuthorizationError",
    "BusinessHours",
    "CandidateSlot",
    "ConflictError",
    "Err",
    "ExistingAppointment",
    "InvalidTransitionError",
    "MalformedTimeError",
    "NotFoundError",
    "Ok",
    "Result",
    "SalonBookError",
    "Service",
    "SlotGenerator",
    "ValidationError",
    "is_available",
]
