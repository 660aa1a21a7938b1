"""
Service layer helpers that orchestrate the gateway and domain logic.
"""

from .appointments import AppointmentService
from .availability import Availability, AvailabilityService, AvailableSlot
from .gateway import SalonGatewayProtocol

__all__ = [
    "AppointmentService",
    "Availability",
    "AvailabilityService",
    "AvailableSlot",
    "SalonGatewayProtocol",
]
