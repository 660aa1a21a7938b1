"""
Conflict detection between candidate slots and existing appointments.

Intervals are half-open, ``[start, start + duration)``: a slot that ends
exactly when an appointment starts (or starts exactly when one ends) is free.
"""

from __future__ import annotations

from typing import Iterable

from pendulum import DateTime

from .models import CandidateSlot, ExistingAppointment


def overlaps(start1: DateTime, end1: DateTime, start2: DateTime, end2: DateTime) -> bool:
    """Check whether ``[start1, end1)`` and ``[start2, end2)`` intersect."""
    return start1 < end2 and start2 < end1


def is_available(
    candidate: CandidateSlot,
    existing_appointments: Iterable[ExistingAppointment]
) -> bool:
    """Return True if the candidate overlaps none of the existing appointments."""
    return not any(
        overlaps(candidate.start_time, candidate.end_time, appt.start_time, appt.end_time)
        for appt in existing_appointments
    )
