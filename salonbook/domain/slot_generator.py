"""
Core business logic for enumerating bookable slots within business hours.

Pure domain logic: no gateway access and no I/O. Everything the walk needs
(business hours, the day, the current instant) is passed in explicitly.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Iterator, Optional

import pendulum

from .exceptions import ValidationError
from .models import (
    DEFAULT_SERVICE_DURATION,
    BusinessHours,
    CandidateSlot,
    at_time_of_day,
    is_same_day,
)

DEFAULT_SLOT_INTERVAL = 30


class SlotGenerator:
    """
    Generates candidate slots at a fixed granularity.

    Algorithm:
    1. Walk each hour from the opening hour to the closing hour (inclusive)
    2. The opening hour starts at the opening minute, the closing hour
       admits minutes up to ``closing_minute - 1``
    3. Round the minute cursor up to the next multiple of the interval
    4. Emit one candidate per interval whose whole interval ends by closing
    5. On "today", drop candidates that already lie in the past
    """

    def __init__(self, slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL):
        if slot_interval_minutes <= 0:
            raise ValidationError(
                f"Slot interval must be positive, got {slot_interval_minutes}"
            )
        self.slot_interval_minutes = slot_interval_minutes

    def generate_slots(
        self,
        day: date,
        business_hours: BusinessHours,
        service_duration_minutes: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> Iterator[CandidateSlot]:
        """
        Yield candidate slots for one day in ascending order.

        Args:
            day: Calendar day to generate slots for
            business_hours: The salon's opening/closing window
            service_duration_minutes: Duration attached to each candidate
                (60 when not given)
            now: Current instant; past slots on that day are skipped. An
                aware value is reduced to its wall-clock reading

        Yields:
            CandidateSlot objects
        """
        duration = service_duration_minutes or DEFAULT_SERVICE_DURATION
        interval = self.slot_interval_minutes
        _, closing = business_hours.window_for(day)
        if now is not None:
            now = pendulum.instance(now).naive()
        is_today = now is not None and is_same_day(now, day)

        for hour in range(business_hours.opening_hour, business_hours.closing_hour + 1):
            start_minute = 0
            end_minute = 59

            if hour == business_hours.opening_hour:
                start_minute = business_hours.opening_minute

            if hour == business_hours.closing_hour:
                # Slots may not start at or after closing
                end_minute = business_hours.closing_minute - 1
                if start_minute > end_minute:
                    continue

            start_minute = math.ceil(start_minute / interval) * interval

            for minute in range(start_minute, end_minute + 1, interval):
                start = at_time_of_day(day, hour, minute)

                # Trailing partial slots are not generated
                if start.add(minutes=interval) > closing:
                    continue

                if is_today and start < now:
                    continue

                yield CandidateSlot(start_time=start, duration_minutes=duration)
