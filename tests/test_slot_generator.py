"""
Tests for slot generator.
"""

import pendulum
import pytest

from salonbook.domain.exceptions import ValidationError
from salonbook.domain.models import BusinessHours
from salonbook.domain.slot_generator import SlotGenerator

DAY = pendulum.date(2024, 11, 25)


def _at(hour, minute=0):
    return pendulum.naive(DAY.year, DAY.month, DAY.day, hour, minute)


def _starts(slots):
    return [slot.start_time for slot in slots]


class TestSlotGenerator:
    """Tests for SlotGenerator."""

    def test_full_day_first_and_last_slot(self):
        """09:00-17:00 at 30 minutes yields 09:00 through 16:30, not 17:00."""
        generator = SlotGenerator(slot_interval_minutes=30)

        starts = _starts(generator.generate_slots(DAY, BusinessHours.parse("09:00", "17:00")))

        assert starts[0] == _at(9, 0)
        assert starts[-1] == _at(16, 30)
        assert len(starts) == 16

    def test_output_is_ascending(self):
        """Slots come out in start-time order."""
        generator = SlotGenerator()

        starts = _starts(generator.generate_slots(DAY, BusinessHours.parse("08:00", "20:00")))

        assert starts == sorted(starts)

    def test_unaligned_opening_rounds_up(self):
        """The first slot starts at the next interval boundary after opening."""
        generator = SlotGenerator(slot_interval_minutes=30)

        starts = _starts(generator.generate_slots(DAY, BusinessHours.parse("09:10", "11:00")))

        assert starts == [_at(9, 30), _at(10, 0), _at(10, 30)]

    def test_single_unaligned_interval_yields_nothing(self):
        """Open 09:15, close 09:45, interval 30: no slot fits."""
        generator = SlotGenerator(slot_interval_minutes=30)

        slots = list(generator.generate_slots(DAY, BusinessHours.parse("09:15", "09:45")))

        assert slots == []

    def test_trailing_partial_slot_not_generated(self):
        """A slot that would run past closing is dropped."""
        generator = SlotGenerator(slot_interval_minutes=30)

        starts = _starts(generator.generate_slots(DAY, BusinessHours.parse("09:00", "17:15")))

        assert starts[-1] == _at(16, 30)

    def test_finer_interval(self):
        """A 15-minute interval emits four slots per hour."""
        generator = SlotGenerator(slot_interval_minutes=15)

        starts = _starts(generator.generate_slots(DAY, BusinessHours.parse("09:00", "10:00")))

        assert starts == [_at(9, 0), _at(9, 15), _at(9, 30), _at(9, 45)]

    def test_past_slots_excluded_today(self):
        """With now at 11:15 today, slots up to 11:00 are skipped."""
        generator = SlotGenerator(slot_interval_minutes=30)

        starts = _starts(
            generator.generate_slots(
                DAY,
                BusinessHours.parse("09:00", "17:00"),
                now=_at(11, 15),
            )
        )

        assert starts[0] == _at(11, 30)
        assert _at(11, 0) not in starts
        assert len(starts) == 11

    def test_slot_starting_now_is_kept(self):
        """Only slots strictly in the past are dropped."""
        generator = SlotGenerator(slot_interval_minutes=30)

        starts = _starts(
            generator.generate_slots(DAY, BusinessHours.parse("09:00", "17:00"), now=_at(11, 0))
        )

        assert starts[0] == _at(11, 0)

    def test_aware_now_uses_wall_clock(self):
        """An aware "now" is compared by its local wall-clock reading."""
        generator = SlotGenerator(slot_interval_minutes=30)
        now = pendulum.datetime(2024, 11, 25, 11, 15, tz="Europe/Berlin")

        starts = _starts(
            generator.generate_slots(DAY, BusinessHours.parse("09:00", "17:00"), now=now)
        )

        assert starts[0] == _at(11, 30)
        assert len(starts) == 11

    def test_other_day_not_filtered_by_now(self):
        """A "now" on another day does not remove slots."""
        generator = SlotGenerator(slot_interval_minutes=30)
        yesterday_evening = pendulum.naive(2024, 11, 24, 23, 0)
        next_day_morning = pendulum.naive(2024, 11, 26, 8, 0)

        for now in (yesterday_evening, next_day_morning):
            slots = list(generator.generate_slots(DAY, BusinessHours.parse("09:00", "17:00"), now=now))
            assert len(slots) == 16

    def test_candidates_carry_service_duration(self):
        """Each candidate is sized by the service duration, default 60."""
        generator = SlotGenerator()
        hours = BusinessHours.parse("09:00", "10:00")

        default_slots = list(generator.generate_slots(DAY, hours))
        sized_slots = list(generator.generate_slots(DAY, hours, service_duration_minutes=45))

        assert {slot.duration_minutes for slot in default_slots} == {60}
        assert {slot.duration_minutes for slot in sized_slots} == {45}

    def test_generation_is_restartable(self):
        """Repeated calls produce identical sequences."""
        generator = SlotGenerator()
        hours = BusinessHours.parse("09:00", "17:00")

        assert list(generator.generate_slots(DAY, hours)) == list(generator.generate_slots(DAY, hours))

    @pytest.mark.parametrize("interval", [0, -30])
    def test_interval_must_be_positive(self, interval):
        """Non-positive intervals are rejected."""
        with pytest.raises(ValidationError):
            SlotGenerator(slot_interval_minutes=interval)
