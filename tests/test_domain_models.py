"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import time

from salonbook.domain.exceptions import MalformedTimeError, ValidationError
from salonbook.domain.models import (
    AppointmentPage,
    AppointmentPatch,
    AppointmentStatus,
    BusinessHours,
    ExistingAppointment,
    Salon,
    Service,
    format_time,
    is_same_day,
    parse_time_of_day,
)


class TestParseTimeOfDay:
    """Tests for HH:MM parsing."""

    def test_parse_valid_times(self):
        """Zero-padded 24-hour strings parse into hour/minute."""
        assert parse_time_of_day("09:00") == time(9, 0)
        assert parse_time_of_day("23:59") == time(23, 59)
        assert parse_time_of_day("00:05") == time(0, 5)

    def test_parse_tolerates_seconds(self):
        """SQL TIME values with seconds are accepted."""
        assert parse_time_of_day("12:15:00") == time(12, 15)

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "1200", "ab:cd", "", None])
    def test_parse_malformed_raises(self, value):
        """Anything outside ^([01]\\d|2[0-3]):([0-5]\\d)$ is rejected."""
        with pytest.raises(MalformedTimeError):
            parse_time_of_day(value)

    def test_malformed_time_is_validation_error(self):
        """Malformed times are reported as validation failures."""
        with pytest.raises(ValidationError) as exc_info:
            parse_time_of_day("7pm")

        assert exc_info.value.status_code == 400
        assert exc_info.value.value == "7pm"


class TestBusinessHours:
    """Tests for the business-hours model."""

    def test_parse_exposes_hours_and_minutes(self):
        """Parsed hours expose hour/minute pairs."""
        hours = BusinessHours.parse("09:30", "17:45")

        assert (hours.opening_hour, hours.opening_minute) == (9, 30)
        assert (hours.closing_hour, hours.closing_minute) == (17, 45)

    def test_opening_must_precede_closing(self):
        """Opening equal to or after closing is rejected."""
        with pytest.raises(ValidationError, match="must be before"):
            BusinessHours.parse("17:00", "09:00")

        with pytest.raises(ValidationError):
            BusinessHours.parse("10:00", "10:00")

    def test_window_for_combines_date_naively(self):
        """The window is the calendar date plus hours, without timezone."""
        hours = BusinessHours.parse("09:00", "17:30")

        start, end = hours.window_for(pendulum.date(2024, 11, 25))

        assert start == pendulum.naive(2024, 11, 25, 9, 0)
        assert end == pendulum.naive(2024, 11, 25, 17, 30)
        assert start.tzinfo is None

    def test_format_display(self):
        """Business hours render in 12-hour format."""
        hours = BusinessHours.parse("09:00", "17:30")

        assert hours.format_display(pendulum.date(2024, 11, 25)) == {
            "opening_time": "9:00 AM",
            "closing_time": "5:30 PM",
        }

    def test_salon_defaults_to_nine_to_five(self):
        """A salon without stored hours opens 09:00-17:00."""
        salon = Salon(id=1, name="Studio", owner_id=10)

        assert salon.business_hours() == BusinessHours(opening=time(9, 0), closing=time(17, 0))


class TestFormatTime:
    """Tests for 12-hour display formatting."""

    @pytest.mark.parametrize(
        "hour, minute, expected",
        [
            (9, 0, "9:00 AM"),
            (14, 30, "2:30 PM"),
            (0, 5, "12:05 AM"),
            (12, 0, "12:00 PM"),
            (23, 45, "11:45 PM"),
        ],
    )
    def test_format_time(self, hour, minute, expected):
        """Minutes are zero-padded and hour 0 displays as 12."""
        assert format_time(pendulum.naive(2024, 11, 25, hour, minute)) == expected


class TestServiceAndAppointments:
    """Tests for services, existing appointments and patches."""

    def test_service_duration_defaults_to_sixty(self):
        """A service without stored duration lasts 60 minutes."""
        assert Service(id=1, salon_id=1).effective_duration == 60
        assert Service(id=2, salon_id=1, duration_minutes=45).effective_duration == 45

    def test_existing_appointment_end_time(self):
        """End time is start plus duration."""
        appt = ExistingAppointment(start_time=pendulum.naive(2024, 11, 25, 10, 0), duration_minutes=30)

        assert appt.end_time == pendulum.naive(2024, 11, 25, 10, 30)

    def test_existing_appointment_requires_positive_duration(self):
        """Zero or negative durations are rejected."""
        with pytest.raises(ValidationError):
            ExistingAppointment(start_time=pendulum.naive(2024, 11, 25, 10, 0), duration_minutes=0)

    def test_patch_only_contains_present_fields(self):
        """Unset patch fields are not part of the change set."""
        assert AppointmentPatch(status=AppointmentStatus.CONFIRMED).as_changes() == {
            "status": AppointmentStatus.CONFIRMED
        }
        assert AppointmentPatch(status=AppointmentStatus.CANCELLED, notes="Sick").as_changes() == {
            "status": AppointmentStatus.CANCELLED,
            "notes": "Sick",
        }
        assert AppointmentPatch().as_changes() == {}

    def test_terminal_statuses(self):
        """Cancelled and completed are terminal."""
        assert AppointmentStatus.CANCELLED.is_terminal
        assert AppointmentStatus.COMPLETED.is_terminal
        assert not AppointmentStatus.PENDING.is_terminal
        assert not AppointmentStatus.CONFIRMED.is_terminal

    @pytest.mark.parametrize("total, expected", [(0, 0), (1, 1), (10, 1), (11, 2)])
    def test_page_count(self, total, expected):
        """Total pages round up to cover every appointment."""
        assert AppointmentPage(total=total, limit=10).total_pages == expected


class TestIsSameDay:
    """Tests for calendar-day comparison."""

    def test_ignores_time_of_day(self):
        """Instants on the same calendar day match regardless of time."""
        day = pendulum.date(2024, 11, 25)

        assert is_same_day(pendulum.naive(2024, 11, 25, 23, 59), day)
        assert not is_same_day(pendulum.naive(2024, 11, 26, 0, 0), day)

    def test_ignores_zone(self):
        """Aware instants compare by their local calendar day."""
        late_in_tokyo = pendulum.datetime(2024, 11, 26, 1, 0, tz="Asia/Tokyo")

        assert is_same_day(late_in_tokyo, pendulum.date(2024, 11, 26))
