"""
Tests for domain models.
"""

import datetime as dt

import pendulum
import pytest

from clinicslots.domain.exceptions import ScheduleError
from clinicslots.domain.models import (
    DaySchedule,
    DoctorSchedule,
    SlotStatus,
    TimeSlot,
    TimeWindow,
    VacationDay,
    day_of_week_index,
    format_clock,
    make_slot_key,
    parse_clock,
    parse_slot_key,
    to_calendar_date,
)


class TestClockHelpers:
    """Tests for HH:MM parsing and formatting."""

    def test_parse_clock(self):
        assert parse_clock("00:00") == 0
        assert parse_clock("09:30") == 570
        assert parse_clock("23:59") == 1439
        assert parse_clock("24:00") == 1440

    def test_format_clock_zero_pads(self):
        assert format_clock(0) == "00:00"
        assert format_clock(545) == "09:05"
        assert format_clock(1440) == "24:00"

    @pytest.mark.parametrize(
        "value",
        ["9", "09:60", "25:00", "24:30", "ab:cd", "", "09:00:00", "9:00", "+9:00", " 09:00 ", "09:00\n"],
    )
    def test_parse_clock_rejects_malformed_values(self, value):
        with pytest.raises(ScheduleError):
            parse_clock(value)


class TestCalendarDates:
    """Tests for date normalisation and weekday numbering."""

    def test_to_calendar_date_drops_timestamp(self):
        day = to_calendar_date("2024-11-27T00:00:00.000Z")

        assert day == pendulum.date(2024, 11, 27)
        assert isinstance(day, pendulum.Date)

    def test_to_calendar_date_accepts_datetime(self):
        moment = pendulum.datetime(2024, 11, 25, 15, 45, tz="Europe/Berlin")

        assert to_calendar_date(moment) == pendulum.date(2024, 11, 25)

    def test_to_calendar_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_calendar_date("next tuesday")

    def test_day_of_week_index_starts_on_sunday(self):
        assert day_of_week_index(pendulum.date(2024, 11, 24)) == 0  # Sunday
        assert day_of_week_index(pendulum.date(2024, 11, 25)) == 1  # Monday
        assert day_of_week_index(pendulum.date(2024, 11, 30)) == 6  # Saturday


class TestTimeWindow:
    """Tests for TimeWindow model."""

    def test_invalid_window_raises_error(self):
        with pytest.raises(ValueError, match="must be before end time"):
            TimeWindow(start=600, end=540)

    def test_overlaps(self):
        morning = TimeWindow(start=540, end=600)
        late_morning = TimeWindow(start=570, end=630)
        adjacent = TimeWindow(start=600, end=660)

        assert morning.overlaps(late_morning)
        assert late_morning.overlaps(morning)
        assert not morning.overlaps(adjacent)
        assert morning.duration_minutes() == 60
        assert str(morning) == "09:00 - 10:00"


class TestDoctorSchedule:
    """Tests for the DoctorSchedule aggregate."""

    def test_day_schedule_rejects_invalid_weekday(self):
        with pytest.raises(ScheduleError):
            DaySchedule.from_strings(7, "09:00", "12:00")

    def test_first_available_entry_wins(self):
        schedule = DoctorSchedule.from_entries(
            doctor_id="doc-1",
            entries=[
                DaySchedule.from_strings(1, "08:00", "10:00", is_available=False),
                DaySchedule.from_strings(1, "09:00", "12:00"),
                DaySchedule.from_strings(1, "13:00", "17:00"),
            ],
        )

        monday = schedule.schedule_for(pendulum.date(2024, 11, 25))

        assert monday is not None
        assert monday.start_time == "09:00"
        assert monday.end_time == "12:00"
        assert len(schedule.weekly_availability) == 1

    def test_schedule_for_day_without_entry(self):
        schedule = DoctorSchedule.from_entries(
            doctor_id="doc-1",
            entries=[DaySchedule.from_strings(1, "09:00", "12:00")],
        )

        assert schedule.schedule_for(pendulum.date(2024, 11, 26)) is None

    def test_only_non_work_vacation_days_block(self):
        schedule = DoctorSchedule.from_entries(
            doctor_id="doc-1",
            entries=[],
            vacation_days=[
                VacationDay(date=pendulum.date(2024, 11, 27), is_work_day=False),
                VacationDay(date=pendulum.date(2024, 11, 28), is_work_day=True),
            ],
        )

        assert schedule.is_vacation_day(pendulum.date(2024, 11, 27))
        assert schedule.is_vacation_day(pendulum.datetime(2024, 11, 27, 14, 0))
        assert not schedule.is_vacation_day(pendulum.date(2024, 11, 28))
        assert not schedule.is_vacation_day(pendulum.date(2024, 11, 29))

    @pytest.mark.parametrize(
        "stored_date",
        [dt.datetime(2024, 11, 27), dt.date(2024, 11, 27), "2024-11-27", "2024-11-27T00:00:00.000Z"],
    )
    def test_vacation_date_is_normalised(self, stored_date):
        vacation = VacationDay(date=stored_date)

        assert vacation.date == pendulum.date(2024, 11, 27)
        assert isinstance(vacation.date, pendulum.Date)

    @pytest.mark.parametrize("duration, expected", [(None, 30), (0, 30), (-15, 30), (45, 45)])
    def test_effective_duration(self, duration, expected):
        schedule = DoctorSchedule(doctor_id="doc-1", appointment_duration=duration)

        assert schedule.effective_duration() == expected


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_invalid_slot_raises_error(self):
        with pytest.raises(ScheduleError):
            TimeSlot(
                doctor_id="doc-1",
                date=pendulum.date(2024, 11, 25),
                start_time="10:00",
                end_time="09:30",
            )

    def test_to_dict(self):
        slot = TimeSlot(
            doctor_id="doc-1",
            date=pendulum.date(2024, 11, 25),
            start_time="09:00",
            end_time="09:30",
            generated=True,
        )

        assert slot.to_dict() == {
            "doctorId": "doc-1",
            "date": "2024-11-25",
            "startTime": "09:00",
            "endTime": "09:30",
            "status": "available",
            "generated": True,
        }

    def test_stdlib_date_is_normalised(self):
        slot = TimeSlot(
            doctor_id="doc-1",
            date=dt.date(2024, 11, 25),
            start_time="09:00",
            end_time="09:30",
        )

        assert slot.date == pendulum.date(2024, 11, 25)
        assert slot.to_dict()["date"] == "2024-11-25"
        assert slot.format_display() == "Monday, 2024-11-25 | 09:00 - 09:30"

    def test_to_dict_includes_id_for_stored_slots(self):
        slot = TimeSlot(
            doctor_id="doc-1",
            date=pendulum.date(2024, 11, 25),
            start_time="09:00",
            end_time="09:30",
            status=SlotStatus.BOOKED,
            slot_id="slot-1",
        )

        assert slot.to_dict()["id"] == "slot-1"
        assert slot.to_dict()["status"] == "booked"

    def test_slot_key_round_trip_keeps_colons_in_doctor_id(self):
        key = make_slot_key("clinic:doc-1", pendulum.date(2024, 11, 25), "09:30")

        assert key == "clinic:doc-1:2024-11-25:09:30"
        assert parse_slot_key(key) == ("clinic:doc-1", pendulum.date(2024, 11, 25), "09:30")

    def test_parse_slot_key_rejects_malformed_keys(self):
        with pytest.raises(ValueError):
            parse_slot_key("doc-1:2024-11-25")

        with pytest.raises(ValueError):
            parse_slot_key("doc-1:2024-11-25:9:00")
