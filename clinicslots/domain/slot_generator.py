"""
Core business logic for synthesizing appointment slots.

Pure domain logic without any external dependencies (no database, no I/O):
the same schedule and date range always produce the same ordered slots.
"""

import logging
from datetime import date
from typing import List

from pendulum import Date

from .exceptions import InvalidRangeError
from .models import (
    DEFAULT_APPOINTMENT_DURATION,
    DaySchedule,
    DoctorSchedule,
    SlotStatus,
    TimeSlot,
    format_clock,
    to_calendar_date,
)

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Generates bookable slots from a doctor's recurring weekly schedule.

    Algorithm, for every calendar day in the range (inclusive):
    1. Look up the active schedule entry for the weekday
    2. Skip the day if there is none, or if it is a vacation day
    3. Walk the day's window in steps of the appointment duration
    4. Emit a slot only when it fits entirely before the window closes
    """

    def __init__(self, default_duration: int = DEFAULT_APPOINTMENT_DURATION):
        if default_duration <= 0:
            raise ValueError(f"default_duration must be greater than zero, got {default_duration}")
        self.default_duration = default_duration

    def generate(
        self,
        schedule: DoctorSchedule,
        start_date: date,
        end_date: date,
    ) -> List[TimeSlot]:
        """
        Generate slots for every day between start_date and end_date.

        Args:
            schedule: The doctor's schedule aggregate
            start_date: First day of the range (inclusive)
            end_date: Last day of the range (inclusive)

        Returns:
            Slots ordered by (date, start time), flagged as generated

        Raises:
            InvalidRangeError: If end_date is before start_date
        """
        start = to_calendar_date(start_date)
        end = to_calendar_date(end_date)

        if end < start:
            raise InvalidRangeError(
                f"End date {end.to_date_string()} is before start date {start.to_date_string()}"
            )

        duration = schedule.effective_duration(self.default_duration)
        slots: List[TimeSlot] = []

        current = start
        while current <= end:
            slots.extend(self._slots_for_day(schedule, current, duration))
            current = current.add(days=1)

        return slots

    def _slots_for_day(
        self,
        schedule: DoctorSchedule,
        day: Date,
        duration: int,
    ) -> List[TimeSlot]:
        """Generate the slots for a single calendar day."""
        day_schedule = schedule.schedule_for(day)
        if day_schedule is None:
            return []

        if schedule.is_vacation_day(day):
            logger.debug("Skipping vacation day %s for doctor %s", day, schedule.doctor_id)
            return []

        if day_schedule.is_overnight():
            logger.warning(
                "Doctor %s has an overnight window %s-%s on weekday %d; overnight schedules produce no slots",
                schedule.doctor_id,
                day_schedule.start_time,
                day_schedule.end_time,
                day_schedule.day_of_week,
            )
            return []

        return [
            TimeSlot(
                doctor_id=schedule.doctor_id,
                date=day,
                start_time=format_clock(cursor),
                end_time=format_clock(cursor + duration),
                status=SlotStatus.AVAILABLE,
                generated=True,
            )
            for cursor in self._window_starts(day_schedule, duration)
        ]

    @staticmethod
    def _window_starts(day_schedule: DaySchedule, duration: int) -> List[int]:
        """
        Start minutes of every full-length slot inside the day's window.

        Example:
        Window: 09:00 - 10:00, duration 45
        Result: [540]  (09:00; the trailing 15 minutes are dropped)
        """
        starts: List[int] = []
        cursor = day_schedule.start

        while cursor + duration <= day_schedule.end:
            starts.append(cursor)
            cursor += duration

        return starts
