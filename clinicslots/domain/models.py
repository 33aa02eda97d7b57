"""
Domain models for doctor schedules and appointment slots.

Times of day are plain minute-of-day integers (``HH * 60 + MM``) and days are
``pendulum.Date`` values. The two are only combined when a slot is formatted
for output, so no wall-clock arithmetic ever crosses a timezone boundary.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple

import pendulum
from pendulum import Date

from .exceptions import ScheduleError

logger = logging.getLogger(__name__)

DEFAULT_APPOINTMENT_DURATION = 30
DEFAULT_MAX_APPOINTMENTS_PER_DAY = 20
MINUTES_PER_DAY = 24 * 60

CLOCK_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})")


def parse_clock(value: str) -> int:
    """
    Parse a zero-padded ``HH:MM`` 24-hour string into minutes since midnight.

    ``24:00`` is accepted as the end-of-day boundary.

    Raises:
        ScheduleError: If the value is not a valid ``HH:MM`` string
    """
    match = CLOCK_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ScheduleError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))

    if not 0 <= minutes <= 59 or not 0 <= hours <= 24:
        raise ScheduleError(f"Time out of range: '{value}'")

    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        raise ScheduleError(f"Time out of range: '{value}'")
    return total


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded ``HH:MM`` string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def to_calendar_date(value) -> Date:
    """
    Normalise a date-like value (ISO string, date, datetime) to ``pendulum.Date``.

    Any time component is dropped.
    """
    if isinstance(value, datetime):
        return pendulum.date(value.year, value.month, value.day)
    if isinstance(value, Date):
        return value
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)

    try:
        parsed = pendulum.parse(str(value), exact=True)
    except ValueError as exc:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc

    if isinstance(parsed, datetime):
        return pendulum.date(parsed.year, parsed.month, parsed.day)
    if isinstance(parsed, date):
        return pendulum.date(parsed.year, parsed.month, parsed.day)
    raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")


def day_of_week_index(day: date) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7


@dataclass(frozen=True)
class TimeWindow:
    """
    Immutable window within a single day, in minutes since midnight.

    Invariant: start must be before end.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Start time {format_clock(self.start)} must be before end time {format_clock(self.end)}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "TimeWindow") -> bool:
        """Check if this window overlaps with another."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{format_clock(self.start)} - {format_clock(self.end)}"


@dataclass(frozen=True)
class DaySchedule:
    """A doctor's recurring availability window for one weekday (0=Sunday)."""
    day_of_week: int
    start: int
    end: int
    is_available: bool = True

    def __post_init__(self):
        if self.day_of_week not in range(7):
            raise ScheduleError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")

    @classmethod
    def from_strings(
        cls,
        day_of_week: int,
        start_time: str,
        end_time: str,
        is_available: bool = True,
    ) -> "DaySchedule":
        """Build a day schedule from ``HH:MM`` strings."""
        return cls(
            day_of_week=day_of_week,
            start=parse_clock(start_time),
            end=parse_clock(end_time),
            is_available=is_available,
        )

    @property
    def start_time(self) -> str:
        return format_clock(self.start)

    @property
    def end_time(self) -> str:
        return format_clock(self.end)

    def is_overnight(self) -> bool:
        """True when the window ends before it starts (crosses midnight)."""
        return self.end < self.start


@dataclass(frozen=True)
class VacationDay:
    """
    A calendar-date exception to the weekly schedule.

    Only entries with ``is_work_day=False`` block slot generation; work-day
    overrides are carried through but have no effect yet.
    """
    date: Date
    is_work_day: bool = False

    def __post_init__(self):
        object.__setattr__(self, "date", to_calendar_date(self.date))

    @property
    def blocks_generation(self) -> bool:
        return not self.is_work_day


@dataclass(frozen=True)
class DoctorSchedule:
    """
    The schedule aggregate embedded in a doctor record.

    ``weekly_availability`` holds at most one active entry per weekday.
    """
    doctor_id: str
    weekly_availability: Mapping[int, DaySchedule] = field(default_factory=dict)
    vacation_days: Tuple[VacationDay, ...] = ()
    appointment_duration: Optional[int] = DEFAULT_APPOINTMENT_DURATION
    max_appointments_per_day: int = DEFAULT_MAX_APPOINTMENTS_PER_DAY

    @classmethod
    def from_entries(
        cls,
        doctor_id: str,
        entries: Iterable[DaySchedule],
        vacation_days: Iterable[VacationDay] = (),
        appointment_duration: Optional[int] = DEFAULT_APPOINTMENT_DURATION,
        max_appointments_per_day: int = DEFAULT_MAX_APPOINTMENTS_PER_DAY,
    ) -> "DoctorSchedule":
        """
        Build a schedule from an ordered list of day entries.

        Entries marked unavailable are dropped. When several available
        entries share a weekday, the first one wins.
        """
        weekly: Dict[int, DaySchedule] = {}
        for entry in entries:
            if not entry.is_available:
                continue
            if entry.day_of_week in weekly:
                logger.warning(
                    "Doctor %s has duplicate schedule entries for weekday %d; keeping %s-%s",
                    doctor_id,
                    entry.day_of_week,
                    weekly[entry.day_of_week].start_time,
                    weekly[entry.day_of_week].end_time,
                )
                continue
            weekly[entry.day_of_week] = entry

        return cls(
            doctor_id=doctor_id,
            weekly_availability=weekly,
            vacation_days=tuple(vacation_days),
            appointment_duration=appointment_duration,
            max_appointments_per_day=max_appointments_per_day,
        )

    def schedule_for(self, day: date) -> Optional[DaySchedule]:
        """Return the active schedule for the weekday of ``day``, if any."""
        entry = self.weekly_availability.get(day_of_week_index(day))
        if entry is None or not entry.is_available:
            return None
        return entry

    def is_vacation_day(self, day: date) -> bool:
        """Check whether ``day`` is blocked by a vacation entry."""
        target = to_calendar_date(day)
        return any(
            vacation.blocks_generation and vacation.date == target
            for vacation in self.vacation_days
        )

    def effective_duration(self, default: int = DEFAULT_APPOINTMENT_DURATION) -> int:
        """Appointment duration in minutes, falling back to ``default`` when unset or not positive."""
        duration = self.appointment_duration
        if not duration:
            return default
        if duration < 0:
            logger.warning(
                "Doctor %s has negative appointment duration %d; using %d minutes",
                self.doctor_id,
                duration,
                default,
            )
            return default
        return duration


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"


def make_slot_key(doctor_id: str, day: date, start_time: str) -> str:
    """Stable key identifying a slot window: ``doctor:YYYY-MM-DD:HH:MM``."""
    return f"{doctor_id}:{to_calendar_date(day).to_date_string()}:{start_time}"


def parse_slot_key(slot_key: str) -> Tuple[str, Date, str]:
    """
    Split a slot key into ``(doctor_id, date, start_time)``.

    Raises:
        ValueError: If the key is malformed
    """
    parts = slot_key.rsplit(":", 3)
    if len(parts) != 4 or not parts[0]:
        raise ValueError(f"Malformed slot key: '{slot_key}'")

    doctor_id, day_str, hours, minutes = parts
    start_time = f"{hours}:{minutes}"
    try:
        parse_clock(start_time)
    except ScheduleError as exc:
        raise ValueError(f"Malformed slot key: '{slot_key}'") from exc
    return doctor_id, to_calendar_date(day_str), start_time


@dataclass(frozen=True)
class TimeSlot:
    """
    A fixed-duration appointment window on a given date.

    Persisted slots carry a ``slot_id``; synthesized ones are flagged with
    ``generated=True`` and are never written to storage.
    """
    doctor_id: str
    date: Date
    start_time: str
    end_time: str
    status: SlotStatus = SlotStatus.AVAILABLE
    generated: bool = False
    slot_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "date", to_calendar_date(self.date))
        if parse_clock(self.start_time) >= parse_clock(self.end_time):
            raise ScheduleError(
                f"Slot start {self.start_time} must be before end {self.end_time}"
            )

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(start=parse_clock(self.start_time), end=parse_clock(self.end_time))

    @property
    def slot_key(self) -> str:
        return make_slot_key(self.doctor_id, self.date, self.start_time)

    def sort_key(self) -> Tuple[Date, int]:
        return self.date, parse_clock(self.start_time)

    def overlaps(self, other: "TimeSlot") -> bool:
        """Same doctor, same date, intersecting windows."""
        return (
            self.doctor_id == other.doctor_id
            and self.date == other.date
            and self.window.overlaps(other.window)
        )

    def duration_minutes(self) -> int:
        return self.window.duration_minutes()

    def to_dict(self) -> dict:
        """Serialise to the document shape used by the HTTP layer."""
        data = {
            "doctorId": self.doctor_id,
            "date": self.date.to_date_string(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "status": self.status.value,
            "generated": self.generated,
        }
        if self.slot_id is not None:
            data["id"] = self.slot_id
        return data

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:MM - HH:MM
        """
        weekday = self.date.format("dddd")
        return f"{weekday}, {self.date.to_date_string()} | {self.start_time} - {self.end_time}"
