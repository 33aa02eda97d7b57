"""
Document schemas for doctor and time-slot records.

Records are validated with Pydantic and converted into domain objects. Field
names follow the stored documents (camelCase); snake_case names are accepted
too.
"""

import datetime as dt
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..domain.models import (
    DEFAULT_APPOINTMENT_DURATION,
    DEFAULT_MAX_APPOINTMENTS_PER_DAY,
    DaySchedule,
    DoctorSchedule,
    SlotStatus,
    TimeSlot,
    VacationDay,
    to_calendar_date,
)


class DayScheduleRecord(BaseModel):
    """One entry of a doctor's weekly availability."""
    model_config = ConfigDict(populate_by_name=True)

    day_of_week: int = Field(validation_alias=AliasChoices("dayOfWeek", "day_of_week"))
    start_time: str = Field(validation_alias=AliasChoices("startTime", "start_time"))
    end_time: str = Field(validation_alias=AliasChoices("endTime", "end_time"))
    is_available: bool = Field(default=True, validation_alias=AliasChoices("isAvailable", "is_available"))

    @field_validator("day_of_week")
    @classmethod
    def validate_day_of_week(cls, value: int) -> int:
        """Validate weekday is between 0 (Sunday) and 6 (Saturday)."""
        if value not in range(7):
            raise ValueError(f"dayOfWeek must be between 0 and 6, got {value}")
        return value

    def to_domain(self) -> DaySchedule:
        return DaySchedule.from_strings(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            is_available=self.is_available,
        )


class VacationDayRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    is_work_day: bool = Field(default=False, validation_alias=AliasChoices("isWorkDay", "is_work_day"))

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> dt.date:
        # stored dates may carry a midnight timestamp
        return to_calendar_date(value)

    def to_domain(self) -> VacationDay:
        return VacationDay(date=to_calendar_date(self.date), is_work_day=self.is_work_day)


class DoctorRecord(BaseModel):
    """A doctor document, reduced to the fields the availability engine reads."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    weekly_availability: List[DayScheduleRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("weeklyAvailability", "availabilitySchedule", "weekly_availability"),
    )
    vacation_days: List[VacationDayRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("vacationDays", "vacation_days"),
    )
    appointment_duration: Optional[int] = Field(
        default=DEFAULT_APPOINTMENT_DURATION,
        validation_alias=AliasChoices("appointmentDuration", "appointment_duration"),
    )
    max_appointments_per_day: int = Field(
        default=DEFAULT_MAX_APPOINTMENTS_PER_DAY,
        validation_alias=AliasChoices("maxAppointmentsPerDay", "max_appointments_per_day"),
    )

    def to_domain(self) -> DoctorSchedule:
        return DoctorSchedule.from_entries(
            doctor_id=self.id,
            entries=[entry.to_domain() for entry in self.weekly_availability],
            vacation_days=[vacation.to_domain() for vacation in self.vacation_days],
            appointment_duration=self.appointment_duration,
            max_appointments_per_day=self.max_appointments_per_day,
        )


class TimeSlotRecord(BaseModel):
    """A persisted time-slot document."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    doctor_id: str = Field(validation_alias=AliasChoices("doctorId", "doctor_id"))
    date: dt.date
    start_time: str = Field(validation_alias=AliasChoices("startTime", "start_time"))
    end_time: str = Field(validation_alias=AliasChoices("endTime", "end_time"))
    status: SlotStatus = SlotStatus.AVAILABLE

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> dt.date:
        return to_calendar_date(value)

    def to_domain(self) -> TimeSlot:
        return TimeSlot(
            doctor_id=self.doctor_id,
            date=to_calendar_date(self.date),
            start_time=self.start_time,
            end_time=self.end_time,
            status=self.status,
            slot_id=self.id,
        )
