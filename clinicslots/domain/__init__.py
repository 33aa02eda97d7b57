"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import DaySchedule, DoctorSchedule, SlotStatus, TimeSlot, TimeWindow, VacationDay
from .slot_generator import SlotGenerator

__all__ = [
    "DaySchedule",
    "DoctorSchedule",
    "SlotStatus",
    "TimeSlot",
    "TimeWindow",
    "VacationDay",
    "SlotGenerator",
]
