"""
Adapters layer - Storage collaborators (document records, in-memory stores, JSON fixtures).
"""

from .json_loader import load_doctors, load_slots
from .memory_store import InMemoryDoctorRepository, InMemorySlotStore
from .records import DayScheduleRecord, DoctorRecord, TimeSlotRecord, VacationDayRecord

__all__ = [
    "load_doctors",
    "load_slots",
    "InMemoryDoctorRepository",
    "InMemorySlotStore",
    "DayScheduleRecord",
    "DoctorRecord",
    "TimeSlotRecord",
    "VacationDayRecord",
]
