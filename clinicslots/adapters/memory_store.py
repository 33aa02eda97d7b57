"""
In-memory doctor and slot stores.

Both implement the storage protocols of ``AvailabilityService`` and stand in
for the document store in tests, fixtures and the CLI.
"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..domain.exceptions import SlotOverlapError
from ..domain.models import DoctorSchedule, SlotStatus, TimeSlot, TimeWindow, parse_clock, to_calendar_date


class InMemoryDoctorRepository:
    """Doctor schedules keyed by doctor id."""

    def __init__(self, doctors: Iterable[DoctorSchedule] = ()):
        self._doctors: Dict[str, DoctorSchedule] = {}
        self._names: Dict[str, str] = {}
        for schedule in doctors:
            self.add_doctor(schedule)

    def add_doctor(self, schedule: DoctorSchedule, name: str = "") -> None:
        self._doctors[schedule.doctor_id] = schedule
        self._names[schedule.doctor_id] = name

    async def find_doctor_by_id(self, doctor_id: str) -> Optional[DoctorSchedule]:
        return self._doctors.get(doctor_id)

    def list_doctors(self) -> List[DoctorSchedule]:
        return list(self._doctors.values())

    def display_name(self, doctor_id: str) -> str:
        return self._names.get(doctor_id) or doctor_id


class InMemorySlotStore:
    """
    Persisted time slots.

    Writes reject slots that overlap an existing slot of the same doctor on
    the same date, whatever the existing slot's status.
    """

    def __init__(self, slots: Iterable[TimeSlot] = ()):
        self._slots: Dict[str, TimeSlot] = {}
        for slot in slots:
            self.add_slot(slot)

    def add_slot(self, slot: TimeSlot) -> TimeSlot:
        """
        Persist a slot, assigning an id when it has none.

        Raises:
            ValueError: If the slot is a generated placeholder
            SlotOverlapError: If the slot overlaps an existing one
        """
        if slot.generated:
            raise ValueError(f"Generated slot {slot.slot_key} cannot be stored directly")

        overlapping = self.find_overlapping_slot(
            slot.doctor_id,
            slot.date,
            slot.start_time,
            slot.end_time,
            exclude_slot_id=slot.slot_id,
        )
        if overlapping is not None:
            raise SlotOverlapError(
                f"Time slot {slot.start_time}-{slot.end_time} on {slot.date.to_date_string()} "
                f"overlaps with existing slot {overlapping.start_time}-{overlapping.end_time}"
            )

        if slot.slot_id is None:
            slot = replace(slot, slot_id=uuid.uuid4().hex)

        self._slots[slot.slot_id] = slot
        return slot

    def get_slot(self, slot_id: str) -> Optional[TimeSlot]:
        return self._slots.get(slot_id)

    def remove_slot(self, slot_id: str) -> Optional[TimeSlot]:
        """Delete a stored slot and return it, or None when the id is unknown."""
        return self._slots.pop(slot_id, None)

    def find_overlapping_slot(
        self,
        doctor_id: str,
        day: date,
        start_time: str,
        end_time: str,
        exclude_slot_id: Optional[str] = None,
    ) -> Optional[TimeSlot]:
        """Return the first stored slot overlapping the given window, if any."""
        target_day = to_calendar_date(day)
        window = TimeWindow(start=parse_clock(start_time), end=parse_clock(end_time))

        for slot in self._ordered():
            if exclude_slot_id is not None and slot.slot_id == exclude_slot_id:
                continue
            if slot.doctor_id != doctor_id or slot.date != target_day:
                continue
            if slot.window.overlaps(window):
                return slot
        return None

    async def find_slots(
        self,
        doctor_id: str,
        start_date: date,
        end_date: date,
        status: Optional[SlotStatus] = None,
    ) -> List[TimeSlot]:
        start = to_calendar_date(start_date)
        end = to_calendar_date(end_date)

        return [
            slot
            for slot in self._ordered()
            if slot.doctor_id == doctor_id
            and start <= slot.date <= end
            and (status is None or slot.status == status)
        ]

    def _ordered(self) -> List[TimeSlot]:
        return sorted(self._slots.values(), key=TimeSlot.sort_key)
