"""
Application service for doctor availability.

The service loads the doctor's schedule and the persisted slots through two
storage collaborators, and falls back to the domain-level ``SlotGenerator``
when nothing is persisted for the requested range. Both collaborators are
plain protocols so tests can swap in stubs without a document store.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import pendulum
from pendulum import Date

from ..domain.exceptions import AvailabilityError, DoctorNotFoundError, InvalidRangeError, StorageError
from ..domain.models import DoctorSchedule, SlotStatus, TimeSlot, parse_slot_key, to_calendar_date
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 7
AVAILABILITY_FAILURE_MESSAGE = "Failed to retrieve doctor availability"


class DoctorRepositoryProtocol(Protocol):
    """Protocol describing the doctor lookup needed by the service."""

    async def find_doctor_by_id(self, doctor_id: str) -> Optional[DoctorSchedule]:
        """Return the doctor's schedule aggregate, or None when unknown."""


class SlotStoreProtocol(Protocol):
    """Protocol describing the persisted slot query needed by the service."""

    async def find_slots(
        self,
        doctor_id: str,
        start_date: Date,
        end_date: Date,
        status: Optional[SlotStatus] = None,
    ) -> List[TimeSlot]:
        """Return slots in the inclusive range, ordered by date and start time."""


class AvailabilityService:
    """
    Answers "when can this doctor be seen?" for a date range.

    Persisted slots always win: when the store returns anything for the
    range, it is returned as-is and nothing is generated, even if only some
    of the days are covered.
    """

    def __init__(
        self,
        doctor_repository: DoctorRepositoryProtocol,
        slot_store: SlotStoreProtocol,
        slot_generator: Optional[SlotGenerator] = None,
        *,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        timezone: str = "UTC",
    ) -> None:
        if lookahead_days <= 0:
            raise ValueError(f"lookahead_days must be greater than zero, got {lookahead_days}")
        self._doctor_repository = doctor_repository
        self._slot_store = slot_store
        self._slot_generator = slot_generator or SlotGenerator()
        self._lookahead_days = lookahead_days
        self._timezone = timezone

    async def get_doctor_availability(
        self,
        doctor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TimeSlot]:
        """
        Return the available slots for a doctor.

        Args:
            doctor_id: Doctor identifier
            start_date: First day (inclusive), defaults to today
            end_date: Last day (inclusive), defaults to start + lookahead

        Returns:
            Persisted available slots, or generated slots when none exist

        Raises:
            InvalidRangeError: If end_date is before start_date
            DoctorNotFoundError: If the doctor does not exist
            StorageError: If either store cannot be read
        """
        start, end = self.resolve_date_range(start_date, end_date)
        schedule = await self.load_schedule(doctor_id)

        persisted = await self.find_persisted_slots(doctor_id, start, end)
        if persisted:
            logger.info(
                "Returning %d persisted slot(s) for doctor %s (%s to %s)",
                len(persisted),
                doctor_id,
                start,
                end,
            )
            return persisted

        generated = self._slot_generator.generate(schedule, start, end)
        logger.info(
            "No persisted slots for doctor %s (%s to %s); generated %d slot(s)",
            doctor_id,
            start,
            end,
            len(generated),
        )
        return generated

    async def get_time_slots(
        self,
        doctor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TimeSlot]:
        """Return every persisted slot in the range, whatever its status."""
        start, end = self.resolve_date_range(start_date, end_date)
        return await self._query_slots(doctor_id, start, end, status=None)

    async def load_schedule(self, doctor_id: str) -> DoctorSchedule:
        """
        Load the schedule aggregate of a doctor.

        Raises:
            DoctorNotFoundError: If the doctor does not exist
            StorageError: If the doctor store cannot be read
        """
        try:
            schedule = await self._doctor_repository.find_doctor_by_id(doctor_id)
        except AvailabilityError:
            raise
        except Exception as exc:
            logger.error("Doctor lookup failed for %s: %s", doctor_id, exc)
            raise StorageError(AVAILABILITY_FAILURE_MESSAGE) from exc

        if schedule is None:
            raise DoctorNotFoundError(doctor_id)
        return schedule

    async def find_persisted_slots(
        self,
        doctor_id: str,
        start_date: Date,
        end_date: Date,
    ) -> List[TimeSlot]:
        """Query the slot store for available slots in the inclusive range."""
        return await self._query_slots(doctor_id, start_date, end_date, status=SlotStatus.AVAILABLE)

    async def resolve_generated_slot(self, slot_key: str) -> Optional[TimeSlot]:
        """
        Re-derive a generated slot from its key.

        Returns None when the doctor's current schedule no longer offers
        that window.

        Raises:
            ValueError: If the key is malformed
            DoctorNotFoundError: If the doctor does not exist
        """
        doctor_id, day, start_time = parse_slot_key(slot_key)
        schedule = await self.load_schedule(doctor_id)

        for slot in self._slot_generator.generate(schedule, day, day):
            if slot.start_time == start_time:
                return slot
        return None

    def resolve_date_range(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[Date, Date]:
        """
        Apply range defaults and validate the order of the bounds.

        Raises:
            InvalidRangeError: If the end date is before the start date
        """
        start = to_calendar_date(start_date) if start_date is not None else self._today()
        end = to_calendar_date(end_date) if end_date is not None else start.add(days=self._lookahead_days)

        if end < start:
            raise InvalidRangeError(
                f"End date {end.to_date_string()} is before start date {start.to_date_string()}"
            )
        return start, end

    async def _query_slots(
        self,
        doctor_id: str,
        start_date: Date,
        end_date: Date,
        status: Optional[SlotStatus],
    ) -> List[TimeSlot]:
        try:
            slots = await self._slot_store.find_slots(
                doctor_id=doctor_id,
                start_date=start_date,
                end_date=end_date,
                status=status,
            )
        except AvailabilityError:
            raise
        except Exception as exc:
            logger.error("Slot query failed for doctor %s: %s", doctor_id, exc)
            raise StorageError(AVAILABILITY_FAILURE_MESSAGE) from exc

        return sorted(slots, key=TimeSlot.sort_key)

    def _today(self) -> Date:
        return pendulum.today(self._timezone).date()


def availability_response(slots: Sequence[TimeSlot]) -> Dict[str, Any]:
    """Wrap slots in the ``{"success": true, "data": [...]}`` response envelope."""
    return {
        "success": True,
        "data": [slot.to_dict() for slot in slots],
    }
