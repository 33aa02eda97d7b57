"""
Domain-specific exception hierarchy for the availability engine.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class DoctorNotFoundError(AvailabilityError):
    """Raised when a doctor identifier does not resolve to a doctor record."""

    def __init__(self, doctor_id: str):
        self.doctor_id = doctor_id
        super().__init__(f"Doctor not found: {doctor_id}")


class InvalidRangeError(AvailabilityError):
    """Raised when the requested end date lies before the start date."""


class StorageError(AvailabilityError):
    """Raised when the doctor or slot store cannot be read."""


class ScheduleError(AvailabilityError):
    """Raised when schedule data (times, weekdays, durations) is malformed."""


class SlotOverlapError(AvailabilityError):
    """Raised when a persisted slot would overlap an existing one."""
