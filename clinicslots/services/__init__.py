"""
Service layer helpers that orchestrate storage adapters and domain logic.
"""

from .availability import (
    AvailabilityService,
    DoctorRepositoryProtocol,
    SlotStoreProtocol,
    availability_response,
)

__all__ = [
    "AvailabilityService",
    "DoctorRepositoryProtocol",
    "SlotStoreProtocol",
    "availability_response",
]
