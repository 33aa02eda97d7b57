"""
Load doctor and slot fixtures from JSON files into the in-memory stores.
"""

import json
from pathlib import Path
from typing import Any, List

from .memory_store import InMemoryDoctorRepository, InMemorySlotStore
from .records import DoctorRecord, TimeSlotRecord

SAMPLE_DOCTORS_FILE = Path(__file__).parent / "sample_doctors.json"
SAMPLE_SLOTS_FILE = Path(__file__).parent / "sample_slots.json"


def _read_documents(path: Path, key: str) -> List[Any]:
    """Read a JSON list, either at the root or under ``key``."""
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get(key, [])

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of documents (or a '{key}' list).")

    return data


def load_doctors(path: Path = SAMPLE_DOCTORS_FILE) -> InMemoryDoctorRepository:
    """
    Build a doctor repository from a JSON file of doctor documents.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a document is invalid
    """
    repository = InMemoryDoctorRepository()

    for document in _read_documents(path, "doctors"):
        record = DoctorRecord.model_validate(document)
        repository.add_doctor(record.to_domain(), name=record.name)

    return repository


def load_slots(path: Path = SAMPLE_SLOTS_FILE) -> InMemorySlotStore:
    """
    Build a slot store from a JSON file of time-slot documents.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a document is invalid
        SlotOverlapError: If two documents overlap
    """
    store = InMemorySlotStore()

    for document in _read_documents(path, "timeSlots"):
        store.add_slot(TimeSlotRecord.model_validate(document).to_domain())

    return store
