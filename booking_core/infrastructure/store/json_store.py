from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from booking_core.application.exceptions import DataIntegrityError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.domain.entities.appointment import Appointment, AppointmentStatus
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.domain.entities.subscription import Subscription
from booking_core.infrastructure.store.memory_store import MemoryBookingRepository
from booking_core.infrastructure.store.records import (
    appointment_from_dict,
    appointment_to_dict,
    range_from_dict,
    range_to_dict,
    subscription_from_dict,
    subscription_to_dict,
)

T = TypeVar("T")

RANGES = "availability_ranges"
APPOINTMENTS = "appointments"
SUBSCRIPTIONS = "subscriptions"


class JsonBookingRepository(BookingRepositoryPort):
    """
    Single JSON document holding ranges, appointments and subscriptions.

    The file is re-read on every query so readers always see the latest commits.
    Each query decodes only the collection it needs, and a record that fails to
    decode is logged and left out of the result. Writes edit the raw document,
    so such records stay in the file untouched.
    """

    def __init__(self, data_file: str = "./data/booking.json") -> None:
        self._data_file = Path(data_file)
        self._data_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get_availability_ranges(self, provider_id: str, day_of_week: int) -> list[AvailabilityRange]:
        ranges = self._decode(self._read_document(), RANGES, range_from_dict)
        return MemoryBookingRepository(ranges=ranges).get_availability_ranges(provider_id, day_of_week)

    def get_active_appointments(self, provider_id: str, start_utc: datetime, end_utc: datetime) -> list[Appointment]:
        appointments = self._decode(self._read_document(), APPOINTMENTS, appointment_from_dict)
        return MemoryBookingRepository(appointments=appointments).get_active_appointments(provider_id, start_utc, end_utc)

    def get_appointments_for_client(self, client_id: str) -> list[Appointment]:
        appointments = self._decode(self._read_document(), APPOINTMENTS, appointment_from_dict)
        return MemoryBookingRepository(appointments=appointments).get_appointments_for_client(client_id)

    def get_subscriptions_for_user(self, user_id: str) -> list[Subscription]:
        subscriptions = self._decode(self._read_document(), SUBSCRIPTIONS, subscription_from_dict)
        return [s for s in subscriptions if s.user_id == user_id]

    def add_range(self, availability_range: AvailabilityRange) -> None:
        with self._lock:
            data = self._read_document()
            data.setdefault(RANGES, []).append(range_to_dict(availability_range))
            self._save(data)

    def add_subscription(self, subscription: Subscription) -> None:
        with self._lock:
            data = self._read_document()
            data.setdefault(SUBSCRIPTIONS, []).append(subscription_to_dict(subscription))
            self._save(data)

    def add_appointment(self, appointment: Appointment) -> Appointment:
        """Raises SlotTaken when an active appointment already holds the slot."""
        with self._lock:
            data = self._read_document()
            existing = MemoryBookingRepository(appointments=self._decode(data, APPOINTMENTS, appointment_from_dict))
            existing.add_appointment(appointment)

            records = [r for r in data.get(APPOINTMENTS, []) if not _has_id(r, appointment.id)]
            records.append(appointment_to_dict(appointment))
            data[APPOINTMENTS] = records
            self._save(data)
            return appointment

    def cancel_appointment(self, appointment_id: str) -> bool:
        with self._lock:
            data = self._read_document()
            existing = MemoryBookingRepository(appointments=self._decode(data, APPOINTMENTS, appointment_from_dict))
            if not existing.cancel_appointment(appointment_id):
                return False
            for record in data.get(APPOINTMENTS, []):
                if _has_id(record, appointment_id):
                    record["status"] = AppointmentStatus.CANCELED.value
            self._save(data)
            return True

    def _decode(self, data: dict[str, Any], key: str, decoder: Callable[[dict[str, Any]], T]) -> list[T]:
        records = data.get(key, [])
        if not isinstance(records, list):
            raise DataIntegrityError(f"Booking data field {key!r} must be a list: {self._data_file}")

        decoded: list[T] = []
        for record in records:
            try:
                if not isinstance(record, dict):
                    raise DataIntegrityError(f"Invalid {key} record: {record!r}")
                decoded.append(decoder(record))
            except DataIntegrityError as e:
                self._logger.warning(
                    "Skipping invalid stored record",
                    extra={"collection": key, "path": str(self._data_file), "error": str(e)},
                )
        return decoded

    def _read_document(self) -> dict[str, Any]:
        if not self._data_file.exists():
            return {"version": 1}
        try:
            with open(self._data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.error("Booking data file unreadable", extra={"path": str(self._data_file), "error": str(e)})
            raise DataIntegrityError(f"Booking data file unreadable: {self._data_file}") from e
        if not isinstance(data, dict):
            raise DataIntegrityError(f"Booking data file must hold a JSON object: {self._data_file}")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Write the document atomically via a temp file and rename."""
        data["version"] = 1
        temp_path = self._data_file.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._data_file)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise


def _has_id(record: Any, appointment_id: str) -> bool:
    return isinstance(record, dict) and str(record.get("id")) == appointment_id
