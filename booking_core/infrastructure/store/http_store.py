from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from booking_core.application.exceptions import RepositoryUnavailableError, SlotTaken
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.domain.entities.appointment import Appointment
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.domain.entities.subscription import Subscription
from booking_core.infrastructure.store.records import (
    appointment_from_dict,
    appointment_to_dict,
    format_instant,
    range_from_dict,
    subscription_from_dict,
)


class HttpBookingRepository(BookingRepositoryPort):
    """Reads bookings from the persistence service's REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not base_url:
            raise ValueError("BOOKING_API_BASE_URL is required for the HTTP booking store")
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def get_availability_ranges(self, provider_id: str, day_of_week: int) -> list[AvailabilityRange]:
        data = self._get(f"/providers/{provider_id}/availability-ranges", {"dayOfWeek": day_of_week})
        return [range_from_dict(item) for item in data.get("ranges", [])]

    def get_active_appointments(self, provider_id: str, start_utc: datetime, end_utc: datetime) -> list[Appointment]:
        params = {"start": format_instant(start_utc), "end": format_instant(end_utc), "active": "true"}
        data = self._get(f"/providers/{provider_id}/appointments", params)
        appointments = [appointment_from_dict(item) for item in data.get("appointments", [])]
        return [a for a in appointments if a.is_active]

    def get_appointments_for_client(self, client_id: str) -> list[Appointment]:
        data = self._get(f"/clients/{client_id}/appointments")
        return [appointment_from_dict(item) for item in data.get("appointments", [])]

    def get_subscriptions_for_user(self, user_id: str) -> list[Subscription]:
        data = self._get(f"/users/{user_id}/subscriptions")
        return [subscription_from_dict(item) for item in data.get("subscriptions", [])]

    def add_appointment(self, appointment: Appointment) -> Appointment:
        """The service enforces (provider, start) uniqueness and answers 409 on conflict."""
        try:
            response = self._client.post(
                f"{self._base_url}/appointments",
                json=appointment_to_dict(appointment),
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            self._logger.error("Error committing appointment", extra={"error": str(e)})
            raise RepositoryUnavailableError(str(e)) from e

        if response.status_code == 409:
            raise SlotTaken(appointment.provider_id, appointment.start_instant)
        self._raise_for_status(response)
        return appointment_from_dict(self._json_body(response))

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._client.get(f"{self._base_url}{path}", params=params, headers=self._headers())
        except httpx.HTTPError as e:
            self._logger.error("Error reaching booking store", extra={"path": path, "error": str(e)})
            raise RepositoryUnavailableError(str(e)) from e
        self._raise_for_status(response)
        return self._json_body(response)

    def _json_body(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            self._logger.error("Booking store returned a non-JSON body", extra={"error": str(e)})
            raise RepositoryUnavailableError("Booking store returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise RepositoryUnavailableError("Booking store returned an unexpected body")
        return data

    def _raise_for_status(self, response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Booking store returned an error",
                extra={"status_code": response.status_code, "error": str(e)},
            )
            raise RepositoryUnavailableError(f"Booking store error {response.status_code}") from e

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"Authorization": f"Bearer {self._api_key}"}
