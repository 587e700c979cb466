"""Plain-dict (JSON) encoding of stored records, shared by the file and HTTP stores."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from booking_core.application.exceptions import DataIntegrityError
from booking_core.application.utils.time_utils import as_utc, parse_time_of_day
from booking_core.domain.entities.appointment import Appointment, AppointmentStatus
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.domain.entities.subscription import Subscription, SubscriptionStatus


def _get(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Accept both snake_case and the camelCase used by the persistence service."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def parse_instant(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def format_instant(value: datetime) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")


def range_from_dict(data: dict[str, Any]) -> AvailabilityRange:
    try:
        return AvailabilityRange(
            provider_id=str(_get(data, "provider_id", "providerId", "barberId")),
            day_of_week=int(_get(data, "day_of_week", "dayOfWeek")),
            start_time=parse_time_of_day(_get(data, "start_time", "startTime")),
            end_time=parse_time_of_day(_get(data, "end_time", "endTime")),
        )
    except (TypeError, ValueError) as e:
        raise DataIntegrityError(f"Invalid availability range record: {data!r}") from e


def range_to_dict(availability_range: AvailabilityRange) -> dict[str, Any]:
    return {
        "provider_id": availability_range.provider_id,
        "day_of_week": availability_range.day_of_week,
        "start_time": availability_range.start_time.strftime("%H:%M"),
        "end_time": availability_range.end_time.strftime("%H:%M"),
    }


def appointment_from_dict(data: dict[str, Any]) -> Appointment:
    try:
        price = _get(data, "price_cents", "priceCents")
        return Appointment(
            id=str(data["id"]),
            client_id=str(_get(data, "client_id", "clientId")),
            provider_id=str(_get(data, "provider_id", "providerId", "barberId")),
            start_instant=parse_instant(_get(data, "start_instant", "startAt")),
            end_instant=parse_instant(_get(data, "end_instant", "endAt")),
            status=AppointmentStatus(_get(data, "status", default="BOOKED")),
            kind=_get(data, "kind"),
            price_cents=int(price) if price is not None else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DataIntegrityError(f"Invalid appointment record: {data!r}") from e


def appointment_to_dict(appointment: Appointment) -> dict[str, Any]:
    return {
        "id": appointment.id,
        "client_id": appointment.client_id,
        "provider_id": appointment.provider_id,
        "start_instant": format_instant(appointment.start_instant),
        "end_instant": format_instant(appointment.end_instant),
        "status": appointment.status.value,
        "kind": appointment.kind,
        "price_cents": appointment.price_cents,
    }


def subscription_from_dict(data: dict[str, Any]) -> Subscription:
    try:
        return Subscription(
            user_id=str(_get(data, "user_id", "userId")),
            status=SubscriptionStatus(_get(data, "status")),
            start_date=parse_instant(_get(data, "start_date", "startDate")),
            renews_at=parse_instant(_get(data, "renews_at", "renewsAt")),
            plan_name=_get(data, "plan_name", "planName"),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise DataIntegrityError(f"Invalid subscription record: {data!r}") from e


def subscription_to_dict(subscription: Subscription) -> dict[str, Any]:
    return {
        "user_id": subscription.user_id,
        "status": subscription.status.value,
        "start_date": format_instant(subscription.start_date),
        "renews_at": format_instant(subscription.renews_at),
        "plan_name": subscription.plan_name,
    }
