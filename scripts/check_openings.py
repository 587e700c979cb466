#!/usr/bin/env python3
"""
Local harness (no HTTP): prints next openings for a provider and, optionally,
a client's funnel stage, reading the JSON booking store.

Usage:
  python3 scripts/check_openings.py --provider barber_1
  python3 scripts/check_openings.py --provider barber_1 --client client_9 --seed
"""

from __future__ import annotations

import argparse
import sys
from datetime import time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking_core.application.use_cases.daily_availability import DailyAvailabilityEngine
from booking_core.application.use_cases.funnel import FunnelService
from booking_core.application.use_cases.openings_search import OpeningsSearch
from booking_core.application.utils.time_utils import format_time_12h, utc_now
from booking_core.core.config import settings
from booking_core.domain.entities.appointment import Appointment, AppointmentKind, AppointmentStatus
from booking_core.domain.entities.availability_range import AvailabilityRange
from booking_core.domain.policies.trial_detection import get_trial_detection_policy
from booking_core.infrastructure.store.json_store import JsonBookingRepository


def seed(store: JsonBookingRepository, provider_id: str, client_id: str) -> None:
    """Weekday 10:00-14:00 and 15:00-18:00, plus one completed free cut five days ago."""
    for weekday in range(1, 6):
        store.add_range(AvailabilityRange(provider_id, weekday, time(10, 0), time(14, 0)))
        store.add_range(AvailabilityRange(provider_id, weekday, time(15, 0), time(18, 0)))

    start = (utc_now() - timedelta(days=5)).replace(minute=0, second=0, microsecond=0)
    store.add_appointment(
        Appointment(
            id=f"seed_{client_id}_trial",
            client_id=client_id,
            provider_id=provider_id,
            start_instant=start,
            end_instant=start + timedelta(minutes=settings.SLOT_DURATION_MINUTES),
            status=AppointmentStatus.COMPLETED,
            kind=AppointmentKind.TRIAL_FREE.value,
            price_cents=0,
        )
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Print next openings and funnel stage from the JSON store")
    parser.add_argument("--data-file", default=settings.DATA_FILE)
    parser.add_argument("--provider", required=True)
    parser.add_argument("--client", default=None)
    parser.add_argument("--limit", type=int, default=settings.OPENINGS_LIMIT)
    parser.add_argument("--horizon", type=int, default=settings.OPENINGS_HORIZON_DAYS)
    parser.add_argument("--seed", action="store_true", help="Write demo ranges and a completed free cut first")
    args = parser.parse_args()

    store = JsonBookingRepository(data_file=args.data_file)
    if args.seed:
        seed(store, args.provider, args.client or "client_demo")

    tz = ZoneInfo(settings.BUSINESS_TIMEZONE)
    engine = DailyAvailabilityEngine(store, tz, settings.SLOT_DURATION_MINUTES)
    openings = OpeningsSearch(engine).next_openings(args.provider, args.limit, args.horizon)

    print(f"Next openings for {args.provider} ({tz.key}):")
    if not openings:
        print("  none within horizon")
    for opening in openings:
        print(f"  {opening.date.isoformat()} {format_time_12h(opening.time)}  ({opening.starts_at.isoformat()})")

    if args.client:
        service = FunnelService(
            store,
            policy=get_trial_detection_policy(settings.TRIAL_DETECTION_POLICY),
            window_days=settings.SECOND_WINDOW_DAYS,
            second_cut_price_cents=settings.SECOND_CUT_PRICE_CENTS,
        )
        result = service.compute_funnel_stage(args.client)
        offer = service.booking_offer(args.client)
        print(f"\nClient {args.client}: stage={result.stage.value} window_expires_at={result.window_expires_at}")
        print(f"  next booking offer: {offer.kind.value}")


if __name__ == "__main__":
    main()
