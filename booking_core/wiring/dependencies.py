from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booking_core.core.config import settings
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.use_cases.daily_availability import DailyAvailabilityEngine
from booking_core.application.use_cases.funnel import FunnelService
from booking_core.application.use_cases.openings_search import OpeningsSearch
from booking_core.domain.policies.trial_detection import TrialDetectionPolicy, get_trial_detection_policy
from booking_core.infrastructure.store.http_store import HttpBookingRepository
from booking_core.infrastructure.store.json_store import JsonBookingRepository
from booking_core.infrastructure.store.memory_store import MemoryBookingRepository


logger = logging.getLogger(__name__)


@lru_cache
def get_repository() -> BookingRepositoryPort:
    provider = settings.STORE_PROVIDER.lower()
    if provider == "json":
        logger.info("Using JsonBookingRepository", extra={"path": settings.DATA_FILE})
        return JsonBookingRepository(data_file=settings.DATA_FILE)
    if provider == "http":
        logger.info("Using HttpBookingRepository", extra={"base_url": settings.BOOKING_API_BASE_URL})
        return HttpBookingRepository(
            base_url=settings.BOOKING_API_BASE_URL or "",
            api_key=settings.BOOKING_API_KEY,
        )
    return MemoryBookingRepository()


def get_business_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def get_trial_policy() -> TrialDetectionPolicy:
    return get_trial_detection_policy(settings.TRIAL_DETECTION_POLICY)


def get_availability_engine() -> DailyAvailabilityEngine:
    return DailyAvailabilityEngine(
        repository=get_repository(),
        timezone=get_business_timezone(),
        slot_duration_minutes=settings.SLOT_DURATION_MINUTES,
        bookable_provider_ids=settings.BOOKABLE_PROVIDER_IDS,
    )


def get_openings_search() -> OpeningsSearch:
    return OpeningsSearch(engine=get_availability_engine())


def get_funnel_service() -> FunnelService:
    return FunnelService(
        repository=get_repository(),
        policy=get_trial_policy(),
        window_days=settings.SECOND_WINDOW_DAYS,
        second_cut_price_cents=settings.SECOND_CUT_PRICE_CENTS,
    )
