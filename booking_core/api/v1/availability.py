from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from booking_core.api.v1.schemas import (
    AvailabilityResponseSchema,
    OpeningsResponseSchema,
    opening_schema,
    slot_schema,
)
from booking_core.application.exceptions import (
    DataIntegrityError,
    ProviderNotBookableError,
    RepositoryUnavailableError,
)
from booking_core.application.use_cases.daily_availability import DailyAvailabilityEngine
from booking_core.application.use_cases.openings_search import OpeningsSearch
from booking_core.core.config import settings
from booking_core.domain.entities.slot import SlotStatus
from booking_core.wiring.dependencies import get_availability_engine, get_openings_search

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/providers/{provider_id}/availability", response_model=AvailabilityResponseSchema)
def availability(
    provider_id: str,
    day: date = Query(..., alias="date"),
    engine: DailyAvailabilityEngine = Depends(get_availability_engine),
):
    try:
        slots = engine.available_slots(provider_id, day)
    except ProviderNotBookableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataIntegrityError as e:
        logger.error("Availability data invalid", extra={"provider_id": provider_id, "date": day.isoformat(), "error": str(e)})
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return AvailabilityResponseSchema(
        provider_id=provider_id,
        date=day,
        timezone=engine.timezone.key,
        slots=[slot_schema(SlotStatus(time=slot, available=True)) for slot in slots],
        total_slots=len(slots),
    )


@router.get("/providers/{provider_id}/slot-board", response_model=AvailabilityResponseSchema)
def slot_board(
    provider_id: str,
    day: date = Query(..., alias="date"),
    engine: DailyAvailabilityEngine = Depends(get_availability_engine),
):
    try:
        board = engine.slot_board(provider_id, day)
    except ProviderNotBookableError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataIntegrityError as e:
        logger.error("Availability data invalid", extra={"provider_id": provider_id, "date": day.isoformat(), "error": str(e)})
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return AvailabilityResponseSchema(
        provider_id=provider_id,
        date=day,
        timezone=engine.timezone.key,
        slots=[slot_schema(status) for status in board],
        total_slots=len(board),
    )


@router.get("/providers/{provider_id}/next-openings", response_model=OpeningsResponseSchema)
def next_openings(
    provider_id: str,
    limit: int | None = Query(None, ge=1, le=50),
    horizon_days: int | None = Query(None, ge=1, le=180),
    search: OpeningsSearch = Depends(get_openings_search),
):
    try:
        openings = search.next_openings(
            provider_id,
            limit=limit or settings.OPENINGS_LIMIT,
            max_days_horizon=horizon_days or settings.OPENINGS_HORIZON_DAYS,
        )
    except ProviderNotBookableError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return OpeningsResponseSchema(
        provider_id=provider_id,
        openings=[opening_schema(opening) for opening in openings],
    )
