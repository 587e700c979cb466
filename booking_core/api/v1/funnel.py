from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from booking_core.api.v1.schemas import (
    BookingOfferResponseSchema,
    FunnelResponseSchema,
    booking_offer_schema,
    funnel_schema,
)
from booking_core.application.exceptions import DataIntegrityError, RepositoryUnavailableError
from booking_core.application.use_cases.funnel import FunnelService
from booking_core.wiring.dependencies import get_funnel_service

router = APIRouter()


@router.get("/clients/{client_id}/funnel", response_model=FunnelResponseSchema)
def client_funnel(
    client_id: str,
    service: FunnelService = Depends(get_funnel_service),
):
    try:
        result = service.compute_funnel_stage(client_id)
    except DataIntegrityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return funnel_schema(client_id, result)


@router.get("/clients/{client_id}/booking-offer", response_model=BookingOfferResponseSchema)
def client_booking_offer(
    client_id: str,
    service: FunnelService = Depends(get_funnel_service),
):
    try:
        offer = service.booking_offer(client_id)
    except DataIntegrityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return booking_offer_schema(client_id, offer)
