from fastapi import FastAPI

from booking_core.api.v1.availability import router as availability_router
from booking_core.api.v1.funnel import router as funnel_router
from booking_core.core.config import settings
from booking_core.core.log_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Booking Core",
    version="1.0.0",
    description="Provider availability, next openings and promotional funnel stage.",
)

app.include_router(availability_router, prefix="/api/v1", tags=["availability"])
app.include_router(funnel_router, prefix="/api/v1", tags=["funnel"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.ENV}
