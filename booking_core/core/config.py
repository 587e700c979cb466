from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    SLOT_DURATION_MINUTES: int = 30

    SECOND_WINDOW_DAYS: int = 10
    SECOND_CUT_PRICE_CENTS: int = 1000
    TRIAL_DETECTION_POLICY: str = "legacy"  # "legacy" | "explicit"

    OPENINGS_LIMIT: int = 3
    OPENINGS_HORIZON_DAYS: int = 30

    # empty means every provider is bookable
    BOOKABLE_PROVIDER_IDS: list[str] = []

    STORE_PROVIDER: str = "memory"  # "memory" | "json" | "http"
    DATA_FILE: str = "./data/booking.json"
    BOOKING_API_BASE_URL: str | None = None
    BOOKING_API_KEY: str | None = None


settings = Settings()
