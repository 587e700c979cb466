class BookingCoreError(RuntimeError):
    """Base class for errors raised by the booking core."""
    pass


class DataIntegrityError(BookingCoreError):
    """Raised when stored availability or appointment data violates its invariants."""
    pass


class SlotTaken(BookingCoreError):
    """Raised by storage when an active appointment already holds (provider, start instant)."""

    def __init__(self, provider_id: str, start_instant: object) -> None:
        super().__init__(f"Slot already taken for provider {provider_id} at {start_instant}")
        self.provider_id = provider_id
        self.start_instant = start_instant


class RepositoryUnavailableError(BookingCoreError):
    """Raised when the persistence service fails (timeouts, network errors, 5xx)."""
    pass


class ProviderNotBookableError(BookingCoreError):
    """Raised when a provider is outside the configured bookable set."""
    pass
