import logging

# record attributes passed through `extra=` by the use cases and stores
CONTEXT_KEYS = (
    "provider_id",
    "client_id",
    "appointment_id",
    "date",
    "day_name",
    "local_start",
    "stage",
    "policy",
    "reason",
    "found",
    "limit",
    "candidates",
    "collection",
    "path",
    "base_url",
    "status_code",
    "error",
)


class ContextFormatter(logging.Formatter):
    """Appends known context attributes to the message as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(context)}" if context else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
