import logging

from fastapi import FastAPI

from quotewizard.api.v1.wizard import router as wizard_router
from quotewizard.core.config import settings

LOG_CONTEXT_KEYS = ("session_id", "step_id", "product_id", "channel", "reason")


class ContextFormatter(logging.Formatter):
    """Appends wizard context passed through `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in LOG_CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{line} | {' '.join(context)}" if context else line


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Quote Builder Wizard", version="1.0.0")
app.include_router(wizard_router, prefix="/api/v1/wizard", tags=["wizard"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
