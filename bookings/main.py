import logging

from fastapi import FastAPI

from bookings.api.v1.lifecycle import router as lifecycle_router
from bookings.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("appointment_id", "status", "trigger", "action", "role", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Appointment Lifecycle", version="1.0.0")

app.include_router(lifecycle_router, prefix="/api/v1/lifecycle", tags=["lifecycle"])

logging.getLogger(__name__).info("Lifecycle service ready (ENV=%s)", settings.ENV)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
