import logging

from fastapi import FastAPI

from boardroom.api.health import router as health_router
from boardroom.api.v1.backups import router as backups_router
from boardroom.api.v1.boardrooms import router as boardrooms_router
from boardroom.api.v1.bookings import router as bookings_router
from boardroom.api.v1.notifications import router as notifications_router
from boardroom.api.v1.users import router as users_router
from boardroom.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "boardroom_id", "user_id", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Boardroom Booking", version="1.0.0")

app.include_router(health_router, tags=["health"])
app.include_router(boardrooms_router, tags=["boardrooms"])
app.include_router(bookings_router, tags=["bookings"])
app.include_router(users_router, tags=["users"])
app.include_router(notifications_router, tags=["notifications"])
app.include_router(backups_router, tags=["backups"])
