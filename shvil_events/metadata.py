import uuid
from datetime import datetime, timezone
from typing import Optional

from shvil_events.config import settings

# Build target of the client; every event is stamped with it
PLATFORM = "iOS"


def current_app_version() -> Optional[str]:
    """
    Returns the app version from the app metadata.
    Read on every call so a reloaded setting is picked up immediately.
    """
    return settings.APP_VERSION


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> uuid.UUID:
    return uuid.uuid4()
