import logging
import uuid
from collections import deque
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from shvil_events.config import settings
from shvil_events.db import save_events
from shvil_events.metadata import utcnow
from shvil_events.models import AnalyticsEvent, SupabaseAnalyticsEvent
from shvil_events.normalization import build_event_record, normalize_event

logger = logging.getLogger("ShvilEvents.Analytics")


def determine_query_type(query: str) -> str:
    """Buckets a search query so the query text itself is never logged."""
    if "restaurant" in query or "food" in query:
        return "food"
    elif "gas" in query or "fuel" in query:
        return "fuel"
    elif "hotel" in query or "lodging" in query:
        return "lodging"
    else:
        return "general"


class Analytics:
    """
    Client-side analytics buffer.
    Keeps the most recent events in memory while enabled. No PII and no
    precise coordinates are ever logged by the helpers below.
    """

    def __init__(self, enabled: Optional[bool] = None, max_events: Optional[int] = None):
        self.is_enabled = settings.ANALYTICS_ENABLED if enabled is None else enabled
        self.max_events = settings.ANALYTICS_MAX_EVENTS if max_events is None else max_events
        self.event_count = 0
        self._events: deque = deque(maxlen=self.max_events)

    def enable(self):
        self.is_enabled = True
        logger.info("Analytics enabled.")

    def disable(self):
        """Stops collecting and drops everything buffered so far."""
        self.is_enabled = False
        self._events.clear()
        logger.info("Analytics disabled, buffered events dropped.")

    def log_event(self, event: AnalyticsEvent):
        if not self.is_enabled:
            return

        # deque drops the oldest entries beyond max_events
        self._events.append(event)
        self.event_count += 1
        logger.debug(f"Logged event '{event.name}' ({self.event_count} total).")

    def _log(self, name: str, properties: Dict[str, Any]):
        self.log_event(AnalyticsEvent(name=name, properties=properties, timestamp=utcnow()))

    def log_screen_view(self, screen: str):
        self._log("screen_view", {"screen": screen})

    def log_feature_usage(self, feature: str):
        self._log("feature_usage", {"feature": feature})

    def log_navigation_start(self, transport_type: str):
        self._log("navigation_start", {"transport_type": transport_type})

    def log_navigation_end(self, duration_seconds: float, distance_meters: float):
        self._log("navigation_end", {
            "duration_minutes": int(duration_seconds / 60),
            "distance_km": int(distance_meters / 1000),
        })

    def log_search_query(self, query: str):
        # Only the length and the bucket, never the query itself
        self._log("search_query", {
            "query_length": len(query),
            "query_type": determine_query_type(query),
        })

    def log_error(self, error: str, context: Optional[str] = None):
        self._log("error", {
            "error": error,
            "context": context if context is not None else "unknown",
        })

    def get_analytics_data(self) -> List[AnalyticsEvent]:
        return list(self._events)

    def clear_data(self):
        self._events.clear()
        self.event_count = 0

    def to_canonical_events(
        self,
        user_id: Optional[uuid.UUID] = None,
        session_id: Optional[str] = None,
    ) -> List[SupabaseAnalyticsEvent]:
        """Normalizes every buffered event, oldest first."""
        return [
            normalize_event(event, user_id=user_id, session_id=session_id)
            for event in self._events
        ]

    def flush_to_event_log(
        self,
        session: Session,
        user_id: Optional[uuid.UUID] = None,
        session_id: Optional[str] = None,
    ) -> int:
        """
        Writes the buffered events to the event log and empties the buffer.
        The buffer is left untouched if the write fails.
        """
        records = [
            build_event_record(event, user_id=user_id, session_id=session_id)
            for event in self._events
        ]
        stored = save_events(session, records)
        self._events.clear()
        return stored


# Shared tracker used across the app
analytics = Analytics()
