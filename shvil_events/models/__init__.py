from shvil_events.models.user import User
from shvil_events.models.analytics_event import AnalyticsEvent
from shvil_events.models.event import Event, SupabaseAnalyticsEvent, TrackRequest

__all__ = [
    "User",
    "AnalyticsEvent",
    "Event",
    "SupabaseAnalyticsEvent",
    "TrackRequest",
]
