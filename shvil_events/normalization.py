"""
Turns raw analytics events into the records the backend stores.

`normalize_event` produces the canonical event handed to the transport;
`build_event_record` produces the row for the local event log. Both take
the raw event as is and never fail.
"""

import uuid
from typing import Optional

from shvil_events.coercion import coerce_properties
from shvil_events.metadata import PLATFORM, current_app_version
from shvil_events.models import AnalyticsEvent, Event, SupabaseAnalyticsEvent


def normalize_event(
    event: AnalyticsEvent,
    user_id: Optional[uuid.UUID] = None,
    session_id: Optional[str] = None,
) -> SupabaseAnalyticsEvent:
    """
    Maps a raw event to its canonical, string-valued form.

    `user_id` is accepted for call-site symmetry with `build_event_record`
    but the canonical event carries no user reference. The app version is
    read at call time, never taken from the raw event.
    """
    return SupabaseAnalyticsEvent(
        event_name=event.name,
        properties=coerce_properties(event.properties),
        timestamp=event.timestamp,
        session_id=session_id,
        app_version=current_app_version(),
        platform=PLATFORM,
    )


def build_event_record(
    event: AnalyticsEvent,
    user_id: Optional[uuid.UUID] = None,
    session_id: Optional[str] = None,
) -> Event:
    """Builds an event-log row from a raw event."""
    return Event(
        user_id=user_id,
        event_name=event.name,
        properties=coerce_properties(event.properties),
        timestamp=event.timestamp,
        session_id=session_id,
        app_version=current_app_version(),
    )
