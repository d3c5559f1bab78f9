"""
Unit tests for event normalization.

Covers the canonical event produced for the transport, the event-log
record built alongside it, and the raw event's own serialization.
"""

import json
import uuid
from datetime import datetime

from shvil_events.config import settings
from shvil_events.models import AnalyticsEvent, Event, SupabaseAnalyticsEvent
from shvil_events.normalization import build_event_record, normalize_event


class TestNormalizeEvent:
    """Raw event to canonical event."""

    def test_tap_button_scenario(self, create_raw_event, timestamp, app_version):
        raw = create_raw_event(properties={"count": 3, "label": "ok"})
        canonical = normalize_event(raw)

        assert isinstance(canonical, SupabaseAnalyticsEvent)
        assert canonical.event_name == "tap_button"
        assert canonical.properties == {"count": "3", "label": "ok"}
        assert canonical.timestamp == timestamp
        assert canonical.session_id is None
        assert canonical.app_version == app_version
        assert canonical.platform == "iOS"

    def test_key_set_preserved(self, create_raw_event):
        properties = {"a": 1, "b": 2.0, "c": "x", "d": None, "e": [1, 2], "f": {"g": False}}
        canonical = normalize_event(create_raw_event(properties=properties))
        assert set(canonical.properties) == set(properties)
        assert all(isinstance(v, str) for v in canonical.properties.values())

    def test_sessions_differ_only_in_session_id(self, create_raw_event):
        raw = create_raw_event(properties={"count": 3})
        first = normalize_event(raw, session_id="s-1")
        second = normalize_event(raw, session_id="s-2")

        assert first.session_id == "s-1"
        assert second.session_id == "s-2"
        assert first.model_dump(exclude={"session_id"}) == second.model_dump(exclude={"session_id"})

    def test_app_version_read_at_call_time(self, create_raw_event, monkeypatch):
        raw = create_raw_event()
        monkeypatch.setattr(settings, "APP_VERSION", "2.0.0")
        assert normalize_event(raw).app_version == "2.0.0"
        monkeypatch.setattr(settings, "APP_VERSION", None)
        assert normalize_event(raw).app_version is None

    def test_user_id_not_carried(self, create_raw_event):
        canonical = normalize_event(create_raw_event(), user_id=uuid.uuid4())
        assert "user_id" not in canonical.model_dump()

    def test_empty_name_and_properties(self, create_raw_event):
        canonical = normalize_event(create_raw_event(name="", properties={}))
        assert canonical.event_name == ""
        assert canonical.properties == {}

    def test_wire_shape(self, create_raw_event, timestamp, app_version):
        wire = normalize_event(create_raw_event(properties={"count": 3})).to_wire()

        assert set(wire) == {"eventName", "properties", "timestamp", "sessionId", "appVersion", "platform"}
        assert wire["eventName"] == "tap_button"
        assert wire["properties"] == {"count": "3"}
        assert wire["sessionId"] is None
        assert wire["appVersion"] == app_version
        assert wire["platform"] == "iOS"
        assert datetime.fromisoformat(wire["timestamp"].replace("Z", "+00:00")) == timestamp
        json.dumps(wire)


class TestBuildEventRecord:
    """Raw event to event-log record."""

    def test_fields(self, create_raw_event, timestamp, app_version):
        user_id = uuid.uuid4()
        record = build_event_record(
            create_raw_event(properties={"count": 3, "ratio": 0.5}),
            user_id=user_id,
            session_id="s-1",
        )

        assert isinstance(record, Event)
        assert isinstance(record.id, uuid.UUID)
        assert record.user_id == user_id
        assert record.event_name == "tap_button"
        assert record.properties == {"count": "3", "ratio": "0.5"}
        assert record.timestamp == timestamp
        assert record.session_id == "s-1"
        assert record.app_version == app_version
        assert record.platform == "iOS"

    def test_shares_vocabulary_with_canonical(self, create_raw_event):
        raw = create_raw_event(properties={"count": 3})
        record = build_event_record(raw, session_id="s-1").to_wire()
        canonical = normalize_event(raw, session_id="s-1").to_wire()

        for field in ("eventName", "properties", "sessionId", "appVersion", "platform"):
            assert record[field] == canonical[field]


class TestAnalyticsEventSerialization:
    """The raw event encodes its properties as text."""

    def test_dump_coerces_properties_and_skips_id(self, create_raw_event):
        raw = create_raw_event(properties={"count": 3, "flag": True})
        dumped = raw.model_dump()

        assert set(dumped) == {"name", "properties", "timestamp"}
        assert dumped["properties"] == {"count": "3", "flag": "true"}
        # The in-memory event keeps the original kinds
        assert raw.properties == {"count": 3, "flag": True}

    def test_decoded_properties_are_text(self, create_raw_event):
        raw = create_raw_event(properties={"count": 3, "ratio": 4.0})
        decoded = AnalyticsEvent.model_validate_json(raw.model_dump_json())

        assert decoded.name == raw.name
        assert decoded.timestamp == raw.timestamp
        assert decoded.properties == {"count": "3", "ratio": "4.0"}

    def test_defaults(self):
        event = AnalyticsEvent(name="screen_view")
        assert event.properties == {}
        assert event.timestamp.tzinfo is not None
        assert AnalyticsEvent(name="x").id != event.id
