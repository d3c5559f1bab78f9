import uuid
from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from shvil_events.coercion import coerce_properties
from shvil_events.metadata import new_id, utcnow


class AnalyticsEvent(BaseModel):
    """
    Something that happened in the app, as recorded by the client.
    Property values may be text, integers, reals or anything else;
    they are only turned into text when the event is serialized.
    """

    model_config = ConfigDict(frozen=True)

    # Local handle only, never serialized
    id: uuid.UUID = Field(default_factory=new_id, exclude=True)
    name: str
    properties: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)

    @field_serializer("properties")
    def serialize_properties(self, properties: Dict[str, Any]) -> Dict[str, str]:
        return coerce_properties(properties)
