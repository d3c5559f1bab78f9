import uuid
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import JSON
from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shvil_events.metadata import PLATFORM, current_app_version, new_id, utcnow

class Event(SQLModel, table=True):
    """
    Represents a single logged event in the events table.
    Properties are already text; the user is referenced by id only.
    """

    __tablename__ = "events"

    id: uuid.UUID = Field(
        default_factory=new_id,
        primary_key=True,
        index=True,
        nullable=False
    )

    # Weak reference, users live outside this store
    user_id: Optional[uuid.UUID] = Field(default=None, index=True)

    event_name: str = Field(index=True)
    properties: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON))

    timestamp: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        index=True
    )

    session_id: Optional[str] = Field(default=None, index=True)
    app_version: Optional[str] = Field(default_factory=current_app_version)
    platform: str = Field(default=PLATFORM)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "userId": str(self.user_id) if self.user_id else None,
            "eventName": self.event_name,
            "properties": dict(self.properties or {}),
            "timestamp": self.timestamp.isoformat(),
            "sessionId": self.session_id,
            "appVersion": self.app_version,
            "platform": self.platform,
        }

class SupabaseAnalyticsEvent(BaseModel):
    """
    Normalized analytics event, ready to hand to the transport.
    Field names on the wire are camelCase to match the backend table.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    event_name: str
    properties: Dict[str, str]
    timestamp: datetime
    session_id: Optional[str] = None
    app_version: Optional[str] = None
    platform: str = PLATFORM

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

class TrackRequest(SQLModel):
    """
    The data model the client sends to the /track endpoint.
    """
    name: str
    properties: Dict[str, Any] = {}
    timestamp: Optional[datetime] = None
    session_id: Optional[str] = None
    user_id: Optional[uuid.UUID] = None
