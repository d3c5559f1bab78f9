import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shvil_events.metadata import new_id, utcnow

GUEST_EMAIL = "guest@shvil.app"
GUEST_DISPLAY_NAME = "Guest"


class User(BaseModel):
    """
    A signed-in user or a guest.
    Produced by the auth flow (or `User.guest()`) and never mutated afterwards.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: uuid.UUID = Field(default_factory=new_id)
    email: str
    display_name: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    is_guest: bool = False

    @classmethod
    def guest(cls) -> "User":
        """Returns a new guest identity with a fresh id."""
        return cls(email=GUEST_EMAIL, display_name=GUEST_DISPLAY_NAME, is_guest=True)

    @property
    def display_name_or_email(self) -> str:
        return self.display_name if self.display_name is not None else self.email

    @property
    def is_authenticated(self) -> bool:
        return not self.is_guest

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
