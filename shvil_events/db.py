import logging
import uuid
from typing import List, Optional

from sqlmodel import create_engine, SQLModel, Session, select
from shvil_events.models import Event
from shvil_events.config import settings

logger = logging.getLogger("ShvilEvents.DB")

# Get the DATABASE_URL from our centralized settings
DATABASE_URL = settings.DATABASE_URL
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is not set")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)

def create_db_and_tables():
    logger.info("Creating database and tables...")
    SQLModel.metadata.create_all(engine)

def get_session():
    """
    FastAPI Dependency that provides a database session per request.
    """
    with Session(engine) as session:
        yield session

def save_event(session: Session, event: Event) -> Event:
    """Writes an event record to the log, rolling back on failure."""
    try:
        session.add(event)
        session.commit()
        session.refresh(event)
    except Exception as e:
        logger.error(f"Failed to store event '{event.event_name}': {e}")
        session.rollback()
        raise
    return event

def save_events(session: Session, events: List[Event]) -> int:
    """Writes a batch of event records in one transaction."""
    if not events:
        return 0
    try:
        session.add_all(events)
        session.commit()
    except Exception as e:
        logger.error(f"Failed to store batch of {len(events)} events: {e}")
        session.rollback()
        raise
    logger.info(f"Stored {len(events)} events in the event log.")
    return len(events)

def list_events(
    session: Session,
    session_id: Optional[str] = None,
    user_id: Optional[uuid.UUID] = None,
    limit: int = 100,
) -> List[Event]:
    """Returns logged events, newest first."""
    statement = select(Event)
    if session_id is not None:
        statement = statement.where(Event.session_id == session_id)
    if user_id is not None:
        statement = statement.where(Event.user_id == user_id)
    statement = statement.order_by(Event.timestamp.desc()).limit(limit)
    return list(session.exec(statement).all())
