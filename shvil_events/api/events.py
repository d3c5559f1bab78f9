import logging
from fastapi import (
    APIRouter,
    Depends,
    Query,
    Request,
    status,
    HTTPException
)
from kafka import KafkaProducer
from kafka.errors import KafkaError
from sqlmodel import Session
from typing import Optional
import uuid

from shvil_events.kafka_producer import get_kafka_producer, publish_event
from shvil_events.db import get_session, save_event, list_events
from shvil_events.metadata import utcnow
from shvil_events.models import AnalyticsEvent, TrackRequest
from shvil_events.normalization import normalize_event, build_event_record
from shvil_events.limiter import limiter
from shvil_events.config import settings

# Create an APIRouter
router = APIRouter(
    tags=["Events"]
)

logger = logging.getLogger("ShvilEvents.API")

# API Endpoints

@router.post("/track", status_code=status.HTTP_202_ACCEPTED)
@limiter.limit(settings.TRACK_ENDPOINT_RATELIMIT)
def track_event(
    request: Request,
    event_data: TrackRequest,
    session: Session = Depends(get_session),
    producer: KafkaProducer = Depends(get_kafka_producer)
):
    """
    Endpoint to log a new analytics event.
    The raw event is normalized, written to the event log and
    published to Kafka. Returns the canonical event that was sent.
    """

    raw_event = AnalyticsEvent(
        name=event_data.name,
        properties=event_data.properties or {},
        timestamp=event_data.timestamp or utcnow()
    )
    canonical = normalize_event(
        raw_event,
        user_id=event_data.user_id,
        session_id=event_data.session_id
    )

    try:
        save_event(
            session,
            build_event_record(
                raw_event,
                user_id=event_data.user_id,
                session_id=event_data.session_id
            )
        )
    except Exception:
        # save_event has already logged the cause
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='An unexpected error occurred'
        )

    # Send to Kafka
    try:
        publish_event(producer, canonical)
    except KafkaError as e:
        logger.error(f'CRITICAL: Failed to send event to Kafka: {e}')
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Event delivery is temporarily unavailable. Please try again later.'
        )
    except Exception as e:
        logger.error(f'Unexpected error sending to Kafka: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='An unexpected error occurred'
        )

    return {"message": "Event accepted", "event": canonical.to_wire()}


@router.get("/events")
def get_events(
    session: Session = Depends(get_session),
    session_id: Optional[str] = Query(None, description="Only events from this session"),
    user_id: Optional[uuid.UUID] = Query(None, description="Only events attributed to this user"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of events to return")
):
    """
    List logged events, newest first.
    """
    events = list_events(session, session_id=session_id, user_id=user_id, limit=limit)
    return [event.to_wire() for event in events]
