"""
HTTP relay for Shvil analytics events.

Clients post raw events to /track; each one is normalized, written to the
event log and published to Kafka.
"""

import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shvil_events.config import settings
from shvil_events.limiter import limiter
from shvil_events.db import create_db_and_tables
from shvil_events.api import events
from shvil_events.kafka_producer import (
    create_kafka_producer,
    close_kafka_producer,
    set_kafka_producer
)

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger("ShvilEvents.Main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Event log tables and the Kafka producer live as long as the app."""
    create_db_and_tables()
    set_kafka_producer(create_kafka_producer())
    logger.info(
        f"Relay ready: app version {settings.APP_VERSION or 'unknown'}, "
        f"publishing to '{settings.KAFKA_EVENTS_TOPIC}'."
    )
    yield
    close_kafka_producer()
    logger.info("Relay stopped.")

def create_app() -> FastAPI:
    """Builds the relay app with rate limiting, CORS and the event routes."""
    app = FastAPI(
        title="Shvil Events",
        lifespan=lifespan
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # The relay is called from the app and from web dashboards alike
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events.router)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to Shvil Events"}

    return app

app = create_app()
