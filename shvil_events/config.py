from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional

class Settings(BaseSettings):
    """Configuration settings for the application, loaded from .env file."""

    # Application Settings
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # App metadata (the shipped bundle version, stamped on every event)
    APP_VERSION: Optional[str] = None

    # Event log database
    DATABASE_URL: str = "sqlite:///./shvil_events.db"

    # Rate limiting
    RATELIMIT_ENABLED: bool = True
    DEFAULT_RATELIMIT: str = "1000/minute"
    TRACK_ENDPOINT_RATELIMIT: str = "10/second"

    # Kafka Settings
    KAFKA_BOOTSTRAP_SERVERS: str = "kafka:29092"
    KAFKA_EVENTS_TOPIC: str = "analytics_events"
    KAFKA_CONNECT_RETRIES: int = 5
    KAFKA_RETRY_BACKOFF_SECONDS: float = 5.0

    # Client-side analytics tracker
    ANALYTICS_ENABLED: bool = False
    ANALYTICS_MAX_EVENTS: int = 1000

    class Config:
        env_file = Path(__file__).resolve().parent.parent / ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore" # Ignore extra fields from .env

# Create a single, globally importable settings instance
settings = Settings()
