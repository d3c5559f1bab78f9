import logging
import json
import time
from kafka import KafkaProducer
from kafka.errors import NoBrokersAvailable

from shvil_events.config import settings
from shvil_events.models import SupabaseAnalyticsEvent

logger =  logging.getLogger("ShvilEvents.KafkaProducer")

# Singleton instance of the producer used globally
_producer_instance = {"producer": None}

def create_kafka_producer() -> KafkaProducer:
    """
    Create and returns a KafkaProducer instance.
    Retries while brokers are starting up, up to KAFKA_CONNECT_RETRIES attempts.
    """
    logger.info("Attempting to create KafkaProducer...")
    attempts = max(1, settings.KAFKA_CONNECT_RETRIES)
    for attempt in range(1, attempts + 1):
        try:
            producer = KafkaProducer(
                bootstrap_servers = settings.KAFKA_BOOTSTRAP_SERVERS,
                value_serializer = lambda v: json.dumps(v).encode('utf-8'),
                retries = 5,
                retry_backoff_ms = 1000,
                acks = 'all',
                client_id = 'shvil-events-producer'
            )
            logger.info("KafkaProducer connection ESTABLISHED")
            return producer
        except NoBrokersAvailable:
            if attempt == attempts:
                logger.error(f"Kafka brokers still not available after {attempts} attempts.")
                raise
            logger.warning(
                f"Kafka brokers are not available (attempt {attempt}/{attempts}). "
                f"Retrying in {settings.KAFKA_RETRY_BACKOFF_SECONDS}s..."
            )
            time.sleep(settings.KAFKA_RETRY_BACKOFF_SECONDS)


def get_kafka_producer() -> KafkaProducer:
    """
    Return the singleton KafkaProducer instance.
    """

    # Fallback only, the app lifespan normally sets the producer up
    if _producer_instance["producer"] is None:
        logger.warning("KafkaProducer not initialized. Initializing now...")
        _producer_instance["producer"] = create_kafka_producer()

    return _producer_instance["producer"]

def set_kafka_producer(producer: KafkaProducer):
    """Sets the global producer instance"""
    _producer_instance["producer"] = producer


def close_kafka_producer():
    """
    Flush and closes the singleton KafkaProducer connection.
    """

    producer = _producer_instance["producer"]
    if producer:
        logger.info("Flushing and closing KafkaProducer...")
        producer.flush()
        producer.close()
        _producer_instance["producer"] = None
        logger.info("KafkaProducer Closed.")


def publish_event(producer: KafkaProducer, event: SupabaseAnalyticsEvent):
    """
    Sends a canonical event to the events topic.
    Delivery guarantees are left to the producer's own retries; KafkaError propagates.
    """
    producer.send(settings.KAFKA_EVENTS_TOPIC, value=event.to_wire())
    logger.debug(f"Published '{event.event_name}' to {settings.KAFKA_EVENTS_TOPIC}.")
