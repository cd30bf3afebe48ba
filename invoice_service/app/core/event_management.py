"""
Invoice Service Event Management
Creates and closes the outbound event publishing infrastructure.
"""

import httpx

from ..events.event_producers import DaprEventPublisher, InvoiceEventProducer
from ..utils.logging import setup_invoice_logging as setup_logging
from .settings import InvoiceServiceSettings, get_settings

logger = setup_logging("invoice_service.events", log_level=get_settings().LOG_LEVEL)


def init_events(settings: InvoiceServiceSettings) -> InvoiceEventProducer:
    """Initialize event publishing infrastructure"""

    client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.DAPR_PUBLISH_TIMEOUT),
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
    )
    publisher = DaprEventPublisher(
        client=client,
        dapr_http_endpoint=settings.DAPR_HTTP_ENDPOINT,
        pubsub_name=settings.DAPR_PUBSUB_NAME,
    )

    logger.info(
        "Event publishing infrastructure initialized",
        extra={
            "operation": "init_events",
            "dapr_http_endpoint": settings.DAPR_HTTP_ENDPOINT,
            "pubsub_name": settings.DAPR_PUBSUB_NAME,
            "invoice_created_topic": settings.INVOICE_CREATED_TOPIC,
            "event_type": "event_infrastructure_init",
        },
    )
    return InvoiceEventProducer(publisher, settings.INVOICE_CREATED_TOPIC)


async def close_events(event_producer: InvoiceEventProducer) -> None:
    """Close event publishing infrastructure"""

    await event_producer.event_publisher.client.aclose()
    logger.info(
        "Event publishing infrastructure closed",
        extra={
            "operation": "close_events",
            "event_type": "event_infrastructure_shutdown",
        },
    )
