"""
Invoice Service Event Producers
===============================

Publishes events through the Dapr sidecar's HTTP publish API.
"""

from typing import Any, Dict

import httpx

from invoice_service.app.core.exceptions import PublishError
from invoice_service.app.core.settings import get_settings
from invoice_service.app.events.schemas import EventModel, InvoiceCreatedDTO
from invoice_service.app.utils.logging import setup_invoice_logging as setup_logging

logger = setup_logging(
    "invoice_service.events.producers", log_level=get_settings().LOG_LEVEL
)


class DaprEventPublisher:
    """Posts JSON events to ``/v1.0/publish/<pubsub>/<topic>`` on the sidecar."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        dapr_http_endpoint: str,
        pubsub_name: str,
    ):
        self.client = client
        self.dapr_http_endpoint = dapr_http_endpoint.rstrip("/")
        self.pubsub_name = pubsub_name

    def publish_url(self, topic: str) -> str:
        return f"{self.dapr_http_endpoint}/v1.0/publish/{self.pubsub_name}/{topic}"

    async def publish(self, topic: str, event: EventModel) -> None:
        url = self.publish_url(topic)
        try:
            response = await self.client.post(url, json=event.to_dict())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PublishError(
                f"Broker rejected event on `{topic}` with status "
                f"{e.response.status_code}.",
                e,
            )
        except httpx.HTTPError as e:
            raise PublishError(f"Failed to publish event on `{topic}`: {e}", e)


class InvoiceEventProducer:
    """Handles invoice lifecycle events"""

    def __init__(self, event_publisher: DaprEventPublisher, invoice_created_topic: str):
        self.event_publisher = event_publisher
        self.invoice_created_topic = invoice_created_topic

    async def _publish_event(
        self,
        event: EventModel,
        topic: str,
        event_name: str,
        log_data: Dict[str, Any],
    ) -> None:
        try:
            await self.event_publisher.publish(topic, event)
            logger.info(f"Published {event_name} event.", extra=log_data)
        except PublishError as e:
            logger.error(
                f"Failed to publish {event_name} event: {e}",
                extra={**log_data, "topic": topic},
            )
            raise

    async def publish_invoice_created(self, invoice_created: InvoiceCreatedDTO) -> None:
        """Publish the invoice created event for the order context"""
        await self._publish_event(
            event=invoice_created,
            topic=self.invoice_created_topic,
            event_name="invoice created",
            log_data={
                "order_id": str(invoice_created.invoice.order_id),
                "user_id": str(invoice_created.order.user_id),
            },
        )
