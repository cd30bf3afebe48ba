import json
from datetime import datetime, timezone

import httpx
import pytest

from invoice_service.app.core.exceptions import PublishError
from invoice_service.app.events.event_producers import (
    DaprEventPublisher,
    InvoiceEventProducer,
)
from invoice_service.app.events.schemas import (
    DiscountValidationSucceededEventData,
    InvoiceCreatedDTO,
    InvoiceDTO,
)


class TestInvoiceEventProducer:
    """Publishing through the Dapr sidecar HTTP API."""

    @pytest.fixture
    def requests(self):
        return []

    def _producer(self, requests, status_code=204):
        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(status_code)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        publisher = DaprEventPublisher(
            client=client,
            dapr_http_endpoint="http://localhost:3500/",
            pubsub_name="pubsub",
        )
        return InvoiceEventProducer(publisher, "invoice/invoice/created")

    @pytest.fixture
    def invoice_created(self, order_payload):
        order = DiscountValidationSucceededEventData.model_validate(
            {"order": order_payload()}
        ).order
        return InvoiceCreatedDTO(
            order=order,
            invoice=InvoiceDTO(
                order_id=order.id,
                issued_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
                content="# Invoice",
            ),
        )

    def test_publish_url(self, requests):
        producer = self._producer(requests)

        assert (
            producer.event_publisher.publish_url("invoice/invoice/created")
            == "http://localhost:3500/v1.0/publish/pubsub/invoice/invoice/created"
        )

    @pytest.mark.asyncio
    async def test_publish_invoice_created_posts_camel_case_json(
        self, ids, requests, invoice_created
    ):
        # Arrange
        producer = self._producer(requests)

        # Act
        await producer.publish_invoice_created(invoice_created)

        # Assert
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == (
            "http://localhost:3500/v1.0/publish/pubsub/invoice/invoice/created"
        )
        body = json.loads(request.content)
        assert body["invoice"] == {
            "orderId": ids["order_id"],
            "issuedAt": "2024-05-01T12:00:00Z",
            "content": "# Invoice",
        }
        assert body["order"]["id"] == ids["order_id"]
        assert body["order"]["invoiceAddressId"] == ids["address_id"]
        assert body["order"]["paymentAuthorization"] == {"cVC": 123}

    @pytest.mark.asyncio
    async def test_non_2xx_response_raises_publish_error(self, requests, invoice_created):
        producer = self._producer(requests, status_code=500)

        with pytest.raises(PublishError, match="500"):
            await producer.publish_invoice_created(invoice_created)

    @pytest.mark.asyncio
    async def test_transport_error_raises_publish_error(self, invoice_created):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        producer = InvoiceEventProducer(
            DaprEventPublisher(client, "http://localhost:3500", "pubsub"),
            "invoice/invoice/created",
        )

        # Act & Assert
        with pytest.raises(PublishError) as exc_info:
            await producer.publish_invoice_created(invoice_created)

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
