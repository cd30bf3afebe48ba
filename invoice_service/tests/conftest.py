"""
Pytest configuration and fixtures for invoice service tests.
"""

import os
import uuid
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional

import pytest

# Set up test environment variables before importing anything else
os.environ.setdefault("APP_NAME", "Invoice Service Test")
os.environ.setdefault("APP_VERSION", "1.0.0")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SERVICE_NAME", "invoice-service")
os.environ.setdefault("INVOICE_DATABASE_URL", "sqlite+aiosqlite:///test_invoice.db")
os.environ.setdefault("DAPR_HTTP_ENDPOINT", "http://localhost:3500")
os.environ.setdefault("DAPR_PUBSUB_NAME", "pubsub")
os.environ.setdefault("INVOICE_CREATED_TOPIC", "invoice/invoice/created")
os.environ.setdefault("LOG_LEVEL", "INFO")

from invoice_service.app.core.database import InvoiceServiceDatabaseManager  # noqa: E402
from invoice_service.app.events.schemas import (  # noqa: E402
    DISCOUNT_ORDER_VALIDATION_SUCCEEDED,
)


def _uuid() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    """File-backed SQLite database private to one test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'invoice_test.db'}"


@pytest.fixture
async def test_database_manager(
    sqlite_url: str,
) -> AsyncGenerator[InvoiceServiceDatabaseManager, None]:
    """Create test database manager with its tables."""
    manager = InvoiceServiceDatabaseManager(database_url=sqlite_url, echo=False)
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(test_database_manager: InvoiceServiceDatabaseManager) -> Any:
    """Create a test database session with proper cleanup."""
    async with test_database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def ids() -> Dict[str, str]:
    """Identifiers shared by the payload factories of one test."""
    return {
        "order_id": _uuid(),
        "user_id": _uuid(),
        "address_id": _uuid(),
        "vendor_address_id": _uuid(),
        "item_id": _uuid(),
        "product_variant_id": _uuid(),
    }


@pytest.fixture
def user_payload(ids) -> Callable[..., Dict[str, Any]]:
    def build(**overrides: Any) -> Dict[str, Any]:
        payload = {"id": ids["user_id"], "first_name": "Ada", "last_name": "Lovelace"}
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def user_address_payload(ids) -> Callable[..., Dict[str, Any]]:
    def build(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "id": ids["address_id"],
            "userId": ids["user_id"],
            "street1": "Main St",
            "street2": "1",
            "city": "Town",
            "postalCode": "12345",
            "country": "Germany",
            "companyName": None,
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def vendor_address_payload(ids) -> Callable[..., Dict[str, Any]]:
    def build(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "id": ids["vendor_address_id"],
            "street1": "Vendor Way",
            "street2": "7",
            "city": "Capital",
            "postal_code": "10115",
            "country": "Germany",
            "company_name": "Acme",
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def order_payload(ids) -> Callable[..., Dict[str, Any]]:
    def build(
        order_items: Optional[List[Dict[str, Any]]] = None, **overrides: Any
    ) -> Dict[str, Any]:
        if order_items is None:
            order_items = [
                {
                    "id": ids["item_id"],
                    "createdAt": "2024-05-01T10:00:00Z",
                    "productVariantId": ids["product_variant_id"],
                    "productVariantVersionId": _uuid(),
                    "taxRateVersionId": _uuid(),
                    "shoppingCartItemId": _uuid(),
                    "count": 2,
                    "compensatableAmount": 2000,
                    "shipmentMethodId": _uuid(),
                    "discountIds": [],
                }
            ]
        payload = {
            "id": ids["order_id"],
            "userId": ids["user_id"],
            "createdAt": "2024-05-01T10:00:00Z",
            "orderStatus": "Placed",
            "placedAt": "2024-05-01T10:05:00Z",
            "orderItems": order_items,
            "shipmentAddressId": ids["address_id"],
            "invoiceAddressId": ids["address_id"],
            "compensatableOrderAmount": 5000,
            "paymentInformationId": _uuid(),
            "paymentAuthorization": {"cVC": 123},
            "vatNumber": None,
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def envelope() -> Callable[[str, Any], Dict[str, Any]]:
    """Wrap a payload the way the Dapr sidecar delivers it."""

    def build(topic: str, data: Any) -> Dict[str, Any]:
        return {
            "id": _uuid(),
            "specversion": "1.0",
            "source": "test",
            "type": "com.dapr.event.sent",
            "datacontenttype": "application/json",
            "pubsubname": "pubsub",
            "topic": topic,
            "data": data,
        }

    return build


@pytest.fixture
def validation_succeeded_envelope(envelope, order_payload):
    def build(**order_overrides: Any) -> Dict[str, Any]:
        return envelope(
            DISCOUNT_ORDER_VALIDATION_SUCCEEDED,
            {"order": order_payload(**order_overrides)},
        )

    return build
