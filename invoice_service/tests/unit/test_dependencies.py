from datetime import datetime, timezone

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_service.app.api.dependencies import get_async_session
from invoice_service.app.schemas.invoice import InvoiceResponse


class TestSessionDependency:
    @pytest.mark.asyncio
    async def test_session_comes_from_database_manager(self, test_database_manager):
        # Arrange
        calls = []
        open_session = test_database_manager.get_async_session

        async def tracked_session():
            calls.append(True)
            async for session in open_session():
                yield session

        test_database_manager.get_async_session = tracked_session

        # Act
        sessions = get_async_session(test_database_manager)
        session = await sessions.__anext__()
        result = await session.execute(text("SELECT 1"))
        await sessions.aclose()

        # Assert
        assert isinstance(session, AsyncSession)
        assert result.scalar() == 1
        assert calls == [True]


class TestInvoiceResponse:
    @pytest.fixture
    def invoice(self, ids):
        return {
            "id": "invoice-1",
            "order_id": ids["order_id"],
            "issued_at": datetime(2024, 5, 1, 12, 30, 45),
            "content": "# Invoice",
            "user_address": {
                "id": ids["address_id"],
                "user_id": ids["user_id"],
                "street1": "Main St",
                "street2": "1",
                "city": "Town",
                "postal_code": "12345",
                "country": "Germany",
            },
            "vendor_address": {
                "id": ids["vendor_address_id"],
                "street1": "Vendor Way",
                "street2": "7",
                "city": "Capital",
                "postal_code": "10115",
                "country": "Germany",
                "company_name": "Acme",
            },
        }

    def test_naive_issued_at_is_read_as_utc(self, invoice):
        response = InvoiceResponse.model_validate(invoice)

        assert response.issued_at == datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)
        assert response.model_dump(mode="json")["issued_at"] == "2024-05-01T12:30:45Z"

    def test_aware_issued_at_is_kept(self, invoice):
        issued_at = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)

        response = InvoiceResponse.model_validate({**invoice, "issued_at": issued_at})

        assert response.issued_at == issued_at
