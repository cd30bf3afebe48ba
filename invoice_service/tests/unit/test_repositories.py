from datetime import datetime, timezone

import pytest

from invoice_service.app.repository.invoice_repository import InvoiceRepository
from invoice_service.app.repository.user_repository import UserRepository
from invoice_service.app.repository.vendor_address_repository import (
    VendorAddressRepository,
)
from invoice_service.app.schemas.invoice import (
    CustomerSnapshot,
    InvoiceDocument,
    UserAddressSnapshot,
    VendorAddressSnapshot,
)


def _user_address(user_id: str, address_id: str, **overrides) -> UserAddressSnapshot:
    fields = {
        "id": address_id,
        "user_id": user_id,
        "street1": "Main St",
        "street2": "1",
        "city": "Town",
        "postal_code": "12345",
        "country": "Germany",
        "company_name": None,
    }
    fields.update(overrides)
    return UserAddressSnapshot(**fields)


def _vendor_address(vendor_address_id: str, **overrides) -> VendorAddressSnapshot:
    fields = {
        "id": vendor_address_id,
        "street1": "Vendor Way",
        "street2": "7",
        "city": "Capital",
        "postal_code": "10115",
        "country": "Germany",
        "company_name": "Acme",
    }
    fields.update(overrides)
    return VendorAddressSnapshot(**fields)


class TestVendorAddressRepository:
    @pytest.mark.asyncio
    async def test_get_before_any_event_returns_none(self, db_session):
        assert await VendorAddressRepository(db_session).get() is None

    @pytest.mark.asyncio
    async def test_replace_keeps_single_latest_address(self, db_session):
        # Arrange
        repository = VendorAddressRepository(db_session)

        # Act
        await repository.replace(_vendor_address("v-1", company_name="Acme"))
        await repository.replace(_vendor_address("v-2", company_name="Globex"))
        await repository.replace(_vendor_address("v-3", company_name="Initech", city="Austin"))

        # Assert
        stored = await repository.get()
        assert stored.id == "v-3"
        assert stored.company_name == "Initech"
        assert stored.city == "Austin"
        assert stored.slot == 1


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_create_if_absent_ignores_duplicate(self, db_session, ids):
        # Arrange
        repository = UserRepository(db_session)
        user = CustomerSnapshot(id=ids["user_id"], first_name="Ada", last_name="Lovelace")

        # Act
        first = await repository.create_if_absent(user)
        second = await repository.create_if_absent(
            user.model_copy(update={"first_name": "Grace"})
        )

        # Assert
        assert first is True
        assert second is False
        stored = await repository.query_id(ids["user_id"])
        assert stored.first_name == "Ada"

    @pytest.mark.asyncio
    async def test_add_address_is_keyed_by_address_id(self, db_session, ids):
        # Arrange
        repository = UserRepository(db_session)
        user_id = ids["user_id"]
        await repository.create_if_absent(
            CustomerSnapshot(id=user_id, first_name="Ada", last_name="Lovelace")
        )

        # Act
        await repository.add_address(_user_address(user_id, "a-1"))
        await repository.add_address(_user_address(user_id, "a-1", city="Village"))
        await repository.add_address(_user_address(user_id, "a-2"))

        # Assert
        user = await repository.query_id(user_id)
        assert set(user.addresses) == {"a-1", "a-2"}
        assert user.addresses["a-1"].city == "Village"

    @pytest.mark.asyncio
    async def test_query_address_returns_owner(self, db_session, ids):
        # Arrange
        repository = UserRepository(db_session)
        user_id = ids["user_id"]
        await repository.create_if_absent(
            CustomerSnapshot(id=user_id, first_name="Ada", last_name="Lovelace")
        )
        await repository.add_address(_user_address(user_id, ids["address_id"]))

        # Act
        address = await repository.query_address(ids["address_id"])
        missing = await repository.query_address("unknown")

        # Assert
        assert address.user_id == user_id
        assert address.street1 == "Main St"
        assert missing is None

    @pytest.mark.asyncio
    async def test_remove_address_only_removes_match(self, db_session, ids):
        # Arrange
        repository = UserRepository(db_session)
        user_id = ids["user_id"]
        await repository.create_if_absent(
            CustomerSnapshot(id=user_id, first_name="Ada", last_name="Lovelace")
        )
        await repository.add_address(_user_address(user_id, "a-1"))
        await repository.add_address(_user_address(user_id, "a-2"))

        # Act
        removed = await repository.remove_address(user_id, "a-1")
        removed_again = await repository.remove_address(user_id, "a-1")
        removed_unknown = await repository.remove_address(user_id, "a-404")

        # Assert
        assert removed is True
        assert removed_again is False
        assert removed_unknown is False
        user = await repository.query_id(user_id)
        assert set(user.addresses) == {"a-2"}


class TestInvoiceRepository:
    @pytest.fixture
    def document(self, ids):
        def build(invoice_id: str, content: str = "content") -> InvoiceDocument:
            return InvoiceDocument(
                id=invoice_id,
                order_id=ids["order_id"],
                issued_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
                content=content,
                user_address=_user_address(ids["user_id"], ids["address_id"]),
                vendor_address=_vendor_address(ids["vendor_address_id"]),
                vat_number=None,
            )

        return build

    @pytest.mark.asyncio
    async def test_create_if_absent_is_unique_per_order(self, db_session, ids, document):
        # Arrange
        repository = InvoiceRepository(db_session)

        # Act
        first = await repository.create_if_absent(document("i-1", "first"))
        second = await repository.create_if_absent(document("i-2", "second"))

        # Assert
        assert first.id == "i-1"
        assert second.id == "i-1"
        assert second.content == "first"
        assert await repository.get_by_id("i-2") is None

    @pytest.mark.asyncio
    async def test_stored_snapshots(self, db_session, ids, document):
        # Arrange
        repository = InvoiceRepository(db_session)
        await repository.create_if_absent(document("i-1"))

        # Act
        stored = await repository.get_by_order_id(ids["order_id"])

        # Assert
        assert stored.id == "i-1"
        assert stored.user_address["id"] == ids["address_id"]
        assert stored.user_address["user_id"] == ids["user_id"]
        assert stored.vendor_address["company_name"] == "Acme"
        assert stored.vat_number is None
