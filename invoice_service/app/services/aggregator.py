from dataclasses import dataclass

from invoice_service.app.core.exceptions import NotFoundError
from invoice_service.app.core.settings import get_settings
from invoice_service.app.events.schemas import OrderEventData
from invoice_service.app.repository.user_repository import UserRepository
from invoice_service.app.repository.vendor_address_repository import (
    VendorAddressRepository,
)
from invoice_service.app.schemas.invoice import (
    CustomerSnapshot,
    UserAddressSnapshot,
    VendorAddressSnapshot,
)

from ..utils.logging import setup_invoice_logging as setup_logging

logger = setup_logging("invoice_service.aggregator", log_level=get_settings().LOG_LEVEL)


@dataclass(frozen=True)
class InvoiceContext:
    """Entities referenced by an order that an invoice is rendered from."""

    user_address: UserAddressSnapshot
    vendor_address: VendorAddressSnapshot
    customer: CustomerSnapshot


class InvoiceAggregator:
    """Resolves the ids in an order snapshot into stored records."""

    def __init__(
        self,
        user_repository: UserRepository,
        vendor_address_repository: VendorAddressRepository,
    ):
        self.user_repository = user_repository
        self.vendor_address_repository = vendor_address_repository

    async def aggregate(self, order: OrderEventData) -> InvoiceContext:
        user_address = await self.resolve_invoice_address(str(order.invoice_address_id))
        vendor_address = await self.resolve_vendor_address()
        customer = await self.resolve_customer(str(order.user_id))

        logger.debug(
            "Resolved invoice context",
            extra={
                "order_id": str(order.id),
                "user_id": customer.id,
                "invoice_address_id": user_address.id,
                "address_owner_id": user_address.user_id,
            },
        )
        return InvoiceContext(
            user_address=user_address,
            vendor_address=vendor_address,
            customer=customer,
        )

    async def resolve_invoice_address(self, address_id: str) -> UserAddressSnapshot:
        """Only the matching address and its owner id are returned"""
        address = await self.user_repository.query_address(address_id)
        if address is None:
            raise NotFoundError(f"Address of UUID: `{address_id}` not found.")
        return UserAddressSnapshot.model_validate(address)

    async def resolve_vendor_address(self) -> VendorAddressSnapshot:
        vendor_address = await self.vendor_address_repository.get()
        if vendor_address is None:
            raise NotFoundError("Vendor address is not set locally.")
        return VendorAddressSnapshot.model_validate(vendor_address)

    async def resolve_customer(self, user_id: str) -> CustomerSnapshot:
        user = await self.user_repository.query_id(user_id)
        if user is None:
            raise NotFoundError(f"User with UUID: `{user_id}` not found.")
        return CustomerSnapshot.model_validate(user)
