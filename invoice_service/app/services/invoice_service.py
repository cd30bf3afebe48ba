import uuid
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from invoice_service.app.core.exceptions import NotFoundError
from invoice_service.app.core.settings import get_settings
from invoice_service.app.events.event_producers import InvoiceEventProducer
from invoice_service.app.events.schemas import (
    DiscountValidationSucceededEventData,
    UserAddressArchivedEventData,
    UserAddressEventData,
    UserEventData,
    VendorAddressEventData,
)
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

from ..utils.logging import setup_invoice_logging as setup_logging
from .aggregator import InvoiceAggregator
from .invoice_renderer import build_invoice_created_dto, synthesize_invoice

settings = get_settings()
logger = setup_logging("invoice_service.events", log_level=settings.LOG_LEVEL)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _new_invoice_id() -> str:
    return str(uuid.uuid4())


class InvoiceEventService:
    """Handles the events this service is subscribed to, one method per topic."""

    def __init__(
        self,
        session: AsyncSession,
        event_producer: InvoiceEventProducer,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_invoice_id,
    ):
        self.session = session
        self.event_producer = event_producer
        self.clock = clock
        self.id_factory = id_factory
        self.invoice_repository = InvoiceRepository(session)
        self.user_repository = UserRepository(session)
        self.vendor_address_repository = VendorAddressRepository(session)
        self.aggregator = InvoiceAggregator(
            self.user_repository, self.vendor_address_repository
        )

    async def on_discount_validation_succeeded(
        self, data: DiscountValidationSucceededEventData
    ) -> InvoiceDocument:
        """Issue the invoice of a validated order and announce it.

        A redelivered event finds the stored invoice of its order and only
        publishes it again.
        """
        order = data.order
        order_id = str(order.id)

        stored = await self.invoice_repository.get_by_order_id(order_id)
        if stored is None:
            context = await self.aggregator.aggregate(order)
            document = synthesize_invoice(
                order=order,
                context=context,
                invoice_id=self.id_factory(),
                issued_at=self.clock(),
            )
            stored = await self.invoice_repository.create_if_absent(document)
            if stored.id == document.id:
                invoice = document
                logger.info(
                    "Invoice created",
                    extra={"order_id": order_id, "invoice_id": invoice.id},
                )
            else:
                invoice = self._to_document(stored)
                logger.info(
                    "Invoice was created concurrently, reusing it",
                    extra={"order_id": order_id, "invoice_id": invoice.id},
                )
        else:
            invoice = self._to_document(stored)
            logger.info(
                "Invoice already exists for order, publishing again",
                extra={"order_id": order_id, "invoice_id": invoice.id},
            )

        await self.event_producer.publish_invoice_created(
            build_invoice_created_dto(order, invoice)
        )
        return invoice

    async def on_vendor_address_created(self, data: VendorAddressEventData) -> None:
        await self.vendor_address_repository.replace(
            VendorAddressSnapshot(
                id=str(data.id),
                street1=data.street1,
                street2=data.street2,
                city=data.city,
                postal_code=data.postal_code,
                country=data.country,
                company_name=data.company_name,
            )
        )
        logger.info("Vendor address replaced", extra={"vendor_address_id": str(data.id)})

    async def on_user_created(self, data: UserEventData) -> None:
        created = await self.user_repository.create_if_absent(
            CustomerSnapshot(
                id=str(data.id), first_name=data.first_name, last_name=data.last_name
            )
        )
        if created:
            logger.info("User created", extra={"user_id": str(data.id)})
        else:
            logger.info("User already exists, ignoring", extra={"user_id": str(data.id)})

    async def on_user_address_created(self, data: UserAddressEventData) -> None:
        user_id = str(data.user_id)
        # Address events may overtake the creation event of their user
        if await self.user_repository.query_id(user_id) is None:
            raise NotFoundError(f"User with UUID: `{user_id}` not found.")

        await self.user_repository.add_address(
            UserAddressSnapshot(
                id=str(data.id),
                user_id=user_id,
                street1=data.street1,
                street2=data.street2,
                city=data.city,
                postal_code=data.postal_code,
                country=data.country,
                company_name=data.company_name,
            )
        )
        logger.info(
            "User address added",
            extra={"user_id": user_id, "address_id": str(data.id)},
        )

    async def on_user_address_archived(self, data: UserAddressArchivedEventData) -> None:
        removed = await self.user_repository.remove_address(
            str(data.user_id), str(data.id)
        )
        logger.info(
            "User address archived" if removed else "User address already absent",
            extra={"user_id": str(data.user_id), "address_id": str(data.id)},
        )

    @staticmethod
    def _to_document(invoice) -> InvoiceDocument:
        return InvoiceDocument.model_validate(invoice)
