from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from invoice_service.app.core.exceptions import PersistenceError
from invoice_service.app.models.invoice import Invoice
from invoice_service.app.schemas.invoice import InvoiceDocument

from .statements import dialect_insert


class InvoiceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        try:
            result = await self.session.execute(
                select(Invoice)
                .where(Invoice.id == invoice_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to query invoice `{invoice_id}`.", e)
        return result.scalar_one_or_none()

    async def get_by_order_id(self, order_id: str) -> Optional[Invoice]:
        try:
            result = await self.session.execute(
                select(Invoice)
                .where(Invoice.order_id == order_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to query invoice of order `{order_id}`.", e
            )
        return result.scalar_one_or_none()

    async def create_if_absent(self, document: InvoiceDocument) -> Invoice:
        """Insert the invoice unless its order already has one.

        Returns the stored invoice of the order, which is the given document
        unless a concurrent or earlier delivery stored one first.
        """
        statement = (
            dialect_insert(self.session, Invoice)
            .values(
                id=document.id,
                order_id=document.order_id,
                issued_at=document.issued_at,
                content=document.content,
                user_address=document.user_address.model_dump(mode="json"),
                vendor_address=document.vendor_address.model_dump(mode="json"),
                vat_number=document.vat_number,
            )
            .on_conflict_do_nothing(index_elements=["order_id"])
        )
        try:
            await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to insert invoice for order `{document.order_id}`.", e
            )

        stored = await self.get_by_order_id(document.order_id)
        if stored is None:
            raise PersistenceError(
                f"Invoice for order `{document.order_id}` missing after insert."
            )
        return stored
