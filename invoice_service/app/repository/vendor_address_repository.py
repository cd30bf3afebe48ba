from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from invoice_service.app.core.exceptions import PersistenceError
from invoice_service.app.models.base import utc_now
from invoice_service.app.models.vendor_address import VENDOR_ADDRESS_SLOT, VendorAddress
from invoice_service.app.schemas.invoice import VendorAddressSnapshot

from .statements import dialect_insert


class VendorAddressRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> Optional[VendorAddress]:
        """Get the current vendor address, if one was ever created"""
        try:
            result = await self.session.execute(
                select(VendorAddress)
                .where(VendorAddress.slot == VENDOR_ADDRESS_SLOT)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to query vendor address.", e)
        return result.scalar_one_or_none()

    async def replace(self, vendor_address: VendorAddressSnapshot) -> None:
        """Store the vendor address, overwriting every field of the previous one"""
        fields = vendor_address.model_dump()
        statement = (
            dialect_insert(self.session, VendorAddress)
            .values(slot=VENDOR_ADDRESS_SLOT, **fields)
            .on_conflict_do_update(
                index_elements=["slot"],
                set_={**fields, "updated_at": utc_now()},
            )
        )
        try:
            await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError("Failed to upsert vendor address.", e)
