from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from invoice_service.app.core.exceptions import PersistenceError
from invoice_service.app.models.base import utc_now
from invoice_service.app.models.user import User, UserAddress
from invoice_service.app.schemas.invoice import CustomerSnapshot, UserAddressSnapshot

from .statements import dialect_insert


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def query_id(self, user_id: str) -> Optional[User]:
        try:
            result = await self.session.execute(
                select(User)
                .where(User.id == user_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to query user `{user_id}`.", e)
        return result.scalar_one_or_none()

    async def query_address(self, address_id: str) -> Optional[UserAddress]:
        """Find the address with this id, whichever user owns it"""
        try:
            result = await self.session.execute(
                select(UserAddress)
                .where(UserAddress.id == address_id)
                .order_by(UserAddress.user_id)
                .limit(1)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to query user address `{address_id}`.", e)
        return result.scalar_one_or_none()

    async def create_if_absent(self, user: CustomerSnapshot) -> bool:
        """Insert the user; returns False when the user id already exists"""
        statement = (
            dialect_insert(self.session, User)
            .values(**user.model_dump())
            .on_conflict_do_nothing(index_elements=["id"])
        )
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to insert user `{user.id}`.", e)
        return result.rowcount == 1

    async def add_address(self, address: UserAddressSnapshot) -> None:
        """Add the address to its owner, replacing an address with the same id"""
        fields = address.model_dump()
        statement = (
            dialect_insert(self.session, UserAddress)
            .values(**fields)
            .on_conflict_do_update(
                index_elements=["user_id", "id"],
                set_={**fields, "updated_at": utc_now()},
            )
        )
        try:
            await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to add address `{address.id}` to user `{address.user_id}`.", e
            )

    async def remove_address(self, user_id: str, address_id: str) -> bool:
        """Remove the address from its owner; returns False if it was absent"""
        statement = delete(UserAddress).where(
            UserAddress.user_id == user_id, UserAddress.id == address_id
        )
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to remove address `{address_id}` from user `{user_id}`.", e
            )
        return result.rowcount > 0
