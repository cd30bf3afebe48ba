from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, attribute_keyed_dict, mapped_column, relationship

from .base import InvoiceServiceBaseModel


class User(InvoiceServiceBaseModel):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    # Addresses keyed by address id
    addresses: Mapped[dict[str, "UserAddress"]] = relationship(
        "UserAddress",
        back_populates="user",
        collection_class=attribute_keyed_dict("id"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class UserAddress(InvoiceServiceBaseModel):
    __tablename__ = "user_addresses"

    # Composite key: an address id is unique within its owning user
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(36), primary_key=True, index=True)

    street1: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    street2: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="addresses")
