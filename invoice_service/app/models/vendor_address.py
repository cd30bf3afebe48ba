from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import InvoiceServiceBaseModel

VENDOR_ADDRESS_SLOT = 1


class VendorAddress(InvoiceServiceBaseModel):
    """The vendor address printed on every invoice.

    The table holds a single row: its primary key can only take the value of
    ``VENDOR_ADDRESS_SLOT``.
    """

    __tablename__ = "vendor_address"
    __table_args__ = (
        CheckConstraint(f"slot = {VENDOR_ADDRESS_SLOT}", name="vendor_address_single_slot"),
    )

    slot: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=VENDOR_ADDRESS_SLOT
    )
    id: Mapped[str] = mapped_column(String(36), nullable=False)

    street1: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    street2: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    company_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
