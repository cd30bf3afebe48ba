from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, TEXT, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import InvoiceServiceBaseModel


class Invoice(InvoiceServiceBaseModel):
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # One invoice per order, redelivered validation events reuse it
    order_id: Mapped[str] = mapped_column(
        String(36), unique=True, index=True, nullable=False
    )
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)

    # Snapshots taken when the invoice was issued
    user_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    vendor_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    vat_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
