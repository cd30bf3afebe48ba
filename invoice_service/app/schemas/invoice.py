from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# --------------------------------------------------------------
# Snapshots resolved for invoice synthesis
# --------------------------------------------------------------


class UserAddressSnapshot(BaseModel):
    id: str
    user_id: str
    street1: str
    street2: str
    city: str
    postal_code: str
    country: str
    company_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class VendorAddressSnapshot(BaseModel):
    id: str
    street1: str
    street2: str
    city: str
    postal_code: str
    country: str
    company_name: str

    model_config = ConfigDict(from_attributes=True)


class CustomerSnapshot(BaseModel):
    id: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class InvoiceDocument(BaseModel):
    """Structured invoice as issued and stored."""

    id: str
    order_id: str
    issued_at: datetime
    content: str
    user_address: UserAddressSnapshot
    vendor_address: VendorAddressSnapshot
    vat_number: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("issued_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite drops the offset, values are stored in UTC
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# --------------------------------------------------------------
# API Schemas
# --------------------------------------------------------------


class InvoiceResponse(InvoiceDocument):
    pass


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    uptime_seconds: float
    database: Dict[str, Any] = {}

    model_config = ConfigDict(from_attributes=True)
