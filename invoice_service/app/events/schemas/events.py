from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt
from pydantic.alias_generators import to_camel


class EventModel(BaseModel):
    """Base for event payloads: camelCase on the wire, snake_case accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-ready wire representation"""
        return self.model_dump(mode="json", by_alias=True)


# ==============================================
# ENVELOPE
# ==============================================


class EventEnvelope(BaseModel):
    """Relevant part of a Dapr CloudEvent envelope."""

    model_config = ConfigDict(extra="ignore")

    topic: str
    data: Any
    id: Optional[str] = None
    pubsubname: Optional[str] = None


# ==============================================
# ORDER EVENT DATA
# ==============================================


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PLACED = "Placed"
    REJECTED = "Rejected"


class RejectionReason(str, Enum):
    INVALID_ORDER_DATA = "InvalidOrderData"
    INVENTORY_RESERVATION_FAILED = "InventoryReservationFailed"


class PaymentAuthorizationEventData(EventModel):
    """Payment authorization attached to an order.

    Decoded and forwarded with the order snapshot, not used when rendering
    invoices.
    """

    # CVC/CVV number of 3-4 digits, the upstream enum variant `CVC` is keyed `cVC`
    cvc: int = Field(..., ge=0, le=9999, alias="cVC")


class OrderItemEventData(EventModel):
    id: UUID
    created_at: datetime
    product_variant_id: UUID
    product_variant_version_id: UUID
    tax_rate_version_id: UUID
    shopping_cart_item_id: UUID
    count: NonNegativeInt
    compensatable_amount: NonNegativeInt
    shipment_method_id: UUID
    discount_ids: List[UUID]


class OrderEventData(EventModel):
    """Order snapshot carried by the discount validation event."""

    id: UUID
    user_id: UUID
    created_at: datetime
    order_status: OrderStatus
    placed_at: Optional[datetime] = None
    rejection_reason: Optional[RejectionReason] = None
    order_items: List[OrderItemEventData]
    shipment_address_id: UUID
    invoice_address_id: UUID
    # Minor currency units
    compensatable_order_amount: NonNegativeInt
    payment_information_id: UUID
    payment_authorization: Optional[PaymentAuthorizationEventData] = None
    vat_number: Optional[str] = None


class DiscountValidationSucceededEventData(EventModel):
    order: OrderEventData


# ==============================================
# ADDRESS AND USER EVENT DATA
# ==============================================


class VendorAddressEventData(EventModel):
    id: UUID
    street1: str
    street2: str
    city: str
    postal_code: str
    country: str
    company_name: str


class UserEventData(EventModel):
    id: UUID
    first_name: str
    last_name: str


class UserAddressEventData(EventModel):
    id: UUID
    street1: str
    street2: str
    city: str
    postal_code: str
    country: str
    company_name: Optional[str] = None
    user_id: UUID


class UserAddressArchivedEventData(EventModel):
    id: UUID
    user_id: UUID


# ==============================================
# OUTBOUND EVENT DATA
# ==============================================


class InvoiceDTO(EventModel):
    order_id: UUID
    issued_at: datetime
    content: str


class InvoiceCreatedDTO(EventModel):
    order: OrderEventData
    invoice: InvoiceDTO


# ==============================================
# DAPR SUBSCRIPTION PROTOCOL
# ==============================================


class Subscription(EventModel):
    pubsub_name: str
    topic: str
    route: str


class TopicEventResponse(BaseModel):
    # 0 acknowledges the event to Dapr
    status: int = 0


# Topic constants
DISCOUNT_ORDER_VALIDATION_SUCCEEDED = "discount/order/validation-succeeded"
VENDOR_ADDRESS_CREATED = "address/vendor-address/created"
USER_CREATED = "user/user/created"
USER_ADDRESS_CREATED = "address/user-address/created"
USER_ADDRESS_ARCHIVED = "address/user-address/archived"
