"""
Invoice Service Event Schemas
=============================

Payload schemas of the consumed topics and of the published
``invoice created`` event.
"""

from .events import (
    DISCOUNT_ORDER_VALIDATION_SUCCEEDED,
    USER_ADDRESS_ARCHIVED,
    USER_ADDRESS_CREATED,
    USER_CREATED,
    VENDOR_ADDRESS_CREATED,
    DiscountValidationSucceededEventData,
    EventEnvelope,
    EventModel,
    InvoiceCreatedDTO,
    InvoiceDTO,
    OrderEventData,
    OrderItemEventData,
    OrderStatus,
    PaymentAuthorizationEventData,
    RejectionReason,
    Subscription,
    TopicEventResponse,
    UserAddressArchivedEventData,
    UserAddressEventData,
    UserEventData,
    VendorAddressEventData,
)

__all__ = [
    "DISCOUNT_ORDER_VALIDATION_SUCCEEDED",
    "USER_ADDRESS_ARCHIVED",
    "USER_ADDRESS_CREATED",
    "USER_CREATED",
    "VENDOR_ADDRESS_CREATED",
    "DiscountValidationSucceededEventData",
    "EventEnvelope",
    "EventModel",
    "InvoiceCreatedDTO",
    "InvoiceDTO",
    "OrderEventData",
    "OrderItemEventData",
    "OrderStatus",
    "PaymentAuthorizationEventData",
    "RejectionReason",
    "Subscription",
    "TopicEventResponse",
    "UserAddressArchivedEventData",
    "UserAddressEventData",
    "UserEventData",
    "VendorAddressEventData",
]
