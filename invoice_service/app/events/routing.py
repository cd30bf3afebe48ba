"""
Invoice Service Topic Routing
=============================

Static table binding each consumed topic to its route, payload model and
handler of ``InvoiceEventService``.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Type

from invoice_service.app.core.exceptions import TopicMismatchError
from invoice_service.app.core.settings import get_settings
from invoice_service.app.events.decoder import decode_envelope, decode_payload
from invoice_service.app.events.schemas import (
    DISCOUNT_ORDER_VALIDATION_SUCCEEDED,
    USER_ADDRESS_ARCHIVED,
    USER_ADDRESS_CREATED,
    USER_CREATED,
    VENDOR_ADDRESS_CREATED,
    DiscountValidationSucceededEventData,
    EventEnvelope,
    EventModel,
    Subscription,
    UserAddressArchivedEventData,
    UserAddressEventData,
    UserEventData,
    VendorAddressEventData,
)
from invoice_service.app.utils.logging import setup_invoice_logging as setup_logging

if TYPE_CHECKING:
    from invoice_service.app.services.invoice_service import InvoiceEventService

logger = setup_logging("invoice_service.events.routing", log_level=get_settings().LOG_LEVEL)

EventHandlerMethod = Callable[["InvoiceEventService", Any], Awaitable[Any]]


@dataclass(frozen=True)
class TopicBinding:
    topic: str
    route: str
    payload_model: Type[EventModel]
    handler: EventHandlerMethod


def _handler(name: str) -> EventHandlerMethod:
    async def call(service: "InvoiceEventService", data: Any) -> Any:
        return await getattr(service, name)(data)

    call.__name__ = name
    return call


TOPIC_BINDINGS: Dict[str, TopicBinding] = {
    binding.topic: binding
    for binding in (
        TopicBinding(
            topic=DISCOUNT_ORDER_VALIDATION_SUCCEEDED,
            route="/on-discount-validation-succeeded",
            payload_model=DiscountValidationSucceededEventData,
            handler=_handler("on_discount_validation_succeeded"),
        ),
        TopicBinding(
            topic=VENDOR_ADDRESS_CREATED,
            route="/on-vendor-address-creation-event",
            payload_model=VendorAddressEventData,
            handler=_handler("on_vendor_address_created"),
        ),
        TopicBinding(
            topic=USER_CREATED,
            route="/on-user-creation-event",
            payload_model=UserEventData,
            handler=_handler("on_user_created"),
        ),
        TopicBinding(
            topic=USER_ADDRESS_CREATED,
            route="/on-user-address-creation-event",
            payload_model=UserAddressEventData,
            handler=_handler("on_user_address_created"),
        ),
        TopicBinding(
            topic=USER_ADDRESS_ARCHIVED,
            route="/on-user-address-archived-event",
            payload_model=UserAddressArchivedEventData,
            handler=_handler("on_user_address_archived"),
        ),
    )
}


def list_subscriptions(pubsub_name: str) -> List[Subscription]:
    """Subscriptions announced to the Dapr sidecar, one per binding"""
    return [
        Subscription(pubsub_name=pubsub_name, topic=binding.topic, route=binding.route)
        for binding in TOPIC_BINDINGS.values()
    ]


def ensure_topic(binding: TopicBinding, envelope: EventEnvelope) -> None:
    if envelope.topic != binding.topic:
        raise TopicMismatchError(expected=binding.topic, received=envelope.topic)


async def dispatch(
    binding: TopicBinding, raw_body: bytes, service: "InvoiceEventService"
) -> Any:
    """Decode the body, check its topic and run the bound handler.

    Nothing is read or written before the envelope and payload are valid.
    """
    envelope = decode_envelope(raw_body)
    ensure_topic(binding, envelope)
    data = decode_payload(envelope, binding.payload_model)

    logger.info(
        "Handling event",
        extra={
            "topic": binding.topic,
            "route": binding.route,
            "event_id": envelope.id,
            "handler": binding.handler.__name__,
        },
    )
    return await binding.handler(service, data)
