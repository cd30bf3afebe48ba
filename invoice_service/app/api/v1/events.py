"""
Dapr subscription endpoints

The sidecar reads ``/dapr/subscribe`` once at startup and then delivers each
event of a topic as a POST to the route bound to it.
"""

from typing import List

from fastapi import APIRouter, Depends, Request

from invoice_service.app.api.dependencies import (
    get_app_settings,
    get_invoice_event_service,
)
from invoice_service.app.core.settings import InvoiceServiceSettings
from invoice_service.app.events.routing import (
    TOPIC_BINDINGS,
    TopicBinding,
    dispatch,
    list_subscriptions,
)
from invoice_service.app.events.schemas import Subscription, TopicEventResponse
from invoice_service.app.services.invoice_service import InvoiceEventService

router = APIRouter()


@router.get(
    "/dapr/subscribe",
    response_model=List[Subscription],
    response_model_by_alias=True,
)
async def subscriptions(
    settings: InvoiceServiceSettings = Depends(get_app_settings),
) -> List[Subscription]:
    """Static list of topic subscriptions of this service."""

    return list_subscriptions(settings.DAPR_PUBSUB_NAME)


def _topic_endpoint(binding: TopicBinding):
    # Raw body: malformed events surface as DecodeError, not as a 422
    async def handle_event(
        request: Request,
        service: InvoiceEventService = Depends(get_invoice_event_service),
    ) -> TopicEventResponse:
        await dispatch(binding, await request.body(), service)
        return TopicEventResponse()

    handle_event.__name__ = binding.handler.__name__
    return handle_event


for _binding in TOPIC_BINDINGS.values():
    router.add_api_route(
        _binding.route,
        _topic_endpoint(_binding),
        methods=["POST"],
        response_model=TopicEventResponse,
        summary=f"Handle `{_binding.topic}` events",
    )
