"""
Invoice Service Event Decoder
=============================

Parses Dapr envelopes and validates their payload against the model bound
to the topic.
"""

from typing import Type, TypeVar

from pydantic import ValidationError

from invoice_service.app.core.exceptions import DecodeError
from invoice_service.app.events.schemas import EventEnvelope, EventModel

PayloadT = TypeVar("PayloadT", bound=EventModel)


def decode_envelope(raw_body: bytes) -> EventEnvelope:
    """Parse the raw request body into an envelope with ``topic`` and ``data``"""
    try:
        return EventEnvelope.model_validate_json(raw_body)
    except ValidationError as e:
        raise DecodeError(
            f"Invalid event envelope: {e.error_count()} validation error(s).", e
        )


def decode_payload(envelope: EventEnvelope, model: Type[PayloadT]) -> PayloadT:
    try:
        return model.model_validate(envelope.data)
    except ValidationError as e:
        raise DecodeError(
            f"Invalid `{envelope.topic}` payload for {model.__name__}: "
            f"{e.error_count()} validation error(s).",
            e,
        )
