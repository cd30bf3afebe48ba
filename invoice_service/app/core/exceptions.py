"""
Invoice Service pipeline errors.

Every stage of event handling raises a subclass of ``InvoiceServiceError``.
The error handler turns all of them into the same bare HTTP 500, so the
broker redelivers the event.
"""

from typing import Optional


class InvoiceServiceError(Exception):
    """Base class for event pipeline failures."""

    kind = "invoice_service_error"

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class TopicMismatchError(InvoiceServiceError):
    """Envelope topic differs from the topic bound to the route."""

    kind = "topic_mismatch"

    def __init__(self, expected: str, received: Optional[str]) -> None:
        super().__init__(f"Expected topic `{expected}`, received `{received}`.")
        self.expected = expected
        self.received = received


class DecodeError(InvoiceServiceError):
    """Envelope or payload is malformed or misses required fields."""

    kind = "decode_error"


class NotFoundError(InvoiceServiceError):
    """A referenced user, user address or vendor address does not exist."""

    kind = "not_found"


class PersistenceError(InvoiceServiceError):
    """A store read or write failed."""

    kind = "persistence_error"


class PublishError(InvoiceServiceError):
    """The outbound publish call to the broker failed."""

    kind = "publish_error"
