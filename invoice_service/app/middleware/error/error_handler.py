import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from invoice_service.app.core.exceptions import InvoiceServiceError
from invoice_service.app.utils.logging import setup_invoice_logging

logger = setup_invoice_logging("invoice_service_error_handler")


class InvoiceServiceErrorHandler:
    """Class to setup error handling middleware for the Invoice Service."""

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        """Setup error handlers for the FastAPI application."""

        @app.exception_handler(InvoiceServiceError)
        async def pipeline_exception_handler(  # type: ignore
            request: Request, exc: InvoiceServiceError
        ) -> Response:
            """Handle event pipeline failures.

            The sidecar only looks at the status code, a bare 500 makes it
            redeliver the event.
            """

            logger.error(
                f"Event handling failed: {exc}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error_kind": exc.kind,
                    "exception_type": type(exc).__name__,
                    "cause": repr(exc.__cause__) if exc.__cause__ else None,
                    "service": "invoice_service",
                    "event_type": "event_pipeline_failed",
                },
            )
            return Response(status_code=500)

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(  # type: ignore
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            """Handle HTTP exceptions."""

            return InvoiceServiceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type="http_error",
                message=str(exc.detail),
                details={"path": request.url.path, "method": request.method},
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(  # type: ignore
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Handle request validation errors."""

            error_details: list[dict[str, str]] = []
            for error in exc.errors():
                error_details.append(
                    {
                        "field": ".".join(str(loc) for loc in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                )

            return InvoiceServiceErrorHandler._create_error_response(
                request=request,
                status_code=422,
                error_type="validation_error",
                message="Request validation failed",
                details={
                    "validation_errors": error_details,
                    "path": request.url.path,
                    "method": request.method,
                },
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(  # type: ignore
            request: Request, exc: Exception
        ) -> JSONResponse:
            """Handle all uncaught exceptions."""

            logger.error(
                "Unhandled exception occurred",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                    "service": "invoice_service",
                    "event_type": "unhandled_exception",
                },
                exc_info=True,
            )

            return InvoiceServiceErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message="An internal server error occurred",
                details={"exception_type": type(exc).__name__},
            )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""

        error_response: Dict[str, Any] = {
            "error": {
                "type": error_type,
                "message": message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path,
                "method": request.method,
            }
        }

        if details:
            error_response["error"]["details"] = details

        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                    "service": "invoice_service",
                    "event_type": "client_error",
                },
            )

        return JSONResponse(status_code=status_code, content=error_response)


def setup_invoice_error_handling(app: FastAPI) -> None:
    """Setup error handling middleware for the Invoice Service."""

    error_handler = InvoiceServiceErrorHandler()
    error_handler.setup_error_handlers(app)

    logger.info(
        "Invoice Service error handling configured",
        extra={"service": "invoice_service", "event_type": "error_handler_setup"},
    )
