"""
Health API endpoints
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from invoice_service.app.api.dependencies import (
    get_app_settings,
    get_database_manager,
)
from invoice_service.app.core.database import InvoiceServiceDatabaseManager
from invoice_service.app.core.settings import InvoiceServiceSettings
from invoice_service.app.schemas.invoice import HealthResponse
from invoice_service.app.utils.logging import setup_invoice_logging

logger = setup_invoice_logging("health")

router = APIRouter()

_started_at = time.monotonic()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: InvoiceServiceSettings = Depends(get_app_settings),
    database_manager: InvoiceServiceDatabaseManager = Depends(get_database_manager),
) -> HealthResponse:
    """Health check endpoint for the invoice service."""

    started = time.perf_counter()
    try:
        async with database_manager.async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = {
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        database = {"status": "unhealthy", "error": str(e)}

    result_status = "healthy" if database["status"] == "healthy" else "unhealthy"
    logger.info(f"Health check completed: {result_status}")
    return HealthResponse(
        status=result_status,
        service=settings.SERVICE_NAME,
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=round(time.monotonic() - _started_at, 2),
        database=database,
    )
