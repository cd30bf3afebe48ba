"""
Invoice query endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status

from invoice_service.app.api.dependencies import get_invoice_repository
from invoice_service.app.repository.invoice_repository import InvoiceRepository
from invoice_service.app.schemas.invoice import InvoiceResponse

invoice_router = APIRouter()


@invoice_router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str,
    invoice_repository: InvoiceRepository = Depends(get_invoice_repository),
) -> InvoiceResponse:
    """Get an invoice by its id."""

    invoice = await invoice_repository.get_by_id(invoice_id)
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice {invoice_id} not found",
        )
    return InvoiceResponse.model_validate(invoice)


@invoice_router.get("/orders/{order_id}/invoice", response_model=InvoiceResponse)
async def get_order_invoice(
    order_id: str,
    invoice_repository: InvoiceRepository = Depends(get_invoice_repository),
) -> InvoiceResponse:
    """Get the invoice issued for an order."""

    invoice = await invoice_repository.get_by_order_id(order_id)
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice of order {order_id} not found",
        )
    return InvoiceResponse.model_validate(invoice)
