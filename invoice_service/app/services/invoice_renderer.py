"""
Invoice synthesis.

Pure functions: the same order, context, invoice id and issue time always
produce the same invoice. Nothing here touches the database or the network.
"""

from datetime import datetime
from typing import Iterable

from jinja2 import DictLoader, Environment, StrictUndefined

from invoice_service.app.events.schemas import (
    InvoiceCreatedDTO,
    InvoiceDTO,
    OrderEventData,
    OrderItemEventData,
)
from invoice_service.app.schemas.invoice import (
    CustomerSnapshot,
    InvoiceDocument,
    UserAddressSnapshot,
    VendorAddressSnapshot,
)

from .aggregator import InvoiceContext

INVOICE_TERMS = (
    "This invoice is created according to the company's terms and conditions "
    "specified on the website."
)
ISSUED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"
VAT_NUMBER_PLACEHOLDER = "-"

ORDER_ITEMS_TABLE_HEADER = (
    "| Item UUID | Product variant UUID | count | Compensatable amount |\n"
    "| --- | --- | --- | --- |\n"
)

ORDER_ITEMS_TEMPLATE = (
    ORDER_ITEMS_TABLE_HEADER
    + "{% for item in order_items %}"
    "| {{ item.id }} | {{ item.product_variant_id }} | {{ item.count }} "
    "| {{ item.compensatable_amount }} |\n"
    "{% endfor %}"
)

INVOICE_TEMPLATE = """
# Invoice

### Company information:
{{ vendor_address.company_name }}
{{ vendor_address.street1 }}, {{ vendor_address.street2 }}
{{ vendor_address.city }}, {{ vendor_address.country }}

VAT number: {{ vat_number }}

### Customer information:
ID: {{ customer.id }}
Name: {{ customer.first_name }}, {{ customer.last_name }}
Address:
{{ user_address.company_name or "" }}
{{ user_address.street1 }}, {{ user_address.street2 }}
{{ user_address.city }}, {{ user_address.country }}

### Invoice ID: {{ invoice_id }}, issued at: {{ issued_at }}

Terms and conditions: {{ terms }}

---

Purchased items overview:

{% include "order_items.md" %}
---

Total compensatable amount: {{ total }}
"""

template_env = Environment(
    loader=DictLoader(
        {"invoice.md": INVOICE_TEMPLATE, "order_items.md": ORDER_ITEMS_TEMPLATE}
    ),
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def render_order_items(order_items: Iterable[OrderItemEventData]) -> str:
    """Markdown table with one row per item, in order"""
    return template_env.get_template("order_items.md").render(
        order_items=list(order_items)
    )


def render_invoice_content(
    invoice_id: str,
    issued_at: datetime,
    order: OrderEventData,
    customer: CustomerSnapshot,
    user_address: UserAddressSnapshot,
    vendor_address: VendorAddressSnapshot,
) -> str:
    return template_env.get_template("invoice.md").render(
        vendor_address=vendor_address,
        vat_number=order.vat_number or VAT_NUMBER_PLACEHOLDER,
        customer=customer,
        user_address=user_address,
        invoice_id=invoice_id,
        issued_at=issued_at.strftime(ISSUED_AT_FORMAT),
        terms=INVOICE_TERMS,
        order_items=order.order_items,
        total=order.compensatable_order_amount,
    )


def synthesize_invoice(
    order: OrderEventData,
    context: InvoiceContext,
    invoice_id: str,
    issued_at: datetime,
) -> InvoiceDocument:
    content = render_invoice_content(
        invoice_id=invoice_id,
        issued_at=issued_at,
        order=order,
        customer=context.customer,
        user_address=context.user_address,
        vendor_address=context.vendor_address,
    )
    return InvoiceDocument(
        id=invoice_id,
        order_id=str(order.id),
        issued_at=issued_at,
        content=content,
        user_address=context.user_address,
        vendor_address=context.vendor_address,
        vat_number=order.vat_number,
    )


def build_invoice_created_dto(
    order: OrderEventData, invoice: InvoiceDocument
) -> InvoiceCreatedDTO:
    """Outbound event: the order snapshot plus the invoice without its addresses"""
    return InvoiceCreatedDTO(
        order=order,
        invoice=InvoiceDTO(
            order_id=invoice.order_id,
            issued_at=invoice.issued_at,
            content=invoice.content,
        ),
    )
