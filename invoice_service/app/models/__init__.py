"""
Invoice Service Models
"""

from .base import InvoiceServiceBase, InvoiceServiceBaseModel
from .invoice import Invoice
from .user import User, UserAddress
from .vendor_address import VENDOR_ADDRESS_SLOT, VendorAddress

__all__ = [
    "InvoiceServiceBase",
    "InvoiceServiceBaseModel",
    "Invoice",
    "User",
    "UserAddress",
    "VendorAddress",
    "VENDOR_ADDRESS_SLOT",
]
