"""
Invoice service middleware package.
"""

from .error import InvoiceServiceErrorHandler, setup_invoice_error_handling

__all__ = [
    "InvoiceServiceErrorHandler",
    "setup_invoice_error_handling",
]
