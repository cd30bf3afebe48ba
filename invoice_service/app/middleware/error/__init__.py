"""
Error handling middleware package for Invoice Service.
"""

from .error_handler import InvoiceServiceErrorHandler, setup_invoice_error_handling

__all__ = ["InvoiceServiceErrorHandler", "setup_invoice_error_handling"]
