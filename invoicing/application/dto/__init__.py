"""
Application layer DTOs.
"""

from .base_dto import *
from .invoice_dto import *
from .catalog_dto import *

__all__ = [
    # Base
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "ListRequestDTO",
    "ListResponseDTO",
    "HealthCheckResponseDTO",
    "ProblemDetailDTO",

    # Invoice
    "LineItemRequestDTO",
    "LineItemResponseDTO",
    "InvoiceTotalsResponseDTO",
    "CreateInvoiceRequestDTO",
    "UpdateInvoiceRequestDTO",
    "ListInvoicesRequestDTO",
    "InvoiceResponseDTO",
    "RecalculationResponseDTO",
    "InvoiceListResponseDTO",

    # Catalog
    "TaxRateRequestDTO",
    "TaxRateResponseDTO",
    "DiscountRequestDTO",
    "DiscountResponseDTO",
]
