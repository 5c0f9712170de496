"""
Application layer use cases.
Orchestrates the invoicing engine against repositories and the event dispatcher.
"""

from .base_use_case import *
from .invoice_use_cases import *
from .catalog_use_cases import *

__all__ = [
    # Base Use Cases
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "PaginatedQueryUseCase",
    "UseCaseResult",

    # Invoice Use Cases
    "InvoiceCommandRequest",
    "UpdateInvoiceRequest",
    "CreateInvoiceUseCase",
    "InvoiceCommandUseCase",
    "UpdateInvoiceUseCase",
    "OpenInvoiceUseCase",
    "MarkInvoicePaidUseCase",
    "VoidInvoiceUseCase",
    "MarkInvoiceUncollectibleUseCase",
    "RecalculateInvoiceUseCase",
    "GetInvoiceByIdUseCase",
    "ListInvoicesUseCase",

    # Catalog Use Cases
    "SaveTaxRateRequest",
    "SaveDiscountRequest",
    "SaveTaxRateUseCase",
    "SaveDiscountUseCase",
    "ListTaxRatesUseCase",
    "ListDiscountsUseCase",
]
