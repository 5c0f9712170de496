"""
Domain services for the invoicing engine.
This module exports the calculation and lifecycle services.
"""

from .catalog_resolver import CatalogResolver
from .line_item_calculator import LineCalculation, calculate_line
from .totals_aggregator import TotalsAggregator
from .payment_link_issuer import PaymentLink, PaymentLinkIssuer
from .invoice_lifecycle import InvoiceLifecycle

__all__ = [
    "CatalogResolver",
    "LineCalculation",
    "calculate_line",
    "TotalsAggregator",
    "PaymentLink",
    "PaymentLinkIssuer",
    "InvoiceLifecycle",
]
