"""
Domain events for the invoicing engine.
"""

from .base import DomainEvent, EventHandler, EventDispatcher
from .invoice_events import (
    InvoiceCreated,
    InvoiceUpdated,
    InvoiceOpened,
    InvoicePaid,
    InvoiceVoided,
    InvoiceMarkedUncollectible
)

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "InvoiceCreated",
    "InvoiceUpdated",
    "InvoiceOpened",
    "InvoicePaid",
    "InvoiceVoided",
    "InvoiceMarkedUncollectible",
]
