"""
Domain events related to invoices.
Events for invoice lifecycle transitions.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class InvoiceCreated(DomainEvent):
    """Event fired when a new draft invoice is created."""

    invoice_id: str
    merchant_id: str
    total: int
    currency: str
    item_count: int

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "merchant_id": self.merchant_id,
            "total": self.total,
            "currency": self.currency,
            "item_count": self.item_count
        }


@dataclass
class InvoiceUpdated(DomainEvent):
    """Event fired when a draft invoice is edited or its totals change."""

    invoice_id: str
    merchant_id: str
    previous_total: int
    total: int

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "merchant_id": self.merchant_id,
            "previous_total": self.previous_total,
            "total": self.total
        }


@dataclass
class InvoiceOpened(DomainEvent):
    """Event fired when an invoice is finalized and a payment link issued."""

    invoice_id: str
    merchant_id: str
    total: int
    currency: str
    payment_link_id: str
    payment_link_url: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "merchant_id": self.merchant_id,
            "total": self.total,
            "currency": self.currency,
            "payment_link_id": self.payment_link_id,
            "payment_link_url": self.payment_link_url
        }


@dataclass
class InvoicePaid(DomainEvent):
    """Event fired when an invoice is marked as paid."""

    invoice_id: str
    merchant_id: str
    amount_paid: int
    currency: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "merchant_id": self.merchant_id,
            "amount_paid": self.amount_paid,
            "currency": self.currency
        }


@dataclass
class InvoiceVoided(DomainEvent):
    """Event fired when an invoice is voided."""

    invoice_id: str
    merchant_id: str
    previous_status: str
    payment_link_id: Optional[str] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "merchant_id": self.merchant_id,
            "previous_status": self.previous_status,
            "payment_link_id": self.payment_link_id
        }


@dataclass
class InvoiceMarkedUncollectible(DomainEvent):
    """Event fired when an open invoice is written off."""

    invoice_id: str
    merchant_id: str
    amount_due: int

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "merchant_id": self.merchant_id,
            "amount_due": self.amount_due
        }
