"""
Invoice domain model.
Represents a merchant invoice whose totals are derived from its line items.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from invoicing.domain.models.base import AggregateRoot, ValidationError
from invoicing.domain.models.value_objects import Money


class InvoiceStatus(str, Enum):
    """Invoice status."""
    DRAFT = "draft"
    OPEN = "open"
    PAID = "paid"
    VOID = "void"
    UNCOLLECTIBLE = "uncollectible"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: FrozenSet[InvoiceStatus] = frozenset({
    InvoiceStatus.PAID,
    InvoiceStatus.VOID,
    InvoiceStatus.UNCOLLECTIBLE,
})


@dataclass(frozen=True)
class LineItem:
    """Individual line item in an invoice."""

    id: str
    description: str
    quantity: int
    unit_amount: Money
    tax_rate_id: Optional[str] = None
    discount_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def validate(self) -> None:
        """Validate line item."""
        if not self.description or not self.description.strip():
            raise ValidationError("Description is required", "description")

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError("Quantity must be an integer", "quantity")

        if self.quantity <= 0:
            raise ValidationError("Quantity must be positive", "quantity")

        if not isinstance(self.unit_amount, Money):
            raise ValidationError("Unit amount must be a Money value", "unit_amount")

    @property
    def amount(self) -> Money:
        """Line amount before discount and tax."""
        return self.unit_amount.multiply(self.quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "unit_amount": self.unit_amount.minor_units,
            "tax_rate_id": self.tax_rate_id,
            "discount_id": self.discount_id,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class InvoiceTotals:
    """Document-level totals, in minor units."""

    subtotal: int = 0
    discount_total: int = 0
    tax_total: int = 0
    total: int = 0
    amount_due: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "subtotal": self.subtotal,
            "discount_total": self.discount_total,
            "tax_total": self.tax_total,
            "total": self.total,
            "amount_due": self.amount_due,
        }


@dataclass(eq=False)
class Invoice(AggregateRoot):
    """
    Invoice aggregate root.

    Totals are only ever produced by the totals aggregator; they are exposed
    through read-only properties. Instances are treated as values by the
    lifecycle, which returns updated copies instead of mutating them.
    """

    merchant_id: str = ""
    number: Optional[str] = None
    currency: str = "EUR"
    status: InvoiceStatus = InvoiceStatus.DRAFT
    items: Tuple[LineItem, ...] = ()
    totals: InvoiceTotals = field(default_factory=InvoiceTotals)

    platform_id: Optional[str] = None
    customer_id: Optional[str] = None
    due_date: Optional[date] = None
    memo: Optional[str] = None
    footer: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    payment_link_id: Optional[str] = None
    payment_link_url: Optional[str] = None

    @property
    def subtotal(self) -> int:
        return self.totals.subtotal

    @property
    def discount_total(self) -> int:
        return self.totals.discount_total

    @property
    def tax_total(self) -> int:
        return self.totals.tax_total

    @property
    def total(self) -> int:
        return self.totals.total

    @property
    def amount_due(self) -> int:
        return self.totals.amount_due

    @property
    def is_draft(self) -> bool:
        """Check if invoice is in draft status."""
        return self.status == InvoiceStatus.DRAFT

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def can_be_edited(self) -> bool:
        """Items and header fields may only change while drafting."""
        return self.is_draft

    def describe(self) -> str:
        """Human readable description used for payment links."""
        if self.memo:
            return self.memo
        if self.number:
            return f"Invoice {self.number}"
        return f"Invoice {self.id}"

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "merchant_id": self.merchant_id,
            "platform_id": self.platform_id,
            "customer_id": self.customer_id,
            "number": self.number,
            "currency": self.currency,
            "status": self.status.value,
            "items": [item.to_dict() for item in self.items],
            **self.totals.to_dict(),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "memo": self.memo,
            "footer": self.footer,
            "metadata": dict(self.metadata),
            "payment_link_id": self.payment_link_id,
            "payment_link_url": self.payment_link_url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "version": self.version,
        }
