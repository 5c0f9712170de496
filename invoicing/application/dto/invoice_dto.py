"""
Invoice DTOs for the application layer.
Data Transfer Objects for invoice operations. Amounts are integer minor units.
"""

from typing import Optional, List, Dict, Any
from datetime import date
from pydantic import Field, StrictInt

from invoicing.domain.models.invoice import Invoice, InvoiceStatus, InvoiceTotals, LineItem
from invoicing.domain.models.value_objects import MAX_MINOR_UNITS
from invoicing.domain.services.invoice_lifecycle import CreateInvoice, EditInvoice, LineItemInput
from .base_dto import RequestDTO, ResponseDTO, ListRequestDTO, ListResponseDTO, BaseDTO


# Nested DTOs
class LineItemRequestDTO(RequestDTO):
    """DTO for a line item in requests."""

    id: Optional[str] = Field(default=None, max_length=64, description="Caller-supplied item id")
    description: str = Field(min_length=1, max_length=500, description="Item description")
    quantity: StrictInt = Field(ge=1, description="Quantity, a positive integer")
    unit_amount: StrictInt = Field(ge=0, le=MAX_MINOR_UNITS, description="Unit price in minor units")
    tax_rate_id: Optional[str] = Field(default=None, max_length=64, description="Tax rate reference")
    discount_id: Optional[str] = Field(default=None, max_length=64, description="Discount reference")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    def to_input(self) -> LineItemInput:
        return LineItemInput(
            id=self.id,
            description=self.description,
            quantity=self.quantity,
            unit_amount=self.unit_amount,
            tax_rate_id=self.tax_rate_id,
            discount_id=self.discount_id,
            metadata=dict(self.metadata),
        )


class LineItemResponseDTO(BaseDTO):
    """DTO for a line item in responses."""

    id: str = Field(description="Item id")
    description: str = Field(description="Item description")
    quantity: int = Field(description="Quantity")
    unit_amount: int = Field(description="Unit price in minor units")
    amount: int = Field(description="quantity * unit_amount")
    tax_rate_id: Optional[str] = Field(default=None)
    discount_id: Optional[str] = Field(default=None)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, item: LineItem) -> "LineItemResponseDTO":
        return cls(amount=item.amount.minor_units, **item.to_dict())


class InvoiceTotalsResponseDTO(BaseDTO):
    """DTO for derived invoice totals."""

    subtotal: int
    discount_total: int
    tax_total: int
    total: int
    amount_due: int

    @classmethod
    def from_domain(cls, totals: InvoiceTotals) -> "InvoiceTotalsResponseDTO":
        return cls(**totals.to_dict())


# Request DTOs
class CreateInvoiceRequestDTO(RequestDTO):
    """DTO for creating a draft invoice."""

    merchant_id: str = Field(min_length=1, max_length=64, description="Owning merchant")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3, description="ISO 4217 code")
    number: Optional[str] = Field(default=None, max_length=50, description="Invoice number; generated if omitted")
    items: List[LineItemRequestDTO] = Field(default_factory=list, description="Line items")
    platform_id: Optional[str] = Field(default=None, max_length=64)
    customer_id: Optional[str] = Field(default=None, max_length=64)
    due_date: Optional[date] = Field(default=None)
    memo: Optional[str] = Field(default=None, max_length=2000)
    footer: Optional[str] = Field(default=None, max_length=2000)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_command(self, default_currency: str, number: Optional[str] = None) -> CreateInvoice:
        return CreateInvoice(
            merchant_id=self.merchant_id,
            currency=self.currency or default_currency,
            items=[item.to_input() for item in self.items],
            number=self.number or number,
            platform_id=self.platform_id,
            customer_id=self.customer_id,
            due_date=self.due_date,
            memo=self.memo,
            footer=self.footer,
            metadata=dict(self.metadata),
        )


class UpdateInvoiceRequestDTO(RequestDTO):
    """DTO for editing a draft invoice. Omitted fields are left unchanged."""

    items: Optional[List[LineItemRequestDTO]] = Field(default=None)
    customer_id: Optional[str] = Field(default=None, max_length=64)
    due_date: Optional[date] = Field(default=None)
    memo: Optional[str] = Field(default=None, max_length=2000)
    footer: Optional[str] = Field(default=None, max_length=2000)
    metadata: Optional[Dict[str, Any]] = Field(default=None)

    def to_command(self) -> EditInvoice:
        return EditInvoice(
            items=None if self.items is None else [item.to_input() for item in self.items],
            customer_id=self.customer_id,
            due_date=self.due_date,
            memo=self.memo,
            footer=self.footer,
            metadata=self.metadata,
        )


class ListInvoicesRequestDTO(ListRequestDTO):
    """DTO for listing a merchant's invoices."""

    merchant_id: str = Field(min_length=1, description="Owning merchant")
    status: Optional[InvoiceStatus] = Field(default=None, description="Filter by status")
    search: Optional[str] = Field(default=None, max_length=100, description="Matches number, customer or memo")


# Response DTOs
class InvoiceResponseDTO(ResponseDTO):
    """DTO for invoice responses."""

    merchant_id: str
    number: Optional[str] = None
    currency: str
    status: InvoiceStatus
    items: List[LineItemResponseDTO] = Field(default_factory=list)

    subtotal: int
    discount_total: int
    tax_total: int
    total: int
    amount_due: int

    platform_id: Optional[str] = None
    customer_id: Optional[str] = None
    due_date: Optional[date] = None
    memo: Optional[str] = None
    footer: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    payment_link_id: Optional[str] = None
    payment_link_url: Optional[str] = None
    version: int

    @classmethod
    def from_domain(cls, invoice: Invoice) -> "InvoiceResponseDTO":
        return cls(
            id=invoice.id,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
            merchant_id=invoice.merchant_id,
            number=invoice.number,
            currency=invoice.currency,
            status=invoice.status,
            items=[LineItemResponseDTO.from_domain(item) for item in invoice.items],
            subtotal=invoice.subtotal,
            discount_total=invoice.discount_total,
            tax_total=invoice.tax_total,
            total=invoice.total,
            amount_due=invoice.amount_due,
            platform_id=invoice.platform_id,
            customer_id=invoice.customer_id,
            due_date=invoice.due_date,
            memo=invoice.memo,
            footer=invoice.footer,
            metadata=dict(invoice.metadata),
            payment_link_id=invoice.payment_link_id,
            payment_link_url=invoice.payment_link_url,
            version=invoice.version,
        )


class RecalculationResponseDTO(BaseDTO):
    """Result of a recalculation; ``persisted`` is False for frozen invoices."""

    invoice: InvoiceResponseDTO
    totals: InvoiceTotalsResponseDTO
    persisted: bool


class InvoiceListResponseDTO(ListResponseDTO[InvoiceResponseDTO]):
    """Paginated list of invoices."""
    pass
