"""
Invoice lifecycle state machine.

    draft -> open | void
    open  -> paid | void | uncollectible
    paid, void, uncollectible are terminal

Every transition takes an invoice value and a command and returns a new
invoice value together with the events it produced. Inputs are never
mutated, so a rejected command leaves the caller's invoice exactly as it was.
Errors are raised to the caller; nothing here logs or retries.
"""

import asyncio
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence

from invoicing.domain.events.base import DomainEvent
from invoicing.domain.events.invoice_events import (
    InvoiceCreated,
    InvoiceMarkedUncollectible,
    InvoiceOpened,
    InvoicePaid,
    InvoiceUpdated,
    InvoiceVoided,
)
from invoicing.domain.models.base import (
    DomainException,
    ExternalProviderError,
    IllegalTransitionError,
    ValidationError,
    utcnow,
)
from invoicing.domain.models.catalog import Catalog
from invoicing.domain.models.invoice import Invoice, InvoiceStatus, InvoiceTotals, LineItem
from invoicing.domain.models.value_objects import MAX_MINOR_UNITS, CurrencyCode, InvoiceNumber, Money
from invoicing.domain.services.catalog_resolver import CatalogResolver
from invoicing.domain.services.payment_link_issuer import PaymentLinkIssuer
from invoicing.domain.services.totals_aggregator import TotalsAggregator


ALLOWED_TRANSITIONS: Mapping[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.OPEN, InvoiceStatus.VOID}),
    InvoiceStatus.OPEN: frozenset({
        InvoiceStatus.PAID,
        InvoiceStatus.VOID,
        InvoiceStatus.UNCOLLECTIBLE,
    }),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.VOID: frozenset(),
    InvoiceStatus.UNCOLLECTIBLE: frozenset(),
}


# Commands

@dataclass(frozen=True)
class LineItemInput:
    """Unvalidated line item as submitted by a caller."""

    description: str
    quantity: int
    unit_amount: int
    tax_rate_id: Optional[str] = None
    discount_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    id: Optional[str] = None


@dataclass(frozen=True)
class CreateInvoice:
    merchant_id: str
    currency: str = "EUR"
    items: Sequence[LineItemInput] = ()
    number: Optional[str] = None
    platform_id: Optional[str] = None
    customer_id: Optional[str] = None
    due_date: Optional[date] = None
    memo: Optional[str] = None
    footer: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class EditInvoice:
    """Partial edit of a draft; None leaves a field unchanged."""

    items: Optional[Sequence[LineItemInput]] = None
    customer_id: Optional[str] = None
    due_date: Optional[date] = None
    memo: Optional[str] = None
    footer: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = field(default=None, compare=False, hash=False)


@dataclass(frozen=True)
class OpenInvoice:
    pass


@dataclass(frozen=True)
class MarkInvoicePaid:
    pass


@dataclass(frozen=True)
class VoidInvoice:
    pass


@dataclass(frozen=True)
class MarkInvoiceUncollectible:
    pass


@dataclass(frozen=True)
class RecalculateInvoice:
    pass


@dataclass(frozen=True)
class Transition:
    """Outcome of a lifecycle command."""

    invoice: Invoice
    events: List[DomainEvent] = field(default_factory=list)
    totals: Optional[InvoiceTotals] = None

    def __post_init__(self):
        if self.totals is None:
            object.__setattr__(self, 'totals', self.invoice.totals)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


class InvoiceLifecycle:
    """
    Applies lifecycle commands to invoices.
    Holds collaborators and policy only; no document state lives here.
    """

    def __init__(
        self,
        payment_link_issuer: PaymentLinkIssuer,
        strict_references: bool = False,
        issuer_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[str], str] = _new_id,
    ):
        self.payment_link_issuer = payment_link_issuer
        self.strict_references = strict_references
        self.issuer_timeout = issuer_timeout
        self.clock = clock
        self.id_factory = id_factory

    # Dispatch

    async def apply(
        self,
        invoice: Optional[Invoice],
        command: Any,
        catalog: Optional[Catalog] = None,
    ) -> Transition:
        """Apply any command; ``invoice`` is None only for CreateInvoice."""
        if isinstance(command, CreateInvoice):
            return self.create(command, catalog)
        if invoice is None:
            raise ValidationError("An invoice is required for this command", "invoice")
        if isinstance(command, EditInvoice):
            return self.edit(invoice, command, catalog)
        if isinstance(command, OpenInvoice):
            return await self.open(invoice, catalog)
        if isinstance(command, MarkInvoicePaid):
            return self.mark_paid(invoice)
        if isinstance(command, VoidInvoice):
            return self.void(invoice)
        if isinstance(command, MarkInvoiceUncollectible):
            return self.mark_uncollectible(invoice)
        if isinstance(command, RecalculateInvoice):
            return self.recalculate(invoice, catalog)
        raise ValidationError(f"Unknown command: {type(command).__name__}", "command")

    # Commands

    def create(self, command: CreateInvoice, catalog: Optional[Catalog] = None) -> Transition:
        if not command.merchant_id:
            raise ValidationError("Merchant ID is required", "merchant_id")
        currency = CurrencyCode(command.currency).value
        number = InvoiceNumber(command.number).value if command.number else None

        items = self._build_items(command.items)
        aggregator = self._aggregator(items, catalog)
        now = self.clock()

        invoice = Invoice(
            id=self.id_factory("inv"),
            merchant_id=command.merchant_id,
            number=number,
            currency=currency,
            status=InvoiceStatus.DRAFT,
            items=items,
            totals=aggregator.calculate(items, InvoiceStatus.DRAFT),
            platform_id=command.platform_id,
            customer_id=command.customer_id,
            due_date=command.due_date,
            memo=command.memo,
            footer=command.footer,
            metadata=dict(command.metadata),
            created_at=now,
            updated_at=now,
        )
        return Transition(invoice, [InvoiceCreated(
            invoice_id=invoice.id,
            merchant_id=invoice.merchant_id,
            total=invoice.total,
            currency=invoice.currency,
            item_count=len(items),
        )])

    def edit(
        self,
        invoice: Invoice,
        command: EditInvoice,
        catalog: Optional[Catalog] = None,
    ) -> Transition:
        if not invoice.can_be_edited():
            raise IllegalTransitionError("edit", invoice.status.value)

        items = invoice.items if command.items is None else self._build_items(command.items)
        totals = self._aggregator(items, catalog).calculate(items, invoice.status)

        updated = replace(
            invoice,
            items=items,
            totals=totals,
            customer_id=_coalesce(command.customer_id, invoice.customer_id),
            due_date=_coalesce(command.due_date, invoice.due_date),
            memo=_coalesce(command.memo, invoice.memo),
            footer=_coalesce(command.footer, invoice.footer),
            metadata=dict(command.metadata) if command.metadata is not None else dict(invoice.metadata),
            updated_at=self.clock(),
        )
        return Transition(updated, [InvoiceUpdated(
            invoice_id=updated.id,
            merchant_id=updated.merchant_id,
            previous_total=invoice.total,
            total=updated.total,
        )])

    async def open(self, invoice: Invoice, catalog: Optional[Catalog] = None) -> Transition:
        """
        Finalize a draft and issue its payment link.
        Totals are recomputed against the current catalog before they freeze.
        If the issuer fails or times out the draft is returned to the caller
        untouched through the raised error.
        """
        self._guard(invoice, InvoiceStatus.OPEN, "open")
        if not invoice.items:
            raise IllegalTransitionError("open", invoice.status.value, "invoice has no line items")

        totals = self._aggregator(invoice.items, catalog).calculate(invoice.items, InvoiceStatus.OPEN)
        link = await self._issue_link(totals.total, invoice.currency, invoice.describe())

        opened = replace(
            invoice,
            status=InvoiceStatus.OPEN,
            totals=totals,
            payment_link_id=link.id,
            payment_link_url=link.url,
            updated_at=self.clock(),
        )
        return Transition(opened, [InvoiceOpened(
            invoice_id=opened.id,
            merchant_id=opened.merchant_id,
            total=opened.total,
            currency=opened.currency,
            payment_link_id=link.id,
            payment_link_url=link.url,
        )])

    def mark_paid(self, invoice: Invoice) -> Transition:
        self._guard(invoice, InvoiceStatus.PAID, "mark paid")
        paid = replace(
            invoice,
            status=InvoiceStatus.PAID,
            totals=replace(invoice.totals, amount_due=0),
            updated_at=self.clock(),
        )
        return Transition(paid, [InvoicePaid(
            invoice_id=paid.id,
            merchant_id=paid.merchant_id,
            amount_paid=invoice.amount_due,
            currency=paid.currency,
        )])

    def void(self, invoice: Invoice) -> Transition:
        # Totals stay as last computed.
        self._guard(invoice, InvoiceStatus.VOID, "void")
        voided = replace(invoice, status=InvoiceStatus.VOID, updated_at=self.clock())
        return Transition(voided, [InvoiceVoided(
            invoice_id=voided.id,
            merchant_id=voided.merchant_id,
            previous_status=invoice.status.value,
            payment_link_id=voided.payment_link_id,
        )])

    def mark_uncollectible(self, invoice: Invoice) -> Transition:
        self._guard(invoice, InvoiceStatus.UNCOLLECTIBLE, "mark uncollectible")
        written_off = replace(invoice, status=InvoiceStatus.UNCOLLECTIBLE, updated_at=self.clock())
        return Transition(written_off, [InvoiceMarkedUncollectible(
            invoice_id=written_off.id,
            merchant_id=written_off.merchant_id,
            amount_due=written_off.amount_due,
        )])

    def recalculate(self, invoice: Invoice, catalog: Optional[Catalog] = None) -> Transition:
        """
        Recompute totals through the same path as an edit.
        Only drafts take the new totals; frozen documents report them unchanged.
        """
        if invoice.can_be_edited():
            return self.edit(invoice, EditInvoice(), catalog)

        totals = self._aggregator(invoice.items, catalog).calculate(invoice.items, invoice.status)
        return Transition(invoice, [], totals=totals)

    # Helpers

    def _guard(self, invoice: Invoice, target: InvoiceStatus, command: str) -> None:
        if target not in ALLOWED_TRANSITIONS[invoice.status]:
            raise IllegalTransitionError(command, invoice.status.value)

    def _aggregator(self, items: Sequence[LineItem], catalog: Optional[Catalog]) -> TotalsAggregator:
        resolver = CatalogResolver(catalog)
        if self.strict_references:
            missing = resolver.unresolved_references(items)
            if missing:
                item_id, field_name, reference = missing[0]
                raise ValidationError(
                    f"Line item {item_id} references unknown {field_name} '{reference}'",
                    field_name,
                )
        return TotalsAggregator(resolver)

    def _build_items(self, inputs: Sequence[LineItemInput]) -> tuple:
        items = []
        seen = set()
        for entry in inputs:
            _check_amount_input(entry)
            item = LineItem(
                id=entry.id or self.id_factory("item"),
                description=entry.description,
                quantity=entry.quantity,
                unit_amount=Money(entry.unit_amount),
                tax_rate_id=entry.tax_rate_id or None,
                discount_id=entry.discount_id or None,
                metadata=dict(entry.metadata),
            )
            item.validate()
            if item.id in seen:
                raise ValidationError(f"Duplicate line item id: {item.id}", "items")
            seen.add(item.id)
            items.append(item)
        return tuple(items)

    async def _issue_link(self, amount: int, currency: str, description: str):
        call = self.payment_link_issuer.create_link(amount, currency, description)
        try:
            if self.issuer_timeout is not None:
                return await asyncio.wait_for(call, timeout=self.issuer_timeout)
            return await call
        except asyncio.TimeoutError as exc:
            raise ExternalProviderError("payment link issuer", "request timed out") from exc
        except DomainException:
            raise
        except Exception as exc:
            raise ExternalProviderError("payment link issuer", str(exc)) from exc


def _check_amount_input(entry: LineItemInput) -> None:
    quantity = entry.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer", "quantity")
    unit_amount = entry.unit_amount
    if isinstance(unit_amount, bool) or not isinstance(unit_amount, int):
        raise ValidationError("Unit amount must be an integer number of minor units", "unit_amount")
    if unit_amount < 0:
        raise ValidationError("Unit amount cannot be negative", "unit_amount")
    if unit_amount > MAX_MINOR_UNITS:
        raise ValidationError("Unit amount overflows the minor-unit range", "unit_amount")


def _coalesce(value, default):
    return default if value is None else value
