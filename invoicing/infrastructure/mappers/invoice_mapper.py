"""
Invoice mapper for converting between domain entities and database models.
"""

from datetime import timezone
from typing import List

from invoicing.domain.models.invoice import Invoice, InvoiceStatus, InvoiceTotals, LineItem
from invoicing.domain.models.value_objects import Money
from invoicing.infrastructure.db.models import InvoiceModel, InvoiceLineItemModel


class InvoiceMapper:
    """Maps between Invoice domain entity and InvoiceModel database model."""

    def domain_to_model(self, invoice: Invoice) -> InvoiceModel:
        """Convert Invoice domain entity to a new InvoiceModel."""
        model = InvoiceModel(id=invoice.id)
        self.update_model(model, invoice)
        return model

    def update_model(self, model: InvoiceModel, invoice: Invoice) -> None:
        """Copy every field of the invoice onto an existing model, replacing its line items."""
        model.merchant_id = invoice.merchant_id
        model.platform_id = invoice.platform_id
        model.customer_id = invoice.customer_id
        model.number = invoice.number
        model.currency = invoice.currency
        model.status = invoice.status.value

        totals = invoice.totals
        model.subtotal = totals.subtotal
        model.discount_total = totals.discount_total
        model.tax_total = totals.tax_total
        model.total = totals.total
        model.amount_due = totals.amount_due

        model.due_date = invoice.due_date
        model.memo = invoice.memo
        model.footer = invoice.footer
        model.extra = dict(invoice.metadata)
        model.payment_link_id = invoice.payment_link_id
        model.payment_link_url = invoice.payment_link_url

        model.created_at = invoice.created_at
        model.updated_at = invoice.updated_at
        model.version = invoice.version

        model.line_items = self._line_items_to_models(invoice.id, invoice.items)

    def model_to_domain(self, model: InvoiceModel) -> Invoice:
        """Convert InvoiceModel to Invoice domain entity."""
        items = tuple(self._line_item_model_to_domain(item) for item in model.line_items or [])

        return Invoice(
            id=model.id,
            merchant_id=model.merchant_id,
            platform_id=model.platform_id,
            customer_id=model.customer_id,
            number=model.number,
            currency=model.currency,
            status=InvoiceStatus(model.status) if model.status else InvoiceStatus.DRAFT,
            items=items,
            totals=InvoiceTotals(
                subtotal=model.subtotal or 0,
                discount_total=model.discount_total or 0,
                tax_total=model.tax_total or 0,
                total=model.total or 0,
                amount_due=model.amount_due or 0,
            ),
            due_date=model.due_date,
            memo=model.memo,
            footer=model.footer,
            metadata=dict(model.extra or {}),
            payment_link_id=model.payment_link_id,
            payment_link_url=model.payment_link_url,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
            version=model.version,
        )

    def _line_items_to_models(self, invoice_id: str, items) -> List[InvoiceLineItemModel]:
        return [
            InvoiceLineItemModel(
                id=item.id,
                invoice_id=invoice_id,
                position=position,
                description=item.description,
                quantity=item.quantity,
                unit_amount=item.unit_amount.minor_units,
                tax_rate_id=item.tax_rate_id,
                discount_id=item.discount_id,
                extra=dict(item.metadata),
            )
            for position, item in enumerate(items)
        ]

    def _line_item_model_to_domain(self, model: InvoiceLineItemModel) -> LineItem:
        return LineItem(
            id=model.id,
            description=model.description,
            quantity=model.quantity,
            unit_amount=Money(model.unit_amount),
            tax_rate_id=model.tax_rate_id,
            discount_id=model.discount_id,
            metadata=dict(model.extra or {}),
        )


def _as_utc(value):
    # SQLite drops tzinfo on round trip.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
