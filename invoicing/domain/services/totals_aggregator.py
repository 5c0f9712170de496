"""
Document-level totals.
"""

from typing import List, Sequence

from invoicing.domain.models.invoice import InvoiceStatus, InvoiceTotals, LineItem
from invoicing.domain.models.value_objects import Money
from invoicing.domain.services.catalog_resolver import CatalogResolver
from invoicing.domain.services.line_item_calculator import LineCalculation, calculate_line


class TotalsAggregator:
    """
    Sums per-line calculations into invoice totals.

    Inclusive tax is already inside the line amount, so only exclusive tax is
    added to ``total``; ``tax_total`` reports both kinds together. The result
    depends only on the items, the catalog snapshot and the status.
    """

    def __init__(self, resolver: CatalogResolver):
        self.resolver = resolver

    def calculate_lines(self, items: Sequence[LineItem]) -> List[LineCalculation]:
        """Calculate every line in document order."""
        return [
            calculate_line(
                item,
                tax_rate=self.resolver.resolve_tax_rate(item.tax_rate_id),
                discount=self.resolver.resolve_discount(item.discount_id),
            )
            for item in items
        ]

    def calculate(
        self,
        items: Sequence[LineItem],
        status: InvoiceStatus = InvoiceStatus.DRAFT,
    ) -> InvoiceTotals:
        """Compute subtotal, discount, tax, total and amount due."""
        subtotal = Money.zero()
        discount_total = Money.zero()
        tax_total = Money.zero()
        total = Money.zero()

        for line in self.calculate_lines(items):
            subtotal = subtotal.add(line.line_amount)
            discount_total = discount_total.add(line.discount_amount)
            tax_total = tax_total.add(line.tax_amount)
            total = total.add(line.line_total)

        # No partial payments: a paid invoice owes nothing, anything else owes the total.
        amount_due = Money.zero() if status == InvoiceStatus.PAID else total

        return InvoiceTotals(
            subtotal=subtotal.minor_units,
            discount_total=discount_total.minor_units,
            tax_total=tax_total.minor_units,
            total=total.minor_units,
            amount_due=amount_due.minor_units,
        )
