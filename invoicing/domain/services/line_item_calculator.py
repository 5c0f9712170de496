"""
Per-line monetary calculation.

All arithmetic is done in integer minor units and every division floors, so a
line always produces the same amounts for the same inputs:

    line_amount     = unit_amount * quantity
    discount_amount = floor(line_amount * pct / 100)      (percentage)
                    = min(value, line_amount)             (amount)
    taxable_amount  = line_amount - discount_amount
    tax_amount      = floor(taxable * rate / (100 + rate)) (inclusive)
                    = floor(taxable * rate / 100)          (exclusive)
"""

from dataclasses import dataclass
from typing import Optional

from invoicing.domain.models.catalog import Discount, DiscountKind, TaxRate
from invoicing.domain.models.invoice import LineItem
from invoicing.domain.models.value_objects import Money


@dataclass(frozen=True)
class LineCalculation:
    """Result of calculating a single line."""

    line_amount: Money
    discount_amount: Money
    taxable_amount: Money
    tax_amount: Money
    inclusive: bool = False

    @property
    def exclusive_tax_amount(self) -> Money:
        """Tax that is added on top of the taxable amount."""
        return Money.zero() if self.inclusive else self.tax_amount

    @property
    def line_total(self) -> Money:
        """Contribution of this line to the document total."""
        return self.taxable_amount.add(self.exclusive_tax_amount)


def discount_for(line_amount: Money, discount: Optional[Discount]) -> Money:
    """Discount taken off a line amount; never more than the line itself."""
    if discount is None:
        return Money.zero()
    if discount.kind == DiscountKind.PERCENTAGE:
        return line_amount.percent_of(discount.value)
    return Money(int(discount.value)).cap(line_amount)


def tax_for(taxable_amount: Money, tax_rate: Optional[TaxRate]) -> Money:
    """Tax owed on, or embedded in, a taxable amount."""
    if tax_rate is None:
        return Money.zero()
    if tax_rate.inclusive:
        return taxable_amount.embedded_portion(tax_rate.rate)
    return taxable_amount.percent_of(tax_rate.rate)


def calculate_line(
    item: LineItem,
    tax_rate: Optional[TaxRate] = None,
    discount: Optional[Discount] = None,
) -> LineCalculation:
    """Calculate one line from its already-resolved tax rate and discount."""
    line_amount = item.unit_amount.multiply(item.quantity)
    discount_amount = discount_for(line_amount, discount)
    taxable_amount = line_amount.subtract(discount_amount)
    tax_amount = tax_for(taxable_amount, tax_rate)

    return LineCalculation(
        line_amount=line_amount,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        inclusive=bool(tax_rate and tax_rate.inclusive),
    )
