"""
Tax rate and discount definitions.
Line items reference these by id; they are never embedded in an invoice.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from invoicing.domain.models.base import ValueObject, ValidationError
from invoicing.domain.models.value_objects import MAX_MINOR_UNITS, to_rate


class DiscountKind(str, Enum):
    """How a discount value is interpreted."""
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


@dataclass(frozen=True)
class TaxRate(ValueObject):
    """A tax rate as a percentage, either embedded in prices or added on top."""

    id: str
    rate: Decimal
    inclusive: bool = False
    name: Optional[str] = None

    def validate(self) -> None:
        if not self.id:
            raise ValidationError("Tax rate id is required", "id")
        object.__setattr__(self, 'rate', to_rate(self.rate))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rate": str(self.rate),
            "inclusive": self.inclusive,
            "name": self.name,
        }


@dataclass(frozen=True)
class Discount(ValueObject):
    """
    A line discount.
    Percentage values are 0-100; amount values are minor units.
    """

    id: str
    kind: DiscountKind
    value: Decimal
    name: Optional[str] = None

    def validate(self) -> None:
        if not self.id:
            raise ValidationError("Discount id is required", "id")

        kind = DiscountKind(self.kind)
        object.__setattr__(self, 'kind', kind)

        if kind == DiscountKind.PERCENTAGE:
            object.__setattr__(self, 'value', to_rate(self.value, "value"))
            return

        value = self.value
        if isinstance(value, bool) or not isinstance(value, (int, Decimal)) or value != int(value):
            raise ValidationError("Amount discounts must be a whole number of minor units", "value")
        value = int(value)
        if value < 0 or value > MAX_MINOR_UNITS:
            raise ValidationError("Amount discount is out of range", "value")
        object.__setattr__(self, 'value', Decimal(value))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "value": str(self.value),
            "name": self.name,
        }


@dataclass(frozen=True)
class Catalog:
    """Immutable snapshot of a merchant's tax rates and discounts."""

    tax_rates: Dict[str, TaxRate] = field(default_factory=dict)
    discounts: Dict[str, Discount] = field(default_factory=dict)

    @classmethod
    def of(cls, tax_rates=(), discounts=()) -> "Catalog":
        """Build a snapshot from iterables of definitions."""
        return cls(
            tax_rates={rate.id: rate for rate in tax_rates},
            discounts={discount.id: discount for discount in discounts},
        )
