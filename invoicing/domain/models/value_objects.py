"""
Value Objects for the domain layer.
Immutable objects that represent values and encapsulate business logic.
"""

from typing import Union
from decimal import Decimal, ROUND_FLOOR, InvalidOperation, localcontext
from dataclasses import dataclass
import re

from invoicing.domain.models.base import ValidationError


# Minor units are stored in BIGINT columns.
MAX_MINOR_UNITS = 2 ** 63 - 1

RateLike = Union[int, float, str, Decimal]

# Rates are stored as NUMERIC(9, 4).
RATE_DECIMAL_PLACES = 4
RATE_QUANTUM = Decimal(1).scaleb(-RATE_DECIMAL_PLACES)


def to_rate(value: RateLike, field: str = "rate") -> Decimal:
    """Coerce a percentage into a Decimal in the range 0-100."""
    if isinstance(value, bool):
        raise ValidationError("Rate must be a number", field)
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid rate: {value!r}", field)
    if not rate.is_finite() or rate < 0 or rate > 100:
        raise ValidationError("Rate must be between 0 and 100", field)
    if rate.quantize(RATE_QUANTUM) != rate:
        raise ValidationError(
            f"Rate cannot have more than {RATE_DECIMAL_PLACES} decimal places", field
        )
    return rate


def floor_div(numerator: Decimal, denominator: Decimal) -> int:
    """Exact floor of numerator / denominator for non-negative operands."""
    with localcontext() as ctx:
        ctx.prec = 80
        ctx.rounding = ROUND_FLOOR
        quotient = numerator / denominator
        return int(quotient.to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class Money:
    """Value object representing an amount in integer currency minor units."""

    minor_units: int

    def __post_init__(self):
        """Validate the money object after initialization."""
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise ValidationError("Money must be an integer number of minor units", "amount")

        if self.minor_units < 0:
            raise ValidationError("Money amount cannot be negative", "amount")

        if self.minor_units > MAX_MINOR_UNITS:
            raise ValidationError("Money amount overflows the minor-unit range", "amount")

    @classmethod
    def zero(cls) -> "Money":
        """Create a zero money object."""
        return cls(0)

    def add(self, other: "Money") -> "Money":
        """Add two money objects."""
        return Money(self.minor_units + other.minor_units)

    def subtract(self, other: "Money") -> "Money":
        """Subtract a smaller or equal amount."""
        result = self.minor_units - other.minor_units
        if result < 0:
            raise ValidationError("Cannot subtract to negative amount", "amount")
        return Money(result)

    def cap(self, limit: "Money") -> "Money":
        """Return this amount, never exceeding limit."""
        return self if self.minor_units <= limit.minor_units else limit

    def multiply(self, quantity: int) -> "Money":
        """Multiply by a positive integer quantity."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError("Quantity must be an integer", "quantity")
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", "quantity")
        return Money(self.minor_units * quantity)

    def percent_of(self, rate: RateLike) -> "Money":
        """floor(amount * rate / 100)."""
        rate = to_rate(rate)
        return Money(floor_div(Decimal(self.minor_units) * rate, Decimal(100)))

    def embedded_portion(self, rate: RateLike) -> "Money":
        """floor(amount * rate / (100 + rate)): the share of a rate already inside the amount."""
        rate = to_rate(rate)
        return Money(floor_div(Decimal(self.minor_units) * rate, Decimal(100) + rate))

    def is_zero(self) -> bool:
        """Check if the amount is zero."""
        return self.minor_units == 0

    def __int__(self) -> int:
        return self.minor_units

    def __str__(self) -> str:
        return str(self.minor_units)

    def __repr__(self) -> str:
        return f"Money({self.minor_units})"


@dataclass(frozen=True)
class CurrencyCode:
    """Value object representing an ISO 4217 currency code."""

    value: str

    def __post_init__(self):
        """Validate and normalise the code."""
        if not isinstance(self.value, str) or not re.match(r'^[A-Za-z]{3}$', self.value):
            raise ValidationError(f"Invalid currency code: {self.value!r}", "currency")
        object.__setattr__(self, 'value', self.value.upper())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InvoiceNumber:
    """Value object representing an invoice number with format validation."""

    value: str

    def __post_init__(self):
        """Validate the invoice number format."""
        if not self.value:
            raise ValidationError("Invoice number cannot be empty", "number")

        if len(self.value) > 50:
            raise ValidationError("Invoice number cannot exceed 50 characters", "number")

        # Allow alphanumeric characters, hyphens, and underscores
        if not re.match(r'^[A-Za-z0-9\-_]+$', self.value):
            raise ValidationError(
                "Invoice number can only contain letters, numbers, hyphens, and underscores",
                "number"
            )

    @classmethod
    def generate_sequential(cls, prefix: str, sequence: int) -> "InvoiceNumber":
        """Generate a sequential invoice number."""
        return cls(f"{prefix}-{sequence:06d}")

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"InvoiceNumber('{self.value}')"
