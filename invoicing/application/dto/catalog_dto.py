"""
Catalog DTOs for tax rates and discounts.
"""

from typing import Optional
from decimal import Decimal
from pydantic import Field

from invoicing.domain.models.catalog import Discount, DiscountKind, TaxRate
from .base_dto import RequestDTO, BaseDTO


class TaxRateRequestDTO(RequestDTO):
    """DTO for creating or replacing a tax rate."""

    id: str = Field(min_length=1, max_length=64, description="Tax rate id")
    rate: Decimal = Field(ge=0, le=100, decimal_places=4, description="Percentage, 0-100, up to 4 decimal places")
    inclusive: bool = Field(default=False, description="Whether prices already include the tax")
    name: Optional[str] = Field(default=None, max_length=255)

    def to_domain(self) -> TaxRate:
        return TaxRate(id=self.id, rate=self.rate, inclusive=self.inclusive, name=self.name)


class TaxRateResponseDTO(BaseDTO):
    id: str
    rate: Decimal
    inclusive: bool
    name: Optional[str] = None

    @classmethod
    def from_domain(cls, tax_rate: TaxRate) -> "TaxRateResponseDTO":
        return cls(id=tax_rate.id, rate=tax_rate.rate, inclusive=tax_rate.inclusive, name=tax_rate.name)


class DiscountRequestDTO(RequestDTO):
    """
    DTO for creating or replacing a discount.
    Percentage values are 0-100; amount values are whole minor units.
    """

    id: str = Field(min_length=1, max_length=64, description="Discount id")
    kind: DiscountKind = Field(description="percentage or amount")
    value: Decimal = Field(ge=0, decimal_places=4, description="Discount value")
    name: Optional[str] = Field(default=None, max_length=255)

    def to_domain(self) -> Discount:
        return Discount(id=self.id, kind=DiscountKind(self.kind), value=self.value, name=self.name)


class DiscountResponseDTO(BaseDTO):
    id: str
    kind: DiscountKind
    value: Decimal
    name: Optional[str] = None

    @classmethod
    def from_domain(cls, discount: Discount) -> "DiscountResponseDTO":
        return cls(id=discount.id, kind=discount.kind, value=discount.value, name=discount.name)
