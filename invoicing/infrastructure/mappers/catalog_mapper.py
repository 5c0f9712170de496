"""
Catalog mapper for tax rate and discount rows.
"""

from decimal import Decimal

from invoicing.domain.models.catalog import Discount, DiscountKind, TaxRate
from invoicing.infrastructure.db.models import DiscountModel, TaxRateModel


class CatalogMapper:
    """Maps tax rates and discounts to and from their database models."""

    def tax_rate_to_model(self, merchant_id: str, tax_rate: TaxRate) -> TaxRateModel:
        return TaxRateModel(
            id=tax_rate.id,
            merchant_id=merchant_id,
            name=tax_rate.name,
            rate=tax_rate.rate,
            inclusive=tax_rate.inclusive,
        )

    def tax_rate_to_domain(self, model: TaxRateModel) -> TaxRate:
        return TaxRate(
            id=model.id,
            rate=Decimal(model.rate),
            inclusive=bool(model.inclusive),
            name=model.name,
        )

    def discount_to_model(self, merchant_id: str, discount: Discount) -> DiscountModel:
        model = DiscountModel(id=discount.id, merchant_id=merchant_id)
        self.update_discount_model(model, discount)
        return model

    def update_discount_model(self, model: DiscountModel, discount: Discount) -> None:
        model.name = discount.name
        model.kind = discount.kind.value
        if discount.kind == DiscountKind.AMOUNT:
            model.amount = int(discount.value)
            model.percentage = None
        else:
            model.percentage = discount.value
            model.amount = None

    def discount_to_domain(self, model: DiscountModel) -> Discount:
        kind = DiscountKind(model.kind)
        if kind == DiscountKind.AMOUNT:
            value = Decimal(int(model.amount))
        else:
            value = Decimal(model.percentage)
        return Discount(id=model.id, kind=kind, value=value, name=model.name)
