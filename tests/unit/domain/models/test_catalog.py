"""
Unit tests for tax rates, discounts and catalog snapshots.
"""

import pytest
from decimal import Decimal

from invoicing.domain.models.base import ValidationError
from invoicing.domain.models.catalog import Catalog, Discount, DiscountKind, TaxRate
from invoicing.domain.services.catalog_resolver import CatalogResolver
from invoicing.domain.models.invoice import LineItem
from invoicing.domain.models.value_objects import Money


class TestTaxRate:

    def test_rate_is_coerced_to_decimal(self):
        rate = TaxRate(id="vat", rate="20")
        assert rate.rate == Decimal("20")
        assert rate.inclusive is False

    def test_rate_out_of_range(self):
        with pytest.raises(ValidationError):
            TaxRate(id="vat", rate=120)

    def test_id_required(self):
        with pytest.raises(ValidationError):
            TaxRate(id="", rate=20)

    def test_rate_limited_to_four_decimal_places(self):
        assert TaxRate(id="third", rate="33.3333").rate == Decimal("33.3333")
        with pytest.raises(ValidationError):
            TaxRate(id="third", rate="33.33333")


class TestDiscount:

    def test_percentage_discount(self):
        discount = Discount(id="d10", kind="percentage", value=10)
        assert discount.kind == DiscountKind.PERCENTAGE
        assert discount.value == Decimal("10")

    def test_percentage_over_100_rejected(self):
        with pytest.raises(ValidationError):
            Discount(id="d", kind=DiscountKind.PERCENTAGE, value=101)

    def test_percentage_precision_limited(self):
        with pytest.raises(ValidationError):
            Discount(id="d", kind=DiscountKind.PERCENTAGE, value=Decimal("0.00001"))

    def test_amount_discount(self):
        discount = Discount(id="off", kind=DiscountKind.AMOUNT, value=1000)
        assert discount.value == Decimal(1000)

    def test_fractional_amount_rejected(self):
        with pytest.raises(ValidationError):
            Discount(id="off", kind=DiscountKind.AMOUNT, value=Decimal("10.5"))

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Discount(id="off", kind=DiscountKind.AMOUNT, value=-5)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            Discount(id="x", kind="bogus", value=1)


class TestCatalogResolver:

    def setup_method(self):
        self.catalog = Catalog.of(
            tax_rates=[TaxRate(id="vat", rate=20)],
            discounts=[Discount(id="d10", kind=DiscountKind.PERCENTAGE, value=10)],
        )
        self.resolver = CatalogResolver(self.catalog)

    def test_resolves_known_ids(self):
        assert self.resolver.resolve_tax_rate("vat").rate == Decimal("20")
        assert self.resolver.resolve_discount("d10").value == Decimal("10")

    def test_unknown_and_empty_ids_resolve_to_none(self):
        assert self.resolver.resolve_tax_rate("missing") is None
        assert self.resolver.resolve_tax_rate(None) is None
        assert self.resolver.resolve_discount("") is None

    def test_empty_catalog(self):
        assert CatalogResolver().resolve_tax_rate("vat") is None

    def test_unresolved_references(self):
        items = [
            LineItem(id="a", description="A", quantity=1, unit_amount=Money(100), tax_rate_id="vat"),
            LineItem(id="b", description="B", quantity=1, unit_amount=Money(100),
                     tax_rate_id="gst", discount_id="d99"),
        ]
        assert self.resolver.unresolved_references(items) == [
            ("b", "tax_rate_id", "gst"),
            ("b", "discount_id", "d99"),
        ]
