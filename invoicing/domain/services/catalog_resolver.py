"""
Tax rate and discount resolution.
"""

from typing import Iterable, List, Optional, Tuple

from invoicing.domain.models.catalog import Catalog, Discount, TaxRate
from invoicing.domain.models.invoice import LineItem


class CatalogResolver:
    """
    Pure lookups over a catalog snapshot.
    A missing id resolves to None; callers decide whether that is acceptable.
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog or Catalog()

    def resolve_tax_rate(self, tax_rate_id: Optional[str]) -> Optional[TaxRate]:
        if not tax_rate_id:
            return None
        return self.catalog.tax_rates.get(tax_rate_id)

    def resolve_discount(self, discount_id: Optional[str]) -> Optional[Discount]:
        if not discount_id:
            return None
        return self.catalog.discounts.get(discount_id)

    def unresolved_references(self, items: Iterable[LineItem]) -> List[Tuple[str, str, str]]:
        """List (line item id, field, reference) for every id that does not resolve."""
        missing = []
        for item in items:
            if item.tax_rate_id and self.resolve_tax_rate(item.tax_rate_id) is None:
                missing.append((item.id, "tax_rate_id", item.tax_rate_id))
            if item.discount_id and self.resolve_discount(item.discount_id) is None:
                missing.append((item.id, "discount_id", item.discount_id))
        return missing
