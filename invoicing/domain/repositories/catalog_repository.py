"""Catalog repository interface.
Read side of the tax rate and discount reference tables.
"""

from abc import ABC, abstractmethod
from typing import List

from invoicing.domain.models.catalog import Catalog, Discount, TaxRate


class CatalogRepository(ABC):
    """
    Repository interface for a merchant's tax rates and discounts.
    """

    @abstractmethod
    async def load_catalog(self, merchant_id: str) -> Catalog:
        """
        Load an immutable snapshot of the merchant's catalog.
        """
        pass

    @abstractmethod
    async def save_tax_rate(self, merchant_id: str, tax_rate: TaxRate) -> TaxRate:
        """
        Create or replace a tax rate.
        """
        pass

    @abstractmethod
    async def save_discount(self, merchant_id: str, discount: Discount) -> Discount:
        """
        Create or replace a discount.
        """
        pass

    @abstractmethod
    async def list_tax_rates(self, merchant_id: str) -> List[TaxRate]:
        pass

    @abstractmethod
    async def list_discounts(self, merchant_id: str) -> List[Discount]:
        pass
