"""
In-memory repository implementations.
Used when no database is configured and in tests. Stored values are
copied on the way in and out so callers never share state with the store.
"""

import copy
from dataclasses import replace
from typing import Dict, List, Optional

from invoicing.domain.models.base import ConcurrencyConflictError, DuplicateEntityError
from invoicing.domain.models.catalog import Catalog, Discount, TaxRate
from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.repositories.catalog_repository import CatalogRepository
from invoicing.domain.repositories.invoice_repository import InvoiceRepository


class InMemoryInvoiceRepository(InvoiceRepository):
    """Dictionary-backed invoice repository."""

    def __init__(self):
        self._invoices: Dict[str, Invoice] = {}

    async def save(self, invoice: Invoice, expected_version: Optional[int] = None) -> Invoice:
        current = self._invoices.get(invoice.id)
        actual = current.version if current is not None else 0
        if expected_version is not None and actual != expected_version:
            raise ConcurrencyConflictError("Invoice", invoice.id, expected_version, actual)
        if invoice.number and any(
            other.id != invoice.id and other.merchant_id == invoice.merchant_id and other.number == invoice.number
            for other in self._invoices.values()
        ):
            raise DuplicateEntityError("Invoice", "number", invoice.number)

        saved = replace(invoice, version=actual + 1)
        self._invoices[saved.id] = copy.deepcopy(saved)
        return saved

    async def find_by_id(self, invoice_id: str) -> Optional[Invoice]:
        invoice = self._invoices.get(invoice_id)
        return copy.deepcopy(invoice) if invoice is not None else None

    async def find_by_number(self, merchant_id: str, number: str) -> Optional[Invoice]:
        for invoice in self._invoices.values():
            if invoice.merchant_id == merchant_id and invoice.number == number:
                return copy.deepcopy(invoice)
        return None

    async def find_by_merchant(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Invoice]:
        invoices = self._filter(merchant_id, status, search)
        invoices.sort(key=lambda inv: (inv.created_at, inv.id), reverse=True)
        end = offset + limit if limit else None
        return [copy.deepcopy(inv) for inv in invoices[offset:end]]

    async def count_by_merchant(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None
    ) -> int:
        return len(self._filter(merchant_id, status, search))

    async def delete(self, invoice_id: str) -> bool:
        return self._invoices.pop(invoice_id, None) is not None

    def _filter(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus],
        search: Optional[str] = None
    ) -> List[Invoice]:
        term = (search or "").strip().lower()
        return [
            inv for inv in self._invoices.values()
            if inv.merchant_id == merchant_id
            and (status is None or inv.status == status)
            and (not term or _matches(inv, term))
        ]


def _matches(invoice: Invoice, term: str) -> bool:
    """Case-insensitive match on number, customer id or memo."""
    return any(
        term in value.lower()
        for value in (invoice.number, invoice.customer_id, invoice.memo)
        if value
    )


class InMemoryCatalogRepository(CatalogRepository):
    """Dictionary-backed catalog repository, keyed by merchant."""

    def __init__(self):
        self._tax_rates: Dict[str, Dict[str, TaxRate]] = {}
        self._discounts: Dict[str, Dict[str, Discount]] = {}

    async def load_catalog(self, merchant_id: str) -> Catalog:
        return Catalog.of(
            tax_rates=await self.list_tax_rates(merchant_id),
            discounts=await self.list_discounts(merchant_id),
        )

    async def save_tax_rate(self, merchant_id: str, tax_rate: TaxRate) -> TaxRate:
        self._tax_rates.setdefault(merchant_id, {})[tax_rate.id] = tax_rate
        return tax_rate

    async def save_discount(self, merchant_id: str, discount: Discount) -> Discount:
        self._discounts.setdefault(merchant_id, {})[discount.id] = discount
        return discount

    async def list_tax_rates(self, merchant_id: str) -> List[TaxRate]:
        rates = self._tax_rates.get(merchant_id, {})
        return [rates[key] for key in sorted(rates)]

    async def list_discounts(self, merchant_id: str) -> List[Discount]:
        discounts = self._discounts.get(merchant_id, {})
        return [discounts[key] for key in sorted(discounts)]
