"""Invoice repository interface.
Defines the contract for invoice persistence. The engine never holds
documents itself; callers load an invoice, apply a command and save the result.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from invoicing.domain.models.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice aggregate.
    """

    @abstractmethod
    async def save(self, invoice: Invoice, expected_version: Optional[int] = None) -> Invoice:
        """
        Save an invoice.

        When expected_version is given the stored invoice must still be at
        that version, otherwise ConcurrencyConflictError is raised. Another
        invoice of the same merchant holding the same number raises
        DuplicateEntityError. Returns the saved invoice with its version incremented.
        """
        pass

    @abstractmethod
    async def find_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Find an invoice by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_number(self, merchant_id: str, number: str) -> Optional[Invoice]:
        """
        Find a merchant's invoice by its number.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_merchant(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Invoice]:
        """
        Find invoices for a merchant, newest first, optionally by status.
        ``search`` matches the number, customer id or memo, case-insensitively.
        """
        pass

    @abstractmethod
    async def count_by_merchant(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None
    ) -> int:
        """
        Count invoices for a merchant.
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str) -> bool:
        """
        Delete an invoice. Returns False if it did not exist.
        """
        pass
