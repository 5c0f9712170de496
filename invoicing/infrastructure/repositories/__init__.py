"""
Infrastructure repositories module.
Contains SQLAlchemy and in-memory implementations of domain repositories.
"""

from .invoice_repository import SQLAlchemyInvoiceRepository
from .catalog_repository import SQLAlchemyCatalogRepository
from .memory import InMemoryInvoiceRepository, InMemoryCatalogRepository

__all__ = [
    "SQLAlchemyInvoiceRepository",
    "SQLAlchemyCatalogRepository",
    "InMemoryInvoiceRepository",
    "InMemoryCatalogRepository",
]
