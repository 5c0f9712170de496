"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .invoice_repository import InvoiceRepository
from .catalog_repository import CatalogRepository

__all__ = ["InvoiceRepository", "CatalogRepository"]
