"""
Infrastructure mappers module.
Contains mappers for converting between domain entities and database models.
"""

from .invoice_mapper import InvoiceMapper
from .catalog_mapper import CatalogMapper

__all__ = [
    "InvoiceMapper",
    "CatalogMapper",
]
