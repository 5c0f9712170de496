"""
Domain models for the invoicing engine.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    AggregateRoot,
    DomainException,
    ValidationError,
    IllegalTransitionError,
    ExternalProviderError,
    EntityNotFoundError,
    DuplicateEntityError,
    ConcurrencyConflictError,
    ValueObject
)

# Value Objects
from .value_objects import (
    Money,
    CurrencyCode,
    InvoiceNumber,
    MAX_MINOR_UNITS
)

# Catalog definitions
from .catalog import (
    TaxRate,
    Discount,
    DiscountKind,
    Catalog
)

# Domain entities
from .invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceTotals,
    LineItem,
    TERMINAL_STATUSES
)

__all__ = [
    "BaseEntity",
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "IllegalTransitionError",
    "ExternalProviderError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "ConcurrencyConflictError",
    "ValueObject",
    "Money",
    "CurrencyCode",
    "InvoiceNumber",
    "MAX_MINOR_UNITS",
    "TaxRate",
    "Discount",
    "DiscountKind",
    "Catalog",
    "Invoice",
    "InvoiceStatus",
    "InvoiceTotals",
    "LineItem",
    "TERMINAL_STATUSES",
]
