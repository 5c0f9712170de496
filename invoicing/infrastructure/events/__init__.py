"""
Infrastructure event handlers.
Handles domain events emitted by invoice transitions.
"""

from .audit_handlers import AuditLogHandler, InvoiceStatusHandler
from .event_setup import setup_event_handlers

__all__ = [
    "AuditLogHandler",
    "InvoiceStatusHandler",
    "setup_event_handlers"
]
