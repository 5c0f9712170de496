"""
Event system setup and configuration.
Registers all event handlers with an event dispatcher.
"""

import logging
from typing import Optional

from invoicing.domain.events.base import EventDispatcher
from .audit_handlers import AuditLogHandler, InvoiceStatusHandler

logger = logging.getLogger(__name__)


def setup_event_handlers(dispatcher: Optional[EventDispatcher] = None) -> EventDispatcher:
    """Set up and register all event handlers, returning the dispatcher."""

    dispatcher = dispatcher or EventDispatcher()

    # Audit trail receives everything
    dispatcher.register_global_handler(AuditLogHandler())

    status_handler = InvoiceStatusHandler()
    for event_type in ("InvoiceOpened", "InvoicePaid", "InvoiceVoided", "InvoiceMarkedUncollectible"):
        dispatcher.register_handler(event_type, status_handler)

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.debug(f"Event {event_type}: {', '.join(handlers)} handlers")

    logger.info("Event handlers registered successfully")
    return dispatcher
