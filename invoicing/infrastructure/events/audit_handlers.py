"""
Event handlers that record invoice activity.
"""

import logging

from invoicing.domain.events.base import EventHandler, DomainEvent
from invoicing.domain.events.invoice_events import (
    InvoiceMarkedUncollectible,
    InvoiceOpened,
    InvoicePaid,
    InvoiceVoided,
)


audit_logger = logging.getLogger("invoicing.audit")
logger = logging.getLogger(__name__)


class AuditLogHandler(EventHandler):
    """Writes every domain event to the audit log."""

    async def handle(self, event: DomainEvent) -> None:
        payload = event.to_dict()
        audit_logger.info(
            f"{event.event_type} {payload['event_id']}",
            extra={"event": payload},
        )


class InvoiceStatusHandler(EventHandler):
    """Logs status changes that merchants usually need to act on."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (InvoiceOpened, InvoicePaid, InvoiceVoided, InvoiceMarkedUncollectible))

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, InvoiceOpened):
            logger.info(
                f"Invoice {event.invoice_id} opened for {event.total} {event.currency}, "
                f"payment link {event.payment_link_url}"
            )
        elif isinstance(event, InvoicePaid):
            logger.info(f"Invoice {event.invoice_id} paid: {event.amount_paid} {event.currency}")
        elif isinstance(event, InvoiceVoided):
            logger.info(f"Invoice {event.invoice_id} voided from {event.previous_status}")
        elif isinstance(event, InvoiceMarkedUncollectible):
            logger.warning(
                f"Invoice {event.invoice_id} marked uncollectible with {event.amount_due} outstanding"
            )
