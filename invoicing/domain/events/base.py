"""
Base classes for domain events and event handling.
"""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from invoicing.domain.models.base import utcnow


logger = logging.getLogger(__name__)


@dataclass
class DomainEvent(ABC):
    """Base class for all domain events."""

    def __post_init__(self):
        self.event_id: str = str(uuid.uuid4())
        self.occurred_at: datetime = utcnow()

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self._get_event_data()
        }

    @abstractmethod
    def _get_event_data(self) -> Dict[str, Any]:
        """Get event-specific data for serialization."""
        pass


class EventHandler(ABC):
    """Base class for event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle a domain event."""
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process the given event."""
        return True


class EventDispatcher:
    """Dispatches domain events to registered handlers."""

    def __init__(self, max_log_size: int = 1000):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._event_log: Deque[Dict[str, Any]] = deque(maxlen=max_log_size)

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Register an event handler for specific event type."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered handler {handler.__class__.__name__} for {event_type}")

    def register_global_handler(self, handler: EventHandler) -> None:
        """Register a handler that receives all events."""
        self._global_handlers.append(handler)
        logger.debug(f"Registered global handler {handler.__class__.__name__}")

    async def dispatch(self, event: DomainEvent) -> None:
        """Dispatch event to all registered handlers."""
        self._event_log.append(event.to_dict())

        handlers = self._handlers.get(event.event_type, []) + [
            h for h in self._global_handlers if h.can_handle(event)
        ]
        if not handlers:
            logger.debug(f"No handlers registered for event: {event.event_type}")
            return

        await asyncio.gather(*(self._safe_handle(h, event) for h in handlers))

    async def dispatch_all(self, events: List[DomainEvent]) -> None:
        for event in events:
            await self.dispatch(event)

    async def _safe_handle(self, handler: EventHandler, event: DomainEvent) -> None:
        """Run one handler; a failing handler does not affect the others."""
        try:
            await handler.handle(event)
        except Exception:
            logger.exception(
                f"Handler {handler.__class__.__name__} failed to process {event.event_type}"
            )

    def get_registered_handlers(self) -> Dict[str, List[str]]:
        """Handler class names per event type; global handlers under "*"."""
        registered = {
            event_type: [h.__class__.__name__ for h in handlers]
            for event_type, handlers in self._handlers.items()
        }
        if self._global_handlers:
            registered["*"] = [h.__class__.__name__ for h in self._global_handlers]
        return registered

    def get_event_log(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Get recent events from the log, newest first."""
        events = list(reversed(self._event_log))
        return events[:limit] if limit else events

    def clear_event_log(self) -> None:
        self._event_log.clear()
