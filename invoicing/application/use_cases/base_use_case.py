"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass
from datetime import datetime

from invoicing.domain.events.base import DomainEvent, EventDispatcher
from invoicing.domain.models.base import DomainException, ValidationError, utcnow


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, ValidationError):
            return cls.error_result(exc.message, exc.code, {"field": exc.field})
        elif isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        else:
            return cls.error_result(str(exc), "UNKNOWN_ERROR")


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """

    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case, converting raised errors into a result.
        """
        started = utcnow()
        name = self.__class__.__name__

        try:
            await self._validate_request(request)
            result = await self._execute_business_logic(request)
        except DomainException as exc:
            logger.info(f"{name} rejected: {exc.code}: {exc.message}")
            return self._failure(exc, started)
        except Exception as exc:
            logger.exception(f"{name} failed unexpectedly")
            return self._failure(exc, started)

        finished = utcnow()
        return UseCaseResult.success_result(
            result,
            metadata={
                "execution_time_seconds": (finished - started).total_seconds(),
                "executed_at": finished.isoformat()
            }
        )

    def _failure(self, exc: Exception, started: datetime) -> UseCaseResult[R]:
        finished = utcnow()
        error_result = UseCaseResult.from_exception(exc)
        error_result.metadata = {
            **(error_result.metadata or {}),
            "execution_time_seconds": (finished - started).total_seconds(),
            "failed_at": finished.isoformat(),
            "exception_type": type(exc).__name__
        }
        return error_result

    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        pass

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Events are published only after the command's result has been saved.
    """

    def __init__(self, event_dispatcher: Optional[EventDispatcher] = None):
        self.event_dispatcher = event_dispatcher

    async def _execute_business_logic(self, request: T) -> R:
        return await self._execute_command_logic(request)

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    async def _publish_events(self, events: List[DomainEvent]) -> None:
        """Publish domain events produced by a saved transition."""
        if self.event_dispatcher is None or not events:
            return
        await self.event_dispatcher.dispatch_all(events)


class PaginatedQueryUseCase(QueryUseCase[T, R]):
    """
    Base class for paginated query use cases.
    """

    def __init__(self, default_page_size: int = 20, max_page_size: int = 100):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def _validate_request(self, request: T) -> None:
        """Validate paginated request."""
        await super()._validate_request(request)

        limit = getattr(request, 'limit', None)
        if limit is not None:
            if limit > self.max_page_size:
                raise ValidationError(f"Page size cannot exceed {self.max_page_size}", "limit")
            if limit < 1:
                raise ValidationError("Page size must be positive", "limit")
