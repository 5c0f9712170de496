"""
Base entity and exception types for the domain layer.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime, timezone
from typing import Optional, Any, Dict
from abc import ABC
from dataclasses import dataclass, field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides common attributes and behavior for all entities.
    """

    id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))

    @property
    def is_new(self) -> bool:
        """Check if entity is new (not persisted)."""
        return self.id is None


@dataclass
class AggregateRoot(BaseEntity):
    """
    Base class for aggregate roots.
    The version counter is used for optimistic locking by repositories.
    """

    version: int = field(default=1)


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when input or entity validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class IllegalTransitionError(DomainException):
    """Exception raised when a lifecycle command is not allowed in the current state."""

    def __init__(self, command: str, status: str, reason: Optional[str] = None):
        message = f"Cannot {command} an invoice in status '{status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, "ILLEGAL_TRANSITION")
        self.command = command
        self.status = status


class ExternalProviderError(DomainException):
    """Exception raised when an external provider call fails."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}", "EXTERNAL_PROVIDER_ERROR")
        self.provider = provider


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateEntityError(DomainException):
    """Exception raised when trying to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any):
        message = f"{entity_type} with {field}='{value}' already exists"
        super().__init__(message, "DUPLICATE_ENTITY")
        self.entity_type = entity_type
        self.field = field
        self.value = value


class ConcurrencyConflictError(DomainException):
    """Exception raised when a save is based on a stale aggregate version."""

    def __init__(self, entity_type: str, entity_id: Any, expected: int, actual: int):
        message = (
            f"{entity_type} {entity_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        super().__init__(message, "CONCURRENCY_CONFLICT")
        self.entity_type = entity_type
        self.entity_id = entity_id


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.
    Value objects are immutable and are compared by their values.
    """

    def __post_init__(self):
        """Validate value object after creation."""
        self.validate()

    def validate(self) -> None:
        """Validate the value object's state."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return dict(self.__dict__)
