"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Any, Dict, List, Optional, TypeVar, Generic
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from invoicing.domain.models.base import utcnow


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        # Unknown fields are rejected
        extra="forbid",
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ListRequestDTO(RequestDTO):
    """Base class for list request DTOs with offset pagination."""

    limit: int = Field(default=20, ge=1, le=100, description="Maximum number of items")
    offset: int = Field(default=0, ge=0, description="Number of items to skip")


T = TypeVar('T')


class ListResponseDTO(BaseDTO, Generic[T]):
    """Base class for paginated list responses."""

    items: List[T] = Field(description="List of items")
    total: int = Field(description="Total number of items")
    limit: int = Field(description="Maximum number of items requested")
    offset: int = Field(description="Number of items skipped")
    has_more: bool = Field(description="Whether more items follow")

    @classmethod
    def create(cls, items: List[T], total: int, limit: int, offset: int):
        """Create a paginated response."""
        return cls(
            items=items,
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(items) < total,
        )


class HealthCheckResponseDTO(BaseDTO):
    """Health check response DTO."""

    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")
    version: Optional[str] = Field(default=None, description="Application version")
    dependencies: Optional[Dict[str, str]] = Field(default=None, description="Dependency statuses")


class ProblemDetailDTO(BaseDTO):
    """Problem response body (type, title, status, detail)."""

    type: str = Field(description="Problem type URI")
    title: str = Field(description="Short summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(description="Explanation of this occurrence")
    code: Optional[str] = Field(default=None, description="Application error code")
    field: Optional[str] = Field(default=None, description="Offending field, if any")


def to_dict(obj: Any, exclude_none: bool = True) -> Dict[str, Any]:
    """Convert object to dictionary, optionally excluding None values."""
    if hasattr(obj, 'model_dump'):
        return obj.model_dump(exclude_none=exclude_none)
    return dict(obj.__dict__)
