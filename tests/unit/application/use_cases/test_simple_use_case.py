"""
Unit tests for use case result handling.
"""

import pytest

from invoicing.application.use_cases.base_use_case import (
    CommandUseCase, PaginatedQueryUseCase, QueryUseCase, UseCaseResult
)
from invoicing.domain.models.base import (
    ConcurrencyConflictError, EntityNotFoundError, ExternalProviderError,
    IllegalTransitionError, ValidationError
)


class TestUseCaseResult:
    """Test cases for UseCaseResult."""

    def test_success_result(self):
        result = UseCaseResult.success_result({"id": "inv_1"})

        assert result.success is True
        assert result.data == {"id": "inv_1"}
        assert result.error is None
        assert result.error_code is None

    def test_error_result(self):
        result = UseCaseResult.error_result("Something went wrong", "TEST_ERROR")

        assert result.success is False
        assert result.data is None
        assert result.error == "Something went wrong"
        assert result.error_code == "TEST_ERROR"

    def test_validation_error_keeps_field(self):
        result = UseCaseResult.from_exception(ValidationError("Quantity must be positive", "quantity"))

        assert result.error_code == "VALIDATION_ERROR"
        assert result.metadata == {"field": "quantity"}

    @pytest.mark.parametrize("exc,code", [
        (IllegalTransitionError("open", "paid"), "ILLEGAL_TRANSITION"),
        (ExternalProviderError("payments", "down"), "EXTERNAL_PROVIDER_ERROR"),
        (EntityNotFoundError("Invoice", "inv_9"), "ENTITY_NOT_FOUND"),
        (ConcurrencyConflictError("Invoice", "inv_1", 2, 3), "CONCURRENCY_CONFLICT"),
    ])
    def test_domain_errors_map_to_codes(self, exc, code):
        result = UseCaseResult.from_exception(exc)

        assert result.success is False
        assert result.error_code == code
        assert result.error == exc.message

    def test_unknown_error(self):
        result = UseCaseResult.from_exception(RuntimeError("boom"))
        assert result.error_code == "UNKNOWN_ERROR"


class EchoUseCase(QueryUseCase):

    async def _execute_business_logic(self, request):
        if request == "explode":
            raise RuntimeError("exploded")
        if request == "invalid":
            raise ValidationError("Invalid request", "request")
        return request.upper()


class RecordingCommand(CommandUseCase):

    async def _execute_command_logic(self, request):
        await self._publish_events(request)
        return len(request)


class TestBaseUseCase:

    @pytest.mark.asyncio
    async def test_success_carries_timing_metadata(self):
        result = await EchoUseCase().execute("hello")

        assert result.success is True
        assert result.data == "HELLO"
        assert "execution_time_seconds" in result.metadata

    @pytest.mark.asyncio
    async def test_domain_error_becomes_result(self):
        result = await EchoUseCase().execute("invalid")

        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"
        assert result.metadata["field"] == "request"
        assert result.metadata["exception_type"] == "ValidationError"

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_result(self):
        result = await EchoUseCase().execute("explode")

        assert result.success is False
        assert result.error_code == "UNKNOWN_ERROR"

    @pytest.mark.asyncio
    async def test_command_without_dispatcher_skips_publishing(self):
        result = await RecordingCommand().execute(["event"])
        assert result.data == 1


class PagedUseCase(PaginatedQueryUseCase):

    async def _execute_business_logic(self, request):
        return request.limit


class TestPaginatedQueryUseCase:

    @pytest.mark.asyncio
    async def test_limit_over_maximum_rejected(self):
        class Request:
            limit = 500

        result = await PagedUseCase(max_page_size=100).execute(Request())

        assert result.success is False
        assert result.error_code == "VALIDATION_ERROR"
