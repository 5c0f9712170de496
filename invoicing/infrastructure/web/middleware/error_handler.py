"""
Error handling for the HTTP layer.
Every error leaves the API as a problem body: {type, title, status, detail}.
"""

import logging
import traceback
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from invoicing.application.dto.base_dto import ProblemDetailDTO, to_dict
from invoicing.application.use_cases.base_use_case import UseCaseResult

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"

ERROR_CODE_STATUS = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ILLEGAL_TRANSITION": status.HTTP_409_CONFLICT,
    "CONCURRENCY_CONFLICT": status.HTTP_409_CONFLICT,
    "DUPLICATE_ENTITY": status.HTTP_409_CONFLICT,
    "EXTERNAL_PROVIDER_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def problem_body(
    status_code: int,
    detail: str,
    code: Optional[str] = None,
    field: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a problem body for the given status."""
    problem = ProblemDetailDTO(
        type=f"https://httpstatuses.com/{status_code}",
        title=HTTPStatus(status_code).phrase,
        status=status_code,
        detail=detail,
        code=code or None,
        field=field or None,
    )
    return to_dict(problem)


def problem_response(status_code: int, detail: str, **kwargs) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=problem_body(status_code, detail, **kwargs),
        media_type=PROBLEM_CONTENT_TYPE,
    )


class ProblemException(Exception):
    """Raised by routes to answer with a problem response."""

    def __init__(self, status_code: int, detail: str, code: Optional[str] = None, field: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.field = field
        super().__init__(detail)

    @classmethod
    def from_result(cls, result: UseCaseResult) -> "ProblemException":
        status_code = ERROR_CODE_STATUS.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        detail = result.error or "An unexpected error occurred"
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            detail = "An unexpected error occurred"
        field = (result.metadata or {}).get("field")
        return cls(status_code, detail, code=result.error_code, field=field)


def unwrap(result: UseCaseResult) -> Any:
    """Return the result data or raise the matching problem."""
    if not result.success:
        raise ProblemException.from_result(result)
    return result.data


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        body = problem_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")
        if self.debug:
            body["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body,
            media_type=PROBLEM_CONTENT_TYPE,
        )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the problem-response handlers on an application."""

    @app.exception_handler(ProblemException)
    async def problem_exception_handler(request: Request, exc: ProblemException):
        return problem_response(exc.status_code, exc.detail, code=exc.code, field=exc.field)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = first.get("msg", "Invalid request")
        if location:
            detail = f"{location}: {detail}"
        return problem_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail,
            code="VALIDATION_ERROR",
            field=location or None,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
            detail = f"The path {request.url.path} was not found"
        return problem_response(exc.status_code, detail)
