"""Custom middleware and exception handlers producing RFC 9457 problem details."""

from typing import Callable, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..core.errors import (
    DuplicateDomainError,
    InvalidEmailError,
    NotFoundError,
    PatriotThanksError,
    ValidationFailure,
)
from ..utils.logging_config import get_logger, log_exception

logger = get_logger("api")

DEFAULT_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class ProblemDetailsException(StarletteHTTPException):
    """Enhanced HTTPException that includes RFC 9457 Problem Details."""

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        **extra_fields,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.title = title
        self.type_uri = type_uri or f"https://httpstatuses.com/{status_code}"
        self.instance = instance
        self.extra_fields = extra_fields


def problem_response(
    status_code: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: Optional[str] = None,
    instance: Optional[str] = None,
    **extra_fields,
) -> JSONResponse:
    """Create a JSON response in RFC 9457 Problem Details format."""
    problem = {
        "type": type_uri or f"https://httpstatuses.com/{status_code}",
        "title": title,
        "status": status_code,
    }

    if detail:
        problem["detail"] = detail
    if instance:
        problem["instance"] = instance

    # Add any extra fields
    problem.update(extra_fields)

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(problem),
        media_type="application/problem+json",
    )


def problem_from_domain_error(exc: PatriotThanksError) -> ProblemDetailsException:
    """Translate a domain error into the matching problem details."""
    if isinstance(exc, NotFoundError):
        return ProblemDetailsException(
            status_code=status.HTTP_404_NOT_FOUND,
            title=f"{exc.entity} Not Found",
            detail=str(exc),
        )
    if isinstance(exc, ValidationFailure):
        return ProblemDetailsException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            title="Validation Error",
            detail=str(exc),
            errors=exc.errors,
        )
    if isinstance(exc, InvalidEmailError):
        return ProblemDetailsException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            title="Invalid Email",
            detail=str(exc),
        )
    if isinstance(exc, DuplicateDomainError):
        return ProblemDetailsException(
            status_code=status.HTTP_409_CONFLICT,
            title="Duplicate Domain",
            detail=str(exc),
        )
    return ProblemDetailsException(
        status_code=status.HTTP_400_BAD_REQUEST,
        title="Bad Request",
        detail=str(exc),
    )


async def _problem_details_handler(request: Request, exc: ProblemDetailsException):
    return problem_response(
        status_code=exc.status_code,
        title=exc.title,
        detail=exc.detail,
        type_uri=exc.type_uri,
        instance=exc.instance or str(request.url),
        **exc.extra_fields,
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return problem_response(
        status_code=exc.status_code,
        title=DEFAULT_TITLES.get(exc.status_code, "HTTP Error"),
        detail=exc.detail,
        instance=str(request.url),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    return problem_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        title="Validation Error",
        detail="Request validation failed",
        instance=str(request.url),
        validation_errors=exc.errors(),
    )


async def _domain_error_handler(request: Request, exc: PatriotThanksError):
    logger.info(f"{request.method} {request.url.path} -> {type(exc).__name__}: {exc}")
    return await _problem_details_handler(request, problem_from_domain_error(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Render every handled error as problem details."""
    app.add_exception_handler(ProblemDetailsException, _problem_details_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(PatriotThanksError, _domain_error_handler)


class ProblemDetailsMiddleware(BaseHTTPMiddleware):
    """Middleware turning unexpected exceptions into 500 Problem Details."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            log_exception(
                "api", exc, {"method": request.method, "path": request.url.path}
            )
            return problem_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                title="Internal Server Error",
                detail="An unexpected error occurred",
                instance=str(request.url),
            )
