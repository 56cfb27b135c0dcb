"""Exception handlers.

Contains FastAPI exception handler functions to map exceptions to HTTP responses.
"""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse, Response

from sufra.core.logging import get_logger
from sufra.exceptions.custom_exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    InvalidStateTransitionError,
    NotFoundError,
    ParseError,
    RateLimitedError,
    SufraError,
    UpstreamError,
    ValidationError,
)

_log = get_logger(__name__)


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return 422 with field level detail."""
    errors = exc.get_errors() if isinstance(exc, ValidationError) else {}
    _log.info("Validation failed for {}: {} {}", request.url.path, exc, errors)
    return JSONResponse(
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "errors": errors},
    )


async def authentication_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return 401 when no usable actor was supplied."""
    _log.warning("Authentication error for request to {}: {}", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.UNAUTHORIZED,
        content={"detail": "Authentication required."},
    )


async def authorization_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return a generic 403; the reason is only logged."""
    _log.warning("Authorization denied for request to {}: {}", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.FORBIDDEN,
        content={"detail": "This action is unauthorized."},
    )


async def not_found_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return a generic 404."""
    resource = exc.get_resource() if isinstance(exc, NotFoundError) else "Resource"
    _log.debug("Not found for request to {}: {}", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.NOT_FOUND,
        content={"detail": f"{resource} not found."},
    )


async def conflict_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return 409, with transition detail for illegal state changes."""
    _log.info("Conflict for request to {}: {}", request.url.path, exc)
    content: dict[str, str] = {"detail": str(exc)}
    if isinstance(exc, InvalidStateTransitionError):
        content["from_state"] = exc.from_state
        content["transition"] = exc.transition
    return JSONResponse(status_code=HTTPStatus.CONFLICT, content=content)


async def configuration_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return 500 flagged as a configuration problem."""
    _log.error("Configuration error for request to {}: {}", request.url.path, exc)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "type": "configuration_error"},
    )


async def upstream_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Return the upstream status, 429 for rate limiting, 502 otherwise."""
    upstream_status = exc.get_status_code() if isinstance(exc, UpstreamError) else None
    if isinstance(exc, RateLimitedError):
        status_code = HTTPStatus.TOO_MANY_REQUESTS
    elif upstream_status is not None and upstream_status >= HTTPStatus.BAD_REQUEST:
        status_code = upstream_status
    else:
        status_code = HTTPStatus.BAD_GATEWAY
    _log.error(
        "Upstream error for request to {} (upstream status {}): {}",
        request.url.path,
        upstream_status,
        exc,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "upstream_status": upstream_status},
    )


async def parse_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 502 when an upstream reply could not be understood."""
    raw = exc.raw if isinstance(exc, ParseError) else None
    _log.error(
        "Unparseable upstream reply for {}: {} | raw={}",
        request.url.path,
        exc,
        (raw or "")[:500],
    )
    return JSONResponse(
        status_code=HTTPStatus.BAD_GATEWAY,
        content={"detail": str(exc)},
    )


async def unhandled_exception_handler(_request: Request, exc: Exception) -> Response:
    """Handle unhandled exceptions in the FastAPI application.

    Args:
        _request: The incoming request that caused the exception.
        exc: The exception that was raised.

    Raises:
        HTTPException: Re-raised untouched so FastAPI renders it.

    Returns:
        JSONResponse with a generic 500 body.
    """
    if isinstance(exc, HTTPException):
        raise exc
    _log.exception("Unhandled exception occurred", exc_info=exc)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every domain exception handler to ``app``.

    Starlette resolves handlers along the exception's MRO, so subclasses registered
    here take precedence over their bases.
    """
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(
        AuthenticationRequiredError, authentication_exception_handler
    )
    app.add_exception_handler(AuthorizationError, authorization_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(ConflictError, conflict_exception_handler)
    app.add_exception_handler(ConfigurationError, configuration_exception_handler)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)
    app.add_exception_handler(ParseError, parse_exception_handler)
    app.add_exception_handler(SufraError, unhandled_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
