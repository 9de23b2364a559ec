"""
Error types and the handlers that render them.

Business outcomes (authorization denials, join failures, missing workspaces)
and infrastructure failures are raised as ``BaseAPIException`` subclasses.
Every error, including request validation and unexpected exceptions, leaves
the service in the same envelope::

    {"error": {"message": ..., "code": ..., "timestamp": ..., "details": ...}}
"""
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.logger import get_logger
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = get_logger(__name__)


class BaseAPIException(Exception):
    """Base class for errors rendered as API responses."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    # Expected business outcomes are logged below error level
    log_level = "error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(BaseAPIException):
    """Malformed input, rejected before the workspace logic runs."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Validation error"
    log_level = "warning"


class AuthenticationException(BaseAPIException):
    """No verifiable caller identity on the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_ERROR"
    default_message = "Authentication required"
    log_level = "info"


class UnauthorizedException(BaseAPIException):
    """The caller's membership does not carry the required role."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_message = "Unauthorized"
    log_level = "info"


class ResourceNotFoundException(BaseAPIException):
    """A referenced workspace does not exist or is not visible."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "RESOURCE_NOT_FOUND"
    log_level = "info"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} with identifier '{identifier}' not found",
            details={"resource": resource, "identifier": str(identifier)},
        )


class AlreadyMemberException(BaseAPIException):
    """The user already holds a membership in the workspace."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "ALREADY_MEMBER"
    default_message = "Already a member"
    log_level = "info"


class InvalidInviteCodeException(BaseAPIException):
    """The supplied code does not match the workspace's current invite code."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_INVITE_CODE"
    default_message = "Invalid invite code"
    log_level = "info"


class InfrastructureException(BaseAPIException):
    """The document store or blob store is unavailable or failing."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "INFRASTRUCTURE_ERROR"

    def __init__(self, service: str, message: str = "Service unavailable"):
        super().__init__(f"{service}: {message}", details={"service": service})


def create_error_response(
    message: str,
    error_code: str,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build the error envelope."""
    error: Dict[str, Any] = {
        "message": message,
        "code": error_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        error["details"] = details
    if request_id:
        error["request_id"] = request_id
    return {"error": error}


def _render(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(
            message=message,
            error_code=error_code,
            details=details,
            request_id=getattr(request.state, "request_id", None),
        ),
        headers=headers,
    )


def _flatten_validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    return [
        {
            "field": " -> ".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Render a ``BaseAPIException``."""
    getattr(logger, exc.log_level)(
        "Request failed",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method,
    )
    return _render(request, exc.status_code, exc.message, exc.error_code, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the same envelope."""
    logger.info(
        "HTTP error",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
    )
    return _render(
        request,
        exc.status_code,
        str(exc.detail),
        "HTTP_ERROR",
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed path, body or form input as 400."""
    errors = _flatten_validation_errors(exc)
    logger.warning(
        "Request validation failed",
        errors=errors,
        path=request.url.path,
        method=request.method,
    )
    return _render(
        request,
        status.HTTP_400_BAD_REQUEST,
        ValidationException.default_message,
        ValidationException.error_code,
        {"errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; hides internals outside development."""
    from app.core.config import settings

    logger.error(
        "Unhandled exception",
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        traceback=traceback.format_exc(),
        path=request.url.path,
        method=request.method,
    )

    details = None
    message = BaseAPIException.default_message
    if settings.is_development:
        message = f"{message}: {exc}"
        details = {"traceback": traceback.format_exc()}

    return _render(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message,
        BaseAPIException.error_code,
        details,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all error handlers on the application."""
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
