import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIException(HTTPException):
    """Base class for errors that map onto a structured JSON response."""

    status_code_default = 500
    error_code = "INTERNAL_ERROR"
    message_default = "Internal server error"

    def __init__(self, detail: str = None, status_code: int = None):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail or self.message_default,
        )


class Unauthenticated(APIException):
    status_code_default = 401
    error_code = "UNAUTHENTICATED"
    message_default = "Invalid or expired token"

    def __init__(self, detail: str = None):
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(APIException):
    status_code_default = 403
    error_code = "FORBIDDEN"
    message_default = "Access denied"


class InvalidUpdate(APIException):
    status_code_default = 400
    error_code = "INVALID_UPDATE"
    message_default = "Invalid updates"


class InvalidRequest(APIException):
    status_code_default = 400
    error_code = "INVALID_REQUEST"
    message_default = "Invalid request"


class InvalidCredentials(APIException):
    status_code_default = 401
    error_code = "INVALID_CREDENTIALS"
    message_default = "Invalid credentials"


class NotFound(APIException):
    status_code_default = 404
    error_code = "NOT_FOUND"
    message_default = "Not found"


class Conflict(APIException):
    status_code_default = 409
    error_code = "CONFLICT"
    message_default = "Resource already exists"


class InvalidTransition(APIException):
    status_code_default = 409
    error_code = "INVALID_TRANSITION"
    message_default = "Invalid status transition"


class UpdateFailed(APIException):
    error_code = "UPDATE_FAILED"
    message_default = "Update failed"


class ReadFailed(APIException):
    error_code = "READ_FAILED"
    message_default = "Read failed"


def create_error_response(message: str, error: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "message": message,
        "error": error,
    }


def _error_code_for_status(status_code: int) -> str:
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHENTICATED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        413: "PAYLOAD_TOO_LARGE",
    }.get(status_code, "INTERNAL_ERROR" if status_code >= 500 else "ERROR")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    error = getattr(exc, "error_code", None) or _error_code_for_status(exc.status_code)
    # HTTPBearer reports a missing header as 403 "Not authenticated"
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response(Unauthenticated.message_default, Unauthenticated.error_code),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), error),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body validation errors are reported as 400 with the common error shape"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info(f"Request validation failed on {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content=create_error_response(message, "VALIDATION_ERROR"),
    )
