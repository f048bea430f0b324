import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .core.config import settings
from .exceptions import create_error_response

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # Responses carry account and medical data
    "Cache-Control": "no-store",
}


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        client = request.client.host if request.client else "unknown"
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} from {client} -> {response.status_code} ({elapsed_ms:.1f}ms)")
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
            message = f"Internal server error: {e}" if settings.DEBUG else "Internal server error"
            return JSONResponse(status_code=500, content=create_error_response(message, "INTERNAL_ERROR"))


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject bodies over MAX_REQUEST_SIZE based on the declared Content-Length."""

    async def dispatch(self, request: Request, call_next):
        declared = request.headers.get("content-length")
        if declared is None:
            return await call_next(request)
        try:
            size = int(declared)
        except ValueError:
            return JSONResponse(
                status_code=400,
                content=create_error_response("Malformed Content-Length header", "BAD_REQUEST"),
            )
        if size > settings.MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413,
                content=create_error_response("Request entity too large", "PAYLOAD_TOO_LARGE"),
            )
        return await call_next(request)
