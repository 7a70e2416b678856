"""
Panel Admin - HTTP Middleware
Request logging with timing, security headers, request body size limit
"""

import time
from typing import Callable, Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
from starlette.types import ASGIApp

from app.core.config import settings
from app.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)


API_PREFIX = f"/api/{settings.API_VERSION}"

# Probes and docs are not worth a log line each
QUIET_PATHS = frozenset({
    "/",
    "/health",
    f"{API_PREFIX}/health",
    f"{API_PREFIX}/health/live",
    f"{API_PREFIX}/health/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
})

# Archive downloads stream from disk and may legitimately be slow
DOWNLOAD_PREFIX = f"{API_PREFIX}/backup/download/"


def is_quiet_path(path: str) -> bool:
    return path in QUIET_PATHS


def is_download_path(path: str) -> bool:
    return path.startswith(DOWNLOAD_PREFIX)


def _level_for(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One line per request on the way in and one on the way out.

    The incoming X-Request-ID is reused when present so a request can be
    followed across the admin UI and the API logs. The acting user, once
    the auth dependency has resolved it, is attached to the completion line.
    """

    def __init__(self, app: ASGIApp, slow_request_ms: Optional[int] = None):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms or settings.SLOW_REQUEST_MS

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        method, path = request.method, request.url.path
        quiet = is_quiet_path(path)
        started = time.perf_counter()

        if not quiet:
            logger.info(
                f"→ {method} {path}",
                extra={
                    "event_type": "http_request_start",
                    "http_method": method,
                    "http_path": path,
                    "client_ip": request.client.host if request.client else "unknown",
                }
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"✗ {method} {path} - {type(exc).__name__} ({elapsed:.2f}ms)",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": method,
                    "http_path": path,
                    "duration_ms": elapsed,
                }
            )
            raise
        finally:
            set_request_id("")
            set_user_id("")

        elapsed = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.2f}ms"

        if not quiet:
            getattr(logger, _level_for(response.status_code))(
                f"← {method} {path} - {response.status_code} ({elapsed:.2f}ms)",
                extra={
                    "event_type": "http_request_complete",
                    "http_method": method,
                    "http_path": path,
                    "http_status": response.status_code,
                    "duration_ms": elapsed,
                    "actor_id": getattr(request.state, "user_id", None),
                }
            )
            if elapsed > self.slow_request_ms and not is_download_path(path):
                logger.warning(
                    f"Slow request: {method} {path} took {elapsed:.2f}ms",
                    extra={"event_type": "slow_request", "http_path": path, "duration_ms": elapsed}
                )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """The panel is never framed and never sniffed"""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Cache-Control": "no-store",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects bodies whose declared length exceeds max_size with a 413"""

    def __init__(self, app: ASGIApp, max_size: Optional[int] = None):
        super().__init__(app)
        self.max_size = max_size or settings.MAX_REQUEST_BYTES

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")

        if declared.isdigit() and int(declared) > self.max_size:
            logger.warning(
                f"Request body too large: {declared} bytes (max: {self.max_size})",
                extra={"event_type": "request_too_large", "http_path": request.url.path}
            )
            return JSONResponse(
                status_code=413,
                content={
                    "success": False,
                    "error": {
                        "code": "PAYLOAD_TOO_LARGE",
                        "message": f"Request body too large. Maximum size is {self.max_size // 1024}KB",
                        "details": {},
                    },
                }
            )

        return await call_next(request)
