from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import List, Tuple

from app.core.config import settings
from app.core.database import init_db, close_db
from app.core.exceptions import BackupError, FieldValidationError, PanelError, error_response
from app.core.logging_config import logger
from app.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.api.v1.router import api_router
from app.schemas.common import describe_error
from slowapi.errors import RateLimitExceeded

APP_VERSION = "1.0.0"


def startup_problems() -> Tuple[List[str], List[str]]:
    """(fatal, non-fatal) configuration problems"""
    fatal, degraded = [], []

    for name in ("DATABASE_URL", "SECRET_KEY", "JWT_SECRET_KEY"):
        value = getattr(settings, name)
        if not value or value == "CHANGE_ME":
            fatal.append(f"{name} is not set or using default value")

    if not settings.BACKUP_COMMAND.strip():
        degraded.append("BACKUP_COMMAND not set - running backups will fail")

    return fatal, degraded


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME} {APP_VERSION} ({settings.ENVIRONMENT}, API {settings.API_VERSION})")

    fatal, degraded = startup_problems()
    for problem in fatal:
        logger.critical(f"[Startup] CRITICAL: {problem}")
    if fatal:
        raise RuntimeError(f"Missing critical configuration: {', '.join(fatal)}")
    for problem in degraded:
        logger.warning(f"[Startup] WARNING: {problem}")

    await init_db()
    logger.info("[Startup] Database tables ready")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Role-based administration panel: domains, storage plans, backups and access control",
    version=APP_VERSION,
    lifespan=lifespan,
    redirect_slashes=False  # Prevent 307 redirects that break CORS
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Last added runs first: CORS, size limit, security headers, then logging
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.exception_handler(PanelError)
async def panel_error_handler(request: Request, exc: PanelError):
    if isinstance(exc, BackupError):
        # The reason stays in the log; the client only sees the generic message
        logger.error(
            f"[Backup] Failed: {exc.reason or exc.message}",
            extra={"event_type": "backup_failed", "reason": exc.reason},
        )
    elif exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    else:
        logger.info(
            f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}",
            extra={"event_type": "client_error", "error_code": exc.code},
        )
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """FastAPI's own validation failures, reported in the panel's error shape"""
    errors = {}
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = str(loc[0]) if loc else "__root__"
        errors.setdefault(field, []).append(describe_error(field, error))
    return await panel_error_handler(request, FieldValidationError(errors))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": str(exc) if settings.DEBUG else "Internal server error",
                "details": {},
            },
        }
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness for load balancers; see /api/v1/health/* for details"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )
