"""
Health Check Endpoints

Endpoints:
- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database reachable, every panel table present)
- /health/deep  - Readiness plus the backup engine configuration
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Dict, Any, List
import time

from app.core.config import settings
from app.core.database import Base, get_db
from app.core.logging_config import logger


router = APIRouter(prefix="/health", tags=["Health Checks"])


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _table_names(session) -> List[str]:
    return inspect(session.connection()).get_table_names()


async def check_database(db: AsyncSession) -> Dict[str, Any]:
    """Round trip to the database and compare its tables with the models"""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
        present = set(await db.run_sync(_table_names))
    except Exception as e:
        logger.error(f"[HealthCheck] Database check failed: {e}", exc_info=True)
        return {
            "status": "unhealthy",
            "latency_ms": _elapsed_ms(start),
            "connection": "failed",
            "missing_tables": [],
        }

    missing = sorted(set(Base.metadata.tables) - present)
    return {
        "status": "healthy" if not missing else "unhealthy",
        "latency_ms": _elapsed_ms(start),
        "connection": "ok",
        "missing_tables": missing,
    }


def check_backup_config() -> Dict[str, Any]:
    """Backup engine configuration (the command is not executed)"""
    configured = bool(settings.BACKUP_COMMAND.strip())
    return {
        "status": "healthy" if configured else "degraded",
        "configured": configured,
        "directory_exists": settings.BACKUP_DIR.is_dir(),
    }


def overall_status(checks: Dict[str, Dict[str, Any]]) -> str:
    statuses = {check.get("status", "unknown") for check in checks.values()}
    for candidate in ("unhealthy", "degraded"):
        if candidate in statuses:
            return candidate
    return "healthy"


@router.get("/live")
async def liveness_check():
    """Liveness probe - returns 200 while the process is alive"""
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat(),
        "app": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Readiness probe - 503 until the database is reachable with its tables"""
    database = await check_database(db)
    response = {
        "status": "ready" if database["status"] == "healthy" else "not_ready",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {"database": database},
    }

    if database["status"] != "healthy":
        logger.warning(f"[HealthCheck] Readiness check failed: {database}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response)

    return response


@router.get("/deep")
async def deep_health_check(db: AsyncSession = Depends(get_db)):
    """Full diagnostics for monitoring dashboards"""
    start = time.perf_counter()
    checks = {
        "database": await check_database(db),
        "backup": check_backup_config(),
    }
    overall = overall_status(checks)

    if overall == "unhealthy":
        logger.error(f"[HealthCheck] Deep check unhealthy: {checks}")

    return {
        "status": overall,
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.ENVIRONMENT,
        "total_check_time_ms": _elapsed_ms(start),
        "checks": checks,
    }
