"""
Backup endpoints - list, run, download and delete database backup archives.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import backup_run_rate_limit
from app.models.user import User
from app.modules.auth.capabilities import (
    require_capability,
    BACKUP_VIEW,
    BACKUP_RUN,
    BACKUP_DOWNLOAD,
    BACKUP_DELETE,
)
from app.schemas.backup import BackupListResponse, BackupRunResponse
from app.schemas.common import MessageResponse
from app.services.backup_service import backup_service

router = APIRouter()


@router.get("", response_model=BackupListResponse)
async def list_backups(
    current_user: User = Depends(require_capability(BACKUP_VIEW)),
):
    return {"backups": backup_service.list_backups()}


@router.post("/run", response_model=BackupRunResponse)
@backup_run_rate_limit()
async def run_backup(
    request: Request,
    current_user: User = Depends(require_capability(BACKUP_RUN)),
    db: AsyncSession = Depends(get_db)
):
    """Run a database-only backup; failures return a generic error"""
    backups = await backup_service.run(db, actor=current_user)
    return {"message": "Backup created successfully.", "backups": backups}


@router.get("/download/{file}")
async def download_backup(
    file: str,
    current_user: User = Depends(require_capability(BACKUP_DOWNLOAD)),
):
    path = backup_service.resolve(file)
    logger.info(
        f"[Backup] {current_user.email} downloading {path.name}",
        extra={"event_type": "backup_download", "file": path.name},
    )
    return FileResponse(path, media_type="application/zip", filename=path.name)


@router.delete("/delete/{file}", response_model=MessageResponse)
async def delete_backup(
    file: str,
    current_user: User = Depends(require_capability(BACKUP_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await backup_service.delete(db, file, actor=current_user)
    return {"message": "Backup deleted successfully."}
