"""
Backup Service - database backup archives on local disk

Handles:
- Running the configured backup command (database only, writes a .zip)
- Listing archives in the backup directory, newest first
- Resolving a requested archive name safely for download / delete

Only plain `*.zip` file names directly inside the backup directory are ever
served or removed; anything else is reported as not found.
"""

import asyncio
import shlex
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import BackupError, BackupNotFoundError
from app.core.logging_config import logger
from app.models.user import User
from app.services.audit_service import record_activity

SUBJECT_TYPE = "Backup"
ARCHIVE_SUFFIX = ".zip"


def is_safe_archive_name(name: str) -> bool:
    """True for a bare `something.zip` file name with no path components"""
    if not name or "\x00" in name or "/" in name or "\\" in name:
        return False
    if name in (".", "..") or Path(name).name != name:
        return False
    return name.endswith(ARCHIVE_SUFFIX) and name != ARCHIVE_SUFFIX


class BackupService:
    """Manages backup archives in a single directory"""

    def __init__(self, backup_dir: Optional[Path] = None):
        self._backup_dir = Path(backup_dir) if backup_dir is not None else None

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir if self._backup_dir is not None else settings.BACKUP_DIR

    # ==================== LISTING ====================

    def list_backups(self) -> List[dict]:
        """
        Every archive in the backup directory, newest first.

        Read only: a missing directory yields an empty list and is not created.
        """
        directory = self.backup_dir
        if not directory.is_dir():
            return []

        found = []
        for path in directory.iterdir():
            if not path.is_file() or path.suffix != ARCHIVE_SUFFIX:
                continue
            stat = path.stat()
            found.append((stat.st_mtime, path.name, stat.st_size))

        # Sort on full-precision mtime; the payload carries whole seconds
        found.sort(reverse=True)
        return [
            {
                "name": name,
                "size": size,
                "last_modified": int(mtime),
                "download_url": f"/api/{settings.API_VERSION}/backup/download/{quote(name)}",
            }
            for mtime, name, size in found
        ]

    def resolve(self, name: str) -> Path:
        """
        Map a requested archive name to its file.

        Raises:
            BackupNotFoundError: unsafe name, outside the directory, or missing
        """
        if not is_safe_archive_name(name):
            logger.warning(
                f"[Backup] Rejected archive name {name!r}",
                extra={"event_type": "backup_name_rejected"},
            )
            raise BackupNotFoundError(name)

        directory = self.backup_dir.resolve()
        path = (directory / name).resolve()
        if path.parent != directory or not path.is_file():
            raise BackupNotFoundError(name)
        return path

    # ==================== MUTATIONS ====================

    async def run(self, db: AsyncSession, actor: Optional[User] = None) -> List[dict]:
        """
        Run the backup command and return the refreshed listing.

        Raises:
            BackupError: command not configured, failed, or timed out
        """
        template = settings.BACKUP_COMMAND.strip()
        if not template:
            logger.error("[Backup] BACKUP_COMMAND is not configured")
            raise BackupError(reason="not configured")

        directory = self.backup_dir
        directory.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.utcnow().strftime("%Y-%m-%d-%H-%M-%S")
        args = [
            arg.format(
                backup_dir=str(directory),
                database_url=settings.DATABASE_URL,
                timestamp=timestamp,
            )
            for arg in shlex.split(template)
        ]

        logger.info(f"[Backup] Starting backup into {directory}")
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            logger.error(f"[Backup] Could not start backup command: {e}", exc_info=True)
            raise BackupError(reason=str(e))

        try:
            output, _ = await asyncio.wait_for(
                process.communicate(), timeout=settings.BACKUP_TIMEOUT_SECONDS
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.error(f"[Backup] Timed out after {settings.BACKUP_TIMEOUT_SECONDS}s")
            raise BackupError(reason="timeout")

        if process.returncode != 0:
            detail = (output or b"").decode(errors="replace")[-2000:]
            logger.error(
                f"[Backup] Command exited with {process.returncode}: {detail}",
                extra={"event_type": "backup_failed", "returncode": process.returncode},
            )
            raise BackupError(reason=f"exit code {process.returncode}")

        record_activity(db, actor, "backup_run", SUBJECT_TYPE, timestamp, {
            "directory": str(directory),
        })
        await db.commit()
        logger.log_mutation("backup_run", SUBJECT_TYPE, timestamp)

        return self.list_backups()

    async def delete(self, db: AsyncSession, name: str, actor: Optional[User] = None) -> None:
        """Remove one archive; unsafe or unknown names raise BackupNotFoundError"""
        path = self.resolve(name)
        size = path.stat().st_size
        path.unlink()

        record_activity(db, actor, "backup_deleted", SUBJECT_TYPE, name, {"size": size})
        await db.commit()
        logger.log_mutation("backup_deleted", SUBJECT_TYPE, name)


backup_service = BackupService()
