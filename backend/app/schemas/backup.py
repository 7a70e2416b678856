"""
Backup Schemas
"""
from pydantic import BaseModel
from typing import List


class BackupFile(BaseModel):
    name: str
    size: int  # bytes
    last_modified: int  # unix timestamp
    download_url: str


class BackupListResponse(BaseModel):
    backups: List[BackupFile]


class BackupRunResponse(BaseModel):
    message: str
    backups: List[BackupFile]
