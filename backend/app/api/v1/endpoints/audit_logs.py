"""
Audit log viewer.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.capabilities import require_capability, AUDIT_LOGS_VIEW
from app.schemas.audit_log import AuditLogListResponse
from app.services.audit_service import list_activity

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    search: Optional[str] = Query(None),
    subject_type: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: User = Depends(require_capability(AUDIT_LOGS_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    """Newest first, 20 per page"""
    return await list_activity(db, {
        "search": search,
        "subject_type": subject_type,
        "page": page,
    })
