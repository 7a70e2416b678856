"""
Audit Service - append-only activity log.

Entries are added to the caller's session and committed together with the
mutation they describe, so a rolled back change leaves no log entry.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Any, Dict, Mapping, Optional

from app.models.audit_log import AuditLog
from app.models.user import User
from app.services.list_query import ListQuery, AUDIT_LOG_LISTING
from app.utils.pagination import paginate


def record_activity(
    db: AsyncSession,
    causer: Optional[User],
    description: str,
    subject_type: Optional[str] = None,
    subject_id: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Stage an audit entry on `db` (committed by the caller)"""
    entry = AuditLog(
        causer_id=str(causer.id) if causer is not None else None,
        description=description,
        subject_type=subject_type,
        subject_id=subject_id,
        properties=properties or {},
    )
    db.add(entry)
    return entry


async def latest_activity(db: AsyncSession) -> Optional[AuditLog]:
    """Most recent audit entry, if any"""
    result = await db.execute(
        select(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(1)
    )
    return result.scalars().first()


async def list_activity(db: AsyncSession, params: Mapping[str, Any]) -> dict:
    """Newest-first page of audit entries, optionally filtered"""
    list_query = ListQuery.from_params(params, AUDIT_LOG_LISTING)

    query = select(AuditLog)
    if list_query.has_search:
        query = query.where(or_(
            AuditLog.description.contains(list_query.search, autoescape=True),
            AuditLog.subject_type.contains(list_query.search, autoescape=True),
        ))

    subject_type = str(params.get("subject_type") or "").strip()
    if subject_type:
        query = query.where(AuditLog.subject_type == subject_type)

    query = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

    page = await paginate(db, query, list_query.page, list_query.per_page)

    filters = list_query.filters()
    filters["subject_type"] = subject_type
    return {"logs": page, "filters": filters}
