"""
Dashboard Service - picks the dashboard a user lands on and builds its summary.

Priority is fixed: system, then admin, then reseller. A user holding none of
the three dashboard capabilities has no dashboard at all.
"""
from enum import Enum
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Iterable, Set

from app.core.config import settings
from app.core.exceptions import AuthorizationError
from app.models.domain import Domain
from app.models.storage import StoragePlan
from app.models.user import User, Role, Permission
from app.modules.auth.capabilities import (
    ALL_CAPABILITIES,
    DASHBOARD_SYSTEM_VIEW,
    DASHBOARD_ADMIN_VIEW,
    DASHBOARD_RESELLER_VIEW,
)
from app.schemas.dashboard import AdminSummary, RecentActivity, ResellerSummary, SystemSummary
from app.services.audit_service import latest_activity

CUSTOMER_ROLE = "member"


class DashboardView(str, Enum):
    SYSTEM = "system"
    ADMIN = "admin"
    RESELLER = "reseller"


DASHBOARD_PRIORITY = (
    (DashboardView.SYSTEM, DASHBOARD_SYSTEM_VIEW),
    (DashboardView.ADMIN, DASHBOARD_ADMIN_VIEW),
    (DashboardView.RESELLER, DASHBOARD_RESELLER_VIEW),
)


def effective_capabilities(user: User) -> Set[str]:
    """Capabilities `user` holds; superusers hold every known capability"""
    if user.is_superuser:
        return set(ALL_CAPABILITIES)
    return user.capabilities


def resolve_dashboard(capabilities: Iterable[str]) -> DashboardView:
    """
    Pick the highest-priority dashboard the capabilities allow.

    Raises:
        AuthorizationError: none of the dashboard capabilities is held
    """
    held = set(capabilities)
    for view, capability in DASHBOARD_PRIORITY:
        if capability in held:
            return view
    raise AuthorizationError()


async def _count(db: AsyncSession, query) -> int:
    return await db.scalar(query) or 0


async def system_summary(db: AsyncSession) -> SystemSummary:
    entry = await latest_activity(db)
    recent = None
    if entry is not None:
        recent = RecentActivity(
            id=str(entry.id),
            action=entry.description,
            user=entry.causer_name,
            timestamp=entry.created_at,
            subject_type=entry.subject_type,
            properties=entry.properties,
        )

    return SystemSummary(
        total_users=await _count(db, select(func.count(User.id))),
        total_roles=await _count(db, select(func.count(Role.id))),
        total_permissions=await _count(db, select(func.count(Permission.id))),
        system_health=settings.SYSTEM_HEALTH_STATUS,
        recent_activity=recent,
    )


async def admin_summary(db: AsyncSession) -> AdminSummary:
    customers = (
        select(func.count(func.distinct(User.id)))
        .join(User.roles)
        .where(Role.name == CUSTOMER_ROLE)
    )
    return AdminSummary(
        total_domains=await _count(db, select(func.count(Domain.id))),
        total_storages=await _count(db, select(func.count(StoragePlan.id))),
        total_customers=await _count(db, customers),
        # Orders are not tracked by this panel
        pending_orders=0,
    )


async def reseller_summary(db: AsyncSession) -> ResellerSummary:
    # Reseller accounting is not implemented; every figure is zero
    return ResellerSummary()


SUMMARY_BUILDERS = {
    DashboardView.SYSTEM: system_summary,
    DashboardView.ADMIN: admin_summary,
    DashboardView.RESELLER: reseller_summary,
}


async def build_summary(db: AsyncSession, view: DashboardView):
    return await SUMMARY_BUILDERS[view](db)
