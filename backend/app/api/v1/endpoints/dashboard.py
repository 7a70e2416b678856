"""
Dashboard endpoints.

GET /dashboard picks the view for the caller; the per-role routes serve one
view each and are gated on its capability.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.capabilities import (
    require_capability,
    DASHBOARD_SYSTEM_VIEW,
    DASHBOARD_ADMIN_VIEW,
    DASHBOARD_RESELLER_VIEW,
)
from app.modules.auth.dependencies import get_current_user
from app.schemas.dashboard import AdminSummary, DashboardResponse, ResellerSummary, SystemSummary
from app.services.dashboard_service import (
    admin_summary,
    build_summary,
    effective_capabilities,
    reseller_summary,
    resolve_dashboard,
    system_summary,
)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Summary for the highest-priority dashboard the user may see"""
    view = resolve_dashboard(effective_capabilities(current_user))
    summary = await build_summary(db, view)
    return {"view": view.value, "summary": summary.model_dump(mode="json")}


@router.get("/dashboard-system", response_model=SystemSummary)
async def dashboard_system(
    current_user: User = Depends(require_capability(DASHBOARD_SYSTEM_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    return await system_summary(db)


@router.get("/dashboard-admin", response_model=AdminSummary)
async def dashboard_admin(
    current_user: User = Depends(require_capability(DASHBOARD_ADMIN_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    return await admin_summary(db)


@router.get("/dashboard-reseller", response_model=ResellerSummary)
async def dashboard_reseller(
    current_user: User = Depends(require_capability(DASHBOARD_RESELLER_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    return await reseller_summary(db)
