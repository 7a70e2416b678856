from fastapi import APIRouter
from app.api.v1.endpoints import auth, domains, storages, dashboard, backup, audit_logs, roles, permissions, health

api_router = APIRouter()

# /health/live, /health/ready, /health/deep
api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Load balancer probe, no dependencies touched"""
    return {"status": "healthy", "service": "panel-admin-backend"}


# Authentication and the role-resolved landing dashboard
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(dashboard.router, tags=["Dashboard"])

# Managed entities
api_router.include_router(domains.router, prefix="/domains", tags=["Domains"])
api_router.include_router(storages.router, prefix="/storages", tags=["Storages"])

# System administration
api_router.include_router(backup.router, prefix="/backup", tags=["Backup"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["Audit Logs"])
api_router.include_router(roles.router, prefix="/roles", tags=["Roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["Permissions"])
