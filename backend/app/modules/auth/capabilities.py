"""
Capability-based access control.

A capability is a named permission ('domains-create', 'dashboard-admin-view')
granted to roles. A user holds the union of its roles' capabilities;
superusers hold all of them.
"""
from fastapi import Depends, Request
from typing import Callable, Dict, List

from app.core.exceptions import AuthorizationError
from app.core.logging_config import logger
from app.models.user import User
from app.modules.auth.dependencies import get_current_user


# Dashboards
DASHBOARD_SYSTEM_VIEW = "dashboard-system-view"
DASHBOARD_ADMIN_VIEW = "dashboard-admin-view"
DASHBOARD_RESELLER_VIEW = "dashboard-reseller-view"

# Domains
DOMAINS_VIEW = "domains-view"
DOMAINS_CREATE = "domains-create"
DOMAINS_EDIT = "domains-edit"
DOMAINS_DELETE = "domains-delete"

# Storage plans
STORAGES_VIEW = "storages-view"
STORAGES_CREATE = "storages-create"
STORAGES_EDIT = "storages-edit"
STORAGES_DELETE = "storages-delete"

# System
AUDIT_LOGS_VIEW = "audit-logs-view"
BACKUP_VIEW = "backup-view"
BACKUP_RUN = "backup-run"
BACKUP_DOWNLOAD = "backup-download"
BACKUP_DELETE = "backup-delete"

# Access control administration
ROLES_VIEW = "roles-view"
ROLES_CREATE = "roles-create"
ROLES_EDIT = "roles-edit"
ROLES_DELETE = "roles-delete"
PERMISSIONS_VIEW = "permissions-view"
PERMISSIONS_CREATE = "permissions-create"
PERMISSIONS_DELETE = "permissions-delete"


ALL_CAPABILITIES: List[str] = [
    DASHBOARD_SYSTEM_VIEW, DASHBOARD_ADMIN_VIEW, DASHBOARD_RESELLER_VIEW,
    DOMAINS_VIEW, DOMAINS_CREATE, DOMAINS_EDIT, DOMAINS_DELETE,
    STORAGES_VIEW, STORAGES_CREATE, STORAGES_EDIT, STORAGES_DELETE,
    AUDIT_LOGS_VIEW,
    BACKUP_VIEW, BACKUP_RUN, BACKUP_DOWNLOAD, BACKUP_DELETE,
    ROLES_VIEW, ROLES_CREATE, ROLES_EDIT, ROLES_DELETE,
    PERMISSIONS_VIEW, PERMISSIONS_CREATE, PERMISSIONS_DELETE,
]

# Default grants used by the seeder
DEFAULT_ROLE_CAPABILITIES: Dict[str, List[str]] = {
    "system": [
        DASHBOARD_SYSTEM_VIEW,
        AUDIT_LOGS_VIEW,
        BACKUP_VIEW, BACKUP_RUN, BACKUP_DOWNLOAD, BACKUP_DELETE,
        ROLES_VIEW, ROLES_CREATE, ROLES_EDIT, ROLES_DELETE,
        PERMISSIONS_VIEW, PERMISSIONS_CREATE, PERMISSIONS_DELETE,
    ],
    "admin": [
        DASHBOARD_ADMIN_VIEW,
        DOMAINS_VIEW, DOMAINS_CREATE, DOMAINS_EDIT, DOMAINS_DELETE,
        STORAGES_VIEW, STORAGES_CREATE, STORAGES_EDIT, STORAGES_DELETE,
    ],
    "reseller": [
        DASHBOARD_RESELLER_VIEW,
    ],
    "member": [],
}


def require_capability(name: str) -> Callable:
    """
    Dependency factory gating an endpoint on a capability.

    Usage:
        @router.post("")
        async def create_domain(
            current_user: User = Depends(require_capability(DOMAINS_CREATE))
        ):
            ...
    """

    async def dependency(
        request: Request,
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not current_user.has_capability(name):
            logger.warning(
                f"[Auth] {current_user.email} denied {request.method} {request.url.path}",
                extra={"event_type": "authorization_denied", "capability": name},
            )
            raise AuthorizationError()
        return current_user

    return dependency
