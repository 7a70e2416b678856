# Re-export all models for convenient imports
from app.models.user import User, Role, Permission, user_roles, role_permissions
from app.models.domain import Domain
from app.models.storage import StoragePlan
from app.models.audit_log import AuditLog

__all__ = [
    # Access control
    "User",
    "Role",
    "Permission",
    "user_roles",
    "role_permissions",
    # Managed entities
    "Domain",
    "StoragePlan",
    # Activity
    "AuditLog",
]
