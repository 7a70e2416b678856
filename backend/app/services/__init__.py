from app.services.domain_service import DomainService, domain_service
from app.services.storage_plan_service import StoragePlanService, storage_plan_service
from app.services.role_service import RoleService, role_service
from app.services.backup_service import BackupService, backup_service

# Read-side helpers
from app.services.list_query import ListQuery, ListingConfig
from app.services.audit_service import record_activity, list_activity

__all__ = [
    # Managed entities
    "DomainService",
    "domain_service",
    "StoragePlanService",
    "storage_plan_service",
    # Access control
    "RoleService",
    "role_service",
    # System
    "BackupService",
    "backup_service",
    "ListQuery",
    "ListingConfig",
    "record_activity",
    "list_activity",
]
