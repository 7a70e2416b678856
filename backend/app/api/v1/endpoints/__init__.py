# API endpoints
from . import auth, domains, storages, dashboard, backup, audit_logs, roles, permissions, health

__all__ = ["auth", "domains", "storages", "dashboard", "backup", "audit_logs", "roles", "permissions", "health"]
