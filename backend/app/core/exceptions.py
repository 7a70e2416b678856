"""
Custom Exceptions for Panel Admin
=================================

Every error raised by the services is one of these classes so the API layer
can tell user-facing failures (validation, not found, forbidden) from
infrastructure failures (which fall through to the global handler).

Usage:
    from app.core.exceptions import DomainNotFoundError, FieldValidationError

    if not domain:
        raise DomainNotFoundError(domain_id)

    if errors:
        raise FieldValidationError(errors)
"""

from typing import Optional, Any, Dict, List


class PanelError(Exception):
    """Base exception for all Panel Admin errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(PanelError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(PanelError):
    """User lacks the capability for this action.

    The message is always generic so the response never names the
    capability that would have granted access.
    """

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(PanelError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class DomainNotFoundError(ResourceNotFoundError):
    def __init__(self, domain_id: str):
        super().__init__("Domain", domain_id)


class StoragePlanNotFoundError(ResourceNotFoundError):
    def __init__(self, storage_id: str):
        super().__init__("Storage", storage_id)


class RoleNotFoundError(ResourceNotFoundError):
    def __init__(self, role_id: str):
        super().__init__("Role", role_id)


class PermissionNotFoundError(ResourceNotFoundError):
    def __init__(self, permission_id: str):
        super().__init__("Permission", permission_id)


class BackupNotFoundError(ResourceNotFoundError):
    """Backup archive missing, or the name points outside the backup directory"""

    def __init__(self, filename: str):
        super().__init__("Backup", filename)


# ============================================
# Validation Errors (422-type)
# ============================================

class FieldValidationError(PanelError):
    """Input validation failed on one or more fields.

    `errors` maps each failing field to every message collected for it.
    """

    status_code = 422

    def __init__(self, errors: Dict[str, List[str]], message: str = "The given data was invalid."):
        self.errors = errors
        super().__init__(message, code="VALIDATION_ERROR", details={"fields": errors})


class DuplicateRecordError(FieldValidationError):
    """Unique constraint violated (either caught by validation or by the store)"""

    def __init__(self, field: str, value: Any = None):
        super().__init__({field: [f"The {field} has already been taken."]})
        self.code = "DUPLICATE_RECORD"
        self.field = field
        self.value = value


# ============================================
# Backup Errors
# ============================================

class BackupError(PanelError):
    """Backup engine failed; the reason is logged, not returned"""

    def __init__(self, message: str = "Backup failed", reason: Optional[str] = None):
        super().__init__(message, code="BACKUP_FAILED")
        self.reason = reason


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: PanelError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
