"""
Role & Permission Schemas - access control administration
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.utils.pagination import Page


class PermissionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime


class RoleCreate(BaseModel):
    """Fields accepted on create and update; `permissions` holds permission names"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    permissions: List[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def dedupe_permissions(cls, v: List[str]) -> List[str]:
        """Keep first occurrence order, drop blanks and repeats"""
        seen = []
        for name in v:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    permissions: List[PermissionResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


class RoleListResponse(BaseModel):
    roles: Page[RoleResponse]
    filters: Dict[str, Any]
    has_search_results: Optional[bool] = None
    search_term: Optional[str] = None


class RoleMutationResponse(BaseModel):
    message: str
    role: RoleResponse


class PermissionListResponse(BaseModel):
    permissions: List[PermissionResponse]


class PermissionMutationResponse(BaseModel):
    message: str
    permission: PermissionResponse
