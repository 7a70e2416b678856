"""
Role administration endpoints.
"""
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.capabilities import (
    require_capability,
    ROLES_VIEW,
    ROLES_CREATE,
    ROLES_EDIT,
    ROLES_DELETE,
)
from app.schemas.common import MessageResponse
from app.schemas.role import RoleListResponse, RoleMutationResponse, RoleResponse
from app.services.role_service import role_service

router = APIRouter()


@router.get("", response_model=RoleListResponse)
async def list_roles(
    search: Optional[str] = Query(None),
    per_page: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: User = Depends(require_capability(ROLES_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    return await role_service.list_roles(db, {
        "search": search,
        "per_page": per_page,
        "sort": sort,
        "order": order,
        "page": page,
    })


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    current_user: User = Depends(require_capability(ROLES_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    return await role_service.get_role(db, role_id)


@router.post("", response_model=RoleMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(ROLES_CREATE)),
    db: AsyncSession = Depends(get_db)
):
    """Create a role; `permissions` lists permission names to grant"""
    role = await role_service.create_role(db, payload, actor=current_user)
    return {"message": "Role created successfully.", "role": role}


@router.put("/{role_id}", response_model=RoleMutationResponse)
async def update_role(
    role_id: str,
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(ROLES_EDIT)),
    db: AsyncSession = Depends(get_db)
):
    """Rename a role and replace its permission grants"""
    role = await role_service.update_role(db, role_id, payload, actor=current_user)
    return {"message": "Role updated successfully.", "role": role}


@router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: str,
    current_user: User = Depends(require_capability(ROLES_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await role_service.delete_role(db, role_id, actor=current_user)
    return {"message": "Role deleted successfully."}
