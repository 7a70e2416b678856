"""
Permission administration endpoints.
"""
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.capabilities import (
    require_capability,
    PERMISSIONS_VIEW,
    PERMISSIONS_CREATE,
    PERMISSIONS_DELETE,
)
from app.schemas.common import MessageResponse
from app.schemas.role import PermissionListResponse, PermissionMutationResponse
from app.services.role_service import role_service

router = APIRouter()


@router.get("", response_model=PermissionListResponse)
async def list_permissions(
    current_user: User = Depends(require_capability(PERMISSIONS_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    return {"permissions": await role_service.list_permissions(db)}


@router.post("", response_model=PermissionMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_permission(
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(PERMISSIONS_CREATE)),
    db: AsyncSession = Depends(get_db)
):
    permission = await role_service.create_permission(db, payload, actor=current_user)
    return {"message": "Permission created successfully.", "permission": permission}


@router.delete("/{permission_id}", response_model=MessageResponse)
async def delete_permission(
    permission_id: str,
    current_user: User = Depends(require_capability(PERMISSIONS_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await role_service.delete_permission(db, permission_id, actor=current_user)
    return {"message": "Permission deleted successfully."}
