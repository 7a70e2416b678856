"""
Storage plan management endpoints.
"""
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.capabilities import (
    require_capability,
    STORAGES_VIEW,
    STORAGES_CREATE,
    STORAGES_EDIT,
    STORAGES_DELETE,
)
from app.schemas.common import MessageResponse
from app.schemas.storage import StoragePlanListResponse, StoragePlanMutationResponse, StoragePlanResponse
from app.services.storage_plan_service import storage_plan_service

router = APIRouter()


@router.get("", response_model=StoragePlanListResponse)
async def list_storage_plans(
    search: Optional[str] = Query(None),
    per_page: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: User = Depends(require_capability(STORAGES_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    """List storage plans (always by size) with search, pagination and statistics"""
    return await storage_plan_service.list_plans(db, {
        "search": search,
        "per_page": per_page,
        "page": page,
    })


@router.get("/{plan_id}", response_model=StoragePlanResponse)
async def get_storage_plan(
    plan_id: str,
    current_user: User = Depends(require_capability(STORAGES_EDIT)),
    db: AsyncSession = Depends(get_db)
):
    """Get a single storage plan (edit form data)"""
    return await storage_plan_service.get_plan(db, plan_id)


@router.post("", response_model=StoragePlanMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_storage_plan(
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(STORAGES_CREATE)),
    db: AsyncSession = Depends(get_db)
):
    plan = await storage_plan_service.create_plan(db, payload, actor=current_user)
    return {"message": "Storage plan created successfully.", "storage": plan}


@router.put("/{plan_id}", response_model=StoragePlanMutationResponse)
async def update_storage_plan(
    plan_id: str,
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(STORAGES_EDIT)),
    db: AsyncSession = Depends(get_db)
):
    plan = await storage_plan_service.update_plan(db, plan_id, payload, actor=current_user)
    return {"message": "Storage plan updated successfully.", "storage": plan}


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_storage_plan(
    plan_id: str,
    current_user: User = Depends(require_capability(STORAGES_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await storage_plan_service.delete_plan(db, plan_id, actor=current_user)
    return {"message": "Storage plan deleted successfully."}
