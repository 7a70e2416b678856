"""
Domain management endpoints.
"""
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.capabilities import (
    require_capability,
    DOMAINS_VIEW,
    DOMAINS_CREATE,
    DOMAINS_EDIT,
    DOMAINS_DELETE,
)
from app.schemas.common import MessageResponse
from app.schemas.domain import DomainListResponse, DomainMutationResponse, DomainResponse
from app.services.domain_service import domain_service

router = APIRouter()


@router.get("", response_model=DomainListResponse)
async def list_domains(
    search: Optional[str] = Query(None),
    per_page: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: User = Depends(require_capability(DOMAINS_VIEW)),
    db: AsyncSession = Depends(get_db)
):
    """List domains with search, sort, pagination and statistics"""
    return await domain_service.list_domains(db, {
        "search": search,
        "per_page": per_page,
        "sort": sort,
        "order": order,
        "page": page,
    })


@router.get("/{domain_id}", response_model=DomainResponse)
async def get_domain(
    domain_id: str,
    current_user: User = Depends(require_capability(DOMAINS_EDIT)),
    db: AsyncSession = Depends(get_db)
):
    """Get a single domain (edit form data)"""
    return await domain_service.get_domain(db, domain_id)


@router.post("", response_model=DomainMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_domain(
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(DOMAINS_CREATE)),
    db: AsyncSession = Depends(get_db)
):
    domain = await domain_service.create_domain(db, payload, actor=current_user)
    return {"message": "Domain created successfully.", "domain": domain}


@router.put("/{domain_id}", response_model=DomainMutationResponse)
async def update_domain(
    domain_id: str,
    payload: Any = Body(None),
    current_user: User = Depends(require_capability(DOMAINS_EDIT)),
    db: AsyncSession = Depends(get_db)
):
    domain = await domain_service.update_domain(db, domain_id, payload, actor=current_user)
    return {"message": "Domain updated successfully.", "domain": domain}


@router.delete("/{domain_id}", response_model=MessageResponse)
async def delete_domain(
    domain_id: str,
    current_user: User = Depends(require_capability(DOMAINS_DELETE)),
    db: AsyncSession = Depends(get_db)
):
    await domain_service.delete_domain(db, domain_id, actor=current_user)
    return {"message": "Domain deleted successfully."}
