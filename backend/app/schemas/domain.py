"""
Domain Schemas - Request/Response models for domain management
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.utils.pagination import Page


# Values offered by the create/edit form; the column itself is free text
PRIVILEGE_OPTIONS = ["full access", "restricted", "disabled"]


class DomainCreate(BaseModel):
    """Fields accepted on create and update"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    privilege: str = Field(..., min_length=1, max_length=255)


class DomainResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    privilege: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class MostCommonPrivilege(BaseModel):
    privilege: str
    count: int


class DomainStats(BaseModel):
    total: int
    total_privileges: int
    most_common: Optional[MostCommonPrivilege] = None


class DomainListResponse(BaseModel):
    domains: Page[DomainResponse]
    stats: DomainStats
    filters: Dict[str, Any]
    has_search_results: Optional[bool] = None
    search_term: Optional[str] = None
    privilege_options: List[str] = PRIVILEGE_OPTIONS


class DomainMutationResponse(BaseModel):
    message: str
    domain: DomainResponse
