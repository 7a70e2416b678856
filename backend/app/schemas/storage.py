"""
Storage Plan Schemas - Request/Response models for storage plan management
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any
from datetime import datetime

from app.utils.pagination import Page

# Largest value the INTEGER columns hold on every supported database
MAX_COLUMN_INT = 2_147_483_647


class StoragePlanCreate(BaseModel):
    """Fields accepted on create and update; size in GB, prices in whole units"""
    size: int = Field(..., ge=1, le=MAX_COLUMN_INT)
    price_admin_annual: int = Field(..., ge=0, le=MAX_COLUMN_INT)
    price_admin_monthly: int = Field(..., ge=0, le=MAX_COLUMN_INT)
    price_member_annual: int = Field(..., ge=0, le=MAX_COLUMN_INT)
    price_member_monthly: int = Field(..., ge=0, le=MAX_COLUMN_INT)


class StoragePlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    size: int
    price_admin_annual: int
    price_admin_monthly: int
    price_member_annual: int
    price_member_monthly: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class StoragePlanStats(BaseModel):
    total_plans: int
    # 0 when there are no plans
    min: int
    max: int


class StoragePlanListResponse(BaseModel):
    storages: Page[StoragePlanResponse]
    stats: StoragePlanStats
    filters: Dict[str, Any]
    has_search_results: Optional[bool] = None
    search_term: Optional[str] = None


class StoragePlanMutationResponse(BaseModel):
    message: str
    storage: StoragePlanResponse
