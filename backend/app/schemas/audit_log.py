"""
Audit Log Schemas
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Any
from datetime import datetime

from app.utils.pagination import Page


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    causer_name: str
    subject_type: Optional[str] = None
    subject_id: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    logs: Page[AuditLogResponse]
    filters: Dict[str, Any]
