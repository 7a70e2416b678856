"""
Dashboard Schemas - per-role summary payloads
"""
from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class RecentActivity(BaseModel):
    id: str
    action: str
    user: str
    timestamp: datetime
    subject_type: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    status: str = "success"


class SystemSummary(BaseModel):
    total_users: int
    total_roles: int
    total_permissions: int
    system_health: str
    recent_activity: Optional[RecentActivity] = None


class AdminSummary(BaseModel):
    total_domains: int
    total_storages: int
    total_customers: int
    pending_orders: int = 0


class ResellerSummary(BaseModel):
    my_customers: int = 0
    revenue_this_month: int = 0
    active_subscriptions: int = 0
    commission_earned: int = 0


class DashboardResponse(BaseModel):
    """Payload of GET /dashboard: which view was picked and its summary"""
    view: str
    summary: Dict[str, Any]
