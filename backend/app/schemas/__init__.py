# Pydantic schemas
from app.schemas.domain import (
    DomainCreate,
    DomainResponse,
    DomainListResponse,
    DomainMutationResponse,
)
from app.schemas.storage import (
    StoragePlanCreate,
    StoragePlanResponse,
    StoragePlanListResponse,
    StoragePlanMutationResponse,
)
from app.schemas.dashboard import (
    SystemSummary,
    AdminSummary,
    ResellerSummary,
    DashboardResponse,
)
from app.schemas.common import MessageResponse
