"""
Storage Plan Service - listing, statistics and mutations for storage plans

Plans are always listed by size ascending. Search matches the size as text,
so "10" finds 10, 100 and 210 GB plans alike; prices are not searched.
"""

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, cast, String
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Mapping, Optional

from app.core.exceptions import DuplicateRecordError, FieldValidationError, StoragePlanNotFoundError
from app.core.logging_config import logger
from app.models.storage import StoragePlan
from app.models.user import User
from app.schemas.common import validate_payload
from app.schemas.storage import StoragePlanCreate
from app.services.audit_service import record_activity
from app.services.list_query import ListQuery, STORAGE_LISTING
from app.utils.pagination import paginate

SUBJECT_TYPE = "Storage"

PLAN_FIELDS = (
    "size",
    "price_admin_annual",
    "price_admin_monthly",
    "price_member_annual",
    "price_member_monthly",
)

_size_adapter = TypeAdapter(int)


def _snapshot(plan: StoragePlan) -> Dict[str, Any]:
    return {field: getattr(plan, field) for field in PLAN_FIELDS}


class StoragePlanService:
    """Service for managing storage plans"""

    # ==================== LISTING ====================

    async def list_plans(self, db: AsyncSession, params: Mapping[str, Any]) -> dict:
        """
        List storage plans for the index screen.

        Args:
            db: Database session
            params: Raw query parameters (search, per_page, page)

        Returns:
            Dict with `storages` page, `stats`, effective `filters`, and
            `has_search_results` / `search_term` when searching
        """
        list_query = ListQuery.from_params(params, STORAGE_LISTING)

        query = select(StoragePlan)
        if list_query.has_search:
            query = query.where(
                cast(StoragePlan.size, String).contains(list_query.search, autoescape=True)
            )
        query = query.order_by(StoragePlan.size.asc(), StoragePlan.id)

        page = await paginate(db, query, list_query.page, list_query.per_page)

        result = {
            "storages": page,
            "stats": await self.get_statistics(db),
            "filters": list_query.filters(),
        }
        if list_query.has_search:
            result["has_search_results"] = page["total"] > 0
            result["search_term"] = list_query.search
        return result

    async def get_statistics(self, db: AsyncSession) -> dict:
        """Plan count plus smallest and largest size (0 when empty)"""
        result = await db.execute(
            select(
                func.count(StoragePlan.id),
                func.min(StoragePlan.size),
                func.max(StoragePlan.size),
            )
        )
        total, smallest, largest = result.one()
        return {
            "total_plans": total or 0,
            "min": smallest or 0,
            "max": largest or 0,
        }

    # ==================== CRUD ====================

    async def get_plan(self, db: AsyncSession, plan_id: str) -> StoragePlan:
        """Get plan by ID or raise StoragePlanNotFoundError"""
        plan = await db.get(StoragePlan, plan_id)
        if plan is None:
            raise StoragePlanNotFoundError(plan_id)
        return plan

    async def create_plan(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> StoragePlan:
        """
        Create a storage plan.

        Raises:
            FieldValidationError: listing every invalid field, including a taken size
        """
        data = await self._validate(db, payload)

        plan = StoragePlan(**data.model_dump())
        db.add(plan)
        await self._flush(db, data.size)

        record_activity(db, actor, "created", SUBJECT_TYPE, str(plan.id), {
            "attributes": _snapshot(plan),
        })
        await db.commit()
        await db.refresh(plan)

        logger.log_mutation("created", SUBJECT_TYPE, str(plan.id), size_gb=plan.size)
        return plan

    async def update_plan(
        self,
        db: AsyncSession,
        plan_id: str,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> StoragePlan:
        """Update a plan in place; keeping its own size is never a conflict"""
        plan = await self.get_plan(db, plan_id)
        data = await self._validate(db, payload, exclude_id=plan.id)

        old = _snapshot(plan)
        for field, value in data.model_dump().items():
            setattr(plan, field, value)
        new = _snapshot(plan)

        if old != new:
            await self._flush(db, data.size)
            record_activity(db, actor, "updated", SUBJECT_TYPE, str(plan.id), {
                "attributes": new,
                "old": old,
            })
            await db.commit()
            await db.refresh(plan)
            logger.log_mutation("updated", SUBJECT_TYPE, str(plan.id))

        return plan

    async def delete_plan(
        self,
        db: AsyncSession,
        plan_id: str,
        actor: Optional[User] = None
    ) -> StoragePlan:
        """Permanently delete a plan"""
        plan = await self.get_plan(db, plan_id)
        snapshot = _snapshot(plan)

        await db.delete(plan)
        record_activity(db, actor, "deleted", SUBJECT_TYPE, str(plan_id), {
            "attributes": snapshot,
        })
        await db.commit()

        logger.log_mutation("deleted", SUBJECT_TYPE, str(plan_id))
        return plan

    # ==================== VALIDATION ====================

    async def _validate(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        exclude_id: Optional[str] = None
    ) -> StoragePlanCreate:
        errors: Dict[str, List[str]] = {}
        data: Optional[StoragePlanCreate] = None

        try:
            data = validate_payload(StoragePlanCreate, payload)
        except FieldValidationError as exc:
            errors = exc.errors

        if "size" not in errors and "__root__" not in errors:
            size = data.size if data else self._coerce_size(payload["size"])
            if size is not None and await self._size_taken(db, size, exclude_id):
                errors.setdefault("size", []).append("The size has already been taken.")

        if errors:
            logger.log_validation_failure("Storages", errors)
            raise FieldValidationError(errors)

        return data

    @staticmethod
    def _coerce_size(value: Any) -> Optional[int]:
        # Same coercion the schema applies to `size`
        try:
            return _size_adapter.validate_python(value)
        except ValidationError:
            return None

    async def _size_taken(self, db: AsyncSession, size: int, exclude_id: Optional[str]) -> bool:
        query = select(StoragePlan.id).where(StoragePlan.size == size)
        if exclude_id is not None:
            query = query.where(StoragePlan.id != exclude_id)
        return await db.scalar(query.limit(1)) is not None

    async def _flush(self, db: AsyncSession, size: int) -> None:
        """Flush pending changes; a concurrent insert of the same size surfaces here"""
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning(f"[Storages] Unique constraint hit for size {size}")
            raise DuplicateRecordError("size", size)


storage_plan_service = StoragePlanService()
