"""
Domain Service - listing, statistics and mutations for domains

Handles:
- Filtered, sorted, paginated listing (search on name only)
- Privilege statistics
- Create / update / delete with batch validation and name uniqueness
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, List, Mapping, Optional

from app.core.exceptions import DomainNotFoundError, DuplicateRecordError, FieldValidationError
from app.core.logging_config import logger
from app.models.domain import Domain
from app.models.user import User
from app.schemas.common import validate_payload
from app.schemas.domain import DomainCreate
from app.services.audit_service import record_activity
from app.services.list_query import ListQuery, DOMAIN_LISTING
from app.utils.pagination import paginate

SUBJECT_TYPE = "Domain"


def _snapshot(domain: Domain) -> Dict[str, Any]:
    return {"name": domain.name, "privilege": domain.privilege}


class DomainService:
    """Service for managing domains"""

    # ==================== LISTING ====================

    async def list_domains(self, db: AsyncSession, params: Mapping[str, Any]) -> dict:
        """
        List domains for the index screen.

        Args:
            db: Database session
            params: Raw query parameters (search, per_page, sort, order, page)

        Returns:
            Dict with `domains` page, `stats`, effective `filters`, and
            `has_search_results` / `search_term` when searching
        """
        list_query = ListQuery.from_params(params, DOMAIN_LISTING)

        query = select(Domain)
        if list_query.has_search:
            query = query.where(Domain.name.contains(list_query.search, autoescape=True))

        query = list_query.apply_sort(
            query, getattr(Domain, list_query.sort), Domain.created_at, Domain.id
        )

        page = await paginate(db, query, list_query.page, list_query.per_page)

        result = {
            "domains": page,
            "stats": await self.get_statistics(db),
            "filters": list_query.filters(),
        }
        if list_query.has_search:
            result["has_search_results"] = page["total"] > 0
            result["search_term"] = list_query.search
        return result

    async def get_statistics(self, db: AsyncSession) -> dict:
        """Total domains, distinct privileges, and the most frequent privilege"""
        total = await db.scalar(select(func.count(Domain.id))) or 0
        total_privileges = await db.scalar(
            select(func.count(func.distinct(Domain.privilege)))
        ) or 0

        occurrences = func.count(Domain.id)
        result = await db.execute(
            select(Domain.privilege, occurrences.label("count"))
            .group_by(Domain.privilege)
            # Ties go to the privilege that appeared first
            .order_by(occurrences.desc(), func.min(Domain.created_at), Domain.privilege)
            .limit(1)
        )
        row = result.first()
        most_common = {"privilege": row.privilege, "count": row.count} if row else None

        return {
            "total": total,
            "total_privileges": total_privileges,
            "most_common": most_common,
        }

    # ==================== CRUD ====================

    async def get_domain(self, db: AsyncSession, domain_id: str) -> Domain:
        """Get domain by ID or raise DomainNotFoundError"""
        domain = await db.get(Domain, domain_id)
        if domain is None:
            raise DomainNotFoundError(domain_id)
        return domain

    async def create_domain(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> Domain:
        """
        Create a domain.

        Raises:
            FieldValidationError: listing every invalid field, including a taken name
        """
        data = await self._validate(db, payload)

        domain = Domain(name=data.name, privilege=data.privilege)
        db.add(domain)
        await self._flush(db, data.name)

        record_activity(db, actor, "created", SUBJECT_TYPE, str(domain.id), {
            "attributes": _snapshot(domain),
        })
        await db.commit()
        await db.refresh(domain)

        logger.log_mutation("created", SUBJECT_TYPE, str(domain.id), domain_name=domain.name)
        return domain

    async def update_domain(
        self,
        db: AsyncSession,
        domain_id: str,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> Domain:
        """Update a domain in place; its own current name never counts as taken"""
        domain = await self.get_domain(db, domain_id)
        data = await self._validate(db, payload, exclude_id=domain.id)

        old = _snapshot(domain)
        domain.name = data.name
        domain.privilege = data.privilege
        new = _snapshot(domain)

        if old != new:
            await self._flush(db, data.name)
            record_activity(db, actor, "updated", SUBJECT_TYPE, str(domain.id), {
                "attributes": new,
                "old": old,
            })
            await db.commit()
            await db.refresh(domain)
            logger.log_mutation("updated", SUBJECT_TYPE, str(domain.id))

        return domain

    async def delete_domain(
        self,
        db: AsyncSession,
        domain_id: str,
        actor: Optional[User] = None
    ) -> Domain:
        """Permanently delete a domain"""
        domain = await self.get_domain(db, domain_id)
        snapshot = _snapshot(domain)

        await db.delete(domain)
        record_activity(db, actor, "deleted", SUBJECT_TYPE, str(domain_id), {
            "attributes": snapshot,
        })
        await db.commit()

        logger.log_mutation("deleted", SUBJECT_TYPE, str(domain_id))
        return domain

    # ==================== VALIDATION ====================

    async def _validate(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        exclude_id: Optional[str] = None
    ) -> DomainCreate:
        errors: Dict[str, List[str]] = {}
        data: Optional[DomainCreate] = None

        try:
            data = validate_payload(DomainCreate, payload)
        except FieldValidationError as exc:
            errors = exc.errors

        if "name" not in errors and "__root__" not in errors:
            name = data.name if data else str(payload["name"]).strip()
            if await self._name_taken(db, name, exclude_id):
                errors.setdefault("name", []).append("The name has already been taken.")

        if errors:
            logger.log_validation_failure("Domains", errors)
            raise FieldValidationError(errors)

        return data

    async def _name_taken(self, db: AsyncSession, name: str, exclude_id: Optional[str]) -> bool:
        query = select(Domain.id).where(Domain.name == name)
        if exclude_id is not None:
            query = query.where(Domain.id != exclude_id)
        return await db.scalar(query.limit(1)) is not None

    async def _flush(self, db: AsyncSession, name: str) -> None:
        """Flush pending changes; a concurrent insert of the same name surfaces here"""
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning(f"[Domains] Unique constraint hit for name '{name}'")
            raise DuplicateRecordError("name", name)


domain_service = DomainService()
