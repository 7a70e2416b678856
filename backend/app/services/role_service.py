"""
Role Service - roles, permissions and the grants between them
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from typing import Any, Dict, List, Mapping, Optional

from app.core.exceptions import (
    DuplicateRecordError,
    FieldValidationError,
    PermissionNotFoundError,
    RoleNotFoundError,
)
from app.core.logging_config import logger
from app.models.user import Permission, Role, User
from app.schemas.common import validate_payload
from app.schemas.role import PermissionCreate, RoleCreate
from app.services.audit_service import record_activity
from app.services.list_query import ListQuery, ROLE_LISTING
from app.utils.pagination import paginate


class RoleService:
    """Service for access control administration"""

    # ==================== PERMISSIONS ====================

    async def list_permissions(self, db: AsyncSession) -> List[Permission]:
        result = await db.execute(select(Permission).order_by(Permission.name))
        return list(result.scalars().all())

    async def create_permission(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> Permission:
        errors: Dict[str, List[str]] = {}
        data: Optional[PermissionCreate] = None
        try:
            data = validate_payload(PermissionCreate, payload)
        except FieldValidationError as exc:
            errors = exc.errors

        if data is not None and await self._permission_named(db, data.name) is not None:
            errors.setdefault("name", []).append("The name has already been taken.")
        if errors:
            raise FieldValidationError(errors)

        permission = Permission(name=data.name)
        db.add(permission)
        await self._flush(db, "name", data.name)

        record_activity(db, actor, "created", "Permission", str(permission.id), {
            "attributes": {"name": permission.name},
        })
        await db.commit()

        logger.log_mutation("created", "Permission", str(permission.id), permission_name=permission.name)
        return permission

    async def delete_permission(
        self,
        db: AsyncSession,
        permission_id: str,
        actor: Optional[User] = None
    ) -> Permission:
        permission = await db.get(Permission, permission_id)
        if permission is None:
            raise PermissionNotFoundError(permission_id)

        name = permission.name
        await db.delete(permission)
        record_activity(db, actor, "deleted", "Permission", str(permission_id), {
            "attributes": {"name": name},
        })
        await db.commit()

        logger.log_mutation("deleted", "Permission", str(permission_id))
        return permission

    # ==================== ROLES ====================

    async def list_roles(self, db: AsyncSession, params: Mapping[str, Any]) -> dict:
        """Paginated roles with their permissions, searchable by name"""
        list_query = ListQuery.from_params(params, ROLE_LISTING)

        query = select(Role).options(selectinload(Role.permissions))
        if list_query.has_search:
            query = query.where(Role.name.contains(list_query.search, autoescape=True))
        query = list_query.apply_sort(
            query, getattr(Role, list_query.sort), Role.created_at, Role.id
        )

        page = await paginate(db, query, list_query.page, list_query.per_page)

        result = {"roles": page, "filters": list_query.filters()}
        if list_query.has_search:
            result["has_search_results"] = page["total"] > 0
            result["search_term"] = list_query.search
        return result

    async def get_role(self, db: AsyncSession, role_id: str) -> Role:
        """Get role with permissions or raise RoleNotFoundError"""
        result = await db.execute(
            select(Role)
            .options(selectinload(Role.permissions))
            .where(Role.id == role_id)
            .execution_options(populate_existing=True)
        )
        role = result.scalar_one_or_none()
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    async def create_role(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> Role:
        data, permissions = await self._validate_role(db, payload)

        role = Role(name=data.name, permissions=permissions)
        db.add(role)
        await self._flush(db, "name", data.name)

        record_activity(db, actor, "created", "Role", str(role.id), {
            "attributes": {"name": role.name, "permissions": [p.name for p in permissions]},
        })
        await db.commit()

        logger.log_mutation("created", "Role", str(role.id), role_name=role.name)
        return await self.get_role(db, role.id)

    async def update_role(
        self,
        db: AsyncSession,
        role_id: str,
        payload: Mapping[str, Any],
        actor: Optional[User] = None
    ) -> Role:
        role = await self.get_role(db, role_id)
        data, permissions = await self._validate_role(db, payload, exclude_id=role.id)

        old = {"name": role.name, "permissions": [p.name for p in role.permissions]}
        role.name = data.name
        role.permissions = permissions
        new = {"name": role.name, "permissions": [p.name for p in permissions]}

        if old["name"] != new["name"] or set(old["permissions"]) != set(new["permissions"]):
            await self._flush(db, "name", data.name)
            record_activity(db, actor, "updated", "Role", str(role.id), {
                "attributes": new,
                "old": old,
            })
            await db.commit()
            logger.log_mutation("updated", "Role", str(role.id))

        return await self.get_role(db, role.id)

    async def delete_role(
        self,
        db: AsyncSession,
        role_id: str,
        actor: Optional[User] = None
    ) -> Role:
        role = await self.get_role(db, role_id)

        name = role.name
        await db.delete(role)
        record_activity(db, actor, "deleted", "Role", str(role_id), {
            "attributes": {"name": name},
        })
        await db.commit()

        logger.log_mutation("deleted", "Role", str(role_id))
        return role

    # ==================== VALIDATION ====================

    async def _validate_role(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
        exclude_id: Optional[str] = None
    ):
        errors: Dict[str, List[str]] = {}
        data: Optional[RoleCreate] = None
        try:
            data = validate_payload(RoleCreate, payload)
        except FieldValidationError as exc:
            errors = exc.errors

        permissions: List[Permission] = []
        if data is not None:
            query = select(Role.id).where(Role.name == data.name)
            if exclude_id is not None:
                query = query.where(Role.id != exclude_id)
            if await db.scalar(query.limit(1)) is not None:
                errors.setdefault("name", []).append("The name has already been taken.")

            if data.permissions:
                result = await db.execute(
                    select(Permission).where(Permission.name.in_(data.permissions))
                )
                by_name = {p.name: p for p in result.scalars().all()}
                unknown = [name for name in data.permissions if name not in by_name]
                if unknown:
                    errors.setdefault("permissions", []).append(
                        f"The selected permissions are invalid: {', '.join(unknown)}."
                    )
                permissions = [by_name[name] for name in data.permissions if name in by_name]

        if errors:
            logger.log_validation_failure("Roles", errors)
            raise FieldValidationError(errors)

        return data, permissions

    async def _permission_named(self, db: AsyncSession, name: str) -> Optional[Permission]:
        result = await db.execute(select(Permission).where(Permission.name == name))
        return result.scalar_one_or_none()

    async def _flush(self, db: AsyncSession, field: str, value: Any) -> None:
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise DuplicateRecordError(field, value)


role_service = RoleService()
