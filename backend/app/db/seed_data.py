"""
Database Seed Data Module

Creates the four roles, every capability, the default grants and the
default accounts. Safe to run repeatedly: existing rows are reused.
Run with: python -m app.db.seed_data
"""
import asyncio
from typing import Dict, List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import AsyncSessionLocal, init_db
from app.core.security import get_password_hash
from app.models.audit_log import AuditLog
from app.models.domain import Domain
from app.models.storage import StoragePlan
from app.models.user import User, Role, Permission, user_roles, role_permissions
from app.modules.auth.capabilities import ALL_CAPABILITIES, DEFAULT_ROLE_CAPABILITIES


# ==================== Sample Data Constants ====================

DEFAULT_USERS = [
    {"email": "system@system.com", "name": "System", "password": "system123", "role": "system"},
    {"email": "admin@admin.com", "name": "Admin", "password": "admin123", "role": "admin"},
    {"email": "member@member.com", "name": "member", "password": "member123", "role": "member"},
]

SAMPLE_DOMAINS = [
    {"name": "example.com", "privilege": "full access"},
    {"name": "shop.example.com", "privilege": "restricted"},
    {"name": "legacy.example.net", "privilege": "disabled"},
]

SAMPLE_STORAGE_PLANS = [
    {"size": 10, "price_admin_annual": 100, "price_admin_monthly": 10,
     "price_member_annual": 120, "price_member_monthly": 12},
    {"size": 50, "price_admin_annual": 400, "price_admin_monthly": 40,
     "price_member_annual": 480, "price_member_monthly": 48},
    {"size": 100, "price_admin_annual": 700, "price_admin_monthly": 70,
     "price_member_annual": 840, "price_member_monthly": 84},
]


async def seed_permissions(db: AsyncSession) -> Dict[str, Permission]:
    """Create every known capability"""
    result = await db.execute(select(Permission))
    permissions = {p.name: p for p in result.scalars().all()}

    for name in ALL_CAPABILITIES:
        if name not in permissions:
            permission = Permission(name=name)
            db.add(permission)
            permissions[name] = permission

    await db.flush()
    print(f"Permissions ready: {len(permissions)}")
    return permissions


async def seed_roles(db: AsyncSession, permissions: Dict[str, Permission]) -> Dict[str, Role]:
    """Create the default roles and grant their capabilities"""
    result = await db.execute(select(Role).options(selectinload(Role.permissions)))
    roles = {r.name: r for r in result.scalars().all()}

    for name, grants in DEFAULT_ROLE_CAPABILITIES.items():
        role = roles.get(name)
        if role is None:
            role = Role(name=name, permissions=[])
            db.add(role)
            roles[name] = role
        held = {p.name for p in role.permissions}
        for capability in grants:
            if capability not in held:
                role.permissions.append(permissions[capability])

    await db.flush()
    print(f"Roles ready: {', '.join(sorted(roles))}")
    return roles


async def seed_users(db: AsyncSession, roles: Dict[str, Role]) -> List[User]:
    """Create the default accounts"""
    users = []

    for user_data in DEFAULT_USERS:
        result = await db.execute(
            select(User).options(selectinload(User.roles)).where(User.email == user_data["email"])
        )
        user = result.scalar_one_or_none()
        if user is None:
            user = User(
                email=user_data["email"],
                name=user_data["name"],
                hashed_password=get_password_hash(user_data["password"]),
                is_active=True,
                roles=[],
            )
            db.add(user)
        if roles[user_data["role"]] not in user.roles:
            user.roles.append(roles[user_data["role"]])
        users.append(user)

    await db.flush()
    print(f"Created {len(users)} users")
    return users


async def seed_samples(db: AsyncSession) -> None:
    """A few domains and storage plans for a fresh install"""
    if await db.scalar(select(Domain.id).limit(1)) is None:
        for domain_data in SAMPLE_DOMAINS:
            db.add(Domain(**domain_data))
        print(f"Created {len(SAMPLE_DOMAINS)} domains")

    if await db.scalar(select(StoragePlan.id).limit(1)) is None:
        for plan_data in SAMPLE_STORAGE_PLANS:
            db.add(StoragePlan(**plan_data))
        print(f"Created {len(SAMPLE_STORAGE_PLANS)} storage plans")

    await db.flush()


async def seed_all(with_samples: bool = True):
    """Seed roles, capabilities, default users and (optionally) sample records"""
    print("=" * 50)
    print("Starting database seeding...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            permissions = await seed_permissions(db)
            roles = await seed_roles(db, permissions)
            await seed_users(db, roles)
            if with_samples:
                await seed_samples(db)

            await db.commit()
            print("=" * 50)
            print("Database seeding completed successfully!")
            print("=" * 50)

        except Exception as e:
            await db.rollback()
            print(f"Error seeding database: {e}")
            raise


async def clear_all():
    """Clear all data from database"""
    print("Clearing all data...")
    async with AsyncSessionLocal() as db:
        # Delete in reverse order of dependencies
        await db.execute(delete(AuditLog))
        await db.execute(delete(user_roles))
        await db.execute(delete(role_permissions))
        await db.execute(delete(User))
        await db.execute(delete(Role))
        await db.execute(delete(Permission))
        await db.execute(delete(Domain))
        await db.execute(delete(StoragePlan))
        await db.commit()
        print("All data cleared!")


def main():
    """Seed (or with `clear`, empty) the configured database"""
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all(with_samples="--no-samples" not in sys.argv))


if __name__ == "__main__":
    main()
