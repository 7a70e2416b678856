"""
Unit Tests for the database seeder
"""
import pytest
from sqlalchemy import func, select

from app.core.security import verify_password
from app.db.seed_data import (
    DEFAULT_USERS,
    seed_permissions,
    seed_roles,
    seed_samples,
    seed_users,
)
from app.models.domain import Domain
from app.models.storage import StoragePlan
from app.models.user import Permission, Role
from app.modules.auth.capabilities import ALL_CAPABILITIES


async def seed(db):
    permissions = await seed_permissions(db)
    roles = await seed_roles(db, permissions)
    users = await seed_users(db, roles)
    await seed_samples(db)
    await db.commit()
    return users


class TestSeeder:

    @pytest.mark.asyncio
    async def test_default_accounts(self, db_session):
        users = await seed(db_session)

        by_email = {user.email: user for user in users}
        admin = by_email['admin@admin.com']
        assert verify_password('admin123', admin.hashed_password)
        assert admin.role_names == {'admin'}
        assert 'domains-create' in admin.capabilities
        assert by_email['member@member.com'].capabilities == set()

    @pytest.mark.asyncio
    async def test_running_twice_creates_nothing_new(self, db_session):
        await seed(db_session)
        users = await seed(db_session)

        assert len(users) == len(DEFAULT_USERS)
        assert await db_session.scalar(select(func.count(Permission.id))) == len(ALL_CAPABILITIES)
        assert await db_session.scalar(select(func.count(Role.id))) == 4
        assert await db_session.scalar(select(func.count(Domain.id))) == 3
        assert await db_session.scalar(select(func.count(StoragePlan.id))) == 3

    @pytest.mark.asyncio
    async def test_samples_skipped_when_records_exist(self, db_session):
        db_session.add(Domain(name='own.example.org', privilege='restricted'))
        await db_session.commit()

        await seed_samples(db_session)
        await db_session.commit()

        names = (await db_session.execute(select(Domain.name))).scalars().all()
        assert names == ['own.example.org']
        assert await db_session.scalar(select(func.count(StoragePlan.id))) == 3
