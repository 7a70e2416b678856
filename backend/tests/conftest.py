"""
Panel Admin - Test Configuration and Fixtures
"""
import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Callable, Dict
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment (before the app reads its settings)
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="panel-admin-tests-"))
os.environ['TESTING'] = 'true'
os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{_TEST_ROOT / "test.db"}'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = str(_TEST_ROOT / 'logs' / 'app.log')
os.environ['BACKUP_ROOT'] = str(_TEST_ROOT / 'backups')
os.environ['BACKUP_COMMAND'] = ''

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token
from app.db.seed_data import seed_permissions, seed_roles
from app.models.user import User, Role

fake = Faker()

# Test database setup
TEST_DATABASE_URL = os.environ['DATABASE_URL']
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def roles(db_session: AsyncSession) -> Dict[str, Role]:
    """The default roles with their default capabilities"""
    permissions = await seed_permissions(db_session)
    seeded = await seed_roles(db_session, permissions)
    await db_session.commit()
    return seeded


@pytest.fixture
def make_user(db_session: AsyncSession, roles: Dict[str, Role]) -> Callable:
    """Factory creating a user holding the named roles"""
    async def _make_user(*role_names: str, is_superuser: bool = False, is_active: bool = True,
                         password: str = 'testpassword123') -> User:
        user = User(
            email=fake.unique.email(),
            name=fake.name(),
            hashed_password=get_password_hash(password),
            is_active=is_active,
            is_superuser=is_superuser,
            roles=[roles[name] for name in role_names],
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


def headers_for(user: User) -> dict:
    """Bearer header for `user`"""
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def system_user(make_user) -> User:
    return await make_user('system')


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user('admin')


@pytest.fixture
async def reseller_user(make_user) -> User:
    return await make_user('reseller')


@pytest.fixture
async def member_user(make_user) -> User:
    return await make_user('member')


@pytest.fixture
def system_headers(system_user: User) -> dict:
    return headers_for(system_user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    """Generate authentication headers for an admin (domains, storages)"""
    return headers_for(admin_user)


@pytest.fixture
def reseller_headers(reseller_user: User) -> dict:
    return headers_for(reseller_user)


@pytest.fixture
def member_headers(member_user: User) -> dict:
    """Generate authentication headers for a member (no panel capabilities)"""
    return headers_for(member_user)


@pytest.fixture
def auth_headers_for() -> Callable:
    """Header factory for users created inside a test"""
    return headers_for
