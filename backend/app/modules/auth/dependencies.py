from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.logging_config import set_user_id
from app.core.security import access_token_subject
from app.models.user import User, Role

# auto_error=False so a missing header is a 401 from AuthenticationError
security = HTTPBearer(auto_error=False)


async def load_user(db: AsyncSession, user_id: str) -> Optional[User]:
    """Load a user with roles and their permissions (needed for capability checks)"""
    result = await db.execute(
        select(User)
        .options(selectinload(User.roles).selectinload(Role.permissions))
        .where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the bearer token to an active user with roles loaded.

    Missing, invalid or expired tokens and unknown users are 401; a
    deactivated account is 403 even though the token is still valid.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    user = await load_user(db, access_token_subject(credentials.credentials))

    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthorizationError()

    # For logging context and per-user rate limits
    set_user_id(str(user.id))
    request.state.user_id = str(user.id)

    return user
