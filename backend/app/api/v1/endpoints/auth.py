"""
Authentication endpoints - login and the current user's profile.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from datetime import datetime

from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import verify_password, create_access_token
from app.core.logging_config import logger, set_user_id
from app.core.rate_limiter import login_rate_limit
from app.models.user import User, Role
from app.schemas.auth import UserLogin, LoginResponse, MeResponse, UserResponse
from app.modules.auth.dependencies import get_current_user
from app.services.dashboard_service import effective_capabilities, resolve_dashboard

router = APIRouter()


async def authenticate(db: AsyncSession, credentials: UserLogin, client_ip: str) -> User:
    """
    Check email and password.

    Unknown email and wrong password fail identically (401). A deactivated
    account with the right password is 403.
    """
    result = await db.execute(
        select(User)
        .options(selectinload(User.roles).selectinload(Role.permissions))
        .where(User.email == credentials.email)
    )
    user = result.scalar_one_or_none()

    failure = None
    if not user or not verify_password(credentials.password, user.hashed_password):
        failure = AuthenticationError("Incorrect email or password"), "Invalid credentials"
    elif not user.is_active:
        failure = AuthorizationError(), "Account inactive"

    if failure is not None:
        error, reason = failure
        logger.log_auth_event(
            event="login", success=False, user_email=credentials.email,
            reason=reason, client_ip=client_ip
        )
        raise error

    return user


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Exchange email and password for a bearer token (5/min per client)"""
    client_ip = request.client.host if request.client else "unknown"
    user = await authenticate(db, credentials, client_ip)

    user.last_login = datetime.utcnow()
    await db.commit()
    set_user_id(str(user.id))

    logger.log_auth_event(
        event="login", success=True, user_email=user.email,
        client_ip=client_ip, roles=sorted(user.role_names)
    )

    return {
        "access_token": create_access_token({"sub": str(user.id), "email": user.email}),
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current user, roles, capabilities and the dashboard they land on"""
    capabilities = effective_capabilities(current_user)
    try:
        dashboard = resolve_dashboard(capabilities).value
    except AuthorizationError:
        dashboard = None

    return MeResponse(
        user=UserResponse.model_validate(current_user),
        roles=sorted(current_user.role_names),
        capabilities=sorted(capabilities),
        dashboard=dashboard,
    )
