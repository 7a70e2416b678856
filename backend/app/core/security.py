"""
Password hashing (bcrypt) and access tokens (JWT via python-jose).
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
import uuid

from app.core.config import settings
from app.core.exceptions import AuthenticationError

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72
ACCESS_TOKEN_TYPE = "access"


def _bcrypt_input(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Accounts without a stored hash never authenticate"""
    if not hashed_password:
        return False
    return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash with BCRYPT_ROUNDS (lowered in tests)"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_bcrypt_input(password), salt).decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Signed access token carrying `data` plus `exp` and `type`"""
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.utcnow() + lifetime, "type": ACCESS_TOKEN_TYPE}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode JWT token, raising AuthenticationError when it is invalid or expired"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Could not validate credentials")


def access_token_subject(token: str) -> str:
    """
    User id carried by a valid access token.

    Raises:
        AuthenticationError: bad signature, expired, wrong type, or a subject
            that is not a user id
    """
    payload = decode_token(token)

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Invalid token type")

    subject = payload.get("sub")
    try:
        return str(uuid.UUID(str(subject)))
    except ValueError:
        raise AuthenticationError("Invalid token payload")
