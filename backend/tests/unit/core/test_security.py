"""
Unit Tests for Security Module
Tests for: password hashing, JWT access tokens
"""
import uuid
import pytest
from datetime import datetime, timedelta
from jose import jwt

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_token,
    access_token_subject,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        """Test that hashing returns a different value than input"""
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert len(hashed) > 0

    def test_hash_password_different_each_time(self):
        """Bcrypt generates a new salt per hash"""
        password = "testpassword123"
        assert get_password_hash(password) != get_password_hash(password)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_without_hash(self):
        """Accounts without a password never authenticate"""
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False

    def test_hash_long_password_truncated(self):
        """Test that long passwords are truncated to bcrypt limit"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True

    def test_hash_unicode_password(self):
        password = "tëst🔐pässwörd"
        hashed = get_password_hash(password)

        assert verify_password(password, hashed) is True


class TestAccessToken:
    """Test access token functions"""

    def test_create_access_token_with_expiry(self):
        """Test creating access token with custom expiry"""
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(hours=1))

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        exp = datetime.utcfromtimestamp(payload["exp"])
        remaining = (exp - datetime.utcnow()).total_seconds()

        assert 3500 < remaining < 3700

    def test_access_token_has_type(self):
        token = create_access_token({"sub": "user123"})

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["type"] == "access"

    def test_access_token_does_not_mutate_input(self):
        data = {"sub": "user123"}
        create_access_token(data)
        assert data == {"sub": "user123"}


class TestDecodeToken:
    """Test token decoding"""

    def test_decode_valid_token(self):
        token = create_access_token({"sub": "user123", "email": "test@example.com"})

        payload = decode_token(token)

        assert payload["sub"] == "user123"
        assert payload["email"] == "test@example.com"

    def test_decode_invalid_token(self):
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token("invalid_token_string")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Could not validate credentials"

    def test_decode_expired_token(self):
        expired_token = jwt.encode(
            {"sub": "user123", "exp": datetime.utcnow() - timedelta(hours=1), "type": "access"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(AuthenticationError):
            decode_token(expired_token)

    def test_decode_token_wrong_secret(self):
        token = jwt.encode(
            {"sub": "user123", "exp": datetime.utcnow() + timedelta(hours=1)},
            "wrong_secret_key",
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(AuthenticationError):
            decode_token(token)


class TestAccessTokenSubject:
    """Subject extraction used by the auth dependency"""

    def test_returns_user_id(self):
        user_id = str(uuid.uuid4())
        assert access_token_subject(create_access_token({"sub": user_id})) == user_id

    def test_subject_is_canonicalized(self):
        user_id = uuid.uuid4()
        token = create_access_token({"sub": str(user_id).upper()})
        assert access_token_subject(token) == str(user_id)

    def test_wrong_type_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "exp": datetime.utcnow() + timedelta(hours=1), "type": "refresh"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(AuthenticationError) as exc_info:
            access_token_subject(token)
        assert exc_info.value.message == "Invalid token type"

    @pytest.mark.parametrize("subject", [None, "", "user123"])
    def test_bad_subject_rejected(self, subject):
        data = {} if subject is None else {"sub": subject}

        with pytest.raises(AuthenticationError) as exc_info:
            access_token_subject(create_access_token(data))
        assert exc_info.value.message == "Invalid token payload"
