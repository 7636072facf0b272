"""
Unit tests for LocalAuthProvider.

Tests authentication functionality including:
- Password hashing and verification
- Credential checks
- Session creation, lookup and revocation
"""
import pytest
from datetime import timedelta
from unittest.mock import MagicMock

from sqlalchemy.orm import Session

from brewlog.config import settings
from brewlog.models import Session as UserSession
from brewlog.services.auth import get_auth_provider
from brewlog.services.auth.local_provider import (
    LocalAuthProvider,
    hash_password,
    local_auth_provider,
    verify_password,
)
from tests.factories import create_user, create_session


def make_request(token=None):
    """Minimal stand-in for a Starlette request."""
    request = MagicMock()
    request.cookies = {settings.session_cookie_name: token} if token else {}
    request.headers = {"user-agent": "pytest"}
    request.client.host = "127.0.0.1"
    return request


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_bcrypt_hash(self):
        """Test that password hashing returns a bcrypt hash."""
        hashed = hash_password("test_password")

        assert hashed != "test_password"
        assert hashed.startswith("$2b$")

    def test_hash_password_is_salted(self):
        """Test that hashing same password twice gives different hashes."""
        assert hash_password("same_password") != hash_password("same_password")

    def test_verify_password(self):
        """Test correct and incorrect passwords."""
        hashed = hash_password("correct_password")

        assert verify_password("correct_password", hashed) is True
        assert verify_password("wrong_password", hashed) is False
        assert verify_password("", hashed) is False


class TestAuthentication:
    """Tests for credential checks."""

    @pytest.mark.asyncio
    async def test_authenticate_success(self, db: Session):
        """Test successful authentication."""
        user = create_user(db, email="test@example.com", password="secret123")

        result = await local_auth_provider.authenticate(db, "test@example.com", "secret123")

        assert result is not None
        assert result.id == user.id

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, db: Session):
        """Test authentication with wrong password."""
        create_user(db, email="test@example.com", password="secret123")

        result = await local_auth_provider.authenticate(db, "test@example.com", "wrong")

        assert result is None

    @pytest.mark.asyncio
    async def test_authenticate_user_without_password(self, db: Session):
        """Test users without a password hash cannot log in."""
        create_user(db, email="nopass@example.com", password_hash=None)

        result = await local_auth_provider.authenticate(db, "nopass@example.com", "anything")

        assert result is None

    @pytest.mark.asyncio
    async def test_create_user_lowercases_email(self, db: Session):
        """Test that created users have lowercase emails and hashed passwords."""
        user = await local_auth_provider.create_user(db, "New@Example.com", "password123")

        assert user.email == "new@example.com"
        assert verify_password("password123", user.password_hash)


class TestSessions:
    """Tests for session lifecycle."""

    @pytest.mark.asyncio
    async def test_create_session_and_resolve_user(self, db: Session):
        """Test a created session token resolves back to its user."""
        user = create_user(db)

        token = await local_auth_provider.create_session(db, user, make_request())
        resolved = await local_auth_provider.get_user_from_request(db, make_request(token))

        assert resolved.id == user.id

    @pytest.mark.asyncio
    async def test_no_cookie_resolves_to_none(self, db: Session):
        """Test a request without a session cookie is anonymous."""
        assert await local_auth_provider.get_user_from_request(db, make_request()) is None

    @pytest.mark.asyncio
    async def test_expired_session_resolves_to_none(self, db: Session):
        """Test an expired session is ignored."""
        user = create_user(db)
        session = create_session(db, user, expires_in=timedelta(minutes=-5))

        result = await local_auth_provider.get_user_from_request(db, make_request(session.token))

        assert result is None

    @pytest.mark.asyncio
    async def test_revoke_session(self, db: Session):
        """Test revoking deletes the session and reports missing ones."""
        user = create_user(db)
        session = create_session(db, user)
        token = session.token

        assert await local_auth_provider.revoke_session(db, token) is True
        assert db.query(UserSession).filter(UserSession.token == token).first() is None
        assert await local_auth_provider.revoke_session(db, token) is False


class TestProviderSelection:
    """Tests for get_auth_provider."""

    def test_default_provider_is_local(self):
        """Test the configured provider is the local singleton."""
        provider = get_auth_provider()

        assert isinstance(provider, LocalAuthProvider)
        assert provider is local_auth_provider
