"""Local password-based authentication provider."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from brewlog.config import settings
from brewlog.models.user import User
from brewlog.models.session import Session
from brewlog.services.auth.base import AuthProvider


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


class LocalAuthProvider(AuthProvider):
    """
    Session-cookie authentication backed by the users and sessions tables.

    Passwords are bcrypt hashes; session tokens are random URL-safe strings.
    """

    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user or not user.password_hash:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def create_user(self, db: DBSession, email: str, password: str) -> User:
        user = User(email=email.lower(), password_hash=hash_password(password))
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        token = request.cookies.get(settings.session_cookie_name)
        if not token:
            return None

        now = datetime.now(timezone.utc)
        session = db.query(Session).filter(
            Session.token == token,
            Session.expires_at > now
        ).first()

        if not session:
            return None

        return session.user

    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age)

        session = Session(
            user_id=user.id,
            token=token,
            expires_at=expires_at,
            user_agent=request.headers.get("user-agent", "")[:512],
            ip_address=request.client.host if request.client else None
        )
        db.add(session)
        db.commit()

        return token

    async def revoke_session(self, db: DBSession, token: str) -> bool:
        session = db.query(Session).filter(Session.token == token).first()
        if not session:
            return False
        db.delete(session)
        db.commit()
        return True


# Singleton instance
local_auth_provider = LocalAuthProvider()
