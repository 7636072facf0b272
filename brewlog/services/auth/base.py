"""Abstract base class for authentication providers."""
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from brewlog.models.user import User


class AuthProvider(ABC):
    """
    Authentication provider interface.

    Routes only depend on this interface, so the session-cookie provider can
    be swapped for token or OAuth auth without touching the recommendation API.
    """

    @abstractmethod
    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """Return the User if the credentials are valid, None otherwise."""
        pass

    @abstractmethod
    async def create_user(self, db: DBSession, email: str, password: str) -> User:
        """Create a user with the given credentials."""
        pass

    @abstractmethod
    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        """Resolve the authenticated user for a request, or None."""
        pass

    @abstractmethod
    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        """Start a session and return the token to store in the cookie."""
        pass

    @abstractmethod
    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """Invalidate a session. Returns False if it did not exist."""
        pass
