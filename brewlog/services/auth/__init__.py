"""
Authentication service package.

Usage:
    from brewlog.services.auth.dependencies import get_current_user

    @router.get("/protected")
    def protected_route(user: User = Depends(get_current_user)):
        ...
"""
from brewlog.services.auth.base import AuthProvider
from brewlog.services.auth.local_provider import local_auth_provider


def get_auth_provider() -> AuthProvider:
    """Return the configured auth provider (session cookies backed by the database)."""
    return local_auth_provider


__all__ = [
    "AuthProvider",
    "get_auth_provider",
    "local_auth_provider",
]
