"""Authentication routes for login and logout."""

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from brewlog.config import settings
from brewlog.database import get_db
from brewlog.services.auth import get_auth_provider


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/login")
async def login(
    request: Request,
    credentials: LoginRequest = Body(...),
    db: Session = Depends(get_db),
):
    """Check credentials and start a cookie session."""
    auth_provider = get_auth_provider()
    user = await auth_provider.authenticate(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = await auth_provider.create_session(db, user, request)

    response = JSONResponse(content={"id": str(user.id), "email": user.email})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.post("/logout")
async def logout(request: Request, db: Session = Depends(get_db)):
    """Logout and clear session."""
    auth_provider = get_auth_provider()

    # Revoke session from database
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await auth_provider.revoke_session(db, token)

    response = JSONResponse(content={"status": "logged out"})
    response.delete_cookie(settings.session_cookie_name)
    return response
