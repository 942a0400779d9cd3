from fastapi import APIRouter, Depends, Response, status

from app.auth import AuthGate
from app.config import Settings
from app.deps import get_auth, get_current_user, get_session_token, get_settings
from app.schemas import Credentials
from app.services.sessions import Identity


router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: Credentials, auth: AuthGate = Depends(get_auth)):
    auth.register(body.username, body.password)
    return {"message": "User registered successfully"}


@router.post("/login")
def login(
    body: Credentials,
    response: Response,
    auth: AuthGate = Depends(get_auth),
    settings: Settings = Depends(get_settings),
):
    identity, token = auth.login(body.username, body.password)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_absolute_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return {"message": "Login successful", "user": identity.to_public()}


@router.get("/me")
def me(user: Identity = Depends(get_current_user)):
    return {"user": user.to_public()}


@router.post("/logout")
def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    auth: AuthGate = Depends(get_auth),
    settings: Settings = Depends(get_settings),
):
    auth.logout(token)
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return {"message": "Logged out successfully"}
