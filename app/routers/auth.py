from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.security import SESSION_MAX_AGE, create_session_cookie
from app.deps import SESSION_COOKIE_NAME, get_current_user
from app.models.user import User
from app.services import users as user_service

router = APIRouter()


class SignUpRequest(BaseModel):
    email: str
    password: str
    full_name: str


class SignInRequest(BaseModel):
    email: str
    password: str


def _user_out(user: User) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
    }


def _set_session(response: Response, user: User) -> None:
    payload = user_service.session_payload_for_user(user)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_cookie(payload),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=get_settings().session_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/signup")
async def auth_signup(body: SignUpRequest, response: Response):
    """Create an email/password identity and start a session."""
    user = await user_service.sign_up(body.email, body.password, body.full_name)
    _set_session(response, user)
    return {"user": _user_out(user)}


@router.post("/signin")
async def auth_signin(body: SignInRequest, response: Response):
    """Verify credentials; set httpOnly session cookie."""
    user = await user_service.sign_in(body.email, body.password)
    _set_session(response, user)
    return {"user": _user_out(user)}


@router.post("/signout")
async def auth_signout(response: Response, user: User = Depends(get_current_user)):
    """Invalidate all of the user's sessions and clear the cookie."""
    await user_service.sign_out(user)
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return {"status": "signed_out"}


@router.get("/me")
async def auth_me(user: User = Depends(get_current_user)):
    """Return current user. Requires session cookie."""
    return _user_out(user)
