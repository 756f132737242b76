"""Email/password identities: sign-up, sign-in, sign-out."""

import re
from datetime import datetime

from pymongo.errors import DuplicateKeyError

from app.core.audit import log_event
from app.core.exceptions import ConflictError, FieldValidationError, UnauthorizedError
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.models.user import User

log = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def validate_name(full_name: str | None) -> str | None:
    """Return the error message for a display name, or None when it is acceptable."""
    name = (full_name or "").strip()
    if len(name) < MIN_NAME_LENGTH:
        return "Name must be at least 2 characters"
    if len(name) > MAX_NAME_LENGTH:
        return "Name must be less than 50 characters"
    return None


def validate_credentials(email: str, password: str, full_name: str | None = None, sign_up: bool = False) -> None:
    errors: dict[str, str] = {}
    if not EMAIL_RE.match(normalize_email(email)):
        errors["email"] = "Invalid email address"
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors["password"] = "Password must be at least 6 characters"
    if sign_up:
        name_error = validate_name(full_name)
        if name_error:
            errors["full_name"] = name_error
    if errors:
        raise FieldValidationError(errors)


async def sign_up(email: str, password: str, full_name: str) -> User:
    validate_credentials(email, password, full_name, sign_up=True)
    email = normalize_email(email)
    if await User.find_one(User.email == email):
        raise ConflictError("User already registered")
    user = User(
        email=email,
        password_hash=hash_password(password),
        full_name=full_name.strip(),
        last_login_at=datetime.utcnow(),
    )
    try:
        await user.insert()
    except DuplicateKeyError as e:
        raise ConflictError("User already registered") from e
    log.info("user_signed_up", user_id=str(user.id), email=user.email)
    await log_event("user_signed_up", user_id=user.id, email=user.email)
    return user


async def sign_in(email: str, password: str) -> User:
    validate_credentials(email, password)
    email = normalize_email(email)
    user = await User.find_one(User.email == email)
    if not user or not verify_password(password, user.password_hash):
        log.info("sign_in_failed", email=email)
        raise UnauthorizedError("Invalid login credentials")
    user.last_login_at = datetime.utcnow()
    user.updated_at = datetime.utcnow()
    await user.save()
    log.info("user_signed_in", user_id=str(user.id), email=user.email)
    await log_event("user_signed_in", user_id=user.id, email=user.email)
    return user


async def sign_out(user: User) -> None:
    """Invalidate every outstanding session cookie for the user."""
    user.session_version += 1
    user.updated_at = datetime.utcnow()
    await user.save()
    log.info("user_signed_out", user_id=str(user.id))


def session_payload_for_user(user: User) -> dict:
    return {"user_id": str(user.id), "session_version": user.session_version}
