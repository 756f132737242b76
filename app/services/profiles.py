"""Per-user profile: credit balance, admin flag, display name."""

from datetime import datetime

from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core import policies
from app.core.exceptions import AppError, FieldValidationError, NotFoundError
from app.core.logging import get_logger
from app.models.profile import Profile
from app.models.user import User
from app.services.users import validate_name

log = get_logger(__name__)


async def get_or_create_profile(user: User) -> Profile:
    """Return the user's profile, inserting one with zero credits on first fetch."""
    try:
        profile = await Profile.find_one(Profile.user_id == user.id)
        if profile:
            return profile
        profile = Profile(
            user_id=user.id,
            email=user.email,
            full_name=user.full_name or None,
            credits=0,
        )
        try:
            await profile.insert()
        except DuplicateKeyError:
            # created by a concurrent first fetch
            return await Profile.find_one(Profile.user_id == user.id)
    except PyMongoError as e:
        log.error("profile_fetch_failed", user_id=str(user.id), error=str(e))
        raise AppError("Failed to load profile data", code="PROFILE_FETCH_FAILED") from e
    log.info("profile_created", user_id=str(user.id))
    return profile


async def get_profile(viewer_id: PydanticObjectId, user_id: PydanticObjectId) -> Profile:
    """Read one profile through the row rules; hidden rows look missing."""
    if not await policies.can_read_profile(viewer_id, user_id):
        raise NotFoundError("Profile not found")
    profile = await Profile.find_one(Profile.user_id == user_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


async def update_profile_name(user: User, full_name: str) -> Profile:
    name_error = validate_name(full_name)
    if name_error:
        raise FieldValidationError({"full_name": name_error})
    profile = await get_or_create_profile(user)
    await policies.ensure_can_update_profile(user.id, profile.user_id)
    profile.full_name = full_name.strip()
    profile.updated_at = datetime.utcnow()
    await profile.save()
    return profile


def profile_out(profile: Profile) -> dict:
    return {
        "id": str(profile.id),
        "user_id": str(profile.user_id),
        "email": profile.email,
        "full_name": profile.full_name,
        "credits": profile.credits,
        "is_admin": profile.is_admin,
        "created_at": profile.created_at.isoformat(),
        "updated_at": profile.updated_at.isoformat(),
    }
