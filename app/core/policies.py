"""
Row access rules for profiles, api_calls and api_settings.

Owners read and write their own rows; administrators read everything, update any
profile and are the only ones allowed to touch settings. ``is_admin`` is the one
lookup that does not go through these rules: it reads the profiles collection
directly, so the profile rules can depend on it without recursing into themselves.
"""

from beanie import PydanticObjectId
from beanie.odm.queries.find import FindMany

from app.core.exceptions import ForbiddenError
from app.models.api_call import ApiCall
from app.models.profile import Profile


async def is_admin(user_id: PydanticObjectId) -> bool:
    """True iff the user's stored profile has is_admin set. Never cached."""
    profile = await Profile.find_one(Profile.user_id == user_id)
    return bool(profile and profile.is_admin)


async def visible_profiles(viewer_id: PydanticObjectId) -> FindMany[Profile]:
    if await is_admin(viewer_id):
        return Profile.find_all()
    return Profile.find(Profile.user_id == viewer_id)


async def visible_calls(viewer_id: PydanticObjectId) -> FindMany[ApiCall]:
    if await is_admin(viewer_id):
        return ApiCall.find_all()
    return ApiCall.find(ApiCall.user_id == viewer_id)


async def can_read_profile(viewer_id: PydanticObjectId, owner_id: PydanticObjectId) -> bool:
    return viewer_id == owner_id or await is_admin(viewer_id)


async def ensure_can_update_profile(viewer_id: PydanticObjectId, owner_id: PydanticObjectId) -> None:
    if viewer_id != owner_id and not await is_admin(viewer_id):
        raise ForbiddenError("Not allowed to update this profile")


async def ensure_settings_access(viewer_id: PydanticObjectId) -> None:
    if not await is_admin(viewer_id):
        raise ForbiddenError("Admin only")
