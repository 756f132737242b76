"""Admin: user listing, call statistics, credit and role changes."""

from datetime import datetime

from beanie import PydanticObjectId

from app.core import policies
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.logging import get_logger
from app.models.api_call import ApiCall
from app.models.profile import Profile

log = get_logger(__name__)


async def list_profiles(viewer_id: PydanticObjectId) -> list[Profile]:
    """Profiles visible to the viewer, newest first."""
    query = await policies.visible_profiles(viewer_id)
    return await query.sort(-Profile.created_at).to_list()


async def call_stats() -> dict:
    """
    Fold every call record into totals.

    Reads the whole collection and sums in process; fine for small deployments only.
    """
    stats = {
        "total_calls": 0,
        "successful_calls": 0,
        "failed_calls": 0,
        "total_credits_used": 0,
    }
    async for call in ApiCall.find_all():
        stats["total_calls"] += 1
        stats["total_credits_used"] += call.credits_used
        if call.success:
            stats["successful_calls"] += 1
        else:
            stats["failed_calls"] += 1
    return stats


async def _target_profile(user_id: PydanticObjectId) -> Profile:
    profile = await Profile.find_one(Profile.user_id == user_id)
    if not profile:
        raise NotFoundError("User not found")
    return profile


async def add_credits(admin_id: PydanticObjectId, user_id: PydanticObjectId, amount: int) -> Profile:
    if amount <= 0:
        raise BadRequestError("Please select a user and enter a valid credit amount")
    profile = await _target_profile(user_id)
    await policies.ensure_can_update_profile(admin_id, profile.user_id)
    profile.credits = profile.credits + amount
    profile.updated_at = datetime.utcnow()
    await profile.save()
    log.info("credits_added", admin_id=str(admin_id), user_id=str(user_id), amount=amount, credits=profile.credits)
    return profile


async def set_credits(admin_id: PydanticObjectId, user_id: PydanticObjectId, amount: int) -> Profile:
    if amount < 0:
        raise BadRequestError("Credits cannot be negative")
    profile = await _target_profile(user_id)
    await policies.ensure_can_update_profile(admin_id, profile.user_id)
    profile.credits = amount
    profile.updated_at = datetime.utcnow()
    await profile.save()
    log.info("credits_set", admin_id=str(admin_id), user_id=str(user_id), credits=amount)
    return profile


async def toggle_admin(admin_id: PydanticObjectId, user_id: PydanticObjectId) -> Profile:
    """Flip is_admin. Self-demotion is refused by the router, not here."""
    profile = await _target_profile(user_id)
    await policies.ensure_can_update_profile(admin_id, profile.user_id)
    profile.is_admin = not profile.is_admin
    profile.updated_at = datetime.utcnow()
    await profile.save()
    log.info("admin_toggled", admin_id=str(admin_id), user_id=str(user_id), is_admin=profile.is_admin)
    return profile
