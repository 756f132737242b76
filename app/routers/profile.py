from beanie import PydanticObjectId
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.deps import get_current_user
from app.models.user import User
from app.services import profiles as profiles_service

router = APIRouter()


class ProfileUpdate(BaseModel):
    full_name: str


@router.get("")
async def profile_get(user: User = Depends(get_current_user)):
    """Return own profile, creating it with zero credits on first fetch."""
    profile = await profiles_service.get_or_create_profile(user)
    return profiles_service.profile_out(profile)


@router.patch("")
async def profile_update(body: ProfileUpdate, user: User = Depends(get_current_user)):
    profile = await profiles_service.update_profile_name(user, body.full_name)
    return profiles_service.profile_out(profile)


@router.get("/{user_id}")
async def profile_get_other(user_id: PydanticObjectId, user: User = Depends(get_current_user)):
    """Owner or admin only; anyone else gets 404."""
    profile = await profiles_service.get_profile(user.id, user_id)
    return profiles_service.profile_out(profile)
