from beanie import PydanticObjectId
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.core.exceptions import BadRequestError
from app.deps import require_admin
from app.models.user import User
from app.services import admin as admin_service
from app.services import ledger as ledger_service
from app.services.profiles import profile_out

router = APIRouter()


class CreditsRequest(BaseModel):
    amount: int


@router.get("/users")
async def admin_users(user: User = Depends(require_admin)):
    """Admin: all profiles, newest first."""
    profiles = await admin_service.list_profiles(user.id)
    return {"users": [profile_out(p) for p in profiles]}


@router.get("/stats")
async def admin_stats(user: User = Depends(require_admin)):
    """Admin: call totals across all users."""
    return await admin_service.call_stats()


@router.get("/calls")
async def admin_calls(
    user: User = Depends(require_admin),
    user_id: PydanticObjectId | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """Admin: call records of every user (or one user), newest first."""
    calls = await ledger_service.list_visible_calls(user.id, user_id=user_id, limit=limit, offset=offset)
    return {
        "calls": [ledger_service.call_out(c, include_response=True) for c in calls],
        "limit": limit,
        "offset": offset,
    }


@router.post("/users/{user_id}/credits")
async def admin_add_credits(user_id: PydanticObjectId, body: CreditsRequest, user: User = Depends(require_admin)):
    """Admin: add credits to a user's balance."""
    profile = await admin_service.add_credits(user.id, user_id, body.amount)
    return profile_out(profile)


@router.put("/users/{user_id}/credits")
async def admin_set_credits(user_id: PydanticObjectId, body: CreditsRequest, user: User = Depends(require_admin)):
    """Admin: overwrite a user's balance."""
    profile = await admin_service.set_credits(user.id, user_id, body.amount)
    return profile_out(profile)


@router.post("/users/{user_id}/admin")
async def admin_toggle_admin(user_id: PydanticObjectId, user: User = Depends(require_admin)):
    """Admin: grant or remove admin access for another user."""
    if user_id == user.id:
        raise BadRequestError("You cannot change your own admin status")
    profile = await admin_service.toggle_admin(user.id, user_id)
    return profile_out(profile)
