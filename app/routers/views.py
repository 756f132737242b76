from fastapi import APIRouter, Depends

from app.deps import get_current_user
from app.models.user import User
from app.routers.settings import setting_out
from app.services import admin as admin_service
from app.services import ledger as ledger_service
from app.services import settings as settings_service
from app.services.profiles import get_or_create_profile, profile_out

router = APIRouter()

NAV_ITEMS = [
    {"tab": "dashboard", "title": "Dashboard", "url": "/"},
    {"tab": "admin", "title": "Admin Panel", "url": "/?tab=admin"},
    {"tab": "settings", "title": "Settings", "url": "/?tab=settings"},
]
ADMIN_TABS = {"admin", "settings"}


def resolve_tab(requested: str | None, is_admin: bool) -> str:
    """Non-admins always land on the dashboard; unknown tabs fall back to it too."""
    if not is_admin:
        return "dashboard"
    if requested in ADMIN_TABS:
        return requested
    return "dashboard"


@router.get("")
async def view(tab: str | None = None, user: User = Depends(get_current_user)):
    """Resolve ?tab= for the viewer and return that tab's data plus allowed navigation."""
    profile = await get_or_create_profile(user)
    current = resolve_tab(tab, profile.is_admin)
    nav = NAV_ITEMS if profile.is_admin else [i for i in NAV_ITEMS if i["tab"] == "dashboard"]
    out = {
        "tab": current,
        "nav": nav,
        "profile": profile_out(profile),
    }
    if current == "admin":
        users = await admin_service.list_profiles(user.id)
        out["users"] = [profile_out(p) for p in users]
        out["stats"] = await admin_service.call_stats()
    elif current == "settings":
        rows = await settings_service.list_settings(user.id)
        out["settings"] = [setting_out(s) for s in rows]
    else:
        calls = await ledger_service.list_own_calls(user.id)
        out["recent_calls"] = [ledger_service.call_out(c) for c in calls]
    return out
