from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.deps import get_current_user
from app.models.api_setting import ApiSetting
from app.models.user import User
from app.services import settings as settings_service

router = APIRouter()


class SettingUpdate(BaseModel):
    setting_value: str


def setting_out(s: ApiSetting) -> dict:
    return {
        "id": str(s.id),
        "setting_key": s.setting_key,
        "setting_value": s.setting_value,
        "description": s.description,
        "updated_at": s.updated_at.isoformat(),
    }


@router.get("")
async def settings_list(user: User = Depends(get_current_user)):
    """All settings ordered by key; non-admins get 403."""
    rows = await settings_service.list_settings(user.id)
    return {"settings": [setting_out(s) for s in rows]}


@router.put("/{setting_key}")
async def settings_update(setting_key: str, body: SettingUpdate, user: User = Depends(get_current_user)):
    row = await settings_service.update_setting(user.id, setting_key, body.setting_value)
    return setting_out(row)
