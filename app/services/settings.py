"""API settings rows (key/value), seeded defaults and base URL lookup."""

from datetime import datetime

from beanie import PydanticObjectId

from app.core import policies
from app.core.config import get_settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.core.logging import get_logger
from app.models.api_setting import ApiSetting

log = get_logger(__name__)

API_BASE_URL_KEY = "api_base_url"


def default_settings() -> list[tuple[str, str, str]]:
    """(key, value, description) rows inserted at startup if missing."""
    return [
        (API_BASE_URL_KEY, get_settings().generator_default_url, "Base URL for the card generation API"),
    ]


async def seed_default_settings() -> int:
    """Insert missing default rows; existing rows are left untouched. Returns number inserted."""
    inserted = 0
    for key, value, description in default_settings():
        existing = await ApiSetting.find_one(ApiSetting.setting_key == key)
        if existing:
            continue
        await ApiSetting(setting_key=key, setting_value=value, description=description).insert()
        inserted += 1
    if inserted:
        log.info("settings_seeded", count=inserted)
    return inserted


async def get_api_base_url() -> str:
    """Configured generator base URL, or the hardcoded fallback when the row is missing or blank."""
    fallback = get_settings().generator_default_url
    row = await ApiSetting.find_one(ApiSetting.setting_key == API_BASE_URL_KEY)
    if row and row.setting_value and row.setting_value.strip():
        return row.setting_value.strip()
    return fallback


async def list_settings(viewer_id: PydanticObjectId) -> list[ApiSetting]:
    await policies.ensure_settings_access(viewer_id)
    return await ApiSetting.find_all().sort(+ApiSetting.setting_key).to_list()


async def update_setting(viewer_id: PydanticObjectId, key: str, value: str) -> ApiSetting:
    await policies.ensure_settings_access(viewer_id)
    if not value or not value.strip():
        raise BadRequestError("Setting value cannot be empty")
    row = await ApiSetting.find_one(ApiSetting.setting_key == key)
    if not row:
        raise NotFoundError("Setting not found")
    row.setting_value = value.strip()
    row.updated_at = datetime.utcnow()
    await row.save()
    log.info("setting_updated", admin_id=str(viewer_id), setting_key=key)
    return row
