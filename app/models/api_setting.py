from datetime import datetime

from beanie import Document, Indexed
from pydantic import Field


class ApiSetting(Document):
    setting_key: Indexed(str, unique=True)
    setting_value: str
    description: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "api_settings"
