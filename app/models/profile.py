from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import IndexModel


class Profile(Document):
    user_id: PydanticObjectId  # one profile per User
    email: str | None = None
    full_name: str | None = None
    credits: int = 0  # >= 0 intended; not enforced atomically
    is_admin: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "profiles"
        indexes = [
            IndexModel([("user_id", 1)], unique=True),
            [("created_at", -1)],
        ]
