from datetime import datetime

from beanie import Document, Indexed
from pydantic import Field


class User(Document):
    """Auth identity. Credits and the admin flag live on Profile."""
    email: Indexed(str, unique=True)
    password_hash: str
    full_name: str | None = None  # captured at sign-up, copied into the profile on creation
    session_version: int = 0
    last_login_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
