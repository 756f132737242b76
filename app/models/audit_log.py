from datetime import datetime
from typing import Any

from beanie import Document, PydanticObjectId
from pydantic import Field


class AuditLog(Document):
    """Auth events only (user_signed_up, user_signed_in)."""
    event_type: str
    user_id: PydanticObjectId | None = None
    email: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "audit_logs"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
            [("event_type", 1)],
        ]
