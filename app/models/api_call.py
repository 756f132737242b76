from datetime import datetime
from typing import Any

from beanie import Document, PydanticObjectId
from pydantic import Field


class ApiCall(Document):
    """One generator call attempt. Append-only."""
    user_id: PydanticObjectId
    bin: str
    quantity: int
    month: int | None = None
    year: int | None = None
    credits_used: int = 1
    success: bool = False
    response_data: Any = None  # generator JSON body, success only
    error_message: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "api_calls"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
            [("created_at", -1)],
        ]
