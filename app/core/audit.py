"""Audit log for sign-up and sign-in events."""

from typing import Any

from beanie import PydanticObjectId

from app.models.audit_log import AuditLog


async def log_event(
    event_type: str,
    user_id: PydanticObjectId | None = None,
    email: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Append to audit_logs collection."""
    await AuditLog(
        event_type=event_type,
        user_id=user_id,
        email=email,
        metadata=metadata or {},
    ).insert()
