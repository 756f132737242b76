from app.models.user import User
from app.models.profile import Profile
from app.models.api_call import ApiCall
from app.models.api_setting import ApiSetting
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "Profile",
    "ApiCall",
    "ApiSetting",
    "AuditLog",
]
