import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import get_settings
from app.models.api_call import ApiCall
from app.models.api_setting import ApiSetting
from app.models.audit_log import AuditLog
from app.models.profile import Profile
from app.models.user import User

DOCUMENT_MODELS = [
    User,
    Profile,
    ApiCall,
    ApiSetting,
    AuditLog,
]


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true). Avoids TLS for plain mongodb:// in CI."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


def create_client() -> AsyncIOMotorClient:
    settings = get_settings()
    kwargs = {}
    if _use_tls(settings.mongodb_uri):
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsDisableOCSPEndpointCheck"] = True
    return AsyncIOMotorClient(settings.mongodb_uri, **kwargs)


async def init_db(client=None) -> None:
    """Bind document models to the database and seed default settings.

    ``client`` may be any motor-compatible client (tests pass a mongomock one).
    """
    settings = get_settings()
    if client is None:
        client = create_client()
    database = client[settings.mongodb_db_name]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)

    from app.services.settings import seed_default_settings
    await seed_default_settings()
