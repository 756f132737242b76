"""
Credit-metered generator calls.

spend_credit_and_call runs validate -> balance check -> external GET -> log ->
decrement, in that order, with no transaction around it. If the process dies
after the GET but before the decrement, the call stays logged with no credit
taken; two sessions of one user can also race the decrement. Both gaps are
known and left open: logging is at-least-once per attempt, billing is not
exactly-once.
"""

from dataclasses import dataclass
from datetime import datetime

from beanie import PydanticObjectId

from app.core import policies
from app.core.exceptions import InsufficientCreditsError
from app.core.logging import get_logger
from app.core.pagination import paginate
from app.models.api_call import ApiCall
from app.models.profile import Profile
from app.models.user import User
from app.services.generator import GeneratorClient, validate_params
from app.services.profiles import get_or_create_profile
from app.services.settings import get_api_base_url

log = get_logger(__name__)

RECENT_CALLS_LIMIT = 5
CREDITS_PER_CALL = 1


@dataclass
class LedgerOutcome:
    call: ApiCall
    profile: Profile

    @property
    def success(self) -> bool:
        return self.call.success


async def spend_credit_and_call(
    user: User,
    client: GeneratorClient,
    bin: str,
    quantity: int,
    month: int | None = None,
    year: int | None = None,
) -> LedgerOutcome:
    """Charge one credit for one generator call. Raises before any I/O on bad input or empty balance."""
    params = validate_params(bin, quantity, month, year)
    profile = await get_or_create_profile(user)
    if profile.credits < CREDITS_PER_CALL:
        raise InsufficientCreditsError(balance=profile.credits)

    base_url = await get_api_base_url()
    result = await client.generate(base_url, params)

    call = ApiCall(
        user_id=user.id,
        bin=params.bin,
        quantity=params.quantity,
        month=params.month,
        year=params.year,
        credits_used=CREDITS_PER_CALL,
        success=result.ok,
        response_data=result.data if result.ok else None,
        error_message=None if result.ok else (result.error or "Unknown error"),
    )
    await call.insert()

    if result.ok:
        # computed from the balance read above, not an atomic $inc
        profile.credits = profile.credits - CREDITS_PER_CALL
        profile.updated_at = datetime.utcnow()
        await profile.save()

    log.info(
        "generator_call",
        user_id=str(user.id),
        call_id=str(call.id),
        bin=params.bin,
        quantity=params.quantity,
        success=call.success,
        status_code=result.status_code,
        credits=profile.credits,
    )
    return LedgerOutcome(call=call, profile=profile)


async def list_own_calls(user_id: PydanticObjectId, limit: int = RECENT_CALLS_LIMIT) -> list[ApiCall]:
    """Newest first."""
    limit, _ = paginate(limit, 0, max_limit=100)
    return (
        await ApiCall.find(ApiCall.user_id == user_id)
        .sort(-ApiCall.created_at)
        .limit(limit)
        .to_list()
    )


async def list_visible_calls(
    viewer_id: PydanticObjectId,
    user_id: PydanticObjectId | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ApiCall]:
    """Calls the viewer may read (own rows, or all rows for administrators), newest first."""
    limit, offset = paginate(limit, offset)
    query = await policies.visible_calls(viewer_id)
    if user_id is not None:
        query = query.find(ApiCall.user_id == user_id)
    return await query.sort(-ApiCall.created_at).skip(offset).limit(limit).to_list()


def call_out(call: ApiCall, include_response: bool = False) -> dict:
    out = {
        "id": str(call.id),
        "user_id": str(call.user_id),
        "bin": call.bin,
        "quantity": call.quantity,
        "month": call.month,
        "year": call.year,
        "credits_used": call.credits_used,
        "success": call.success,
        "error_message": call.error_message,
        "created_at": call.created_at.isoformat(),
    }
    if include_response:
        out["response_data"] = call.response_data
    return out
