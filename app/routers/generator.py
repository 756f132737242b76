from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.core.exceptions import UpstreamError
from app.deps import get_current_user
from app.models.user import User
from app.services import ledger as ledger_service
from app.services.generator import GeneratorClient, get_generator_client

router = APIRouter()


class GenerateRequest(BaseModel):
    bin: str
    quantity: int = 10
    month: int | None = None
    year: int | None = None


@router.post("/calls")
async def generator_call(
    body: GenerateRequest,
    user: User = Depends(get_current_user),
    client: GeneratorClient = Depends(get_generator_client),
):
    """Spend 1 credit on one generator call. Failed upstream calls are logged and return 502."""
    outcome = await ledger_service.spend_credit_and_call(
        user,
        client,
        body.bin,
        body.quantity,
        month=body.month,
        year=body.year,
    )
    if not outcome.success:
        raise UpstreamError(
            outcome.call.error_message or "Unknown error occurred",
            details={"call_id": str(outcome.call.id), "credits": outcome.profile.credits},
        )
    return {
        "call": ledger_service.call_out(outcome.call, include_response=True),
        "credits": outcome.profile.credits,
    }


@router.get("/calls")
async def generator_recent_calls(
    user: User = Depends(get_current_user),
    limit: int = Query(ledger_service.RECENT_CALLS_LIMIT, ge=1, le=100),
):
    """Own calls, newest first."""
    calls = await ledger_service.list_own_calls(user.id, limit=limit)
    return {"calls": [ledger_service.call_out(c) for c in calls]}
