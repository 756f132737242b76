"""External card generator: parameter checks and the HTTP call."""

import re
from dataclasses import dataclass
from typing import Any

import httpx

from app.core.config import get_settings
from app.core.exceptions import FieldValidationError

BIN_RE = re.compile(r"[0-9]{6,}")
MIN_QUANTITY = 1
MAX_QUANTITY = 50
MIN_YEAR = 2025
MAX_YEAR = 2035


@dataclass(frozen=True)
class GeneratorParams:
    bin: str
    quantity: int
    month: int | None = None
    year: int | None = None

    def to_query(self) -> dict[str, str | int]:
        query: dict[str, str | int] = {"bin": self.bin, "qty": self.quantity}
        if self.month is not None:
            query["mon"] = self.month
        if self.year is not None:
            query["yr"] = self.year
        return query


@dataclass
class GeneratorResult:
    ok: bool
    status_code: int | None = None
    data: Any = None
    error: str | None = None


def param_errors(bin: str, quantity: int, month: int | None = None, year: int | None = None) -> dict[str, str]:
    """Field name -> first error message; empty when every field is acceptable."""
    errors: dict[str, str] = {}
    if not BIN_RE.fullmatch(bin or ""):
        errors["bin"] = "BIN must be at least 6 digits"
    if quantity < MIN_QUANTITY:
        errors["quantity"] = "Quantity must be at least 1"
    elif quantity > MAX_QUANTITY:
        errors["quantity"] = "Quantity cannot exceed 50"
    if month is not None and not 1 <= month <= 12:
        errors["month"] = "Month must be between 1-12"
    if year is not None:
        if year < MIN_YEAR:
            errors["year"] = "Year must be 2025 or later"
        elif year > MAX_YEAR:
            errors["year"] = "Year cannot exceed 2035"
    return errors


def validate_params(bin: str, quantity: int, month: int | None = None, year: int | None = None) -> GeneratorParams:
    errors = param_errors(bin, quantity, month, year)
    if errors:
        raise FieldValidationError(errors)
    return GeneratorParams(bin=bin, quantity=quantity, month=month, year=year)


class GeneratorClient:
    """One GET per call; no retries. ``transport`` lets tests plug in httpx.MockTransport."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None, timeout: float | None = None):
        self._transport = transport
        self._timeout = timeout if timeout is not None else get_settings().generator_timeout_seconds

    async def generate(self, base_url: str, params: GeneratorParams) -> GeneratorResult:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                r = await client.get(base_url, params=params.to_query())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return GeneratorResult(ok=False, error=f"Request failed: {str(e) or e.__class__.__name__}")

        try:
            body = r.json()
        except ValueError:
            return GeneratorResult(
                ok=False,
                status_code=r.status_code,
                error=f"Invalid JSON response (HTTP {r.status_code})",
            )

        if r.is_success:
            return GeneratorResult(ok=True, status_code=r.status_code, data=body)
        message = body.get("error") if isinstance(body, dict) else None
        return GeneratorResult(
            ok=False,
            status_code=r.status_code,
            error=str(message) if message else "Unknown error",
        )


def get_generator_client() -> GeneratorClient:
    """FastAPI dependency."""
    return GeneratorClient()
