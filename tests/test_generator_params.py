"""Generator parameter checks and query building (no I/O)."""

import httpx
import pytest

from app.core.exceptions import FieldValidationError
from app.services.generator import GeneratorClient, GeneratorParams, param_errors, validate_params


@pytest.mark.parametrize(
    "bin,quantity",
    [("401658", 1), ("401658", 50), ("4016581234", 10), ("000000", 25)],
)
def test_valid_params_pass(bin, quantity):
    assert param_errors(bin, quantity) == {}
    params = validate_params(bin, quantity)
    assert params == GeneratorParams(bin=bin, quantity=quantity)


@pytest.mark.parametrize(
    "kwargs,field,message",
    [
        ({"bin": "12345", "quantity": 10}, "bin", "BIN must be at least 6 digits"),
        ({"bin": "40165a", "quantity": 10}, "bin", "BIN must be at least 6 digits"),
        ({"bin": "", "quantity": 10}, "bin", "BIN must be at least 6 digits"),
        ({"bin": "401658\n", "quantity": 10}, "bin", "BIN must be at least 6 digits"),
        ({"bin": "\u0664\u0660\u0661\u0666\u0665\u0668", "quantity": 10}, "bin", "BIN must be at least 6 digits"),
        ({"bin": "\uff14\uff10\uff11\uff16\uff15\uff18", "quantity": 10}, "bin", "BIN must be at least 6 digits"),
        ({"bin": "401658", "quantity": 0}, "quantity", "Quantity must be at least 1"),
        ({"bin": "401658", "quantity": 51}, "quantity", "Quantity cannot exceed 50"),
        ({"bin": "401658", "quantity": 5, "month": 13}, "month", "Month must be between 1-12"),
        ({"bin": "401658", "quantity": 5, "month": 0}, "month", "Month must be between 1-12"),
        ({"bin": "401658", "quantity": 5, "year": 2024}, "year", "Year must be 2025 or later"),
        ({"bin": "401658", "quantity": 5, "year": 2036}, "year", "Year cannot exceed 2035"),
    ],
)
def test_invalid_params_report_field(kwargs, field, message):
    errors = param_errors(**kwargs)
    assert errors == {field: message}
    with pytest.raises(FieldValidationError) as exc:
        validate_params(**kwargs)
    assert exc.value.details == {"errors": {field: message}}
    assert exc.value.status_code == 422


def test_multiple_fields_reported_together():
    errors = param_errors("123", 100, month=14, year=2000)
    assert set(errors) == {"bin", "quantity", "month", "year"}


def test_query_omits_missing_expiry():
    assert GeneratorParams("401658", 10).to_query() == {"bin": "401658", "qty": 10}
    assert GeneratorParams("401658", 10, 12, 2028).to_query() == {
        "bin": "401658",
        "qty": 10,
        "mon": 12,
        "yr": 2028,
    }


async def test_client_maps_error_body():
    def handler(request):
        return httpx.Response(400, json={"error": "Invalid BIN"})

    client = GeneratorClient(transport=httpx.MockTransport(handler), timeout=5)
    result = await client.generate("https://generator.test/gen", GeneratorParams("401658", 1))
    assert result.ok is False
    assert result.status_code == 400
    assert result.error == "Invalid BIN"


async def test_client_error_without_message():
    def handler(request):
        return httpx.Response(503, json={"detail": "down"})

    client = GeneratorClient(transport=httpx.MockTransport(handler), timeout=5)
    result = await client.generate("https://generator.test/gen", GeneratorParams("401658", 1))
    assert result.ok is False
    assert result.error == "Unknown error"


async def test_client_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = GeneratorClient(transport=httpx.MockTransport(handler), timeout=5)
    result = await client.generate("https://generator.test/gen", GeneratorParams("401658", 1))
    assert result.ok is False
    assert result.status_code is None
    assert result.error == "Request failed: connection refused"


async def test_client_sends_query():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"cards": []})

    client = GeneratorClient(transport=httpx.MockTransport(handler), timeout=5)
    result = await client.generate("https://generator.test/gen", GeneratorParams("401658", 3, 7, 2030))
    assert result.ok is True
    assert result.data == {"cards": []}
    params = seen[0].url.params
    assert seen[0].method == "GET"
    assert (params["bin"], params["qty"], params["mon"], params["yr"]) == ("401658", "3", "7", "2030")
