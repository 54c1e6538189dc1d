import base64
import json

import httpx
import pytest

from app.core.config import settings
from app.core.exceptions import PaymentConfigurationError
from app.schemas.payment import OrderCreated, OrderFailed, VerificationFailed, VerificationSucceeded
from app.services.razorpay_client import compute_signature, razorpay_client

from conftest import ORDER_ID, PAYMENT_ID, SIGNATURE


def test_compute_signature_matches_gateway_scheme():
    assert compute_signature(ORDER_ID, PAYMENT_ID, "test_secret") == SIGNATURE


def test_verify_signature_accepts_exact_match():
    result = razorpay_client.verify_signature(ORDER_ID, PAYMENT_ID, SIGNATURE)
    assert isinstance(result, VerificationSucceeded)


@pytest.mark.parametrize("signature", [
    SIGNATURE[:-1] + ("d" if SIGNATURE[-1] == "c" else "c"),
    SIGNATURE.upper(),
    "",
    "not-a-signature",
])
def test_verify_signature_rejects_anything_else(signature):
    result = razorpay_client.verify_signature(ORDER_ID, PAYMENT_ID, signature)
    assert isinstance(result, VerificationFailed)
    assert result.reason == "Invalid payment signature"


def test_signature_depends_on_both_ids():
    result = razorpay_client.verify_signature(ORDER_ID, "pay_OTHER", SIGNATURE)
    assert isinstance(result, VerificationFailed)


def test_missing_secret_fails_before_network(monkeypatch, gateway):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_SECRET", None)
    with pytest.raises(PaymentConfigurationError):
        razorpay_client.verify_signature(ORDER_ID, PAYMENT_ID, SIGNATURE)


async def test_create_order_uses_basic_auth_and_returns_order_verbatim(gateway):
    order = {"id": ORDER_ID, "entity": "order", "amount": 99900, "currency": "INR", "receipt": "r1", "status": "created"}
    gateway["response"] = httpx.Response(200, json=order)

    result = await razorpay_client.create_order(99900, "INR", "r1")

    assert isinstance(result, OrderCreated)
    assert result.order == order

    request = gateway["requests"][0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.razorpay.com/v1/orders"
    expected_auth = base64.b64encode(b"rzp_test_key:test_secret").decode()
    assert request.headers["authorization"] == f"Basic {expected_auth}"
    assert json.loads(request.content) == {"amount": 99900, "currency": "INR", "receipt": "r1"}


async def test_create_order_surfaces_gateway_error_description(gateway):
    gateway["response"] = httpx.Response(
        400, json={"error": {"code": "BAD_REQUEST_ERROR", "description": "The amount must be atleast INR 1.00"}}
    )

    result = await razorpay_client.create_order(0, "INR", "r1")

    assert isinstance(result, OrderFailed)
    assert result.reason == "The amount must be atleast INR 1.00"


async def test_create_order_generic_error_for_unparseable_body(gateway):
    gateway["response"] = httpx.Response(500, text="<html>oops</html>")

    result = await razorpay_client.create_order(100, "INR", "r1")

    assert isinstance(result, OrderFailed)
    assert result.reason == "Failed to create order"


async def test_create_order_without_credentials_makes_no_request(monkeypatch, gateway):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_ID", None)

    with pytest.raises(PaymentConfigurationError):
        await razorpay_client.create_order(100, "INR", "r1")
    assert gateway["requests"] == []
