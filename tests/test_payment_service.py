from datetime import timedelta

import httpx
import pytest
from dateutil.relativedelta import relativedelta
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.exceptions import (
    GatewayError,
    InvalidPaymentRequestError,
    InvalidSignatureError,
    PaymentConfigurationError,
    PaymentPersistenceError,
    ProfileNotFoundError,
)
from app.schemas.payment import CreateOrderRequest, VerifyPaymentRequest
from app.services.payment_service import payment_service
from app.services.subscription_service import subscription_service
from app.utils.clock import utcnow

from conftest import EMAIL, INTERNAL_ID, PAYMENT_ID, SIGNATURE, verification_payload


async def test_create_order_converts_to_minor_units(db, gateway):
    gateway["response"] = httpx.Response(200, json={"id": "order_1", "amount": 99900, "currency": "INR"})

    order = await payment_service.create_order(CreateOrderRequest(amount=999, receipt="receipt_1"))

    assert order == {"id": "order_1", "amount": 99900, "currency": "INR"}
    sent = gateway["requests"][0]
    assert b'"amount":99900' in sent.content.replace(b" ", b"")


async def test_create_order_generates_receipt_when_missing(db, gateway):
    gateway["response"] = httpx.Response(200, json={"id": "order_1"})

    await payment_service.create_order(CreateOrderRequest(amount=10))

    assert b'"receipt":"receipt_' in gateway["requests"][0].content.replace(b" ", b"")


async def test_create_order_gateway_failure_raises(db, gateway):
    gateway["response"] = httpx.Response(401, json={"error": {"description": "Authentication failed"}})

    with pytest.raises(GatewayError) as exc:
        await payment_service.create_order(CreateOrderRequest(amount=999))
    assert exc.value.detail == "Authentication failed"


async def test_verify_writes_payment_and_subscription(db, profile):
    before = utcnow()

    response = await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))

    assert response.success is True
    payments = await db.payments.find({}).to_list(length=None)
    assert len(payments) == 1
    payment = payments[0]
    assert payment["user_id"] == INTERNAL_ID
    assert payment["status"] == "completed"
    assert payment["amount"] == 999
    assert payment["currency"] == "INR"
    assert payment["plan_type"] == "pro"
    assert payment["razorpay_signature"] == SIGNATURE

    subscriptions = await db.user_subscriptions.find({}).to_list(length=None)
    assert len(subscriptions) == 1
    subscription = subscriptions[0]
    assert subscription["user_id"] == INTERNAL_ID
    assert subscription["plan_type"] == "pro"
    assert subscription["status"] == "active"
    assert subscription["current_period_start"] >= before.replace(microsecond=0)
    assert subscription["current_period_end"] == subscription["current_period_start"] + relativedelta(months=1)


async def test_tampered_signature_writes_nothing(db, profile):
    tampered = SIGNATURE[:-1] + "d"

    with pytest.raises(InvalidSignatureError):
        await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload(razorpay_signature=tampered)))

    assert await db.payments.count_documents({}) == 0
    assert await db.user_subscriptions.count_documents({}) == 0


async def test_missing_user_details_rejected(db, profile):
    with pytest.raises(InvalidPaymentRequestError):
        await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload(user_email=None)))


async def test_missing_secret_is_configuration_error(db, profile, monkeypatch):
    monkeypatch.setattr(settings, "RAZORPAY_KEY_SECRET", None)

    with pytest.raises(PaymentConfigurationError):
        await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))
    assert await db.payments.count_documents({}) == 0


async def test_unknown_user_fails(db):
    with pytest.raises(ProfileNotFoundError):
        await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))
    assert await db.payments.count_documents({}) == 0


async def test_falls_back_to_email_lookup(db):
    await db.profiles.insert_one({"_id": "legacy-profile-id", "email": EMAIL, "role": "student"})

    await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))

    payment = await db.payments.find_one({})
    assert payment["user_id"] == "legacy-profile-id"
    subscription = await subscription_service.get_active_subscription("legacy-profile-id")
    assert subscription is not None


async def test_duplicate_verification_is_idempotent(db, profile):
    request = VerifyPaymentRequest(**verification_payload())

    await payment_service.verify_payment(request)
    response = await payment_service.verify_payment(request)

    assert response.success is True
    assert await db.payments.count_documents({"razorpay_payment_id": PAYMENT_ID}) == 1
    assert await db.user_subscriptions.count_documents({}) == 1


async def test_subscription_failure_leaves_payment_recorded(db, profile, monkeypatch):
    async def failing_activate(user_id, plan_type, now=None):
        raise PyMongoError("write concern error")

    monkeypatch.setattr(subscription_service, "activate_subscription", failing_activate)

    with pytest.raises(PaymentPersistenceError) as exc:
        await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))

    assert "Failed to update subscription" in exc.value.detail
    assert await db.payments.count_documents({}) == 1
    assert await db.user_subscriptions.count_documents({}) == 0


async def test_retry_after_failed_subscription_grants_plan(db, profile, monkeypatch):
    real_activate = subscription_service.activate_subscription

    async def failing_activate(user_id, plan_type, now=None):
        raise PyMongoError("write concern error")

    request = VerifyPaymentRequest(**verification_payload())
    monkeypatch.setattr(subscription_service, "activate_subscription", failing_activate)
    with pytest.raises(PaymentPersistenceError):
        await payment_service.verify_payment(request)

    monkeypatch.setattr(subscription_service, "activate_subscription", real_activate)
    response = await payment_service.verify_payment(request)

    assert response.success is True
    assert await db.payments.count_documents({}) == 1
    assert await db.user_subscriptions.count_documents({}) == 1
    assert await subscription_service.user_has_pro_plan(INTERNAL_ID)


async def test_retry_renews_subscription_older_than_payment(db, profile):
    await subscription_service.activate_subscription(INTERNAL_ID, "pro", now=utcnow() - timedelta(days=40))
    await db.payments.insert_one({
        "user_id": INTERNAL_ID, "razorpay_order_id": "order_ABC123", "razorpay_payment_id": PAYMENT_ID,
        "amount": 999, "currency": "INR", "plan_type": "pro", "status": "completed",
        "created_at": utcnow() - timedelta(minutes=5)
    })

    await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))

    assert await db.user_subscriptions.count_documents({}) == 1
    assert await subscription_service.user_has_pro_plan(INTERNAL_ID)


async def test_list_payments_reports_revenue(db, profile):
    await payment_service.verify_payment(VerifyPaymentRequest(**verification_payload()))
    await db.payments.insert_one({
        "user_id": INTERNAL_ID, "razorpay_order_id": "order_2", "razorpay_payment_id": "pay_2",
        "amount": 500, "currency": "INR", "plan_type": "pro", "status": "failed",
        "created_at": utcnow() + timedelta(seconds=1)
    })

    result = await payment_service.list_payments()

    assert result["count"] == 2
    assert result["total_revenue"] == 999
    assert result["payments"][0]["razorpay_payment_id"] == "pay_2"

    completed = await payment_service.list_payments(status="completed")
    assert completed["count"] == 1
