import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB_NAME", "mockinvi_test")
os.environ["TEST_MODE"] = "true"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret-pass"
os.environ["ADMIN_TOKEN_SECRET"] = "admin-token-signing-key-for-tests-only"

import pytest
from mongomock_motor import AsyncMongoMockClient

from app.db.mongo import mongodb, ensure_indexes
from app.services.razorpay_client import razorpay_client
from app.utils.ids import generate_consistent_uuid

EXTERNAL_ID = "user_2abcDEF123"
INTERNAL_ID = "707363df-7073-4073-a707-707363df0000"
EMAIL = "asha@example.com"

ORDER_ID = "order_ABC123"
PAYMENT_ID = "pay_XYZ789"
# HMAC-SHA256("test_secret", "order_ABC123|pay_XYZ789")
SIGNATURE = "85cbc6036124891c4d0280fbb7cd83804f87a66f2eb485a89af574086f592cbc"


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["mockinvi_test"]
    await ensure_indexes(database)
    mongodb.db = database
    yield database
    mongodb.db = None


@pytest.fixture
async def profile(db):
    doc = {
        "_id": generate_consistent_uuid(EXTERNAL_ID),
        "email": EMAIL,
        "full_name": "Asha Rao",
        "role": "student",
        "auth_provider": "firebase"
    }
    await db.profiles.insert_one(doc)
    return doc


@pytest.fixture
def gateway():
    """Route Razorpay HTTP calls to a handler the test sets."""
    import httpx

    state = {"requests": [], "response": httpx.Response(200, json={})}

    def handler(request):
        state["requests"].append(request)
        return state["response"]

    razorpay_client.transport = httpx.MockTransport(handler)
    yield state
    razorpay_client.transport = None


def verification_payload(**overrides):
    payload = {
        "razorpay_order_id": ORDER_ID,
        "razorpay_payment_id": PAYMENT_ID,
        "razorpay_signature": SIGNATURE,
        "plan_type": "pro",
        "amount": 999,
        "currency": "INR",
        "user_email": EMAIL,
        "user_id": EXTERNAL_ID
    }
    payload.update(overrides)
    return payload
