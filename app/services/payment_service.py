from app.db.mongo import get_database
from app.core.exceptions import (
    GatewayError,
    InvalidPaymentRequestError,
    InvalidSignatureError,
    PaymentPersistenceError,
    ProfileNotFoundError,
)
from app.schemas.payment import (
    CreateOrderRequest,
    OrderFailed,
    VerificationFailed,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from app.services.razorpay_client import razorpay_client
from app.services.profile_service import profile_service
from app.services.subscription_service import subscription_service
from pymongo.errors import DuplicateKeyError, PyMongoError
from app.utils.clock import utcnow
from typing import Dict, Any
import logging
import time

logger = logging.getLogger(__name__)


class PaymentService:
    """Checkout order creation and payment verification."""

    def __init__(self):
        self.collection_name = "payments"

    async def get_collection(self):
        db = await get_database()
        return db[self.collection_name]

    async def create_order(self, request: CreateOrderRequest) -> Dict[str, Any]:
        """Create a gateway order; the amount is sent in minor units."""
        receipt = request.receipt or f"receipt_{int(time.time() * 1000)}"

        result = await razorpay_client.create_order(
            amount=request.amount * 100,
            currency=request.currency.upper(),
            receipt=receipt
        )
        if isinstance(result, OrderFailed):
            raise GatewayError(result.reason)
        return result.order

    async def verify_payment(self, request: VerifyPaymentRequest) -> VerifyPaymentResponse:
        """
        Verify a checkout callback and grant the purchased plan.

        The user id and email come from the request body and are not
        re-authenticated. Nothing is written unless the signature matches.
        """
        logger.info(
            f"Verifying payment {request.razorpay_payment_id} for order {request.razorpay_order_id} "
            f"(plan={request.plan_type}, amount={request.amount})"
        )

        if not request.user_email or not request.user_id:
            raise InvalidPaymentRequestError("Missing user email or ID in request")

        # Fail on missing secrets before touching the database
        razorpay_client.credentials()

        user_id = await profile_service.resolve_user_id(request.user_id, request.user_email)
        if not user_id:
            logger.error(f"No profile found for user {request.user_id} ({request.user_email})")
            raise ProfileNotFoundError()

        verification = razorpay_client.verify_signature(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature
        )
        if isinstance(verification, VerificationFailed):
            logger.warning(f"Signature mismatch for payment {request.razorpay_payment_id}")
            raise InvalidSignatureError(verification.reason)
        logger.info(f"Payment signature verified for {request.razorpay_payment_id}")

        collection = await self.get_collection()
        existing = await collection.find_one({"razorpay_payment_id": request.razorpay_payment_id})
        if existing:
            logger.info(f"Payment {request.razorpay_payment_id} already recorded, skipping payment write")
            await self._ensure_subscription(existing)
            return VerifyPaymentResponse()

        payment = {
            "user_id": user_id,
            "razorpay_order_id": request.razorpay_order_id,
            "razorpay_payment_id": request.razorpay_payment_id,
            "razorpay_signature": request.razorpay_signature,
            "amount": request.amount,
            "currency": request.currency or "INR",
            "plan_type": request.plan_type,
            "status": "completed",
            "created_at": utcnow()
        }
        try:
            await collection.insert_one(payment)
        except DuplicateKeyError:
            logger.info(f"Payment {request.razorpay_payment_id} recorded concurrently, skipping payment write")
            existing = await collection.find_one({"razorpay_payment_id": request.razorpay_payment_id})
            await self._ensure_subscription(existing)
            return VerifyPaymentResponse()
        except PyMongoError as e:
            logger.error(f"Payment record insertion failed: {e}")
            raise PaymentPersistenceError(f"Failed to store payment record: {e}")
        logger.info(f"Stored payment {request.razorpay_payment_id} for user {user_id}")

        await self._activate(user_id, request.plan_type, request.razorpay_payment_id)

        logger.info(f"Payment verification complete for {request.razorpay_payment_id}")
        return VerifyPaymentResponse()

    async def _activate(self, user_id: str, plan_type: str, payment_id: str):
        try:
            await subscription_service.activate_subscription(user_id, plan_type)
        except PyMongoError as e:
            # Payment is stored but the user is not entitled until a retry succeeds
            logger.error(
                f"Subscription update failed after payment {payment_id} "
                f"was stored for user {user_id}: {e}"
            )
            raise PaymentPersistenceError(f"Failed to update subscription: {e}")

    async def _ensure_subscription(self, payment: Dict[str, Any]):
        """
        Finish a verification whose payment row already exists.

        A previous attempt may have stored the payment and then failed the
        subscription upsert; the plan is granted if no period started at or
        after the payment.
        """
        if not payment:
            return

        subscription = await subscription_service.get_subscription(payment["user_id"], payment["plan_type"])
        if subscription and subscription.current_period_start >= payment["created_at"]:
            return

        logger.warning(
            f"Payment {payment['razorpay_payment_id']} has no matching subscription period, activating now"
        )
        await self._activate(payment["user_id"], payment["plan_type"], payment["razorpay_payment_id"])

    async def list_payments(self, status: str = None, limit: int = 50) -> Dict[str, Any]:
        """Recent payments for the admin console, with revenue totals."""
        collection = await self.get_collection()
        query = {"status": status} if status else {}

        cursor = collection.find(query).sort([("created_at", -1), ("_id", -1)]).limit(limit)
        payments = []
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            payments.append(doc)

        pipeline = [
            {"$match": {"status": "completed"}},
            {"$group": {"_id": None, "total": {"$sum": "$amount"}}}
        ]
        result = await collection.aggregate(pipeline).to_list(length=1)

        return {
            "payments": payments,
            "count": await collection.count_documents(query),
            "total_revenue": result[0]["total"] if result else 0
        }

payment_service = PaymentService()
