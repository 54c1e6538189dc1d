from app.db.mongo import get_database
from app.core.config import settings
from app.schemas.subscription import Subscription, SubscriptionStatus, BillingSummary
from app.schemas.payment import PaymentRecord
from dateutil.relativedelta import relativedelta
from datetime import datetime, timezone
from app.utils.clock import utcnow
from typing import Optional
import logging

logger = logging.getLogger(__name__)

ACTIVE = "active"
PRO_PLAN_TYPES = {"pro", "enterprise"}


def _as_utc_naive(value: datetime) -> datetime:
    # Mongo hands back naive UTC datetimes; keep comparisons in that form
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def has_any_active_plan(subscription: Optional[Subscription], now: Optional[datetime] = None) -> bool:
    if subscription is None:
        return False
    now = _as_utc_naive(now or utcnow())
    return subscription.status == ACTIVE and now < _as_utc_naive(subscription.current_period_end)


def has_active_plan(subscription: Optional[Subscription], plan_type: str, now: Optional[datetime] = None) -> bool:
    return has_any_active_plan(subscription, now) and subscription.plan_type == plan_type


def has_pro_plan(subscription: Optional[Subscription], now: Optional[datetime] = None) -> bool:
    """Pro access: active, not past current_period_end, and a pro-tier plan."""
    return has_any_active_plan(subscription, now) and subscription.plan_type in PRO_PLAN_TYPES


class SubscriptionService:
    def __init__(self):
        self.collection_name = "user_subscriptions"
        self.payments_collection_name = "payments"

    async def get_collection(self):
        db = await get_database()
        return db[self.collection_name]

    async def get_active_subscription(self, user_id: str) -> Optional[Subscription]:
        """Most recent active-status row for the user; expiry is left to the caller."""
        collection = await self.get_collection()
        doc = await collection.find_one(
            {"user_id": user_id, "status": ACTIVE},
            sort=[("current_period_start", -1), ("created_at", -1), ("_id", -1)]
        )
        if not doc:
            return None
        doc["_id"] = str(doc["_id"])
        return Subscription(**doc)

    async def get_subscription(self, user_id: str, plan_type: str) -> Optional[Subscription]:
        collection = await self.get_collection()
        doc = await collection.find_one({"user_id": user_id, "plan_type": plan_type})
        if not doc:
            return None
        doc["_id"] = str(doc["_id"])
        return Subscription(**doc)

    async def activate_subscription(
        self,
        user_id: str,
        plan_type: str,
        now: Optional[datetime] = None
    ) -> Subscription:
        """Create or overwrite the user's subscription for a plan, starting now."""
        collection = await self.get_collection()
        now = now or utcnow()
        # Clamps to month end (Jan 31 -> Feb 28); rows from the old Date.setMonth code rolled over (Mar 3)
        period_end = now + relativedelta(months=settings.SUBSCRIPTION_PERIOD_MONTHS)

        await collection.update_one(
            {"user_id": user_id, "plan_type": plan_type},
            {
                "$set": {
                    "status": ACTIVE,
                    "current_period_start": now,
                    "current_period_end": period_end,
                    "updated_at": now
                },
                "$setOnInsert": {"created_at": now}
            },
            upsert=True
        )
        logger.info(f"Activated {plan_type} subscription for user {user_id} until {period_end.isoformat()}")

        doc = await collection.find_one({"user_id": user_id, "plan_type": plan_type})
        doc["_id"] = str(doc["_id"])
        return Subscription(**doc)

    async def get_status(self, user_id: str) -> SubscriptionStatus:
        subscription = await self.get_active_subscription(user_id)
        return SubscriptionStatus(
            subscription=subscription,
            has_pro_plan=has_pro_plan(subscription),
            has_any_active_plan=has_any_active_plan(subscription)
        )

    async def user_has_pro_plan(self, user_id: str) -> bool:
        return has_pro_plan(await self.get_active_subscription(user_id))

    async def get_billing_summary(self, user_id: str, limit: int = 10) -> BillingSummary:
        """Current plan plus the user's most recent payments."""
        subscription = await self.get_active_subscription(user_id)

        db = await get_database()
        cursor = db[self.payments_collection_name].find(
            {"user_id": user_id}
        ).sort([("created_at", -1), ("_id", -1)]).limit(limit)

        history = []
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            history.append(PaymentRecord(**doc))

        return BillingSummary(
            current_plan=subscription.plan_type if subscription else None,
            plan_renewal_date=subscription.current_period_end if subscription else None,
            billing_history=history
        )

subscription_service = SubscriptionService()
