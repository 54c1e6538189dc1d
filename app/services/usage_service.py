from app.db.mongo import get_database
from app.core.exceptions import EntitlementRequiredError
from app.schemas.interview import InterviewUsage, InterviewUsageStatus
from app.services.subscription_service import subscription_service
from app.utils.clock import utcnow
import logging

logger = logging.getLogger(__name__)


class UsageService:
    """Tracks the one free mock interview non-pro users get."""

    def __init__(self):
        self.collection_name = "user_interview_usage"

    async def get_collection(self):
        db = await get_database()
        return db[self.collection_name]

    async def get_usage(self, user_id: str) -> InterviewUsage:
        """Fetch the usage row, creating it on first access."""
        collection = await self.get_collection()
        await collection.update_one(
            {"user_id": user_id},
            {"$setOnInsert": {
                "user_id": user_id,
                "free_interview_used": False,
                "usage_count": 0,
                "last_interview_date": None,
                "created_at": utcnow()
            }},
            upsert=True
        )
        doc = await collection.find_one({"user_id": user_id})
        return InterviewUsage(**doc)

    async def get_status(self, user_id: str) -> InterviewUsageStatus:
        usage = await self.get_usage(user_id)
        is_pro = await subscription_service.user_has_pro_plan(user_id)
        return InterviewUsageStatus(
            usage=usage,
            has_pro_plan=is_pro,
            can_start_interview=is_pro or not usage.free_interview_used
        )

    async def start_interview(self, user_id: str) -> InterviewUsage:
        """
        Record an interview start.

        Pro users are only counted; everyone else spends the free interview,
        and is refused once it is gone.
        """
        collection = await self.get_collection()
        status = await self.get_status(user_id)
        now = utcnow()

        if status.has_pro_plan:
            await collection.update_one(
                {"user_id": user_id},
                {"$inc": {"usage_count": 1}, "$set": {"last_interview_date": now, "updated_at": now}}
            )
        else:
            result = await collection.update_one(
                {"user_id": user_id, "free_interview_used": False},
                {
                    "$inc": {"usage_count": 1},
                    "$set": {"free_interview_used": True, "last_interview_date": now, "updated_at": now}
                }
            )
            if result.modified_count == 0:
                logger.info(f"User {user_id} has no interview allowance left")
                raise EntitlementRequiredError("Free interview already used. Upgrade to Pro to continue.")
            logger.info(f"User {user_id} used their free interview")

        return InterviewUsage(**await collection.find_one({"user_id": user_id}))

usage_service = UsageService()
