from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

    async def connect_to_database(self):
        logger.info(f"Connecting to MongoDB database {settings.MONGO_DB_NAME}...")
        try:
            self.client = AsyncIOMotorClient(
                settings.MONGO_URI,
                appname=settings.PROJECT_NAME,
                tz_aware=False
            )
            self.db = self.client[settings.MONGO_DB_NAME]
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise
        logger.info("Connected to MongoDB.")

    async def close_database_connection(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed.")


mongodb = MongoDB()


async def get_database():
    return mongodb.db


async def ensure_indexes(db):
    """Create the indexes the billing collections rely on."""
    await db.payments.create_index("razorpay_payment_id", unique=True)
    await db.payments.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    await db.user_subscriptions.create_index(
        [("user_id", ASCENDING), ("plan_type", ASCENDING)], unique=True
    )
    await db.profiles.create_index("email")
    await db.user_interview_usage.create_index("user_id", unique=True)
    logger.info("MongoDB indexes ensured.")
