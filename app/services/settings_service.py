from app.db.mongo import get_database
from app.core.config import settings
from app.schemas.payment import PaymentConfig
from app.utils.clock import utcnow
from typing import Optional
import logging

logger = logging.getLogger(__name__)

PAYMENT_SETTINGS_ID = "payment"


class SettingsService:
    """Admin-managed public settings. Secrets never live here."""

    def __init__(self):
        self.collection_name = "app_settings"

    async def get_collection(self):
        db = await get_database()
        return db[self.collection_name]

    async def get_payment_config(self) -> PaymentConfig:
        collection = await self.get_collection()
        doc = await collection.find_one({"_id": PAYMENT_SETTINGS_ID}) or {}

        return PaymentConfig(
            razorpay_key_id=doc.get("razorpay_key_id") or settings.RAZORPAY_KEY_ID,
            pro_plan_price_inr=doc.get("pro_plan_price_inr") or settings.PRO_PLAN_PRICE_INR,
            currency=settings.DEFAULT_CURRENCY
        )

    async def update_payment_settings(
        self,
        razorpay_key_id: Optional[str] = None,
        pro_plan_price_inr: Optional[int] = None,
        updated_by: Optional[str] = None
    ) -> PaymentConfig:
        collection = await self.get_collection()
        update = {"updated_at": utcnow(), "updated_by": updated_by}
        if razorpay_key_id is not None:
            update["razorpay_key_id"] = razorpay_key_id
        if pro_plan_price_inr is not None:
            update["pro_plan_price_inr"] = pro_plan_price_inr

        await collection.update_one({"_id": PAYMENT_SETTINGS_ID}, {"$set": update}, upsert=True)
        logger.info(f"Payment settings updated by {updated_by}")
        return await self.get_payment_config()

settings_service = SettingsService()
