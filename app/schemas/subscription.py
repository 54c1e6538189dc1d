from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.schemas.payment import PaymentRecord


class Subscription(BaseModel):
    """A user's plan entitlement row."""
    id: str = Field(alias="_id")
    user_id: str
    plan_type: str
    status: str  # active, canceled, expired
    current_period_start: datetime
    current_period_end: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class SubscriptionStatus(BaseModel):
    """Entitlement summary for the current user."""
    subscription: Optional[Subscription] = None
    has_pro_plan: bool = False
    has_any_active_plan: bool = False


class BillingSummary(BaseModel):
    current_plan: Optional[str] = None
    plan_renewal_date: Optional[datetime] = None
    billing_history: List[PaymentRecord] = []
