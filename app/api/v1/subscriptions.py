from fastapi import APIRouter, Depends
from app.schemas.subscription import SubscriptionStatus, BillingSummary
from app.services.subscription_service import subscription_service
from app.core.exceptions import EntitlementRequiredError
from app.api.v1.auth import get_internal_user_id

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


async def require_pro_plan(internal_id: str = Depends(get_internal_user_id)) -> str:
    """Dependency for pro-only endpoints; returns the caller's internal id."""
    if not await subscription_service.user_has_pro_plan(internal_id):
        raise EntitlementRequiredError()
    return internal_id


@router.get("/me", response_model=SubscriptionStatus, response_model_by_alias=True)
async def get_my_subscription(internal_id: str = Depends(get_internal_user_id)):
    """Current subscription and computed entitlements."""
    return await subscription_service.get_status(internal_id)


@router.get("/billing", response_model=BillingSummary, response_model_by_alias=True)
async def get_billing(internal_id: str = Depends(get_internal_user_id)):
    """Current plan, renewal date and recent payments."""
    return await subscription_service.get_billing_summary(internal_id)
