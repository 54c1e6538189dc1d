from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from typing import Optional
from app.core.exceptions import AuthenticationError
from app.core.security import check_admin_credentials, create_admin_token, require_admin
from app.schemas.payment import AdminPaymentList, PaymentConfig
from app.schemas.user import AdminLoginRequest, AdminToken
from app.services.payment_service import payment_service
from app.services.settings_service import settings_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


class PaymentSettingsUpdate(BaseModel):
    razorpay_key_id: Optional[str] = Field(default=None, pattern=r"^rzp_(test|live)_[A-Za-z0-9]+$")
    pro_plan_price_inr: Optional[int] = Field(default=None, gt=0)


@router.post("/login", response_model=AdminToken)
async def admin_login(request: AdminLoginRequest):
    """Exchange admin credentials for a short-lived session token."""
    if not check_admin_credentials(request.username, request.password):
        logger.warning(f"Failed admin login for {request.username}")
        raise AuthenticationError("Invalid username or password")

    logger.info(f"Admin {request.username} logged in")
    return AdminToken(**create_admin_token(request.username))


@router.get("/payments", response_model=AdminPaymentList, response_model_by_alias=True)
async def list_payments(
    status: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    admin: str = Depends(require_admin)
):
    """Recent payments across all users with revenue totals."""
    return await payment_service.list_payments(status=status, limit=limit)


@router.get("/settings/payment", response_model=PaymentConfig)
async def get_payment_settings(admin: str = Depends(require_admin)):
    return await settings_service.get_payment_config()


@router.put("/settings/payment", response_model=PaymentConfig)
async def update_payment_settings(
    update: PaymentSettingsUpdate,
    admin: str = Depends(require_admin)
):
    """Update the public checkout key id and the Pro plan price."""
    return await settings_service.update_payment_settings(
        razorpay_key_id=update.razorpay_key_id,
        pro_plan_price_inr=update.pro_plan_price_inr,
        updated_by=admin
    )
