from fastapi import APIRouter, Depends
from typing import Dict, Any
from app.schemas.payment import (
    CreateOrderRequest,
    PaymentConfig,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from app.services.payment_service import payment_service
from app.services.settings_service import settings_service
from app.api.v1.auth import get_current_user_id
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/config", response_model=PaymentConfig)
async def get_payment_config():
    """Public key id and plan price for initializing the checkout widget."""
    return await settings_service.get_payment_config()


@router.post("/orders")
async def create_order(
    request: CreateOrderRequest,
    user_id: str = Depends(get_current_user_id)
) -> Dict[str, Any]:
    """
    Create a Razorpay order for checkout.

    Returns the gateway's order object unchanged.
    """
    logger.info(f"User {user_id} requested an order for {request.amount} {request.currency}")
    return await payment_service.create_order(request)


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(request: VerifyPaymentRequest):
    """
    Verify the checkout callback and activate the purchased plan.

    The user id and email are taken from the body as sent by the client.
    """
    return await payment_service.verify_payment(request)
