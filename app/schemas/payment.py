from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Union, Literal
from datetime import datetime


class CreateOrderRequest(BaseModel):
    """Request model for creating a gateway order."""
    amount: int = Field(..., gt=0, description="Amount in major currency units (e.g. rupees)")
    currency: str = Field(default="INR", min_length=3, max_length=3)
    receipt: Optional[str] = Field(default=None, max_length=40)


class VerifyPaymentRequest(BaseModel):
    """Payload delivered by the checkout widget callback."""
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    plan_type: str = "pro"
    amount: int = Field(..., gt=0)
    currency: str = "INR"
    user_email: Optional[str] = None
    user_id: Optional[str] = None


class VerifyPaymentResponse(BaseModel):
    success: bool = True


class PaymentConfig(BaseModel):
    """Public checkout settings for initializing the widget."""
    razorpay_key_id: Optional[str] = None
    pro_plan_price_inr: int
    currency: str = "INR"


class PaymentRecord(BaseModel):
    """A stored payment, without its signature."""
    id: str = Field(alias="_id")
    user_id: str
    razorpay_order_id: str
    razorpay_payment_id: str
    amount: int
    currency: str
    plan_type: str
    status: str
    created_at: datetime

    class Config:
        populate_by_name = True


# Tagged results for gateway calls

class OrderCreated(BaseModel):
    kind: Literal["created"] = "created"
    order: Dict[str, Any]


class OrderFailed(BaseModel):
    kind: Literal["failed"] = "failed"
    reason: str


OrderResult = Union[OrderCreated, OrderFailed]


class VerificationSucceeded(BaseModel):
    kind: Literal["succeeded"] = "succeeded"


class VerificationFailed(BaseModel):
    kind: Literal["failed"] = "failed"
    reason: str


VerificationResult = Union[VerificationSucceeded, VerificationFailed]


class AdminPaymentList(BaseModel):
    payments: List[PaymentRecord]
    count: int
    total_revenue: int
