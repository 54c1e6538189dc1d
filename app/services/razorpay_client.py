from typing import Optional, Tuple
from app.core.config import settings
from app.core.exceptions import PaymentConfigurationError
from app.schemas.payment import (
    OrderCreated,
    OrderFailed,
    OrderResult,
    VerificationFailed,
    VerificationSucceeded,
    VerificationResult,
)
import hashlib
import hmac
import httpx
import logging

logger = logging.getLogger(__name__)


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"{order_id}|{payment_id}"`` keyed with the gateway secret."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class RazorpayClient:
    """Thin client for the Razorpay Orders API and checkout signatures."""

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        api_base: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        # Explicit values win; otherwise settings are read on every call
        self._key_id = key_id
        self._key_secret = key_secret
        self._api_base = api_base
        self.transport = transport

    @property
    def key_id(self) -> Optional[str]:
        return self._key_id or settings.RAZORPAY_KEY_ID

    @property
    def key_secret(self) -> Optional[str]:
        return self._key_secret or settings.RAZORPAY_KEY_SECRET

    @property
    def api_base(self) -> str:
        return (self._api_base or settings.RAZORPAY_API_BASE).rstrip("/")

    def credentials(self) -> Tuple[str, str]:
        """Return (key_id, key_secret) or fail before any network call."""
        key_id, key_secret = self.key_id, self.key_secret
        if not key_id or not key_secret:
            logger.error("Razorpay credentials are not configured")
            raise PaymentConfigurationError()
        return key_id, key_secret

    async def create_order(self, amount: int, currency: str, receipt: str) -> OrderResult:
        """
        Create a gateway order.

        Args:
            amount: Amount in minor units (paise)
            currency: ISO currency code
            receipt: Caller-supplied receipt reference

        Returns:
            OrderCreated carrying the gateway's order object verbatim, or
            OrderFailed with the gateway's error description
        """
        key_id, key_secret = self.credentials()

        try:
            async with httpx.AsyncClient(
                base_url=self.api_base,
                auth=(key_id, key_secret),
                timeout=settings.RAZORPAY_TIMEOUT_SECONDS,
                transport=self.transport
            ) as client:
                response = await client.post(
                    "/orders",
                    json={"amount": amount, "currency": currency, "receipt": receipt}
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to contact Razorpay: {e}")
            return OrderFailed(reason="Failed to create order")

        if response.is_error:
            reason = "Failed to create order"
            try:
                reason = response.json().get("error", {}).get("description") or reason
            except (ValueError, AttributeError):
                pass
            logger.error(f"Razorpay order creation failed ({response.status_code}): {reason}")
            return OrderFailed(reason=reason)

        order = response.json()
        logger.info(f"Created Razorpay order {order.get('id')} for {amount} {currency}")
        return OrderCreated(order=order)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> VerificationResult:
        """Recompute the checkout signature and compare it to the supplied one."""
        _, key_secret = self.credentials()
        expected = compute_signature(order_id, payment_id, key_secret)

        if not hmac.compare_digest(expected.encode("utf-8"), (signature or "").encode("utf-8")):
            return VerificationFailed(reason="Invalid payment signature")
        return VerificationSucceeded()


# Singleton instance
razorpay_client = RazorpayClient()
