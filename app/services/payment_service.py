"""
Hosted checkout provider client.

Talks to the provider's REST API (Stripe-compatible form-encoded endpoints)
to open checkout sessions for premium plans and to read them back when a
payment is confirmed.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from app.core.config import settings
from app.exceptions import PaymentProviderError
from app.models.plan import Plan

logger = logging.getLogger(__name__)


class CheckoutSession(BaseModel):
    """Subset of the provider's checkout session object"""
    id: str
    url: Optional[str] = None
    payment_status: Optional[str] = None
    metadata: Dict[str, str] = {}

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


class PaymentService:
    """Client for the checkout provider"""

    def __init__(
        self,
        api_base: Optional[str] = None,
        secret_key: Optional[str] = None,
        currency: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = (api_base or settings.PAYMENT_API_BASE).rstrip("/")
        self.secret_key = secret_key if secret_key is not None else settings.PAYMENT_SECRET_KEY
        self.currency = (currency or settings.PAYMENT_CURRENCY).lower()
        self.timeout = timeout if timeout is not None else settings.EXTERNAL_CALL_TIMEOUT
        self._transport = transport

    async def _request(self, method: str, path: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.secret_key:
            raise PaymentProviderError("Payment provider is not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self.api_base,
                auth=(self.secret_key, ""),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, data=data)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            logger.error("Payment provider timed out on %s %s: %s", method, path, e)
            raise PaymentProviderError("Payment provider timed out", e) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "Payment provider returned %s on %s %s: %s",
                e.response.status_code,
                method,
                path,
                e.response.text,
            )
            raise PaymentProviderError("Payment provider rejected the request", e) from e
        except httpx.HTTPError as e:
            logger.error("Payment provider request %s %s failed: %s", method, path, e)
            raise PaymentProviderError("Payment provider is unavailable", e) from e

    async def create_checkout_session(
        self, plan: Plan, listing_id: str, success_url: str, cancel_url: str
    ) -> CheckoutSession:
        """Open a hosted checkout session for one unit of a premium plan"""
        data = {
            "mode": "payment",
            "line_items[0][price_data][currency]": self.currency,
            "line_items[0][price_data][unit_amount]": plan.price,
            "line_items[0][price_data][product_data][name]": plan.name,
            "line_items[0][quantity]": 1,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": listing_id,
            "metadata[listing_id]": listing_id,
            "metadata[plan]": plan.key,
        }

        payload = await self._request("POST", "/checkout/sessions", data=data)
        session = CheckoutSession.model_validate(payload)
        logger.info("Opened checkout session %s for listing %s on plan %s", session.id, listing_id, plan.key)
        return session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Fetch a checkout session from the provider"""
        payload = await self._request("GET", f"/checkout/sessions/{session_id}")
        return CheckoutSession.model_validate(payload)


def get_payment_service() -> PaymentService:
    """Dependency to get payment service"""
    return PaymentService()
