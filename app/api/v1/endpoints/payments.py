import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from app.api.dependencies import get_premium_service
from app.core.config import settings
from app.core.security import verify_webhook_signature
from app.exceptions import BadRequestError
from app.services.premium_service import PremiumService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_webhook_secret() -> Optional[str]:
    """Dependency returning the provider's webhook signing secret"""
    return settings.PAYMENT_WEBHOOK_SECRET


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    webhook_secret: Optional[str] = Depends(get_webhook_secret),
    premium_service: PremiumService = Depends(get_premium_service),
):
    """Receive signed checkout events from the payment provider"""
    payload = await request.body()

    if not verify_webhook_signature(payload, stripe_signature, webhook_secret or ""):
        raise BadRequestError("Invalid webhook signature")

    try:
        event = json.loads(payload)
    except ValueError as e:
        raise BadRequestError("Webhook payload is not valid JSON") from e
    if not isinstance(event, dict):
        raise BadRequestError("Webhook payload is not an event object")

    logger.info("Received payment event %s (%s)", event.get("id"), event.get("type"))
    await premium_service.handle_webhook_event(event)

    return {"received": True}
