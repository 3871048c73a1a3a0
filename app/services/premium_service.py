"""
Premium listing upgrade.

State flow of a listing::

    Standard -> CheckoutPending (provider side, not stored) -> Premium(valid_until) -> Standard

Opening a checkout never changes the listing. Only a payment that the
provider itself reports as paid activates premium, either through the
confirmation endpoint (which re-reads the session server-side) or through
the signed webhook. A paid session is applied once. Replaying it never
extends the validity window: confirmation rejects it once the window has
lapsed and webhook redelivery is ignored.
"""

import logging
from typing import Any, Dict, Optional

from app.core.plans import PlanCatalog
from app.exceptions import BadRequestError, ForbiddenError, NotFoundError, PaymentSessionUsedError
from app.models.listing import Listing
from app.models.plan import Plan
from app.services.listing_service import ListingService
from app.services.payment_service import CheckoutSession, PaymentService

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED_EVENT = "checkout.session.completed"


class PremiumService:
    """Drives the premium upgrade of a listing"""

    def __init__(self, listing_service: ListingService, payment_service: PaymentService, plans: PlanCatalog):
        self.listing_service = listing_service
        self.payment_service = payment_service
        self.plans = plans

    async def start_checkout(
        self, listing: Listing, plan_key: str, success_url: str, cancel_url: str
    ) -> tuple[Plan, CheckoutSession]:
        """Open a checkout session for a listing that is not premium yet"""
        if listing.is_premium_active():
            raise ForbiddenError("Already a premium property!")

        plan = self.plans.get(plan_key)
        session = await self.payment_service.create_checkout_session(plan, listing.id, success_url, cancel_url)
        return plan, session

    def _check_session(self, session: CheckoutSession, listing_id: str, plan: Plan) -> None:
        if not session.is_paid:
            logger.warning("Session %s for listing %s is %s", session.id, listing_id, session.payment_status)
            raise ForbiddenError("Payment has not been completed")
        if session.metadata.get("listing_id") != listing_id or session.metadata.get("plan") != plan.key:
            logger.warning(
                "Session %s metadata %s does not match listing %s plan %s",
                session.id,
                session.metadata,
                listing_id,
                plan.key,
            )
            raise ForbiddenError("Payment does not belong to this property and plan")

    async def confirm_payment(self, listing_id: str, plan_key: str, session_id: str) -> Listing:
        """Activate premium after verifying the session with the provider"""
        plan = self.plans.get(plan_key)

        session = await self.payment_service.retrieve_checkout_session(session_id)
        self._check_session(session, listing_id, plan)

        try:
            listing = await self.listing_service.make_premium(listing_id, plan, session.id)
        except PaymentSessionUsedError:
            # Already applied (e.g. by the webhook): report the current state, never extend it
            current = await self.listing_service.get_listing_by_id(listing_id)
            if current is not None and current.is_premium_active():
                return current
            raise
        if listing is None:
            raise NotFoundError("Property not found")
        return listing

    async def handle_webhook_event(self, event: Dict[str, Any]) -> Optional[Listing]:
        """Apply a verified provider event; events other than a paid checkout are ignored"""
        event_type = event.get("type")
        if event_type != CHECKOUT_COMPLETED_EVENT:
            logger.info("Ignoring payment event %s", event_type)
            return None

        try:
            session = CheckoutSession.model_validate(event["data"]["object"])
        except (KeyError, TypeError, ValueError) as e:
            raise BadRequestError("Malformed checkout event") from e

        if not session.is_paid:
            logger.info("Checkout session %s completed without payment (%s)", session.id, session.payment_status)
            return None

        listing_id = session.metadata.get("listing_id")
        plan = self.plans.get(session.metadata.get("plan"))
        if not listing_id:
            raise BadRequestError("Checkout event has no listing")

        try:
            listing = await self.listing_service.make_premium(listing_id, plan, session.id)
        except PaymentSessionUsedError:
            logger.info("Ignoring redelivered event for session %s", session.id)
            return None
        if listing is None:
            logger.warning("Paid session %s refers to missing listing %s", session.id, listing_id)
        return listing
