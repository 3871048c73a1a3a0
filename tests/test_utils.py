#!/usr/bin/env python3
"""
Test utilities for generating test data
"""
import hashlib
import hmac
import json
import time
from typing import Any, Dict

OWNER_ID = "64b000000000000000000001"
BUYER_ID = "64b000000000000000000002"
LISTING_ID = "64b0000000000000000000aa"

WEBHOOK_SECRET = "whsec_test"


def sign_webhook_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a provider-style signature header for a webhook payload"""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def generate_checkout_event(
    listing_id: str = LISTING_ID, plan: str = "basic", payment_status: str = "paid"
) -> Dict[str, Any]:
    """Generate a checkout.session.completed event"""
    return {
        "id": "evt_test_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "url": None,
                "payment_status": payment_status,
                "metadata": {"listing_id": listing_id, "plan": plan},
            }
        },
    }


def encode_event(event: Dict[str, Any]) -> bytes:
    return json.dumps(event).encode()
