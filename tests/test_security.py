"""
Tests for access tokens and webhook signatures
"""

import time

from app.core.security import create_access_token, verify_access_token, verify_webhook_signature

from tests.test_utils import OWNER_ID, WEBHOOK_SECRET, sign_webhook_payload


class TestAccessToken:
    def test_round_trip_keeps_identity(self):
        token = create_access_token({"user_id": OWNER_ID, "email": "owner@example.com"})

        payload = verify_access_token(token)

        assert payload["user_id"] == OWNER_ID
        assert payload["email"] == "owner@example.com"

    def test_token_without_user_is_rejected(self):
        token = create_access_token({"email": "owner@example.com"})

        assert verify_access_token(token) is None

    def test_garbage_token_is_rejected(self):
        assert verify_access_token("not-a-jwt") is None


class TestWebhookSignature:
    payload = b'{"type": "checkout.session.completed"}'

    def test_valid_signature(self):
        header = sign_webhook_payload(self.payload)

        assert verify_webhook_signature(self.payload, header, WEBHOOK_SECRET) is True

    def test_any_of_several_signatures_may_match(self):
        header = sign_webhook_payload(self.payload) + ",v1=deadbeef"

        assert verify_webhook_signature(self.payload, header, WEBHOOK_SECRET) is True

    def test_tampered_payload_is_rejected(self):
        header = sign_webhook_payload(self.payload)

        assert verify_webhook_signature(b'{"type": "other"}', header, WEBHOOK_SECRET) is False

    def test_wrong_secret_is_rejected(self):
        header = sign_webhook_payload(self.payload, secret="whsec_other")

        assert verify_webhook_signature(self.payload, header, WEBHOOK_SECRET) is False

    def test_stale_timestamp_is_rejected(self):
        header = sign_webhook_payload(self.payload, timestamp=int(time.time()) - 3600)

        assert verify_webhook_signature(self.payload, header, WEBHOOK_SECRET) is False

    def test_missing_header_or_secret(self):
        header = sign_webhook_payload(self.payload)

        assert verify_webhook_signature(self.payload, None, WEBHOOK_SECRET) is False
        assert verify_webhook_signature(self.payload, header, "") is False

    def test_malformed_header(self):
        assert verify_webhook_signature(self.payload, "garbage", WEBHOOK_SECRET) is False
        assert verify_webhook_signature(self.payload, "t=abc,v1=00", WEBHOOK_SECRET) is False
