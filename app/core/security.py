import hashlib
import hmac
import logging
import time
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
WEBHOOK_TOLERANCE_SECONDS = 300


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str | None = payload.get("user_id")
        if user_id is None:
            return None
        return payload
    except JWTError:
        return None


def verify_webhook_signature(
    payload: bytes,
    signature_header: str | None,
    secret: str,
    tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
    now: float | None = None,
) -> bool:
    """Check a provider webhook signature header of the form ``t=<ts>,v1=<hex>[,v1=<hex>]``.

    The signed content is ``"{t}.{payload}"`` hashed with HMAC-SHA256 under the
    webhook secret. Stale timestamps are rejected to limit replay.
    """
    if not signature_header or not secret:
        logger.warning("Missing webhook signature or secret")
        return False

    timestamp = None
    signatures = []
    for part in signature_header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)

    if timestamp is None or not signatures:
        logger.warning("Malformed webhook signature header")
        return False

    try:
        signed_at = int(timestamp)
    except ValueError:
        logger.warning("Invalid webhook timestamp: %s", timestamp)
        return False

    current = time.time() if now is None else now
    if abs(current - signed_at) > tolerance:
        logger.warning("Webhook timestamp outside tolerance: %s", timestamp)
        return False

    signed_payload = f"{timestamp}.".encode() + payload
    expected = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()

    for signature in signatures:
        if hmac.compare_digest(expected, signature):
            return True

    logger.warning("Invalid webhook signature")
    return False
