"""
Pytest configuration and fixtures for testing
"""

import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017/test_property_listings")

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from app.core.security import create_access_token

from tests.test_utils import BUYER_ID, LISTING_ID, OWNER_ID


@pytest.fixture
def cursor_factory():
    """Build a motor-like cursor that supports chaining and async iteration"""

    def make_cursor(docs):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.__aiter__.return_value = list(docs)
        return cursor

    return make_cursor


@pytest.fixture
def listing_doc():
    """Stored listing document as returned by MongoDB"""
    return {
        "_id": ObjectId(LISTING_ID),
        "posted_by": OWNER_ID,
        "rera_number": "P52100012345",
        "listing_for": "rent",
        "property_type": "apartment",
        "city": "Pune",
        "description": "2BHK near Koregaon Park",
        "furnishing": "semi-furnished",
        "no_of_bedrooms": 2,
        "price": 18000.0,
        "built_up_area": 950.0,
        "premium": False,
        "premium_plan": None,
        "premium_valid_until": None,
        "interested_users": [],
        "created_at": datetime(2026, 1, 10, 9, 30),
        "updated_at": datetime(2026, 1, 10, 9, 30),
    }


@pytest.fixture
def listing_payload():
    """Listing details as a client sends them"""
    return {
        "reraNumber": "P52100012345",
        "for": "rent",
        "type": "apartment",
        "city": "Pune",
        "description": "2BHK near Koregaon Park",
        "furnishing": "semi-furnished",
        "noOfBedrooms": 2,
        "price": 18000,
        "builtUpArea": 950,
    }


@pytest.fixture
def owner_headers():
    token = create_access_token({"user_id": OWNER_ID, "email": "owner@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def buyer_headers():
    token = create_access_token({"user_id": BUYER_ID, "email": "buyer@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def now():
    return datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)
