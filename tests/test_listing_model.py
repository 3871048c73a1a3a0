"""
Unit tests for Listing models and the plan catalog
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.core.plans import PLANS, PlanCatalog
from app.exceptions import BadRequestError, UnknownPlanError
from app.models.listing import Listing, ListingCreate
from app.models.plan import Plan

from tests.test_utils import LISTING_ID, OWNER_ID


class TestListingModel:
    """Test class for Listing"""

    def test_create_from_client_payload(self, listing_payload):
        listing = ListingCreate.model_validate(listing_payload)

        assert listing.rera_number == "P52100012345"
        assert listing.listing_for == "rent"
        assert listing.property_type == "apartment"
        assert listing.no_of_bedrooms == 2
        assert listing.built_up_area == 950.0

    def test_server_owned_fields_are_ignored_in_payload(self, listing_payload):
        listing_payload.update({"postedBy": "someone-else", "premium": True})

        listing = ListingCreate.model_validate(listing_payload)

        assert "posted_by" not in listing.model_dump()
        assert "premium" not in listing.model_dump()

    def test_rejects_unknown_category(self, listing_payload):
        listing_payload["for"] = "lease"

        with pytest.raises(ValidationError):
            ListingCreate.model_validate(listing_payload)

    def test_rejects_negative_bedrooms(self, listing_payload):
        listing_payload["noOfBedrooms"] = -1

        with pytest.raises(ValidationError):
            ListingCreate.model_validate(listing_payload)

    def test_from_mongo_maps_id(self, listing_doc):
        listing = Listing.from_mongo(listing_doc)

        assert listing.id == LISTING_ID
        assert listing.posted_by == OWNER_ID
        assert listing.premium is False

    def test_to_mongo_uses_field_names(self, listing_doc):
        stored = Listing.from_mongo(listing_doc).to_mongo()

        assert "id" not in stored
        assert stored["rera_number"] == "P52100012345"
        assert stored["listing_for"] == "rent"

    def test_json_uses_public_names(self, listing_doc):
        data = Listing.from_mongo(listing_doc).model_dump(by_alias=True)

        assert data["postedBy"] == OWNER_ID
        assert data["reraNumber"] == "P52100012345"
        assert data["for"] == "rent"
        assert data["interestedUsers"] == []

    def test_new_listing_is_not_premium(self, listing_doc):
        assert Listing.from_mongo(listing_doc).is_premium_active() is False

    def test_premium_within_window(self, listing_doc, now):
        listing_doc.update({"premium": True, "premium_valid_until": datetime(2026, 3, 1)})

        assert Listing.from_mongo(listing_doc).is_premium_active(now) is True

    def test_premium_expired(self, listing_doc, now):
        listing_doc.update({"premium": True, "premium_valid_until": now - timedelta(days=1)})

        assert Listing.from_mongo(listing_doc).is_premium_active(now) is False


class TestPlanCatalog:
    """Test class for the premium plan catalog"""

    def test_lookup_known_plan(self):
        plan = PLANS.get("basic")

        assert plan.name == "Basic"
        assert plan.price > 0
        assert plan.valid > 0

    @pytest.mark.parametrize("key", ["gold", "", None])
    def test_unknown_plan_fails(self, key):
        with pytest.raises(UnknownPlanError) as exc_info:
            PLANS.get(key)

        assert isinstance(exc_info.value, BadRequestError)

    def test_plans_are_immutable(self):
        plan = PLANS.get("basic")

        with pytest.raises(ValidationError):
            plan.price = 1

    def test_catalog_cannot_be_extended(self):
        catalog = PlanCatalog([Plan(key="one", name="One", price=100, valid=1)])

        with pytest.raises(TypeError):
            catalog._plans["two"] = Plan(key="two", name="Two", price=200, valid=2)

        assert len(catalog) == 1
        assert "one" in catalog
