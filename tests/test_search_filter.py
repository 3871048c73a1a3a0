"""
Tests for building listing search filters
"""

import pytest

from app.models.search import SearchCriteria
from app.services.search_filter import build_filter


def criteria(**params) -> SearchCriteria:
    """Build criteria from query-string style names"""
    return SearchCriteria.model_validate(params)


class TestBuildFilter:
    """Test class for build_filter"""

    def test_base_filter_has_category_and_free_text(self):
        query = build_filter(criteria(**{"for": "rent", "city": "pune"}))

        assert query == {
            "listing_for": "rent",
            "$or": [
                {"city": {"$regex": "pune", "$options": "i"}},
                {"description": {"$regex": "pune", "$options": "i"}},
            ],
        }

    def test_omitted_optional_fields_add_no_clause(self):
        query = build_filter(criteria(**{"for": "sale"}))

        assert query == {"listing_for": "sale"}

    def test_blank_values_are_treated_as_absent(self):
        query = build_filter(criteria(**{"for": "sale", "city": "  ", "type": "", "maxPrice": ""}))

        assert query == {"listing_for": "sale"}

    def test_max_price_without_min_has_open_lower_bound(self):
        query = build_filter(criteria(**{"for": "rent", "city": "pune", "maxPrice": "20000"}))

        assert query["price"] == {"$lte": 20000.0}

    def test_min_price_without_max_is_applied(self):
        query = build_filter(criteria(**{"for": "rent", "minPrice": "10000"}))

        assert query["price"] == {"$gte": 10000.0}

    def test_price_range_is_inclusive(self):
        query = build_filter(criteria(**{"for": "rent", "minPrice": "10000", "maxPrice": "20000"}))

        assert query["price"] == {"$gte": 10000.0, "$lte": 20000.0}

    def test_area_range_bounds_are_independent(self):
        only_min = build_filter(criteria(**{"for": "sale", "minArea": "800"}))
        only_max = build_filter(criteria(**{"for": "sale", "maxArea": "1200.5"}))

        assert only_min["built_up_area"] == {"$gte": 800.0}
        assert only_max["built_up_area"] == {"$lte": 1200.5}

    def test_exact_refinements(self):
        query = build_filter(
            criteria(**{"for": "sale", "type": "villa", "furnishing": "furnished", "noOfBedrooms": "3"})
        )

        assert query["property_type"] == "villa"
        assert query["furnishing"] == "furnished"
        assert query["no_of_bedrooms"] == 3

    def test_each_refinement_is_independent(self):
        query = build_filter(criteria(**{"for": "sale", "furnishing": "unfurnished"}))

        assert "property_type" not in query
        assert "no_of_bedrooms" not in query
        assert "price" not in query
        assert "built_up_area" not in query

    @pytest.mark.parametrize("value", ["two", "2.5", "nan"])
    def test_non_numeric_bedrooms_match_nothing(self, value):
        query = build_filter(criteria(**{"for": "rent", "noOfBedrooms": value}))

        assert query["no_of_bedrooms"] == {"$in": []}

    def test_non_numeric_price_bound_matches_nothing(self):
        query = build_filter(criteria(**{"for": "rent", "minPrice": "cheap", "maxPrice": "20000"}))

        assert query["price"] == {"$in": []}

    def test_free_text_is_matched_literally(self):
        query = build_filter(criteria(**{"for": "rent", "city": "a.*b"}))

        assert query["$or"][0]["city"]["$regex"] == r"a\.\*b"

    def test_optional_clauses_only_narrow(self):
        """Every clause of the base filter appears unchanged in a refined filter"""
        base = build_filter(criteria(**{"for": "rent", "city": "pune"}))
        refined = build_filter(
            criteria(**{"for": "rent", "city": "pune", "type": "flat", "minPrice": "1", "maxArea": "900"})
        )

        for key, value in base.items():
            assert refined[key] == value
