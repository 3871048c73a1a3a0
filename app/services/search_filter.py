"""
Search filter builder for property listings.

Turns a sparse set of query-string criteria into a single MongoDB filter
document. Optional criteria that are absent never constrain the result;
numeric criteria that cannot be parsed produce a clause that matches nothing
instead of raising.
"""

import logging
import math
import re
from typing import Any, Dict, Optional

from app.models.search import SearchCriteria

logger = logging.getLogger(__name__)


def _never_match() -> Dict[str, Any]:
    """Clause that matches no document"""
    return {"$in": []}


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _to_number(value: str) -> Optional[float]:
    """Coerce query text to a finite number, None if it is not one"""
    try:
        number = float(value.strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _to_int(value: str) -> Optional[int]:
    number = _to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _range_clause(field: str, minimum: Optional[str], maximum: Optional[str]) -> Optional[Dict[str, Any]]:
    """Inclusive range with independently optional bounds"""
    has_min, has_max = _present(minimum), _present(maximum)
    if not has_min and not has_max:
        return None

    clause: Dict[str, Any] = {}
    if has_min:
        low = _to_number(minimum)
        if low is None:
            logger.info("Unparseable %s minimum %r, clause matches nothing", field, minimum)
            return _never_match()
        clause["$gte"] = low
    if has_max:
        high = _to_number(maximum)
        if high is None:
            logger.info("Unparseable %s maximum %r, clause matches nothing", field, maximum)
            return _never_match()
        clause["$lte"] = high
    return clause


def build_filter(criteria: SearchCriteria) -> Dict[str, Any]:
    """Build the MongoDB filter for a listing search"""
    query: Dict[str, Any] = {}

    if _present(criteria.listing_for):
        query["listing_for"] = criteria.listing_for.strip()

    # One free-text term matches either city or description, case-insensitively
    if _present(criteria.city):
        pattern = re.escape(criteria.city.strip())
        query["$or"] = [
            {"city": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]

    if _present(criteria.property_type):
        query["property_type"] = criteria.property_type.strip()

    if _present(criteria.furnishing):
        query["furnishing"] = criteria.furnishing.strip()

    if _present(criteria.no_of_bedrooms):
        bedrooms = _to_int(criteria.no_of_bedrooms)
        query["no_of_bedrooms"] = _never_match() if bedrooms is None else bedrooms

    price = _range_clause("price", criteria.min_price, criteria.max_price)
    if price is not None:
        query["price"] = price

    area = _range_clause("built_up_area", criteria.min_area, criteria.max_area)
    if area is not None:
        query["built_up_area"] = area

    logger.debug("Built listing filter: %s", query)
    return query
