from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchCriteria(BaseModel):
    """Raw search parameters as received in the query string (all text)"""

    model_config = ConfigDict(populate_by_name=True)

    listing_for: Optional[str] = Field(None, alias="for")
    city: Optional[str] = Field(None, description="Free-text term matched against city or description")
    property_type: Optional[str] = Field(None, alias="type")
    furnishing: Optional[str] = None
    no_of_bedrooms: Optional[str] = Field(None, alias="noOfBedrooms")
    min_price: Optional[str] = Field(None, alias="minPrice")
    max_price: Optional[str] = Field(None, alias="maxPrice")
    min_area: Optional[str] = Field(None, alias="minArea")
    max_area: Optional[str] = Field(None, alias="maxArea")
