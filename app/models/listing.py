from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ListingFor(str, Enum):
    """Listing category"""
    SALE = "sale"
    RENT = "rent"


class ListingBase(BaseModel):
    """Fields a poster controls. JSON uses the public camelCase names, storage uses field names."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, extra="ignore")

    rera_number: str = Field(..., alias="reraNumber", min_length=1, description="RERA registration number")
    listing_for: ListingFor = Field(..., alias="for")
    property_type: str = Field(..., alias="type")
    city: str = Field(..., min_length=1)
    description: str = ""
    furnishing: Optional[str] = None
    no_of_bedrooms: int = Field(0, ge=0, alias="noOfBedrooms")
    price: float = Field(..., ge=0)
    built_up_area: float = Field(..., ge=0, alias="builtUpArea")


class ListingCreate(ListingBase):
    """Request body for creating a listing"""


class ListingUpdate(ListingBase):
    """Request body for replacing a listing's editable fields"""


class Listing(ListingBase):
    """Stored property listing"""

    id: Optional[str] = None
    posted_by: str = Field(..., alias="postedBy")

    # Premium state
    premium: bool = False
    premium_plan: Optional[str] = Field(None, alias="premiumPlan")
    premium_valid_until: Optional[datetime] = Field(None, alias="premiumValidUntil")

    interested_users: List[str] = Field(default_factory=list, alias="interestedUsers")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="updatedAt")

    def is_premium_active(self, now: Optional[datetime] = None) -> bool:
        """A listing is premium while the flag is set and the validity window has not elapsed"""
        if not self.premium:
            return False
        if self.premium_valid_until is None:
            return True

        valid_until = self.premium_valid_until
        # Mongo hands back naive UTC datetimes
        if valid_until.tzinfo is None:
            valid_until = valid_until.replace(tzinfo=timezone.utc)
        return valid_until > (now or datetime.now(timezone.utc))

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "Listing":
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return cls.model_validate(doc)

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})
