"""
Model for tracking buyers who expressed interest in a listing
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class InterestQuery(BaseModel):
    """Append-only record that a buyer contacted a listing owner"""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    buyer_id: str = Field(..., alias="buyerId")
    listing_id: str = Field(..., alias="listingId")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "InterestQuery":
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return cls.model_validate(doc)
