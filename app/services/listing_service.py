"""
Listing persistence service.

This module provides create, read, replace and delete operations for
property listings plus the premium activation update.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.db.mongodb import mongodb
from app.exceptions import BadRequestError, PaymentSessionUsedError
from app.models.listing import Listing, ListingCreate, ListingUpdate
from app.models.plan import Plan

logger = logging.getLogger(__name__)

DUPLICATE_RERA_MESSAGE = "Property with RERA already exists!"


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a listing id, None if it is not a valid ObjectId"""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class ListingService:
    """Service for managing property listings"""

    async def get_by_rera(self, rera_number: str) -> Optional[Listing]:
        """Get a listing by its RERA registration number"""
        try:
            db = mongodb.get_database()
            doc = await db.properties.find_one({"rera_number": rera_number})
            return Listing.from_mongo(doc) if doc else None
        except Exception as e:
            logger.error("Error getting listing by RERA %s: %s", rera_number, e)
            raise

    async def create_listing(self, owner_id: str, listing_data: ListingCreate) -> Listing:
        """Persist a new listing owned by owner_id"""
        listing = Listing(posted_by=owner_id, **listing_data.model_dump())
        try:
            db = mongodb.get_database()
            result = await db.properties.insert_one(listing.to_mongo())
        except DuplicateKeyError as e:
            # Concurrent submissions can pass the pre-check; the unique index decides
            logger.warning("Duplicate RERA %s rejected by index: %s", listing.rera_number, e)
            raise BadRequestError(DUPLICATE_RERA_MESSAGE) from e
        except Exception as e:
            logger.error("Error creating listing: %s", e)
            raise

        listing.id = str(result.inserted_id)
        logger.info("Created listing %s for user %s", listing.id, owner_id)
        return listing

    async def search_listings(self, query: Dict[str, Any], skip: int = 0, limit: int = 100) -> List[Listing]:
        """Find listings matching a filter, premium listings first then newest"""
        try:
            db = mongodb.get_database()
            listings = []

            cursor = (
                db.properties.find(query)
                .sort([("premium", -1), ("created_at", -1)])
                .skip(skip)
                .limit(limit)
            )
            async for doc in cursor:
                listings.append(Listing.from_mongo(doc))

            return listings
        except Exception as e:
            logger.error("Error searching listings with %s: %s", query, e)
            raise

    async def get_listing_by_id(self, listing_id: str) -> Optional[Listing]:
        """Get a specific listing by ID"""
        object_id = to_object_id(listing_id)
        if object_id is None:
            logger.info("Invalid listing id: %s", listing_id)
            return None

        try:
            db = mongodb.get_database()
            doc = await db.properties.find_one({"_id": object_id})
            return Listing.from_mongo(doc) if doc else None
        except Exception as e:
            logger.error("Error getting listing %s: %s", listing_id, e)
            raise

    async def get_listings_by_owner(self, owner_id: str) -> List[Listing]:
        """Get all listings posted by a user"""
        try:
            db = mongodb.get_database()
            listings = []
            async for doc in db.properties.find({"posted_by": owner_id}).sort("created_at", -1):
                listings.append(Listing.from_mongo(doc))
            return listings
        except Exception as e:
            logger.error("Error getting listings for user %s: %s", owner_id, e)
            raise

    async def get_listings_by_ids(self, listing_ids: Iterable[str]) -> List[Listing]:
        """Get listings for a set of ids, keeping the given order"""
        ordered_ids = [oid for oid in (to_object_id(lid) for lid in listing_ids) if oid is not None]
        if not ordered_ids:
            return []

        try:
            db = mongodb.get_database()
            by_id = {}
            async for doc in db.properties.find({"_id": {"$in": ordered_ids}}):
                by_id[doc["_id"]] = Listing.from_mongo(doc)
            return [by_id[oid] for oid in ordered_ids if oid in by_id]
        except Exception as e:
            logger.error("Error getting listings by ids: %s", e)
            raise

    async def replace_listing(self, stored: Listing, listing_data: ListingUpdate) -> Optional[Listing]:
        """Replace the poster-editable fields of a stored listing"""
        set_data = listing_data.model_dump()
        set_data["updated_at"] = datetime.now(timezone.utc)

        try:
            db = mongodb.get_database()
            doc = await db.properties.find_one_and_update(
                {"_id": ObjectId(stored.id)},
                {"$set": set_data},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            logger.warning("Update of %s collides on RERA %s", stored.id, listing_data.rera_number)
            raise BadRequestError(DUPLICATE_RERA_MESSAGE) from e
        except Exception as e:
            logger.error("Error updating listing %s: %s", stored.id, e)
            raise

        if doc is None:
            # Deleted between the ownership check and the update
            return None
        logger.info("Updated listing %s", stored.id)
        return Listing.from_mongo(doc)

    async def delete_listing(self, listing_id: str) -> bool:
        """Delete a listing"""
        object_id = to_object_id(listing_id)
        if object_id is None:
            return False

        try:
            db = mongodb.get_database()
            result = await db.properties.delete_one({"_id": object_id})
            deleted = bool(result.deleted_count > 0)
            logger.info("Delete listing %s: %s", listing_id, deleted)
            return deleted
        except Exception as e:
            logger.error("Error deleting listing %s: %s", listing_id, e)
            raise

    async def add_interested_user(self, listing_id: str, user_id: str) -> bool:
        """Add a buyer to the listing's interested users (set semantics, insertion order kept)"""
        try:
            db = mongodb.get_database()
            result = await db.properties.update_one(
                {"_id": ObjectId(listing_id)},
                {"$addToSet": {"interested_users": user_id}},
            )
            return bool(result.matched_count > 0)
        except Exception as e:
            logger.error("Error adding interested user %s to %s: %s", user_id, listing_id, e)
            raise

    async def make_premium(
        self, listing_id: str, plan: Plan, session_id: str, now: Optional[datetime] = None
    ) -> Optional[Listing]:
        """
        Mark a listing premium for the plan's validity window.

        Each paid checkout session activates at most once: its id is recorded
        in ``premium_sessions`` by the same atomic update, and the filter skips
        listings that already hold it.
        """
        activated_at = now or datetime.now(timezone.utc)
        object_id = to_object_id(listing_id)
        if object_id is None:
            return None

        try:
            db = mongodb.get_database()
            doc = await db.properties.find_one_and_update(
                {"_id": object_id, "premium_sessions": {"$ne": session_id}},
                {
                    "$set": {
                        "premium": True,
                        "premium_plan": plan.key,
                        "premium_valid_until": activated_at + timedelta(days=plan.valid),
                        "updated_at": activated_at,
                    },
                    "$push": {"premium_sessions": session_id},
                },
                return_document=ReturnDocument.AFTER,
            )
            exists = doc is not None or await db.properties.count_documents({"_id": object_id}, limit=1) > 0
        except Exception as e:
            logger.error("Error activating premium for listing %s: %s", listing_id, e)
            raise

        if doc is None:
            if exists:
                logger.warning("Session %s already activated listing %s", session_id, listing_id)
                raise PaymentSessionUsedError(session_id)
            logger.warning("Listing %s not found for premium activation", listing_id)
            return None

        logger.info("Listing %s is premium on plan %s (session %s)", listing_id, plan.key, session_id)
        return Listing.from_mongo(doc)
