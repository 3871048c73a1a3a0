"""
Service for the buyer interest log
"""

import logging
from typing import List

from app.db.mongodb import mongodb
from app.models.interest import InterestQuery

logger = logging.getLogger(__name__)


class InterestService:
    """Service for recording and reading buyer interest queries"""

    async def add_query(self, buyer_id: str, listing_id: str) -> str:
        """Append an interest query record"""
        try:
            db = mongodb.get_database()
            query = InterestQuery(buyer_id=buyer_id, listing_id=listing_id)

            result = await db.property_queries.insert_one(query.model_dump(exclude={"id"}))
            logger.info("Recorded interest of user %s in listing %s", buyer_id, listing_id)
            return str(result.inserted_id)

        except Exception as e:
            logger.error("Error recording interest of user %s in listing %s: %s", buyer_id, listing_id, e)
            raise

    async def get_queries_for_listing(self, listing_id: str) -> List[InterestQuery]:
        """Get all interest queries for a listing, newest first"""
        try:
            db = mongodb.get_database()
            queries = []

            async for doc in db.property_queries.find({"listing_id": listing_id}).sort("created_at", -1):
                queries.append(InterestQuery.from_mongo(doc))

            return queries
        except Exception as e:
            logger.error("Error getting interest queries for listing %s: %s", listing_id, e)
            raise

    async def get_queried_listing_ids(self, buyer_id: str) -> List[str]:
        """Get ids of listings a buyer has queried, most recent first, without repeats"""
        try:
            db = mongodb.get_database()
            listing_ids: List[str] = []

            async for doc in db.property_queries.find({"buyer_id": buyer_id}).sort("created_at", -1):
                if doc["listing_id"] not in listing_ids:
                    listing_ids.append(doc["listing_id"])

            return listing_ids
        except Exception as e:
            logger.error("Error getting queried listings for user %s: %s", buyer_id, e)
            raise

    async def delete_queries_for_listing(self, listing_id: str) -> int:
        """Delete all interest queries for a listing"""
        try:
            db = mongodb.get_database()

            result = await db.property_queries.delete_many({"listing_id": listing_id})
            logger.info("Deleted %s interest queries for listing %s", result.deleted_count, listing_id)
            return result.deleted_count
        except Exception as e:
            logger.error("Error deleting interest queries for listing %s: %s", listing_id, e)
            raise
