"""
Read-only access to user accounts
"""

import logging
from typing import Optional

from app.db.mongodb import mongodb
from app.models.user import User
from app.services.listing_service import to_object_id

logger = logging.getLogger(__name__)


class UserService:
    """Service for looking up user profiles"""

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID"""
        try:
            db = mongodb.get_database()

            # Accounts created outside this service may use string ids
            object_id = to_object_id(user_id)
            query = {"_id": object_id} if object_id is not None else {"_id": user_id}

            doc = await db.users.find_one(query)
            if not doc:
                logger.warning("User %s not found", user_id)
                return None
            return User.from_mongo(doc)

        except Exception as e:
            logger.error("Error getting user %s: %s", user_id, e)
            raise
