import logging

from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import settings

logger = logging.getLogger(__name__)


class MongoDB:
    client: AsyncIOMotorClient = None

    async def connect_to_mongo(self):
        """Create database connection"""
        self.client = AsyncIOMotorClient(settings.MONGODB_URL)
        logger.info("Connected to MongoDB")

    async def close_mongo_connection(self):
        """Close database connection"""
        if self.client:
            self.client.close()
        logger.info("Disconnected from MongoDB")

    def get_database(self):
        """Get database instance"""
        return self.client.get_database()


mongodb = MongoDB()
