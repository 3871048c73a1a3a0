import logging

from app.db.mongodb import mongodb

logger = logging.getLogger(__name__)


async def init_database():
    """Initialize database with collections and indexes"""
    try:
        db = mongodb.get_database()

        # Unique RERA index is the authoritative duplicate guard
        await db.properties.create_index("rera_number", unique=True)
        await db.properties.create_index("posted_by")
        await db.properties.create_index("listing_for")
        await db.properties.create_index("city")
        await db.properties.create_index("price")
        await db.properties.create_index([("premium", -1), ("created_at", -1)])

        # Interest query log
        await db.property_queries.create_index("listing_id")
        await db.property_queries.create_index([("buyer_id", 1), ("created_at", -1)])

        logger.info("Database indexes created successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise
