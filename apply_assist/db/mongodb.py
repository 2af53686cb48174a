"""
MongoDB Connection Utility

MongoDB stores:
- Scraped Naukri jobs (`jobs` collection), keyed by the scraper's
  column names ("Job Title", "Skills", "Application Type", ...)

The service only reads jobs; the scraper owns writes.
"""
from typing import Optional

from pymongo import MongoClient, ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from apply_assist.core.config import get_settings
from apply_assist.core.logging_config import get_logger

logger = get_logger(__name__)
settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: Optional[MongoClient] = None
_db: Optional[Database] = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "jobs": settings.jobs_collection,
}


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the naukri_apply_assist database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection."""
    db = get_mongo_db()
    return db[name]


def get_jobs_collection() -> Collection:
    """FastAPI dependency for the scraped jobs collection."""
    return get_collection(COLLECTIONS["jobs"])


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


def init_mongo_indexes():
    """
    Create indexes used by job matching.
    Call this once during app startup.
    """
    jobs = get_jobs_collection()
    jobs.create_index([("Application Type", ASCENDING)])
    logger.info("MongoDB indexes created successfully")


def close_mongo_client():
    """Close the client on shutdown."""
    global _client, _db
    if _client is not None:
        _client.close()
        logger.info("MongoDB connection closed")
    _client = None
    _db = None
