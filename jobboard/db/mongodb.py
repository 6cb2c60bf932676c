"""
MongoDB Connection Utility

MongoDB stores the three job-board collections:
- users: admins, job providers and seekers (with jobsPosted references)
- jobs: job postings owned by a provider
- applicants: one seeker's application to one job, with the resume path

Cross-collection consistency is handled by the integrity service; the
unique (userId, jobId) index below is what makes duplicate applications
impossible even under concurrent requests.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from jobboard.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the job board database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        get_mongo_db().command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
    "applicants": "applicants",
}


def init_mongo_indexes():
    """
    Create indexes for lookups and uniqueness constraints.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["users"]].create_index([("createdAt", DESCENDING)])

    db[COLLECTIONS["jobs"]].create_index("providerId")
    db[COLLECTIONS["jobs"]].create_index([("createdAt", DESCENDING)])

    # At most one application per (seeker, job)
    db[COLLECTIONS["applicants"]].create_index([
        ("userId", ASCENDING),
        ("jobId", ASCENDING)
    ], unique=True)
    db[COLLECTIONS["applicants"]].create_index("jobId")
    db[COLLECTIONS["applicants"]].create_index("providerId")

    logger.info("MongoDB indexes created successfully")
