"""
MongoDB Connection Utility

MongoDB stores every record of the platform:
- users and role profiles (candidates, employers, institutes)
- job and internship posts with their hiring pipeline
- applications
- generated skill tests, submissions and AI reports
- AI interview transcripts
- traditional skill-test uploads
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from weinds.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = get_settings()
        _client = MongoClient(settings.mongodb_uri, tz_aware=True)
    return _client


def get_mongo_db() -> Database:
    """
    Get the platform database.

    Also used as a FastAPI dependency, so tests can swap it with
    app.dependency_overrides.
    """
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(db: Database, name: str) -> Collection:
    return db[COLLECTIONS[name]]


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
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "candidates": "candidates",
    "employers": "employers",
    "institutes": "institutes",
    "jobs": "jobs",
    "internships": "internships",
    "applications": "applications",
    "skill_tests": "skill_tests",
    "skill_test_submissions": "skill_test_submissions",
    "skill_test_reports": "skill_test_reports",
    "traditional_tests": "traditional_tests",
    "ai_interviews": "ai_interviews",
    "verification_requests": "verification_requests"
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    if db is None:
        db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["candidates"]].create_index("institute_id")

    for posts in ("jobs", "internships"):
        db[COLLECTIONS[posts]].create_index("employer_id")
        db[COLLECTIONS[posts]].create_index([("status", ASCENDING), ("created_at", DESCENDING)])

    # One application per candidate per post
    db[COLLECTIONS["applications"]].create_index(
        [("candidate_id", ASCENDING), ("post_id", ASCENDING)],
        unique=True
    )
    db[COLLECTIONS["applications"]].create_index([("employer_id", ASCENDING), ("status", ASCENDING)])

    db[COLLECTIONS["skill_tests"]].create_index([("candidate_id", ASCENDING), ("post_id", ASCENDING)])
    db[COLLECTIONS["skill_test_reports"]].create_index([("post_id", ASCENDING), ("employer_id", ASCENDING)])
    db[COLLECTIONS["skill_test_reports"]].create_index("candidate_id")
    db[COLLECTIONS["traditional_tests"]].create_index("post_id")
    db[COLLECTIONS["ai_interviews"]].create_index([("candidate_id", ASCENDING), ("post_id", ASCENDING)])

    logger.info("MongoDB indexes created successfully")
