"""
MongoDB Service - account and profile documents.

Collections handled here:
1. users        - login accounts (email, password hash, role)
2. candidates   - candidate profiles, _id = user id
3. employers    - employer (company) profiles, _id = user id
4. institutes   - TPO institute profiles, _id = user id
5. verification_requests - employer verification submissions

Profiles are saved with merge semantics: only the provided fields are
$set, the rest of the document is left alone (upsert on first save).
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, List

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from weinds.core.errors import ConflictError
from weinds.db.mongodb import get_mongo_db, get_collection

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse an id from a URL; None when it is not a valid ObjectId."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict (adds 'id')."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
        doc["id"] = doc["_id"]
    return doc


def serialize_docs(docs) -> List[dict]:
    return [serialize_doc(doc) for doc in docs]


# Items counted by profile completeness
COMPLETENESS_FIELDS = ["full_name", "headline", "location", "experience", "education", "achievements"]


def profile_completeness(profile: dict) -> int:
    """Percentage of filled profile items (six text fields plus skills)."""
    if not profile:
        return 0
    filled = sum(1 for field in COMPLETENESS_FIELDS if str(profile.get(field) or "").strip())
    if profile.get("skills"):
        filled += 1
    return round(filled / (len(COMPLETENESS_FIELDS) + 1) * 100)


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """Login accounts."""

    def __init__(self, db: Database = None):
        if db is None:
            db = get_mongo_db()
        self.collection: Collection = get_collection(db, "users")

    def create(self, email: str, password_hash: str, role: str, full_name: Optional[str] = None) -> dict:
        email = email.lower()
        if self.collection.find_one({"email": email}):
            raise ConflictError("Email already registered")
        doc = {
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "full_name": full_name,
            "is_active": True,
            "created_at": utcnow()
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Email already registered")
        doc["_id"] = result.inserted_id
        logger.info("Registered %s account %s", role, result.inserted_id)
        return serialize_doc(doc)

    def get_by_email(self, email: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"email": email.lower()}))

    def get_by_id(self, user_id: str) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))


# ============================================================
# PROFILE COLLECTIONS
# ============================================================

class ProfileService:
    """
    Base for profile documents keyed by user id.
    """
    collection_name: str = None

    def __init__(self, db: Database = None):
        if db is None:
            db = get_mongo_db()
        self.db = db
        self.collection: Collection = get_collection(db, self.collection_name)

    def get(self, user_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"_id": user_id}))

    def save(self, user_id: str, fields: dict) -> dict:
        """Merge the given fields into the profile (creating it if needed)."""
        fields = {k: v for k, v in fields.items() if v is not None}
        fields["updated_at"] = utcnow()
        self.collection.update_one(
            {"_id": user_id},
            {"$set": fields, "$setOnInsert": {"created_at": utcnow()}},
            upsert=True
        )
        return self.get(user_id)


class CandidateProfileService(ProfileService):
    collection_name = "candidates"

    def get_or_default(self, user: dict) -> dict:
        """
        Profile for the user, or an unsaved default seeded from the account
        (email and name given at registration).
        """
        profile = self.get(user["user_id"])
        if profile is None:
            profile = {"_id": user["user_id"], "skills": []}
        profile.setdefault("email", user.get("email") or "")
        if not profile.get("full_name") and user.get("full_name"):
            profile["full_name"] = user["full_name"]
        profile["candidate_id"] = profile["_id"]
        profile["completeness"] = profile_completeness(profile)
        return profile

    def list_by_institute(self, institute_id: str, search: Optional[str] = None) -> List[dict]:
        query = {"institute_id": institute_id}
        if search:
            query["full_name"] = {"$regex": re.escape(search), "$options": "i"}
        return serialize_docs(self.collection.find(query).sort("full_name", 1))


class EmployerProfileService(ProfileService):
    collection_name = "employers"

    def company_name(self, employer_id: str) -> Optional[str]:
        profile = self.get(employer_id)
        if profile:
            return profile.get("company_name") or None
        return None

    def list_companies(self) -> List[dict]:
        return serialize_docs(
            self.collection.find({"company_name": {"$nin": [None, ""]}}).sort("company_name", 1)
        )

    def request_verification(self, employer_id: str, registration_number: str,
                             document_url: Optional[str] = None) -> dict:
        get_collection(self.db, "verification_requests").insert_one({
            "employer_id": employer_id,
            "registration_number": registration_number,
            "document_url": document_url,
            "status": "Pending",
            "submitted_at": utcnow()
        })
        logger.info("Verification requested by employer %s", employer_id)
        return self.save(employer_id, {"verification_status": "Pending"})


class InstituteProfileService(ProfileService):
    collection_name = "institutes"
