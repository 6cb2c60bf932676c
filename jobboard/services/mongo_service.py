"""
MongoDB Service - CRUD operations for the job board collections.

Collections in this database:
1. users      - Admins, job providers and seekers
2. jobs       - Job postings, each owned by one user (providerId)
3. applicants - Join records: one seeker's application to one job

Services return raw documents (ObjectIds intact) so the integrity service
can feed ids straight back into queries. Use serialize_* before handing
documents to the API layer.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.collection import Collection

from jobboard.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPERS: ObjectId parsing and JSON serialization
# ============================================================

def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a path/body id. Returns None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _stringify(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_stringify(v) for v in value]
    return value


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict (`_id` -> `id`)."""
    if doc is None:
        return None
    out = {key: _stringify(value) for key, value in doc.items() if key != "_id"}
    if "_id" in doc:
        out["id"] = str(doc["_id"])
    return out


def serialize_user(doc: dict) -> Optional[dict]:
    """Serialize a user document without its password hash."""
    out = serialize_doc(doc)
    if out is not None:
        out.pop("password", None)
    return out


# ============================================================
# BASE SERVICE
# ============================================================

class _CollectionService:
    collection_name: str = ""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS[self.collection_name])

    def find_by_id(self, doc_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": doc_id})

    def find_one(self, filter: Dict[str, Any]) -> Optional[dict]:
        return self.collection.find_one(filter)

    def find(self, filter: Optional[Dict[str, Any]] = None, limit: int = 0) -> List[dict]:
        cursor = self.collection.find(filter or {})
        if limit:
            cursor = cursor.sort("createdAt", DESCENDING).limit(limit)
        return list(cursor)

    def insert(self, doc: dict) -> ObjectId:
        now = datetime.utcnow()
        doc.setdefault("createdAt", now)
        doc.setdefault("updatedAt", now)
        result = self.collection.insert_one(doc)
        return result.inserted_id

    def update_by_id(self, doc_id: ObjectId, fields: Dict[str, Any]) -> bool:
        """Set fields on a document. Returns False when no document matched."""
        result = self.collection.update_one(
            {"_id": doc_id},
            {"$set": {**fields, "updatedAt": datetime.utcnow()}}
        )
        return result.matched_count > 0

    def delete_by_id(self, doc_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": doc_id})
        return result.deleted_count > 0

    def delete_many(self, filter: Dict[str, Any]) -> int:
        result = self.collection.delete_many(filter)
        return result.deleted_count

    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        return self.collection.count_documents(filter or {})


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService(_CollectionService):
    """
    Handles user storage.
    `jobsPosted` keeps the ids of jobs owned by a provider (or admin).
    """

    collection_name = "users"

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def create(self, name: str, email: str, password_hash: str, role: str) -> ObjectId:
        return self.insert({
            "name": name,
            "email": email,
            "password": password_hash,
            "role": role,
            "jobsPosted": [],
        })

    def push_job(self, user_id: ObjectId, job_id: ObjectId) -> bool:
        result = self.collection.update_one(
            {"_id": user_id}, {"$push": {"jobsPosted": job_id}}
        )
        return result.matched_count > 0

    def pull_job(self, user_id: ObjectId, job_id: ObjectId) -> bool:
        result = self.collection.update_one(
            {"_id": user_id}, {"$pull": {"jobsPosted": job_id}}
        )
        return result.modified_count > 0


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService(_CollectionService):
    """Handles job posting storage."""

    collection_name = "jobs"

    def get_owned(self, job_id: ObjectId, provider_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": job_id, "providerId": provider_id})

    def update_owned(self, job_id: ObjectId, provider_id: ObjectId, fields: Dict[str, Any]) -> bool:
        result = self.collection.update_one(
            {"_id": job_id, "providerId": provider_id},
            {"$set": {**fields, "updatedAt": datetime.utcnow()}}
        )
        return result.matched_count > 0


# ============================================================
# APPLICANTS COLLECTION
# ============================================================

class ApplicantService(_CollectionService):
    """
    Handles applicant (job application) storage.
    Each applicant owns exactly one resume file on disk (`resume`).
    """

    collection_name = "applicants"

    def get_for_pair(self, user_id: ObjectId, job_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"userId": user_id, "jobId": job_id})

    def mark_shortlisted(self, applicant_id: ObjectId, status: str) -> bool:
        """
        Move an applicant to the shortlisted status.
        Returns False when it is already shortlisted (or gone).
        """
        result = self.collection.update_one(
            {"_id": applicant_id, "status": {"$ne": status}},
            {"$set": {"status": status}}
        )
        return result.modified_count > 0

    def find_by_status(self, provider_id: ObjectId, job_id: ObjectId, pattern: str) -> List[dict]:
        """Applicants of a provider's job whose status matches `pattern` (case-insensitive)."""
        return list(self.collection.find({
            "providerId": provider_id,
            "jobId": job_id,
            "status": {"$regex": pattern, "$options": "i"},
        }))
