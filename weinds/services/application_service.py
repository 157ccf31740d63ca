"""
Application Service - candidates applying to posts and moving through the pipeline.

Status order:
    Applied -> Shortlisted -> Skill Test -> Interview -> Final Interview -> Hired
Rejected can be reached from any non-terminal status.
Hired and Rejected are terminal.

A status that belongs to a stage the post's pipeline does not include
(Interview without an AI interview, Final Interview without a final
interview) can't be entered; the application jumps over it.
"""

import logging
from typing import Optional, List

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from weinds.core.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError
from weinds.db.mongodb import get_mongo_db, get_collection
from weinds.schemas.schemas import ApplicationStatus, PostStatus
from weinds.services import pipeline_service
from weinds.services.mongo_service import (
    CandidateProfileService, serialize_doc, serialize_docs, to_object_id, utcnow
)
from weinds.services.post_service import PostService

logger = logging.getLogger(__name__)

CANDIDATE_NAME_FALLBACK = "Unknown Candidate"
CANDIDATE_EMAIL_FALLBACK = "No email provided"

STATUS_ORDER = [
    ApplicationStatus.applied,
    ApplicationStatus.shortlisted,
    ApplicationStatus.skill_test,
    ApplicationStatus.interview,
    ApplicationStatus.final_interview,
    ApplicationStatus.hired,
]

TERMINAL_STATUSES = {ApplicationStatus.hired, ApplicationStatus.rejected}

# Statuses that only exist when the pipeline has the matching stage
OPTIONAL_STATUS_STAGE = {
    ApplicationStatus.interview: "ai_interview",
    ApplicationStatus.final_interview: "final_interview",
}


def allowed_transitions(current: str, pipeline: List[dict]) -> List[ApplicationStatus]:
    """Statuses an application in `current` may move to, given the post's pipeline."""
    current = ApplicationStatus(current)
    if current in TERMINAL_STATUSES:
        return []
    later = STATUS_ORDER[STATUS_ORDER.index(current) + 1:]
    allowed = [
        s for s in later
        if s not in OPTIONAL_STATUS_STAGE or pipeline_service.find_stage(pipeline, OPTIONAL_STATUS_STAGE[s])
    ]
    allowed.append(ApplicationStatus.rejected)
    return allowed


class ApplicationService:
    """
    Handles application documents.
    """

    def __init__(self, db: Database = None):
        if db is None:
            db = get_mongo_db()
        self.db = db
        self.collection: Collection = get_collection(db, "applications")
        self.posts = PostService(db)

    def apply(self, post_type, post_id: str, candidate: dict) -> dict:
        """
        Create an application for the candidate.

        Args:
            post_type: job or internship
            post_id: post ObjectId as string
            candidate: current user dict (user_id, email, full_name)
        """
        post = self.posts.get(post_type, post_id)
        if post.get("status") != PostStatus.active.value:
            raise InvalidStateError("This post is no longer accepting applications")
        if not candidate.get("user_id") or not post.get("employer_id"):
            raise InvalidStateError("Missing candidate or employer for application")

        if self.collection.find_one({"candidate_id": candidate["user_id"], "post_id": post["_id"]}):
            raise ConflictError("You have already applied to this post")

        profile = CandidateProfileService(self.db).get(candidate["user_id"]) or {}
        doc = {
            "post_id": post["_id"],
            "post_type": post["post_type"],
            "post_title": post["title"],
            "company_name": post["company_name"],
            "employer_id": post["employer_id"],
            "candidate_id": candidate["user_id"],
            "candidate_name": profile.get("full_name") or candidate.get("full_name") or CANDIDATE_NAME_FALLBACK,
            "candidate_email": profile.get("email") or candidate.get("email") or CANDIDATE_EMAIL_FALLBACK,
            "status": ApplicationStatus.applied.value,
            "applied_on": utcnow()
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("You have already applied to this post")
        self.posts.increment_applicants(post["post_type"], post["_id"])

        doc["_id"] = result.inserted_id
        logger.info("Candidate %s applied to %s %s", candidate["user_id"], post["post_type"], post["_id"])
        return serialize_doc(doc)

    def get(self, application_id: str) -> dict:
        oid = to_object_id(application_id)
        doc = self.collection.find_one({"_id": oid}) if oid else None
        if doc is None:
            raise NotFoundError("Application not found")
        return serialize_doc(doc)

    def find_for_candidate(self, candidate_id: str, post_id: str,
                           status: Optional[ApplicationStatus] = None) -> Optional[dict]:
        query = {"candidate_id": candidate_id, "post_id": post_id}
        if status is not None:
            query["status"] = status.value
        return serialize_doc(self.collection.find_one(query))

    def update_status(self, application_id: str, employer_id: str, new_status: ApplicationStatus) -> dict:
        application = self.get(application_id)
        if application["employer_id"] != employer_id:
            raise PermissionDeniedError(
                path=f"applications/{application_id}",
                operation="update",
                request_resource_data={"status": new_status.value}
            )

        post = self.posts.get(application["post_type"], application["post_id"])
        allowed = allowed_transitions(application["status"], post.get("pipeline", []))
        if new_status not in allowed:
            raise InvalidStateError(
                f"Cannot move application from '{application['status']}' to '{new_status.value}'"
            )

        self.collection.update_one(
            {"_id": to_object_id(application_id)},
            {"$set": {"status": new_status.value, "updated_at": utcnow()}}
        )
        logger.info("Application %s: %s -> %s", application_id, application["status"], new_status.value)
        return self.get(application_id)

    # --------------------------------------------------------
    # Listings
    # --------------------------------------------------------

    def list_by_candidate(self, candidate_id: str, status: Optional[ApplicationStatus] = None) -> List[dict]:
        query = {"candidate_id": candidate_id}
        if status is not None:
            query["status"] = status.value
        return serialize_docs(self.collection.find(query).sort("applied_on", DESCENDING))

    def list_by_employer(
        self,
        employer_id: str,
        post_id: Optional[str] = None,
        status: Optional[ApplicationStatus] = None
    ) -> List[dict]:
        query = {"employer_id": employer_id}
        if post_id:
            query["post_id"] = post_id
        if status is not None:
            query["status"] = status.value
        return serialize_docs(self.collection.find(query).sort("applied_on", DESCENDING))

    def list_shortlisted(self, employer_id: str) -> List[dict]:
        """Applications past the Applied stage that were not rejected."""
        query = {
            "employer_id": employer_id,
            "status": {"$nin": [ApplicationStatus.applied.value, ApplicationStatus.rejected.value]}
        }
        return serialize_docs(self.collection.find(query).sort("applied_on", DESCENDING))

    def hired_candidate_ids(self, candidate_ids: List[str]) -> set:
        return set(self.collection.distinct(
            "candidate_id",
            {"candidate_id": {"$in": candidate_ids}, "status": ApplicationStatus.hired.value}
        ))
