"""
Post Service - job and internship postings.

Jobs and internships live in separate collections ("jobs", "internships")
but share one document shape:

{
    "post_type": "job",
    "employer_id": "...",
    "company_name": "Acme",          # denormalized from the employer profile
    "title": "...", "responsibilities": "...", "skills": "Python, SQL", ...
    "pipeline": [{"stage": "application", "type": "invite"}, ...],
    "pipeline_cost": 347,
    "applicant_count": 0,
    "status": "Active",
    "created_at": datetime
}
"""

import logging
import re
from typing import Optional, List, Tuple

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from weinds.core.errors import NotFoundError, PermissionDeniedError
from weinds.db.mongodb import get_mongo_db, get_collection
from weinds.schemas.schemas import PostCreate, PostUpdate, PostType, PostStatus, PipelineStage
from weinds.services import pipeline_service
from weinds.services.mongo_service import (
    EmployerProfileService, serialize_doc, serialize_docs, to_object_id, utcnow
)

logger = logging.getLogger(__name__)

COMPANY_NAME_FALLBACK = "Company Name N/A"

POST_COLLECTIONS = {
    PostType.job.value: "jobs",
    PostType.internship.value: "internships",
}

# Records keyed by post_id that go away with the post
POST_DEPENDENT_COLLECTIONS = [
    "skill_tests", "skill_test_submissions", "skill_test_reports", "traditional_tests", "ai_interviews"
]

# Application status -> pipeline stage it sits in
STATUS_STAGE = {
    "Applied": "application",
    "Shortlisted": "shortlisting",
    "Skill Test": "skill_test",
    "Interview": "ai_interview",
    "Final Interview": "final_interview",
}


def post_collection_name(post_type) -> str:
    value = post_type.value if isinstance(post_type, PostType) else post_type
    if value not in POST_COLLECTIONS:
        raise NotFoundError(f"Unknown post type '{value}'")
    return POST_COLLECTIONS[value]


def job_description_text(post: dict) -> str:
    """Plain-text job description used as input to the AI flows."""
    return (
        f"Title: {post.get('title', '')}\n"
        f"Responsibilities: {post.get('responsibilities', '')}\n"
        f"Skills: {post.get('skills', '')}"
    )


class PostService:
    """
    Handles job and internship documents.
    """

    def __init__(self, db: Database = None):
        if db is None:
            db = get_mongo_db()
        self.db = db

    def collection(self, post_type) -> Collection:
        return get_collection(self.db, post_collection_name(post_type))

    # --------------------------------------------------------
    # Create / read
    # --------------------------------------------------------

    def create(self, employer_id: str, post: PostCreate) -> dict:
        stages = pipeline_service.to_stages(post.pipeline)
        company_name = EmployerProfileService(self.db).company_name(employer_id)
        if not company_name:
            logger.warning("Employer %s has no company name; using fallback", employer_id)
            company_name = COMPANY_NAME_FALLBACK

        doc = post.model_dump(mode="json", exclude={"pipeline"})
        doc.update({
            "employer_id": employer_id,
            "company_name": company_name,
            "pipeline": [s.model_dump() for s in stages],
            "pipeline_cost": pipeline_service.total_cost(post.pipeline),
            "applicant_count": 0,
            "status": PostStatus.active.value,
            "created_at": utcnow()
        })
        result = self.collection(post.post_type).insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Created %s %s for employer %s", post.post_type.value, result.inserted_id, employer_id)
        return serialize_doc(doc)

    def get(self, post_type, post_id: str) -> dict:
        oid = to_object_id(post_id)
        doc = self.collection(post_type).find_one({"_id": oid}) if oid else None
        if doc is None:
            raise NotFoundError("Post not found")
        return serialize_doc(doc)

    def find(self, post_id: str) -> dict:
        """Look a post up by id alone, trying both collections."""
        oid = to_object_id(post_id)
        if oid:
            for post_type in POST_COLLECTIONS:
                doc = self.collection(post_type).find_one({"_id": oid})
                if doc:
                    return serialize_doc(doc)
        raise NotFoundError("Post not found")

    def get_owned(self, post_type, post_id: str, employer_id: str, operation: str = "get") -> dict:
        post = self.get(post_type, post_id)
        if post["employer_id"] != employer_id:
            raise PermissionDeniedError(
                path=f"{post_collection_name(post_type)}/{post_id}",
                operation=operation
            )
        return post

    def list_active(
        self,
        post_type: Optional[PostType] = None,
        search: Optional[str] = None,
        location: Optional[str] = None,
        work_mode: Optional[str] = None,
        skill: Optional[str] = None,
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[dict], int]:
        """Active posts matching the filters, newest first, plus the total count."""
        query = {"status": PostStatus.active.value}
        if search:
            query["title"] = {"$regex": re.escape(search), "$options": "i"}
        if location:
            query["location"] = {"$regex": re.escape(location), "$options": "i"}
        if work_mode:
            query["work_mode"] = work_mode
        if skill:
            query["skills"] = {"$regex": re.escape(skill), "$options": "i"}

        types = [post_type] if post_type else list(POST_COLLECTIONS)
        posts = []
        for t in types:
            posts.extend(self.collection(t).find(query))
        posts.sort(key=lambda p: p["created_at"], reverse=True)

        offset = (page - 1) * page_size
        return serialize_docs(posts[offset:offset + page_size]), len(posts)

    def list_by_employer(self, employer_id: str) -> List[dict]:
        posts = []
        for t in POST_COLLECTIONS:
            posts.extend(self.collection(t).find({"employer_id": employer_id}))
        posts.sort(key=lambda p: p["created_at"], reverse=True)
        return serialize_docs(posts)

    def recent_active(self, post_type: Optional[PostType] = None, limit: int = 5) -> List[dict]:
        posts, _ = self.list_active(post_type=post_type, page=1, page_size=limit)
        return posts

    def count_active(self, post_type: PostType) -> int:
        return self.collection(post_type).count_documents({"status": PostStatus.active.value})

    def active_employer_ids(self) -> set:
        ids = set()
        for t in POST_COLLECTIONS:
            ids.update(self.collection(t).distinct("employer_id", {"status": PostStatus.active.value}))
        return ids

    # --------------------------------------------------------
    # Update / delete
    # --------------------------------------------------------

    def update(self, post_type, post_id: str, employer_id: str, changes: PostUpdate) -> dict:
        post = self.get_owned(post_type, post_id, employer_id, operation="update")

        fields = changes.model_dump(mode="json", exclude_unset=True, exclude={"pipeline"})
        fields = {k: v for k, v in fields.items() if v is not None}
        if changes.pipeline is not None:
            fields["pipeline"] = [s.model_dump() for s in pipeline_service.to_stages(changes.pipeline)]
            fields["pipeline_cost"] = pipeline_service.total_cost(changes.pipeline)

        if fields:
            fields["updated_at"] = utcnow()
            self.collection(post_type).update_one({"_id": to_object_id(post["_id"])}, {"$set": fields})
        return self.get(post_type, post_id)

    def delete(self, post_type, post_id: str, employer_id: str) -> int:
        """
        Delete the post and every record tied to it (applications, skill tests,
        submissions, reports, uploaded tests, interviews).
        Returns number of applications removed.
        """
        post = self.get_owned(post_type, post_id, employer_id, operation="delete")
        self.collection(post_type).delete_one({"_id": to_object_id(post["_id"])})
        removed = get_collection(self.db, "applications").delete_many({"post_id": post["_id"]}).deleted_count
        for name in POST_DEPENDENT_COLLECTIONS:
            get_collection(self.db, name).delete_many({"post_id": post["_id"]})
        logger.info("Deleted %s %s with %d applications", post_type, post_id, removed)
        return removed

    def increment_applicants(self, post_type, post_id: str) -> None:
        self.collection(post_type).update_one(
            {"_id": to_object_id(post_id)}, {"$inc": {"applicant_count": 1}}
        )

    # --------------------------------------------------------
    # Pipeline view
    # --------------------------------------------------------

    def pipeline_view(self, post_type, post_id: str, employer_id: str) -> dict:
        """Stages of the post with the applicants currently in each."""
        post = self.get_owned(post_type, post_id, employer_id)
        applications = get_collection(self.db, "applications").find(
            {"post_id": post["_id"]}
        ).sort("applied_on", DESCENDING)

        by_stage = {}
        for app in applications:
            stage = STATUS_STAGE.get(app["status"])
            if stage is None:
                continue
            by_stage.setdefault(stage, []).append({
                "application_id": str(app["_id"]),
                "candidate_id": app["candidate_id"],
                "candidate_name": app["candidate_name"],
                "status": app["status"]
            })

        stages = []
        for s in post.get("pipeline", []):
            stage = PipelineStage(**s)
            stages.append({
                "stage": stage.stage,
                "type": stage.type,
                "display_name": pipeline_service.stage_display_name(stage),
                "applicants": by_stage.get(stage.stage, [])
            })
        return {"post": post, "stages": stages}
