"""
TPO Service - training & placement officer views over an institute.

Candidates link themselves to an institute by setting institute_id
(the TPO's user id) on their profile.
"""

from typing import List, Optional

from pymongo.database import Database

from weinds.db.mongodb import get_mongo_db
from weinds.schemas.schemas import PlacementStatus, PostType
from weinds.services.application_service import ApplicationService
from weinds.services.mongo_service import CandidateProfileService, InstituteProfileService
from weinds.services.post_service import PostService

RECENT_DRIVES_LIMIT = 5


class TpoService:

    def __init__(self, db: Database = None):
        if db is None:
            db = get_mongo_db()
        self.candidates = CandidateProfileService(db)
        self.institutes = InstituteProfileService(db)
        self.applications = ApplicationService(db)
        self.posts = PostService(db)

    def students(self, institute_id: str, search: Optional[str] = None) -> List[dict]:
        """Institute's candidates; Placed when any application was Hired."""
        profiles = self.candidates.list_by_institute(institute_id, search)
        hired = self.applications.hired_candidate_ids([p["_id"] for p in profiles])
        return [
            {
                "candidate_id": p["_id"],
                "full_name": p.get("full_name", ""),
                "email": p.get("email", ""),
                "branch": p.get("branch"),
                "placement_status": (
                    PlacementStatus.placed if p["_id"] in hired else PlacementStatus.eligible
                ).value
            }
            for p in profiles
        ]

    def dashboard(self, institute_id: str) -> dict:
        students = self.students(institute_id)
        institute = self.institutes.get(institute_id) or {}
        recent = self.posts.recent_active(limit=RECENT_DRIVES_LIMIT)
        return {
            "institute_name": institute.get("institute_name") or "",
            "total_students": len(students),
            "placed_students": sum(1 for s in students if s["placement_status"] == PlacementStatus.placed.value),
            "companies": len(self.posts.active_employer_ids()),
            "active_internships": self.posts.count_active(PostType.internship),
            "recent_drives": [
                {
                    "post_id": p["_id"],
                    "post_type": p["post_type"],
                    "company_name": p["company_name"],
                    "title": p["title"],
                    "applicants": p.get("applicant_count", 0)
                }
                for p in recent
            ]
        }

    def internships(self) -> List[dict]:
        posts, _ = self.posts.list_active(post_type=PostType.internship, page=1, page_size=1000)
        return posts
