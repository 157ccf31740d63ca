"""
AI Interview Service - conversational interview simulation.

Flow:
1. start    - opening question sent to the AI interviewer, its reply is the first turn
2. reply    - candidate message + transcript so far -> next AI turn with a semantic score
3. complete - interview closed; overall score = rounded mean of the turn scores

The transcript is stored on the ai_interviews document as a list of turns:
    {"role": "ai" | "candidate", "text": "...", "semantic_score": 72.0}
"""

import logging
from typing import List, Optional

from pymongo import DESCENDING
from pymongo.database import Database

from weinds.core.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from weinds.db.mongodb import get_mongo_db, get_collection
from weinds.schemas.schemas import ConductAiInterviewInput, InterviewStatus, split_skills
from weinds.services.ai_flows import AIFlowService
from weinds.services.application_service import ApplicationService
from weinds.services.matching_service import candidate_profile_text
from weinds.services.mongo_service import (
    CandidateProfileService, serialize_doc, serialize_docs, to_object_id, utcnow
)
from weinds.services.post_service import PostService, job_description_text

logger = logging.getLogger(__name__)


def opening_question(post: dict) -> str:
    skills = split_skills(post.get("skills") or "")
    topic = skills[0] if skills else f"the {post.get('title', 'role')} role"
    return f"Please introduce yourself and tell me about your experience with {topic}."


def previous_responses(turns: List[dict]) -> str:
    lines = []
    for turn in turns:
        speaker = "Candidate" if turn["role"] == "candidate" else "Interviewer"
        lines.append(f"{speaker}: {turn['text']}")
    return "\n".join(lines)


def overall_score(turns: List[dict]) -> Optional[int]:
    scores = [t["semantic_score"] for t in turns if t["role"] == "ai" and t.get("semantic_score") is not None]
    if not scores:
        return None
    return round(sum(scores) / len(scores))


class InterviewService:

    def __init__(self, db: Database = None, flows: Optional[AIFlowService] = None):
        if db is None:
            db = get_mongo_db()
        self.db = db
        self.flows = flows
        self.collection = get_collection(db, "ai_interviews")
        self.posts = PostService(db)
        self.applications = ApplicationService(db)

    def _flows(self) -> AIFlowService:
        if self.flows is None:
            self.flows = AIFlowService()
        return self.flows

    def get(self, interview_id: str) -> dict:
        oid = to_object_id(interview_id)
        doc = self.collection.find_one({"_id": oid}) if oid else None
        if doc is None:
            raise NotFoundError("Interview not found")
        return serialize_doc(doc)

    def get_for_user(self, interview_id: str, user: dict) -> dict:
        """Interview visible to its candidate and to the post's employer."""
        interview = self.get(interview_id)
        if user["user_id"] not in (interview["candidate_id"], interview["employer_id"]):
            raise PermissionDeniedError(path=f"ai_interviews/{interview_id}", operation="get")
        return interview

    def _get_own(self, interview_id: str, candidate_id: str, operation: str) -> dict:
        interview = self.get(interview_id)
        if interview["candidate_id"] != candidate_id:
            raise PermissionDeniedError(path=f"ai_interviews/{interview_id}", operation=operation)
        if interview["status"] != InterviewStatus.in_progress.value:
            raise InvalidStateError("Interview is already completed")
        return interview

    def start(self, post_id: str, candidate_id: str) -> dict:
        application = self.applications.find_for_candidate(candidate_id, post_id)
        if application is None:
            raise NotFoundError("You have not applied to this post")

        existing = self.collection.find_one({
            "candidate_id": candidate_id,
            "post_id": post_id,
            "status": InterviewStatus.in_progress.value
        })
        if existing:
            return serialize_doc(existing)

        post = self.posts.get(application["post_type"], post_id)
        profile = CandidateProfileService(self.db).get(candidate_id) or {}
        profile_text = candidate_profile_text(profile)
        jd_text = job_description_text(post)

        question = opening_question(post)
        result = self._flows().conduct_ai_interview(ConductAiInterviewInput(
            candidate_profile=profile_text,
            job_description=jd_text,
            question=question
        ))

        doc = {
            "candidate_id": candidate_id,
            "candidate_name": application["candidate_name"],
            "post_id": post_id,
            "post_type": post["post_type"],
            "post_title": post["title"],
            "employer_id": post["employer_id"],
            "candidate_profile": profile_text,
            "job_description": jd_text,
            "status": InterviewStatus.in_progress.value,
            # Opening turn: nothing from the candidate to score yet
            "turns": [{"role": "ai", "text": result.response, "semantic_score": None}],
            "semantic_score": None,
            "started_at": utcnow(),
            "completed_at": None
        }
        doc["_id"] = self.collection.insert_one(doc).inserted_id
        logger.info("Started AI interview %s for candidate %s", doc["_id"], candidate_id)
        return serialize_doc(doc)

    def reply(self, interview_id: str, candidate_id: str, message: str) -> dict:
        interview = self._get_own(interview_id, candidate_id, "reply")
        turns = interview["turns"]
        candidate_turn = {"role": "candidate", "text": message, "semantic_score": None}

        result = self._flows().conduct_ai_interview(ConductAiInterviewInput(
            candidate_profile=interview["candidate_profile"],
            job_description=interview["job_description"],
            question=message,
            previous_responses=previous_responses(turns + [candidate_turn])
        ))

        new_turns = [
            candidate_turn,
            {"role": "ai", "text": result.response, "semantic_score": result.semantic_score},
        ]
        self.collection.update_one(
            {"_id": to_object_id(interview_id)},
            {"$push": {"turns": {"$each": new_turns}},
             "$set": {"semantic_score": overall_score(turns + new_turns)}}
        )
        return self.get(interview_id)

    def complete(self, interview_id: str, candidate_id: str) -> dict:
        interview = self._get_own(interview_id, candidate_id, "complete")
        score = overall_score(interview["turns"])
        self.collection.update_one(
            {"_id": to_object_id(interview_id)},
            {"$set": {
                "status": InterviewStatus.completed.value,
                "semantic_score": score,
                "turn_count": len(interview["turns"]),
                "completed_at": utcnow()
            }}
        )
        logger.info("AI interview %s completed (score %s, %d turns)", interview_id, score, len(interview["turns"]))
        return self.get(interview_id)

    def list_by_employer(self, employer_id: str, post_id: Optional[str] = None) -> List[dict]:
        query = {"employer_id": employer_id}
        if post_id:
            query["post_id"] = post_id
        return serialize_docs(self.collection.find(query).sort("started_at", DESCENDING))

    def list_by_candidate(self, candidate_id: str) -> List[dict]:
        return serialize_docs(self.collection.find({"candidate_id": candidate_id}).sort("started_at", DESCENDING))
