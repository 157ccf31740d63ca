"""
Matching Service

Two ways of scoring a candidate against a post:

1. Skill match (local, no AI call)
   Candidate skills and the post's required skills become bag-of-skills
   vectors over their combined vocabulary; the score is the cosine
   similarity of the two vectors scaled to 0-100. Used to rank
   recommendations.

2. AI match
   Both documents are rendered as text and sent to the
   match_job_candidate flow, which returns a score, a justification and
   skills worth highlighting. Used when an employer opens a candidate.
"""

import logging
from typing import List, Optional

import numpy as np
from pymongo.database import Database

from weinds.db.mongodb import get_mongo_db
from weinds.schemas.schemas import (
    MatchJobCandidateInput, MatchJobCandidateOutput, PostType, split_skills
)
from weinds.services.ai_flows import AIFlowService
from weinds.services.post_service import PostService, POST_COLLECTIONS

logger = logging.getLogger(__name__)


# ============================================================
# SIMILARITY COMPUTATION
# ============================================================

def cosine_similarity(vec1, vec2) -> float:
    """
    Compute cosine similarity between two vectors.

    Returns:
        Float between -1 and 1 (0 when either vector is all zeros)
    """
    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)
    if a.shape != b.shape:
        raise ValueError("Vectors must have same dimension")

    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    return float(np.dot(a, b) / (magnitude_a * magnitude_b))


def skill_vectors(candidate_skills: List[str], required_skills: List[str]):
    """Bag-of-skills vectors (case-insensitive) over the combined vocabulary."""
    candidate = {s.strip().lower() for s in candidate_skills if s and s.strip()}
    required = {s.strip().lower() for s in required_skills if s and s.strip()}
    vocabulary = sorted(candidate | required)
    return (
        np.array([1.0 if skill in candidate else 0.0 for skill in vocabulary]),
        np.array([1.0 if skill in required else 0.0 for skill in vocabulary]),
    )


def skill_match_score(candidate_skills, required_skills) -> float:
    """
    Skill overlap between a candidate and a post, 0-100.

    Both arguments accept a list or a comma-separated string.
    """
    candidate_skills = split_skills(candidate_skills) or []
    required_skills = split_skills(required_skills) or []
    if not candidate_skills or not required_skills:
        return 0.0
    a, b = skill_vectors(candidate_skills, required_skills)
    return round(cosine_similarity(a, b) * 100, 2)


# ============================================================
# TEXT RENDERING FOR THE AI MATCH
# ============================================================

def candidate_profile_text(profile: dict) -> str:
    skills = ", ".join(profile.get("skills") or [])
    lines = [
        f"Name: {profile.get('full_name', '')}",
        f"Headline: {profile.get('headline', '')}",
        f"Skills: {skills}",
        f"Experience: {profile.get('experience', '')}",
        f"Education: {profile.get('education', '')}",
        f"Achievements: {profile.get('achievements', '')}",
        f"Location: {profile.get('location', '')}",
    ]
    return "\n".join(lines)


def post_text(post: dict) -> str:
    lines = [
        f"Title: {post.get('title', '')}",
        f"Company: {post.get('company_name', '')}",
        f"Responsibilities: {post.get('responsibilities', '')}",
        f"Required Skills: {post.get('skills', '')}",
        f"Experience: {post.get('experience') or 'Not specified'}",
        f"Education: {post.get('education') or 'Not specified'}",
        f"Location: {post.get('location') or 'Not specified'}",
        f"Work Mode: {post.get('work_mode') or 'Not specified'}",
    ]
    return "\n".join(lines)


# ============================================================
# RECOMMENDATION SERVICE
# ============================================================

class MatchingService:
    """
    Ranks posts for candidates and runs AI matches.
    """

    def __init__(self, db: Database = None, flows: Optional[AIFlowService] = None):
        if db is None:
            db = get_mongo_db()
        self.posts = PostService(db)
        self.flows = flows

    def recommend_posts(self, candidate: dict, limit: int = 10) -> List[dict]:
        """
        Active posts ranked by skill match, best first.

        The candidate's Job/Internship preference limits the post types;
        posts with no skill overlap are left out.
        """
        preference = candidate.get("preference") or "Both"
        if preference == "Job":
            types = [PostType.job]
        elif preference == "Internship":
            types = [PostType.internship]
        else:
            types = [PostType(t) for t in POST_COLLECTIONS]

        scored = []
        for post_type in types:
            posts, _ = self.posts.list_active(post_type=post_type, page=1, page_size=10000)
            for post in posts:
                score = skill_match_score(candidate.get("skills") or [], post.get("skills", ""))
                if score > 0:
                    scored.append({"post": post, "skill_match_score": score})

        scored.sort(key=lambda r: r["skill_match_score"], reverse=True)
        logger.debug("Ranked %d posts for candidate %s", len(scored), candidate.get("_id"))
        return scored[:limit]

    def ai_match(self, profile: dict, post: dict) -> MatchJobCandidateOutput:
        flows = self.flows if self.flows is not None else AIFlowService()
        return flows.match_job_candidate(MatchJobCandidateInput(
            candidate_profile=candidate_profile_text(profile),
            job_description=post_text(post)
        ))
