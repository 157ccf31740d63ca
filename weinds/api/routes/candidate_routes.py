"""
Candidate Routes

GET /candidates/profile - Get own profile (default profile if never saved)
PUT /candidates/profile - Save profile (merge)
GET /candidates/applications - Get my applications
GET /candidates/skill-tests - Pending skill tests and my reports
GET /candidates/interviews - My AI interviews
GET /candidates/recommendations - Posts ranked by skill match
"""

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from typing import List

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_candidate
from weinds.services.application_service import ApplicationService
from weinds.services.interview_service import InterviewService
from weinds.services.matching_service import MatchingService
from weinds.services.mongo_service import CandidateProfileService
from weinds.services.skill_test_service import SkillTestService
from weinds.schemas.schemas import (
    CandidateProfileUpdate, CandidateProfileResponse, ApplicationResponse,
    CandidateSkillTestsResponse, InterviewResponse, RecommendationResponse
)

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get("/profile", response_model=CandidateProfileResponse)
async def get_profile(candidate: dict = Depends(get_current_candidate), db: Database = Depends(get_mongo_db)):
    return CandidateProfileService(db).get_or_default(candidate)


@router.put("/profile", response_model=CandidateProfileResponse)
async def update_profile(
    data: CandidateProfileUpdate,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db)
):
    """Save the provided fields; fields left out keep their stored values."""
    service = CandidateProfileService(db)
    fields = data.model_dump(mode="json", exclude_unset=True)
    if service.get(candidate["user_id"]) is None:
        fields.setdefault("email", candidate["email"])
    service.save(candidate["user_id"], fields)
    return service.get_or_default(candidate)


@router.get("/applications", response_model=List[ApplicationResponse])
async def my_applications(candidate: dict = Depends(get_current_candidate), db: Database = Depends(get_mongo_db)):
    return ApplicationService(db).list_by_candidate(candidate["user_id"])


@router.get("/skill-tests", response_model=CandidateSkillTestsResponse)
async def my_skill_tests(candidate: dict = Depends(get_current_candidate), db: Database = Depends(get_mongo_db)):
    return SkillTestService(db).candidate_tests(candidate["user_id"])


@router.get("/interviews", response_model=List[InterviewResponse])
async def my_interviews(candidate: dict = Depends(get_current_candidate), db: Database = Depends(get_mongo_db)):
    return InterviewService(db).list_by_candidate(candidate["user_id"])


@router.get("/recommendations", response_model=List[RecommendationResponse])
async def recommendations(
    limit: int = Query(10, ge=1, le=50),
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db)
):
    """Active posts ranked by how well my skills match theirs."""
    profile = CandidateProfileService(db).get_or_default(candidate)
    return MatchingService(db).recommend_posts(profile, limit=limit)
