"""
Employer Routes

GET /employers/profile - Get own company profile
PUT /employers/profile - Save company profile (merge)
POST /employers/verification - Submit a verification request
GET /employers/companies - Company directory (any logged-in user)
GET /employers/posts - My posts with applicant counts
GET /employers/applications - Applications to my posts
GET /employers/shortlisted - Applications past the Applied stage
GET /employers/candidates/{candidate_id} - Candidate profile + match against a post
GET /employers/skill-tests/{post_id}/reports - AI skill test reports for a post
POST /employers/skill-tests/{post_id}/traditional - Upload a traditional test file
GET /employers/interviews - AI interviews for my posts
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pymongo.database import Database
from typing import List, Optional

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_user, get_current_employer
from weinds.core.errors import NotFoundError, PermissionDeniedError
from weinds.services.ai_flows import AIFlowService
from weinds.services.application_service import ApplicationService
from weinds.services.interview_service import InterviewService
from weinds.services.llm_client import LLMClient, get_llm_client
from weinds.services.matching_service import MatchingService, skill_match_score
from weinds.services.mongo_service import CandidateProfileService, EmployerProfileService
from weinds.services.post_service import PostService
from weinds.services.skill_test_service import SkillTestService
from weinds.utils.file_upload import read_upload
from weinds.schemas.schemas import (
    EmployerProfileUpdate, EmployerProfileResponse, VerificationRequest,
    PostResponse, ApplicationResponse, ApplicationStatus, CandidateMatchResponse,
    SkillTestReportResponse, TraditionalTestUploadResponse, InterviewResponse
)

router = APIRouter(prefix="/employers", tags=["Employers"])


def employer_profile_response(service: EmployerProfileService, employer: dict) -> dict:
    profile = service.get(employer["user_id"]) or {}
    profile["employer_id"] = employer["user_id"]
    profile.setdefault("email", employer["email"])
    return profile


# ============================================================
# PROFILE
# ============================================================

@router.get("/profile", response_model=EmployerProfileResponse)
async def get_profile(employer: dict = Depends(get_current_employer), db: Database = Depends(get_mongo_db)):
    return employer_profile_response(EmployerProfileService(db), employer)


@router.put("/profile", response_model=EmployerProfileResponse)
async def update_profile(
    data: EmployerProfileUpdate,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    service = EmployerProfileService(db)
    fields = data.model_dump(mode="json", exclude_unset=True)
    fields.setdefault("email", employer["email"])
    service.save(employer["user_id"], fields)
    return employer_profile_response(service, employer)


@router.post("/verification", response_model=EmployerProfileResponse, status_code=201)
async def request_verification(
    data: VerificationRequest,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    """Submit company registration details; status becomes Pending until reviewed."""
    service = EmployerProfileService(db)
    service.request_verification(employer["user_id"], data.registration_number, data.document_url)
    return employer_profile_response(service, employer)


@router.get("/companies", response_model=List[EmployerProfileResponse])
async def list_companies(user: dict = Depends(get_current_user), db: Database = Depends(get_mongo_db)):
    companies = EmployerProfileService(db).list_companies()
    for company in companies:
        company["employer_id"] = company["_id"]
    return companies


# ============================================================
# POSTS & APPLICATIONS
# ============================================================

@router.get("/posts", response_model=List[PostResponse])
async def my_posts(employer: dict = Depends(get_current_employer), db: Database = Depends(get_mongo_db)):
    return PostService(db).list_by_employer(employer["user_id"])


@router.get("/applications", response_model=List[ApplicationResponse])
async def applications(
    post_id: Optional[str] = Query(None),
    status: Optional[ApplicationStatus] = Query(None),
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    return ApplicationService(db).list_by_employer(employer["user_id"], post_id=post_id, status=status)


@router.get("/shortlisted", response_model=List[ApplicationResponse])
async def shortlisted(employer: dict = Depends(get_current_employer), db: Database = Depends(get_mongo_db)):
    return ApplicationService(db).list_shortlisted(employer["user_id"])


@router.get("/candidates/{candidate_id}", response_model=CandidateMatchResponse)
async def view_candidate(
    candidate_id: str,
    post_id: Optional[str] = Query(None, description="Match the candidate against this post"),
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db),
    client: LLMClient = Depends(get_llm_client)
):
    """
    Profile of a candidate who applied to one of my posts.

    With post_id, adds the skill match score and the AI match
    (score, justification, skills to highlight).
    """
    applications = [
        a for a in ApplicationService(db).list_by_employer(employer["user_id"], post_id=post_id)
        if a["candidate_id"] == candidate_id
    ]
    if not applications:
        raise PermissionDeniedError(path=f"candidates/{candidate_id}", operation="get")

    profiles = CandidateProfileService(db)
    if profiles.get(candidate_id) is None:
        raise NotFoundError("Candidate has no profile")
    profile = profiles.get_or_default({
        "user_id": candidate_id, "email": applications[0]["candidate_email"]
    })

    result = {"profile": profile, "application_status": applications[0]["status"]}
    if post_id:
        post = PostService(db).find(post_id)
        result["skill_match_score"] = skill_match_score(profile.get("skills"), post.get("skills", ""))
        result["match"] = MatchingService(db, flows=AIFlowService(client)).ai_match(profile, post)
    return result


# ============================================================
# SKILL TESTS & INTERVIEWS
# ============================================================

@router.get("/skill-tests/{post_id}/reports", response_model=List[SkillTestReportResponse])
async def skill_test_reports(
    post_id: str,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    return SkillTestService(db).post_reports(post_id, employer["user_id"])


@router.post("/skill-tests/{post_id}/traditional", response_model=TraditionalTestUploadResponse, status_code=201)
async def upload_traditional_test(
    post_id: str,
    file: UploadFile = File(...),
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    """Upload the test paper candidates will download at the Skill Test stage."""
    content, filename = await read_upload(file)
    return SkillTestService(db).upload_traditional(
        post_id, employer["user_id"], filename, content, file.content_type
    )


@router.get("/interviews", response_model=List[InterviewResponse])
async def interviews(
    post_id: Optional[str] = Query(None),
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    return InterviewService(db).list_by_employer(employer["user_id"], post_id=post_id)
