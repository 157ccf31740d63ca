"""
AI Interview Routes

POST /interviews/{post_id}/start - Start (or resume) an AI interview for a post I applied to
POST /interviews/{interview_id}/reply - Answer the interviewer
POST /interviews/{interview_id}/complete - Close the interview and score it
GET /interviews/{interview_id} - Transcript (candidate or the post's employer)
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_user, get_current_candidate
from weinds.services.ai_flows import AIFlowService
from weinds.services.interview_service import InterviewService
from weinds.services.llm_client import LLMClient, get_llm_client
from weinds.schemas.schemas import InterviewReplyRequest, InterviewResponse

router = APIRouter(prefix="/interviews", tags=["AI Interviews"])


@router.post("/{post_id}/start", response_model=InterviewResponse, status_code=201)
async def start_interview(
    post_id: str,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db),
    client: LLMClient = Depends(get_llm_client)
):
    return InterviewService(db, flows=AIFlowService(client)).start(post_id, candidate["user_id"])


@router.post("/{interview_id}/reply", response_model=InterviewResponse)
async def reply(
    interview_id: str,
    data: InterviewReplyRequest,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db),
    client: LLMClient = Depends(get_llm_client)
):
    return InterviewService(db, flows=AIFlowService(client)).reply(interview_id, candidate["user_id"], data.message)


@router.post("/{interview_id}/complete", response_model=InterviewResponse)
async def complete(
    interview_id: str,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db)
):
    return InterviewService(db).complete(interview_id, candidate["user_id"])


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db)
):
    return InterviewService(db).get_for_user(interview_id, user)
