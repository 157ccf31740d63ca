"""
Skill Test Routes (candidate side)

POST /skill-tests/{post_id}/start - Generate or resume my AI skill test
POST /skill-tests/{test_id}/submit - Submit answers, get the AI report
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_candidate
from weinds.services.ai_flows import AIFlowService
from weinds.services.llm_client import LLMClient, get_llm_client
from weinds.services.skill_test_service import SkillTestService
from weinds.schemas.schemas import SkillTestStartResponse, SkillTestSubmitRequest, SkillTestReportResponse

router = APIRouter(prefix="/skill-tests", tags=["Skill Tests"])


@router.post("/{post_id}/start", response_model=SkillTestStartResponse)
async def start_test(
    post_id: str,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db),
    client: LLMClient = Depends(get_llm_client)
):
    """20 questions, 60 minutes. Correct answers are not included."""
    return SkillTestService(db, flows=AIFlowService(client)).start(post_id, candidate["user_id"])


@router.post("/{test_id}/submit", response_model=SkillTestReportResponse, status_code=201)
async def submit_test(
    test_id: str,
    data: SkillTestSubmitRequest,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db),
    client: LLMClient = Depends(get_llm_client)
):
    return SkillTestService(db, flows=AIFlowService(client)).submit(test_id, candidate["user_id"], data.answers)
