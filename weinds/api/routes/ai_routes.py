"""
AI Tool Routes

POST /ai/learning-roadmap - Roadmap for a career specialization
POST /ai/specializations - Career specializations from interests and skills
POST /ai/reformat-resume - Reformat pasted resume text
POST /ai/reformat-resume/upload - Reformat an uploaded resume (PDF/DOCX/TXT)
POST /ai/diagnose-error - Root cause and fix for an error
POST /ai/match - Match free-text profile against a job description
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from weinds.core.auth import get_current_user
from weinds.services.ai_flows import AIFlowService
from weinds.services.llm_client import LLMClient, get_llm_client
from weinds.utils.file_upload import extract_text_from_file
from weinds.schemas.schemas import (
    GenerateLearningRoadmapInput, GenerateLearningRoadmapOutput,
    GenerateSpecializationsInput, GenerateSpecializationsOutput,
    MIN_RESUME_LENGTH, ReformatResumeInput, ReformatResumeOutput,
    DiagnoseErrorInput, DiagnoseErrorOutput,
    MatchJobCandidateInput, MatchJobCandidateOutput
)

router = APIRouter(prefix="/ai", tags=["AI Tools"])


@router.post("/learning-roadmap", response_model=GenerateLearningRoadmapOutput)
async def learning_roadmap(
    data: GenerateLearningRoadmapInput,
    user: dict = Depends(get_current_user),
    client: LLMClient = Depends(get_llm_client)
):
    return AIFlowService(client).generate_learning_roadmap(data)


@router.post("/specializations", response_model=GenerateSpecializationsOutput)
async def specializations(
    data: GenerateSpecializationsInput,
    user: dict = Depends(get_current_user),
    client: LLMClient = Depends(get_llm_client)
):
    return AIFlowService(client).generate_specializations(data)


@router.post("/reformat-resume", response_model=ReformatResumeOutput)
async def reformat_resume(
    data: ReformatResumeInput,
    user: dict = Depends(get_current_user),
    client: LLMClient = Depends(get_llm_client)
):
    return AIFlowService(client).reformat_resume(data)


@router.post("/reformat-resume/upload", response_model=ReformatResumeOutput)
async def reformat_resume_upload(
    file: UploadFile = File(...),
    template_name: str = Form("Professional"),
    user: dict = Depends(get_current_user),
    client: LLMClient = Depends(get_llm_client)
):
    """
    Upload resume file (PDF, DOCX, or TXT).

    Text is extracted first, then reformatted by the AI.
    """
    text, _ = await extract_text_from_file(file)
    if len(text.strip()) < MIN_RESUME_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Resume text is too short (minimum {MIN_RESUME_LENGTH} characters)"
        )
    return AIFlowService(client).reformat_resume(
        ReformatResumeInput(raw_text=text, template_name=template_name)
    )


@router.post("/diagnose-error", response_model=DiagnoseErrorOutput)
async def diagnose_error(
    data: DiagnoseErrorInput,
    user: dict = Depends(get_current_user),
    client: LLMClient = Depends(get_llm_client)
):
    return AIFlowService(client).diagnose_error(data)


@router.post("/match", response_model=MatchJobCandidateOutput)
async def match(
    data: MatchJobCandidateInput,
    user: dict = Depends(get_current_user),
    client: LLMClient = Depends(get_llm_client)
):
    return AIFlowService(client).match_job_candidate(data)
