"""
Pipeline Routes

GET /pipelines/steps - Steps of the pipeline builder
POST /pipelines/quote - Stages, line items and total cost for a pipeline (employer only)
"""

from fastapi import APIRouter, Depends

from weinds.core.auth import get_current_employer
from weinds.services import pipeline_service
from weinds.schemas.schemas import PipelineConfig, PipelineQuote

router = APIRouter(prefix="/pipelines", tags=["Pipelines"])


@router.get("/steps")
async def pipeline_steps():
    return {"steps": pipeline_service.PIPELINE_STEPS, "costs": pipeline_service.STAGE_COSTS}


@router.post("/quote", response_model=PipelineQuote)
async def quote(config: PipelineConfig, employer: dict = Depends(get_current_employer)):
    """Price a pipeline before posting. Invite to apply replaces the application page fee."""
    return pipeline_service.quote(config)
