"""
Application Routes

POST /applications - Apply to a post (candidate only)
PUT /applications/{application_id}/status - Move an application along the pipeline (owning employer)
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_candidate, get_current_employer
from weinds.services.application_service import ApplicationService
from weinds.schemas.schemas import ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply(
    data: ApplicationCreate,
    candidate: dict = Depends(get_current_candidate),
    db: Database = Depends(get_mongo_db)
):
    return ApplicationService(db).apply(data.post_type, data.post_id, candidate)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
async def update_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    """
    Advance or reject an application.

    Only later statuses are accepted, stages missing from the post's
    pipeline are skipped, and Hired/Rejected are final.
    """
    return ApplicationService(db).update_status(application_id, employer["user_id"], data.status)
