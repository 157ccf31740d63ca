"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from weinds.api.routes.auth_routes import router as auth_router
from weinds.api.routes.candidate_routes import router as candidate_router
from weinds.api.routes.employer_routes import router as employer_router
from weinds.api.routes.tpo_routes import router as tpo_router
from weinds.api.routes.pipeline_routes import router as pipeline_router
from weinds.api.routes.post_routes import router as post_router
from weinds.api.routes.application_routes import router as application_router
from weinds.api.routes.skill_test_routes import router as skill_test_router
from weinds.api.routes.interview_routes import router as interview_router
from weinds.api.routes.ai_routes import router as ai_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(candidate_router)
api_router.include_router(employer_router)
api_router.include_router(tpo_router)
api_router.include_router(pipeline_router)
api_router.include_router(post_router)
api_router.include_router(application_router)
api_router.include_router(skill_test_router)
api_router.include_router(interview_router)
api_router.include_router(ai_router)
