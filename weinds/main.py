"""
Weinds - Main Application

FastAPI backend with:
- MongoDB for every record (accounts, profiles, posts, applications, tests)
- OpenAI-compatible LLM (DeepSeek by default) for the AI flows
- JWT authentication with candidate / employer / tpo roles
- Uploaded files served from /files

Run: uvicorn weinds.main:app --reload
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

from weinds import __version__
from weinds.api.routes import api_router
from weinds.core.config import get_settings
from weinds.core.errors import attach_error_handlers
from weinds.core.logging import configure_logging
from weinds.db.mongodb import init_mongo_indexes, test_mongo_connection
from weinds.services.storage_service import PUBLIC_PREFIX

configure_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title="Weinds",
    description="""
    Job board for candidates, employers and training & placement officers.

    ## Features
    - **Authentication**: JWT-based auth for candidates, employers and TPOs
    - **Posts**: Jobs and internships with a priced hiring pipeline
    - **Applications**: Apply and move candidates through the pipeline
    - **Skill Tests**: AI-generated 20-question tests with AI evaluation, or uploaded tests
    - **AI Interviews**: Conversational interviews with semantic scoring
    - **AI Tools**: Learning roadmaps, specializations, resume reformatting, JD structuring
    - **TPO**: Institute students, placement status and drives
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

attach_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve stored files (traditional skill tests)
os.makedirs(settings.storage_path, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.storage_path), name="files")


@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "version": __version__,
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
        "llm": "configured" if settings.llm_configured else "not configured"
    }
