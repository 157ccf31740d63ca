"""
Post Routes (jobs and internships)

POST /posts - Create post with its hiring pipeline (employer only)
POST /posts/generate - Structure free text into a job description draft (employer only)
GET /posts - List active posts with filters
GET /posts/{post_type}/{post_id} - Get post details
PUT /posts/{post_type}/{post_id} - Update post (owner only)
DELETE /posts/{post_type}/{post_id} - Delete post and its applications (owner only)
GET /posts/{post_type}/{post_id}/pipeline - Applicants per pipeline stage (owner only)
"""

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from typing import Optional

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_user, get_current_employer
from weinds.services.ai_flows import AIFlowService
from weinds.services.llm_client import LLMClient, get_llm_client
from weinds.services.post_service import PostService
from weinds.schemas.schemas import (
    PostCreate, PostUpdate, PostResponse, PostListResponse, PostPipelineResponse, PostType, WorkMode,
    GenerateJobDescriptionInput, GenerateJobDescriptionOutput, MessageResponse
)

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    post: PostCreate,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    """
    Create a job or internship. The pipeline must include an application
    option and a skill test; its cost is stored on the post.
    """
    return PostService(db).create(employer["user_id"], post)


@router.post("/generate", response_model=GenerateJobDescriptionOutput)
async def generate_post(
    data: GenerateJobDescriptionInput,
    employer: dict = Depends(get_current_employer),
    client: LLMClient = Depends(get_llm_client)
):
    """Turn pasted text into a structured draft. Nothing is saved."""
    return AIFlowService(client).generate_job_description(data)


@router.get("", response_model=PostListResponse)
async def list_posts(
    post_type: Optional[PostType] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    search: Optional[str] = Query(None, description="Search in title"),
    location: Optional[str] = Query(None),
    work_mode: Optional[WorkMode] = Query(None),
    skill: Optional[str] = Query(None, description="Filter by required skill"),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db)
):
    """List active posts, newest first."""
    posts, total = PostService(db).list_active(
        post_type=post_type, search=search, location=location,
        work_mode=work_mode.value if work_mode else None, skill=skill,
        page=page, page_size=page_size
    )
    return PostListResponse(posts=posts, total=total, page=page, page_size=page_size)


@router.get("/{post_type}/{post_id}", response_model=PostResponse)
async def get_post(
    post_type: PostType,
    post_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db)
):
    return PostService(db).get(post_type, post_id)


@router.put("/{post_type}/{post_id}", response_model=PostResponse)
async def update_post(
    post_type: PostType,
    post_id: str,
    changes: PostUpdate,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    return PostService(db).update(post_type, post_id, employer["user_id"], changes)


@router.delete("/{post_type}/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_type: PostType,
    post_id: str,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    removed = PostService(db).delete(post_type, post_id, employer["user_id"])
    return MessageResponse(message=f"Post deleted along with {removed} application(s)")


@router.get("/{post_type}/{post_id}/pipeline", response_model=PostPipelineResponse)
async def post_pipeline(
    post_type: PostType,
    post_id: str,
    employer: dict = Depends(get_current_employer),
    db: Database = Depends(get_mongo_db)
):
    return PostService(db).pipeline_view(post_type, post_id, employer["user_id"])

