"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends
from pymongo.database import Database

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import hash_password, verify_password, create_access_token, get_current_user
from weinds.services.mongo_service import UserService
from weinds.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, db: Database = Depends(get_mongo_db)):
    """
    Register a new user account.

    After registration, login to get access token, then fill in the profile.
    """
    UserService(db).create(
        email=request.email,
        password_hash=hash_password(request.password),
        role=request.role.value,
        full_name=request.full_name
    )
    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Database = Depends(get_mongo_db)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = UserService(db).get_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": user["_id"], "role": user["role"]})
    return TokenResponse(access_token=token, user_id=user["_id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user), db: Database = Depends(get_mongo_db)):
    """Get current authenticated user's info."""
    doc = UserService(db).get_by_id(user["user_id"])
    return UserResponse(
        user_id=doc["_id"], email=doc["email"], role=doc["role"], full_name=doc.get("full_name"),
        is_active=doc.get("is_active", True), created_at=doc["created_at"]
    )
