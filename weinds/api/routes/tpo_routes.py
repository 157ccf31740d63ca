"""
TPO Routes (training & placement officer)

GET /tpo/profile - Get institute profile
PUT /tpo/profile - Save institute profile (merge)
GET /tpo/students - Students of my institute with placement status
GET /tpo/dashboard - Placement overview
GET /tpo/internships - Active internships
GET /tpo/companies - Company directory
"""

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from typing import List, Optional

from weinds.db.mongodb import get_mongo_db
from weinds.core.auth import get_current_tpo
from weinds.services.mongo_service import EmployerProfileService, InstituteProfileService
from weinds.services.tpo_service import TpoService
from weinds.schemas.schemas import (
    InstituteProfileUpdate, InstituteProfileResponse, TpoStudentResponse, TpoDashboardResponse,
    PostResponse, EmployerProfileResponse
)

router = APIRouter(prefix="/tpo", tags=["TPO"])


@router.get("/profile", response_model=InstituteProfileResponse)
async def get_profile(tpo: dict = Depends(get_current_tpo), db: Database = Depends(get_mongo_db)):
    profile = InstituteProfileService(db).get(tpo["user_id"]) or {}
    profile["institute_id"] = tpo["user_id"]
    return profile


@router.put("/profile", response_model=InstituteProfileResponse)
async def update_profile(
    data: InstituteProfileUpdate,
    tpo: dict = Depends(get_current_tpo),
    db: Database = Depends(get_mongo_db)
):
    profile = InstituteProfileService(db).save(tpo["user_id"], data.model_dump(mode="json", exclude_unset=True))
    profile["institute_id"] = tpo["user_id"]
    return profile


@router.get("/students", response_model=List[TpoStudentResponse])
async def students(
    search: Optional[str] = Query(None, description="Search by name"),
    tpo: dict = Depends(get_current_tpo),
    db: Database = Depends(get_mongo_db)
):
    return TpoService(db).students(tpo["user_id"], search)


@router.get("/dashboard", response_model=TpoDashboardResponse)
async def dashboard(tpo: dict = Depends(get_current_tpo), db: Database = Depends(get_mongo_db)):
    return TpoService(db).dashboard(tpo["user_id"])


@router.get("/internships", response_model=List[PostResponse])
async def internships(tpo: dict = Depends(get_current_tpo), db: Database = Depends(get_mongo_db)):
    return TpoService(db).internships()


@router.get("/companies", response_model=List[EmployerProfileResponse])
async def companies(tpo: dict = Depends(get_current_tpo), db: Database = Depends(get_mongo_db)):
    companies = EmployerProfileService(db).list_companies()
    for company in companies:
        company["employer_id"] = company["_id"]
    return companies
