"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity,
including the input/output contracts of the AI flows.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    candidate = "candidate"
    employer = "employer"
    tpo = "tpo"


class PostType(str, Enum):
    job = "job"
    internship = "internship"


class PostStatus(str, Enum):
    active = "Active"
    closed = "Closed"


class ApplicationStatus(str, Enum):
    applied = "Applied"
    shortlisted = "Shortlisted"
    skill_test = "Skill Test"
    interview = "Interview"
    final_interview = "Final Interview"
    hired = "Hired"
    rejected = "Rejected"


class EmploymentStatus(str, Enum):
    fresher = "Fresher"
    working = "Working"
    studying = "Studying"


class PostPreference(str, Enum):
    job = "Job"
    internship = "Internship"
    both = "Both"


class WorkMode(str, Enum):
    remote = "Remote"
    hybrid = "Hybrid"
    on_site = "On-site"


class SkillTestType(str, Enum):
    ai = "ai"
    traditional = "traditional"


class FinalInterviewType(str, Enum):
    in_person = "in-person"
    online = "online"


class QuestionType(str, Enum):
    multiple_choice = "multiple-choice"
    short_answer = "short-answer"


class Difficulty(str, Enum):
    easy = "easy"
    intermediate = "intermediate"
    hard = "hard"


class PlacementStatus(str, Enum):
    eligible = "Eligible"
    placed = "Placed"


class InterviewStatus(str, Enum):
    in_progress = "In Progress"
    completed = "Completed"


def split_skills(value):
    """Accept skills as a list or a comma-separated string."""
    if value is None:
        return value
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return [str(s).strip() for s in value if str(s).strip()]


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    full_name: Optional[str] = Field(None, max_length=100)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(BaseModel):
    user_id: str
    email: str
    role: str
    full_name: Optional[str] = None
    is_active: bool
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class CandidateProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    headline: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    location: Optional[str] = None
    employment_status: Optional[EmploymentStatus] = None
    preference: Optional[PostPreference] = None
    achievements: Optional[str] = None
    interested_companies: Optional[str] = None
    institute_id: Optional[str] = None
    branch: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, value):
        return split_skills(value)

class CandidateProfileResponse(BaseModel):
    candidate_id: str
    full_name: str = ""
    email: str = ""
    headline: str = ""
    skills: List[str] = []
    experience: str = ""
    education: str = ""
    location: str = ""
    employment_status: EmploymentStatus = EmploymentStatus.fresher
    preference: PostPreference = PostPreference.both
    achievements: str = ""
    interested_companies: str = ""
    institute_id: Optional[str] = None
    branch: Optional[str] = None
    completeness: int = 0

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, value):
        return split_skills(value)

class EmployerProfileUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=2, max_length=200)
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    company_size: Optional[str] = None

class EmployerProfileResponse(BaseModel):
    employer_id: str
    company_name: str = ""
    email: str = ""
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    company_size: Optional[str] = None
    is_verified: bool = False
    verification_status: Optional[str] = None

class VerificationRequest(BaseModel):
    registration_number: str = Field(..., min_length=3)
    document_url: Optional[str] = None

class InstituteProfileUpdate(BaseModel):
    institute_name: Optional[str] = Field(None, min_length=2, max_length=200)
    location: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[EmailStr] = None

class InstituteProfileResponse(BaseModel):
    institute_id: str
    institute_name: str = ""
    location: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[str] = None


# ============================================================
# PIPELINE SCHEMAS
# ============================================================

class PipelineConfig(BaseModel):
    """Selections made while building a hiring pipeline."""
    application: bool = False
    invite: bool = False
    skill_test: Optional[SkillTestType] = None
    ai_interview: bool = False
    final_interview: Optional[FinalInterviewType] = None

class PipelineStage(BaseModel):
    stage: str
    type: Optional[str] = None

class PipelineLineItem(BaseModel):
    key: str
    label: str
    cost: int

class PipelineQuote(BaseModel):
    stages: List[PipelineStage]
    line_items: List[PipelineLineItem]
    total_cost: int
    currency: str = "INR"


# ============================================================
# POST (JOB / INTERNSHIP) SCHEMAS
# ============================================================

class JobDetails(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    responsibilities: str = ""
    skills: str = ""
    experience: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    work_mode: Optional[WorkMode] = None
    education: Optional[str] = None
    # Internships only
    duration: Optional[str] = None
    stipend: Optional[str] = None

class PostCreate(JobDetails):
    post_type: PostType = PostType.job
    pipeline: PipelineConfig

class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    responsibilities: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    work_mode: Optional[WorkMode] = None
    education: Optional[str] = None
    duration: Optional[str] = None
    stipend: Optional[str] = None
    status: Optional[PostStatus] = None
    pipeline: Optional[PipelineConfig] = None

class PostResponse(BaseModel):
    id: str
    post_type: PostType
    employer_id: str
    company_name: str
    title: str
    responsibilities: str = ""
    skills: str = ""
    experience: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    work_mode: Optional[str] = None
    education: Optional[str] = None
    duration: Optional[str] = None
    stipend: Optional[str] = None
    pipeline: List[PipelineStage] = []
    pipeline_cost: int = 0
    applicant_count: int = 0
    status: str
    created_at: datetime

class PostListResponse(BaseModel):
    posts: List[PostResponse]
    total: int
    page: int
    page_size: int

class PipelineApplicant(BaseModel):
    application_id: str
    candidate_id: str
    candidate_name: str
    status: str

class PipelineStageView(BaseModel):
    stage: str
    type: Optional[str] = None
    display_name: str
    applicants: List[PipelineApplicant] = []

class PostPipelineResponse(BaseModel):
    post: PostResponse
    stages: List[PipelineStageView]


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    post_type: PostType
    post_id: str

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

class ApplicationResponse(BaseModel):
    id: str
    post_id: str
    post_type: PostType
    candidate_id: str
    candidate_name: str
    candidate_email: str
    employer_id: str
    post_title: str
    company_name: str
    status: str
    applied_on: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# AI FLOW SCHEMAS
# ============================================================

class GenerateLearningRoadmapInput(BaseModel):
    specialization: str = Field(..., min_length=2)
    user_career_goals: str = Field(..., min_length=2)

class GenerateLearningRoadmapOutput(BaseModel):
    roadmap: str
    resources: str

MIN_RESUME_LENGTH = 20

class ReformatResumeInput(BaseModel):
    raw_text: str = Field(..., min_length=MIN_RESUME_LENGTH)
    template_name: str = "Professional"

class ReformatResumeOutput(BaseModel):
    formatted_resume: str

class GenerateJobDescriptionInput(BaseModel):
    text: str = Field(..., min_length=10)

class GenerateJobDescriptionOutput(BaseModel):
    title: str
    responsibilities: str
    skills: str
    experience: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    work_mode: Optional[WorkMode] = None
    education: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def join_skills(cls, value):
        # Models sometimes answer with a list instead of a comma-separated string
        if isinstance(value, list):
            return ", ".join(str(s).strip() for s in value if str(s).strip())
        return value

class GenerateSpecializationsInput(BaseModel):
    interests: str = Field(..., min_length=2)
    skills: str = Field(..., min_length=2)

class GenerateSpecializationsOutput(BaseModel):
    specializations: List[str]

class ConductAiInterviewInput(BaseModel):
    candidate_profile: str
    job_description: str
    question: str
    previous_responses: Optional[str] = None

class ConductAiInterviewOutput(BaseModel):
    response: str
    semantic_score: float = Field(..., ge=0, le=100)

class MatchJobCandidateInput(BaseModel):
    candidate_profile: str = Field(..., min_length=2)
    job_description: str = Field(..., min_length=2)

class MatchJobCandidateOutput(BaseModel):
    match_score: float = Field(..., ge=0, le=100)
    justification: str
    recommended_skills: List[str] = []

class DiagnoseErrorInput(BaseModel):
    error_message: str
    code_snippet: str
    file_path: str
    context: Optional[str] = None

class DiagnoseErrorOutput(BaseModel):
    root_cause: str
    solution: str

class GenerateSkillTestInput(BaseModel):
    job_description: str
    candidate_skills: List[str] = []

class SkillTestQuestion(BaseModel):
    question_text: str
    question_type: QuestionType
    options: Optional[List[str]] = None
    correct_answer: str
    topic: str
    difficulty: Difficulty

    @model_validator(mode="after")
    def check_options(self):
        if self.question_type == QuestionType.multiple_choice:
            if not self.options or len(self.options) != 4:
                raise ValueError("multiple-choice questions need exactly 4 options")
        return self

class GenerateSkillTestOutput(BaseModel):
    questions: List[SkillTestQuestion] = Field(..., min_length=20, max_length=20)

class SubmissionItem(BaseModel):
    question_text: str
    candidate_answer: str
    correct_answer: str

class EvaluateSkillTestInput(BaseModel):
    submission: List[SubmissionItem] = Field(..., min_length=1)

class EvaluateSkillTestOutput(BaseModel):
    score: float = Field(..., ge=0, le=100)
    summary: str
    strengths: List[str] = []
    areas_for_improvement: List[str] = []


# ============================================================
# SKILL TEST SCHEMAS
# ============================================================

class SkillTestQuestionPublic(BaseModel):
    """Question as shown to the candidate (no answer)."""
    question_text: str
    question_type: QuestionType
    options: Optional[List[str]] = None
    topic: str
    difficulty: Difficulty

class SkillTestStartResponse(BaseModel):
    test_id: str
    post_id: str
    post_type: PostType
    title: str
    company_name: str
    duration_minutes: int
    questions: List[SkillTestQuestionPublic]

class SkillTestSubmitRequest(BaseModel):
    answers: List[Optional[str]] = []

class SkillTestReportResponse(BaseModel):
    id: str
    submission_id: str
    candidate_id: str
    candidate_name: str
    post_id: str
    post_title: Optional[str] = None
    employer_id: str
    score: float
    summary: str
    strengths: List[str] = []
    areas_for_improvement: List[str] = []
    generated_at: datetime
    submission: Optional[List[SubmissionItem]] = None
    application_status: Optional[str] = None

class CandidateSkillTestItem(BaseModel):
    application_id: str
    post_id: str
    post_type: PostType
    post_title: str
    company_name: str
    test_type: Optional[SkillTestType] = None
    test_file_url: Optional[str] = None
    completed: bool = False

class CandidateSkillTestsResponse(BaseModel):
    pending: List[CandidateSkillTestItem]
    reports: List[SkillTestReportResponse]

class TraditionalTestUploadResponse(BaseModel):
    id: str
    test_file_url: str


# ============================================================
# AI INTERVIEW SCHEMAS
# ============================================================

class InterviewTurn(BaseModel):
    role: Literal["ai", "candidate"]
    text: str
    semantic_score: Optional[float] = None

class InterviewReplyRequest(BaseModel):
    message: str = Field(..., min_length=1)

class InterviewResponse(BaseModel):
    id: str
    post_id: str
    post_type: PostType
    post_title: str
    candidate_id: str
    candidate_name: str
    employer_id: str
    status: InterviewStatus
    turns: List[InterviewTurn] = []
    semantic_score: Optional[int] = None
    turn_count: Optional[int] = None
    started_at: datetime
    completed_at: Optional[datetime] = None


# ============================================================
# MATCHING SCHEMAS
# ============================================================

class RecommendationResponse(BaseModel):
    post: PostResponse
    skill_match_score: float

class CandidateMatchResponse(BaseModel):
    profile: CandidateProfileResponse
    application_status: Optional[str] = None
    skill_match_score: Optional[float] = None
    match: Optional[MatchJobCandidateOutput] = None


# ============================================================
# TPO SCHEMAS
# ============================================================

class TpoStudentResponse(BaseModel):
    candidate_id: str
    full_name: str
    email: str
    branch: Optional[str] = None
    placement_status: PlacementStatus

class RecentDrive(BaseModel):
    post_id: str
    post_type: PostType
    company_name: str
    title: str
    applicants: int

class TpoDashboardResponse(BaseModel):
    institute_name: str
    total_students: int
    placed_students: int
    companies: int
    active_internships: int
    recent_drives: List[RecentDrive]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
