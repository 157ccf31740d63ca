"""
Skill Test Service

AI skill tests:
1. Candidate whose application is at "Skill Test" starts the test
2. 20 questions are generated from the post and the candidate's skills
   and stored in skill_tests (correct answers never leave the server)
3. Candidate submits answers once
4. Submission is evaluated by the AI and a report is stored

Traditional skill tests:
The employer uploads a test file for the post; candidates at "Skill Test"
see its URL.
"""

import logging
from typing import List, Optional

from pymongo import DESCENDING
from pymongo.database import Database

from weinds.core.errors import ConflictError, InvalidStateError, NotFoundError, PermissionDeniedError
from weinds.db.mongodb import get_mongo_db, get_collection
from weinds.schemas.schemas import (
    ApplicationStatus, EvaluateSkillTestInput, GenerateSkillTestInput, SkillTestType, SubmissionItem
)
from weinds.services import pipeline_service
from weinds.services.ai_flows import AIFlowService
from weinds.services.application_service import ApplicationService
from weinds.services.mongo_service import (
    CandidateProfileService, serialize_doc, serialize_docs, to_object_id, utcnow
)
from weinds.services.post_service import PostService, job_description_text
from weinds.services.storage_service import StorageService

logger = logging.getLogger(__name__)

TEST_DURATION_MINUTES = 60


def traditional_test_path(employer_id: str, post_id: str, file_name: str) -> str:
    return f"traditional-tests/{employer_id}/{post_id}/{file_name}"


def public_test(test: dict) -> dict:
    """Test as sent to the candidate, without correct answers."""
    return {
        "test_id": test["_id"],
        "post_id": test["post_id"],
        "post_type": test["post_type"],
        "title": test["title"],
        "company_name": test["company_name"],
        "duration_minutes": test["duration_minutes"],
        "questions": [
            {k: v for k, v in q.items() if k != "correct_answer"}
            for q in test["questions"]
        ]
    }


class SkillTestService:
    """
    Handles skill_tests, skill_test_submissions, skill_test_reports
    and traditional_tests.
    """

    def __init__(self, db: Database = None, flows: Optional[AIFlowService] = None, storage: Optional[StorageService] = None):
        if db is None:
            db = get_mongo_db()
        self.db = db
        self.flows = flows
        self.storage = storage
        self.tests = get_collection(db, "skill_tests")
        self.submissions = get_collection(db, "skill_test_submissions")
        self.reports = get_collection(db, "skill_test_reports")
        self.traditional = get_collection(db, "traditional_tests")
        self.posts = PostService(db)
        self.applications = ApplicationService(db)

    def _flows(self) -> AIFlowService:
        if self.flows is None:
            self.flows = AIFlowService()
        return self.flows

    # --------------------------------------------------------
    # AI tests
    # --------------------------------------------------------

    def start(self, post_id: str, candidate_id: str) -> dict:
        """
        Generate (or resume) the candidate's AI test for a post.

        Raises:
            NotFoundError: no application at the Skill Test stage
            InvalidStateError: the post uses a traditional test
            ConflictError: the test was already submitted
        """
        application = self.applications.find_for_candidate(
            candidate_id, post_id, status=ApplicationStatus.skill_test
        )
        if application is None:
            raise NotFoundError("No application at the skill test stage for this post")

        post = self.posts.get(application["post_type"], post_id)
        stage = pipeline_service.find_stage(post.get("pipeline", []), "skill_test")
        if stage and stage.get("type") == SkillTestType.traditional.value:
            raise InvalidStateError("This post uses a traditional skill test")

        existing = self.tests.find_one({"candidate_id": candidate_id, "post_id": post_id})
        if existing:
            if existing.get("submitted"):
                raise ConflictError("Skill test already submitted")
            return public_test(serialize_doc(existing))

        profile = CandidateProfileService(self.db).get(candidate_id) or {}
        generated = self._flows().generate_skill_test(GenerateSkillTestInput(
            job_description=job_description_text(post),
            candidate_skills=profile.get("skills") or []
        ))

        doc = {
            "candidate_id": candidate_id,
            "candidate_name": application["candidate_name"],
            "application_id": application["_id"],
            "post_id": post_id,
            "post_type": post["post_type"],
            "employer_id": post["employer_id"],
            "title": post["title"],
            "company_name": post["company_name"],
            "duration_minutes": TEST_DURATION_MINUTES,
            "questions": [q.model_dump(mode="json") for q in generated.questions],
            "submitted": False,
            "created_at": utcnow()
        }
        result = self.tests.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Generated skill test %s for candidate %s", result.inserted_id, candidate_id)
        return public_test(serialize_doc(doc))

    def submit(self, test_id: str, candidate_id: str, answers: List[Optional[str]]) -> dict:
        """
        Grade a test. Answers are matched to questions by position;
        missing answers count as empty. The AI evaluation runs before
        anything is stored, so a failed evaluation can be retried.
        """
        oid = to_object_id(test_id)
        test = self.tests.find_one({"_id": oid}) if oid else None
        if test is None:
            raise NotFoundError("Skill test not found")
        if test["candidate_id"] != candidate_id:
            raise PermissionDeniedError(path=f"skill_tests/{test_id}", operation="submit")
        if test.get("submitted"):
            raise ConflictError("Skill test already submitted")

        submission = []
        for i, question in enumerate(test["questions"]):
            answer = answers[i] if i < len(answers) else None
            submission.append(SubmissionItem(
                question_text=question["question_text"],
                candidate_answer=(answer or "").strip(),
                correct_answer=question["correct_answer"]
            ))

        evaluation = self._flows().evaluate_skill_test(EvaluateSkillTestInput(submission=submission))

        # Claim the test; a concurrent submit loses here
        claimed = self.tests.update_one(
            {"_id": oid, "submitted": False},
            {"$set": {"submitted": True, "submitted_at": utcnow()}}
        )
        if claimed.modified_count == 0:
            raise ConflictError("Skill test already submitted")

        submission_doc = {
            "test_id": str(oid),
            "candidate_id": candidate_id,
            "post_id": test["post_id"],
            "post_type": test["post_type"],
            "employer_id": test["employer_id"],
            "submitted_at": utcnow(),
            "submission": [item.model_dump() for item in submission]
        }
        submission_id = str(self.submissions.insert_one(submission_doc).inserted_id)

        report = {
            "submission_id": submission_id,
            "candidate_id": candidate_id,
            "candidate_name": test.get("candidate_name", ""),
            "post_id": test["post_id"],
            "post_title": test["title"],
            "employer_id": test["employer_id"],
            "score": evaluation.score,
            "summary": evaluation.summary,
            "strengths": evaluation.strengths,
            "areas_for_improvement": evaluation.areas_for_improvement,
            "generated_at": utcnow()
        }
        report["_id"] = self.reports.insert_one(report).inserted_id
        logger.info("Skill test %s scored %.0f", test_id, evaluation.score)
        return serialize_doc(report)

    # --------------------------------------------------------
    # Listings
    # --------------------------------------------------------

    def candidate_tests(self, candidate_id: str) -> dict:
        """Applications waiting on a skill test, plus the candidate's reports."""
        reports = serialize_docs(self.reports.find({"candidate_id": candidate_id}).sort("generated_at", DESCENDING))
        reported_posts = {r["post_id"] for r in reports}

        pending = []
        for application in self.applications.list_by_candidate(candidate_id, ApplicationStatus.skill_test):
            try:
                post = self.posts.get(application["post_type"], application["post_id"])
            except NotFoundError:
                logger.warning("Application %s points at a missing post", application["_id"])
                continue
            stage = pipeline_service.find_stage(post.get("pipeline", []), "skill_test") or {}
            test_file = self.traditional.find_one({"post_id": post["_id"]}, sort=[("created_at", DESCENDING)])
            pending.append({
                "application_id": application["_id"],
                "post_id": post["_id"],
                "post_type": post["post_type"],
                "post_title": post["title"],
                "company_name": post["company_name"],
                "test_type": stage.get("type"),
                "test_file_url": test_file["test_file_url"] if test_file else None,
                "completed": post["_id"] in reported_posts
            })
        return {"pending": pending, "reports": reports}

    def post_reports(self, post_id: str, employer_id: str) -> List[dict]:
        """Reports for an employer's post with the answers and current application status."""
        post = self.posts.find(post_id)
        self.posts.get_owned(post["post_type"], post_id, employer_id)

        reports = serialize_docs(self.reports.find({"post_id": post_id}).sort("score", DESCENDING))
        for report in reports:
            submission = self.submissions.find_one({"_id": to_object_id(report["submission_id"])})
            report["submission"] = submission["submission"] if submission else None
            application = self.applications.find_for_candidate(report["candidate_id"], post_id)
            report["application_status"] = application["status"] if application else None
        return reports

    # --------------------------------------------------------
    # Traditional tests
    # --------------------------------------------------------

    def upload_traditional(self, post_id: str, employer_id: str, file_name: str,
                           data: bytes, content_type: Optional[str] = None) -> dict:
        post = self.posts.find(post_id)
        self.posts.get_owned(post["post_type"], post_id, employer_id, operation="upload")

        storage = self.storage if self.storage is not None else StorageService()
        url = storage.save_file(traditional_test_path(employer_id, post_id, file_name), data, content_type)
        doc = {
            "post_id": post_id,
            "employer_id": employer_id,
            "test_file_url": url,
            "file_name": file_name,
            "created_at": utcnow()
        }
        result = self.traditional.insert_one(doc)
        return {"id": str(result.inserted_id), "test_file_url": url}
