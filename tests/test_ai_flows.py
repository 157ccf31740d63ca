"""AI flows: prompt -> fake model -> validated output."""
import pytest

from weinds.core.errors import AIFlowError
from weinds.schemas.schemas import (
    ConductAiInterviewInput, DiagnoseErrorInput, EvaluateSkillTestInput, GenerateJobDescriptionInput,
    GenerateLearningRoadmapInput, GenerateSkillTestInput, GenerateSpecializationsInput,
    MatchJobCandidateInput, ReformatResumeInput, SubmissionItem
)
from weinds.services.ai_flows import AIFlowService, render_bullets, render_submission
from weinds.services.llm_client import LLMClient

from tests.conftest import make_skill_test_questions


@pytest.fixture
def flows(fake_llm):
    return AIFlowService(fake_llm)


def test_extract_json_strips_markdown_fence():
    assert LLMClient.extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert LLMClient.extract_json('  {"a": 2}  ') == {"a": 2}


def test_learning_roadmap(flows, fake_llm):
    fake_llm.add_reply({"roadmap": "1. Learn Python", "resources": "Docs"})
    result = flows.generate_learning_roadmap(GenerateLearningRoadmapInput(
        specialization="Data Engineering", user_career_goals="Build pipelines"
    ))
    assert result.roadmap == "1. Learn Python"
    call = fake_llm.calls[0]
    assert call["flow"] == "generate_learning_roadmap"
    assert "Data Engineering" in call["user_content"]


def test_reformat_resume_uses_template_name(flows, fake_llm):
    fake_llm.add_reply({"formatted_resume": "ASHA RAO\nBackend developer"})
    result = flows.reformat_resume(ReformatResumeInput(
        raw_text="Asha Rao, backend developer with 3 years of Python", template_name="Modern"
    ))
    assert result.formatted_resume.startswith("ASHA RAO")
    assert '"Modern"' in fake_llm.calls[0]["system_prompt"]


def test_specializations(flows, fake_llm):
    fake_llm.add_reply('```json\n{"specializations": ["MLOps", "Data Engineering"]}\n```')
    result = flows.generate_specializations(GenerateSpecializationsInput(interests="data", skills="Python"))
    assert result.specializations == ["MLOps", "Data Engineering"]


def test_job_description_joins_skill_list(flows, fake_llm):
    fake_llm.add_reply({
        "title": "Data Analyst",
        "responsibilities": "1. a\n2. b\n3. c\n4. d\n5. e",
        "skills": ["SQL", "Excel", " "],
        "work_mode": "Remote"
    })
    result = flows.generate_job_description(GenerateJobDescriptionInput(text="We need a data analyst, remote"))
    assert result.skills == "SQL, Excel"
    assert result.work_mode.value == "Remote"
    assert result.location is None


def test_job_description_rejects_unknown_work_mode(flows, fake_llm):
    fake_llm.add_reply({"title": "X", "responsibilities": "1. a", "skills": "a", "work_mode": "Mars"})
    with pytest.raises(AIFlowError):
        flows.generate_job_description(GenerateJobDescriptionInput(text="Some job text here"))


def test_match_score_out_of_range(flows, fake_llm):
    fake_llm.add_reply({"match_score": 140, "justification": "x", "recommended_skills": []})
    with pytest.raises(AIFlowError) as exc:
        flows.match_job_candidate(MatchJobCandidateInput(candidate_profile="Python", job_description="Python"))
    assert exc.value.status_code == 502
    assert exc.value.flow == "match_job_candidate"


def test_invalid_json_raises(flows, fake_llm):
    fake_llm.add_reply("Sure! Here is your answer: roadmap...")
    with pytest.raises(AIFlowError) as exc:
        flows.generate_learning_roadmap(GenerateLearningRoadmapInput(specialization="AI", user_career_goals="AI"))
    assert "not valid JSON" in exc.value.detail


def test_interview_turn_includes_history(flows, fake_llm):
    fake_llm.add_reply({"response": "Thanks. What about SQL?", "semantic_score": 70})
    result = flows.conduct_ai_interview(ConductAiInterviewInput(
        candidate_profile="Python dev",
        job_description="Backend role",
        question="I built APIs in FastAPI",
        previous_responses="Interviewer: Tell me about yourself"
    ))
    assert result.semantic_score == 70
    assert "Interviewer: Tell me about yourself" in fake_llm.calls[0]["user_content"]


class TestSkillTestGeneration:
    def test_twenty_questions(self, flows, fake_llm):
        fake_llm.add_reply(make_skill_test_questions())
        result = flows.generate_skill_test(GenerateSkillTestInput(
            job_description="Title: Backend", candidate_skills=["Python", "SQL"]
        ))
        assert len(result.questions) == 20
        assert "- Python\n- SQL" in fake_llm.calls[0]["user_content"]

    def test_wrong_question_count(self, flows, fake_llm):
        fake_llm.add_reply(make_skill_test_questions(19))
        with pytest.raises(AIFlowError):
            flows.generate_skill_test(GenerateSkillTestInput(job_description="Title: Backend"))

    def test_multiple_choice_needs_four_options(self, flows, fake_llm):
        questions = make_skill_test_questions()
        questions["questions"][0]["options"] = ["A", "B", "C"]
        fake_llm.add_reply(questions)
        with pytest.raises(AIFlowError):
            flows.generate_skill_test(GenerateSkillTestInput(job_description="Title: Backend"))


def test_evaluate_skill_test(flows, fake_llm):
    fake_llm.add_reply({
        "score": 82, "summary": "Solid", "strengths": ["Python"], "areas_for_improvement": ["SQL joins"]
    })
    result = flows.evaluate_skill_test(EvaluateSkillTestInput(submission=[
        SubmissionItem(question_text="2+2?", candidate_answer="4", correct_answer="4")
    ]))
    assert result.score == 82
    assert "Candidate's Answer: 4" in fake_llm.calls[0]["user_content"]


def test_diagnose_error_context_is_optional(flows, fake_llm):
    fake_llm.add_reply({"root_cause": "Missing index", "solution": "Create it"})
    flows.diagnose_error(DiagnoseErrorInput(
        error_message="KeyError: 'x'", code_snippet="d['x']", file_path="app.py"
    ))
    assert "User Context" not in fake_llm.calls[0]["user_content"]


def test_render_helpers():
    assert render_bullets(["a", "b"]) == "- a\n- b"
    text = render_submission([SubmissionItem(question_text="Q", candidate_answer="A", correct_answer="C")])
    assert "Question: Q" in text and "Correct Answer: C" in text


class TestAIRoutes:
    def test_requires_login(self, client):
        response = client.post("/api/ai/specializations", json={"interests": "data", "skills": "Python"})
        assert response.status_code in (401, 403)

    def test_roadmap_route(self, client, candidate, fake_llm):
        fake_llm.add_reply({"roadmap": "Step 1", "resources": "Book"})
        response = client.post(
            "/api/ai/learning-roadmap",
            json={"specialization": "Cloud", "user_career_goals": "Become an architect"},
            headers=candidate[0]
        )
        assert response.status_code == 200
        assert response.json() == {"roadmap": "Step 1", "resources": "Book"}

    def test_bad_model_output_is_502(self, client, candidate, fake_llm):
        fake_llm.add_reply({"unexpected": True})
        response = client.post(
            "/api/ai/diagnose-error",
            json={"error_message": "boom", "code_snippet": "x()", "file_path": "a.py"},
            headers=candidate[0]
        )
        assert response.status_code == 502
        assert "diagnose_error" in response.json()["detail"]

    def test_reformat_uploaded_text_resume(self, client, candidate, fake_llm):
        fake_llm.add_reply({"formatted_resume": "Formatted"})
        response = client.post(
            "/api/ai/reformat-resume/upload",
            files={"file": ("resume.txt", b"Asha Rao\nPython developer with five years of experience", "text/plain")},
            data={"template_name": "Classic"},
            headers=candidate[0]
        )
        assert response.status_code == 200, response.text
        assert response.json()["formatted_resume"] == "Formatted"
        assert "Python developer" in fake_llm.calls[0]["user_content"]

    def test_reformat_upload_rejects_unknown_type(self, client, candidate):
        response = client.post(
            "/api/ai/reformat-resume/upload",
            files={"file": ("resume.exe", b"MZ....", "application/octet-stream")},
            headers=candidate[0]
        )
        assert response.status_code == 400

    def test_reformat_upload_too_short(self, client, candidate, fake_llm):
        response = client.post(
            "/api/ai/reformat-resume/upload",
            files={"file": ("cv.txt", b"Asha Rao, Python", "text/plain")},
            headers=candidate[0]
        )
        assert response.status_code == 400
        assert "too short" in response.json()["detail"]
        assert fake_llm.calls == []

    def test_reformat_upload_malformed_pdf(self, client, candidate, fake_llm, monkeypatch):
        from weinds.utils import file_upload

        def broken_reader(stream):
            raise ValueError("invalid literal for int()")

        monkeypatch.setattr(file_upload, "PdfReader", broken_reader)
        response = client.post(
            "/api/ai/reformat-resume/upload",
            files={"file": ("cv.pdf", b"%PDF-1.4 not really a pdf", "application/pdf")},
            headers=candidate[0]
        )
        assert response.status_code == 400
        assert "Error reading PDF" in response.json()["detail"]
        assert fake_llm.calls == []
