"""
AI Flows - templated LLM calls with schema-validated output.

Each flow is ONE call:
    typed input -> prompt template -> LLM -> JSON -> pydantic output model

Flows:
1. Learning roadmap for a career specialization
2. Resume reformatting into a named template
3. Job description structuring from unstructured text
4. Career specialization suggestions
5. Conversational AI interview turn (with semantic score)
6. Candidate <-> job match score
7. Error diagnosis for developers
8. Skill test generation (exactly 20 questions)
9. Skill test evaluation

If the model output cannot be parsed or does not match the output model,
AIFlowError is raised. Nothing is stored here; callers decide what to persist.
"""

import json
import logging
from typing import List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from weinds.core.errors import AIFlowError
from weinds.services.llm_client import LLMClient, get_llm_client
from weinds.schemas.schemas import (
    GenerateLearningRoadmapInput, GenerateLearningRoadmapOutput,
    ReformatResumeInput, ReformatResumeOutput,
    GenerateJobDescriptionInput, GenerateJobDescriptionOutput,
    GenerateSpecializationsInput, GenerateSpecializationsOutput,
    ConductAiInterviewInput, ConductAiInterviewOutput,
    MatchJobCandidateInput, MatchJobCandidateOutput,
    DiagnoseErrorInput, DiagnoseErrorOutput,
    GenerateSkillTestInput, GenerateSkillTestOutput,
    EvaluateSkillTestInput, EvaluateSkillTestOutput,
)

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


# ============================================================
# TEMPLATE HELPERS
# ============================================================

def render_bullets(items: List[str]) -> str:
    """Render a list as '- item' lines."""
    return "\n".join(f"- {item}" for item in items)


def render_submission(submission) -> str:
    """Render skill test answers as question/answer blocks."""
    blocks = []
    for item in submission:
        blocks.append(
            "---\n"
            f"Question: {item.question_text}\n"
            f"Candidate's Answer: {item.candidate_answer}\n"
            f"Correct Answer: {item.correct_answer}\n"
            "---"
        )
    return "\n".join(blocks)


# ============================================================
# FLOW SERVICE
# ============================================================

class AIFlowService:
    """
    Runs the AI flows against an LLM client.
    """

    def __init__(self, client: LLMClient = None):
        self.client = client if client is not None else get_llm_client()

    def _run(
        self,
        flow: str,
        system_prompt: str,
        user_content: str,
        output_model: Type[OutputT],
        max_tokens: int = 1000
    ) -> OutputT:
        raw = self.client.call_api(system_prompt, user_content, max_tokens=max_tokens, flow=flow)
        try:
            data = self.client.extract_json(raw)
        except json.JSONDecodeError as e:
            raise AIFlowError(flow, f"response is not valid JSON ({e.msg})") from e
        try:
            return output_model.model_validate(data)
        except ValidationError as e:
            logger.debug("Invalid %s output: %s", flow, data)
            raise AIFlowError(flow, f"response does not match schema: {e.error_count()} error(s)") from e

    # --------------------------------------------------------
    # Candidate career tools
    # --------------------------------------------------------

    def generate_learning_roadmap(self, data: GenerateLearningRoadmapInput) -> GenerateLearningRoadmapOutput:
        system_prompt = """You are an AI career mentor. Generate a learning roadmap for the user, so that they can achieve their goals.
Return ONLY valid JSON:
{
  "roadmap": "step-by-step roadmap as a single string",
  "resources": "recommended learning resources as a single string"
}"""
        user_content = (
            f"User Career Goals: {data.user_career_goals}\n"
            f"Specific Specialization: {data.specialization}"
        )
        return self._run("generate_learning_roadmap", system_prompt, user_content,
                         GenerateLearningRoadmapOutput, max_tokens=1500)

    def reformat_resume(self, data: ReformatResumeInput) -> ReformatResumeOutput:
        system_prompt = f"""You are an AI resume expert. Reformat the resume text you are given into a professional format using the "{data.template_name}" template.
Keep every fact from the original; do not invent employers, dates or degrees.
Return ONLY valid JSON:
{{"formatted_resume": "the reformatted resume as a single string"}}"""
        user_content = f"Resume Text:\n{data.raw_text}"
        return self._run("reformat_resume", system_prompt, user_content,
                         ReformatResumeOutput, max_tokens=2000)

    def generate_specializations(self, data: GenerateSpecializationsInput) -> GenerateSpecializationsOutput:
        system_prompt = """You are a career advisor. Given the interests and skills of a user, suggest a few potential career specializations.
Only include specializations that are realistic given the inputs, and don't be afraid to suggest ones that may not be immediately obvious but could be a good fit.
Return ONLY valid JSON:
{"specializations": ["Specialization 1", "Specialization 2"]}"""
        user_content = f"Interests: {data.interests}\nSkills: {data.skills}"
        return self._run("generate_specializations", system_prompt, user_content,
                         GenerateSpecializationsOutput, max_tokens=400)

    # --------------------------------------------------------
    # Employer tools
    # --------------------------------------------------------

    def generate_job_description(self, data: GenerateJobDescriptionInput) -> GenerateJobDescriptionOutput:
        system_prompt = """You are an AI assistant that creates structured job descriptions from raw text.
Provide a value for every field. If a value is not explicitly mentioned, make a reasonable assumption from context
(e.g. "Remote" when no location is given, a salary range estimated from the title, "2-3 years" when experience is unclear).
Return ONLY valid JSON:
{
  "title": "string",
  "responsibilities": "numbered, newline-separated list with at least 5 points, e.g. \\"1. Do a thing.\\n2. Do another thing.\\"",
  "skills": "comma-separated required skills",
  "experience": "e.g. Entry Level, 2-4 years, Senior",
  "salary": "salary or salary range",
  "location": "e.g. San Francisco, CA or Remote",
  "work_mode": "Remote | Hybrid | On-site",
  "education": "education requirements"
}"""
        user_content = f"Text: {data.text}"
        return self._run("generate_job_description", system_prompt, user_content,
                         GenerateJobDescriptionOutput, max_tokens=1200)

    def match_job_candidate(self, data: MatchJobCandidateInput) -> MatchJobCandidateOutput:
        system_prompt = """You are an expert AI recruitment assistant. Analyze a candidate's profile against a job description.
1. Match score: from 0 to 100 based on the alignment of skills, experience and education. 100 is a perfect match.
2. Justification: one concise sentence explaining the score.
3. Recommended skills: 3 to 5 crucial skills from the job description that are missing from the profile or could be highlighted more strongly.
Return ONLY valid JSON:
{"match_score": number, "justification": "string", "recommended_skills": ["skill1", "skill2", "skill3"]}"""
        user_content = (
            f"**Candidate Profile:**\n{data.candidate_profile}\n\n"
            f"**Job Description:**\n{data.job_description}"
        )
        return self._run("match_job_candidate", system_prompt, user_content,
                         MatchJobCandidateOutput, max_tokens=400)

    # --------------------------------------------------------
    # Assessment
    # --------------------------------------------------------

    def conduct_ai_interview(self, data: ConductAiInterviewInput) -> ConductAiInterviewOutput:
        system_prompt = """You are an AI interviewer evaluating candidates based on their profile and the job description.
Respond to the latest message as the interviewer (acknowledge it briefly, then ask the next relevant question)
and give a semantic score (0-100) for the candidate's suitability for the role so far.
Return ONLY valid JSON:
{"response": "string", "semantic_score": number}"""
        user_content = (
            f"Candidate Profile: {data.candidate_profile}\n"
            f"Job Description: {data.job_description}\n\n"
            f"Previous Responses: {data.previous_responses or ''}\n\n"
            f"Question: {data.question}"
        )
        return self._run("conduct_ai_interview", system_prompt, user_content,
                         ConductAiInterviewOutput, max_tokens=600)

    def generate_skill_test(self, data: GenerateSkillTestInput) -> GenerateSkillTestOutput:
        system_prompt = """You are an expert technical assessor creating skill tests for job candidates.
Generate a unique 20-question test from the job description and the candidate's skills.
Rules:
1. Exactly 20 questions: 15 "multiple-choice" and 5 "short-answer".
2. 15 questions come from the responsibilities and required skills of the job description, 5 from the candidate's skills.
3. Difficulty: 2 to 5 "easy", 2 to 5 "intermediate", the rest "hard".
4. Do not repeat questions.
5. Multiple-choice questions have exactly 4 options and a correct_answer equal to one of them.
6. Short-answer questions have a concise, accurate correct_answer and no options.
Return ONLY valid JSON:
{
  "questions": [
    {
      "question_text": "string",
      "question_type": "multiple-choice | short-answer",
      "options": ["a", "b", "c", "d"],
      "correct_answer": "string",
      "topic": "skill or concept tested, e.g. React",
      "difficulty": "easy | intermediate | hard"
    }
  ]
}"""
        skills = render_bullets(data.candidate_skills) if data.candidate_skills else "- (none listed)"
        user_content = (
            f"**Job Description:**\n{data.job_description}\n\n"
            f"**Candidate's Skills:**\n{skills}"
        )
        return self._run("generate_skill_test", system_prompt, user_content,
                         GenerateSkillTestOutput, max_tokens=6000)

    def evaluate_skill_test(self, data: EvaluateSkillTestInput) -> EvaluateSkillTestOutput:
        system_prompt = """You are an expert technical evaluator. Analyze a candidate's skill test submission.
1. Score: 0 to 100 for the whole submission. Consider the correct multiple-choice answers and the quality, accuracy and completeness of short answers.
2. Summary: one concise paragraph on overall performance.
3. Strengths: 2-3 specific topics or skills where the candidate showed strong knowledge.
4. Areas for improvement: 2-3 specific topics or skills to focus on.
Return ONLY valid JSON:
{"score": number, "summary": "string", "strengths": ["string"], "areas_for_improvement": ["string"]}"""
        user_content = f"**Candidate's Submission:**\n{render_submission(data.submission)}"
        return self._run("evaluate_skill_test", system_prompt, user_content,
                         EvaluateSkillTestOutput, max_tokens=1000)

    # --------------------------------------------------------
    # Developer tools
    # --------------------------------------------------------

    def diagnose_error(self, data: DiagnoseErrorInput) -> DiagnoseErrorOutput:
        system_prompt = """You are an expert software developer and debugger for a Python web backend built on FastAPI, MongoDB and an LLM API.
Analyze the error details and give:
1. root_cause: the single most likely reason for the error (consider race conditions, incorrect API usage, permission problems, simple syntax errors).
2. solution: a clear step-by-step fix, including a corrected code snippet where applicable.
Return ONLY valid JSON:
{"root_cause": "string", "solution": "string"}"""
        user_content = (
            "**Error Details:**\n"
            f"- File Path: {data.file_path}\n"
            f"- Error Message:\n```\n{data.error_message}\n```\n"
            f"- Code Snippet:\n```\n{data.code_snippet}\n```"
        )
        if data.context:
            user_content += f"\n- User Context: {data.context}"
        return self._run("diagnose_error", system_prompt, user_content,
                         DiagnoseErrorOutput, max_tokens=1200)
