"""Skill matching and recommendations."""
import pytest

from weinds.services.matching_service import (
    candidate_profile_text, cosine_similarity, post_text, skill_match_score
)

from tests.conftest import PIPELINE_MINIMAL


def test_cosine_similarity():
    assert cosine_similarity([1, 0], [1, 0]) == pytest.approx(1.0)
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([0, 0], [1, 1]) == 0.0
    with pytest.raises(ValueError):
        cosine_similarity([1, 2], [1, 2, 3])


class TestSkillMatchScore:
    def test_identical(self):
        assert skill_match_score(["Python", "SQL"], "python, sql") == 100.0

    def test_partial(self):
        # 2 shared of 3 and 3: 2 / (sqrt(3) * sqrt(3))
        assert skill_match_score(["Python", "SQL", "Go"], "Python, SQL, Docker") == pytest.approx(66.67)

    def test_no_overlap(self):
        assert skill_match_score(["Go"], "Python") == 0.0

    def test_empty(self):
        assert skill_match_score([], "Python") == 0.0
        assert skill_match_score(["Python"], "") == 0.0


def test_text_rendering():
    profile = {"full_name": "Asha", "skills": ["Python", "SQL"]}
    assert "Skills: Python, SQL" in candidate_profile_text(profile)
    assert "Work Mode: Not specified" in post_text({"title": "Dev"})


def test_recommendations(client, create_post, candidate):
    create_post(title="Python Backend", skills="Python, SQL")
    create_post(title="Frontend", skills="React, CSS")
    create_post(post_type="internship", title="Data Intern", skills="Python, Pandas, Spark", pipeline=PIPELINE_MINIMAL)

    response = client.get("/api/candidates/recommendations", headers=candidate[0])
    assert response.status_code == 200
    data = response.json()
    assert [r["post"]["title"] for r in data] == ["Python Backend", "Data Intern"]
    assert data[0]["skill_match_score"] > data[1]["skill_match_score"]


def test_recommendations_follow_preference(client, create_post, candidate):
    create_post(title="Python Backend", skills="Python, SQL")
    create_post(post_type="internship", title="Data Intern", skills="Python", pipeline=PIPELINE_MINIMAL)
    client.put("/api/candidates/profile", json={"preference": "Internship"}, headers=candidate[0])

    data = client.get("/api/candidates/recommendations", headers=candidate[0]).json()
    assert [r["post"]["title"] for r in data] == ["Data Intern"]


def test_ai_match_route(client, candidate, fake_llm):
    fake_llm.add_reply({"match_score": 64, "justification": "Some overlap", "recommended_skills": ["Kafka"]})
    response = client.post(
        "/api/ai/match",
        json={"candidate_profile": "Python, SQL", "job_description": "Data engineer with Kafka"},
        headers=candidate[0]
    )
    assert response.status_code == 200
    assert response.json()["recommended_skills"] == ["Kafka"]
