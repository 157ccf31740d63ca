"""Candidate, employer and institute profiles."""
from weinds.services.mongo_service import profile_completeness


class TestCompleteness:
    def test_empty(self):
        assert profile_completeness({}) == 0
        assert profile_completeness(None) == 0

    def test_skills_count_as_an_item(self):
        assert profile_completeness({"skills": ["Python"]}) == 14

    def test_blank_strings_do_not_count(self):
        assert profile_completeness({"full_name": "Asha", "headline": "  "}) == 14

    def test_full(self):
        profile = {
            "full_name": "Asha", "headline": "Dev", "location": "Pune", "experience": "2y",
            "education": "B.Tech", "achievements": "Hackathon", "skills": ["Python"]
        }
        assert profile_completeness(profile) == 100


def test_default_candidate_profile(client, register):
    headers, user_id = register("candidate", "new@x.com", full_name="New Person")
    response = client.get("/api/candidates/profile", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["candidate_id"] == user_id
    assert data["email"] == "new@x.com"
    assert data["full_name"] == "New Person"
    assert data["skills"] == []
    assert data["employment_status"] == "Fresher"
    assert data["preference"] == "Both"
    assert data["completeness"] == 14


def test_candidate_profile_merge(client, candidate):
    headers, _ = candidate
    response = client.put(
        "/api/candidates/profile",
        json={"location": "Chennai", "employment_status": "Working"},
        headers=headers
    )
    assert response.status_code == 200
    data = response.json()
    # Earlier fields survive a partial save
    assert data["headline"] == "Backend developer"
    assert data["skills"] == ["Python", "SQL", "FastAPI"]
    assert data["location"] == "Chennai"
    assert data["employment_status"] == "Working"
    assert data["email"] == "asha@example.com"


def test_candidate_skills_list_is_trimmed(client, candidate):
    response = client.put(
        "/api/candidates/profile", json={"skills": [" Go ", "", "Rust"]}, headers=candidate[0]
    )
    assert response.json()["skills"] == ["Go", "Rust"]


def test_employer_profile_and_verification(client, employer):
    headers, user_id = employer
    response = client.get("/api/employers/profile", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["employer_id"] == user_id
    assert data["company_name"] == "Acme Corp"
    assert data["is_verified"] is False
    assert data["verification_status"] is None

    response = client.post(
        "/api/employers/verification", json={"registration_number": "U12345KA"}, headers=headers
    )
    assert response.status_code == 201
    assert response.json()["verification_status"] == "Pending"


def test_employer_cannot_set_verified(client, employer, db):
    headers, user_id = employer
    client.put("/api/employers/profile", json={"industry": "Software", "is_verified": True}, headers=headers)
    assert db.employers.find_one({"_id": user_id}).get("is_verified") is None


def test_company_directory(client, employer, candidate):
    response = client.get("/api/employers/companies", headers=candidate[0])
    assert response.status_code == 200
    assert [c["company_name"] for c in response.json()] == ["Acme Corp"]


def test_tpo_profile(client, register):
    headers, user_id = register("tpo", "tpo@college.com")
    response = client.put(
        "/api/tpo/profile",
        json={"institute_name": "City Engineering College", "contact_email": "placements@college.com"},
        headers=headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["institute_id"] == user_id
    assert data["institute_name"] == "City Engineering College"

    response = client.get("/api/tpo/profile", headers=headers)
    assert response.json()["contact_email"] == "placements@college.com"
