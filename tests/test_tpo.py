"""Training & placement officer views."""
import pytest

from tests.conftest import PIPELINE_MINIMAL


@pytest.fixture
def tpo(client, register):
    headers, user_id = register("tpo", "tpo@college.com")
    client.put("/api/tpo/profile", json={"institute_name": "City Engineering College"}, headers=headers)
    return headers, user_id


def join_institute(client, headers, institute_id, branch="CSE"):
    response = client.put(
        "/api/candidates/profile", json={"institute_id": institute_id, "branch": branch}, headers=headers
    )
    assert response.status_code == 200


def test_students_and_placement(client, tpo, candidate, register, create_post, set_status):
    join_institute(client, candidate[0], tpo[1])
    ravi, _ = register("candidate", "ravi@x.com")
    client.put("/api/candidates/profile", json={"full_name": "Ravi Kumar"}, headers=ravi)
    join_institute(client, ravi, tpo[1], branch="ECE")
    # Not in this institute
    outsider, _ = register("candidate", "out@x.com")
    client.put("/api/candidates/profile", json={"full_name": "Out Sider"}, headers=outsider)

    post = create_post(pipeline=PIPELINE_MINIMAL)
    application = client.post(
        "/api/applications", json={"post_type": "job", "post_id": post["id"]}, headers=candidate[0]
    ).json()
    set_status(application["id"], "Hired")

    students = client.get("/api/tpo/students", headers=tpo[0]).json()
    assert {s["full_name"]: s["placement_status"] for s in students} == {
        "Asha Rao": "Placed",
        "Ravi Kumar": "Eligible",
    }

    found = client.get("/api/tpo/students", params={"search": "ravi"}, headers=tpo[0]).json()
    assert [s["branch"] for s in found] == ["ECE"]


def test_dashboard(client, tpo, candidate, create_post, register):
    join_institute(client, candidate[0], tpo[1])
    create_post(title="Backend Engineer")
    create_post(post_type="internship", title="Data Intern", pipeline=PIPELINE_MINIMAL)

    data = client.get("/api/tpo/dashboard", headers=tpo[0]).json()
    assert data["institute_name"] == "City Engineering College"
    assert data["total_students"] == 1
    assert data["placed_students"] == 0
    assert data["companies"] == 1
    assert data["active_internships"] == 1
    assert {d["title"] for d in data["recent_drives"]} == {"Backend Engineer", "Data Intern"}


def test_internships_and_companies(client, tpo, create_post):
    create_post(title="Backend Engineer")
    create_post(post_type="internship", title="Data Intern", pipeline=PIPELINE_MINIMAL)

    internships = client.get("/api/tpo/internships", headers=tpo[0]).json()
    assert [p["title"] for p in internships] == ["Data Intern"]

    companies = client.get("/api/tpo/companies", headers=tpo[0]).json()
    assert [c["company_name"] for c in companies] == ["Acme Corp"]


def test_candidate_cannot_use_tpo_routes(client, candidate):
    assert client.get("/api/tpo/dashboard", headers=candidate[0]).status_code == 403
