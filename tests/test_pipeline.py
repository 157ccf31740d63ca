"""Hiring pipeline configuration and pricing."""
import pytest

from weinds.core.errors import ValidationFailedError
from weinds.schemas.schemas import PipelineConfig, PipelineStage
from weinds.services import pipeline_service


def config(**kwargs):
    return PipelineConfig(**kwargs)


class TestApplicationOption:
    def test_invite_checks_application(self):
        result = pipeline_service.set_application_option(config(), "invite", True)
        assert result.application and result.invite

    def test_unchecking_application_clears_invite(self):
        start = config(application=True, invite=True)
        result = pipeline_service.set_application_option(start, "application", False)
        assert not result.application and not result.invite

    def test_unchecking_invite_keeps_application(self):
        start = config(application=True, invite=True)
        result = pipeline_service.set_application_option(start, "invite", False)
        assert result.application and not result.invite

    def test_original_config_untouched(self):
        start = config()
        pipeline_service.set_application_option(start, "application", True)
        assert start.application is False

    def test_unknown_option(self):
        with pytest.raises(ValueError):
            pipeline_service.set_application_option(config(), "shortlisting", True)


@pytest.mark.parametrize("selections, expected", [
    ({}, 0),
    ({"application": True}, 49),
    ({"application": True, "invite": True}, 99),
    ({"application": True, "skill_test": "traditional"}, 98),
    ({"application": True, "skill_test": "ai"}, 248),
    ({"application": True, "skill_test": "ai", "ai_interview": True}, 447),
    ({"application": True, "invite": True, "skill_test": "ai", "ai_interview": True,
      "final_interview": "in-person"}, 596),
    ({"application": True, "skill_test": "traditional", "final_interview": "online"}, 197),
])
def test_total_cost(selections, expected):
    assert pipeline_service.total_cost(config(**selections)) == expected


def test_invite_replaces_application_in_line_items():
    items = pipeline_service.line_items(config(application=True, invite=True, skill_test="ai"))
    assert [i.key for i in items] == ["invite", "ai_skill_test"]


class TestStepNavigation:
    def test_application_step_needs_an_option(self):
        assert not pipeline_service.next_step_allowed(0, config())
        assert pipeline_service.next_step_allowed(0, config(invite=True))

    def test_skill_test_step_needs_a_test(self):
        assert not pipeline_service.next_step_allowed(2, config(application=True))
        assert pipeline_service.next_step_allowed(2, config(application=True, skill_test="traditional"))

    @pytest.mark.parametrize("step", [1, 3, 4])
    def test_other_steps_always_allowed(self, step):
        assert pipeline_service.next_step_allowed(step, config())

    def test_five_steps(self):
        assert [s["name"] for s in pipeline_service.PIPELINE_STEPS] == [
            "Application", "Shortlisting", "Skill Test", "Interview", "Final Interview"
        ]


class TestStages:
    def test_validate_requires_application(self):
        with pytest.raises(ValidationFailedError):
            pipeline_service.validate(config(skill_test="ai"))

    def test_validate_requires_skill_test(self):
        with pytest.raises(ValidationFailedError):
            pipeline_service.validate(config(application=True))

    def test_full_pipeline_stages(self):
        stages = pipeline_service.to_stages(config(
            application=True, invite=True, skill_test="ai", ai_interview=True, final_interview="online"
        ))
        assert [(s.stage, s.type) for s in stages] == [
            ("application", "invite"),
            ("shortlisting", None),
            ("skill_test", "ai"),
            ("ai_interview", None),
            ("final_interview", "online"),
        ]

    def test_minimal_pipeline_stages(self):
        stages = pipeline_service.to_stages(config(application=True, skill_test="traditional"))
        assert [s.stage for s in stages] == ["application", "shortlisting", "skill_test"]
        assert stages[0].type == "application_page"

    def test_display_name(self):
        assert pipeline_service.stage_display_name(PipelineStage(stage="skill_test", type="ai")) == "skill test (ai)"
        assert pipeline_service.stage_display_name(PipelineStage(stage="ai_interview")) == "ai interview"
        assert pipeline_service.stage_display_name(
            PipelineStage(stage="application", type="application_page")
        ) == "application (application page)"

    def test_find_stage(self):
        stored = [{"stage": "application", "type": "invite"}, {"stage": "skill_test", "type": "ai"}]
        assert pipeline_service.find_stage(stored, "skill_test") == {"stage": "skill_test", "type": "ai"}
        assert pipeline_service.find_stage(stored, "ai_interview") is None
        assert pipeline_service.find_stage(None, "skill_test") is None


def test_quote_endpoint(client, employer):
    response = client.post(
        "/api/pipelines/quote",
        json={"application": True, "skill_test": "ai", "final_interview": "in-person"},
        headers=employer[0]
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total_cost"] == 347
    assert data["currency"] == "INR"
    assert [i["cost"] for i in data["line_items"]] == [49, 199, 99]


def test_quote_endpoint_rejects_incomplete_pipeline(client, employer):
    response = client.post("/api/pipelines/quote", json={"application": True}, headers=employer[0])
    assert response.status_code == 422
    assert "skill test" in response.json()["detail"]


def test_steps_endpoint(client):
    response = client.get("/api/pipelines/steps")
    assert response.status_code == 200
    assert response.json()["costs"]["ai_interview"] == 199
