"""
Hiring Pipeline Service - pipeline configuration and cost calculation.

An employer builds a pipeline in five steps:
1. Application   - application page (49) or invite to apply (99, includes the page)
2. Shortlisting  - free, informational
3. Skill Test    - compulsory: AI (199) or traditional (49)
4. Interview     - optional AI interview (199)
5. Final Interview - optional, in-person or online (99)

Total cost is a running sum over STAGE_COSTS; invite replaces application.
The stored form of a pipeline is an ordered list of {stage, type} dicts.
"""

from typing import List, Optional

from weinds.core.errors import ValidationFailedError
from weinds.schemas.schemas import (
    PipelineConfig, PipelineStage, PipelineLineItem, PipelineQuote, SkillTestType
)


# Prices in INR
STAGE_COSTS = {
    "application": 49,
    "invite": 99,
    "ai_skill_test": 199,
    "traditional_skill_test": 49,
    "ai_interview": 199,
    "final_interview": 99,
}

STAGE_LABELS = {
    "application": "Application Page",
    "invite": "Invite to Apply",
    "ai_skill_test": "AI Skill Test",
    "traditional_skill_test": "Traditional Skill Test",
    "ai_interview": "AI Interview",
    "final_interview": "Final Interview",
}

PIPELINE_STEPS = [
    {"id": "application", "name": "Application"},
    {"id": "shortlisting", "name": "Shortlisting"},
    {"id": "skill_test", "name": "Skill Test"},
    {"id": "interview", "name": "Interview"},
    {"id": "final_interview", "name": "Final Interview"},
]

CURRENCY = "INR"


def set_application_option(config: PipelineConfig, option: str, checked: bool) -> PipelineConfig:
    """
    Toggle 'application' or 'invite' keeping the two consistent:
    inviting implies the application page, and dropping the
    application page drops the invite too.
    """
    if option not in ("application", "invite"):
        raise ValueError(f"Unknown application option: {option}")

    if option == "invite" and checked:
        return config.model_copy(update={"application": True, "invite": True})
    if option == "application" and not checked:
        return config.model_copy(update={"application": False, "invite": False})
    return config.model_copy(update={option: checked})


def line_items(config: PipelineConfig) -> List[PipelineLineItem]:
    """Priced selections, in pipeline order."""
    keys = []
    if config.invite:
        keys.append("invite")
    elif config.application:
        keys.append("application")

    if config.skill_test == SkillTestType.ai:
        keys.append("ai_skill_test")
    elif config.skill_test == SkillTestType.traditional:
        keys.append("traditional_skill_test")

    if config.ai_interview:
        keys.append("ai_interview")

    if config.final_interview:
        keys.append("final_interview")

    return [PipelineLineItem(key=k, label=STAGE_LABELS[k], cost=STAGE_COSTS[k]) for k in keys]


def total_cost(config: PipelineConfig) -> int:
    return sum(item.cost for item in line_items(config))


def next_step_allowed(step: int, config: PipelineConfig) -> bool:
    """Whether the builder may move past the given step."""
    if step == 0 and not config.application and not config.invite:
        return False
    if step == 2 and not config.skill_test:
        return False
    return True


def validate(config: PipelineConfig) -> None:
    if not config.application and not config.invite:
        raise ValidationFailedError("Pipeline needs an application page or invite stage")
    if not config.skill_test:
        raise ValidationFailedError("Pipeline needs a skill test (AI or traditional)")


def to_stages(config: PipelineConfig) -> List[PipelineStage]:
    """Convert selections to the ordered stage list stored on a post."""
    validate(config)
    stages = [
        PipelineStage(stage="application", type="invite" if config.invite else "application_page"),
        PipelineStage(stage="shortlisting"),
        PipelineStage(stage="skill_test", type=config.skill_test.value),
    ]
    if config.ai_interview:
        stages.append(PipelineStage(stage="ai_interview"))
    if config.final_interview:
        stages.append(PipelineStage(stage="final_interview", type=config.final_interview.value))
    return stages


def stage_display_name(stage: PipelineStage) -> str:
    if not stage or not stage.stage:
        return ""
    name = stage.stage.replace("_", " ")
    if stage.type:
        return f"{name} ({stage.type.replace('_', ' ')})"
    return name


def quote(config: PipelineConfig) -> PipelineQuote:
    items = line_items(config)
    return PipelineQuote(
        stages=to_stages(config),
        line_items=items,
        total_cost=sum(item.cost for item in items),
        currency=CURRENCY
    )


def find_stage(stages: List[dict], stage: str) -> Optional[dict]:
    """Find a stage in a stored pipeline (list of dicts)."""
    for s in stages or []:
        if s.get("stage") == stage:
            return s
    return None
