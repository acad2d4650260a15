"""Rule-based personalization for daily milestone batches.

Derives a difficulty (1-5), focus areas, suggested skills and an industry
context from a user's profile and completion history. Pure: the same input
always yields the same result, so a learned model can replace it behind the
``Personalizer`` protocol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

COMPETENCY_THRESHOLD = 3
MAX_FOCUS_AREAS = 4
MAX_WEAK_AREAS = 2

# Experience tier -> (boost, highest difficulty it allows)
EXPERIENCE_DIFFICULTY: dict[str, tuple[int, int]] = {
    "experienced": (2, 5),
    "some": (1, 4),
}
DEFAULT_EXPERIENCE_DIFFICULTY = (0, 3)

STAGE_FOCUS_AREAS: dict[str, list[str]] = {
    "idea": ["market_research", "business_model"],
    "planning": ["financial_planning", "go_to_market"],
    "startup": ["growth_strategy", "operations"],
    "established": ["optimization", "scaling"],
}

DEFAULT_FOCUS_AREAS = ["market_research", "financial_planning", "business_model"]

FOCUS_AREA_SKILLS: dict[str, str] = {
    "market_research": "customer_research",
    "financial_planning": "financial_analysis",
    "business_model": "business_strategy",
    "growth_strategy": "growth_hacking",
}
DEFAULT_SKILL = "problem_solving"


@dataclass(frozen=True)
class IndustryContext:
    goals: list[str]
    terminology: list[str]
    metrics: list[str]


GENERIC_CONTEXT = IndustryContext(
    goals=["Define core value proposition", "Identify target market", "Create business model"],
    terminology=["market validation", "customer acquisition", "revenue model"],
    metrics=["customer acquisition cost", "lifetime value", "conversion rate"],
)

INDUSTRY_CONTEXTS: dict[str, IndustryContext] = {
    "technology": IndustryContext(
        goals=["Develop MVP", "Technical validation", "User experience optimization"],
        terminology=["scalability", "user experience", "technical architecture"],
        metrics=["user engagement", "churn rate", "technical performance"],
    ),
    "ecommerce": IndustryContext(
        goals=["Product sourcing", "Inventory management", "Online store optimization"],
        terminology=["conversion rate", "cart abandonment", "customer retention"],
        metrics=["average order value", "inventory turnover", "customer lifetime value"],
    ),
    "services": IndustryContext(
        goals=["Package service offerings", "Standardize delivery", "Build referral pipeline"],
        terminology=["service level", "utilization", "client retention"],
        metrics=["billable utilization", "client satisfaction", "repeat client rate"],
    ),
    "health": IndustryContext(
        goals=["Validate clinical need", "Plan compliance path", "Build practitioner trust"],
        terminology=["patient outcomes", "compliance", "care pathway"],
        metrics=["patient retention", "appointment fill rate", "outcome scores"],
    ),
    "education": IndustryContext(
        goals=["Design curriculum", "Prove learning outcomes", "Grow learner community"],
        terminology=["learning outcomes", "engagement", "completion"],
        metrics=["course completion rate", "learner satisfaction", "enrollment growth"],
    ),
    "food": IndustryContext(
        goals=["Perfect signature menu", "Control food costs", "Build local following"],
        terminology=["food cost", "table turnover", "menu engineering"],
        metrics=["food cost percentage", "average ticket size", "repeat visits"],
    ),
}


@dataclass
class Profile:
    industry: str | None = None
    stage: str | None = None
    experience: str | None = None
    skill_levels: dict[str, int] = field(default_factory=dict)
    goals: list[str] = field(default_factory=list)


@dataclass
class MetricsSnapshot:
    business_name: str | None = None
    industry: str | None = None
    monthly_revenue: int | None = None
    short_term_goals: str | None = None
    challenges: str | None = None


@dataclass
class PersonalizationInput:
    profile: Profile
    completed_milestones: int = 0
    # None when the user has no completion history yet
    average_completion_hours: float | None = None
    metrics: MetricsSnapshot | None = None


@dataclass
class PersonalizationResult:
    difficulty: int
    focus_areas: list[str]
    suggested_skills: list[str]
    industry_context: IndustryContext
    industry: str | None = None


class Personalizer(Protocol):
    def personalize(self, data: PersonalizationInput) -> PersonalizationResult: ...


def compute_difficulty(
    completed_milestones: int,
    average_completion_hours: float | None,
    experience: str | None,
) -> int:
    """Difficulty 1-5 from volume, pace and experience tier."""
    difficulty = 1
    if completed_milestones > 20:
        difficulty += 1
    if completed_milestones > 50:
        difficulty += 1
    if average_completion_hours is not None and average_completion_hours < 24:
        difficulty += 1

    boost, cap = EXPERIENCE_DIFFICULTY.get(experience or "", DEFAULT_EXPERIENCE_DIFFICULTY)
    difficulty = min(difficulty + boost, cap)
    return max(1, min(5, difficulty))


def compute_focus_areas(skill_levels: dict[str, int], stage: str | None) -> list[str]:
    """Weak skills first, then stage defaults, then generic defaults."""
    weak = [skill for skill, level in skill_levels.items() if level < COMPETENCY_THRESHOLD]
    candidates = weak[:MAX_WEAK_AREAS] + STAGE_FOCUS_AREAS.get(stage or "", []) + DEFAULT_FOCUS_AREAS
    # dict.fromkeys dedups while keeping first-seen order
    return list(dict.fromkeys(candidates))[:MAX_FOCUS_AREAS]


def suggested_skills(focus_areas: list[str]) -> list[str]:
    return [FOCUS_AREA_SKILLS.get(area, DEFAULT_SKILL) for area in focus_areas]


def effective_industry(profile: Profile, metrics: MetricsSnapshot | None) -> str | None:
    """The latest metrics snapshot wins over the onboarding profile."""
    if metrics is not None and metrics.industry:
        return metrics.industry
    return profile.industry


def industry_context(industry: str | None) -> IndustryContext:
    if not industry or industry == "other":
        return GENERIC_CONTEXT
    return INDUSTRY_CONTEXTS.get(industry, GENERIC_CONTEXT)


class RuleBasedPersonalizer:
    """Default personalizer built from fixed rules and lookup tables."""

    def personalize(self, data: PersonalizationInput) -> PersonalizationResult:
        profile = data.profile
        focus_areas = compute_focus_areas(profile.skill_levels or {}, profile.stage)
        industry = effective_industry(profile, data.metrics)
        return PersonalizationResult(
            difficulty=compute_difficulty(
                data.completed_milestones,
                data.average_completion_hours,
                profile.experience,
            ),
            focus_areas=focus_areas,
            suggested_skills=suggested_skills(focus_areas),
            industry_context=industry_context(industry),
            industry=industry,
        )
