"""Rule-based personalization tests."""

import pytest

from dreamgame.journey.personalization import (
    GENERIC_CONTEXT,
    INDUSTRY_CONTEXTS,
    MetricsSnapshot,
    PersonalizationInput,
    Profile,
    RuleBasedPersonalizer,
    compute_difficulty,
    compute_focus_areas,
    suggested_skills,
)


class TestDifficulty:
    def test_newcomer_starts_at_1(self):
        assert compute_difficulty(0, None, None) == 1

    def test_volume_and_pace_raise_difficulty(self):
        assert compute_difficulty(21, None, None) == 2
        assert compute_difficulty(51, None, None) == 3
        assert compute_difficulty(51, 12.0, "none") == 3

    def test_no_history_gives_no_pace_bonus(self):
        assert compute_difficulty(0, None, "some") == 2

    def test_slow_pace_gives_no_bonus(self):
        assert compute_difficulty(0, 30.0, "some") == 2

    @pytest.mark.parametrize(
        ("experience", "expected"),
        [("experienced", 3), ("some", 2), ("none", 1), (None, 1)],
    )
    def test_experience_boosts_newcomers(self, experience, expected):
        assert compute_difficulty(0, 48.0, experience) == expected

    @pytest.mark.parametrize(
        ("experience", "cap"),
        [("experienced", 5), ("some", 4), ("none", 3), (None, 3)],
    )
    def test_experience_caps(self, experience, cap):
        assert compute_difficulty(100, 1.0, experience) == cap

    def test_experienced_reaches_5(self):
        assert compute_difficulty(21, 1.0, "experienced") == 5
        assert compute_difficulty(21, None, "experienced") == 4

    def test_always_in_range(self):
        for completed in (0, 10, 25, 60, 500):
            for hours in (None, 0.5, 48.0):
                for exp in ("experienced", "some", "none", None):
                    assert 1 <= compute_difficulty(completed, hours, exp) <= 5


class TestFocusAreas:
    def test_weak_skills_first(self):
        areas = compute_focus_areas({"marketing": 1, "sales": 2, "finance": 5}, "idea")
        assert areas[:2] == ["marketing", "sales"]
        assert "finance" not in areas

    def test_at_most_two_weak_skills(self):
        areas = compute_focus_areas({"a": 1, "b": 1, "c": 1}, None)
        assert areas[:2] == ["a", "b"]
        assert "c" not in areas

    def test_stage_defaults(self):
        assert compute_focus_areas({}, "startup") == [
            "growth_strategy",
            "operations",
            "market_research",
            "financial_planning",
        ]

    def test_generic_defaults_without_stage(self):
        assert compute_focus_areas({}, None) == ["market_research", "financial_planning", "business_model"]

    def test_no_duplicates(self):
        areas = compute_focus_areas({"market_research": 1}, "idea")
        assert len(areas) == len(set(areas))
        assert len(areas) <= 4

    def test_suggested_skills(self):
        assert suggested_skills(["market_research", "operations"]) == ["customer_research", "problem_solving"]


class TestRuleBasedPersonalizer:
    def test_profile_industry(self):
        result = RuleBasedPersonalizer().personalize(
            PersonalizationInput(profile=Profile(industry="ecommerce", stage="idea"))
        )
        assert result.industry == "ecommerce"
        assert result.industry_context == INDUSTRY_CONTEXTS["ecommerce"]
        assert result.difficulty == 1

    def test_metrics_industry_overrides_profile(self):
        result = RuleBasedPersonalizer().personalize(
            PersonalizationInput(
                profile=Profile(industry="ecommerce"),
                metrics=MetricsSnapshot(industry="food"),
            )
        )
        assert result.industry == "food"
        assert result.industry_context == INDUSTRY_CONTEXTS["food"]

    @pytest.mark.parametrize("industry", [None, "other", "space_mining"])
    def test_unknown_industry_gets_generic_context(self, industry):
        result = RuleBasedPersonalizer().personalize(PersonalizationInput(profile=Profile(industry=industry)))
        assert result.industry_context == GENERIC_CONTEXT

    def test_deterministic(self):
        data = PersonalizationInput(
            profile=Profile(industry="technology", stage="planning", skill_levels={"sales": 1}),
            completed_milestones=30,
            average_completion_hours=5.0,
        )
        personalizer = RuleBasedPersonalizer()
        assert personalizer.personalize(data) == personalizer.personalize(data)
