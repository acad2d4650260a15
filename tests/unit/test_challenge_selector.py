"""Daily challenge selection tests."""

import pytest

from dreamgame.journey.challenge_selector import (
    SelectionContext,
    deterministic_jitter,
    experience_multiplier,
    level_multiplier,
    select_challenges,
)
from dreamgame.journey.challenge_templates import GENERAL_TEMPLATES, INDUSTRY_TEMPLATES, template_pool


class TestJitter:
    def test_in_range(self):
        for user_id in range(1, 50):
            for day in (1, 15, 31):
                for draw in range(6):
                    assert 0.9 <= deterministic_jitter(user_id, day, draw) <= 1.1

    def test_deterministic(self):
        assert deterministic_jitter(7, 12, 3) == deterministic_jitter(7, 12, 3)


class TestMultipliers:
    @pytest.mark.parametrize(("level", "expected"), [(1, 1.0), (9, 1.0), (10, 1.2), (25, 1.4), (99, 2.8)])
    def test_level(self, level, expected):
        assert level_multiplier(level) == pytest.approx(expected)

    @pytest.mark.parametrize(
        ("experience", "expected"),
        [("beginner", 1.0), ("some", 1.5), ("intermediate", 1.5), ("experienced", 2.0), (None, 1.0), ("?", 1.0)],
    )
    def test_experience(self, experience, expected):
        assert experience_multiplier(experience) == expected


class TestTemplatePool:
    def test_general_only(self):
        assert template_pool(None, None) == GENERAL_TEMPLATES

    def test_industry_added(self):
        pool = template_pool("technology", None)
        assert len(pool) == len(GENERAL_TEMPLATES) + len(INDUSTRY_TEMPLATES["technology"])


class TestSelectChallenges:
    def test_three_challenges_one_quiz(self):
        selection = select_challenges(SelectionContext(user_id=1, day=5))
        assert len(selection.challenges) == 3
        types = [c.template.type for c in selection.challenges]
        assert types.count("quiz") == 1
        assert types[0] == "quiz"

    def test_same_user_same_day_is_deterministic(self):
        ctx = SelectionContext(user_id=11, day=20, industry="ecommerce", stage="startup")
        first = select_challenges(ctx)
        second = select_challenges(ctx)
        assert [c.template for c in first.challenges] == [c.template for c in second.challenges]
        assert [c.xp_reward for c in first.challenges] == [c.xp_reward for c in second.challenges]

    def test_no_repeats_from_history(self):
        history = [t.description for t in GENERAL_TEMPLATES[:5]]
        selection = select_challenges(SelectionContext(user_id=3, day=9, history=history))
        picked = {c.template.description for c in selection.challenges}
        assert not picked & set(history)
        assert not selection.history_reset

    def test_history_appended(self):
        history = ["old challenge"]
        selection = select_challenges(SelectionContext(user_id=3, day=9, history=history))
        assert selection.history[0] == "old challenge"
        assert selection.history[1:] == [c.template.description for c in selection.challenges]

    def test_history_trimmed_to_size(self):
        history = [f"old {i}" for i in range(10)]
        selection = select_challenges(SelectionContext(user_id=3, day=9, history=history), history_size=5)
        assert len(selection.history) == 5
        assert selection.history[-3:] == [c.template.description for c in selection.challenges]

    def test_exhausted_history_resets(self):
        """Fewer than three unseen templates: history resets and three are still picked."""
        history = [t.description for t in GENERAL_TEMPLATES[:7]]
        selection = select_challenges(SelectionContext(user_id=4, day=2, history=history))
        assert selection.history_reset
        assert len(selection.challenges) == 3
        assert selection.history == [c.template.description for c in selection.challenges]

    def test_goal_category_preferred(self):
        selection = select_challenges(SelectionContext(user_id=8, day=1, goals=["networking"]))
        categories = [c.template.category for c in selection.challenges]
        assert "networking" in categories

    def test_rewards_scaled_and_jittered(self):
        ctx = SelectionContext(user_id=21, day=14, level=10, experience="experienced")
        selection = select_challenges(ctx)
        for i, challenge in enumerate(selection.challenges):
            template = challenge.template
            assert challenge.xp_reward == round(template.xp_reward * 2.4 * deterministic_jitter(21, 14, 2 * i))
            assert challenge.coin_reward == round(
                template.coin_reward * 2.4 * deterministic_jitter(21, 14, 2 * i + 1)
            )
