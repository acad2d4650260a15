"""Daily challenge lifecycle tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from dreamgame.db.models import User
from dreamgame.errors import AlreadyCompletedError, NotFoundError, ValidationError
from dreamgame.journey.challenge_service import complete_challenge, get_daily_challenges

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


class TestGetDailyChallenges:
    @pytest.mark.asyncio
    async def test_three_challenges_stored_once_per_day(self, db_session, make_user):
        user = await make_user(business_industry="food")
        first = await get_daily_challenges(db_session, user.id, now=NOW)
        again = await get_daily_challenges(db_session, user.id, now=NOW + timedelta(hours=10))

        assert len(first) == 3
        assert [c.id for c in again] == [c.id for c in first]
        assert sum(c.type == "quiz" for c in first) == 1

        stored = await db_session.get(User, user.id, populate_existing=True)
        assert stored.challenge_history == [c.description for c in first]

    @pytest.mark.asyncio
    async def test_new_day_new_unseen_challenges(self, db_session, make_user):
        user = await make_user()
        day1 = await get_daily_challenges(db_session, user.id, now=NOW)
        day2 = await get_daily_challenges(db_session, user.id, now=NOW + timedelta(days=1))

        assert {c.id for c in day1}.isdisjoint({c.id for c in day2})
        assert {c.description for c in day1}.isdisjoint({c.description for c in day2})
        stored = await db_session.get(User, user.id, populate_existing=True)
        assert len(stored.challenge_history) == 6

    @pytest.mark.asyncio
    async def test_pool_exhaustion_still_yields_three(self, db_session, make_user):
        user = await make_user()
        for day in range(5):
            challenges = await get_daily_challenges(db_session, user.id, now=NOW + timedelta(days=day))
            assert len(challenges) == 3

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundError):
            await get_daily_challenges(db_session, 404, now=NOW)


class TestCompleteChallenge:
    @pytest.mark.asyncio
    async def test_task_completion_pays_rewards(self, db_session, make_user):
        user = await make_user()
        challenges = await get_daily_challenges(db_session, user.id, now=NOW)
        task = next(c for c in challenges if c.type == "task")

        challenge, updated, grant = await complete_challenge(db_session, None, user.id, task.id, now=NOW)

        assert challenge.completed
        assert grant.xp == task.xp_reward
        assert updated.xp == task.xp_reward
        assert updated.dreamcoins == 1000 + task.coin_reward

    @pytest.mark.asyncio
    async def test_twice_rejected(self, db_session, make_user):
        user = await make_user()
        challenges = await get_daily_challenges(db_session, user.id, now=NOW)
        task = next(c for c in challenges if c.type == "task")
        task_id, xp_reward = task.id, task.xp_reward
        await complete_challenge(db_session, None, user.id, task_id, now=NOW)

        with pytest.raises(AlreadyCompletedError):
            await complete_challenge(db_session, None, user.id, task_id, now=NOW)
        stored = await db_session.get(User, user.id, populate_existing=True)
        assert stored.xp == xp_reward

    @pytest.mark.asyncio
    async def test_quiz_requires_correct_answer(self, db_session, make_user):
        user = await make_user()
        challenges = await get_daily_challenges(db_session, user.id, now=NOW)
        quiz = next(c for c in challenges if c.type == "quiz")
        quiz_id, correct = quiz.id, quiz.correct_answer
        wrong = next(o for o in quiz.options if o != correct)

        with pytest.raises(ValidationError, match="Incorrect answer"):
            await complete_challenge(db_session, None, user.id, quiz_id, answer=wrong, now=NOW)
        stored = await db_session.get(User, user.id, populate_existing=True)
        assert stored.xp == 0

        challenge, _, _ = await complete_challenge(db_session, None, user.id, quiz_id, answer=correct, now=NOW)
        assert challenge.completed

    @pytest.mark.asyncio
    async def test_other_users_challenge_not_found(self, db_session, make_user):
        owner = await make_user()
        intruder = await make_user()
        challenges = await get_daily_challenges(db_session, owner.id, now=NOW)

        with pytest.raises(NotFoundError):
            await complete_challenge(db_session, None, intruder.id, challenges[0].id, now=NOW)

    @pytest.mark.asyncio
    async def test_missing_challenge(self, db_session, make_user):
        user = await make_user()
        with pytest.raises(NotFoundError):
            await complete_challenge(db_session, None, user.id, 777, now=NOW)
