"""Daily reward and login streak tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from dreamgame.db.models import User
from dreamgame.errors import StateConflictError
from dreamgame.gamification.daily_reward_service import (
    can_claim,
    claim_daily_reward,
    get_daily_reward_status,
    next_streak,
    reward_xp,
    streak_bonus,
)

NOW = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)
MIDNIGHT = datetime(2026, 3, 3, 0, 0, tzinfo=timezone.utc)


class TestStreakMath:
    @pytest.mark.parametrize(("streak", "bonus"), [(0, 0), (1, 5), (4, 20), (10, 50), (30, 50)])
    def test_bonus_capped_at_50(self, streak, bonus):
        assert streak_bonus(streak) == bonus

    @pytest.mark.parametrize(("streak", "xp"), [(1, 105), (3, 115), (10, 150), (99, 150)])
    def test_reward_xp(self, streak, xp):
        assert reward_xp(100, streak) == xp

    def test_first_claim(self):
        user = User(last_reward_claim=None, login_streak=0)
        assert can_claim(user, NOW)
        assert next_streak(user, NOW) == 1

    def test_calendar_day_eligibility(self):
        """A claim late in the evening does not block the next morning."""
        user = User(last_reward_claim=NOW.replace(hour=23, minute=50), login_streak=2)
        assert not can_claim(user, NOW.replace(hour=23, minute=59))
        assert can_claim(user, MIDNIGHT + timedelta(hours=1))

    def test_consecutive_day_continues_streak(self):
        user = User(last_reward_claim=NOW, login_streak=4)
        assert next_streak(user, NOW + timedelta(days=1)) == 5

    def test_missed_day_resets_streak(self):
        user = User(last_reward_claim=NOW, login_streak=4)
        assert next_streak(user, NOW + timedelta(days=2)) == 1

    def test_status(self):
        user = User(last_reward_claim=NOW.replace(hour=8), login_streak=3)
        status = get_daily_reward_status(user, NOW)
        assert status == {
            "login_streak": 3,
            "streak_bonus": 15,
            "can_claim": False,
            "next_reward_time": MIDNIGHT,
        }


class TestClaimDailyReward:
    @pytest.mark.asyncio
    async def test_first_claim(self, db_session, make_user):
        user = await make_user()
        claim = await claim_daily_reward(db_session, None, user.id, now=NOW)

        assert claim.login_streak == 1
        assert claim.streak_bonus == 5
        assert claim.grant.xp == 105
        assert claim.grant.coins == 1000
        assert claim.user.dreamcoins == 2000
        assert claim.next_reward_time == MIDNIGHT

    @pytest.mark.asyncio
    async def test_second_claim_same_day_rejected(self, db_session, make_user):
        user = await make_user()
        await claim_daily_reward(db_session, None, user.id, now=NOW)

        with pytest.raises(StateConflictError) as exc_info:
            await claim_daily_reward(db_session, None, user.id, now=NOW + timedelta(hours=2))
        assert exc_info.value.code == "already_claimed"

        stored = await db_session.get(User, user.id, populate_existing=True)
        assert stored.dreamcoins == 2000

    @pytest.mark.asyncio
    async def test_streak_over_consecutive_days(self, db_session, make_user):
        user = await make_user()
        for day in range(3):
            claim = await claim_daily_reward(db_session, None, user.id, now=NOW + timedelta(days=day))
        assert claim.login_streak == 3
        assert claim.grant.xp == 115

        claim = await claim_daily_reward(db_session, None, user.id, now=NOW + timedelta(days=5))
        assert claim.login_streak == 1
