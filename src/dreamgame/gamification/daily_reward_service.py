"""Daily dreamcoin reward with a login streak bonus.

A reward can be claimed once per UTC calendar day. Claiming on consecutive
days grows the streak; each streak day adds 5% bonus XP, capped at 50%.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.clock import day_bounds, utc_day, utcnow
from dreamgame.config import get_settings
from dreamgame.database import atomic
from dreamgame.db.models import User
from dreamgame.errors import StateConflictError
from dreamgame.gamification.xp_service import RewardGrant, apply_rewards, emit_level_up, lock_user

logger = logging.getLogger(__name__)

STREAK_BONUS_PER_DAY = 5
MAX_STREAK_BONUS = 50


@dataclass
class DailyRewardClaim:
    user: User
    grant: RewardGrant
    login_streak: int
    streak_bonus: int
    next_reward_time: datetime


def streak_bonus(streak: int) -> int:
    """Bonus XP percentage for a login streak."""
    return min(max(streak, 0) * STREAK_BONUS_PER_DAY, MAX_STREAK_BONUS)


def reward_xp(base_xp: int, streak: int) -> int:
    """``floor(base * (1 + bonus%))`` in integer arithmetic."""
    return base_xp * (100 + streak_bonus(streak)) // 100


def can_claim(user: User, now: datetime) -> bool:
    if user.last_reward_claim is None:
        return True
    return utc_day(user.last_reward_claim) < utc_day(now)


def next_streak(user: User, now: datetime) -> int:
    """Streak after a claim at ``now``: continues only if the last claim was yesterday."""
    if user.last_reward_claim is None:
        return 1
    if utc_day(user.last_reward_claim) == utc_day(now) - timedelta(days=1):
        return user.login_streak + 1
    return 1


def get_daily_reward_status(user: User, now: datetime | None = None) -> dict:
    """Whether today's reward is claimable and when the next one opens."""
    now = now or utcnow()
    claimable = can_claim(user, now)
    return {
        "login_streak": user.login_streak,
        "streak_bonus": streak_bonus(user.login_streak),
        "can_claim": claimable,
        "next_reward_time": None if claimable else day_bounds(now)[1],
    }


async def claim_daily_reward(
    db: AsyncSession,
    redis: object | None,
    user_id: int,
    now: datetime | None = None,
) -> DailyRewardClaim:
    """Grant the daily coins and streak-scaled XP.

    Raises StateConflictError(``already_claimed``) when today's reward was
    already taken.
    """
    now = now or utcnow()
    settings = get_settings()

    async with atomic(db):
        user = await lock_user(db, user_id)
        if not can_claim(user, now):
            raise StateConflictError("Daily reward already claimed today", code="already_claimed")

        streak = next_streak(user, now)
        grant = await apply_rewards(
            db,
            user,
            xp=reward_xp(settings.daily_reward_base_xp, streak),
            coins=settings.daily_reward_coins,
        )
        user.login_streak = streak
        user.last_reward_claim = now

    logger.info("User %d claimed daily reward (streak %d)", user_id, streak)
    await emit_level_up(redis, user_id, grant)

    return DailyRewardClaim(
        user=user,
        grant=grant,
        login_streak=streak,
        streak_bonus=streak_bonus(streak),
        next_reward_time=day_bounds(now)[1],
    )
