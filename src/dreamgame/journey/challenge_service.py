"""Daily challenge lifecycle: lazy selection and completion."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.clock import day_bounds, utc_day, utcnow
from dreamgame.config import get_settings
from dreamgame.database import atomic
from dreamgame.db.models import DailyChallenge, User
from dreamgame.errors import AlreadyCompletedError, NotFoundError, ValidationError
from dreamgame.gamification.xp_service import RewardGrant, apply_rewards, emit_level_up, lock_user
from dreamgame.journey.challenge_selector import SelectionContext, select_challenges

logger = logging.getLogger(__name__)


async def _challenges_for_day(db: AsyncSession, user_id: int, now: datetime) -> list[DailyChallenge]:
    start, end = day_bounds(now)
    result = await db.execute(
        select(DailyChallenge)
        .where(
            DailyChallenge.user_id == user_id,
            DailyChallenge.created_at >= start,
            DailyChallenge.created_at < end,
        )
        .order_by(DailyChallenge.id)
    )
    return list(result.scalars())


async def get_daily_challenges(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
) -> list[DailyChallenge]:
    """Today's challenges, selected and stored on the first read of the day."""
    now = now or utcnow()
    settings = get_settings()

    existing = await _challenges_for_day(db, user_id, now)
    if existing:
        return existing

    async with atomic(db):
        user = await lock_user(db, user_id)
        # Another request may have stored today's batch while we waited for the lock
        existing = await _challenges_for_day(db, user_id, now)
        if existing:
            return existing

        selection = select_challenges(
            SelectionContext(
                user_id=user.id,
                day=utc_day(now).day,
                level=user.level,
                industry=user.business_industry,
                stage=user.business_stage,
                experience=user.entrepreneur_experience,
                goals=list(user.primary_goals or []),
                skill_levels=dict(user.skill_levels or {}),
                history=list(user.challenge_history or []),
            ),
            count=settings.challenges_per_day,
            history_size=settings.challenge_history_size,
        )

        challenges = [
            DailyChallenge(
                user_id=user_id,
                description=c.template.description,
                type=c.template.type,
                category=c.template.category,
                xp_reward=c.xp_reward,
                coin_reward=c.coin_reward,
                options=list(c.template.options) if c.template.options else None,
                correct_answer=c.template.correct_answer,
                completed=False,
                created_at=now,
            )
            for c in selection.challenges
        ]
        db.add_all(challenges)
        user.challenge_history = selection.history
        await db.flush()

    logger.info(
        "Selected %d daily challenges for user %d (history %d, reset=%s)",
        len(challenges),
        user_id,
        len(selection.history),
        selection.history_reset,
    )
    return challenges


async def complete_challenge(
    db: AsyncSession,
    redis: object | None,
    user_id: int,
    challenge_id: int,
    answer: str | None = None,
    now: datetime | None = None,
) -> tuple[DailyChallenge, User, RewardGrant]:
    """Mark a challenge complete and pay out its rewards.

    Quizzes require the stored correct answer. Challenges of other users are
    reported as not found.
    """
    now = now or utcnow()

    async with atomic(db):
        user = await lock_user(db, user_id)

        challenge = await db.get(DailyChallenge, challenge_id)
        if challenge is None or challenge.user_id != user_id:
            raise NotFoundError("Challenge not found")
        if challenge.completed:
            raise AlreadyCompletedError("Challenge already completed")
        if challenge.type == "quiz" and answer != challenge.correct_answer:
            raise ValidationError("Incorrect answer")

        result = await db.execute(
            update(DailyChallenge)
            .where(DailyChallenge.id == challenge_id, DailyChallenge.completed.is_(False))
            .values(completed=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise AlreadyCompletedError("Challenge already completed")
        await db.refresh(challenge)

        grant = await apply_rewards(db, user, challenge.xp_reward, challenge.coin_reward)

    logger.info("User %d completed challenge %d at %s", user_id, challenge_id, now.isoformat())
    await emit_level_up(redis, user_id, grant)
    return challenge, user, grant
