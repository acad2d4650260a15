"""Daily milestone lifecycle: lazy regeneration, journey view and completion.

Per user and UTC day:

    no batch today --(first read)--> batch generated --> 0..5 completions

At most ``daily_completion_limit`` completions a day, of which at most
``daily_boss_limit`` boss battles. Quotas are counted while holding the
user row lock; a completion is either a conditional UPDATE on an incomplete
row or an INSERT guarded by UNIQUE(user_id, milestone_id), so the same
milestone can never be completed twice.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.clock import as_utc, day_bounds, utc_day, utcnow
from dreamgame.config import get_settings
from dreamgame.database import atomic
from dreamgame.db.models import BusinessMetrics, Item, Milestone, User, UserItem, UserMilestone
from dreamgame.errors import (
    AlreadyCompletedError,
    BossLimitReachedError,
    DailyLimitReachedError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from dreamgame.gamification.reward_roller import roll_item
from dreamgame.gamification.xp_service import apply_rewards, emit_level_up, lock_user
from dreamgame.journey.content_generator import ContentGenerator, MentorContext
from dreamgame.journey.milestone_generator import generate_daily_milestones, parse_requirements
from dreamgame.journey.personalization import (
    MetricsSnapshot,
    PersonalizationInput,
    Personalizer,
    Profile,
    RuleBasedPersonalizer,
)
from dreamgame.redis_client import publish_event
from dreamgame.users.service import get_business_metrics, get_user_by_id

logger = logging.getLogger(__name__)

BOSS_REWARD_CHANNEL = "pubsub:boss_reward"


@dataclass
class JourneyView:
    milestones: list[Milestone]
    user_milestones: list[UserMilestone]
    current_milestone_id: int | None
    completed_today: int
    completed_boss_battle_today: bool
    can_complete: bool
    regenerated: bool = False


@dataclass
class MilestoneCompletion:
    user_milestone: UserMilestone
    milestone: Milestone
    user: User
    reward: dict | None = None
    leveled_up: bool = False


def needs_regeneration(user: User, now: datetime) -> bool:
    """True when the user has no batch for ``now``'s UTC day."""
    if user.last_milestone_generation is None:
        return True
    return utc_day(user.last_milestone_generation) != utc_day(now)


# ---------------------------------------------------------------------------
# Personalization inputs
# ---------------------------------------------------------------------------


async def completion_stats(db: AsyncSession, user_id: int) -> tuple[int, float | None]:
    """Completed milestone count and the mean hours from generation to completion."""
    result = await db.execute(
        select(UserMilestone.completed_at, Milestone.generated_at)
        .join(Milestone, Milestone.id == UserMilestone.milestone_id)
        .where(UserMilestone.user_id == user_id, UserMilestone.completed.is_(True))
    )
    rows = result.all()
    durations = [
        (as_utc(completed_at) - as_utc(generated_at)).total_seconds() / 3600
        for completed_at, generated_at in rows
        if completed_at is not None and generated_at is not None
    ]
    average = sum(durations) / len(durations) if durations else None
    return len(rows), average


def _metrics_snapshot(metrics: BusinessMetrics | None) -> MetricsSnapshot | None:
    if metrics is None:
        return None
    return MetricsSnapshot(
        business_name=metrics.business_name,
        industry=metrics.industry,
        monthly_revenue=metrics.monthly_revenue,
        short_term_goals=metrics.short_term_goals,
        challenges=metrics.challenges,
    )


def mentor_context(user: User, metrics: BusinessMetrics | None) -> MentorContext:
    return MentorContext(
        level=user.level,
        xp=user.xp,
        personality=user.mentor_personality,
        industry=user.business_industry,
        stage=user.business_stage,
        experience=user.entrepreneur_experience,
        goals=list(user.primary_goals or []),
        skill_levels=dict(user.skill_levels or {}),
        business_name=metrics.business_name if metrics else user.business_name,
        monthly_revenue=metrics.monthly_revenue if metrics else None,
        customer_count=metrics.customer_count if metrics else None,
        social_followers=metrics.social_followers if metrics else None,
        employee_count=metrics.employee_count if metrics else None,
        website_visitors=metrics.website_visitors if metrics else None,
    )


# ---------------------------------------------------------------------------
# Regeneration
# ---------------------------------------------------------------------------


async def regenerate_daily_milestones(
    db: AsyncSession,
    user_id: int,
    generator: ContentGenerator,
    personalizer: Personalizer | None = None,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> bool:
    """Replace the user's incomplete AI milestones with today's batch.

    Content is generated before the user row is locked. Under the lock the
    need is checked again, so two concurrent first reads generate once.
    Returns True if a new batch was stored.
    """
    now = now or utcnow()
    personalizer = personalizer or RuleBasedPersonalizer()

    user = await get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not needs_regeneration(user, now):
        return False

    metrics = await get_business_metrics(db, user_id)
    completed, average_hours = await completion_stats(db, user_id)
    personalization = personalizer.personalize(PersonalizationInput(
        profile=Profile(
            industry=user.business_industry,
            stage=user.business_stage,
            experience=user.entrepreneur_experience,
            skill_levels=dict(user.skill_levels or {}),
            goals=list(user.primary_goals or []),
        ),
        completed_milestones=completed,
        average_completion_hours=average_hours,
        metrics=_metrics_snapshot(metrics),
    ))
    # Release the connection while content is generated
    await db.commit()
    generated = await generate_daily_milestones(generator, personalization, mentor_context(user, metrics), rng)

    async with atomic(db):
        user = await lock_user(db, user_id)
        if not needs_regeneration(user, now):
            logger.info("Milestones for user %d already regenerated today", user_id)
            return False

        # Incomplete rows on AI milestones are replaced; completed history stays
        stale_result = await db.execute(
            select(UserMilestone.milestone_id)
            .join(Milestone, Milestone.id == UserMilestone.milestone_id)
            .where(
                UserMilestone.user_id == user_id,
                UserMilestone.completed.is_(False),
                Milestone.ai_generated.is_(True),
            )
        )
        stale_ids = list(stale_result.scalars())
        if stale_ids:
            await db.execute(
                delete(UserMilestone)
                .where(
                    UserMilestone.user_id == user_id,
                    UserMilestone.completed.is_(False),
                    UserMilestone.milestone_id.in_(stale_ids),
                )
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Milestone)
                .where(
                    Milestone.id.in_(stale_ids),
                    Milestone.ai_generated.is_(True),
                    ~exists().where(UserMilestone.milestone_id == Milestone.id),
                )
                .execution_options(synchronize_session=False)
            )

        milestones = [
            Milestone(
                title=g.title,
                description=g.description,
                order=g.order,
                type=g.type,
                category=g.category,
                difficulty=g.difficulty,
                estimated_duration=g.estimated_duration,
                xp_reward=g.xp_reward,
                coin_reward=g.coin_reward,
                requirements=g.requirements.model_dump(mode="json"),
                ai_generated=g.ai_generated,
                generated_at=now,
            )
            for g in generated
        ]
        db.add_all(milestones)
        await db.flush()

        db.add_all([
            UserMilestone(user_id=user_id, milestone_id=m.id, completed=False)
            for m in milestones
        ])
        user.current_milestone_id = milestones[0].id
        user.last_milestone_generation = now
        await db.flush()

    logger.info(
        "Regenerated %d milestones for user %d (%d stale removed)",
        len(milestones),
        user_id,
        len(stale_ids),
    )
    return True


# ---------------------------------------------------------------------------
# Journey view
# ---------------------------------------------------------------------------


async def _daily_counts(db: AsyncSession, user_id: int, now: datetime) -> tuple[int, int]:
    """Milestones and boss battles the user completed on ``now``'s UTC day."""
    start, end = day_bounds(now)
    result = await db.execute(
        select(
            func.count(UserMilestone.id),
            func.count(Milestone.id).filter(Milestone.type == "boss_battle"),
        )
        .join(Milestone, Milestone.id == UserMilestone.milestone_id)
        .where(
            UserMilestone.user_id == user_id,
            UserMilestone.completed.is_(True),
            UserMilestone.completed_at >= start,
            UserMilestone.completed_at < end,
        )
    )
    completed, bosses = result.one()
    return completed or 0, bosses or 0


async def get_journey(
    db: AsyncSession,
    user_id: int,
    generator: ContentGenerator,
    personalizer: Personalizer | None = None,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> JourneyView:
    """Today's milestones, the user's progress on them and the daily quota state.

    Regenerates first when the user has no batch for today, so repeated
    reads on the same day return the same batch.
    """
    now = now or utcnow()
    settings = get_settings()
    regenerated = await regenerate_daily_milestones(db, user_id, generator, personalizer, rng, now)

    start, end = day_bounds(now)
    result = await db.execute(
        select(Milestone, UserMilestone)
        .join(UserMilestone, UserMilestone.milestone_id == Milestone.id)
        .where(
            UserMilestone.user_id == user_id,
            Milestone.generated_at >= start,
            Milestone.generated_at < end,
        )
        .order_by(Milestone.order)
    )
    rows = result.all()
    milestones = [row.Milestone for row in rows]
    user_milestones = [row.UserMilestone for row in rows]
    current = next((um.milestone_id for um in user_milestones if not um.completed), None)

    completed_today, bosses_today = await _daily_counts(db, user_id, now)
    return JourneyView(
        milestones=milestones,
        user_milestones=user_milestones,
        current_milestone_id=current,
        completed_today=completed_today,
        completed_boss_battle_today=bosses_today >= settings.daily_boss_limit,
        can_complete=completed_today < settings.daily_completion_limit,
        regenerated=regenerated,
    )


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


def _validate_submission(milestone: Milestone, data: dict | None) -> None:
    """Every reflection field the milestone asks for must be filled in."""
    try:
        requirements = parse_requirements(milestone.requirements or {})
    except PydanticValidationError as e:
        logger.error("Milestone %d has malformed requirements: %s", milestone.id, e)
        raise StateConflictError(
            "Milestone requirements are malformed", code="milestone_malformed"
        ) from e

    data = data or {}
    for name in requirements.fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Missing required field: {name}")


async def get_or_create_item(db: AsyncSession, reward: dict) -> Item:
    """Catalog row for a rolled reward, inserted the first time it is awarded."""
    query = select(Item).where(
        Item.name == reward["name"],
        Item.rarity == reward["rarity"],
        Item.category == reward["category"],
    )
    item = (await db.execute(query)).scalar_one_or_none()
    if item is not None:
        return item

    try:
        async with db.begin_nested():
            item = Item(
                name=reward["name"],
                description=reward["description"],
                rarity=reward["rarity"],
                category=reward["category"],
            )
            db.add(item)
    except IntegrityError:
        # Inserted concurrently by another completion
        item = (await db.execute(query)).scalar_one()
    return item


async def _advance_current_milestone(db: AsyncSession, user: User) -> None:
    result = await db.execute(
        select(Milestone.id)
        .join(UserMilestone, UserMilestone.milestone_id == Milestone.id)
        .where(UserMilestone.user_id == user.id, UserMilestone.completed.is_(False))
        .order_by(Milestone.generated_at.desc(), Milestone.order)
        .limit(1)
    )
    user.current_milestone_id = result.scalar_one_or_none()


async def complete_milestone(
    db: AsyncSession,
    redis: object | None,
    user_id: int,
    milestone_id: int,
    reflection: str,
    data: dict | None = None,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> MilestoneCompletion:
    """Complete a milestone and pay out its rewards.

    Raises:
        ValidationError: blank reflection or a required field is missing.
        NotFoundError: the milestone does not exist.
        AlreadyCompletedError: the user already completed it.
        DailyLimitReachedError: the daily completion quota is used up.
        BossLimitReachedError: a boss battle was already completed today.
    """
    now = now or utcnow()
    settings = get_settings()

    if not reflection or not reflection.strip():
        raise ValidationError("Reflection is required")

    async with atomic(db):
        user = await lock_user(db, user_id)

        milestone = await db.get(Milestone, milestone_id, populate_existing=True)
        if milestone is None:
            raise NotFoundError("Milestone not found")

        existing = (await db.execute(
            select(UserMilestone).where(
                UserMilestone.user_id == user_id,
                UserMilestone.milestone_id == milestone_id,
            )
        )).scalar_one_or_none()
        if existing is not None and existing.completed:
            raise AlreadyCompletedError("Milestone already completed")

        _validate_submission(milestone, data)

        completed_today, bosses_today = await _daily_counts(db, user_id, now)
        if completed_today >= settings.daily_completion_limit:
            raise DailyLimitReachedError(
                f"Daily limit of {settings.daily_completion_limit} milestones reached"
            )
        is_boss = milestone.type == "boss_battle"
        if is_boss and bosses_today >= settings.daily_boss_limit:
            raise BossLimitReachedError(
                f"Daily limit of {settings.daily_boss_limit} boss battles reached"
            )

        if existing is not None:
            result = await db.execute(
                update(UserMilestone)
                .where(UserMilestone.id == existing.id, UserMilestone.completed.is_(False))
                .values(completed=True, completed_at=now, reflection=reflection, data=data)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise AlreadyCompletedError("Milestone already completed")
            await db.refresh(existing)
            user_milestone = existing
        else:
            user_milestone = UserMilestone(
                user_id=user_id,
                milestone_id=milestone_id,
                completed=True,
                completed_at=now,
                reflection=reflection,
                data=data,
            )
            db.add(user_milestone)
            try:
                await db.flush()
            except IntegrityError as e:
                raise AlreadyCompletedError("Milestone already completed") from e

        reward = None
        if is_boss:
            reward = {**roll_item(rng), "acquired": now.isoformat()}
            item = await get_or_create_item(db, reward)
            db.add(UserItem(
                user_id=user_id,
                item_id=item.id,
                acquired_at=now,
                source="boss_battle",
            ))
            user_milestone.reward = reward

        grant = await apply_rewards(db, user, milestone.xp_reward, milestone.coin_reward)
        await _advance_current_milestone(db, user)

    logger.info(
        "User %d completed milestone %d (+%d XP, +%d coins)",
        user_id,
        milestone_id,
        milestone.xp_reward,
        milestone.coin_reward,
    )
    await emit_level_up(redis, user_id, grant)
    if reward is not None:
        await publish_event(
            redis,
            BOSS_REWARD_CHANNEL,
            {"user_id": user_id, "milestone_id": milestone_id, "item": reward},
        )

    return MilestoneCompletion(
        user_milestone=user_milestone,
        milestone=milestone,
        user=user,
        reward=reward,
        leveled_up=grant.leveled_up,
    )
