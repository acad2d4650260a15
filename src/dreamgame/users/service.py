"""User profile, mentor, business metrics and leaderboard logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from dreamgame.clock import utcnow
from dreamgame.config import get_settings
from dreamgame.db.models import BusinessMetrics, User
from dreamgame.errors import StateConflictError, ValidationError
from dreamgame.journey.content_generator import MENTOR_PERSONALITIES

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

LEADERBOARD_SIZE = 10
LEADERBOARD_COLUMNS = {
    "xp": User.xp,
    "dreamcoins": User.dreamcoins,
}

PROFILE_FIELDS = (
    "business_name",
    "business_industry",
    "business_stage",
    "entrepreneur_experience",
    "primary_goals",
    "skill_levels",
)

METRICS_FIELDS = (
    "business_name",
    "industry",
    "monthly_revenue",
    "customer_count",
    "social_followers",
    "employee_count",
    "website_visitors",
    "short_term_goals",
    "challenges",
)


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, username: str, email: str | None = None) -> User:
    """Create a user with the starting dreamcoin balance.

    Raises:
        StateConflictError: If the username or email is already taken.
    """
    user = User(
        username=username,
        email=email,
        xp=0,
        level=1,
        dreamcoins=get_settings().starting_dreamcoins,
        challenge_history=[],
        primary_goals=[],
        skill_levels={},
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise StateConflictError("Username or email already taken", code="user_exists") from e
    logger.info("user_created", user_id=user.id, username=username)
    return user


async def update_profile(db: AsyncSession, user: User, **fields: Any) -> User:
    """Update onboarding profile fields. ``None`` values are left unchanged.

    Raises:
        ValidationError: If a skill level is outside 1-5.
    """
    skill_levels = fields.get("skill_levels")
    if skill_levels is not None:
        for skill, level in skill_levels.items():
            if not 1 <= level <= 5:
                raise ValidationError(f"Skill level for {skill} must be between 1 and 5")

    for name in PROFILE_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(user, name, value)

    if user.business_industry and user.business_stage and user.entrepreneur_experience:
        user.has_completed_onboarding = True

    await db.flush()
    return user


async def set_mentor_personality(db: AsyncSession, user: User, personality: str) -> User:
    """Pick the mentor persona used for the user's conversations.

    Raises:
        ValidationError: If the personality is unknown.
    """
    if personality not in MENTOR_PERSONALITIES:
        raise ValidationError("Invalid personality type")
    user.mentor_personality = personality
    await db.flush()
    return user


async def get_business_metrics(db: AsyncSession, user_id: int) -> BusinessMetrics | None:
    result = await db.execute(select(BusinessMetrics).where(BusinessMetrics.user_id == user_id))
    return result.scalar_one_or_none()


async def upsert_business_metrics(db: AsyncSession, user_id: int, **fields: Any) -> BusinessMetrics:
    """Replace the user's latest business metrics snapshot."""
    metrics = await get_business_metrics(db, user_id)
    if metrics is None:
        metrics = BusinessMetrics(user_id=user_id)
        db.add(metrics)

    for name in METRICS_FIELDS:
        if name in fields:
            setattr(metrics, name, fields[name])
    metrics.updated_at = utcnow()

    await db.flush()
    logger.info("business_metrics_updated", user_id=user_id)
    return metrics


async def get_leaderboard(db: AsyncSession, board: str, limit: int = LEADERBOARD_SIZE) -> list[User]:
    """Top users by XP or dreamcoins.

    Raises:
        ValidationError: If the board is unknown.
    """
    column = LEADERBOARD_COLUMNS.get(board)
    if column is None:
        raise ValidationError(f"Unknown leaderboard: {board}")
    result = await db.execute(select(User).order_by(column.desc(), User.id).limit(limit))
    return list(result.scalars())
