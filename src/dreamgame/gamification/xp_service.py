"""XP and dreamcoin grants with level recomputation and level-up events."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.db.models import User
from dreamgame.errors import NotFoundError
from dreamgame.gamification.leveling import level_for_xp
from dreamgame.redis_client import publish_event

logger = logging.getLogger(__name__)

LEVEL_UP_CHANNEL = "pubsub:level_up"


@dataclass
class RewardGrant:
    xp: int
    coins: int
    old_level: int
    new_level: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


async def lock_user(db: AsyncSession, user_id: int) -> User:
    """Load a user with ``SELECT ... FOR UPDATE``.

    Serializes quota checks and balance changes for the same user. The row
    is re-read even when already in the identity map.
    """
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def apply_rewards(db: AsyncSession, user: User, xp: int, coins: int) -> RewardGrant:
    """Add XP and dreamcoins to a locked user row and recompute the level.

    This is the only place ``users.xp`` and ``users.level`` are written.
    """
    old_level = user.level
    user.xp = max(user.xp + xp, 0)
    user.dreamcoins = max(user.dreamcoins + coins, 0)
    user.level = level_for_xp(user.xp)
    await db.flush()

    if user.level > old_level:
        logger.info("User %d leveled up: %d -> %d", user.id, old_level, user.level)

    return RewardGrant(xp=xp, coins=coins, old_level=old_level, new_level=user.level)


async def emit_level_up(redis: object | None, user_id: int, grant: RewardGrant) -> None:
    """Broadcast a level-up for activity feeds. Call after commit."""
    if not grant.leveled_up:
        return
    await publish_event(
        redis,
        LEVEL_UP_CHANNEL,
        {
            "user_id": user_id,
            "old_level": grant.old_level,
            "new_level": grant.new_level,
        },
    )
