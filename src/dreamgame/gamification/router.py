"""Gamification API endpoints: XP, levels, daily reward, leaderboards."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.auth.dependencies import get_current_user
from dreamgame.database import get_session
from dreamgame.db.models import User
from dreamgame.dependencies import get_redis_dep
from dreamgame.errors import NotFoundError
from dreamgame.gamification.daily_reward_service import claim_daily_reward, get_daily_reward_status
from dreamgame.gamification.leveling import MAX_LEVEL, cumulative_xp, level_progress, level_table, xp_to_reach_level
from dreamgame.gamification.schemas import (
    AllLevelsResponse,
    DailyRewardClaimResponse,
    DailyRewardStatusResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    LevelEntry,
    XPResponse,
)
from dreamgame.users.service import get_leaderboard

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Get all level thresholds."""
    return AllLevelsResponse(levels=[LevelEntry(**row) for row in level_table()], max_level=MAX_LEVEL)


@router.get("/levels/{level}", response_model=LevelEntry)
async def get_level(level: int):
    """XP needed to enter one level."""
    if not 1 <= level <= MAX_LEVEL:
        raise NotFoundError("Level not found")
    return LevelEntry(level=level, xp_required=xp_to_reach_level(level), cumulative=cumulative_xp(level))


@router.get("/leaderboard/{board}", response_model=LeaderboardResponse)
async def leaderboard(board: str, db: AsyncSession = Depends(get_session)):
    """Top players by ``xp`` or ``dreamcoins``."""
    users = await get_leaderboard(db, board)
    return LeaderboardResponse(
        board=board,
        entries=[
            LeaderboardEntry(
                rank=i + 1,
                user_id=u.id,
                username=u.username,
                level=u.level,
                xp=u.xp,
                dreamcoins=u.dreamcoins,
            )
            for i, u in enumerate(users)
        ],
    )


# ── Authenticated endpoints ──


@router.get("/users/me/xp", response_model=XPResponse)
async def get_my_xp(user: User = Depends(get_current_user)):
    """Current XP, level and progress towards the next level."""
    info = level_progress(user.xp)
    return XPResponse(
        total_xp=user.xp,
        level=info["current_level"],
        current_level_xp=info["current_level_xp"],
        next_level_xp=info["next_level_xp"],
        progress=info["progress"],
        dreamcoins=user.dreamcoins,
    )


@router.get("/rewards/daily", response_model=DailyRewardStatusResponse)
async def daily_reward_status(user: User = Depends(get_current_user)):
    return DailyRewardStatusResponse(**get_daily_reward_status(user))


@router.post("/rewards/daily/claim", response_model=DailyRewardClaimResponse)
async def claim_daily(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Claim today's dreamcoins and streak-scaled XP."""
    claim = await claim_daily_reward(db, redis, user.id)
    return DailyRewardClaimResponse(
        xp_awarded=claim.grant.xp,
        coins_awarded=claim.grant.coins,
        login_streak=claim.login_streak,
        streak_bonus=claim.streak_bonus,
        next_reward_time=claim.next_reward_time,
        total_xp=claim.user.xp,
        level=claim.user.level,
        dreamcoins=claim.user.dreamcoins,
        leveled_up=claim.grant.leveled_up,
    )
