"""Journey API endpoints: daily milestones and daily challenges."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.auth.dependencies import get_current_user
from dreamgame.database import get_session
from dreamgame.db.models import User
from dreamgame.dependencies import get_content_generator, get_personalizer, get_redis_dep
from dreamgame.journey.challenge_service import complete_challenge, get_daily_challenges
from dreamgame.journey.content_generator import ContentGenerator
from dreamgame.journey.milestone_service import complete_milestone, get_journey
from dreamgame.journey.personalization import Personalizer
from dreamgame.journey.schemas import (
    ChallengeResponse,
    CompleteChallengeRequest,
    CompleteChallengeResponse,
    CompleteMilestoneRequest,
    CompleteMilestoneResponse,
    DailyChallengesResponse,
    DailyProgress,
    JourneyResponse,
    MilestoneResponse,
    UserMilestoneResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Journey"])


@router.get("/journey", response_model=JourneyResponse)
async def journey(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    generator: ContentGenerator = Depends(get_content_generator),
    personalizer: Personalizer = Depends(get_personalizer),
):
    """Today's milestones, generating them on the first read of the day."""
    view = await get_journey(db, user.id, generator, personalizer)
    return JourneyResponse(
        milestones=[MilestoneResponse.model_validate(m) for m in view.milestones],
        user_milestones=[UserMilestoneResponse.model_validate(um) for um in view.user_milestones],
        current_milestone_id=view.current_milestone_id,
        daily_progress=DailyProgress(
            completed_today=view.completed_today,
            can_complete=view.can_complete,
            completed_boss_battle_today=view.completed_boss_battle_today,
        ),
    )


@router.post("/journey/milestones/{milestone_id}/complete", response_model=CompleteMilestoneResponse)
async def complete_journey_milestone(
    milestone_id: int,
    body: CompleteMilestoneRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    result = await complete_milestone(db, redis, user.id, milestone_id, body.reflection, body.data)
    return CompleteMilestoneResponse(
        user_milestone=UserMilestoneResponse.model_validate(result.user_milestone),
        xp_awarded=result.milestone.xp_reward,
        coins_awarded=result.milestone.coin_reward,
        total_xp=result.user.xp,
        level=result.user.level,
        dreamcoins=result.user.dreamcoins,
        leveled_up=result.leveled_up,
        reward=result.reward,
    )


@router.get("/challenges/daily", response_model=DailyChallengesResponse)
async def daily_challenges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Today's three challenges. Quiz answers are never returned."""
    challenges = await get_daily_challenges(db, user.id)
    return DailyChallengesResponse(challenges=[ChallengeResponse.model_validate(c) for c in challenges])


@router.post("/challenges/daily/{challenge_id}/complete", response_model=CompleteChallengeResponse)
async def complete_daily_challenge(
    challenge_id: int,
    body: CompleteChallengeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    challenge, updated, grant = await complete_challenge(db, redis, user.id, challenge_id, body.answer)
    return CompleteChallengeResponse(
        challenge=ChallengeResponse.model_validate(challenge),
        xp_awarded=grant.xp,
        coins_awarded=grant.coins,
        total_xp=updated.xp,
        level=updated.level,
        dreamcoins=updated.dreamcoins,
        leveled_up=grant.leveled_up,
    )
