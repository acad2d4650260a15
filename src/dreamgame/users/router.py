"""User router: profile, mentor persona and business metrics."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.auth.dependencies import get_current_user
from dreamgame.database import get_session
from dreamgame.db.models import User
from dreamgame.users.schemas import (
    BusinessMetricsRequest,
    BusinessMetricsResponse,
    MentorUpdateRequest,
    ProfileUpdateRequest,
    UserResponse,
)
from dreamgame.users.service import set_mentor_personality, update_profile, upsert_business_metrics

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)) -> UserResponse:
    """Get own full profile."""
    return UserResponse.model_validate(user)


@router.put("/me/profile", response_model=UserResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update onboarding profile fields used for personalization."""
    user = await update_profile(db, user, **body.model_dump(exclude_unset=True))
    await db.commit()
    logger.info("profile_updated", user_id=user.id, onboarded=user.has_completed_onboarding)
    return UserResponse.model_validate(user)


@router.put("/me/mentor", response_model=UserResponse)
async def update_my_mentor(
    body: MentorUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    user = await set_mentor_personality(db, user, body.personality)
    await db.commit()
    return UserResponse.model_validate(user)


@router.put("/me/business-metrics", response_model=BusinessMetricsResponse)
async def update_my_business_metrics(
    body: BusinessMetricsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> BusinessMetricsResponse:
    """Replace the latest metrics snapshot. Its industry overrides the profile's."""
    metrics = await upsert_business_metrics(db, user.id, **body.model_dump(exclude_unset=True))
    await db.commit()
    return BusinessMetricsResponse.model_validate(metrics)
