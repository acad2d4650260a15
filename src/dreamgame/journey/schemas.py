"""Request and response models for journey endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MilestoneResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    order: int
    type: str
    category: str
    difficulty: int
    estimated_duration: str
    xp_reward: int
    coin_reward: int
    requirements: dict[str, Any]
    ai_generated: bool
    generated_at: datetime


class UserMilestoneResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    milestone_id: int
    completed: bool
    completed_at: datetime | None = None
    reflection: str | None = None
    data: dict[str, Any] | None = None
    reward: dict[str, Any] | None = None


class DailyProgress(BaseModel):
    completed_today: int
    can_complete: bool
    completed_boss_battle_today: bool


class JourneyResponse(BaseModel):
    milestones: list[MilestoneResponse]
    user_milestones: list[UserMilestoneResponse]
    current_milestone_id: int | None
    daily_progress: DailyProgress


class CompleteMilestoneRequest(BaseModel):
    reflection: str = Field(max_length=10_000)
    data: dict[str, Any] | None = None


class CompleteMilestoneResponse(BaseModel):
    user_milestone: UserMilestoneResponse
    xp_awarded: int
    coins_awarded: int
    total_xp: int
    level: int
    dreamcoins: int
    leveled_up: bool
    reward: dict[str, Any] | None = None


# --- Daily challenges ---


class ChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    type: str
    category: str
    xp_reward: int
    coin_reward: int
    options: list[str] | None = None
    completed: bool
    created_at: datetime


class DailyChallengesResponse(BaseModel):
    challenges: list[ChallengeResponse]


class CompleteChallengeRequest(BaseModel):
    answer: str | None = None


class CompleteChallengeResponse(BaseModel):
    challenge: ChallengeResponse
    xp_awarded: int
    coins_awarded: int
    total_xp: int
    level: int
    dreamcoins: int
    leveled_up: bool
