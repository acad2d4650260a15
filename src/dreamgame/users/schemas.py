"""Request and response models for user endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    created_at: datetime | None = None
    xp: int
    level: int
    dreamcoins: int
    login_streak: int
    mentor_personality: str
    current_milestone_id: int | None = None
    business_name: str | None = None
    business_industry: str | None = None
    business_stage: str | None = None
    entrepreneur_experience: str | None = None
    primary_goals: list[str] = []
    skill_levels: dict[str, int] = {}
    has_completed_onboarding: bool


class ProfileUpdateRequest(BaseModel):
    business_name: str | None = Field(None, max_length=128)
    business_industry: str | None = Field(None, max_length=32)
    business_stage: str | None = Field(None, max_length=32)
    entrepreneur_experience: str | None = Field(None, max_length=32)
    primary_goals: list[str] | None = None
    skill_levels: dict[str, int] | None = None


class MentorUpdateRequest(BaseModel):
    personality: str


class BusinessMetricsRequest(BaseModel):
    business_name: str | None = Field(None, max_length=128)
    industry: str | None = Field(None, max_length=32)
    monthly_revenue: int | None = Field(None, ge=0)
    customer_count: int | None = Field(None, ge=0)
    social_followers: int | None = Field(None, ge=0)
    employee_count: int | None = Field(None, ge=0)
    website_visitors: int | None = Field(None, ge=0)
    short_term_goals: str | None = None
    challenges: str | None = None


class BusinessMetricsResponse(BusinessMetricsRequest):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    updated_at: datetime | None = None
