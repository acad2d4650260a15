"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


# --- XP & levels ---


class XPResponse(BaseModel):
    total_xp: int
    level: int
    current_level_xp: int
    next_level_xp: int
    progress: float
    dreamcoins: int


class LevelEntry(BaseModel):
    level: int
    xp_required: int
    cumulative: int


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]
    max_level: int


# --- Daily reward ---


class DailyRewardStatusResponse(BaseModel):
    login_streak: int
    streak_bonus: int
    can_claim: bool
    next_reward_time: datetime | None = None


class DailyRewardClaimResponse(BaseModel):
    xp_awarded: int
    coins_awarded: int
    login_streak: int
    streak_bonus: int
    next_reward_time: datetime
    total_xp: int
    level: int
    dreamcoins: int
    leveled_up: bool


# --- Leaderboard ---


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: str
    level: int
    xp: int
    dreamcoins: int


class LeaderboardResponse(BaseModel):
    board: str
    entries: list[LeaderboardEntry]
