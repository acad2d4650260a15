"""ORM models for the progression engine.

The same schema is created for PostgreSQL by alembic/versions/001_baseline.py.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dreamgame.db.base import Base, BigIntPK, JSONType


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """A player. XP, level and dreamcoins are mutated only by the engine."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("xp >= 0", name="ck_users_xp_non_negative"),
        CheckConstraint("dreamcoins >= 0", name="ck_users_dreamcoins_non_negative"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # --- Progression ---
    xp: Mapped[int] = mapped_column(BigInteger, default=0, server_default="0", nullable=False)
    level: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)
    dreamcoins: Mapped[int] = mapped_column(BigInteger, default=1000, server_default="1000", nullable=False)
    login_streak: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    last_reward_claim: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_milestone_generation: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_milestone_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    challenge_history: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    mentor_personality: Mapped[str] = mapped_column(
        String(32), default="balanced", server_default="balanced", nullable=False
    )

    # --- Business profile ---
    business_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    business_industry: Mapped[str | None] = mapped_column(String(32), nullable=True)
    business_stage: Mapped[str | None] = mapped_column(String(32), nullable=True)
    entrepreneur_experience: Mapped[str | None] = mapped_column(String(32), nullable=True)
    primary_goals: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    skill_levels: Mapped[dict[str, int]] = mapped_column(JSONType, default=dict, nullable=False)
    has_completed_onboarding: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class BusinessMetrics(Base):
    """Latest self-reported business metrics snapshot (one row per user)."""

    __tablename__ = "business_metrics"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    business_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(32), nullable=True)
    monthly_revenue: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    customer_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    social_followers: Mapped[int | None] = mapped_column(Integer, nullable=True)
    employee_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    website_visitors: Mapped[int | None] = mapped_column(Integer, nullable=True)
    short_term_goals: Mapped[str | None] = mapped_column(Text, nullable=True)
    challenges: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# ---------------------------------------------------------------------------
# Journey: milestones
# ---------------------------------------------------------------------------


class Milestone(Base):
    """One slot of a daily batch. Immutable once created."""

    __tablename__ = "milestones"
    # Ids of deleted stale milestones are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    order: Mapped[int] = mapped_column("order", Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # task | boss_battle
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    difficulty: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    estimated_duration: Mapped[str] = mapped_column(String(16), nullable=False)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    coin_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    requirements: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    ai_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class UserMilestone(Base):
    """A user's progress on one milestone. Flips incomplete -> complete once."""

    __tablename__ = "user_milestones"
    __table_args__ = (
        UniqueConstraint("user_id", "milestone_id", name="uq_user_milestones_user_milestone"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    milestone_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("milestones.id", ondelete="CASCADE"), nullable=False
    )
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reflection: Mapped[str | None] = mapped_column(Text, nullable=True)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    reward: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)


# ---------------------------------------------------------------------------
# Journey: daily challenges
# ---------------------------------------------------------------------------


class DailyChallenge(Base):
    """A rule-based daily challenge (task or quiz)."""

    __tablename__ = "daily_challenges"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(8), nullable=False)  # task | quiz
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    coin_reward: Mapped[int] = mapped_column(Integer, nullable=False)
    options: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    correct_answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Items, inventory and market
# ---------------------------------------------------------------------------


class Item(Base):
    """Catalog entry, inserted lazily the first time it is awarded."""

    __tablename__ = "items"
    __table_args__ = (
        UniqueConstraint("name", "rarity", "category", name="uq_items_name_rarity_category"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class UserItem(Base):
    """Ownership of one physical copy of an item."""

    __tablename__ = "user_items"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    item_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("items.id"), nullable=False)
    acquired_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    equipped: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    item: Mapped[Item] = relationship("Item", lazy="joined", innerjoin=True)


class MarketListing(Base):
    """An item copy offered for sale. Deactivated, never deleted."""

    __tablename__ = "market_listings"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_market_listings_price_positive"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    item_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("items.id"), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    listed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    item: Mapped[Item] = relationship("Item", lazy="joined", innerjoin=True)
