"""Baseline: progression, journey, inventory and market tables.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            username VARCHAR(64) UNIQUE NOT NULL,
            email VARCHAR(320) UNIQUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            xp BIGINT NOT NULL DEFAULT 0 CONSTRAINT ck_users_xp_non_negative CHECK (xp >= 0),
            level INTEGER NOT NULL DEFAULT 1,
            dreamcoins BIGINT NOT NULL DEFAULT 1000
                CONSTRAINT ck_users_dreamcoins_non_negative CHECK (dreamcoins >= 0),
            login_streak INTEGER NOT NULL DEFAULT 0,
            last_reward_claim TIMESTAMPTZ,
            last_milestone_generation TIMESTAMPTZ,
            current_milestone_id BIGINT,
            challenge_history JSONB NOT NULL DEFAULT '[]',
            mentor_personality VARCHAR(32) NOT NULL DEFAULT 'balanced',
            business_name VARCHAR(128),
            business_industry VARCHAR(32),
            business_stage VARCHAR(32),
            entrepreneur_experience VARCHAR(32),
            primary_goals JSONB NOT NULL DEFAULT '[]',
            skill_levels JSONB NOT NULL DEFAULT '{}',
            has_completed_onboarding BOOLEAN NOT NULL DEFAULT false
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_users_xp ON users(xp DESC)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_users_dreamcoins ON users(dreamcoins DESC)
    """)

    # --- Business Metrics ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS business_metrics (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT UNIQUE NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            business_name VARCHAR(128),
            industry VARCHAR(32),
            monthly_revenue BIGINT,
            customer_count INTEGER,
            social_followers INTEGER,
            employee_count INTEGER,
            website_visitors INTEGER,
            short_term_goals TEXT,
            challenges TEXT,
            updated_at TIMESTAMPTZ
        )
    """)

    # --- Milestones ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS milestones (
            id BIGSERIAL PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            "order" INTEGER NOT NULL,
            type VARCHAR(16) NOT NULL,
            category VARCHAR(64) NOT NULL,
            difficulty INTEGER NOT NULL DEFAULT 1,
            estimated_duration VARCHAR(16) NOT NULL,
            xp_reward INTEGER NOT NULL,
            coin_reward INTEGER NOT NULL,
            requirements JSONB NOT NULL,
            ai_generated BOOLEAN NOT NULL DEFAULT false,
            generated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_milestones_generated ON milestones(generated_at)
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS user_milestones (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            milestone_id BIGINT NOT NULL REFERENCES milestones(id) ON DELETE CASCADE,
            completed BOOLEAN NOT NULL DEFAULT false,
            completed_at TIMESTAMPTZ,
            reflection TEXT,
            data JSONB,
            reward JSONB,
            CONSTRAINT uq_user_milestones_user_milestone UNIQUE (user_id, milestone_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_milestones_completed
        ON user_milestones(user_id, completed_at) WHERE completed
    """)

    # --- Daily Challenges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_challenges (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            description TEXT NOT NULL,
            type VARCHAR(8) NOT NULL,
            category VARCHAR(64) NOT NULL,
            xp_reward INTEGER NOT NULL,
            coin_reward INTEGER NOT NULL,
            options JSONB,
            correct_answer TEXT,
            completed BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_daily_challenges_user_created
        ON daily_challenges(user_id, created_at)
    """)

    # --- Items, Inventory, Market ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS items (
            id BIGSERIAL PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL,
            rarity VARCHAR(16) NOT NULL,
            category VARCHAR(32) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_items_name_rarity_category UNIQUE (name, rarity, category)
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_items (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            item_id BIGINT NOT NULL REFERENCES items(id),
            acquired_at TIMESTAMPTZ NOT NULL,
            source VARCHAR(32) NOT NULL,
            equipped BOOLEAN NOT NULL DEFAULT false
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_items_user ON user_items(user_id)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS market_listings (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            item_id BIGINT NOT NULL REFERENCES items(id),
            price BIGINT NOT NULL CONSTRAINT ck_market_listings_price_positive CHECK (price > 0),
            active BOOLEAN NOT NULL DEFAULT true,
            listed_at TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_market_listings_active
        ON market_listings(listed_at DESC) WHERE active
    """)


def downgrade() -> None:
    for table in (
        "market_listings",
        "user_items",
        "items",
        "daily_challenges",
        "user_milestones",
        "milestones",
        "business_metrics",
        "users",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")  # noqa: S608
