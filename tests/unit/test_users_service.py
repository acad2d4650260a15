"""User profile, mentor, business metrics and leaderboard tests."""

from __future__ import annotations

import pytest

from dreamgame.errors import StateConflictError, ValidationError
from dreamgame.users.service import (
    create_user,
    get_business_metrics,
    get_leaderboard,
    set_mentor_personality,
    update_profile,
    upsert_business_metrics,
)


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_starting_balance(self, db_session):
        user = await create_user(db_session, "grace", "grace@example.com")
        await db_session.commit()
        assert user.id is not None
        assert user.dreamcoins == 1000
        assert user.level == 1
        assert user.xp == 0

    @pytest.mark.asyncio
    async def test_duplicate_username(self, db_session):
        await create_user(db_session, "grace")
        await db_session.commit()
        with pytest.raises(StateConflictError) as exc_info:
            await create_user(db_session, "grace")
        assert exc_info.value.code == "user_exists"


class TestProfile:
    @pytest.mark.asyncio
    async def test_completing_profile_marks_onboarded(self, db_session, make_user):
        user = await make_user()
        user = await db_session.merge(user)
        await update_profile(
            db_session,
            user,
            business_industry="health",
            business_stage="idea",
            entrepreneur_experience="none",
            skill_levels={"marketing": 2},
        )
        assert user.has_completed_onboarding
        assert user.skill_levels == {"marketing": 2}

    @pytest.mark.asyncio
    async def test_partial_profile_not_onboarded(self, db_session, make_user):
        user = await db_session.merge(await make_user())
        await update_profile(db_session, user, business_industry="health")
        assert not user.has_completed_onboarding

    @pytest.mark.asyncio
    @pytest.mark.parametrize("level", [0, 6])
    async def test_skill_level_range(self, db_session, make_user, level):
        user = await db_session.merge(await make_user())
        with pytest.raises(ValidationError):
            await update_profile(db_session, user, skill_levels={"sales": level})


class TestMentor:
    @pytest.mark.asyncio
    async def test_set_personality(self, db_session, make_user):
        user = await db_session.merge(await make_user())
        await set_mentor_personality(db_session, user, "challenger")
        assert user.mentor_personality == "challenger"

    @pytest.mark.asyncio
    async def test_unknown_personality(self, db_session, make_user):
        user = await db_session.merge(await make_user())
        with pytest.raises(ValidationError, match="Invalid personality type"):
            await set_mentor_personality(db_session, user, "sarcastic")


class TestBusinessMetrics:
    @pytest.mark.asyncio
    async def test_upsert_keeps_one_row(self, db_session, make_user):
        user = await make_user()
        await upsert_business_metrics(db_session, user.id, industry="food", monthly_revenue=1200)
        await upsert_business_metrics(db_session, user.id, customer_count=40)
        await db_session.commit()

        metrics = await get_business_metrics(db_session, user.id)
        assert metrics.industry == "food"
        assert metrics.monthly_revenue == 1200
        assert metrics.customer_count == 40
        assert metrics.updated_at is not None


class TestLeaderboard:
    @pytest.mark.asyncio
    async def test_xp_board(self, db_session, make_user):
        low = await make_user(xp=10)
        high = await make_user(xp=5000)
        board = await get_leaderboard(db_session, "xp")
        assert [u.id for u in board] == [high.id, low.id]

    @pytest.mark.asyncio
    async def test_dreamcoin_board(self, db_session, make_user):
        poor = await make_user(dreamcoins=5)
        rich = await make_user(dreamcoins=50_000)
        board = await get_leaderboard(db_session, "dreamcoins")
        assert [u.id for u in board] == [rich.id, poor.id]

    @pytest.mark.asyncio
    async def test_top_ten_only(self, db_session, make_user):
        for i in range(12):
            await make_user(xp=i)
        assert len(await get_leaderboard(db_session, "xp")) == 10

    @pytest.mark.asyncio
    async def test_unknown_board(self, db_session):
        with pytest.raises(ValidationError):
            await get_leaderboard(db_session, "karma")
