"""Integration tests for XP, level, daily reward and leaderboard endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestLevels:
    @pytest.mark.asyncio
    async def test_list_levels(self, client: AsyncClient):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
        data = response.json()
        assert data["max_level"] == 99
        assert len(data["levels"]) == 99

    @pytest.mark.asyncio
    async def test_get_level(self, client: AsyncClient):
        response = await client.get("/api/v1/levels/2")
        assert response.json() == {"level": 2, "xp_required": 1200, "cumulative": 1200}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("level", [0, 100])
    async def test_level_out_of_range(self, client: AsyncClient, level):
        response = await client.get(f"/api/v1/levels/{level}")
        assert response.status_code == 404


class TestXP:
    @pytest.mark.asyncio
    async def test_new_user(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/users/me/xp")
        assert response.status_code == 200
        assert response.json() == {
            "total_xp": 0,
            "level": 1,
            "current_level_xp": 0,
            "next_level_xp": 1200,
            "progress": 0.0,
            "dreamcoins": 1000,
        }


class TestDailyReward:
    @pytest.mark.asyncio
    async def test_claim_flow(self, authed_client: AsyncClient):
        status = (await authed_client.get("/api/v1/rewards/daily")).json()
        assert status["can_claim"]
        assert status["next_reward_time"] is None

        response = await authed_client.post("/api/v1/rewards/daily/claim")
        assert response.status_code == 200
        data = response.json()
        assert data["login_streak"] == 1
        assert data["xp_awarded"] == 105
        assert data["coins_awarded"] == 1000
        assert data["dreamcoins"] == 2000

        status = (await authed_client.get("/api/v1/rewards/daily")).json()
        assert not status["can_claim"]
        assert status["next_reward_time"] is not None

    @pytest.mark.asyncio
    async def test_second_claim_conflict(self, authed_client: AsyncClient):
        await authed_client.post("/api/v1/rewards/daily/claim")
        response = await authed_client.post("/api/v1/rewards/daily/claim")
        assert response.status_code == 409
        assert response.json()["code"] == "already_claimed"


class TestLeaderboard:
    @pytest.mark.asyncio
    async def test_xp_leaderboard(self, client: AsyncClient, make_user):
        await make_user(username="low", xp=10)
        await make_user(username="high", xp=9000, level=5)
        response = await client.get("/api/v1/leaderboard/xp")
        assert response.status_code == 200
        entries = response.json()["entries"]
        assert [e["username"] for e in entries] == ["high", "low"]
        assert entries[0]["rank"] == 1

    @pytest.mark.asyncio
    async def test_unknown_board(self, client: AsyncClient):
        response = await client.get("/api/v1/leaderboard/karma")
        assert response.status_code == 400
