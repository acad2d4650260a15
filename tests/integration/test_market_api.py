"""Integration tests for inventory and market endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient

from dreamgame.db.models import Item, UserItem


@pytest_asyncio.fixture
async def owned_item(session_factory, onboarded_user) -> dict:
    """A legendary item in the authenticated user's inventory."""
    async with session_factory() as session:
        item = Item(
            name="The First Dollar Bill",
            description="Framed above the register since day one.",
            rarity="legendary",
            category="corporate_treasures",
        )
        session.add(item)
        await session.flush()
        user_item = UserItem(
            user_id=onboarded_user.id,
            item_id=item.id,
            acquired_at=datetime.now(timezone.utc),
            source="boss_battle",
        )
        session.add(user_item)
        await session.commit()
        return {"item_id": item.id, "user_item_id": user_item.id}


class TestInventory:
    @pytest.mark.asyncio
    async def test_inventory(self, authed_client: AsyncClient, owned_item):
        response = await authed_client.get("/api/v1/inventory")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["item"]["rarity"] == "legendary"
        assert not data["items"][0]["equipped"]

    @pytest.mark.asyncio
    async def test_equip_toggle(self, authed_client: AsyncClient, owned_item):
        url = f"/api/v1/inventory/{owned_item['user_item_id']}/equip"
        assert (await authed_client.post(url)).json()["equipped"]
        assert not (await authed_client.post(url)).json()["equipped"]

    @pytest.mark.asyncio
    async def test_equip_unknown(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/inventory/999/equip")
        assert response.status_code == 404


class TestMarket:
    @pytest.mark.asyncio
    async def test_list_and_buy(self, authed_client: AsyncClient, owned_item, make_user, auth_headers):
        response = await authed_client.post(
            "/api/v1/market/listings",
            json={"item_id": owned_item["item_id"], "price": 400},
        )
        assert response.status_code == 201
        listing = response.json()
        assert listing["active"]
        assert listing["item"]["name"] == "The First Dollar Bill"

        listings = (await authed_client.get("/api/v1/market/listings")).json()["listings"]
        assert [entry["id"] for entry in listings] == [listing["id"]]
        assert (await authed_client.get("/api/v1/inventory")).json()["total"] == 0

        buyer = await make_user(username="buyer")
        response = await authed_client.post(
            f"/api/v1/market/listings/{listing['id']}/buy",
            headers=auth_headers(buyer.id),
        )
        assert response.status_code == 200
        purchase = response.json()
        assert purchase["dreamcoins"] == 600
        assert not purchase["listing"]["active"]
        assert purchase["user_item"]["source"] == "market_purchase"

        seller = (await authed_client.get("/api/v1/users/me")).json()
        assert seller["dreamcoins"] == 1400
        assert (await authed_client.get("/api/v1/market/listings")).json()["listings"] == []

    @pytest.mark.asyncio
    async def test_insufficient_funds(self, authed_client: AsyncClient, owned_item, make_user, auth_headers):
        listing = (await authed_client.post(
            "/api/v1/market/listings",
            json={"item_id": owned_item["item_id"], "price": 5000},
        )).json()
        buyer = await make_user(username="broke")

        response = await authed_client.post(
            f"/api/v1/market/listings/{listing['id']}/buy",
            headers=auth_headers(buyer.id),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "insufficient_funds"
        listings = (await authed_client.get("/api/v1/market/listings")).json()["listings"]
        assert len(listings) == 1

    @pytest.mark.asyncio
    async def test_buy_own_listing(self, authed_client: AsyncClient, owned_item):
        listing = (await authed_client.post(
            "/api/v1/market/listings",
            json={"item_id": owned_item["item_id"], "price": 10},
        )).json()
        response = await authed_client.post(f"/api/v1/market/listings/{listing['id']}/buy")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unlist(self, authed_client: AsyncClient, owned_item, make_user, auth_headers):
        listing = (await authed_client.post(
            "/api/v1/market/listings",
            json={"item_id": owned_item["item_id"], "price": 10},
        )).json()
        other = await make_user(username="meddler")

        response = await authed_client.post(
            f"/api/v1/market/listings/{listing['id']}/unlist",
            headers=auth_headers(other.id),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "not_owner"

        response = await authed_client.post(f"/api/v1/market/listings/{listing['id']}/unlist")
        assert response.status_code == 200
        assert response.json()["source"] == "market_unlisted"
        assert (await authed_client.get("/api/v1/inventory")).json()["total"] == 1

    @pytest.mark.asyncio
    async def test_non_positive_price(self, authed_client: AsyncClient, owned_item):
        response = await authed_client.post(
            "/api/v1/market/listings",
            json={"item_id": owned_item["item_id"], "price": 0},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_unowned_item(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/market/listings", json={"item_id": 31337, "price": 10})
        assert response.status_code == 404
