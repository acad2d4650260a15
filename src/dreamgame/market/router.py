"""Inventory and peer market endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.auth.dependencies import get_current_user
from dreamgame.database import get_session
from dreamgame.db.models import User
from dreamgame.market.schemas import (
    CreateListingRequest,
    InventoryResponse,
    ListingResponse,
    ListingsResponse,
    PurchaseResponse,
    UserItemResponse,
)
from dreamgame.market.service import (
    buy_listing,
    get_active_listings,
    get_inventory,
    list_item,
    toggle_equip,
    unlist_item,
)

router = APIRouter(prefix="/api/v1", tags=["Market"])


# --- Inventory ---


@router.get("/inventory", response_model=InventoryResponse)
async def inventory(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    items = await get_inventory(db, user.id)
    return InventoryResponse(items=[UserItemResponse.model_validate(i) for i in items], total=len(items))


@router.post("/inventory/{user_item_id}/equip", response_model=UserItemResponse)
async def equip(
    user_item_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Toggle an item's equipped flag; equipping unequips the rest."""
    return UserItemResponse.model_validate(await toggle_equip(db, user.id, user_item_id))


# --- Market ---


@router.get("/market/listings", response_model=ListingsResponse)
async def listings(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
):
    rows = await get_active_listings(db, limit=limit, offset=offset)
    return ListingsResponse(
        listings=[ListingResponse.model_validate(r) for r in rows],
        limit=limit,
        offset=offset,
    )


@router.post("/market/listings", response_model=ListingResponse, status_code=201)
async def create_listing(
    body: CreateListingRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Move one copy of an owned item onto the market."""
    listing = await list_item(db, user.id, body.item_id, body.price)
    return ListingResponse.model_validate(listing)


@router.post("/market/listings/{listing_id}/buy", response_model=PurchaseResponse)
async def buy(
    listing_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    purchase = await buy_listing(db, listing_id, user.id)
    return PurchaseResponse(
        listing=ListingResponse.model_validate(purchase.listing),
        user_item=UserItemResponse.model_validate(purchase.user_item),
        dreamcoins=purchase.buyer_balance,
    )


@router.post("/market/listings/{listing_id}/unlist", response_model=UserItemResponse)
async def unlist(
    listing_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Withdraw a listing; the copy returns to the seller's inventory."""
    return UserItemResponse.model_validate(await unlist_item(db, listing_id, user.id))
