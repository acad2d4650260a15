"""Peer marketplace and inventory.

An item copy is either owned (a ``user_items`` row) or listed (an active
``market_listings`` row), never both. Every operation that moves a copy or
dreamcoins between users runs in a single transaction and uses conditional
updates, so a lost race fails cleanly instead of double-spending.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dreamgame.clock import utcnow
from dreamgame.database import atomic
from dreamgame.db.models import MarketListing, User, UserItem
from dreamgame.errors import (
    InsufficientFundsError,
    NotFoundError,
    NotOwnerError,
    StateConflictError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class Purchase:
    listing: MarketListing
    user_item: UserItem
    buyer_balance: int


async def _get_listing_for_update(db: AsyncSession, listing_id: int) -> MarketListing:
    result = await db.execute(
        select(MarketListing)
        .where(MarketListing.id == listing_id)
        .with_for_update(of=MarketListing)
        .execution_options(populate_existing=True)
    )
    listing = result.unique().scalar_one_or_none()
    if listing is None or not listing.active:
        raise NotFoundError("Listing not found")
    return listing


async def _deactivate(db: AsyncSession, listing_id: int) -> None:
    result = await db.execute(
        update(MarketListing)
        .where(MarketListing.id == listing_id, MarketListing.active.is_(True))
        .values(active=False)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise StateConflictError("Listing is no longer available", code="listing_unavailable")


# ---------------------------------------------------------------------------
# Listing, buying, unlisting
# ---------------------------------------------------------------------------


async def list_item(
    db: AsyncSession,
    user_id: int,
    item_id: int,
    price: int,
    now: datetime | None = None,
) -> MarketListing:
    """Move one owned copy of ``item_id`` from the user's inventory to the market."""
    if price <= 0:
        raise ValidationError("Price must be positive")
    now = now or utcnow()

    async with atomic(db):
        result = await db.execute(
            select(UserItem.id)
            .where(UserItem.user_id == user_id, UserItem.item_id == item_id)
            .order_by(UserItem.equipped, UserItem.id)
            .limit(1)
            .with_for_update()
        )
        user_item_id = result.scalar_one_or_none()
        if user_item_id is None:
            raise NotFoundError("Item not found in your inventory")

        removed = await db.execute(
            delete(UserItem)
            .where(UserItem.id == user_item_id, UserItem.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if removed.rowcount == 0:
            raise NotFoundError("Item not found in your inventory")

        listing = MarketListing(
            user_id=user_id,
            item_id=item_id,
            price=price,
            active=True,
            listed_at=now,
        )
        db.add(listing)
        await db.flush()
        await db.refresh(listing)

    logger.info("User %d listed item %d for %d dreamcoins", user_id, item_id, price)
    return listing


async def buy_listing(
    db: AsyncSession,
    listing_id: int,
    buyer_id: int,
    now: datetime | None = None,
) -> Purchase:
    """Pay the seller and move the listed copy into the buyer's inventory."""
    now = now or utcnow()

    async with atomic(db):
        listing = await _get_listing_for_update(db, listing_id)
        if listing.user_id == buyer_id:
            raise ValidationError("You cannot buy your own listing")

        await _deactivate(db, listing_id)

        debited = await db.execute(
            update(User)
            .where(User.id == buyer_id, User.dreamcoins >= listing.price)
            .values(dreamcoins=User.dreamcoins - listing.price)
            .execution_options(synchronize_session=False)
        )
        if debited.rowcount == 0:
            raise InsufficientFundsError("Not enough dreamcoins")

        await db.execute(
            update(User)
            .where(User.id == listing.user_id)
            .values(dreamcoins=User.dreamcoins + listing.price)
            .execution_options(synchronize_session=False)
        )

        user_item = UserItem(
            user_id=buyer_id,
            item_id=listing.item_id,
            acquired_at=now,
            source="market_purchase",
        )
        db.add(user_item)
        await db.flush()
        await db.refresh(user_item)
        await db.refresh(listing)

        balance = (await db.execute(select(User.dreamcoins).where(User.id == buyer_id))).scalar_one()

    logger.info(
        "User %d bought listing %d from user %d for %d dreamcoins",
        buyer_id,
        listing_id,
        listing.user_id,
        listing.price,
    )
    return Purchase(listing=listing, user_item=user_item, buyer_balance=balance)


async def unlist_item(
    db: AsyncSession,
    listing_id: int,
    owner_id: int,
    now: datetime | None = None,
) -> UserItem:
    """Withdraw an active listing and return the copy to its seller."""
    now = now or utcnow()

    async with atomic(db):
        listing = await _get_listing_for_update(db, listing_id)
        if listing.user_id != owner_id:
            raise NotOwnerError("You do not own this listing")

        await _deactivate(db, listing_id)

        user_item = UserItem(
            user_id=owner_id,
            item_id=listing.item_id,
            acquired_at=now,
            source="market_unlisted",
        )
        db.add(user_item)
        await db.flush()
        await db.refresh(user_item)

    logger.info("User %d unlisted listing %d", owner_id, listing_id)
    return user_item


# ---------------------------------------------------------------------------
# Queries and inventory
# ---------------------------------------------------------------------------


async def get_active_listings(db: AsyncSession, limit: int = 50, offset: int = 0) -> list[MarketListing]:
    result = await db.execute(
        select(MarketListing)
        .where(MarketListing.active.is_(True))
        .order_by(MarketListing.listed_at.desc(), MarketListing.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.unique().scalars())


async def get_inventory(db: AsyncSession, user_id: int) -> list[UserItem]:
    result = await db.execute(
        select(UserItem)
        .where(UserItem.user_id == user_id)
        .order_by(UserItem.acquired_at, UserItem.id)
    )
    return list(result.unique().scalars())


async def toggle_equip(db: AsyncSession, user_id: int, user_item_id: int) -> UserItem:
    """Flip one item's equipped flag. Equipping an item unequips all others."""
    async with atomic(db):
        result = await db.execute(
            select(UserItem)
            .where(UserItem.id == user_item_id, UserItem.user_id == user_id)
            .with_for_update(of=UserItem)
            .execution_options(populate_existing=True)
        )
        user_item = result.unique().scalar_one_or_none()
        if user_item is None:
            raise NotFoundError("Item not found in your inventory")

        await db.execute(
            update(UserItem)
            .where(UserItem.user_id == user_id, UserItem.id != user_item_id)
            .values(equipped=False)
            .execution_options(synchronize_session=False)
        )
        user_item.equipped = not user_item.equipped
        await db.flush()

    return user_item
