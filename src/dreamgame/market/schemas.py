"""Request and response models for inventory and market endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    rarity: str
    category: str


class UserItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item: ItemResponse
    acquired_at: datetime
    source: str
    equipped: bool


class InventoryResponse(BaseModel):
    items: list[UserItemResponse]
    total: int


class ListingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    item: ItemResponse
    price: int
    active: bool
    listed_at: datetime


class ListingsResponse(BaseModel):
    listings: list[ListingResponse]
    limit: int
    offset: int


class CreateListingRequest(BaseModel):
    item_id: int
    # Non-positive prices are rejected by the service with a 400
    price: int


class PurchaseResponse(BaseModel):
    listing: ListingResponse
    user_item: UserItemResponse
    dreamcoins: int = Field(description="Buyer balance after the purchase")
