from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PurchaseRequest(BaseModel):
    player_id: int = Field(gt=0)
    product_id: int = Field(gt=0)
    campaign_id: int = Field(gt=0)


class PurchaseResponse(BaseModel):
    purchase_id: int
    player_id: int
    product_id: int
    campaign_id: int
    price_in_game_coins: int
    purchased_at: datetime
    game_coins: int = Field(ge=0)
    remaining_stock: int = Field(ge=0)


class ProductUpsertRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    description: str | None = Field(default=None, max_length=2048)
    price_in_game_coins: int = Field(gt=0)
    quantity: int = Field(gt=0)
    available_from: datetime | None = None
    available_until: datetime | None = None


class ProductResponse(BaseModel):
    product_id: int
    campaign_id: int
    name: str
    description: str | None = None
    price_in_game_coins: int
    quantity: int
    sold: int = Field(ge=0)
    remaining: int = Field(ge=0)
    available_from: datetime | None = None
    available_until: datetime | None = None
    is_available: bool


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class PurchaseHistoryItem(BaseModel):
    purchase_id: int
    product_id: int
    campaign_id: int
    price_in_game_coins: int
    purchased_at: datetime


class PurchaseHistoryResponse(BaseModel):
    player_id: int
    purchases: list[PurchaseHistoryItem]
