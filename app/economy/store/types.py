from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class PurchaseResult:
    purchase_id: int
    player_id: int
    product_id: int
    campaign_id: int
    price_in_game_coins: int
    purchased_at: datetime
    game_coins: int
    remaining_stock: int


@dataclass(slots=True)
class ProductStock:
    product_id: int
    campaign_id: int
    name: str
    description: str | None
    price_in_game_coins: int
    quantity: int
    sold: int
    available_from: datetime | None
    available_until: datetime | None
    is_available: bool

    @property
    def remaining(self) -> int:
        return max(0, self.quantity - self.sold)
