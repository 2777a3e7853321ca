from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.economy.store.rules import is_within_availability, remaining_stock
from app.economy.store.types import ProductStock

UTC = timezone.utc
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("available_from", "available_until", "expected"),
    [
        (None, None, True),
        (NOW - timedelta(days=1), None, True),
        (None, NOW + timedelta(days=1), True),
        (NOW, NOW, True),
        (NOW + timedelta(seconds=1), None, False),
        (None, NOW - timedelta(seconds=1), False),
    ],
)
def test_availability_window(
    available_from: datetime | None,
    available_until: datetime | None,
    expected: bool,
) -> None:
    assert (
        is_within_availability(
            available_from=available_from,
            available_until=available_until,
            now_utc=NOW,
        )
        is expected
    )


def test_remaining_stock_is_quantity_minus_sold() -> None:
    assert remaining_stock(quantity=5, sold=2) == 3
    assert remaining_stock(quantity=1, sold=1) == 0


def test_product_stock_remaining_never_negative() -> None:
    stock = ProductStock(
        product_id=1,
        campaign_id=1,
        name="Mug",
        description=None,
        price_in_game_coins=80,
        quantity=2,
        sold=3,
        available_from=None,
        available_until=None,
        is_available=True,
    )

    assert stock.remaining == 0
