from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from app.db.models.players import Player
from app.db.models.purchases import Purchase
from app.db.session import SessionLocal
from app.economy.adjustments.service import AdjustmentService
from app.economy.store.catalog import StoreCatalog
from app.economy.store.errors import (
    InsufficientCoinsError,
    ProductAlreadyPurchasedError,
    ProductNotFoundError,
    ProductOutOfStockError,
    ProductUnavailableError,
    ProductValidationError,
    StorePlayerNotFoundError,
)
from app.economy.store.service import StoreService
from tests.integration.campaign_fixtures import (
    _create_campaign,
    _create_player,
    _create_product,
    local_time,
)

NOW = local_time(3, 12)


async def _purchase(*, player_id: int, product_id: int, campaign_id: int, now_utc=NOW):
    async with SessionLocal.begin() as session:
        return await StoreService.purchase_product(
            session,
            player_id=player_id,
            product_id=product_id,
            campaign_id=campaign_id,
            now_utc=now_utc,
        )


async def _coins(player_id: int) -> int:
    async with SessionLocal.begin() as session:
        player = await session.get(Player, player_id)
        return int(player.game_coins)


@pytest.mark.asyncio
async def test_purchase_debits_coins_and_reports_remaining_stock() -> None:
    campaign_id = await _create_campaign()
    player_id = await _create_player("Ines", coins=200)
    product_id = await _create_product(campaign_id, price=80, quantity=3)

    result = await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)

    assert result.game_coins == 120
    assert result.remaining_stock == 2
    assert await _coins(player_id) == 120

    async with SessionLocal.begin() as session:
        reconciliation = await AdjustmentService.reconcile_player(session, player_id=player_id)
        assert reconciliation.is_consistent is True
        assert reconciliation.ledger_coins == 120
        assert reconciliation.ledger_score == 200


@pytest.mark.asyncio
async def test_insufficient_coins_leaves_balance_unchanged() -> None:
    campaign_id = await _create_campaign()
    player_id = await _create_player("Joao", coins=50)
    product_id = await _create_product(campaign_id, price=80, quantity=5)

    with pytest.raises(InsufficientCoinsError):
        await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)

    assert await _coins(player_id) == 50
    async with SessionLocal.begin() as session:
        assert await session.scalar(select(func.count(Purchase.id))) == 0


@pytest.mark.asyncio
async def test_second_purchase_of_same_product_is_rejected() -> None:
    campaign_id = await _create_campaign()
    player_id = await _create_player("Karla", coins=500)
    product_id = await _create_product(campaign_id, price=80, quantity=5)

    await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)
    with pytest.raises(ProductAlreadyPurchasedError):
        await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)

    assert await _coins(player_id) == 420


@pytest.mark.asyncio
async def test_parallel_buyers_cannot_oversell_last_unit() -> None:
    campaign_id = await _create_campaign()
    buyer_ids = [await _create_player(f"Buyer {index}", coins=100) for index in range(4)]
    product_id = await _create_product(campaign_id, price=80, quantity=1)
    barrier = asyncio.Event()

    async def _attempt(player_id: int) -> str:
        await barrier.wait()
        try:
            await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)
            return "bought"
        except ProductOutOfStockError:
            return "out_of_stock"

    tasks = [asyncio.create_task(_attempt(player_id)) for player_id in buyer_ids]
    barrier.set()
    outcomes = await asyncio.gather(*tasks)

    assert sorted(outcomes) == ["bought", "out_of_stock", "out_of_stock", "out_of_stock"]
    async with SessionLocal.begin() as session:
        sold = await session.scalar(
            select(func.count(Purchase.id)).where(Purchase.product_id == product_id)
        )
        assert sold == 1
    assert sorted([await _coins(player_id) for player_id in buyer_ids]) == [20, 100, 100, 100]


@pytest.mark.asyncio
async def test_product_outside_availability_window_is_not_sold() -> None:
    campaign_id = await _create_campaign()
    player_id = await _create_player("Lia", coins=500)
    product_id = await _create_product(
        campaign_id,
        available_from=NOW + timedelta(days=1),
        available_until=NOW + timedelta(days=2),
    )

    with pytest.raises(ProductUnavailableError):
        await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)

    result = await _purchase(
        player_id=player_id,
        product_id=product_id,
        campaign_id=campaign_id,
        now_utc=NOW + timedelta(days=1, hours=1),
    )
    assert result.game_coins == 420


@pytest.mark.asyncio
async def test_product_of_other_campaign_is_not_found() -> None:
    campaign_id = await _create_campaign(name="A")
    other_campaign_id = await _create_campaign(name="B")
    player_id = await _create_player("Mario", coins=500)
    product_id = await _create_product(other_campaign_id)

    with pytest.raises(ProductNotFoundError):
        await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)


@pytest.mark.asyncio
async def test_catalog_lists_stock_and_refuses_quantity_below_sold() -> None:
    campaign_id = await _create_campaign()
    product_id = await _create_product(campaign_id, price=80, quantity=3)
    for name in ("Nina", "Otto"):
        player_id = await _create_player(name, coins=500)
        await _purchase(player_id=player_id, product_id=product_id, campaign_id=campaign_id)

    async with SessionLocal.begin() as session:
        stock = await StoreCatalog.list_products_with_stock(session, campaign_id=campaign_id, now_utc=NOW)
    assert [(item.product_id, item.sold, item.remaining) for item in stock] == [(product_id, 2, 1)]

    with pytest.raises(ProductValidationError):
        async with SessionLocal.begin() as session:
            await StoreCatalog.update_product(
                session,
                product_id=product_id,
                name="Team mug",
                price_in_game_coins=80,
                quantity=1,
            )


@pytest.mark.asyncio
async def test_missing_player_is_reported_before_missing_product() -> None:
    campaign_id = await _create_campaign()

    with pytest.raises(StorePlayerNotFoundError):
        await _purchase(player_id=999_999, product_id=999_999, campaign_id=campaign_id)


@pytest.mark.asyncio
async def test_out_of_stock_is_reported_before_insufficient_coins() -> None:
    campaign_id = await _create_campaign()
    first_buyer_id = await _create_player("Paula", coins=100)
    broke_player_id = await _create_player("Quim", coins=10)
    product_id = await _create_product(campaign_id, price=80, quantity=1)
    await _purchase(player_id=first_buyer_id, product_id=product_id, campaign_id=campaign_id)

    with pytest.raises(ProductOutOfStockError):
        await _purchase(player_id=broke_player_id, product_id=product_id, campaign_id=campaign_id)

    assert await _coins(broke_player_id) == 10
