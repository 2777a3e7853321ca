from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.constraints import violated_constraint
from app.db.models.ledger_entries import LedgerEntry
from app.db.models.purchases import Purchase
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.players_repo import PlayersRepo
from app.db.repo.products_repo import ProductsRepo
from app.db.repo.purchases_repo import PurchasesRepo
from app.economy.store.errors import (
    InsufficientCoinsError,
    ProductAlreadyPurchasedError,
    ProductNotFoundError,
    ProductOutOfStockError,
    ProductUnavailableError,
    StorePlayerNotFoundError,
)
from app.economy.store.rules import is_within_availability, remaining_stock
from app.economy.store.types import PurchaseResult

logger = structlog.get_logger(__name__)

PURCHASE_UNIQUE_CONSTRAINT = "uq_purchases_player_product"


def _purchase_debit_key(*, player_id: int, product_id: int) -> str:
    return f"purchase:{player_id}:{product_id}"


async def purchase_product(
    session: AsyncSession,
    *,
    player_id: int,
    product_id: int,
    campaign_id: int,
    now_utc: datetime,
) -> PurchaseResult:
    """Buys one unit for the player inside the caller's transaction.

    Locks are always taken product first, then player. The product lock makes
    the stock count and the insert one step for concurrent buyers of the same
    item.
    """
    product = await ProductsRepo.get_by_id_for_update(session, product_id)

    existing = await PurchasesRepo.get_for_player_product(
        session,
        player_id=player_id,
        product_id=product_id,
    )
    if existing is not None:
        raise ProductAlreadyPurchasedError

    player = await PlayersRepo.get_by_id_for_update(session, player_id)
    if player is None:
        raise StorePlayerNotFoundError

    if product is None or product.campaign_id != campaign_id:
        raise ProductNotFoundError

    if not is_within_availability(
        available_from=product.available_from,
        available_until=product.available_until,
        now_utc=now_utc,
    ):
        raise ProductUnavailableError

    sold = await PurchasesRepo.count_for_product(session, product_id=product_id)
    if remaining_stock(quantity=product.quantity, sold=sold) <= 0:
        raise ProductOutOfStockError

    price = int(product.price_in_game_coins)
    if player.game_coins < price:
        raise InsufficientCoinsError

    try:
        purchase = await PurchasesRepo.create(
            session,
            purchase=Purchase(
                player_id=player_id,
                product_id=product_id,
                campaign_id=campaign_id,
                price_in_game_coins=price,
                purchased_at=now_utc,
            ),
        )
    except IntegrityError as exc:
        if violated_constraint(exc) == PURCHASE_UNIQUE_CONSTRAINT:
            raise ProductAlreadyPurchasedError from exc
        raise

    player.game_coins -= price
    await LedgerRepo.create(
        session,
        entry=LedgerEntry(
            player_id=player_id,
            entry_type="PURCHASE_DEBIT",
            score_delta=0,
            coins_delta=-price,
            score_after=player.score,
            coins_after=player.game_coins,
            campaign_id=campaign_id,
            purchase_id=purchase.id,
            idempotency_key=_purchase_debit_key(player_id=player_id, product_id=product_id),
            metadata_={"product_name": product.name},
            created_at=now_utc,
        ),
    )

    logger.info(
        "product_purchased",
        player_id=player_id,
        product_id=product_id,
        campaign_id=campaign_id,
        price_in_game_coins=price,
        game_coins_after=player.game_coins,
    )

    return PurchaseResult(
        purchase_id=int(purchase.id),
        player_id=player_id,
        product_id=product_id,
        campaign_id=campaign_id,
        price_in_game_coins=price,
        purchased_at=now_utc,
        game_coins=int(player.game_coins),
        remaining_stock=remaining_stock(quantity=product.quantity, sold=sold + 1),
    )


class StoreService:
    purchase_product = staticmethod(purchase_product)
