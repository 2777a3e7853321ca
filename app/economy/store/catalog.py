from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.products import Product
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.products_repo import ProductsRepo
from app.db.repo.purchases_repo import PurchasesRepo
from app.economy.store.errors import ProductNotFoundError, ProductValidationError
from app.economy.store.rules import is_within_availability
from app.economy.store.types import ProductStock
from app.game.errors import CampaignNotFoundError

logger = structlog.get_logger(__name__)


def _validate_product_fields(
    *,
    name: str,
    price_in_game_coins: int,
    quantity: int,
    available_from: datetime | None,
    available_until: datetime | None,
) -> None:
    if not name.strip():
        raise ProductValidationError("product name must not be blank")
    if price_in_game_coins <= 0:
        raise ProductValidationError("price must be greater than zero")
    if quantity <= 0:
        raise ProductValidationError("quantity must be greater than zero")
    if (
        available_from is not None
        and available_until is not None
        and available_from > available_until
    ):
        raise ProductValidationError("available_from must not be after available_until")


async def create_product(
    session: AsyncSession,
    *,
    campaign_id: int,
    name: str,
    price_in_game_coins: int,
    quantity: int,
    description: str | None = None,
    available_from: datetime | None = None,
    available_until: datetime | None = None,
) -> Product:
    _validate_product_fields(
        name=name,
        price_in_game_coins=price_in_game_coins,
        quantity=quantity,
        available_from=available_from,
        available_until=available_until,
    )
    if await CampaignsRepo.get_by_id(session, campaign_id) is None:
        raise CampaignNotFoundError

    product = await ProductsRepo.create(
        session,
        product=Product(
            campaign_id=campaign_id,
            name=name.strip(),
            description=description,
            price_in_game_coins=price_in_game_coins,
            quantity=quantity,
            available_from=available_from,
            available_until=available_until,
        ),
    )
    logger.info("product_created", product_id=product.id, campaign_id=campaign_id)
    return product


async def update_product(
    session: AsyncSession,
    *,
    product_id: int,
    name: str,
    price_in_game_coins: int,
    quantity: int,
    description: str | None = None,
    available_from: datetime | None = None,
    available_until: datetime | None = None,
) -> Product:
    """Edits the catalog row. Past purchases keep the price they paid."""
    _validate_product_fields(
        name=name,
        price_in_game_coins=price_in_game_coins,
        quantity=quantity,
        available_from=available_from,
        available_until=available_until,
    )
    product = await ProductsRepo.get_by_id_for_update(session, product_id)
    if product is None:
        raise ProductNotFoundError

    sold = await PurchasesRepo.count_for_product(session, product_id=product_id)
    if quantity < sold:
        raise ProductValidationError(f"quantity must not drop below units already sold ({sold})")

    product.name = name.strip()
    product.description = description
    product.price_in_game_coins = price_in_game_coins
    product.quantity = quantity
    product.available_from = available_from
    product.available_until = available_until
    await session.flush()
    return product


async def delete_product(session: AsyncSession, *, product_id: int) -> None:
    """Removes the item and its purchases. Coins already spent stay spent; the
    ledger keeps the debits."""
    deleted = await ProductsRepo.delete(session, product_id=product_id)
    if deleted == 0:
        raise ProductNotFoundError
    logger.info("product_deleted", product_id=product_id)


async def count_sold(session: AsyncSession, *, product_id: int) -> int:
    return await PurchasesRepo.count_for_product(session, product_id=product_id)


async def list_products_with_stock(
    session: AsyncSession,
    *,
    campaign_id: int,
    now_utc: datetime,
) -> list[ProductStock]:
    rows = await ProductsRepo.list_for_campaign_with_sold(session, campaign_id=campaign_id)
    return [
        ProductStock(
            product_id=int(product.id),
            campaign_id=int(product.campaign_id),
            name=product.name,
            description=product.description,
            price_in_game_coins=int(product.price_in_game_coins),
            quantity=int(product.quantity),
            sold=sold,
            available_from=product.available_from,
            available_until=product.available_until,
            is_available=is_within_availability(
                available_from=product.available_from,
                available_until=product.available_until,
                now_utc=now_utc,
            ),
        )
        for product, sold in rows
    ]


class StoreCatalog:
    create_product = staticmethod(create_product)
    update_product = staticmethod(update_product)
    delete_product = staticmethod(delete_product)
    count_sold = staticmethod(count_sold)
    list_products_with_stock = staticmethod(list_products_with_stock)
