from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

from app.db.models.products import Product
from app.db.repo.purchases_repo import PurchasesRepo
from app.db.session import SessionLocal
from app.economy.store.catalog import StoreCatalog
from app.economy.store.rules import is_within_availability
from app.economy.store.service import StoreService
from app.economy.store.types import ProductStock

from .internal_access import assert_internal_access
from .internal_errors import HANDLED_ERRORS, as_http_exception
from .internal_store_models import (
    ProductListResponse,
    ProductResponse,
    ProductUpsertRequest,
    PurchaseHistoryItem,
    PurchaseHistoryResponse,
    PurchaseRequest,
    PurchaseResponse,
)

router = APIRouter(tags=["internal", "store"])


def _stock_as_response(stock: ProductStock) -> ProductResponse:
    return ProductResponse(
        product_id=stock.product_id,
        campaign_id=stock.campaign_id,
        name=stock.name,
        description=stock.description,
        price_in_game_coins=stock.price_in_game_coins,
        quantity=stock.quantity,
        sold=stock.sold,
        remaining=stock.remaining,
        available_from=stock.available_from,
        available_until=stock.available_until,
        is_available=stock.is_available,
    )


def _product_as_response(product: Product, *, sold: int, now_utc: datetime) -> ProductResponse:
    return ProductResponse(
        product_id=int(product.id),
        campaign_id=int(product.campaign_id),
        name=product.name,
        description=product.description,
        price_in_game_coins=int(product.price_in_game_coins),
        quantity=int(product.quantity),
        sold=sold,
        remaining=max(0, int(product.quantity) - sold),
        available_from=product.available_from,
        available_until=product.available_until,
        is_available=is_within_availability(
            available_from=product.available_from,
            available_until=product.available_until,
            now_utc=now_utc,
        ),
    )


@router.post("/internal/store/purchases", response_model=PurchaseResponse)
async def purchase_product(payload: PurchaseRequest, request: Request) -> PurchaseResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await StoreService.purchase_product(
                session,
                player_id=payload.player_id,
                product_id=payload.product_id,
                campaign_id=payload.campaign_id,
                now_utc=now_utc,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return PurchaseResponse(
        purchase_id=result.purchase_id,
        player_id=result.player_id,
        product_id=result.product_id,
        campaign_id=result.campaign_id,
        price_in_game_coins=result.price_in_game_coins,
        purchased_at=result.purchased_at,
        game_coins=result.game_coins,
        remaining_stock=result.remaining_stock,
    )


@router.get("/internal/campaigns/{campaign_id}/products", response_model=ProductListResponse)
async def list_products(campaign_id: int, request: Request) -> ProductListResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        products = await StoreCatalog.list_products_with_stock(
            session,
            campaign_id=campaign_id,
            now_utc=now_utc,
        )
    return ProductListResponse(products=[_stock_as_response(stock) for stock in products])


@router.post("/internal/campaigns/{campaign_id}/products", response_model=ProductResponse)
async def create_product(
    campaign_id: int,
    payload: ProductUpsertRequest,
    request: Request,
) -> ProductResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            product = await StoreCatalog.create_product(
                session,
                campaign_id=campaign_id,
                name=payload.name,
                description=payload.description,
                price_in_game_coins=payload.price_in_game_coins,
                quantity=payload.quantity,
                available_from=payload.available_from,
                available_until=payload.available_until,
            )
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return _product_as_response(product, sold=0, now_utc=now_utc)


@router.put("/internal/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    payload: ProductUpsertRequest,
    request: Request,
) -> ProductResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            product = await StoreCatalog.update_product(
                session,
                product_id=product_id,
                name=payload.name,
                description=payload.description,
                price_in_game_coins=payload.price_in_game_coins,
                quantity=payload.quantity,
                available_from=payload.available_from,
                available_until=payload.available_until,
            )
            sold = await StoreCatalog.count_sold(session, product_id=product_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc

    return _product_as_response(product, sold=sold, now_utc=now_utc)


@router.delete("/internal/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, request: Request) -> None:
    assert_internal_access(request)

    try:
        async with SessionLocal.begin() as session:
            await StoreCatalog.delete_product(session, product_id=product_id)
    except HANDLED_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.get("/internal/players/{player_id}/purchases", response_model=PurchaseHistoryResponse)
async def list_player_purchases(player_id: int, request: Request) -> PurchaseHistoryResponse:
    assert_internal_access(request)

    async with SessionLocal.begin() as session:
        purchases = await PurchasesRepo.list_for_player(session, player_id=player_id)
        items = [
            PurchaseHistoryItem(
                purchase_id=int(purchase.id),
                product_id=int(purchase.product_id),
                campaign_id=int(purchase.campaign_id),
                price_in_game_coins=int(purchase.price_in_game_coins),
                purchased_at=purchase.purchased_at,
            )
            for purchase in purchases
        ]
    return PurchaseHistoryResponse(player_id=player_id, purchases=items)
