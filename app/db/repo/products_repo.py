from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.products import Product
from app.db.models.purchases import Purchase


class ProductsRepo:
    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, product_id: int) -> Product | None:
        stmt = select(Product).where(Product.id == product_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, product: Product) -> Product:
        session.add(product)
        await session.flush()
        return product

    @staticmethod
    async def list_for_campaign_with_sold(
        session: AsyncSession,
        *,
        campaign_id: int,
    ) -> list[tuple[Product, int]]:
        sold = (
            select(Purchase.product_id, func.count(Purchase.id).label("sold"))
            .group_by(Purchase.product_id)
            .subquery()
        )
        stmt = (
            select(Product, func.coalesce(sold.c.sold, 0))
            .outerjoin(sold, sold.c.product_id == Product.id)
            .where(Product.campaign_id == campaign_id)
            .order_by(Product.id.asc())
        )
        result = await session.execute(stmt)
        return [(product, int(sold_count or 0)) for product, sold_count in result.all()]

    @staticmethod
    async def delete(session: AsyncSession, *, product_id: int) -> int:
        stmt = delete(Product).where(Product.id == product_id)
        result = await session.execute(stmt)
        return result.rowcount or 0
