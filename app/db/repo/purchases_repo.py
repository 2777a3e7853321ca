from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.purchases import Purchase


class PurchasesRepo:
    @staticmethod
    async def get_for_player_product(
        session: AsyncSession,
        *,
        player_id: int,
        product_id: int,
    ) -> Purchase | None:
        stmt = select(Purchase).where(
            Purchase.player_id == player_id,
            Purchase.product_id == product_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, purchase: Purchase) -> Purchase:
        session.add(purchase)
        await session.flush()
        return purchase

    @staticmethod
    async def count_for_product(session: AsyncSession, *, product_id: int) -> int:
        stmt = select(func.count(Purchase.id)).where(Purchase.product_id == product_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def list_for_player(session: AsyncSession, *, player_id: int) -> list[Purchase]:
        stmt = (
            select(Purchase)
            .where(Purchase.player_id == player_id)
            .order_by(Purchase.purchased_at.desc(), Purchase.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
