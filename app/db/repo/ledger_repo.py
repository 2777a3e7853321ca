from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.ledger_entries import LedgerEntry


class LedgerRepo:
    @staticmethod
    async def get_by_idempotency_key(
        session: AsyncSession, idempotency_key: str
    ) -> LedgerEntry | None:
        stmt = select(LedgerEntry).where(LedgerEntry.idempotency_key == idempotency_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, entry: LedgerEntry) -> LedgerEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def sum_deltas_for_player(session: AsyncSession, *, player_id: int) -> tuple[int, int]:
        stmt = select(
            func.coalesce(func.sum(LedgerEntry.score_delta), 0),
            func.coalesce(func.sum(LedgerEntry.coins_delta), 0),
        ).where(LedgerEntry.player_id == player_id)
        result = await session.execute(stmt)
        score_total, coins_total = result.one()
        return int(score_total or 0), int(coins_total or 0)

    @staticmethod
    async def list_for_player(
        session: AsyncSession,
        *,
        player_id: int,
        limit: int = 100,
    ) -> list[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.player_id == player_id)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
