from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.answers import Answer


class AnswersRepo:
    @staticmethod
    async def get_for_player_question(
        session: AsyncSession,
        *,
        player_id: int,
        question_id: int,
    ) -> Answer | None:
        stmt = select(Answer).where(
            Answer.player_id == player_id,
            Answer.question_id == question_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, answer: Answer) -> Answer:
        session.add(answer)
        await session.flush()
        return answer

    @staticmethod
    async def list_answered_question_ids(
        session: AsyncSession,
        *,
        player_id: int,
        campaign_id: int,
    ) -> set[int]:
        stmt = select(Answer.question_id).where(
            Answer.player_id == player_id,
            Answer.campaign_id == campaign_id,
        )
        result = await session.execute(stmt)
        return {int(question_id) for question_id in result.scalars().all()}

    @staticmethod
    async def sum_points_for_player(session: AsyncSession, *, player_id: int) -> int:
        stmt = select(func.coalesce(func.sum(Answer.points_earned), 0)).where(
            Answer.player_id == player_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
