from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.questions import Question


class QuestionsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, question_id: int) -> Question | None:
        return await session.get(Question, question_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, question_id: int) -> Question | None:
        stmt = select(Question).where(Question.id == question_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, question: Question) -> Question:
        session.add(question)
        await session.flush()
        return question

    @staticmethod
    async def list_for_campaign(session: AsyncSession, *, campaign_id: int) -> list[Question]:
        stmt = (
            select(Question)
            .where(Question.campaign_id == campaign_id)
            .order_by(
                Question.day_index.asc().nulls_last(),
                Question.special_start_at.asc().nulls_last(),
                Question.id.asc(),
            )
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete(session: AsyncSession, *, question_id: int) -> int:
        stmt = delete(Question).where(Question.id == question_id)
        result = await session.execute(stmt)
        return result.rowcount or 0
