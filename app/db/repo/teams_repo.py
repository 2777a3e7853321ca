from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.players import Player
from app.db.models.teams import Team


class TeamsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, team_id: int) -> Team | None:
        return await session.get(Team, team_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, team_id: int) -> Team | None:
        stmt = select(Team).where(Team.id == team_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_name(session: AsyncSession, name: str) -> Team | None:
        stmt = select(Team).where(Team.name == name)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession) -> list[Team]:
        stmt = select(Team).order_by(Team.name.asc(), Team.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, name: str) -> Team:
        team = Team(name=name)
        session.add(team)
        await session.flush()
        return team

    @staticmethod
    async def delete(session: AsyncSession, *, team_id: int) -> int:
        stmt = delete(Team).where(Team.id == team_id)
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def list_score_totals(session: AsyncSession, *, limit: int) -> list[tuple[Team, int, int]]:
        stmt = (
            select(
                Team,
                func.coalesce(func.sum(Player.score), 0),
                func.count(Player.id),
            )
            .outerjoin(Player, Player.team_id == Team.id)
            .group_by(Team.id)
            .order_by(func.coalesce(func.sum(Player.score), 0).desc(), Team.id.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [(team, int(total or 0), int(members or 0)) for team, total, members in result.all()]
