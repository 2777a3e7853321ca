from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.players import Player


class PlayersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, player_id: int) -> Player | None:
        return await session.get(Player, player_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, player_id: int) -> Player | None:
        stmt = select(Player).where(Player.id == player_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_ids(session: AsyncSession, player_ids: Sequence[int]) -> list[Player]:
        ids = tuple({int(player_id) for player_id in player_ids})
        if not ids:
            return []
        stmt = select(Player).where(Player.id.in_(ids)).order_by(Player.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_all(session: AsyncSession, *, team_id: int | None = None) -> list[Player]:
        stmt = select(Player).order_by(Player.id.asc())
        if team_id is not None:
            stmt = stmt.where(Player.team_id == team_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_team_members(session: AsyncSession) -> dict[int, list[int]]:
        stmt = (
            select(Player.team_id, Player.id)
            .where(Player.team_id.is_not(None))
            .order_by(Player.team_id.asc(), Player.id.asc())
        )
        result = await session.execute(stmt)
        members: dict[int, list[int]] = {}
        for team_id, player_id in result.all():
            members.setdefault(int(team_id), []).append(int(player_id))
        return members

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        name: str,
        role: str | None = None,
        team_id: int | None = None,
    ) -> Player:
        player = Player(
            name=name,
            role=role,
            team_id=team_id,
            status="ACTIVE",
            score=0,
            game_coins=0,
        )
        session.add(player)
        await session.flush()
        return player

    @staticmethod
    async def set_team(session: AsyncSession, *, player_id: int, team_id: int | None) -> int:
        stmt = update(Player).where(Player.id == player_id).values(team_id=team_id)
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def delete(session: AsyncSession, *, player_id: int) -> int:
        stmt = delete(Player).where(Player.id == player_id)
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def list_top_by_score(session: AsyncSession, *, limit: int) -> list[Player]:
        stmt = select(Player).order_by(Player.score.desc(), Player.id.asc()).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())
