from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.constraints import violated_constraint
from app.db.models.players import Player
from app.db.models.teams import Team
from app.db.repo.players_repo import PlayersRepo
from app.db.repo.teams_repo import TeamsRepo
from app.game.errors import (
    CampaignValidationError,
    PlayerNotFoundError,
    TeamNameTakenError,
    TeamNotFoundError,
)
from app.game.players.constants import PLAYER_STATUSES, TEAM_NAME_CONSTRAINT
from app.game.players.types import TeamRoster

logger = structlog.get_logger(__name__)


async def _ensure_team_exists(session: AsyncSession, team_id: int | None) -> None:
    if team_id is not None and await TeamsRepo.get_by_id(session, team_id) is None:
        raise TeamNotFoundError


def _validate_team_name(name: str) -> str:
    if not name.strip():
        raise CampaignValidationError("team name must not be blank")
    return name.strip()


async def list_players(session: AsyncSession, *, team_id: int | None = None) -> list[Player]:
    return await PlayersRepo.list_all(session, team_id=team_id)


async def create_player(
    session: AsyncSession,
    *,
    name: str,
    role: str | None = None,
    team_id: int | None = None,
) -> Player:
    if not name.strip():
        raise CampaignValidationError("player name must not be blank")
    await _ensure_team_exists(session, team_id)
    player = await PlayersRepo.create(session, name=name.strip(), role=role, team_id=team_id)
    logger.info("player_created", player_id=player.id)
    return player


async def update_player(
    session: AsyncSession,
    *,
    player_id: int,
    name: str,
    role: str | None = None,
    status: str = "ACTIVE",
    team_id: int | None = None,
) -> Player:
    """Edits the profile fields only.

    Score and coins move through answers, purchases and adjustments, each with
    a ledger entry, so they are never written here.
    """
    if not name.strip():
        raise CampaignValidationError("player name must not be blank")
    if status not in PLAYER_STATUSES:
        raise CampaignValidationError(f"unknown player status: {status!r}")
    await _ensure_team_exists(session, team_id)

    player = await PlayersRepo.get_by_id_for_update(session, player_id)
    if player is None:
        raise PlayerNotFoundError

    player.name = name.strip()
    player.role = role
    player.status = status
    player.team_id = team_id
    await session.flush()
    logger.info("player_updated", player_id=player_id, status=status, team_id=team_id)
    return player


async def delete_player(session: AsyncSession, *, player_id: int) -> None:
    """Deletes the player; answers, purchases, enrollments and ledger rows cascade."""
    deleted = await PlayersRepo.delete(session, player_id=player_id)
    if deleted == 0:
        raise PlayerNotFoundError
    logger.info("player_deleted", player_id=player_id)


async def list_teams(session: AsyncSession) -> list[TeamRoster]:
    members = await PlayersRepo.list_team_members(session)
    return [
        TeamRoster(
            team_id=int(team.id),
            name=team.name,
            created_at=team.created_at,
            member_ids=members.get(int(team.id), []),
        )
        for team in await TeamsRepo.list_all(session)
    ]


async def create_team(session: AsyncSession, *, name: str) -> Team:
    team_name = _validate_team_name(name)
    if await TeamsRepo.get_by_name(session, team_name) is not None:
        raise TeamNameTakenError
    try:
        return await TeamsRepo.create(session, name=team_name)
    except IntegrityError as exc:
        if violated_constraint(exc) == TEAM_NAME_CONSTRAINT:
            raise TeamNameTakenError from exc
        raise


async def update_team(session: AsyncSession, *, team_id: int, name: str) -> Team:
    team_name = _validate_team_name(name)
    team = await TeamsRepo.get_by_id_for_update(session, team_id)
    if team is None:
        raise TeamNotFoundError

    holder = await TeamsRepo.get_by_name(session, team_name)
    if holder is not None and holder.id != team.id:
        raise TeamNameTakenError

    team.name = team_name
    try:
        await session.flush()
    except IntegrityError as exc:
        if violated_constraint(exc) == TEAM_NAME_CONSTRAINT:
            raise TeamNameTakenError from exc
        raise
    return team


async def delete_team(session: AsyncSession, *, team_id: int) -> None:
    """Deletes the team; its members stay and become unassigned."""
    deleted = await TeamsRepo.delete(session, team_id=team_id)
    if deleted == 0:
        raise TeamNotFoundError
    logger.info("team_deleted", team_id=team_id)


async def assign_team(session: AsyncSession, *, player_id: int, team_id: int | None) -> None:
    await _ensure_team_exists(session, team_id)
    updated = await PlayersRepo.set_team(session, player_id=player_id, team_id=team_id)
    if updated == 0:
        raise PlayerNotFoundError


class PlayerService:
    list_players = staticmethod(list_players)
    create_player = staticmethod(create_player)
    update_player = staticmethod(update_player)
    delete_player = staticmethod(delete_player)
    list_teams = staticmethod(list_teams)
    create_team = staticmethod(create_team)
    update_team = staticmethod(update_team)
    delete_team = staticmethod(delete_team)
    assign_team = staticmethod(assign_team)
