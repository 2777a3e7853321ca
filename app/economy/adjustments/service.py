from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.ledger_entries import LedgerEntry
from app.db.repo.answers_repo import AnswersRepo
from app.db.repo.ledger_repo import LedgerRepo
from app.db.repo.players_repo import PlayersRepo
from app.economy.adjustments.errors import (
    AdjustmentIdempotencyConflictError,
    AdjustmentInvalidError,
    AdjustmentPlayerNotFoundError,
)
from app.economy.adjustments.types import AdjustmentResult, BalanceReconciliation

logger = structlog.get_logger(__name__)

MAX_ABS_ADJUSTMENT_POINTS = 1_000_000


def _adjustment_key(idempotency_key: str) -> str:
    return f"adjust:{idempotency_key}"


def _as_result(entry: LedgerEntry, *, idempotent_replay: bool) -> AdjustmentResult:
    return AdjustmentResult(
        ledger_entry_id=int(entry.id),
        player_id=int(entry.player_id),
        points=int(entry.score_delta),
        score=int(entry.score_after),
        game_coins=int(entry.coins_after),
        created_at=entry.created_at,
        idempotent_replay=idempotent_replay,
    )


async def award_points(
    session: AsyncSession,
    *,
    player_id: int,
    points: int,
    reason: str,
    actor: str,
    idempotency_key: str,
    now_utc: datetime,
) -> AdjustmentResult:
    """Applies an operator bonus or penalty to score and coins as a ledger entry."""
    if points == 0 or abs(points) > MAX_ABS_ADJUSTMENT_POINTS:
        raise AdjustmentInvalidError("points must be non-zero and within bounds")
    if not reason.strip():
        raise AdjustmentInvalidError("reason is required")

    player = await PlayersRepo.get_by_id_for_update(session, player_id)
    if player is None:
        raise AdjustmentPlayerNotFoundError

    ledger_key = _adjustment_key(idempotency_key)
    existing = await LedgerRepo.get_by_idempotency_key(session, ledger_key)
    if existing is not None:
        if existing.player_id != player_id or existing.score_delta != points:
            raise AdjustmentIdempotencyConflictError
        return _as_result(existing, idempotent_replay=True)

    if player.score + points < 0 or player.game_coins + points < 0:
        raise AdjustmentInvalidError("adjustment would make the balance negative")

    player.score += points
    player.game_coins += points
    entry = await LedgerRepo.create(
        session,
        entry=LedgerEntry(
            player_id=player_id,
            entry_type="MANUAL_ADJUSTMENT",
            score_delta=points,
            coins_delta=points,
            score_after=player.score,
            coins_after=player.game_coins,
            reason=reason.strip(),
            actor=actor,
            idempotency_key=ledger_key,
            metadata_={},
            created_at=now_utc,
        ),
    )
    logger.info(
        "points_adjusted",
        player_id=player_id,
        points=points,
        actor=actor,
        score_after=player.score,
    )
    return _as_result(entry, idempotent_replay=False)


async def reconcile_player(session: AsyncSession, *, player_id: int) -> BalanceReconciliation:
    player = await PlayersRepo.get_by_id(session, player_id)
    if player is None:
        raise AdjustmentPlayerNotFoundError

    ledger_score, ledger_coins = await LedgerRepo.sum_deltas_for_player(session, player_id=player_id)
    answer_points = await AnswersRepo.sum_points_for_player(session, player_id=player_id)
    result = BalanceReconciliation(
        player_id=player_id,
        score=int(player.score),
        game_coins=int(player.game_coins),
        ledger_score=ledger_score,
        ledger_coins=ledger_coins,
        answer_points=answer_points,
        adjustment_points=ledger_score - answer_points,
    )
    if not result.is_consistent:
        logger.warning(
            "player_balance_mismatch",
            player_id=player_id,
            score=result.score,
            ledger_score=ledger_score,
            game_coins=result.game_coins,
            ledger_coins=ledger_coins,
        )
    return result


class AdjustmentService:
    award_points = staticmethod(award_points)
    reconcile_player = staticmethod(reconcile_player)
