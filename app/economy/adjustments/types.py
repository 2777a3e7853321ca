from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class AdjustmentResult:
    ledger_entry_id: int
    player_id: int
    points: int
    score: int
    game_coins: int
    created_at: datetime
    idempotent_replay: bool


@dataclass(slots=True)
class BalanceReconciliation:
    player_id: int
    score: int
    game_coins: int
    ledger_score: int
    ledger_coins: int
    answer_points: int
    adjustment_points: int

    @property
    def is_consistent(self) -> bool:
        return self.score == self.ledger_score and self.game_coins == self.ledger_coins
