from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ScoreboardRow:
    rank: int
    entity_id: int
    name: str
    points: int
    game_coins: int | None = None
    members: int | None = None
