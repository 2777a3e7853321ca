from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class TeamRoster:
    team_id: int
    name: str
    created_at: datetime
    member_ids: list[int] = field(default_factory=list)
