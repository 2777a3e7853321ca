from __future__ import annotations

PLAYER_STATUSES = ("ACTIVE", "INACTIVE")
TEAM_NAME_CONSTRAINT = "uq_teams_name"
