from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Player(Base):
    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("status IN ('ACTIVE','INACTIVE')", name="ck_players_status"),
        CheckConstraint("score >= 0", name="ck_players_score_non_negative"),
        CheckConstraint("game_coins >= 0", name="ck_players_game_coins_non_negative"),
        Index("idx_players_team", "team_id"),
        Index("idx_players_score", "score"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default=text("'ACTIVE'"))
    score: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
    game_coins: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
    team_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("teams.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
