from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LedgerEntry(Base):
    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint(
            "entry_type IN ('ANSWER_REWARD','PURCHASE_DEBIT','MANUAL_ADJUSTMENT')",
            name="ck_ledger_entries_entry_type",
        ),
        CheckConstraint(
            "score_delta <> 0 OR coins_delta <> 0",
            name="ck_ledger_entries_non_zero",
        ),
        Index("idx_ledger_player_created", "player_id", "created_at"),
        Index("idx_ledger_answer", "answer_id"),
        Index("idx_ledger_purchase", "purchase_id"),
        Index("idx_ledger_type", "entry_type"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    player_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("players.id", ondelete="CASCADE"),
        nullable=False,
    )
    entry_type: Mapped[str] = mapped_column(String(32), nullable=False)
    score_delta: Mapped[int] = mapped_column(BigInteger, nullable=False)
    coins_delta: Mapped[int] = mapped_column(BigInteger, nullable=False)
    score_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    coins_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    campaign_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("campaigns.id", ondelete="SET NULL"),
        nullable=True,
    )
    answer_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("answers.id", ondelete="SET NULL"),
        nullable=True,
    )
    purchase_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("purchases.id", ondelete="SET NULL"),
        nullable=True,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    actor: Mapped[str | None] = mapped_column(String(64), nullable=True)
    idempotency_key: Mapped[str] = mapped_column(String(96), unique=True, nullable=False)
    metadata_: Mapped[dict[str, object]] = mapped_column(
        "metadata",
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
