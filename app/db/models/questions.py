from __future__ import annotations

from datetime import datetime, time

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    Text,
    Time,
)
from sqlalchemy import text as sa_text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint(
            "jsonb_array_length(choices) BETWEEN 2 AND 4",
            name="ck_questions_choices_count",
        ),
        CheckConstraint(
            "answer >= 0 AND answer < jsonb_array_length(choices)",
            name="ck_questions_answer_in_range",
        ),
        CheckConstraint("points_on_time >= 0", name="ck_questions_points_on_time_non_negative"),
        CheckConstraint("points_late >= 0", name="ck_questions_points_late_non_negative"),
        CheckConstraint("special_window_minutes > 0", name="ck_questions_special_window_positive"),
        CheckConstraint(
            "(is_special AND special_start_at IS NOT NULL) OR (NOT is_special AND day_index IS NOT NULL)",
            name="ck_questions_schedule_shape",
        ),
        Index("idx_questions_campaign_day", "campaign_id", "day_index"),
        Index("idx_questions_campaign_special_start", "campaign_id", "special_start_at"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    choices: Mapped[list[str]] = mapped_column(JSONB, nullable=False)
    answer: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    day_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    points_on_time: Mapped[int] = mapped_column(Integer, nullable=False, server_default=sa_text("1000"))
    points_late: Mapped[int] = mapped_column(Integer, nullable=False, server_default=sa_text("500"))
    schedule_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
        server_default=sa_text("'08:00'"),
    )
    deadline_time: Mapped[time] = mapped_column(
        Time,
        nullable=False,
        server_default=sa_text("'18:00'"),
    )
    is_special: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=sa_text("false"))
    special_start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    special_window_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=sa_text("1"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sa_text("now()"),
    )
