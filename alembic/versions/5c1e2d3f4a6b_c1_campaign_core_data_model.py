"""c1_campaign_core_data_model

Revision ID: 5c1e2d3f4a6b
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5c1e2d3f4a6b"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("name", name="uq_teams_name"),
    )

    op.create_table(
        "players",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("role", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'ACTIVE'")),
        sa.Column("score", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("game_coins", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("team_id", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("status IN ('ACTIVE','INACTIVE')", name="ck_players_status"),
        sa.CheckConstraint("score >= 0", name="ck_players_score_non_negative"),
        sa.CheckConstraint("game_coins >= 0", name="ck_players_game_coins_non_negative"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_players_team", "players", ["team_id"])
    op.create_index("idx_players_score", "players", ["score"])

    op.create_table(
        "campaigns",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'PLANNED'")),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False, server_default=sa.text("'America/Sao_Paulo'")),
        sa.Column("next_day_index", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("status IN ('PLANNED','IN_PROGRESS','COMPLETED')", name="ck_campaigns_status"),
        sa.CheckConstraint("start_date <= end_date", name="ck_campaigns_date_range"),
        sa.CheckConstraint("next_day_index >= 0", name="ck_campaigns_next_day_index_non_negative"),
    )
    op.create_index("idx_campaigns_status", "campaigns", ["status"])
    op.create_index("idx_campaigns_start_date", "campaigns", ["start_date"])

    op.create_table(
        "campaign_players",
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("enrolled_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("campaign_id", "player_id"),
    )
    op.create_index("idx_campaign_players_player", "campaign_players", ["player_id"])

    op.create_table(
        "campaign_scores",
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("points", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_campaign_scores_points_non_negative"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("player_id", "campaign_id"),
    )
    op.create_index("idx_campaign_scores_campaign_points", "campaign_scores", ["campaign_id", "points"])

    op.create_table(
        "questions",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("choices", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("answer", sa.SmallInteger(), nullable=False),
        sa.Column("day_index", sa.Integer(), nullable=True),
        sa.Column("points_on_time", sa.Integer(), nullable=False, server_default=sa.text("1000")),
        sa.Column("points_late", sa.Integer(), nullable=False, server_default=sa.text("500")),
        sa.Column("schedule_time", sa.Time(), nullable=False, server_default=sa.text("'08:00'")),
        sa.Column("deadline_time", sa.Time(), nullable=False, server_default=sa.text("'18:00'")),
        sa.Column("is_special", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("special_start_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("special_window_minutes", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("jsonb_array_length(choices) BETWEEN 2 AND 4", name="ck_questions_choices_count"),
        sa.CheckConstraint(
            "answer >= 0 AND answer < jsonb_array_length(choices)",
            name="ck_questions_answer_in_range",
        ),
        sa.CheckConstraint("points_on_time >= 0", name="ck_questions_points_on_time_non_negative"),
        sa.CheckConstraint("points_late >= 0", name="ck_questions_points_late_non_negative"),
        sa.CheckConstraint("special_window_minutes > 0", name="ck_questions_special_window_positive"),
        sa.CheckConstraint(
            "(is_special AND special_start_at IS NOT NULL) OR (NOT is_special AND day_index IS NOT NULL)",
            name="ck_questions_schedule_shape",
        ),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_questions_campaign_day", "questions", ["campaign_id", "day_index"])
    op.create_index("idx_questions_campaign_special_start", "questions", ["campaign_id", "special_start_at"])

    op.create_table(
        "answers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("question_id", sa.BigInteger(), nullable=False),
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("selected_answer", sa.SmallInteger(), nullable=False),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_on_time", sa.Boolean(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.CheckConstraint("selected_answer >= 0", name="ck_answers_selected_answer_non_negative"),
        sa.CheckConstraint("points_earned >= 0", name="ck_answers_points_earned_non_negative"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("player_id", "question_id", name="uq_answers_player_question"),
    )
    op.create_index("idx_answers_player_campaign", "answers", ["player_id", "campaign_id"])
    op.create_index("idx_answers_question", "answers", ["question_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_in_game_coins", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("available_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("available_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("price_in_game_coins > 0", name="ck_products_price_positive"),
        sa.CheckConstraint("quantity > 0", name="ck_products_quantity_positive"),
        sa.CheckConstraint(
            "available_from IS NULL OR available_until IS NULL OR available_from <= available_until",
            name="ck_products_availability_range",
        ),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_products_campaign", "products", ["campaign_id"])

    op.create_table(
        "purchases",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("product_id", sa.BigInteger(), nullable=False),
        sa.Column("campaign_id", sa.BigInteger(), nullable=False),
        sa.Column("price_in_game_coins", sa.Integer(), nullable=False),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("price_in_game_coins > 0", name="ck_purchases_price_positive"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("player_id", "product_id", name="uq_purchases_player_product"),
    )
    op.create_index("idx_purchases_product", "purchases", ["product_id"])
    op.create_index("idx_purchases_player_purchased", "purchases", ["player_id", "purchased_at"])

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("entry_type", sa.String(32), nullable=False),
        sa.Column("score_delta", sa.BigInteger(), nullable=False),
        sa.Column("coins_delta", sa.BigInteger(), nullable=False),
        sa.Column("score_after", sa.BigInteger(), nullable=False),
        sa.Column("coins_after", sa.BigInteger(), nullable=False),
        sa.Column("campaign_id", sa.BigInteger(), nullable=True),
        sa.Column("answer_id", sa.BigInteger(), nullable=True),
        sa.Column("purchase_id", sa.BigInteger(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("actor", sa.String(64), nullable=True),
        sa.Column("idempotency_key", sa.String(96), nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "entry_type IN ('ANSWER_REWARD','PURCHASE_DEBIT','MANUAL_ADJUSTMENT')",
            name="ck_ledger_entries_entry_type",
        ),
        sa.CheckConstraint("score_delta <> 0 OR coins_delta <> 0", name="ck_ledger_entries_non_zero"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["answer_id"], ["answers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["purchase_id"], ["purchases.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("idempotency_key", name="uq_ledger_entries_idempotency_key"),
    )
    op.create_index("idx_ledger_player_created", "ledger_entries", ["player_id", "created_at"])
    op.create_index("idx_ledger_answer", "ledger_entries", ["answer_id"])
    op.create_index("idx_ledger_purchase", "ledger_entries", ["purchase_id"])
    op.create_index("idx_ledger_type", "ledger_entries", ["entry_type"])

    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_ledger_entries_append_only()
        RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'ledger_entries is append-only';
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_ledger_entries_append_only
        BEFORE UPDATE ON ledger_entries
        FOR EACH ROW
        WHEN (
            OLD.player_id IS NOT DISTINCT FROM NEW.player_id
            AND (
                OLD.score_delta IS DISTINCT FROM NEW.score_delta
                OR OLD.coins_delta IS DISTINCT FROM NEW.coins_delta
                OR OLD.idempotency_key IS DISTINCT FROM NEW.idempotency_key
            )
        )
        EXECUTE FUNCTION fn_ledger_entries_append_only();
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_ledger_entries_append_only ON ledger_entries")
    op.execute("DROP FUNCTION IF EXISTS fn_ledger_entries_append_only()")
    op.drop_index("idx_ledger_type", table_name="ledger_entries")
    op.drop_index("idx_ledger_purchase", table_name="ledger_entries")
    op.drop_index("idx_ledger_answer", table_name="ledger_entries")
    op.drop_index("idx_ledger_player_created", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_index("idx_purchases_player_purchased", table_name="purchases")
    op.drop_index("idx_purchases_product", table_name="purchases")
    op.drop_table("purchases")
    op.drop_index("idx_products_campaign", table_name="products")
    op.drop_table("products")
    op.drop_index("idx_answers_question", table_name="answers")
    op.drop_index("idx_answers_player_campaign", table_name="answers")
    op.drop_table("answers")
    op.drop_index("idx_questions_campaign_special_start", table_name="questions")
    op.drop_index("idx_questions_campaign_day", table_name="questions")
    op.drop_table("questions")
    op.drop_index("idx_campaign_scores_campaign_points", table_name="campaign_scores")
    op.drop_table("campaign_scores")
    op.drop_index("idx_campaign_players_player", table_name="campaign_players")
    op.drop_table("campaign_players")
    op.drop_index("idx_campaigns_start_date", table_name="campaigns")
    op.drop_index("idx_campaigns_status", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("idx_players_score", table_name="players")
    op.drop_index("idx_players_team", table_name="players")
    op.drop_table("players")
    op.drop_table("teams")
