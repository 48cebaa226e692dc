"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Events store (emotion / assignment / reset / wellness-action logs) and the
cognitive load scores/outcomes store.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DIFFICULTY_VALUES = ("easy", "moderate", "challenging", "overwhelming")
WELLNESS_CATEGORY_VALUES = (
    "breathwork", "movement", "mindfulness", "boundaries", "nutrition", "sleep",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("utc_offset_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # --- ENUM types ---
    sa.Enum(*DIFFICULTY_VALUES, name="difficulty_enum").create(op.get_bind(), checkfirst=True)
    sa.Enum(*WELLNESS_CATEGORY_VALUES, name="wellness_category_enum").create(
        op.get_bind(), checkfirst=True
    )

    # --- emotion_logs ---
    op.create_table(
        "emotion_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("emotion", sa.String(64), nullable=False),
        sa.Column("intensity", sa.Integer(), nullable=False, comment="1-5"),
        sa.Column("assignment_type", sa.String(64), nullable=True),
        sa.Column("day_of_week", sa.String(16), nullable=True),
        sa.Column("time_of_day", sa.String(16), nullable=True),
        sa.Column("post_assignment", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- assignment_logs ---
    op.create_table(
        "assignment_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("assignment_type", sa.String(64), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, comment="minutes"),
        sa.Column("difficulty", sa.Enum(
            *DIFFICULTY_VALUES, name="difficulty_enum", create_type=False,
        ), nullable=False),
        sa.Column("emotion_after", sa.String(64), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- reset_logs ---
    op.create_table(
        "reset_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("reset_type", sa.String(64), nullable=False),
        sa.Column("effectiveness", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("skipped", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- wellness_action_logs ---
    op.create_table(
        "wellness_action_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("action", sa.String(128), nullable=False),
        sa.Column("category", sa.Enum(
            *WELLNESS_CATEGORY_VALUES, name="wellness_category_enum", create_type=False,
        ), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True, comment="minutes"),
        sa.Column("effectiveness", sa.Integer(), nullable=True, comment="1-5"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    for table in ("emotion_logs", "assignment_logs", "reset_logs", "wellness_action_logs"):
        op.create_index(f"ix_{table}_id", table, ["id"])
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
        op.create_index(f"ix_{table}_timestamp", table, ["timestamp"])

    # --- assignment_complexity_scores ---
    op.create_table(
        "assignment_complexity_scores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("assignment_id", sa.String(128), nullable=False),
        sa.Column("assignment_type", sa.String(64), nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=False, comment="minutes"),
        sa.Column("linguistic_complexity", sa.Float(), nullable=False),
        sa.Column("domain_expertise_required", sa.Float(), nullable=False),
        sa.Column("emotional_intensity", sa.Float(), nullable=False),
        sa.Column("time_pressure", sa.Float(), nullable=False),
        sa.Column("stakes_level", sa.Float(), nullable=False),
        sa.Column("multitasking_required", sa.Float(), nullable=False),
        sa.Column("technical_jargon_density", sa.Float(), nullable=False),
        sa.Column("cultural_sensitivity_needed", sa.Float(), nullable=False),
        sa.Column("total_complexity_score", sa.Float(), nullable=False),
        sa.Column("required_specializations", sa.Text(), nullable=True),
        sa.Column("language_pair", sa.String(64), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("assignment_id"),
    )
    op.create_index("ix_assignment_complexity_scores_id", "assignment_complexity_scores", ["id"])

    # --- cognitive_load_capacity ---
    op.create_table(
        "cognitive_load_capacity",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_hash", sa.String(64), nullable=False),
        sa.Column("available_capacity", sa.Float(), nullable=False),
        sa.Column("working_memory_load", sa.Float(), nullable=False),
        sa.Column("attention_reserve", sa.Float(), nullable=False),
        sa.Column("decision_fatigue_level", sa.Float(), nullable=False),
        sa.Column("recovery_rate", sa.Float(), nullable=False),
        sa.Column("optimal_break_duration", sa.Float(), nullable=False, comment="minutes"),
        sa.Column("high_load_performance", sa.Float(), nullable=False),
        sa.Column("multitasking_efficiency", sa.Float(), nullable=False),
        sa.Column("error_rate_under_pressure", sa.Float(), nullable=False),
        sa.Column("medical_terminology_capacity", sa.Float(), nullable=False),
        sa.Column("legal_complexity_capacity", sa.Float(), nullable=False),
        sa.Column("emotional_resilience_capacity", sa.Float(), nullable=False),
        sa.Column("technical_jargon_capacity", sa.Float(), nullable=False),
        sa.Column("last_recovery_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("measured_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cognitive_load_capacity_id", "cognitive_load_capacity", ["id"])
    op.create_index(
        "ix_capacity_user_measured", "cognitive_load_capacity", ["user_hash", "measured_at"]
    )

    # --- assignment_outcomes ---
    op.create_table(
        "assignment_outcomes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_hash", sa.String(64), nullable=False),
        sa.Column("assignment_id", sa.String(128), nullable=False),
        sa.Column("actual_performance", sa.Float(), nullable=False, comment="0-100"),
        sa.Column("actual_error_rate", sa.Float(), nullable=False, comment="0-1"),
        sa.Column("actual_recovery_time", sa.Float(), nullable=False, comment="minutes"),
        sa.Column("stress_level", sa.Float(), nullable=False, comment="0-10"),
        sa.Column("difficulty_rating", sa.Float(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_assignment_outcomes_id", "assignment_outcomes", ["id"])
    op.create_index("ix_assignment_outcomes_user_hash", "assignment_outcomes", ["user_hash"])
    op.create_index("ix_assignment_outcomes_assignment_id", "assignment_outcomes", ["assignment_id"])


def downgrade() -> None:
    op.drop_table("assignment_outcomes")
    op.drop_table("cognitive_load_capacity")
    op.drop_table("assignment_complexity_scores")
    op.drop_table("wellness_action_logs")
    op.drop_table("reset_logs")
    op.drop_table("assignment_logs")
    op.drop_table("emotion_logs")

    sa.Enum(name="wellness_category_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="difficulty_enum").drop(op.get_bind(), checkfirst=True)
