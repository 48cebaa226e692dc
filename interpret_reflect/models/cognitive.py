"""
Scores/outcomes store for Cognitive Load Balancing.

assignment_complexity_scores — one row per assignment_id (upsert).
cognitive_load_capacity      — append-only time series per user_hash;
                               "current" = most recent measured_at.
assignment_outcomes          — append-only.

Users are identified by a salted hash only (see core/security.py).
specializations: JSON-encoded list stored as Text.
"""
from datetime import datetime
from sqlalchemy import Float, Index, Integer, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from interpret_reflect.db.base import Base


class AssignmentComplexityScore(Base):
    __tablename__ = "assignment_complexity_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    assignment_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    assignment_type: Mapped[str] = mapped_column(String(64), nullable=False)
    estimated_duration: Mapped[int] = mapped_column(Integer, nullable=False, comment="minutes")
    linguistic_complexity: Mapped[float] = mapped_column(Float, nullable=False)
    domain_expertise_required: Mapped[float] = mapped_column(Float, nullable=False)
    emotional_intensity: Mapped[float] = mapped_column(Float, nullable=False)
    time_pressure: Mapped[float] = mapped_column(Float, nullable=False)
    stakes_level: Mapped[float] = mapped_column(Float, nullable=False)
    multitasking_required: Mapped[float] = mapped_column(Float, nullable=False)
    technical_jargon_density: Mapped[float] = mapped_column(Float, nullable=False)
    cultural_sensitivity_needed: Mapped[float] = mapped_column(Float, nullable=False)
    total_complexity_score: Mapped[float] = mapped_column(Float, nullable=False)
    required_specializations: Mapped[str | None] = mapped_column(Text, nullable=True)
    language_pair: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class CognitiveCapacitySnapshot(Base):
    __tablename__ = "cognitive_load_capacity"
    __table_args__ = (
        Index("ix_capacity_user_measured", "user_hash", "measured_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    available_capacity: Mapped[float] = mapped_column(Float, nullable=False)
    working_memory_load: Mapped[float] = mapped_column(Float, nullable=False)
    attention_reserve: Mapped[float] = mapped_column(Float, nullable=False)
    decision_fatigue_level: Mapped[float] = mapped_column(Float, nullable=False)
    recovery_rate: Mapped[float] = mapped_column(Float, nullable=False)
    optimal_break_duration: Mapped[float] = mapped_column(Float, nullable=False, comment="minutes")
    high_load_performance: Mapped[float] = mapped_column(Float, nullable=False)
    multitasking_efficiency: Mapped[float] = mapped_column(Float, nullable=False)
    error_rate_under_pressure: Mapped[float] = mapped_column(Float, nullable=False)
    medical_terminology_capacity: Mapped[float] = mapped_column(Float, nullable=False)
    legal_complexity_capacity: Mapped[float] = mapped_column(Float, nullable=False)
    emotional_resilience_capacity: Mapped[float] = mapped_column(Float, nullable=False)
    technical_jargon_capacity: Mapped[float] = mapped_column(Float, nullable=False)
    last_recovery_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    measured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class AssignmentOutcome(Base):
    __tablename__ = "assignment_outcomes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assignment_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    actual_performance: Mapped[float] = mapped_column(Float, nullable=False, comment="0-100")
    actual_error_rate: Mapped[float] = mapped_column(Float, nullable=False, comment="0-1")
    actual_recovery_time: Mapped[float] = mapped_column(Float, nullable=False, comment="minutes")
    stress_level: Mapped[float] = mapped_column(Float, nullable=False, comment="0-10")
    difficulty_rating: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
