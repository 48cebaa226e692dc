"""
Event log tables — the events store.

Append-only. Rows are created by user interaction and never mutated.
Timestamps are stored as UTC instants plus the offset the client sent,
so weekday and hour rules can read the client's own wall clock.
Every row is keyed by the caller's `user_id` so the pattern engine can
materialise one user's full history in a single pass.
"""
from datetime import datetime
from sqlalchemy import Boolean, Enum, Integer, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from interpret_reflect.db.base import Base


class Difficulty(str, enum.Enum):
    easy = "easy"
    moderate = "moderate"
    challenging = "challenging"
    overwhelming = "overwhelming"


class WellnessCategory(str, enum.Enum):
    breathwork = "breathwork"
    movement = "movement"
    mindfulness = "mindfulness"
    boundaries = "boundaries"
    nutrition = "nutrition"
    sleep = "sleep"


class EmotionLogRecord(Base):
    __tablename__ = "emotion_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    emotion: Mapped[str] = mapped_column(String(64), nullable=False)
    intensity: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-5")
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    utc_offset_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="client offset east of UTC"
    )
    # Optional context
    assignment_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    day_of_week: Mapped[str | None] = mapped_column(String(16), nullable=True)
    time_of_day: Mapped[str | None] = mapped_column(String(16), nullable=True)
    post_assignment: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class AssignmentLogRecord(Base):
    __tablename__ = "assignment_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    assignment_type: Mapped[str] = mapped_column(String(64), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, comment="minutes")
    difficulty: Mapped[str] = mapped_column(
        Enum(Difficulty, name="difficulty_enum"), nullable=False
    )
    emotion_after: Mapped[str | None] = mapped_column(String(64), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    utc_offset_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="client offset east of UTC"
    )
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ResetLogRecord(Base):
    __tablename__ = "reset_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    reset_type: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    utc_offset_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="client offset east of UTC"
    )
    effectiveness: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="1-5")
    skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class WellnessActionLogRecord(Base):
    __tablename__ = "wellness_action_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(128), nullable=False)
    category: Mapped[str] = mapped_column(
        Enum(WellnessCategory, name="wellness_category_enum"), nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    utc_offset_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="client offset east of UTC"
    )
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="minutes")
    effectiveness: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="1-5")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
