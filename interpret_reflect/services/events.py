"""
Events store: append user event logs and materialise a user's history.

Four append-only logs feed the pattern engine:
  emotions, assignments, resets, wellness actions.

The engine never queries the database itself. `load_user_data` hands it the
full relevant slice already in memory as a `UserData` value.

Public API
----------
log_emotion(db, user_id, ...)            -> EmotionLogRecord
log_assignment(db, user_id, ...)         -> AssignmentLogRecord
log_reset(db, user_id, ...)              -> ResetLogRecord
log_wellness_action(db, user_id, ...)    -> WellnessActionLogRecord
load_user_data(db, user_id, since, today) -> UserData
calculate_current_streak(dates, today)   -> int
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from interpret_reflect.models.events import (
    AssignmentLogRecord,
    Difficulty,
    EmotionLogRecord,
    ResetLogRecord,
    WellnessActionLogRecord,
    WellnessCategory,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# In-memory event model (frozen: logs are never mutated)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EmotionContext:
    assignment_type: Optional[str] = None
    day_of_week: Optional[str] = None
    time_of_day: Optional[str] = None    # morning | afternoon | evening | night
    post_assignment: Optional[bool] = None


@dataclass(frozen=True)
class EmotionLog:
    emotion: str
    intensity: int                       # 1-5
    timestamp: datetime
    context: Optional[EmotionContext] = None


@dataclass(frozen=True)
class AssignmentLog:
    type: str
    duration: int                        # minutes
    difficulty: str                      # easy | moderate | challenging | overwhelming
    timestamp: datetime
    completed: bool = True
    emotion_after: Optional[str] = None


@dataclass(frozen=True)
class ResetLog:
    type: str
    timestamp: datetime
    skipped: bool = False
    effectiveness: Optional[int] = None  # 1-5
    reason: Optional[str] = None


@dataclass(frozen=True)
class WellnessActionLog:
    action: str
    category: str                        # breathwork | movement | mindfulness | ...
    timestamp: datetime
    duration: Optional[int] = None       # minutes
    effectiveness: Optional[int] = None  # 1-5


@dataclass
class UserData:
    """One user's event history, as evaluated by the pattern engine."""
    emotions: list[EmotionLog] = field(default_factory=list)
    assignments: list[AssignmentLog] = field(default_factory=list)
    resets: list[ResetLog] = field(default_factory=list)
    wellness_actions: list[WellnessActionLog] = field(default_factory=list)
    current_streak: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def as_aware(ts: datetime) -> datetime:
    """Naive timestamps are UTC (SQLite drops the offset on read)."""
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def _utc(ts: datetime) -> datetime:
    return as_aware(ts).astimezone(timezone.utc)


def utc_offset_minutes(ts: datetime) -> int:
    """Offset the client sent with `ts`, in minutes east of UTC."""
    return int(as_aware(ts).utcoffset().total_seconds() // 60)


def local_time(ts: datetime, offset_minutes: Optional[int]) -> datetime:
    """
    Rebuild the client's wall clock from a stored UTC instant and its offset.
    Weekday, hour and calendar date of an event are read from this value.
    """
    return as_aware(ts).astimezone(timezone(timedelta(minutes=offset_minutes or 0)))


def _ev(v) -> Optional[str]:
    if v is None:
        return None
    return v.value if hasattr(v, "value") else str(v)


# ---------------------------------------------------------------------------
# Streak
# ---------------------------------------------------------------------------

def calculate_current_streak(activity_dates: Iterable[date], today: Optional[date] = None) -> int:
    """
    Consecutive days of activity ending today or yesterday.

    A streak whose newest day is older than yesterday is broken (0).
    Counting walks backwards one calendar day at a time and stops at the
    first gap.
    """
    today = today or _today()
    days = sorted(set(activity_dates), reverse=True)
    if not days or days[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    for prev, curr in zip(days, days[1:]):
        if (prev - curr).days != 1:
            break
        streak += 1
    return streak


# ---------------------------------------------------------------------------
# Writes (append-only)
# ---------------------------------------------------------------------------

def _append(db: Session, record):
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.debug("Logged %s id=%s user=%s", record.__tablename__, record.id, record.user_id)
    return record


def log_emotion(
    db: Session,
    user_id: str,
    emotion: str,
    intensity: int,
    timestamp: datetime,
    context: Optional[EmotionContext] = None,
) -> EmotionLogRecord:
    context = context or EmotionContext()
    return _append(db, EmotionLogRecord(
        user_id=user_id,
        emotion=emotion,
        intensity=intensity,
        timestamp=_utc(timestamp),
        utc_offset_minutes=utc_offset_minutes(timestamp),
        assignment_type=context.assignment_type,
        day_of_week=context.day_of_week,
        time_of_day=context.time_of_day,
        post_assignment=context.post_assignment,
    ))


def log_assignment(
    db: Session,
    user_id: str,
    assignment_type: str,
    duration: int,
    difficulty: str,
    timestamp: datetime,
    completed: bool = True,
    emotion_after: Optional[str] = None,
) -> AssignmentLogRecord:
    return _append(db, AssignmentLogRecord(
        user_id=user_id,
        assignment_type=assignment_type,
        duration=duration,
        difficulty=Difficulty(difficulty),
        timestamp=_utc(timestamp),
        utc_offset_minutes=utc_offset_minutes(timestamp),
        completed=completed,
        emotion_after=emotion_after,
    ))


def log_reset(
    db: Session,
    user_id: str,
    reset_type: str,
    timestamp: datetime,
    skipped: bool = False,
    effectiveness: Optional[int] = None,
    reason: Optional[str] = None,
) -> ResetLogRecord:
    return _append(db, ResetLogRecord(
        user_id=user_id,
        reset_type=reset_type,
        timestamp=_utc(timestamp),
        utc_offset_minutes=utc_offset_minutes(timestamp),
        skipped=skipped,
        effectiveness=effectiveness,
        reason=reason,
    ))


def log_wellness_action(
    db: Session,
    user_id: str,
    action: str,
    category: str,
    timestamp: datetime,
    duration: Optional[int] = None,
    effectiveness: Optional[int] = None,
) -> WellnessActionLogRecord:
    return _append(db, WellnessActionLogRecord(
        user_id=user_id,
        action=action,
        category=WellnessCategory(category),
        timestamp=_utc(timestamp),
        utc_offset_minutes=utc_offset_minutes(timestamp),
        duration=duration,
        effectiveness=effectiveness,
    ))


# ---------------------------------------------------------------------------
# Read — materialise one user's slice
# ---------------------------------------------------------------------------

def _query(db: Session, model, user_id: str, since: Optional[datetime]):
    q = db.query(model).filter(model.user_id == user_id)
    if since is not None:
        q = q.filter(model.timestamp >= _utc(since))
    return q.order_by(model.timestamp.asc(), model.id.asc()).all()


def load_user_data(
    db: Session,
    user_id: str,
    since: Optional[datetime] = None,
    today: Optional[date] = None,
) -> UserData:
    """
    Read every event log for `user_id` (optionally only from `since` on),
    oldest first, and compute the current activity streak.

    Timestamps come back on the wall clock the client logged them with, so
    weekdays, hours and streak dates are the client's local ones.
    """
    emotions = [
        EmotionLog(
            emotion=r.emotion,
            intensity=r.intensity,
            timestamp=local_time(r.timestamp, r.utc_offset_minutes),
            context=EmotionContext(
                assignment_type=r.assignment_type,
                day_of_week=r.day_of_week,
                time_of_day=r.time_of_day,
                post_assignment=r.post_assignment,
            ),
        )
        for r in _query(db, EmotionLogRecord, user_id, since)
    ]
    assignments = [
        AssignmentLog(
            type=r.assignment_type,
            duration=r.duration,
            difficulty=_ev(r.difficulty),
            timestamp=local_time(r.timestamp, r.utc_offset_minutes),
            completed=r.completed,
            emotion_after=r.emotion_after,
        )
        for r in _query(db, AssignmentLogRecord, user_id, since)
    ]
    resets = [
        ResetLog(
            type=r.reset_type,
            timestamp=local_time(r.timestamp, r.utc_offset_minutes),
            skipped=r.skipped,
            effectiveness=r.effectiveness,
            reason=r.reason,
        )
        for r in _query(db, ResetLogRecord, user_id, since)
    ]
    wellness = [
        WellnessActionLog(
            action=r.action,
            category=_ev(r.category),
            timestamp=local_time(r.timestamp, r.utc_offset_minutes),
            duration=r.duration,
            effectiveness=r.effectiveness,
        )
        for r in _query(db, WellnessActionLogRecord, user_id, since)
    ]

    activity = (
        [e.timestamp.date() for e in emotions]
        + [a.timestamp.date() for a in assignments]
        + [r.timestamp.date() for r in resets if not r.skipped]
        + [w.timestamp.date() for w in wellness]
    )

    return UserData(
        emotions=emotions,
        assignments=assignments,
        resets=resets,
        wellness_actions=wellness,
        current_streak=calculate_current_streak(activity, today),
    )
