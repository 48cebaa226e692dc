"""
Events router — append-only user event logs.

POST /events/{user_id}/emotions
POST /events/{user_id}/assignments
POST /events/{user_id}/resets
POST /events/{user_id}/wellness-actions
GET  /events/{user_id}
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from interpret_reflect.db.base import get_db
from interpret_reflect.schemas.events import (
    AssignmentLogRequest,
    AssignmentOut,
    EmotionContextIn,
    EmotionLogRequest,
    EmotionOut,
    EventLoggedResponse,
    ResetLogRequest,
    ResetOut,
    UserDataResponse,
    WellnessActionLogRequest,
    WellnessActionOut,
)
from interpret_reflect.services.events import (
    EmotionContext,
    local_time,
    load_user_data,
    log_assignment,
    log_emotion,
    log_reset,
    log_wellness_action,
)

router = APIRouter(prefix="/events", tags=["events"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _logged(record, kind: str) -> EventLoggedResponse:
    return EventLoggedResponse(
        id=record.id,
        user_id=record.user_id,
        kind=kind,
        timestamp=local_time(record.timestamp, record.utc_offset_minutes).isoformat(),
    )


# ---------------------------------------------------------------------------
# POST /events/{user_id}/...
# ---------------------------------------------------------------------------

@router.post(
    "/{user_id}/emotions",
    response_model=EventLoggedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an emotion check-in",
)
def post_emotion(user_id: str, payload: EmotionLogRequest, db: Session = Depends(get_db)):
    context = None
    if payload.context is not None:
        context = EmotionContext(**payload.context.model_dump())
    record = log_emotion(
        db=db,
        user_id=user_id,
        emotion=payload.emotion,
        intensity=payload.intensity,
        timestamp=payload.timestamp,
        context=context,
    )
    return _logged(record, "emotion")


@router.post(
    "/{user_id}/assignments",
    response_model=EventLoggedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an interpreting assignment",
)
def post_assignment(user_id: str, payload: AssignmentLogRequest, db: Session = Depends(get_db)):
    record = log_assignment(
        db=db,
        user_id=user_id,
        assignment_type=payload.type,
        duration=payload.duration,
        difficulty=payload.difficulty,
        timestamp=payload.timestamp,
        completed=payload.completed,
        emotion_after=payload.emotion_after,
    )
    return _logged(record, "assignment")


@router.post(
    "/{user_id}/resets",
    response_model=EventLoggedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a reset (completed or skipped)",
)
def post_reset(user_id: str, payload: ResetLogRequest, db: Session = Depends(get_db)):
    record = log_reset(
        db=db,
        user_id=user_id,
        reset_type=payload.type,
        timestamp=payload.timestamp,
        skipped=payload.skipped,
        effectiveness=payload.effectiveness,
        reason=payload.reason,
    )
    return _logged(record, "reset")


@router.post(
    "/{user_id}/wellness-actions",
    response_model=EventLoggedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a wellness action",
)
def post_wellness_action(
    user_id: str,
    payload: WellnessActionLogRequest,
    db: Session = Depends(get_db),
):
    record = log_wellness_action(
        db=db,
        user_id=user_id,
        action=payload.action,
        category=payload.category,
        timestamp=payload.timestamp,
        duration=payload.duration,
        effectiveness=payload.effectiveness,
    )
    return _logged(record, "wellness_action")


# ---------------------------------------------------------------------------
# GET /events/{user_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}",
    response_model=UserDataResponse,
    summary="A user's event history (oldest first)",
)
def get_user_events(
    user_id: str,
    since: Optional[datetime] = Query(
        default=None,
        description="Only events at or after this instant. Omit for full history.",
    ),
    db: Session = Depends(get_db),
):
    """Return exactly the slice the pattern engine evaluates for this user."""
    data = load_user_data(db=db, user_id=user_id, since=since)
    return UserDataResponse(
        user_id=user_id,
        current_streak=data.current_streak,
        emotions=[
            EmotionOut(
                emotion=e.emotion,
                intensity=e.intensity,
                timestamp=e.timestamp.isoformat(),
                context=EmotionContextIn(
                    assignment_type=e.context.assignment_type,
                    day_of_week=e.context.day_of_week,
                    time_of_day=e.context.time_of_day,
                    post_assignment=e.context.post_assignment,
                ) if e.context else None,
            )
            for e in data.emotions
        ],
        assignments=[
            AssignmentOut(
                type=a.type,
                duration=a.duration,
                difficulty=a.difficulty,
                timestamp=a.timestamp.isoformat(),
                completed=a.completed,
                emotion_after=a.emotion_after,
            )
            for a in data.assignments
        ],
        resets=[
            ResetOut(
                type=r.type,
                timestamp=r.timestamp.isoformat(),
                skipped=r.skipped,
                effectiveness=r.effectiveness,
                reason=r.reason,
            )
            for r in data.resets
        ],
        wellness_actions=[
            WellnessActionOut(
                action=w.action,
                category=w.category,
                timestamp=w.timestamp.isoformat(),
                duration=w.duration,
                effectiveness=w.effectiveness,
            )
            for w in data.wellness_actions
        ],
    )
