"""
Patterns router — rule-based pattern detection and nudges.

POST   /patterns/{user_id}/analyze               — evaluate rules, return new nudges
GET    /patterns/{user_id}/nudges                — active nudges, high priority first
DELETE /patterns/{user_id}/nudges/{nudge_id}     — dismiss (idempotent)
GET    /patterns/{user_id}/recommendations       — up to 3 personalised recommendations
GET    /patterns/{user_id}                       — detected patterns
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from interpret_reflect.db.base import get_db
from interpret_reflect.schemas.patterns import (
    AnalyzeRequest,
    NudgeActionOut,
    NudgeListResponse,
    NudgeOut,
    PatternListResponse,
    PatternOut,
    RecommendationsResponse,
)
from interpret_reflect.services.events import load_user_data
from interpret_reflect.services.pattern_engine import (
    PatternNudge,
    PatternStateRegistry,
    UserPattern,
    analyze_patterns,
    dismiss_nudge,
    get_active_nudges,
    get_pattern_registry,
    get_personalized_recommendations,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patterns", tags=["patterns"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _nudge_to_response(n: PatternNudge) -> NudgeOut:
    return NudgeOut(
        id=n.id,
        rule_id=n.rule_id,
        priority=n.priority,
        type=n.type,
        title=n.title,
        message=n.message,
        action=NudgeActionOut(label=n.action.label, target=n.action.target) if n.action else None,
        dismissible=n.dismissible,
        expires_in=n.expires_in,
        created_at=n.created_at.isoformat(),
        expires_at=n.expires_at.isoformat() if n.expires_at else None,
    )


def _nudge_list(nudges: list[PatternNudge]) -> NudgeListResponse:
    return NudgeListResponse(total=len(nudges), items=[_nudge_to_response(n) for n in nudges])


def _pattern_to_response(p: UserPattern) -> PatternOut:
    return PatternOut(
        rule_id=p.rule_id,
        type=p.type,
        pattern=p.pattern,
        confidence=p.confidence,
        occurrences=p.occurrences,
        timeframe=p.timeframe,
        last_detected=p.last_detected.isoformat(),
        metadata=p.metadata,
    )


# ---------------------------------------------------------------------------
# POST /patterns/{user_id}/analyze
# ---------------------------------------------------------------------------

@router.post(
    "/{user_id}/analyze",
    response_model=NudgeListResponse,
    summary="Run every detection rule against the user's logged events",
    responses={
        200: {"description": "Nudges emitted by this run (may be empty)."},
    },
)
def analyze(
    user_id: str,
    payload: Optional[AnalyzeRequest] = Body(default=None),
    db: Session = Depends(get_db),
    registry: PatternStateRegistry = Depends(get_pattern_registry),
):
    """
    Load the user's events, evaluate the rule catalog and return only the
    nudges created by this call.

    A rule's first match registers the pattern without a nudge. Later matches
    that reach the rule's threshold emit a nudge unless an identical one is
    still active.
    """
    payload = payload or AnalyzeRequest()
    data = load_user_data(db=db, user_id=user_id, since=payload.since)
    if payload.current_streak is not None:
        data.current_streak = payload.current_streak

    with registry.locked(user_id) as state:
        new_nudges = analyze_patterns(state, data)
    logger.debug("Analyzed %s: %d new nudge(s)", user_id, len(new_nudges))
    return _nudge_list(new_nudges)


# ---------------------------------------------------------------------------
# Nudges
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/nudges",
    response_model=NudgeListResponse,
    summary="Active nudges, high priority first",
)
def list_nudges(
    user_id: str,
    registry: PatternStateRegistry = Depends(get_pattern_registry),
):
    with registry.locked(user_id) as state:
        return _nudge_list(get_active_nudges(state))


@router.delete(
    "/{user_id}/nudges/{nudge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss a nudge",
    responses={
        204: {"description": "Nudge removed, or it was not active to begin with."},
    },
)
def delete_nudge(
    user_id: str,
    nudge_id: str,
    registry: PatternStateRegistry = Depends(get_pattern_registry),
):
    with registry.locked(user_id) as state:
        dismissed = dismiss_nudge(state, nudge_id)
    if dismissed:
        logger.info("Nudge dismissed user=%s id=%s", user_id, nudge_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Recommendations & patterns
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/recommendations",
    response_model=RecommendationsResponse,
    summary="Up to three recommendations from the strongest patterns",
)
def recommendations(
    user_id: str,
    registry: PatternStateRegistry = Depends(get_pattern_registry),
):
    with registry.locked(user_id) as state:
        items = get_personalized_recommendations(state)
    return RecommendationsResponse(items=items)


@router.get(
    "/{user_id}",
    response_model=PatternListResponse,
    summary="Patterns detected for the user",
)
def list_patterns(
    user_id: str,
    registry: PatternStateRegistry = Depends(get_pattern_registry),
):
    with registry.locked(user_id) as state:
        patterns = sorted(state.patterns.values(), key=lambda p: p.last_detected, reverse=True)
    return PatternListResponse(
        total=len(patterns),
        items=[_pattern_to_response(p) for p in patterns],
    )
