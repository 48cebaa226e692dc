"""
Load balancing service: the scoring heuristics plus the scores/outcomes store.

Writes are best-effort. A failed write is rolled back and logged; the
computed score, snapshot or recommendation is still returned as if the write
had succeeded. Nothing is retried.

Missing capacity is a new user (default snapshot). Missing complexity is the
one hard failure: routing raises ComplexityNotFoundError.

Public API
----------
score_assignment_complexity(db, assignment_id, details)  -> AssignmentComplexity  (upsert)
get_complexity(db, assignment_id)                        -> AssignmentComplexity | None
get_current_capacity(db, user_hash)                      -> CognitiveCapacity | None
update_cognitive_capacity(db, user_id, partial)          -> CognitiveCapacity     (append)
get_assignment_routing(db, assignment_id, interpreters)  -> list[RoutingRecommendation]
record_assignment_outcome(db, user_id, assignment_id, o) -> OutcomeResult
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from interpret_reflect.core.errors import ComplexityNotFoundError
from interpret_reflect.core.security import hash_user_id
from interpret_reflect.models.cognitive import (
    AssignmentComplexityScore,
    AssignmentOutcome,
    CognitiveCapacitySnapshot,
)
from interpret_reflect.services.cognitive_load import (
    DEFAULT_CAPACITY,
    AssignmentComplexity,
    AssignmentDetails,
    AssignmentOutcomeInput,
    CognitiveCapacity,
    RoutingRecommendation,
    calculate_capacity_adjustment,
    default_capacity,
    recommend_routing,
    score_complexity,
    update_capacity,
)
from interpret_reflect.services.events import as_aware

logger = logging.getLogger(__name__)

_SCORE_FIELDS = (
    "linguistic_complexity",
    "domain_expertise_required",
    "emotional_intensity",
    "time_pressure",
    "stakes_level",
    "multitasking_required",
    "technical_jargon_density",
    "cultural_sensitivity_needed",
    "total_complexity_score",
)
_CAPACITY_FIELDS = tuple(DEFAULT_CAPACITY) + ("last_recovery_time",)


@dataclass
class OutcomeResult:
    adjustment: dict[str, float]
    capacity: CognitiveCapacity


# ---------------------------------------------------------------------------
# Best-effort write
# ---------------------------------------------------------------------------

def _best_effort_commit(db: Session, what: str) -> bool:
    try:
        db.commit()
        return True
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to persist %s; returning computed result", what)
        return False


# ---------------------------------------------------------------------------
# Row <-> value conversion
# ---------------------------------------------------------------------------

def _complexity_from_row(row: AssignmentComplexityScore) -> AssignmentComplexity:
    try:
        specializations = json.loads(row.required_specializations or "[]")
    except (ValueError, TypeError):
        specializations = []
    return AssignmentComplexity(
        assignment_id=row.assignment_id,
        assignment_type=row.assignment_type,
        estimated_duration=row.estimated_duration,
        required_specializations=specializations if isinstance(specializations, list) else [],
        language_pair=row.language_pair,
        **{name: getattr(row, name) for name in _SCORE_FIELDS},
    )


def _capacity_from_row(row: CognitiveCapacitySnapshot) -> CognitiveCapacity:
    values: dict[str, Any] = {name: getattr(row, name) for name in _CAPACITY_FIELDS}
    if values["last_recovery_time"] is not None:
        values["last_recovery_time"] = as_aware(values["last_recovery_time"])
    return CognitiveCapacity(measured_at=as_aware(row.measured_at), **values)


# ---------------------------------------------------------------------------
# Complexity (upsert by assignment_id)
# ---------------------------------------------------------------------------

def get_complexity(db: Session, assignment_id: str) -> Optional[AssignmentComplexity]:
    row = (
        db.query(AssignmentComplexityScore)
        .filter(AssignmentComplexityScore.assignment_id == assignment_id)
        .first()
    )
    return _complexity_from_row(row) if row is not None else None


def score_assignment_complexity(
    db: Session,
    assignment_id: str,
    details: AssignmentDetails,
) -> AssignmentComplexity:
    complexity = score_complexity(assignment_id, details)

    try:
        row = (
            db.query(AssignmentComplexityScore)
            .filter(AssignmentComplexityScore.assignment_id == assignment_id)
            .first()
        )
        if row is None:
            row = AssignmentComplexityScore(assignment_id=assignment_id)
            db.add(row)
        row.assignment_type = complexity.assignment_type
        row.estimated_duration = complexity.estimated_duration
        row.required_specializations = json.dumps(complexity.required_specializations)
        row.language_pair = complexity.language_pair
        for name in _SCORE_FIELDS:
            setattr(row, name, getattr(complexity, name))
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load complexity row for %s", assignment_id)
        return complexity

    if _best_effort_commit(db, f"complexity for {assignment_id}"):
        logger.info(
            "Scored assignment %s total=%.3f", assignment_id, complexity.total_complexity_score
        )
    return complexity


# ---------------------------------------------------------------------------
# Capacity (append-only time series)
# ---------------------------------------------------------------------------

def get_current_capacity(db: Session, user_hash: str) -> Optional[CognitiveCapacity]:
    """Most recent snapshot for the user, or None for a new user."""
    row = (
        db.query(CognitiveCapacitySnapshot)
        .filter(CognitiveCapacitySnapshot.user_hash == user_hash)
        .order_by(CognitiveCapacitySnapshot.measured_at.desc(), CognitiveCapacitySnapshot.id.desc())
        .first()
    )
    return _capacity_from_row(row) if row is not None else None


def _safe_current_capacity(db: Session, user_hash: str) -> Optional[CognitiveCapacity]:
    try:
        return get_current_capacity(db, user_hash)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to read capacity for %s; assuming new user", user_hash[:12])
        return None


def update_cognitive_capacity(
    db: Session,
    user_id: str,
    partial: dict[str, Any],
) -> CognitiveCapacity:
    """Merge `partial` over the current snapshot (or defaults) and append it."""
    user_hash = hash_user_id(user_id)
    existing = _safe_current_capacity(db, user_hash)
    capacity = update_capacity(existing, partial)

    db.add(CognitiveCapacitySnapshot(
        user_hash=user_hash,
        measured_at=capacity.measured_at,
        **{name: getattr(capacity, name) for name in _CAPACITY_FIELDS},
    ))
    if _best_effort_commit(db, "capacity snapshot"):
        logger.debug("Capacity snapshot stored for %s", user_hash[:12])
    return capacity


def current_or_default_capacity(db: Session, user_id: str) -> CognitiveCapacity:
    return _safe_current_capacity(db, hash_user_id(user_id)) or default_capacity()


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

def get_assignment_routing(
    db: Session,
    assignment_id: str,
    interpreter_ids: list[str],
) -> list[RoutingRecommendation]:
    """
    One recommendation per interpreter, best match first.
    Raises ComplexityNotFoundError if the assignment was never scored.
    """
    complexity = get_complexity(db, assignment_id)
    if complexity is None:
        raise ComplexityNotFoundError(assignment_id)

    recommendations = []
    for interpreter_id in interpreter_ids:
        user_hash = hash_user_id(interpreter_id)
        capacity = _safe_current_capacity(db, user_hash) or default_capacity()
        recommendations.append(recommend_routing(complexity, capacity, interpreter_hash=user_hash))

    recommendations.sort(key=lambda r: r.match_score, reverse=True)
    return recommendations


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

def record_assignment_outcome(
    db: Session,
    user_id: str,
    assignment_id: str,
    outcome: AssignmentOutcomeInput,
) -> OutcomeResult:
    """Append the outcome, then feed the derived adjustment into capacity."""
    db.add(AssignmentOutcome(
        user_hash=hash_user_id(user_id),
        assignment_id=assignment_id,
        actual_performance=outcome.actual_performance,
        actual_error_rate=outcome.actual_error_rate,
        actual_recovery_time=outcome.actual_recovery_time,
        stress_level=outcome.stress_level,
        difficulty_rating=outcome.difficulty_rating,
        notes=outcome.notes,
    ))
    _best_effort_commit(db, f"outcome for {assignment_id}")

    adjustment = calculate_capacity_adjustment(outcome)
    capacity = update_cognitive_capacity(db, user_id, adjustment)
    return OutcomeResult(adjustment=adjustment, capacity=capacity)
