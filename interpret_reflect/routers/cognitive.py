"""
Cognitive router — complexity scoring, capacity tracking and routing.

POST /cognitive/complexity             — score (and store) an assignment
POST /cognitive/capacity/{user_id}     — append a capacity measurement
GET  /cognitive/capacity/{user_id}     — latest capacity (defaults for new users)
POST /cognitive/routing                — rank interpreters for a scored assignment
POST /cognitive/outcomes               — record an outcome, adjust capacity
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from interpret_reflect.db.base import get_db
from interpret_reflect.schemas.cognitive import (
    AlternativeSuggestionOut,
    CapacityResponse,
    CapacityUpdateRequest,
    ComplexityRequest,
    ComplexityResponse,
    OutcomeRequest,
    OutcomeResponse,
    RoutingRecommendationOut,
    RoutingRequest,
    RoutingResponse,
)
from interpret_reflect.schemas.common import ErrorResponse
from interpret_reflect.services.cognitive_load import (
    AssignmentComplexity,
    AssignmentDetails,
    AssignmentOutcomeInput,
    CognitiveCapacity,
    RoutingRecommendation,
    capacity_to_dict,
)
from interpret_reflect.services.load_balancing import (
    current_or_default_capacity,
    get_assignment_routing,
    record_assignment_outcome,
    score_assignment_complexity,
    update_cognitive_capacity,
)

router = APIRouter(prefix="/cognitive", tags=["cognitive"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _complexity_to_response(c: AssignmentComplexity) -> ComplexityResponse:
    return ComplexityResponse(
        assignment_id=c.assignment_id,
        assignment_type=c.assignment_type,
        estimated_duration=c.estimated_duration,
        linguistic_complexity=c.linguistic_complexity,
        domain_expertise_required=c.domain_expertise_required,
        emotional_intensity=c.emotional_intensity,
        time_pressure=c.time_pressure,
        stakes_level=c.stakes_level,
        multitasking_required=c.multitasking_required,
        technical_jargon_density=c.technical_jargon_density,
        cultural_sensitivity_needed=c.cultural_sensitivity_needed,
        total_complexity_score=c.total_complexity_score,
        required_specializations=list(c.required_specializations),
        language_pair=c.language_pair,
    )


def _capacity_to_response(c: CognitiveCapacity) -> CapacityResponse:
    values = capacity_to_dict(c)
    for key in ("measured_at", "last_recovery_time"):
        if values[key] is not None:
            values[key] = values[key].isoformat()
    return CapacityResponse(**values)


def _recommendation_to_response(r: RoutingRecommendation) -> RoutingRecommendationOut:
    return RoutingRecommendationOut(
        interpreter_hash=r.interpreter_hash,
        assignment_id=r.assignment_id,
        match_score=r.match_score,
        capacity_utilization=r.capacity_utilization,
        risk_level=r.risk_level,
        recommended=r.recommended,
        reasoning=list(r.reasoning),
        alternative_suggestions=[
            AlternativeSuggestionOut(action=s.action, explanation=s.explanation, duration=s.duration)
            for s in r.alternative_suggestions
        ],
        predicted_performance=r.predicted_performance,
        predicted_error_rate=r.predicted_error_rate,
        recovery_time_needed=r.recovery_time_needed,
    )


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------

@router.post(
    "/complexity",
    response_model=ComplexityResponse,
    summary="Score an assignment's cognitive complexity",
)
def post_complexity(payload: ComplexityRequest, db: Session = Depends(get_db)):
    """
    Compute the eight complexity factors and their weighted total.
    Re-scoring the same `assignment_id` replaces the stored score.
    """
    details = AssignmentDetails(
        type=payload.type,
        duration=payload.duration,
        domain=payload.domain,
        stakes_level=payload.stakes_level,
        time_pressure=payload.time_pressure,
        emotional_intensity=payload.emotional_intensity,
        technical_content=payload.technical_content,
        cultural_context=payload.cultural_context,
        language_pair=payload.language_pair,
        specializations=list(payload.specializations),
    )
    return _complexity_to_response(
        score_assignment_complexity(db, payload.assignment_id, details)
    )


# ---------------------------------------------------------------------------
# Capacity
# ---------------------------------------------------------------------------

@router.post(
    "/capacity/{user_id}",
    response_model=CapacityResponse,
    summary="Record a (partial) capacity measurement",
)
def post_capacity(user_id: str, payload: CapacityUpdateRequest, db: Session = Depends(get_db)):
    capacity = update_cognitive_capacity(db, user_id, payload.model_dump(exclude_none=True))
    return _capacity_to_response(capacity)


@router.get(
    "/capacity/{user_id}",
    response_model=CapacityResponse,
    summary="Latest capacity snapshot",
)
def get_capacity(user_id: str, db: Session = Depends(get_db)):
    """Users with no measurements get the default snapshot."""
    return _capacity_to_response(current_or_default_capacity(db, user_id))


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

@router.post(
    "/routing",
    response_model=RoutingResponse,
    summary="Rank candidate interpreters for an assignment",
    responses={
        404: {"model": ErrorResponse, "description": "Assignment has not been scored."},
    },
)
def post_routing(payload: RoutingRequest, db: Session = Depends(get_db)):
    recommendations = get_assignment_routing(db, payload.assignment_id, payload.interpreter_ids)
    return RoutingResponse(
        assignment_id=payload.assignment_id,
        items=[_recommendation_to_response(r) for r in recommendations],
    )


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

@router.post(
    "/outcomes",
    response_model=OutcomeResponse,
    summary="Record how an assignment went and adjust capacity",
)
def post_outcome(payload: OutcomeRequest, db: Session = Depends(get_db)):
    outcome = AssignmentOutcomeInput(
        actual_performance=payload.actual_performance,
        actual_error_rate=payload.actual_error_rate,
        actual_recovery_time=payload.actual_recovery_time,
        stress_level=payload.stress_level,
        difficulty_rating=payload.difficulty_rating,
        notes=payload.notes,
    )
    result = record_assignment_outcome(db, payload.user_id, payload.assignment_id, outcome)
    return OutcomeResponse(
        adjustment=result.adjustment,
        capacity=_capacity_to_response(result.capacity),
    )
