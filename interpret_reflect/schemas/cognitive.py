"""
Cognitive Load Balancing request / response schemas.

POST /cognitive/complexity           → ComplexityRequest     → ComplexityResponse
POST /cognitive/capacity/{user_id}   → CapacityUpdateRequest → CapacityResponse
GET  /cognitive/capacity/{user_id}   → CapacityResponse
POST /cognitive/routing              → RoutingRequest        → RoutingResponse
POST /cognitive/outcomes             → OutcomeRequest        → OutcomeResponse
"""
from __future__ import annotations

import enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

UnitScore = Annotated[float, Field(ge=0.0, le=1.0)]

ROUTING_MAX_INTERPRETERS = 100


class Domain(str, enum.Enum):
    medical = "medical"
    legal = "legal"
    educational = "educational"
    mental_health = "mental_health"
    community = "community"
    general = "general"


class StakesLevel(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class TimePressure(str, enum.Enum):
    relaxed = "relaxed"
    normal = "normal"
    urgent = "urgent"
    emergency = "emergency"


class EmotionalIntensity(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    extreme = "extreme"


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------

class ComplexityRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    assignment_id: str = Field(min_length=1, max_length=128, examples=["asg-2026-0412"])
    type: str = Field(min_length=1, max_length=64, examples=["medical"])
    duration: int = Field(ge=0, description="Estimated minutes.")
    domain: Domain
    stakes_level: StakesLevel
    time_pressure: TimePressure
    emotional_intensity: Optional[EmotionalIntensity] = Field(
        default=None, description='Defaults to "medium".'
    )
    technical_content: bool = False
    cultural_context: Optional[str] = Field(default=None, max_length=256)
    language_pair: Optional[str] = Field(default=None, max_length=64, examples=["ASL-English"])
    specializations: list[str] = Field(default_factory=list)


class ComplexityResponse(BaseModel):
    assignment_id: str
    assignment_type: str
    estimated_duration: int
    linguistic_complexity: float
    domain_expertise_required: float
    emotional_intensity: float
    time_pressure: float
    stakes_level: float
    multitasking_required: float
    technical_jargon_density: float
    cultural_sensitivity_needed: float
    total_complexity_score: float = Field(description="Weighted sum, 0.0–1.0.")
    required_specializations: list[str]
    language_pair: Optional[str] = None


# ---------------------------------------------------------------------------
# Capacity
# ---------------------------------------------------------------------------

class CapacityUpdateRequest(BaseModel):
    """Partial capacity measurement. Omitted fields keep their current value."""
    available_capacity: Optional[UnitScore] = None
    working_memory_load: Optional[UnitScore] = None
    attention_reserve: Optional[UnitScore] = None
    decision_fatigue_level: Optional[UnitScore] = None
    recovery_rate: Optional[float] = Field(default=None, gt=0)
    optimal_break_duration: Optional[float] = Field(default=None, ge=0, description="Minutes.")
    high_load_performance: Optional[UnitScore] = None
    multitasking_efficiency: Optional[UnitScore] = None
    error_rate_under_pressure: Optional[UnitScore] = None
    medical_terminology_capacity: Optional[UnitScore] = None
    legal_complexity_capacity: Optional[UnitScore] = None
    emotional_resilience_capacity: Optional[UnitScore] = None
    technical_jargon_capacity: Optional[UnitScore] = None


class CapacityResponse(BaseModel):
    available_capacity: float
    working_memory_load: float
    attention_reserve: float
    decision_fatigue_level: float
    recovery_rate: float
    optimal_break_duration: float
    high_load_performance: float
    multitasking_efficiency: float
    error_rate_under_pressure: float
    medical_terminology_capacity: float
    legal_complexity_capacity: float
    emotional_resilience_capacity: float
    technical_jargon_capacity: float
    measured_at: Optional[str] = None
    last_recovery_time: Optional[str] = None


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class RoutingRequest(BaseModel):
    assignment_id: str = Field(min_length=1, max_length=128)
    interpreter_ids: Annotated[list[str], Field(
        min_length=1,
        max_length=ROUTING_MAX_INTERPRETERS,
        description=f"Candidate interpreters (1–{ROUTING_MAX_INTERPRETERS}).",
    )]


class AlternativeSuggestionOut(BaseModel):
    action: str = Field(description='"wait" | "break" | "reassign" | "reduce_complexity"')
    explanation: str
    duration: Optional[int] = None


class RoutingRecommendationOut(BaseModel):
    interpreter_hash: str
    assignment_id: str
    match_score: int = Field(description="0–100.")
    capacity_utilization: int = Field(
        description="Percent of available capacity; above 100 means overload."
    )
    risk_level: str = Field(description='"low" | "moderate" | "high" | "overload"')
    recommended: bool
    reasoning: list[str] = Field(description="Human-readable reasons, in the order they fired.")
    alternative_suggestions: list[AlternativeSuggestionOut] = Field(default_factory=list)
    predicted_performance: int
    predicted_error_rate: float
    recovery_time_needed: int = Field(description="Minutes.")


class RoutingResponse(BaseModel):
    assignment_id: str
    items: list[RoutingRecommendationOut] = Field(description="Best match first.")


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class OutcomeRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=128)
    assignment_id: str = Field(min_length=1, max_length=128)
    actual_performance: float = Field(ge=0, le=100)
    actual_error_rate: float = Field(ge=0, le=1)
    actual_recovery_time: float = Field(ge=0, description="Minutes.")
    stress_level: float = Field(ge=0, le=10)
    difficulty_rating: float = Field(ge=0, le=10)
    notes: Optional[str] = Field(default=None, max_length=5_000)


class OutcomeResponse(BaseModel):
    adjustment: dict[str, float] = Field(description="Capacity fields changed by this outcome.")
    capacity: CapacityResponse
