"""
Cognitive Load Balancing — deterministic scoring heuristics.

Pure functions, no I/O. Persistence lives in services/load_balancing.py.

Complexity (0-1, weighted sum; weights sum to 1.0)
-------------------------------------------------
  domain expertise     0.25   medical .9 | mental_health .9 | legal .8 |
                              educational .4 | community .3 | general .2
  stakes               0.20   low .2 | medium .5 | high .8 | critical 1.0
  time pressure        0.15   relaxed .1 | normal .3 | urgent .7 | emergency 1.0
  emotional intensity  0.15   low .1 | medium .4 | high .7 | extreme 1.0
  technical jargon     0.10   technical content .8 else .2
  multitasking         0.10   duration > 60 min .6 else .3
  cultural sensitivity 0.05   cultural context .6 else .2

Routing
-------
  utilization ratio = complexity / available capacity
    <= 0.6 low | <= 0.8 moderate | <= 1.0 high | > 1.0 overload (not recommended)
  decision fatigue > 0.7            → escalate one tier (low→moderate, moderate→high)
  emotional intensity > 0.7 and
  emotional resilience < 0.5        → not recommended, whatever the tier
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Lookup tables and weights
# ---------------------------------------------------------------------------

DOMAIN_COMPLEXITY = {
    "medical": 0.9,
    "legal": 0.8,
    "mental_health": 0.9,
    "educational": 0.4,
    "community": 0.3,
    "general": 0.2,
}
STAKES_SCORES = {"low": 0.2, "medium": 0.5, "high": 0.8, "critical": 1.0}
TIME_PRESSURE_SCORES = {"relaxed": 0.1, "normal": 0.3, "urgent": 0.7, "emergency": 1.0}
EMOTIONAL_INTENSITY_SCORES = {"low": 0.1, "medium": 0.4, "high": 0.7, "extreme": 1.0}

# Fallbacks for values outside the tables
_DOMAIN_FALLBACK = 0.5
_STAKES_FALLBACK = 0.5
_TIME_PRESSURE_FALLBACK = 0.3
_EMOTIONAL_INTENSITY_FALLBACK = 0.4

COMPLEXITY_WEIGHTS = {
    "domain_expertise_required": 0.25,
    "stakes_level": 0.20,
    "time_pressure": 0.15,
    "emotional_intensity": 0.15,
    "technical_jargon_density": 0.10,
    "multitasking_required": 0.10,
    "cultural_sensitivity_needed": 0.05,
}

MULTITASKING_DURATION_MINUTES = 60

# Risk tiers, in escalation order
RISK_LEVELS = ("low", "moderate", "high", "overload")

DECISION_FATIGUE_LIMIT = 0.7
EMOTIONAL_INTENSITY_LIMIT = 0.7
EMOTIONAL_RESILIENCE_FLOOR = 0.5

MAX_PREDICTED_ERROR_RATE = 0.5
MIN_PREDICTED_PERFORMANCE = 40

# Guards against division by a zeroed-out capacity / recovery rate
_MIN_DIVISOR = 0.01


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass
class AssignmentDetails:
    type: str
    duration: int                                  # minutes
    domain: str = "general"
    stakes_level: str = "medium"
    time_pressure: str = "normal"
    emotional_intensity: Optional[str] = None      # defaults to "medium"
    technical_content: bool = False
    cultural_context: Optional[str] = None
    language_pair: Optional[str] = None
    specializations: list[str] = field(default_factory=list)


@dataclass
class AssignmentComplexity:
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
    total_complexity_score: float
    required_specializations: list[str] = field(default_factory=list)
    language_pair: Optional[str] = None


@dataclass
class CognitiveCapacity:
    available_capacity: float
    working_memory_load: float
    attention_reserve: float
    decision_fatigue_level: float
    recovery_rate: float
    optimal_break_duration: float                  # minutes
    high_load_performance: float
    multitasking_efficiency: float
    error_rate_under_pressure: float
    medical_terminology_capacity: float
    legal_complexity_capacity: float
    emotional_resilience_capacity: float
    technical_jargon_capacity: float
    measured_at: Optional[datetime] = None
    last_recovery_time: Optional[datetime] = None


DEFAULT_CAPACITY: dict[str, float] = {
    "available_capacity": 0.8,
    "working_memory_load": 0.2,
    "attention_reserve": 0.8,
    "decision_fatigue_level": 0.1,
    "recovery_rate": 1.0,
    "optimal_break_duration": 15,
    "high_load_performance": 0.7,
    "multitasking_efficiency": 0.6,
    "error_rate_under_pressure": 0.1,
    "medical_terminology_capacity": 0.5,
    "legal_complexity_capacity": 0.5,
    "emotional_resilience_capacity": 0.7,
    "technical_jargon_capacity": 0.5,
}

# Fields on the 0-1 scale; clamped on every update
UNIT_SCALE_FIELDS = frozenset(DEFAULT_CAPACITY) - {"recovery_rate", "optimal_break_duration"}


@dataclass
class AlternativeSuggestion:
    action: str              # wait | break | reassign | reduce_complexity
    explanation: str
    duration: Optional[int] = None


@dataclass
class RiskAssessment:
    level: str
    recommended: bool
    reasoning: list[str]


@dataclass
class RoutingRecommendation:
    interpreter_hash: str
    assignment_id: str
    match_score: int                 # 0-100
    capacity_utilization: int        # % of available capacity; > 100 means overload
    risk_level: str
    recommended: bool
    reasoning: list[str]
    predicted_performance: int       # 0-100
    predicted_error_rate: float      # 0-0.5
    recovery_time_needed: int        # minutes
    alternative_suggestions: list[AlternativeSuggestion] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's)."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------

def score_complexity(assignment_id: str, details: AssignmentDetails) -> AssignmentComplexity:
    """Score how demanding an assignment is. Same inputs → same score."""
    domain = DOMAIN_COMPLEXITY.get(details.domain, _DOMAIN_FALLBACK)
    stakes = STAKES_SCORES.get(details.stakes_level, _STAKES_FALLBACK)
    time_pressure = TIME_PRESSURE_SCORES.get(details.time_pressure, _TIME_PRESSURE_FALLBACK)
    emotional = EMOTIONAL_INTENSITY_SCORES.get(
        details.emotional_intensity or "medium", _EMOTIONAL_INTENSITY_FALLBACK
    )
    jargon = 0.8 if details.technical_content else 0.2
    multitasking = 0.6 if details.duration > MULTITASKING_DURATION_MINUTES else 0.3
    cultural = 0.6 if details.cultural_context else 0.2

    components = {
        "domain_expertise_required": domain,
        "stakes_level": stakes,
        "time_pressure": time_pressure,
        "emotional_intensity": emotional,
        "technical_jargon_density": jargon,
        "multitasking_required": multitasking,
        "cultural_sensitivity_needed": cultural,
    }
    total = sum(components[name] * weight for name, weight in COMPLEXITY_WEIGHTS.items())

    return AssignmentComplexity(
        assignment_id=assignment_id,
        assignment_type=details.type,
        estimated_duration=details.duration,
        linguistic_complexity=domain,
        total_complexity_score=total,
        required_specializations=list(details.specializations),
        language_pair=details.language_pair,
        **components,
    )


# ---------------------------------------------------------------------------
# Capacity
# ---------------------------------------------------------------------------

def default_capacity(now: Optional[datetime] = None) -> CognitiveCapacity:
    return CognitiveCapacity(**DEFAULT_CAPACITY, measured_at=now or _now())


def update_capacity(
    existing: Optional[CognitiveCapacity],
    partial: dict[str, Any],
    now: Optional[datetime] = None,
) -> CognitiveCapacity:
    """
    New capacity snapshot: defaults (new user) or `existing`, with `partial`
    merged on top. Unknown keys are ignored; 0-1 fields are clamped.
    """
    known = {f.name for f in fields(CognitiveCapacity)} - {"measured_at"}
    updates = {k: v for k, v in partial.items() if k in known and v is not None}
    for name in UNIT_SCALE_FIELDS & updates.keys():
        updates[name] = clamp(float(updates[name]))

    base = existing if existing is not None else default_capacity()
    return replace(base, **updates, measured_at=now or _now())


def capacity_to_dict(capacity: CognitiveCapacity) -> dict[str, Any]:
    return asdict(capacity)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

def calculate_domain_match(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> float:
    assignment_type = complexity.assignment_type.lower()
    if "medical" in assignment_type:
        match = capacity.medical_terminology_capacity
    elif "legal" in assignment_type:
        match = capacity.legal_complexity_capacity
    elif complexity.technical_jargon_density > 0.6:
        match = capacity.technical_jargon_capacity
    else:
        match = 0.5
    return clamp(match)


def calculate_capacity_match(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> float:
    required = complexity.total_complexity_score
    available = capacity.available_capacity
    if available >= required * 1.2:
        return 1.0
    if available >= required:
        return 0.8
    if available >= required * 0.8:
        return 0.6
    return 0.3


def utilization_ratio(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> float:
    # Rounded so float noise (0.56 / 0.7) cannot cross a tier boundary.
    return round(complexity.total_complexity_score / max(capacity.available_capacity, _MIN_DIVISOR), 9)


def calculate_risk_level(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> RiskAssessment:
    ratio = utilization_ratio(complexity, capacity)
    reasoning: list[str] = []
    recommended = True

    if ratio <= 0.6:
        level = "low"
        reasoning.append("Well within capacity limits")
    elif ratio <= 0.8:
        level = "moderate"
        reasoning.append("Good capacity match")
    elif ratio <= 1.0:
        level = "high"
        reasoning.append("Near capacity limits - monitor closely")
    else:
        level = "overload"
        recommended = False
        reasoning.append("Assignment exceeds current capacity")
        reasoning.append("Risk of errors and burnout")

    if capacity.decision_fatigue_level > DECISION_FATIGUE_LIMIT:
        reasoning.append("High decision fatigue detected")
        # one tier only; high and overload stay put
        if level in ("low", "moderate"):
            level = RISK_LEVELS[RISK_LEVELS.index(level) + 1]

    if (
        complexity.emotional_intensity > EMOTIONAL_INTENSITY_LIMIT
        and capacity.emotional_resilience_capacity < EMOTIONAL_RESILIENCE_FLOOR
    ):
        reasoning.append("Emotional intensity may exceed resilience")
        recommended = False

    return RiskAssessment(level=level, recommended=recommended, reasoning=reasoning)


def calculate_predicted_performance(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> int:
    raw = (
        85 * capacity.available_capacity
        - complexity.total_complexity_score * 20
        - capacity.decision_fatigue_level * 15
    )
    return max(MIN_PREDICTED_PERFORMANCE, round_half_up(raw))


def calculate_predicted_error_rate(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> float:
    rate = (
        0.05
        * (1 + complexity.total_complexity_score)
        * (2 - capacity.available_capacity)
        * (1 + capacity.error_rate_under_pressure)
    )
    return clamp(rate, 0.0, MAX_PREDICTED_ERROR_RATE)


def calculate_recovery_time(complexity: AssignmentComplexity, capacity: CognitiveCapacity) -> int:
    rate = max(capacity.recovery_rate, _MIN_DIVISOR)
    return round_half_up(capacity.optimal_break_duration / rate + complexity.total_complexity_score * 20)


def _alternatives(risk: RiskAssessment, capacity: CognitiveCapacity) -> list[AlternativeSuggestion]:
    suggestions: list[AlternativeSuggestion] = []
    if risk.level == "overload":
        suggestions.append(AlternativeSuggestion(
            action="break",
            duration=round_half_up(capacity.optimal_break_duration),
            explanation="Recover before taking on an assignment of this complexity.",
        ))
    if not risk.recommended:
        suggestions.append(AlternativeSuggestion(
            action="reassign",
            explanation="Route to an interpreter with more available capacity.",
        ))
    return suggestions


def recommend_routing(
    complexity: AssignmentComplexity,
    capacity: CognitiveCapacity,
    interpreter_hash: str = "",
) -> RoutingRecommendation:
    """Combine one complexity score with one capacity snapshot."""
    domain_match = calculate_domain_match(complexity, capacity)
    capacity_match = calculate_capacity_match(complexity, capacity)
    risk = calculate_risk_level(complexity, capacity)

    return RoutingRecommendation(
        interpreter_hash=interpreter_hash,
        assignment_id=complexity.assignment_id,
        match_score=round_half_up((domain_match + capacity_match) / 2 * 100),
        capacity_utilization=round_half_up(utilization_ratio(complexity, capacity) * 100),
        risk_level=risk.level,
        recommended=risk.recommended,
        reasoning=risk.reasoning,
        alternative_suggestions=_alternatives(risk, capacity),
        predicted_performance=calculate_predicted_performance(complexity, capacity),
        predicted_error_rate=calculate_predicted_error_rate(complexity, capacity),
        recovery_time_needed=calculate_recovery_time(complexity, capacity),
    )


# ---------------------------------------------------------------------------
# Outcome learning
# ---------------------------------------------------------------------------

@dataclass
class AssignmentOutcomeInput:
    actual_performance: float        # 0-100
    actual_error_rate: float         # 0-1
    actual_recovery_time: float      # minutes
    stress_level: float              # 0-10
    difficulty_rating: float
    notes: Optional[str] = None


def calculate_capacity_adjustment(outcome: AssignmentOutcomeInput) -> dict[str, float]:
    """Partial capacity update derived from how an assignment actually went."""
    adjustment: dict[str, float] = {}

    if outcome.actual_performance > 90:
        adjustment["available_capacity"] = min(1.0, outcome.actual_performance / 100 * 1.1)
    elif outcome.actual_performance < 70:
        adjustment["available_capacity"] = max(0.3, outcome.actual_performance / 100 * 0.9)

    if outcome.stress_level > 7:
        adjustment["decision_fatigue_level"] = min(1.0, outcome.stress_level / 10)

    if outcome.actual_recovery_time > 30:
        adjustment["optimal_break_duration"] = min(60, outcome.actual_recovery_time)

    return adjustment
