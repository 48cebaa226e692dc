"""
Pattern detection rule catalog.

Each rule is data: an id, a pure predicate over one user's event history,
an occurrence threshold and a nudge template. Predicates receive `now`
explicitly so they never read the clock themselves.

Rules (catalog order)
---------------------
  medical-fatigue       >60% of last-7-day medical assignments followed within 4h
                        by exhausted/stressed/overwhelmed                    threshold 3
  monday-stress         Monday anxious/stressed (intensity >= 3) per Monday > 0.5  threshold 3
  missed-reset-stress   >2 stressed (>= 4) emotions within 24h after a reset
                        skipped in the last 3 days                           threshold 2
  legal-anxiety         >70% of legal/court assignments preceded within 24h
                        by anxious (>= 3)                                    threshold 2
  afternoon-exhaustion  exhausted (>= 3) at 14:00-16:59 per afternoon > 0.4  threshold 5
  wellness-streak       streak >= 7 and a multiple of 7                      threshold 1
  weekend-recovery      Friday exhausted/overwhelmed (>= 4) per Friday > 0.6 threshold 3
  effective-wellness    >= 5 actions rated >= 4, one category >= 3 of them   threshold 1

The ratios and windows are the entire behavioural contract: change them
only together with tests/test_pattern_rules.py.
"""
from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from interpret_reflect.services.events import UserData


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PatternType(str, enum.Enum):
    emotion = "emotion"
    assignment = "assignment"
    timing = "timing"
    reset = "reset"
    wellness = "wellness"


class Timeframe(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class NudgePriority(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


class NudgeType(str, enum.Enum):
    insight = "insight"
    suggestion = "suggestion"
    encouragement = "encouragement"
    warning = "warning"


class RecommendationTag(str, enum.Enum):
    medical_boundaries = "medical_boundaries"
    monday_mindfulness = "monday_mindfulness"
    afternoon_energy = "afternoon_energy"
    legal_confidence = "legal_confidence"


RECOMMENDATIONS: dict[RecommendationTag, str] = {
    RecommendationTag.medical_boundaries: "Schedule boundary-setting time after medical assignments",
    RecommendationTag.monday_mindfulness: "Start Mondays with mindfulness practice",
    RecommendationTag.afternoon_energy: "Take energizing breaks between 2-4 PM",
    RecommendationTag.legal_confidence: "Practice confidence exercises before court assignments",
}


# ---------------------------------------------------------------------------
# Rule types
# ---------------------------------------------------------------------------

Predicate = Callable[[UserData, datetime], bool]
Describe = Callable[[UserData], dict[str, Any]]


@dataclass(frozen=True)
class NudgeAction:
    label: str
    target: str  # route or action


@dataclass(frozen=True)
class NudgeTemplate:
    """Nudge copy. `title`/`message` may hold str.format placeholders."""
    priority: NudgePriority
    type: NudgeType
    title: str
    message: str
    action: Optional[NudgeAction] = None
    dismissible: bool = True
    expires_in: Optional[int] = None  # hours
    defaults: dict[str, Any] = field(default_factory=dict)

    def render(self, metadata: Optional[dict[str, Any]] = None) -> tuple[str, str]:
        values = {**self.defaults, **(metadata or {})}
        return self.title.format(**values), self.message.format(**values)


@dataclass(frozen=True)
class DetectionRule:
    id: str
    name: str
    pattern_type: PatternType
    timeframe: Timeframe
    threshold: int
    predicate: Predicate
    template: NudgeTemplate
    recommendation: Optional[RecommendationTag] = None
    describe: Optional[Describe] = None

    def matches(self, data: UserData, now: datetime) -> bool:
        return bool(self.predicate(data, now))

    def metadata(self, data: UserData) -> dict[str, Any]:
        return self.describe(data) if self.describe else {}


# ---------------------------------------------------------------------------
# Predicate helpers
# ---------------------------------------------------------------------------

_MONDAY = 0
_FRIDAY = 4

_FATIGUE_EMOTIONS = {"exhausted", "stressed", "overwhelmed"}
_END_OF_WEEK_EMOTIONS = {"exhausted", "overwhelmed"}


def _ratio(hits: int, total: int) -> float:
    return hits / max(total, 1)


def _weekday_ratio(data: UserData, weekday: int, emotions: set[str], min_intensity: int) -> float:
    """Matching emotions on `weekday` per distinct `weekday` date with any emotion."""
    hits = sum(
        1 for e in data.emotions
        if e.timestamp.weekday() == weekday
        and e.emotion in emotions
        and e.intensity >= min_intensity
    )
    days = {e.timestamp.date() for e in data.emotions if e.timestamp.weekday() == weekday}
    return _ratio(hits, len(days))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def medical_fatigue(data: UserData, now: datetime) -> bool:
    window = timedelta(days=7)
    after = timedelta(hours=4)
    medical = [
        a for a in data.assignments
        if a.type == "medical" and now - a.timestamp < window
    ]
    fatigued = [
        a for a in medical
        if any(
            a.timestamp < e.timestamp < a.timestamp + after
            and e.emotion in _FATIGUE_EMOTIONS
            for e in data.emotions
        )
    ]
    return _ratio(len(fatigued), len(medical)) > 0.6


def monday_stress(data: UserData, now: datetime) -> bool:
    return _weekday_ratio(data, _MONDAY, {"anxious", "stressed"}, 3) > 0.5


def missed_reset_stress(data: UserData, now: datetime) -> bool:
    recent_missed = [
        r for r in data.resets
        if r.skipped and now - r.timestamp < timedelta(days=3)
    ]
    if not recent_missed:
        return False

    after = timedelta(hours=24)
    stressed = [
        e for e in data.emotions
        if e.emotion == "stressed"
        and e.intensity >= 4
        and any(r.timestamp < e.timestamp < r.timestamp + after for r in recent_missed)
    ]
    return len(stressed) > 2


def legal_anxiety(data: UserData, now: datetime) -> bool:
    before = timedelta(hours=24)
    legal = [a for a in data.assignments if a.type in ("legal", "court")]
    anxious = [
        a for a in legal
        if any(
            a.timestamp - before < e.timestamp < a.timestamp
            and e.emotion == "anxious"
            and e.intensity >= 3
            for e in data.emotions
        )
    ]
    return _ratio(len(anxious), len(legal)) > 0.7


def afternoon_exhaustion(data: UserData, now: datetime) -> bool:
    afternoon = [e for e in data.emotions if 14 <= e.timestamp.hour <= 16]
    hits = sum(1 for e in afternoon if e.emotion == "exhausted" and e.intensity >= 3)
    days = {e.timestamp.date() for e in afternoon}
    return _ratio(hits, len(days)) > 0.4


def wellness_streak(data: UserData, now: datetime) -> bool:
    return data.current_streak >= 7 and data.current_streak % 7 == 0


def weekend_recovery(data: UserData, now: datetime) -> bool:
    return _weekday_ratio(data, _FRIDAY, _END_OF_WEEK_EMOTIONS, 4) > 0.6


def _effective_categories(data: UserData) -> Counter:
    return Counter(
        w.category for w in data.wellness_actions
        if w.effectiveness is not None and w.effectiveness >= 4
    )


def effective_wellness(data: UserData, now: datetime) -> bool:
    counts = _effective_categories(data)
    if sum(counts.values()) < 5:
        return False
    _, top = counts.most_common(1)[0]
    return top >= 3


# ---------------------------------------------------------------------------
# Template metadata
# ---------------------------------------------------------------------------

def _streak_metadata(data: UserData) -> dict[str, Any]:
    return {"streak": data.current_streak} if data.current_streak else {}


def _top_category_metadata(data: UserData) -> dict[str, Any]:
    counts = _effective_categories(data)
    if not counts:
        return {}
    category, _ = counts.most_common(1)[0]
    return {"top_category": str(category).capitalize()}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

DETECTION_RULES: list[DetectionRule] = [
    DetectionRule(
        id="medical-fatigue",
        name="Medical Assignment Fatigue",
        pattern_type=PatternType.assignment,
        timeframe=Timeframe.weekly,
        threshold=3,
        predicate=medical_fatigue,
        recommendation=RecommendationTag.medical_boundaries,
        template=NudgeTemplate(
            priority=NudgePriority.high,
            type=NudgeType.insight,
            title="Pattern Noticed",
            message=(
                "You often feel drained after medical assignments. "
                "Try the Professional Boundaries Reset after your next one."
            ),
            action=NudgeAction("Set Boundary Reminder", "/resets/professional-boundaries"),
            expires_in=72,
        ),
    ),
    DetectionRule(
        id="monday-stress",
        name="Monday Stress Pattern",
        pattern_type=PatternType.timing,
        timeframe=Timeframe.weekly,
        threshold=3,
        predicate=monday_stress,
        recommendation=RecommendationTag.monday_mindfulness,
        template=NudgeTemplate(
            priority=NudgePriority.medium,
            type=NudgeType.suggestion,
            title="Monday Mindfulness",
            message=(
                "Mondays tend to be stressful for you. "
                "Start with 5 minutes of morning breathwork to set a calmer tone."
            ),
            action=NudgeAction("Try Breathwork", "/wellness/breathwork"),
            expires_in=168,
        ),
    ),
    DetectionRule(
        id="missed-reset-stress",
        name="Missed Reset Stress Buildup",
        pattern_type=PatternType.reset,
        timeframe=Timeframe.daily,
        threshold=2,
        predicate=missed_reset_stress,
        template=NudgeTemplate(
            priority=NudgePriority.high,
            type=NudgeType.insight,
            title="Reset Reminder",
            message=(
                "Skipping resets seems to increase your stress levels. "
                "Even a 2-minute micro-reset can help maintain balance."
            ),
            action=NudgeAction("Quick Reset Now", "/resets/quick"),
            expires_in=48,
        ),
    ),
    DetectionRule(
        id="legal-anxiety",
        name="Legal Assignment Anxiety",
        pattern_type=PatternType.assignment,
        timeframe=Timeframe.weekly,
        threshold=2,
        predicate=legal_anxiety,
        recommendation=RecommendationTag.legal_confidence,
        template=NudgeTemplate(
            priority=NudgePriority.medium,
            type=NudgeType.suggestion,
            title="Pre-Court Preparation",
            message=(
                "Legal assignments tend to make you anxious. "
                "Try the Confidence Boost meditation 30 minutes before your next one."
            ),
            action=NudgeAction("Bookmark Meditation", "/wellness/confidence-boost"),
            expires_in=120,
        ),
    ),
    DetectionRule(
        id="afternoon-exhaustion",
        name="Afternoon Energy Dip",
        pattern_type=PatternType.timing,
        timeframe=Timeframe.daily,
        threshold=5,
        predicate=afternoon_exhaustion,
        recommendation=RecommendationTag.afternoon_energy,
        template=NudgeTemplate(
            priority=NudgePriority.low,
            type=NudgeType.suggestion,
            title="Afternoon Energy Boost",
            message=(
                "Your energy often dips around 3 PM. "
                "A 5-minute walk or stretching session could help you power through."
            ),
            action=NudgeAction("Set Daily Reminder", "/settings/reminders"),
            expires_in=336,
        ),
    ),
    DetectionRule(
        id="wellness-streak",
        name="Wellness Streak Achievement",
        pattern_type=PatternType.wellness,
        timeframe=Timeframe.daily,
        threshold=1,
        predicate=wellness_streak,
        describe=_streak_metadata,
        template=NudgeTemplate(
            priority=NudgePriority.low,
            type=NudgeType.encouragement,
            title="{streak} Day Streak!",
            message=(
                "Your consistency is paying off. You're building sustainable "
                "wellness habits that will serve you well."
            ),
            expires_in=24,
            defaults={"streak": 7},
        ),
    ),
    DetectionRule(
        id="weekend-recovery",
        name="Weekend Recovery Needed",
        pattern_type=PatternType.timing,
        timeframe=Timeframe.weekly,
        threshold=3,
        predicate=weekend_recovery,
        template=NudgeTemplate(
            priority=NudgePriority.medium,
            type=NudgeType.suggestion,
            title="Weekend Restoration",
            message=(
                "You often end the week exhausted. "
                "Schedule a longer reset session this weekend to fully recharge."
            ),
            action=NudgeAction("Plan Weekend Reset", "/resets/deep-restoration"),
            expires_in=72,
        ),
    ),
    DetectionRule(
        id="effective-wellness",
        name="Most Effective Wellness Action",
        pattern_type=PatternType.wellness,
        timeframe=Timeframe.monthly,
        threshold=1,
        predicate=effective_wellness,
        describe=_top_category_metadata,
        template=NudgeTemplate(
            priority=NudgePriority.low,
            type=NudgeType.insight,
            title="Your Wellness Sweet Spot",
            message=(
                "{top_category} consistently works best for you. "
                "Consider making it your go-to stress relief tool."
            ),
            action=NudgeAction("View Your Stats", "/insights/wellness-effectiveness"),
            expires_in=168,
            defaults={"top_category": "Breathwork"},
        ),
    ),
]

RULES_BY_ID: dict[str, DetectionRule] = {rule.id: rule for rule in DETECTION_RULES}
