"""
Pattern Detection Engine — turns repeated rule matches into nudges.

Every analysis call walks the rule catalog in order:
  1. predicate false           → nothing (counters never decrease)
  2. first match               → new UserPattern, occurrences=1, no nudge yet
  3. later match               → occurrences += 1, last_detected refreshed
  4. occurrences >= threshold  → render nudge, unless an active nudge with the
                                 same (title, message) exists

A rule that raises is logged and skipped; the rest of the batch still runs.

State is explicit: all functions operate on a `PatternState` owned by one
user. `PatternStateRegistry` keys those states by user id for the HTTP
service.

Nudge lifecycle: created → surfaced → active → dismissed | expired.
Expiry is `created_at + expires_in` hours, checked lazily on every read.
"""
from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, Optional, Sequence

from interpret_reflect.core.config import settings
from interpret_reflect.services.events import UserData
from interpret_reflect.services.pattern_rules import (
    DETECTION_RULES,
    RECOMMENDATIONS,
    DetectionRule,
    NudgeAction,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.7
RECOMMENDATION_LIMIT = 3

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


# ---------------------------------------------------------------------------
# State types
# ---------------------------------------------------------------------------

@dataclass
class UserPattern:
    rule_id: str
    type: str
    pattern: str             # rule name
    confidence: float        # 0-1
    occurrences: int
    timeframe: str
    last_detected: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class PatternNudge:
    id: str
    rule_id: str
    priority: str
    type: str
    title: str
    message: str
    created_at: datetime
    dismissible: bool = True
    action: Optional[NudgeAction] = None
    expires_in: Optional[int] = None  # hours

    @property
    def expires_at(self) -> Optional[datetime]:
        if self.expires_in is None:
            return None
        return self.created_at + timedelta(hours=self.expires_in)

    def is_expired(self, now: datetime) -> bool:
        expires_at = self.expires_at
        return expires_at is not None and now >= expires_at


@dataclass
class PatternState:
    """Per-user engine state: pattern registry keyed by rule id + active nudges."""
    patterns: dict[str, UserPattern] = field(default_factory=dict)
    nudges: list[PatternNudge] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _purge_expired(state: PatternState, now: datetime) -> None:
    state.nudges = [n for n in state.nudges if not n.is_expired(now)]


def _is_nudge_active(state: PatternState, title: str, message: str) -> bool:
    return any(n.title == title and n.message == message for n in state.nudges)


def _build_nudge(rule: DetectionRule, pattern: UserPattern, now: datetime) -> PatternNudge:
    title, message = rule.template.render(pattern.metadata)
    return PatternNudge(
        id=f"nudge-{rule.id}-{uuid.uuid4().hex[:12]}",
        rule_id=rule.id,
        priority=_ev(rule.template.priority),
        type=_ev(rule.template.type),
        title=title,
        message=message,
        action=rule.template.action,
        dismissible=rule.template.dismissible,
        expires_in=rule.template.expires_in,
        created_at=now,
    )


def _evaluate_rule(
    state: PatternState,
    rule: DetectionRule,
    data: UserData,
    now: datetime,
) -> Optional[PatternNudge]:
    if not rule.matches(data, now):
        return None

    existing = state.patterns.get(rule.id)
    if existing is None:
        state.patterns[rule.id] = UserPattern(
            rule_id=rule.id,
            type=_ev(rule.pattern_type),
            pattern=rule.name,
            confidence=DEFAULT_CONFIDENCE,
            occurrences=1,
            timeframe=_ev(rule.timeframe),
            last_detected=now,
            metadata=rule.metadata(data),
        )
        return None

    existing.occurrences += 1
    existing.last_detected = now
    existing.metadata = rule.metadata(data)

    if existing.occurrences < rule.threshold:
        return None

    nudge = _build_nudge(rule, existing, now)
    if _is_nudge_active(state, nudge.title, nudge.message):
        return None
    return nudge


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_patterns(
    state: PatternState,
    data: UserData,
    now: Optional[datetime] = None,
    rules: Sequence[DetectionRule] = DETECTION_RULES,
) -> list[PatternNudge]:
    """
    Evaluate every rule against `data` and return the nudges emitted by
    this call (also appended to `state.nudges`).
    """
    now = now or _now()
    _purge_expired(state, now)

    new_nudges: list[PatternNudge] = []
    for rule in rules:
        try:
            nudge = _evaluate_rule(state, rule, data, now)
        except Exception:
            logger.exception("Pattern rule %s failed; skipping", rule.id)
            continue
        if nudge is not None:
            state.nudges.append(nudge)
            new_nudges.append(nudge)
            logger.info("Nudge emitted rule=%s id=%s", rule.id, nudge.id)

    return new_nudges


def get_personalized_recommendations(
    state: PatternState,
    rules: Sequence[DetectionRule] = DETECTION_RULES,
) -> list[str]:
    """
    Top patterns by confidence × occurrences, mapped through each rule's
    recommendation tag. Patterns whose rule carries no tag yield nothing.
    """
    by_id = {rule.id: rule for rule in rules}
    ranked = sorted(
        state.patterns.values(),
        key=lambda p: p.confidence * p.occurrences,
        reverse=True,
    )

    recommendations: list[str] = []
    for pattern in ranked[:RECOMMENDATION_LIMIT]:
        rule = by_id.get(pattern.rule_id)
        if rule is not None and rule.recommendation is not None:
            recommendations.append(RECOMMENDATIONS[rule.recommendation])
    return recommendations


def get_active_nudges(state: PatternState, now: Optional[datetime] = None) -> list[PatternNudge]:
    """Drop expired nudges, then return the rest ordered high → medium → low."""
    _purge_expired(state, now or _now())
    return sorted(state.nudges, key=lambda n: _PRIORITY_ORDER.get(n.priority, len(_PRIORITY_ORDER)))


def dismiss_nudge(state: PatternState, nudge_id: str) -> bool:
    """Remove a nudge from the active set. Idempotent; True if one was removed."""
    before = len(state.nudges)
    state.nudges = [n for n in state.nudges if n.id != nudge_id]
    return len(state.nudges) < before


# ---------------------------------------------------------------------------
# Per-user state registry
# ---------------------------------------------------------------------------

class PatternStateRegistry:
    """
    In-memory PatternState per user id. Users never share counters or nudges.

    At most `max_users` states are kept; the least recently used one is
    dropped when a new user arrives. Use `locked()` around anything that
    reads or mutates a state so concurrent requests for one user serialize.
    """

    def __init__(self, max_users: Optional[int] = None) -> None:
        self.max_users = max_users or settings.PATTERN_STATE_MAX_USERS
        self._states: OrderedDict[str, PatternState] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def for_user(self, user_id: str) -> PatternState:
        with self._lock:
            state = self._states.get(user_id)
            if state is not None:
                self._states.move_to_end(user_id)
                return state
            state = self._states[user_id] = PatternState()
            while len(self._states) > self.max_users:
                evicted, _ = self._states.popitem(last=False)
                logger.info("Evicted pattern state for %s", evicted)
            return state

    @contextmanager
    def locked(self, user_id: str) -> Iterator[PatternState]:
        state = self.for_user(user_id)
        with state.lock:
            yield state

    def clear(self) -> None:
        with self._lock:
            self._states.clear()


pattern_states = PatternStateRegistry()


def get_pattern_registry() -> PatternStateRegistry:
    """FastAPI dependency; tests override it with a fresh registry."""
    return pattern_states
