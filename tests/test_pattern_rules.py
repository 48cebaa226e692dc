"""
Tests for the detection rule catalog: each predicate on its own, pinned at
the exact ratio / window boundaries.

Reference instant: Monday 2026-10-19 12:00 UTC.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from interpret_reflect.services.events import (
    AssignmentLog,
    EmotionLog,
    ResetLog,
    UserData,
    WellnessActionLog,
)
from interpret_reflect.services.pattern_rules import (
    DETECTION_RULES,
    RECOMMENDATIONS,
    RULES_BY_ID,
    RecommendationTag,
    afternoon_exhaustion,
    effective_wellness,
    legal_anxiety,
    medical_fatigue,
    missed_reset_stress,
    monday_stress,
    weekend_recovery,
    wellness_streak,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
MONDAYS = [datetime(2026, 10, 19, 9, tzinfo=timezone.utc) - timedelta(weeks=i) for i in range(5)]
FRIDAYS = [datetime(2026, 10, 16, 17, tzinfo=timezone.utc) - timedelta(weeks=i) for i in range(5)]


def _emotion(ts, emotion="stressed", intensity=3):
    return EmotionLog(emotion=emotion, intensity=intensity, timestamp=ts)


def _assignment(ts, type_="medical"):
    return AssignmentLog(type=type_, duration=60, difficulty="challenging", timestamp=ts)


def _wellness(category, effectiveness, ts=NOW):
    return WellnessActionLog(
        action=f"{category} session", category=category, timestamp=ts, effectiveness=effectiveness
    )


# ---------------------------------------------------------------------------
# Catalog shape
# ---------------------------------------------------------------------------

class TestCatalog:
    def test_rule_order_and_thresholds(self):
        assert [(r.id, r.threshold) for r in DETECTION_RULES] == [
            ("medical-fatigue", 3),
            ("monday-stress", 3),
            ("missed-reset-stress", 2),
            ("legal-anxiety", 2),
            ("afternoon-exhaustion", 5),
            ("wellness-streak", 1),
            ("weekend-recovery", 3),
            ("effective-wellness", 1),
        ]

    def test_expiry_hours(self):
        assert [r.template.expires_in for r in DETECTION_RULES] == [72, 168, 48, 120, 336, 24, 72, 168]

    def test_every_recommendation_tag_has_copy(self):
        assert set(RECOMMENDATIONS) == set(RecommendationTag)
        tagged = {r.recommendation for r in DETECTION_RULES if r.recommendation is not None}
        assert tagged == set(RecommendationTag)

    def test_rules_by_id(self):
        assert RULES_BY_ID["legal-anxiety"].name == "Legal Assignment Anxiety"

    def test_streak_title_renders_current_streak(self):
        rule = RULES_BY_ID["wellness-streak"]
        title, _ = rule.template.render(rule.metadata(UserData(current_streak=14)))
        assert title == "14 Day Streak!"

    def test_streak_title_default(self):
        title, _ = RULES_BY_ID["wellness-streak"].template.render({})
        assert title == "7 Day Streak!"

    def test_top_category_message(self):
        rule = RULES_BY_ID["effective-wellness"]
        data = UserData(wellness_actions=[_wellness("movement", 5) for _ in range(3)])
        _, message = rule.template.render(rule.metadata(data))
        assert message.startswith("Movement consistently works best for you.")


# ---------------------------------------------------------------------------
# medical-fatigue
# ---------------------------------------------------------------------------

class TestMedicalFatigue:
    def test_all_recent_medical_followed_by_fatigue(self):
        starts = [NOW - timedelta(days=d) for d in (1, 2, 3)]
        data = UserData(
            assignments=[_assignment(ts) for ts in starts],
            emotions=[_emotion(ts + timedelta(hours=2), "exhausted") for ts in starts],
        )
        assert medical_fatigue(data, NOW) is True

    def test_ratio_exactly_sixty_percent_does_not_match(self):
        starts = [NOW - timedelta(days=d) for d in (1, 2, 3, 4, 5)]
        data = UserData(
            assignments=[_assignment(ts) for ts in starts],
            emotions=[_emotion(ts + timedelta(hours=1), "overwhelmed") for ts in starts[:3]],
        )
        assert medical_fatigue(data, NOW) is False

    def test_emotion_at_four_hours_is_outside_window(self):
        start = NOW - timedelta(days=1)
        data = UserData(
            assignments=[_assignment(start)],
            emotions=[_emotion(start + timedelta(hours=4), "exhausted")],
        )
        assert medical_fatigue(data, NOW) is False

    def test_assignments_older_than_a_week_are_ignored(self):
        recent = NOW - timedelta(days=1)
        old = [NOW - timedelta(days=7), NOW - timedelta(days=10)]
        data = UserData(
            assignments=[_assignment(recent)] + [_assignment(ts) for ts in old],
            emotions=[_emotion(recent + timedelta(hours=1), "stressed")],
        )
        assert medical_fatigue(data, NOW) is True

    def test_other_assignment_types_do_not_count(self):
        start = NOW - timedelta(days=1)
        data = UserData(
            assignments=[_assignment(start, "educational")],
            emotions=[_emotion(start + timedelta(hours=1), "exhausted")],
        )
        assert medical_fatigue(data, NOW) is False


# ---------------------------------------------------------------------------
# monday-stress / weekend-recovery
# ---------------------------------------------------------------------------

class TestMondayStress:
    def test_stressed_every_monday(self):
        data = UserData(emotions=[_emotion(ts, "anxious", 3) for ts in MONDAYS[:2]])
        assert monday_stress(data, NOW) is True

    def test_half_of_mondays_does_not_match(self):
        data = UserData(emotions=[
            _emotion(MONDAYS[0], "stressed", 4),
            _emotion(MONDAYS[1], "calm", 2),
        ])
        assert monday_stress(data, NOW) is False

    def test_low_intensity_is_ignored(self):
        data = UserData(emotions=[_emotion(ts, "stressed", 2) for ts in MONDAYS[:2]])
        assert monday_stress(data, NOW) is False

    def test_no_monday_emotions(self):
        data = UserData(emotions=[_emotion(FRIDAYS[0], "stressed", 5)])
        assert monday_stress(data, NOW) is False


class TestWeekendRecovery:
    def test_exhausted_every_friday(self):
        data = UserData(emotions=[_emotion(ts, "exhausted", 4) for ts in FRIDAYS[:2]])
        assert weekend_recovery(data, NOW) is True

    def test_sixty_percent_of_fridays_does_not_match(self):
        emotions = [_emotion(ts, "overwhelmed", 5) for ts in FRIDAYS[:3]]
        emotions += [_emotion(ts, "calm", 1) for ts in FRIDAYS[3:]]
        assert weekend_recovery(UserData(emotions=emotions), NOW) is False

    def test_intensity_below_four_is_ignored(self):
        data = UserData(emotions=[_emotion(ts, "exhausted", 3) for ts in FRIDAYS[:2]])
        assert weekend_recovery(data, NOW) is False


# ---------------------------------------------------------------------------
# missed-reset-stress
# ---------------------------------------------------------------------------

class TestMissedResetStress:
    def _data(self, skipped=True, reset_age=timedelta(days=1), stressed=3):
        reset_at = NOW - reset_age
        return UserData(
            resets=[ResetLog(type="quick", timestamp=reset_at, skipped=skipped)],
            emotions=[
                _emotion(reset_at + timedelta(hours=h + 1), "stressed", 4)
                for h in range(stressed)
            ],
        )

    def test_three_stressed_after_skipped_reset(self):
        assert missed_reset_stress(self._data(), NOW) is True

    def test_two_stressed_is_not_enough(self):
        assert missed_reset_stress(self._data(stressed=2), NOW) is False

    def test_completed_reset_does_not_count(self):
        assert missed_reset_stress(self._data(skipped=False), NOW) is False

    def test_skip_three_days_ago_is_too_old(self):
        assert missed_reset_stress(self._data(reset_age=timedelta(days=3)), NOW) is False

    def test_stress_outside_24h_window(self):
        reset_at = NOW - timedelta(days=2)
        data = UserData(
            resets=[ResetLog(type="quick", timestamp=reset_at, skipped=True)],
            emotions=[
                _emotion(reset_at + timedelta(hours=24), "stressed", 5),
                _emotion(reset_at + timedelta(hours=30), "stressed", 5),
                _emotion(reset_at + timedelta(hours=1), "stressed", 5),
            ],
        )
        assert missed_reset_stress(data, NOW) is False


# ---------------------------------------------------------------------------
# legal-anxiety
# ---------------------------------------------------------------------------

class TestLegalAnxiety:
    def test_anxious_before_every_legal_or_court(self):
        starts = [NOW - timedelta(days=2), NOW - timedelta(days=5)]
        data = UserData(
            assignments=[_assignment(starts[0], "legal"), _assignment(starts[1], "court")],
            emotions=[_emotion(ts - timedelta(hours=3), "anxious", 3) for ts in starts],
        )
        assert legal_anxiety(data, NOW) is True

    def test_two_of_three_does_not_match(self):
        starts = [NOW - timedelta(days=d) for d in (2, 4, 6)]
        data = UserData(
            assignments=[_assignment(ts, "legal") for ts in starts],
            emotions=[_emotion(ts - timedelta(hours=1), "anxious", 4) for ts in starts[:2]],
        )
        assert legal_anxiety(data, NOW) is False

    def test_anxiety_after_the_assignment_does_not_count(self):
        start = NOW - timedelta(days=2)
        data = UserData(
            assignments=[_assignment(start, "legal")],
            emotions=[_emotion(start + timedelta(hours=1), "anxious", 5)],
        )
        assert legal_anxiety(data, NOW) is False


# ---------------------------------------------------------------------------
# afternoon-exhaustion
# ---------------------------------------------------------------------------

class TestAfternoonExhaustion:
    def _at(self, day_offset, hour):
        return datetime(2026, 10, 10 + day_offset, hour, 30, tzinfo=timezone.utc)

    def test_half_of_afternoons_exhausted(self):
        data = UserData(emotions=[
            _emotion(self._at(0, 15), "exhausted", 3),
            _emotion(self._at(1, 14), "calm", 2),
        ])
        assert afternoon_exhaustion(data, NOW) is True

    def test_forty_percent_does_not_match(self):
        emotions = [_emotion(self._at(d, 15), "exhausted", 4) for d in range(2)]
        emotions += [_emotion(self._at(d, 15), "calm", 1) for d in range(2, 5)]
        assert afternoon_exhaustion(UserData(emotions=emotions), NOW) is False

    def test_five_pm_is_not_afternoon(self):
        data = UserData(emotions=[_emotion(self._at(0, 17), "exhausted", 5)])
        assert afternoon_exhaustion(data, NOW) is False


# ---------------------------------------------------------------------------
# wellness-streak / effective-wellness
# ---------------------------------------------------------------------------

class TestWellnessStreak:
    @pytest.mark.parametrize("streak,expected", [
        (0, False), (6, False), (7, True), (8, False), (13, False), (14, True), (21, True),
    ])
    def test_multiples_of_seven(self, streak, expected):
        assert wellness_streak(UserData(current_streak=streak), NOW) is expected


class TestEffectiveWellness:
    def test_one_category_dominates(self):
        actions = [_wellness("breathwork", 5) for _ in range(3)]
        actions += [_wellness("movement", 4), _wellness("sleep", 4)]
        assert effective_wellness(UserData(wellness_actions=actions), NOW) is True

    def test_fewer_than_five_effective_actions(self):
        actions = [_wellness("breathwork", 5) for _ in range(4)]
        actions.append(_wellness("breathwork", 3))
        actions.append(_wellness("breathwork", None))
        assert effective_wellness(UserData(wellness_actions=actions), NOW) is False

    def test_no_dominant_category(self):
        actions = [
            _wellness("breathwork", 4), _wellness("breathwork", 4),
            _wellness("movement", 5), _wellness("movement", 5),
            _wellness("sleep", 4),
        ]
        assert effective_wellness(UserData(wellness_actions=actions), NOW) is False
