"""
Tests for the events store: append-only logging, per-user history and the
activity streak.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from interpret_reflect.services.events import (
    EmotionContext,
    as_aware,
    calculate_current_streak,
    load_user_data,
    log_assignment,
    log_emotion,
    log_reset,
    log_wellness_action,
)
from interpret_reflect.services.pattern_rules import afternoon_exhaustion, monday_stress

TODAY = date(2026, 10, 19)
NOON = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
EST = timezone(timedelta(hours=-5))


# ---------------------------------------------------------------------------
# Streak (pure)
# ---------------------------------------------------------------------------

class TestStreak:
    def _days(self, *offsets):
        return [TODAY - timedelta(days=o) for o in offsets]

    def test_no_activity(self):
        assert calculate_current_streak([], TODAY) == 0

    def test_today_only(self):
        assert calculate_current_streak(self._days(0), TODAY) == 1

    def test_consecutive_days_ending_today(self):
        assert calculate_current_streak(self._days(0, 1, 2, 3), TODAY) == 4

    def test_streak_ending_yesterday_still_counts(self):
        assert calculate_current_streak(self._days(1, 2), TODAY) == 2

    def test_broken_when_newest_day_is_older_than_yesterday(self):
        assert calculate_current_streak(self._days(2, 3, 4), TODAY) == 0

    def test_stops_at_first_gap(self):
        assert calculate_current_streak(self._days(0, 1, 3, 4, 5), TODAY) == 2

    def test_duplicate_days_count_once(self):
        assert calculate_current_streak(self._days(0, 0, 1, 1, 1), TODAY) == 2


# ---------------------------------------------------------------------------
# Logging + load_user_data
# ---------------------------------------------------------------------------

class TestLoadUserData:
    def test_empty_user(self, db):
        data = load_user_data(db, "nobody", today=TODAY)
        assert data.emotions == []
        assert data.assignments == []
        assert data.resets == []
        assert data.wellness_actions == []
        assert data.current_streak == 0

    def test_round_trip_every_kind(self, db):
        log_emotion(db, "u1", "anxious", 4, NOON, EmotionContext(
            assignment_type="legal", time_of_day="afternoon", post_assignment=False,
        ))
        log_assignment(db, "u1", "legal", 90, "challenging", NOON, emotion_after="relieved")
        log_reset(db, "u1", "quick", NOON, skipped=True, reason="back-to-back bookings")
        log_wellness_action(db, "u1", "box breathing", "breathwork", NOON, duration=5, effectiveness=5)

        data = load_user_data(db, "u1", today=TODAY)

        (emotion,) = data.emotions
        assert emotion.emotion == "anxious"
        assert emotion.intensity == 4
        assert emotion.timestamp == NOON
        assert emotion.context.assignment_type == "legal"
        assert emotion.context.post_assignment is False

        (assignment,) = data.assignments
        assert assignment.difficulty == "challenging"
        assert assignment.completed is True
        assert assignment.emotion_after == "relieved"

        (reset,) = data.resets
        assert reset.skipped is True
        assert reset.reason == "back-to-back bookings"

        (action,) = data.wellness_actions
        assert action.category == "breathwork"
        assert action.effectiveness == 5

    def test_timestamps_keep_client_wall_clock(self, db):
        local = datetime(2026, 10, 19, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        log_emotion(db, "u-tz", "calm", 2, local)
        (emotion,) = load_user_data(db, "u-tz", today=TODAY).emotions
        assert emotion.timestamp == datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        assert emotion.timestamp.utcoffset() == timedelta(hours=5)
        assert emotion.timestamp.weekday() == 0
        assert emotion.timestamp.hour == 1

    def test_stored_as_utc_instant_with_offset(self, db):
        local = datetime(2026, 10, 19, 21, 0, tzinfo=EST)
        record = log_emotion(db, "u-tz2", "calm", 2, local)
        assert as_aware(record.timestamp) == datetime(2026, 10, 20, 2, 0, tzinfo=timezone.utc)
        assert record.utc_offset_minutes == -300

    def test_streak_uses_local_dates(self, db):
        # 23:30 on the 17th at -05:00 is already the 18th in UTC
        log_emotion(db, "u-late", "calm", 1, datetime(2026, 10, 17, 23, 30, tzinfo=EST))
        assert load_user_data(db, "u-late", today=TODAY).current_streak == 0

    def test_naive_timestamps_are_utc(self, db):
        log_emotion(db, "u-naive", "calm", 2, datetime(2026, 10, 19, 8, 30))
        (emotion,) = load_user_data(db, "u-naive", today=TODAY).emotions
        assert emotion.timestamp.tzinfo is not None
        assert emotion.timestamp.hour == 8

    def test_oldest_first(self, db):
        log_emotion(db, "u2", "calm", 1, NOON)
        log_emotion(db, "u2", "stressed", 3, NOON - timedelta(days=2))
        log_emotion(db, "u2", "tired", 2, NOON - timedelta(days=1))
        data = load_user_data(db, "u2", today=TODAY)
        assert [e.emotion for e in data.emotions] == ["stressed", "tired", "calm"]

    def test_since_filter(self, db):
        log_emotion(db, "u3", "old", 1, NOON - timedelta(days=10))
        log_emotion(db, "u3", "new", 1, NOON - timedelta(hours=1))
        data = load_user_data(db, "u3", since=NOON - timedelta(days=1), today=TODAY)
        assert [e.emotion for e in data.emotions] == ["new"]

    def test_users_are_isolated(self, db):
        log_emotion(db, "alice", "calm", 1, NOON)
        log_emotion(db, "bob", "stressed", 5, NOON)
        assert [e.emotion for e in load_user_data(db, "alice", today=TODAY).emotions] == ["calm"]

    def test_streak_counts_every_kind_of_activity(self, db):
        log_emotion(db, "u4", "calm", 1, NOON)
        log_assignment(db, "u4", "medical", 30, "easy", NOON - timedelta(days=1))
        log_reset(db, "u4", "quick", NOON - timedelta(days=2))
        log_wellness_action(db, "u4", "walk", "movement", NOON - timedelta(days=3))
        assert load_user_data(db, "u4", today=TODAY).current_streak == 4

    def test_skipped_reset_is_not_activity(self, db):
        log_reset(db, "u5", "quick", NOON, skipped=True)
        data = load_user_data(db, "u5", today=TODAY)
        assert len(data.resets) == 1
        assert data.current_streak == 0

    def test_unknown_difficulty_rejected(self, db):
        with pytest.raises(ValueError):
            log_assignment(db, "u6", "medical", 30, "impossible", NOON)


# ---------------------------------------------------------------------------
# Rules read the client's wall clock
# ---------------------------------------------------------------------------

class TestLocalWallClockRules:
    def test_monday_evening_stress(self, db):
        # 21:00 Monday at -05:00 is 02:00 Tuesday in UTC
        for day in (5, 12, 19):
            log_emotion(db, "u-mon", "stressed", 4, datetime(2026, 10, day, 21, 0, tzinfo=EST))
        data = load_user_data(db, "u-mon", today=TODAY)
        assert [e.timestamp.weekday() for e in data.emotions] == [0, 0, 0]
        assert monday_stress(data, datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)) is True

    def test_afternoon_exhaustion(self, db):
        for day in (13, 14, 15):
            log_emotion(db, "u-pm", "exhausted", 4, datetime(2026, 10, day, 15, 0, tzinfo=EST))
        data = load_user_data(db, "u-pm", today=TODAY)
        assert [e.timestamp.hour for e in data.emotions] == [15, 15, 15]
        assert afternoon_exhaustion(data, NOON) is True
