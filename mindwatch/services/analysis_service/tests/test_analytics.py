"""Tests for wellness analytics aggregation functions."""
import warnings
from datetime import datetime, timedelta, timezone

import pytest

from mindwatch.services.analysis_service.analytics import (
    build_mood_stats,
    build_overview,
    build_stress_report,
    calculate_wellness_score,
    one_decimal,
    weekly_mood_data,
    within_days,
)
from mindwatch.shared.models import MoodEmotion, MoodLog, MoodTrigger


NOW = datetime(2026, 10, 19, 12, 0, 0)


def log(score, emotion, hours_ago=0, triggers=()):
    return MoodLog(
        score=score,
        emotion=MoodEmotion(emotion),
        created_at=NOW - timedelta(hours=hours_ago),
        triggers=tuple(MoodTrigger(t) for t in triggers),
    )


class TestOneDecimal:
    def test_half_rounds_up(self):
        assert one_decimal(6.75) == 6.8

    def test_repeating(self):
        assert one_decimal(100 / 3) == 33.3


class TestWellnessScore:
    def test_half_point_rounds_up(self):
        # 20 + 22.5 + 10 + 5 = 57.5
        assert calculate_wellness_score(5, 0.25, 30, 15) == 58

    def test_saturates_at_100(self):
        assert calculate_wellness_score(10, 0, 600, 300) == 100

    def test_no_data(self):
        # Only the low-stress component contributes
        assert calculate_wellness_score(0, 0, 0, 0) == 30


class TestWithinDays:
    def test_filters_and_sorts(self):
        old = log(5, "calm", hours_ago=24 * 40)
        newer = log(6, "calm", hours_ago=1)
        older = log(7, "calm", hours_ago=24 * 2)

        result = within_days([old, newer, older], 30, now=NOW)

        assert result == [older, newer]


class TestOverview:
    def test_overview_fields(self):
        logs = [
            log(8, "happy", hours_ago=4),
            log(4, "stressed", hours_ago=3),
            log(6, "anxious", hours_ago=2),
            log(9, "calm", hours_ago=1),
        ]

        result = build_overview(logs, [300, 119, 61], journal_count=3, chat_count=2)

        assert result["averageMood"] == 6.8
        assert result["totalMoodLogs"] == 4
        assert result["totalJournalEntries"] == 3
        assert result["totalChatSessions"] == 2
        assert result["totalBreathingSessions"] == 3
        assert result["mindfulMinutes"] == 7
        assert result["stressPercentage"] == 50.0
        assert result["emotionDistribution"] == {
            "happy": 1, "stressed": 1, "anxious": 1, "calm": 1,
        }
        assert result["wellnessScore"] == 46

    def test_angry_is_not_stressful_in_overview(self):
        result = build_overview([log(3, "angry")])
        assert result["stressPercentage"] == 0

    def test_empty(self):
        result = build_overview([])

        assert result["averageMood"] == 0
        assert result["stressPercentage"] == 0
        assert result["mindfulMinutes"] == 0
        assert result["wellnessScore"] == 30


class TestStressReport:
    def test_counts_and_triggers(self):
        logs = [
            log(3, "anxious", hours_ago=1, triggers=["family"]),
            log(7, "happy", hours_ago=2, triggers=["work"]),
            log(2, "angry", hours_ago=3, triggers=["work"]),
            log(4, "stressed", hours_ago=4, triggers=["work", "sleep"]),
        ]

        result = build_stress_report(logs)

        assert result["totalStressEvents"] == 3
        assert result["stressRate"] == 75.0
        assert result["topTriggers"] == [
            {"trigger": "work", "count": 2},
            {"trigger": "sleep", "count": 1},
            {"trigger": "family", "count": 1},
        ]

    def test_timeline_is_chronological_and_flagged(self):
        logs = [
            log(7, "happy", hours_ago=1),
            log(2, "angry", hours_ago=5),
        ]

        timeline = build_stress_report(logs)["timeline"]

        assert [entry["emotion"] for entry in timeline] == ["angry", "happy"]
        assert [entry["isStressful"] for entry in timeline] == [True, False]

    def test_top_triggers_limited_to_five(self):
        triggers = ["work", "family", "health", "finances", "relationships", "sleep"]
        result = build_stress_report([log(3, "stressed", triggers=triggers)])

        assert len(result["topTriggers"]) == 5

    def test_stress_rate_one_decimal(self):
        logs = [log(3, "stressed"), log(7, "calm"), log(8, "happy")]
        assert build_stress_report(logs)["stressRate"] == 33.3

    def test_empty(self):
        result = build_stress_report([])
        assert result["stressRate"] == 0
        assert result["topTriggers"] == []
        assert result["timeline"] == []


class TestMoodStats:
    def test_empty(self):
        assert build_mood_stats([]) == {
            "averageMood": 0,
            "trend": [],
            "emotionFrequency": {},
            "totalLogs": 0,
        }

    def test_daily_trend(self):
        logs = [
            log(5, "sad", hours_ago=30),
            log(7, "calm", hours_ago=2),
            log(8, "happy", hours_ago=1),
        ]

        result = build_mood_stats(logs)

        assert result["averageMood"] == 6.7
        assert result["totalLogs"] == 3
        assert result["trend"] == [
            {"date": "2026-10-18", "average": 5.0},
            {"date": "2026-10-19", "average": 7.5},
        ]
        assert result["emotionFrequency"] == {"sad": 1, "calm": 1, "happy": 1}
        assert result["latestMood"]["score"] == 8

    def test_trigger_frequency(self):
        logs = [log(5, "stressed", triggers=["work"]), log(6, "calm", triggers=["work", "diet"])]
        assert build_mood_stats(logs)["triggerFrequency"] == {"work": 2, "diet": 1}


class TestWeeklyMoodData:
    def test_compact_records(self):
        data = weekly_mood_data([log(6, "hopeful", hours_ago=1)])
        assert data == [{"date": "2026-10-19T11:00:00", "score": 6, "emotion": "hopeful"}]


class TestMoodLogValidation:
    @pytest.mark.parametrize("kwargs", [
        {"score": 0},
        {"score": 11},
        {"energy_level": 6},
        {"sleep_hours": 25},
        {"notes": "x" * 501},
    ])
    def test_out_of_range_rejected(self, kwargs):
        fields = {"score": 5, "emotion": MoodEmotion.CALM}
        fields.update(kwargs)
        with pytest.raises(ValueError):
            MoodLog(**fields)

    def test_from_dict_accepts_camel_case(self):
        mood = MoodLog.from_dict({
            "score": 4,
            "emotion": "stressed",
            "createdAt": "2026-10-19T10:00:00Z",
            "energyLevel": 2,
            "sleepHours": 6.5,
            "triggers": ["work"],
        })

        assert mood.created_at == datetime(2026, 10, 19, 10, 0, 0)
        assert mood.energy_level == 2
        assert mood.sleep_hours == 6.5
        assert mood.triggers == (MoodTrigger.WORK,)

    def test_default_timestamp_is_naive_utc(self):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            built = MoodLog(score=5, emotion=MoodEmotion.CALM)
            parsed = MoodLog.from_dict({"score": 5, "emotion": "calm"})
            recent = within_days([built, parsed], 1)

        assert built.created_at.tzinfo is None
        assert built.created_at >= before
        assert parsed.created_at >= before
        assert len(recent) == 2

    def test_from_dict_unknown_emotion(self):
        with pytest.raises(ValueError):
            MoodLog.from_dict({"score": 4, "emotion": "ecstatic"})
