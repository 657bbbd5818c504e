"""Wellness analytics over a user's mood history.

All functions are pure: callers load the records (and apply any
lookback window with within_days) before aggregating.
"""
import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence

from mindwatch.shared.models import MoodEmotion, MoodLog, utc_now
from mindwatch.shared.utils import round_half_up


# Emotions counted toward the overview stress percentage
STRESSFUL_EMOTIONS: FrozenSet[MoodEmotion] = frozenset({
    MoodEmotion.STRESSED,
    MoodEmotion.ANXIOUS,
    MoodEmotion.OVERWHELMED,
})

# The stress report additionally counts anger as a stress event
STRESS_REPORT_EMOTIONS: FrozenSet[MoodEmotion] = STRESSFUL_EMOTIONS | {MoodEmotion.ANGRY}

TOP_TRIGGER_COUNT = 5


def one_decimal(value: float) -> float:
    """Round half up to one decimal place (4.25 -> 4.3)."""
    return round_half_up(value * 10) / 10


def within_days(
    mood_logs: Iterable[MoodLog],
    days: int,
    now: Optional[datetime] = None,
) -> List[MoodLog]:
    """Logs created in the last `days` days, oldest first."""
    cutoff = (now or utc_now()) - timedelta(days=days)
    return sorted(
        (log for log in mood_logs if log.created_at >= cutoff),
        key=lambda log: log.created_at,
    )


def _chronological(mood_logs: Iterable[MoodLog]) -> List[MoodLog]:
    return sorted(mood_logs, key=lambda log: log.created_at)


def _average_score(mood_logs: Sequence[MoodLog]) -> float:
    if not mood_logs:
        return 0.0
    return sum(log.score for log in mood_logs) / len(mood_logs)


def _emotion_counts(mood_logs: Iterable[MoodLog]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for log in mood_logs:
        counts[log.emotion.value] = counts.get(log.emotion.value, 0) + 1
    return counts


def calculate_wellness_score(
    avg_mood: float,
    stress_rate: float,
    mindful_minutes: int,
    log_count: int,
) -> int:
    """Composite 0-100 wellness score.

    Weighting:
        mood         40  (average mood out of 10)
        low stress   30  (1 - fraction of stressful logs)
        mindfulness  20  (saturates at 60 minutes)
        consistency  10  (saturates at 30 logs)
    """
    mood_score = (avg_mood / 10) * 40
    stress_score = (1 - stress_rate) * 30
    mindful_score = min(mindful_minutes / 60, 1) * 20
    consistency_score = min(log_count / 30, 1) * 10
    return round_half_up(mood_score + stress_score + mindful_score + consistency_score)


def build_overview(
    mood_logs: Sequence[MoodLog],
    breathing_durations: Sequence[float] = (),
    journal_count: int = 0,
    chat_count: int = 0,
) -> Dict[str, Any]:
    """Dashboard overview of mood, stress and mindfulness activity.

    Args:
        mood_logs: Mood logs in the reporting period
        breathing_durations: Breathing session lengths in seconds
        journal_count: Number of journal entries
        chat_count: Number of chat sessions

    Returns:
        Dictionary matching the dashboard overview payload
    """
    average_mood = _average_score(mood_logs)
    stress_rate = (
        sum(1 for log in mood_logs if log.emotion in STRESSFUL_EMOTIONS) / len(mood_logs)
        if mood_logs else 0.0
    )
    # Partial minutes are not credited
    mindful_minutes = sum(math.floor(seconds / 60) for seconds in breathing_durations)

    return {
        "averageMood": one_decimal(average_mood),
        "totalMoodLogs": len(mood_logs),
        "totalJournalEntries": journal_count,
        "totalChatSessions": chat_count,
        "totalBreathingSessions": len(breathing_durations),
        "mindfulMinutes": mindful_minutes,
        "emotionDistribution": _emotion_counts(mood_logs),
        "stressPercentage": one_decimal(stress_rate * 100),
        "wellnessScore": calculate_wellness_score(
            average_mood, stress_rate, mindful_minutes, len(mood_logs)
        ),
    }


def build_stress_report(mood_logs: Sequence[MoodLog]) -> Dict[str, Any]:
    """Stress events, their most common triggers, and a flagged timeline."""
    ordered = _chronological(mood_logs)
    stressful = [log for log in ordered if log.emotion in STRESS_REPORT_EMOTIONS]

    trigger_counts = Counter(
        trigger.value for log in stressful for trigger in log.triggers
    )

    return {
        "totalStressEvents": len(stressful),
        "stressRate": one_decimal(len(stressful) / len(ordered) * 100) if ordered else 0,
        "topTriggers": [
            {"trigger": trigger, "count": count}
            for trigger, count in trigger_counts.most_common(TOP_TRIGGER_COUNT)
        ],
        "timeline": [
            {
                "date": log.created_at.isoformat(),
                "score": log.score,
                "emotion": log.emotion.value,
                "isStressful": log.emotion in STRESS_REPORT_EMOTIONS,
            }
            for log in ordered
        ],
    }


def build_mood_stats(mood_logs: Sequence[MoodLog]) -> Dict[str, Any]:
    """Average mood, daily averages and emotion/trigger frequencies."""
    if not mood_logs:
        return {"averageMood": 0, "trend": [], "emotionFrequency": {}, "totalLogs": 0}

    ordered = _chronological(mood_logs)

    daily: Dict[str, List[int]] = {}
    for log in ordered:
        daily.setdefault(log.day, []).append(log.score)

    trigger_frequency: Dict[str, int] = {}
    for log in ordered:
        for trigger in log.triggers:
            trigger_frequency[trigger.value] = trigger_frequency.get(trigger.value, 0) + 1

    return {
        "averageMood": one_decimal(_average_score(ordered)),
        "totalLogs": len(ordered),
        "trend": [
            {"date": day, "average": one_decimal(sum(scores) / len(scores))}
            for day, scores in daily.items()
        ],
        "emotionFrequency": _emotion_counts(ordered),
        "triggerFrequency": trigger_frequency,
        "latestMood": ordered[-1].to_dict(),
    }


def weekly_mood_data(mood_logs: Iterable[MoodLog]) -> List[Dict[str, Any]]:
    """Compact mood records sent to the weekly summary prompt."""
    return [
        {"date": log.created_at.isoformat(), "score": log.score, "emotion": log.emotion.value}
        for log in _chronological(mood_logs)
    ]
