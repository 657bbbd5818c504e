"""Mood log domain model.

Mood logs are stored by the surrounding application; analytics only
receives already-loaded records.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class MoodEmotion(Enum):
    """Emotions a user can pick when logging a mood."""
    HAPPY = "happy"
    SAD = "sad"
    ANXIOUS = "anxious"
    CALM = "calm"
    ANGRY = "angry"
    EXCITED = "excited"
    STRESSED = "stressed"
    NEUTRAL = "neutral"
    OVERWHELMED = "overwhelmed"
    HOPEFUL = "hopeful"


class MoodTrigger(Enum):
    """Self-reported mood triggers."""
    WORK = "work"
    FAMILY = "family"
    HEALTH = "health"
    FINANCES = "finances"
    RELATIONSHIPS = "relationships"
    SLEEP = "sleep"
    EXERCISE = "exercise"
    DIET = "diet"
    SOCIAL = "social"
    PERSONAL = "personal"
    OTHER = "other"


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, the form every record stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive UTC datetime."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class MoodLog:
    """A single mood check-in."""
    score: int                      # 1 (worst) to 10 (best)
    emotion: MoodEmotion
    created_at: datetime = field(default_factory=utc_now)
    notes: str = ""
    triggers: Tuple[MoodTrigger, ...] = field(default_factory=tuple)
    energy_level: int = 3           # 1 to 5
    sleep_hours: Optional[float] = None

    def __post_init__(self):
        if not 1 <= self.score <= 10:
            raise ValueError(f"Mood score must be 1-10, got {self.score}")
        if not 1 <= self.energy_level <= 5:
            raise ValueError(f"Energy level must be 1-5, got {self.energy_level}")
        if self.sleep_hours is not None and not 0 <= self.sleep_hours <= 24:
            raise ValueError(f"Sleep hours must be 0-24, got {self.sleep_hours}")
        if len(self.notes) > 500:
            raise ValueError("Notes must be at most 500 characters")

    @property
    def day(self) -> str:
        """Calendar day of the log (UTC), as YYYY-MM-DD."""
        return self.created_at.date().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "emotion": self.emotion.value,
            "createdAt": self.created_at.isoformat(),
            "notes": self.notes,
            "triggers": [t.value for t in self.triggers],
            "energyLevel": self.energy_level,
            "sleepHours": self.sleep_hours,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoodLog":
        """Build a mood log from a JSON request payload.

        Raises:
            ValueError: If a field is missing or out of range
        """
        if "score" not in data or "emotion" not in data:
            raise ValueError("Mood log requires score and emotion")

        created_at = data.get("created_at") or data.get("createdAt")
        return cls(
            score=int(data["score"]),
            emotion=MoodEmotion(data["emotion"]),
            created_at=(
                _parse_timestamp(created_at) if created_at else utc_now()
            ),
            notes=data.get("notes") or "",
            triggers=tuple(MoodTrigger(t) for t in data.get("triggers") or []),
            energy_level=int(data.get("energy_level") or data.get("energyLevel") or 3),
            sleep_hours=data.get("sleep_hours", data.get("sleepHours")),
        )
