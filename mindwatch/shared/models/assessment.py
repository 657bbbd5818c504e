"""Crisis assessment and facial-expression domain models.

These are the value types exchanged between the classifier / processor
and the surrounding application. All of them are immutable: an
assessment cannot be modified once it has been produced.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Severity(Enum):
    """Severity tier derived from keyword match counts."""
    NONE = "none"
    LOW = "low"             # 1-2 stress keywords
    MODERATE = "moderate"   # 3+ stress keywords
    HIGH = "high"           # 1-2 crisis keywords
    CRITICAL = "critical"   # 3+ crisis keywords


class ExpressionLabel(Enum):
    """Closed set of expression labels reported by the face detector."""
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    FEARFUL = "fearful"
    DISGUSTED = "disgusted"
    SURPRISED = "surprised"
    NEUTRAL = "neutral"


class StressLevelLabel(Enum):
    """Qualitative bucket for a 0-100 facial stress score."""
    VERY_RELAXED = "Very Relaxed"
    CALM = "Calm"
    MILDLY_TENSE = "Mildly Tense"
    MODERATE_STRESS = "Moderate Stress"
    HIGH_STRESS = "High Stress"
    VERY_HIGH_STRESS = "Very High Stress"


@dataclass(frozen=True)
class Hotline:
    """A single crisis support contact.

    Exactly one way of reaching the service is expected (phone number,
    free-text contact instruction or URL).
    """
    name: str
    number: Optional[str] = None
    contact: Optional[str] = None
    url: Optional[str] = None
    available: Optional[str] = None

    def __post_init__(self):
        if not (self.number or self.contact or self.url):
            raise ValueError(f"Hotline {self.name!r} needs a number, contact or url")

    def to_dict(self) -> Dict[str, str]:
        result = {"name": self.name}
        for key in ("number", "contact", "url", "available"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


@dataclass(frozen=True)
class ResourceBundle:
    """Static crisis resources returned whenever crisis language is found."""
    hotlines: Tuple[Hotline, ...]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hotlines": [hotline.to_dict() for hotline in self.hotlines],
            "message": self.message,
        }


@dataclass(frozen=True)
class CrisisAssessment:
    """Result of scanning one piece of text for crisis/stress language."""
    is_crisis: bool
    is_stress: bool
    severity: Severity
    detected_keywords: Tuple[str, ...] = field(default_factory=tuple)
    resources: Optional[ResourceBundle] = None

    def __post_init__(self):
        if self.is_crisis and self.resources is None:
            raise ValueError("Crisis assessments must carry a resource bundle")
        if not self.is_crisis and self.resources is not None:
            raise ValueError("Resources are only attached to crisis assessments")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape consumed by the frontend."""
        return {
            "isCrisis": self.is_crisis,
            "isStress": self.is_stress,
            "severity": self.severity.value,
            "detectedKeywords": list(self.detected_keywords),
            "resources": self.resources.to_dict() if self.resources else None,
        }


@dataclass(frozen=True)
class TextAssessment:
    """Crisis assessment and 0-10 stress level computed from the same text."""
    assessment: CrisisAssessment
    stress_level: int

    def __post_init__(self):
        if not 0 <= self.stress_level <= 10:
            raise ValueError(f"Stress level must be 0-10, got {self.stress_level}")

    def to_dict(self) -> Dict[str, Any]:
        result = self.assessment.to_dict()
        result["stressLevel"] = self.stress_level
        return result


@dataclass(frozen=True)
class ExpressionReading:
    """Per-tick output of the expression processor."""
    smoothed: Dict[ExpressionLabel, float]
    stress_score: int
    stress_label: StressLevelLabel
    dominant: ExpressionLabel
    sample_count: int

    def __post_init__(self):
        if not 0 <= self.stress_score <= 100:
            raise ValueError(f"Stress score must be 0-100, got {self.stress_score}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expressions": {
                label.value: round(value, 4) for label, value in self.smoothed.items()
            },
            "stressScore": self.stress_score,
            "stressLevel": self.stress_label.value,
            "dominantEmotion": self.dominant.value,
            "samples": self.sample_count,
        }
