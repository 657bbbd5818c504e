"""Shared domain models for MindWatch services."""
from .assessment import (
    Severity,
    ExpressionLabel,
    StressLevelLabel,
    Hotline,
    ResourceBundle,
    CrisisAssessment,
    TextAssessment,
    ExpressionReading,
)
from .mood import MoodEmotion, MoodTrigger, MoodLog, utc_now

__all__ = [
    "Severity",
    "ExpressionLabel",
    "StressLevelLabel",
    "Hotline",
    "ResourceBundle",
    "CrisisAssessment",
    "TextAssessment",
    "ExpressionReading",
    "MoodEmotion",
    "MoodTrigger",
    "MoodLog",
    "utc_now",
]
