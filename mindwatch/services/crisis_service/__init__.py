"""Crisis Service: deterministic crisis and stress detection on text.

Components:
- classifier.py: CrisisClassifier (severity tier + 0-10 stress level)
- config.py: Keyword tables, severity thresholds, crisis resources
- handler.py: Flask HTTP endpoints (/health, /detect, /stress-level)

Usage:
    from mindwatch.services.crisis_service import CrisisClassifier
    classifier = CrisisClassifier()
    result = classifier.assess("I feel overwhelmed")
"""

from .classifier import CrisisClassifier, detect_crisis, calculate_stress_level
from .config import (
    ClassifierConfig,
    SeverityThresholds,
    CRISIS_KEYWORDS,
    STRESS_KEYWORDS,
    CRISIS_RESOURCES,
)

__all__ = [
    "CrisisClassifier",
    "detect_crisis",
    "calculate_stress_level",
    "ClassifierConfig",
    "SeverityThresholds",
    "CRISIS_KEYWORDS",
    "STRESS_KEYWORDS",
    "CRISIS_RESOURCES",
]
