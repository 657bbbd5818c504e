"""Crisis service configuration, keyword tables and crisis resources.

The keyword lists and weights are fixed policy. Changing any entry or
threshold changes which users are shown crisis resources and must be
treated as a behaviour change, not a bug fix.
"""
from dataclasses import dataclass
from typing import Tuple

from mindwatch.shared.models import Hotline, ResourceBundle


@dataclass(frozen=True)
class SeverityThresholds:
    """Match counts at which severity escalates."""
    CRITICAL_CRISIS_MATCHES: int = 3
    HIGH_CRISIS_MATCHES: int = 1
    MODERATE_STRESS_MATCHES: int = 3
    LOW_STRESS_MATCHES: int = 1


@dataclass(frozen=True)
class ClassifierConfig:
    """Configuration for the keyword classifier."""

    # Contribution of each matched keyword to the 0-10 stress level
    stress_keyword_weight: float = 1.5
    crisis_keyword_weight: float = 3.0
    max_stress_level: int = 10

    # Version tracking for logs
    keyword_version: str = "2026.02.01"


# Order matters: detected keywords are reported in list order.
# Matching is plain substring containment on lower-cased text.
CRISIS_KEYWORDS: Tuple[str, ...] = (
    "suicide",
    "kill myself",
    "end my life",
    "die",
    "not worth living",
    "self-harm",
    "cut myself",
    "hurt myself",
    "no reason to live",
    "want to die",
    "goodbye forever",
    "can't go on",
    "no way out",
    "better off dead",
    "overdose",
    "pills",
    "method",
    "end it all",
)

STRESS_KEYWORDS: Tuple[str, ...] = (
    "stress",
    "anxiety",
    "worried",
    "panic",
    "overwhelmed",
    "nervous",
    "tense",
    "pressure",
    "burnout",
    "exhausted",
    "hopeless",
    "helpless",
    "trapped",
    "can't breathe",
    "heart racing",
    "breaking down",
    "anxious",
)

CRISIS_RESOURCES = ResourceBundle(
    hotlines=(
        Hotline(
            name="National Suicide Prevention Lifeline",
            number="988",
            available="24/7",
        ),
        Hotline(
            name="Crisis Text Line",
            contact="Text HOME to 741741",
            available="24/7",
        ),
        Hotline(
            name="SAMHSA Helpline",
            number="1-800-662-4357",
            available="24/7",
        ),
        Hotline(
            name="International Association for Suicide Prevention",
            url="https://www.iasp.info/resources/Crisis_Centres/",
        ),
    ),
    message=(
        "You're not alone. Please reach out to a crisis support line immediately. "
        "Your life has value and there are people trained to help you right now."
    ),
)
