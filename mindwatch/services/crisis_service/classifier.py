"""Keyword-based crisis and stress classifier.

Deterministic safety net that runs on every chat message, mood note and
journal entry before any model sees it. It has no external calls and
never raises: a crisis check that can fail is worse than one that is
crude.

Algorithm:
- Lower-case the text
- Substring-test each crisis keyword, then each stress keyword
  (each keyword matches at most once)
- Severity from match counts, fixed priority order
- Stress level 0-10 from weighted match counts
"""
import logging
from typing import Optional, Sequence, Tuple

from mindwatch.shared.models import (
    CrisisAssessment,
    Severity,
    TextAssessment,
)
from mindwatch.shared.utils import round_half_up, text_log_context
from .config import (
    CRISIS_KEYWORDS,
    CRISIS_RESOURCES,
    STRESS_KEYWORDS,
    ClassifierConfig,
    SeverityThresholds,
)

logger = logging.getLogger(__name__)


def _match_keywords(lowered_text: str, keywords: Sequence[str]) -> Tuple[str, ...]:
    """Return the keywords contained in lowered_text, in list order."""
    return tuple(keyword for keyword in keywords if keyword in lowered_text)


class CrisisClassifier:
    """Classifies free text into a severity tier and a stress level.

    Instances hold only read-only configuration and can be shared
    freely between requests and threads.
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        thresholds: Optional[SeverityThresholds] = None,
        crisis_keywords: Sequence[str] = CRISIS_KEYWORDS,
        stress_keywords: Sequence[str] = STRESS_KEYWORDS,
    ):
        self.config = config or ClassifierConfig()
        self.thresholds = thresholds or SeverityThresholds()
        self._crisis_keywords = tuple(crisis_keywords)
        self._stress_keywords = tuple(stress_keywords)

        logger.info(
            "CRISIS_CLASSIFIER_INITIALIZED",
            extra={
                "keyword_version": self.config.keyword_version,
                "crisis_keyword_count": len(self._crisis_keywords),
                "stress_keyword_count": len(self._stress_keywords),
            }
        )

    def detect_crisis(self, text: str) -> CrisisAssessment:
        """Scan text for crisis and stress language.

        Args:
            text: Raw user text. Empty or whitespace-only input is valid
                and yields a NONE assessment.

        Returns:
            CrisisAssessment; resources are attached only for crisis.
        """
        crisis_matches, stress_matches = self._match(text)
        return self._build_assessment(text, crisis_matches, stress_matches)

    def calculate_stress_level(self, text: str) -> int:
        """Score text on a 0-10 stress scale.

        rawScore = min(10, stress_matches * 1.5 + crisis_matches * 3),
        rounded half-up.
        """
        crisis_matches, stress_matches = self._match(text)
        return self._stress_level(len(crisis_matches), len(stress_matches))

    def assess(self, text: str) -> TextAssessment:
        """Run crisis detection and stress scoring with a single match pass."""
        crisis_matches, stress_matches = self._match(text)
        return TextAssessment(
            assessment=self._build_assessment(text, crisis_matches, stress_matches),
            stress_level=self._stress_level(len(crisis_matches), len(stress_matches)),
        )

    def _match(self, text: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        lowered = (text or "").lower()
        if not lowered.strip():
            return (), ()
        return (
            _match_keywords(lowered, self._crisis_keywords),
            _match_keywords(lowered, self._stress_keywords),
        )

    def _determine_severity(self, crisis_count: int, stress_count: int) -> Severity:
        """First matching rule wins."""
        if crisis_count >= self.thresholds.CRITICAL_CRISIS_MATCHES:
            return Severity.CRITICAL
        if crisis_count >= self.thresholds.HIGH_CRISIS_MATCHES:
            return Severity.HIGH
        if stress_count >= self.thresholds.MODERATE_STRESS_MATCHES:
            return Severity.MODERATE
        if stress_count >= self.thresholds.LOW_STRESS_MATCHES:
            return Severity.LOW
        return Severity.NONE

    def _stress_level(self, crisis_count: int, stress_count: int) -> int:
        raw_score = min(
            float(self.config.max_stress_level),
            stress_count * self.config.stress_keyword_weight
            + crisis_count * self.config.crisis_keyword_weight,
        )
        return round_half_up(raw_score)

    def _build_assessment(
        self,
        text: str,
        crisis_matches: Tuple[str, ...],
        stress_matches: Tuple[str, ...],
    ) -> CrisisAssessment:
        is_crisis = len(crisis_matches) > 0
        is_stress = len(stress_matches) > 0
        severity = self._determine_severity(len(crisis_matches), len(stress_matches))

        if is_crisis:
            logger.critical(
                "CRISIS_DETECTED",
                extra={
                    **text_log_context(text),
                    "severity": severity.value,
                    "crisis_matches": len(crisis_matches),
                    "stress_matches": len(stress_matches),
                    "keyword_version": self.config.keyword_version,
                }
            )
        elif is_stress:
            logger.warning(
                "STRESS_DETECTED",
                extra={
                    **text_log_context(text),
                    "severity": severity.value,
                    "stress_matches": len(stress_matches),
                }
            )

        return CrisisAssessment(
            is_crisis=is_crisis,
            is_stress=is_stress,
            severity=severity,
            detected_keywords=crisis_matches + stress_matches,
            resources=CRISIS_RESOURCES if is_crisis else None,
        )


_default_classifier: Optional[CrisisClassifier] = None


def _get_default_classifier() -> CrisisClassifier:
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = CrisisClassifier()
    return _default_classifier


def detect_crisis(text: str) -> CrisisAssessment:
    """Module-level shortcut using the default classifier."""
    return _get_default_classifier().detect_crisis(text)


def calculate_stress_level(text: str) -> int:
    """Module-level shortcut using the default classifier."""
    return _get_default_classifier().calculate_stress_level(text)
