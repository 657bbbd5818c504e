"""Tests for CrisisClassifier - safety-critical code, every tier covered.

Matching is plain substring containment, so the "safe" fixtures below
deliberately avoid words that embed a keyword (e.g. "studied" contains
"die", "intense" contains "tense").
"""
import dataclasses

import pytest

from mindwatch.shared.models import Severity
from mindwatch.services.crisis_service.classifier import (
    CrisisClassifier,
    calculate_stress_level,
    detect_crisis,
)
from mindwatch.services.crisis_service.config import (
    CRISIS_KEYWORDS,
    CRISIS_RESOURCES,
    STRESS_KEYWORDS,
)


@pytest.fixture
def classifier():
    """Create a CrisisClassifier with default policy."""
    return CrisisClassifier()


class TestNoSignal:
    """Text without any keyword."""

    def test_normal_message_returns_none(self, classifier):
        result = classifier.detect_crisis("I had a good day at school today")

        assert result.severity == Severity.NONE
        assert result.is_crisis is False
        assert result.is_stress is False
        assert result.resources is None
        assert result.detected_keywords == ()

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  "])
    def test_empty_or_whitespace_text(self, classifier, text):
        """Empty input is a defined case, not an error."""
        result = classifier.assess(text)

        assert result.assessment.severity == Severity.NONE
        assert result.assessment.is_crisis is False
        assert result.assessment.is_stress is False
        assert result.assessment.resources is None
        assert result.stress_level == 0

    def test_none_text_is_treated_as_empty(self, classifier):
        assert classifier.calculate_stress_level(None) == 0
        assert classifier.detect_crisis(None).severity == Severity.NONE


class TestStressTiers:
    """Stress-only messages map to LOW or MODERATE."""

    def test_single_stress_keyword_is_low(self, classifier):
        result = classifier.detect_crisis("I feel a lot of pressure at work")

        assert result.severity == Severity.LOW
        assert result.is_stress is True
        assert result.is_crisis is False
        assert result.resources is None
        assert result.detected_keywords == ("pressure",)

    def test_two_stress_keywords_is_low(self, classifier):
        result = classifier.detect_crisis("Worried and nervous about tomorrow")

        assert result.severity == Severity.LOW
        assert result.detected_keywords == ("worried", "nervous")

    def test_three_stress_keywords_is_moderate(self, classifier):
        text = "I'm so stressed and overwhelmed and anxious"
        result = classifier.assess(text)

        assert result.assessment.severity == Severity.MODERATE
        assert result.assessment.is_crisis is False
        assert result.assessment.detected_keywords == ("stress", "overwhelmed", "anxious")
        # min(10, 3 * 1.5) = 4.5, rounded half-up
        assert result.stress_level == 5

    def test_keyword_inside_longer_word_matches(self, classifier):
        """Substring semantics: 'intense' contains 'tense'."""
        result = classifier.detect_crisis("That was an intense meeting")

        assert result.severity == Severity.LOW
        assert result.detected_keywords == ("tense",)


class TestCrisisTiers:
    """Crisis messages map to HIGH or CRITICAL and carry resources."""

    def test_single_crisis_keyword_is_high(self, classifier):
        result = classifier.detect_crisis("I keep thinking about suicide")

        assert result.severity == Severity.HIGH
        assert result.is_crisis is True
        assert result.detected_keywords == ("suicide",)
        assert result.resources is CRISIS_RESOURCES

    def test_want_to_die_with_hopeless(self, classifier):
        result = classifier.detect_crisis("I want to die and feel hopeless")

        assert result.severity == Severity.HIGH
        assert result.is_crisis is True
        assert result.is_stress is True
        assert result.resources is not None
        assert "want to die" in result.detected_keywords
        assert result.detected_keywords[-1] == "hopeless"

    def test_three_crisis_keywords_is_critical(self, classifier):
        result = classifier.detect_crisis("I want to kill myself, maybe overdose on pills")

        assert result.severity == Severity.CRITICAL
        assert result.detected_keywords == ("kill myself", "overdose", "pills")

    def test_crisis_outranks_stress(self, classifier):
        """Three stress keywords never downgrade a crisis."""
        result = classifier.detect_crisis(
            "overwhelmed, exhausted and trapped, I want to end my life"
        )

        assert result.severity == Severity.HIGH

    def test_crisis_keywords_reported_before_stress_keywords(self, classifier):
        result = classifier.detect_crisis("panic attacks, I want to hurt myself")

        assert result.detected_keywords == ("hurt myself", "panic")

    def test_keywords_reported_in_list_order_not_text_order(self, classifier):
        result = classifier.detect_crisis("pills, then an overdose")

        assert result.detected_keywords == ("overdose", "pills")

    def test_case_insensitive_detection(self, classifier):
        result = classifier.detect_crisis("I WANT TO END MY LIFE")

        assert result.severity == Severity.HIGH
        assert result.detected_keywords == ("end my life",)

    def test_repeated_keyword_counts_once(self, classifier):
        result = classifier.detect_crisis("suicide suicide suicide")

        assert result.severity == Severity.HIGH
        assert result.detected_keywords == ("suicide",)


class TestStressLevel:
    """0-10 stress level from weighted match counts."""

    def test_no_matches_is_zero(self, classifier):
        assert classifier.calculate_stress_level("Lovely weather today") == 0

    def test_single_stress_keyword_rounds_half_up(self, classifier):
        # 1.5 -> 2
        assert classifier.calculate_stress_level("panic panic panic") == 2

    def test_single_crisis_keyword(self, classifier):
        assert classifier.calculate_stress_level("thinking about suicide") == 3

    def test_mixed_matches(self, classifier):
        # 1 crisis + 1 stress = 4.5 -> 5
        assert classifier.calculate_stress_level("burnout and I can't go on") == 5

    def test_capped_at_ten(self, classifier):
        text = "suicide, kill myself, end my life, overdose"
        assert classifier.calculate_stress_level(text) == 10

    def test_monotonic_in_match_count(self, classifier):
        texts = [
            "fine",
            "stress",
            "stress and panic",
            "stress and panic, I feel trapped",
            "stress and panic, I feel trapped, goodbye forever",
            "stress and panic, I feel trapped, goodbye forever, no way out",
            "stress and panic, trapped, goodbye forever, no way out, end it all",
        ]
        levels = [classifier.calculate_stress_level(t) for t in texts]

        assert levels == sorted(levels)
        assert levels[-1] == 10

    def test_every_keyword_at_once(self, classifier):
        text = " ".join(CRISIS_KEYWORDS + STRESS_KEYWORDS)
        result = classifier.assess(text)

        assert result.stress_level == 10
        assert result.assessment.severity == Severity.CRITICAL
        assert len(result.assessment.detected_keywords) == len(CRISIS_KEYWORDS) + len(STRESS_KEYWORDS)

    def test_assess_matches_separate_calls(self, classifier):
        text = "Heart racing, can't breathe, I want to die"
        combined = classifier.assess(text)

        assert combined.assessment == classifier.detect_crisis(text)
        assert combined.stress_level == classifier.calculate_stress_level(text)


class TestResources:
    """Crisis resources are a shared immutable constant."""

    def test_resources_cannot_be_mutated(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CRISIS_RESOURCES.message = "changed"

    def test_resources_include_988(self):
        numbers = [h.number for h in CRISIS_RESOURCES.hotlines]
        assert "988" in numbers

    def test_to_dict_shape(self, classifier):
        data = classifier.assess("I want to end it all").to_dict()

        assert data["isCrisis"] is True
        assert data["severity"] == "high"
        assert data["detectedKeywords"] == ["end it all"]
        assert data["stressLevel"] == 3
        assert data["resources"]["hotlines"][0]["number"] == "988"
        assert "url" not in data["resources"]["hotlines"][0]

    def test_no_resources_in_dict_without_crisis(self, classifier):
        data = classifier.assess("just tense").to_dict()
        assert data["resources"] is None


class TestModuleShortcuts:
    def test_detect_crisis_shortcut(self):
        assert detect_crisis("overdose").severity == Severity.HIGH

    def test_calculate_stress_level_shortcut(self):
        assert calculate_stress_level("anxiety") == 2
