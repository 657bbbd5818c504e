"""Chat turn pipeline.

Deterministic crisis detection runs on every message before any LLM
call. Unlike the LLM features, its result is never dropped: a turn
whose LLM calls fail still reports the crisis assessment and resources.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from mindwatch.services.crisis_service import CrisisClassifier
from mindwatch.services.llm_service import LLMUnavailableError, WellnessAssistant
from mindwatch.services.llm_service import defaults
from mindwatch.shared.models import TextAssessment
from mindwatch.shared.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

CHAT_ROLES = ("user", "assistant")


class ResponseSource(Enum):
    """Where the reply text came from."""
    LLM_GENERATED = "llm_generated"
    FALLBACK = "fallback"


@dataclass
class ChatTurnResult:
    """Outcome of one user message."""
    user_message: str
    ai_response: str
    emotion_analysis: Dict[str, Any]
    crisis_detected: bool
    crisis_resources: Optional[Dict[str, Any]]
    stress_level: int
    source: ResponseSource
    detected_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userMessage": self.user_message,
            "aiResponse": self.ai_response,
            "emotionAnalysis": self.emotion_analysis,
            "crisisDetected": self.crisis_detected,
            "crisisResources": self.crisis_resources,
            "stressLevel": self.stress_level,
            "source": self.source.value,
        }


def resolve_stress_level(model_value: Any, classifier_value: int) -> int:
    """Prefer the model's 0-10 stress estimate, else the keyword score.

    A missing, non-numeric or zero model value falls back to the
    classifier.
    """
    if isinstance(model_value, bool) or not isinstance(model_value, (int, float)):
        return classifier_value
    if not model_value:
        return classifier_value
    return round_half_up(clamp(model_value, 0, 10))


class ChatPipeline:
    """Classifier-first chat turn processing."""

    def __init__(
        self,
        assistant: Optional[WellnessAssistant] = None,
        classifier: Optional[CrisisClassifier] = None,
    ):
        """Initialize pipeline.

        Args:
            assistant: LLM-backed assistant; None serves static replies only
            classifier: Deterministic crisis/stress classifier
        """
        self.assistant = assistant
        self.classifier = classifier or CrisisClassifier()

        logger.info(
            "CHAT_PIPELINE_INITIALIZED",
            extra={"llm_configured": assistant is not None}
        )

    async def process_message(
        self,
        message: str,
        history: Optional[Sequence[Dict[str, str]]] = None,
    ) -> ChatTurnResult:
        """Handle one user message.

        Args:
            message: The user's message
            history: Earlier turns as {"role", "content"} dicts, oldest first,
                not including this message

        Returns:
            ChatTurnResult

        Raises:
            ValueError: If the message is empty or whitespace only
        """
        if not message or not message.strip():
            raise ValueError("Message is required")

        history = list(history or [])

        # Always before the LLM
        text_assessment = self.classifier.assess(message)
        assessment = text_assessment.assessment

        ai_response, source = await self._reply(history, message, text_assessment)
        emotion = await self._emotion(history, message)

        model_level = emotion.get("stressLevel") if self.assistant is not None else None
        stress_level = resolve_stress_level(model_level, text_assessment.stress_level)

        logger.info(
            "CHAT_TURN_COMPLETED",
            extra={
                "severity": assessment.severity.value,
                "crisis_detected": assessment.is_crisis,
                "stress_level": stress_level,
                "source": source.value,
                "history_length": len(history),
            }
        )

        return ChatTurnResult(
            user_message=message,
            ai_response=ai_response,
            emotion_analysis=emotion,
            crisis_detected=assessment.is_crisis,
            crisis_resources=assessment.resources.to_dict() if assessment.resources else None,
            stress_level=stress_level,
            source=source,
            detected_keywords=list(assessment.detected_keywords),
        )

    async def _reply(
        self,
        history: List[Dict[str, str]],
        message: str,
        text_assessment: TextAssessment,
    ):
        if self.assistant is not None:
            try:
                reply = await self.assistant.therapy_response(history, message)
                return reply, ResponseSource.LLM_GENERATED
            except LLMUnavailableError as e:
                logger.error(
                    "CHAT_REPLY_FALLBACK",
                    extra={"error": str(e), "crisis_detected": text_assessment.assessment.is_crisis}
                )

        resources = text_assessment.assessment.resources
        if resources is not None:
            return resources.message, ResponseSource.FALLBACK
        return defaults.STATIC_SUPPORT_MESSAGE, ResponseSource.FALLBACK

    async def _emotion(self, history: List[Dict[str, str]], message: str) -> Dict[str, Any]:
        if self.assistant is None:
            return defaults.default_emotion_analysis()
        return await self.assistant.analyze_emotion(message, history)
