"""LLM-backed wellness features with fixed fallbacks.

The model is an external collaborator: it gets a prompt and returns
free text. Structured features ask for JSON and fall back to static
defaults whenever the provider fails or the reply does not have the
required fields. Only the therapy response surfaces failures to the
caller, since there is no meaningful canned reply to a conversation.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from mindwatch.services.face_service.config import LOW_CONFIDENCE_PEAK
from mindwatch.services.face_service.processor import normalize_frame, trend_from_scores
from . import defaults, prompts
from .base_llm import BaseLLM, LLMUnavailableError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

THERAPY_HISTORY_TURNS = 10


def extract_json(content: Optional[str]) -> Optional[Dict[str, Any]]:
    """Pull the outermost JSON object out of a model reply.

    Models sometimes wrap JSON in code fences or add prose around it.

    Returns:
        Parsed dict, or None if no valid object is found
    """
    if not content:
        return None

    cleaned = _CODE_FENCE.sub("", content).strip()
    match = _JSON_OBJECT.search(cleaned)
    if not match:
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _has_fields(payload: Optional[Dict[str, Any]], *fields: str) -> bool:
    return payload is not None and all(payload.get(f) for f in fields)


class WellnessAssistant:
    """Wellness features delegated to an LLM."""

    def __init__(self, llm: BaseLLM):
        self.llm = llm

    async def therapy_response(
        self,
        history: Sequence[Dict[str, str]],
        message: str,
    ) -> str:
        """Conversational reply to the latest user message.

        Raises:
            LLMUnavailableError: If the provider cannot be reached
        """
        turns = [
            {"role": turn["role"], "content": turn["content"]}
            for turn in list(history)[-THERAPY_HISTORY_TURNS:]
        ]
        try:
            response = await self.llm.generate(
                message,
                system_prompt=prompts.THERAPY_SYSTEM_PROMPT,
                history=turns,
                temperature=0.75,
                max_tokens=600,
                top_p=0.9,
            )
        except (LLMUnavailableError, ValueError) as e:
            logger.error("THERAPY_RESPONSE_FAILED", extra={"error": str(e)})
            raise LLMUnavailableError("AI service temporarily unavailable. Please try again.") from e

        return response.text or defaults.STATIC_SUPPORT_MESSAGE

    async def analyze_emotion(
        self,
        text: str,
        history: Optional[Sequence[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """Structured emotion analysis; default analysis on any failure."""
        parsed = await self._generate_json(
            "EMOTION_ANALYSIS",
            prompts.build_emotion_prompt(text, history),
            prompts.EMOTION_SYSTEM_PROMPT,
            temperature=0.45,
            max_tokens=700,
        )
        if _has_fields(parsed, "insights", "dominantEmotion"):
            return parsed
        return defaults.default_emotion_analysis()

    async def stress_suggestions(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Categorized coping suggestions for a mood check-in."""
        parsed = await self._generate_json(
            "STRESS_SUGGESTIONS",
            prompts.build_suggestions_prompt(context),
            prompts.SUGGESTIONS_SYSTEM_PROMPT,
            temperature=0.55,
            max_tokens=900,
        )
        if _has_fields(parsed, "immediate", "overallAdvice"):
            return parsed
        return defaults.default_stress_suggestions()

    async def weekly_summary(
        self,
        mood_data: List[Dict[str, Any]],
        themes: Sequence[str],
    ) -> str:
        try:
            response = await self.llm.generate(
                prompts.build_weekly_summary_prompt(mood_data, themes),
                temperature=0.7,
                max_tokens=300,
            )
        except (LLMUnavailableError, ValueError) as e:
            logger.warning("WEEKLY_SUMMARY_FALLBACK", extra={"error": str(e)})
            return defaults.WEEKLY_SUMMARY_FALLBACK
        return response.text or defaults.WEEKLY_SUMMARY_EMPTY

    async def analyze_face(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Narrative reading of a facial-expression session.

        Args:
            payload: {"expressions": {label: prob}, "stressScore": int,
                "dominantEmotion": str, "sessionDuration": seconds,
                "sessionHistory": [{"stress": int, ...}],
                "voiceTranscript": optional str}
        """
        expressions = normalize_frame(payload.get("expressions"))
        stress_score = payload.get("stressScore", 30)
        dominant = payload.get("dominantEmotion") or "neutral"

        summary = ", ".join(
            f"{label.value}: {value * 100:.1f}%" for label, value in expressions.items()
        )
        peak = max(expressions.values(), default=0.0)
        data_quality = "sufficient" if peak > LOW_CONFIDENCE_PEAK else "low-confidence"

        trend_info = "No temporal data available."
        history = payload.get("sessionHistory")
        samples = history if isinstance(history, list) else []
        trend = trend_from_scores([
            float(sample["stress"])
            for sample in samples
            if isinstance(sample, dict)
            and isinstance(sample.get("stress"), (int, float))
            and not isinstance(sample["stress"], bool)
        ])
        if trend:
            trend_info = (
                f"Stress trend over {payload.get('sessionDuration', 0)}s session: "
                f"{trend['direction']} ({trend['first_half']:.0f} -> {trend['second_half']:.0f})"
            )

        parsed = await self._generate_json(
            "FACE_ANALYSIS",
            prompts.build_face_prompt(
                expression_summary=summary,
                dominant_emotion=dominant,
                stress_score=stress_score,
                data_quality=data_quality,
                trend_info=trend_info,
                voice_transcript=payload.get("voiceTranscript"),
            ),
            prompts.FACE_SYSTEM_PROMPT,
            temperature=0.3,
            max_tokens=700,
        )
        if _has_fields(parsed, "overallAssessment", "recommendations"):
            return parsed
        return defaults.default_face_analysis(stress_score, dominant)

    async def _generate_json(
        self,
        feature: str,
        prompt: str,
        system_prompt: str,
        **kwargs
    ) -> Optional[Dict[str, Any]]:
        try:
            response = await self.llm.generate(prompt, system_prompt=system_prompt, **kwargs)
        except (LLMUnavailableError, ValueError) as e:
            logger.warning(f"{feature}_FALLBACK", extra={"reason": "llm_error", "error": str(e)})
            return None

        parsed = extract_json(response.text)
        if parsed is None:
            logger.warning(f"{feature}_FALLBACK", extra={"reason": "unparseable_response"})
        return parsed
