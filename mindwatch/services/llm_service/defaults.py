"""Fixed fallback content used when the LLM is unavailable.

Each function returns a fresh object so callers can mutate the result
without affecting later fallbacks.
"""
from typing import Any, Dict

STATIC_SUPPORT_MESSAGE = (
    "I'm here for you. Could you tell me more about how you're feeling?"
)

WEEKLY_SUMMARY_EMPTY = (
    "Keep tracking your moods and journaling. Consistency leads to insight!"
)

WEEKLY_SUMMARY_FALLBACK = (
    "Great job staying consistent with your mental health journey this week!"
)


def default_emotion_analysis() -> Dict[str, Any]:
    return {
        "dominantEmotion": "neutral",
        "sentimentScore": 0,
        "stressLevel": 3,
        "emotions": ["neutral"],
        "thematicAnalysis": "General presence and neutral observation.",
        "insights": (
            "Your message reflects a neutral emotional state. Take a moment to check in "
            "with your bodily sensations. Is there any tension you haven't noticed?"
        ),
        "suggestions": [
            "Take 5 deep breaths, focusing on the sensation of air moving through your nose",
            "Label 3 things you can see in your environment right now",
            "Gently stretch your neck and shoulders to release latent tension",
        ],
        "crisisSignals": False,
    }


def default_stress_suggestions() -> Dict[str, Any]:
    return {
        "immediate": [
            "Try the 5-4-3-2-1 grounding technique because it resets your sensory priority",
            "Splash cold water on your face to stimulate the mammalian dive reflex",
        ],
        "mindfulness": [
            "Do a 3-minute self-compassion meditation to quiet the inner critic",
            "Observe your thoughts as passing clouds to practice cognitive defusion",
        ],
        "lifestyle": [
            "Limit social media for the next 2 hours to reduce involuntary dopamine spikes",
            "Go for a mindful 10-minute walk to release kinetic energy",
        ],
        "mental": [
            "Question if this thought is a fact or just a feeling-based perception",
            "Identify one small win you had today to counter negativity bias",
        ],
        "overallAdvice": (
            "You're navigating a human experience with courage. "
            "Take it one breath at a time, honoring your pace."
        ),
    }


def default_face_analysis(stress_score: int = 30, dominant_emotion: str = "neutral") -> Dict[str, Any]:
    tense = stress_score > 50
    return {
        "overallAssessment": (
            f"Based on your facial expressions, you appear predominantly {dominant_emotion} "
            f"with a stress score of {stress_score}/100. "
            + ("Consider taking a brief break to recenter." if tense else "You seem relatively at ease.")
        ),
        "emotionalState": (
            f"Your dominant expression is {dominant_emotion}, which suggests a "
            f"{'somewhat tense' if tense else 'relatively calm'} emotional state."
        ),
        "stressIndicators": (
            "Detailed analysis unavailable. This is based on the expression detection model output."
        ),
        "recommendations": [
            "Try a 60-second box breathing exercise (inhale 4s, hold 4s, exhale 4s, hold 4s)",
            "Do a quick facial muscle relaxation: soften your jaw, forehead, and around your eyes",
            "Take a moment to notice 3 things in your environment that bring you comfort",
        ],
        "confidenceNote": "This is a default analysis. AI-powered insights are temporarily unavailable.",
    }
