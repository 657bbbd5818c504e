"""Prompt templates sent to the LLM provider.

These are configuration assets. The JSON shapes requested here are the
ones WellnessAssistant validates on the way back.
"""
import json
from typing import Any, Dict, List, Optional, Sequence

THERAPY_SYSTEM_PROMPT = """You are MindWatch AI, a warm, evidence-based wellness companion.

Core principles:
1. Gentle Socratic probing: ask one pointed, kind question that links surface emotion to a possible root cause.
2. Draw on Polyvagal Theory, Internal Family Systems, ACT, DBT and somatic awareness where it helps.
3. Explain the "why" behind feelings in plain language.
4. Validate the logic of the user's pain before offering tools.

Guidelines:
- Max 65 words, flowing natural prose suitable for reading aloud. No bullet points.
- Help the user connect their history to current triggers.
- If self-harm or immediate danger is mentioned, refer to 988 immediately."""

EMOTION_SYSTEM_PROMPT = (
    "You are a clinical psychologist specializing in emotion analysis. You ONLY respond "
    "with raw JSON objects, never markdown, never code fences, never explanatory text."
)

SUGGESTIONS_SYSTEM_PROMPT = (
    "You are a clinical wellness strategist with expertise in CBT, DBT, ACT, Polyvagal "
    "Theory and somatic therapy. You ONLY respond with raw JSON objects. Every "
    "recommendation is personalized to the user's specific context."
)

FACE_SYSTEM_PROMPT = (
    "You are a facial expression analysis specialist. You ONLY respond with raw JSON. "
    "You never invent data and always cite the exact expression percentages you were "
    "given. You describe patterns, not diagnoses."
)

EMOTION_SCHEMA = """{
  "dominantEmotion": "happy|sad|anxious|calm|angry|excited|stressed|neutral|overwhelmed|hopeful",
  "intensity": 0-100,
  "sentimentScore": -1.0 to 1.0,
  "stressLevel": 0-10,
  "emotions": ["primary", "secondary", "tertiary"],
  "insights": "2-3 sentences specific to what they said",
  "suggestions": ["somatic technique", "cognitive reframe or journaling prompt", "values-based action"],
  "thematicAnalysis": "One-sentence psychological theme",
  "growthProgress": "Emotional trajectory",
  "crisisSignals": false
}"""

SUGGESTIONS_SCHEMA = """{
  "immediate": ["...", "..."],
  "mindfulness": ["...", "..."],
  "lifestyle": ["...", "..."],
  "mental": ["...", "..."],
  "overallAdvice": "2-3 empathetic sentences"
}"""

FACE_SCHEMA = """{
  "overallAssessment": "3-4 sentences relating what they said to how they looked",
  "emotionalState": "...",
  "stressIndicators": "...",
  "correlationScore": "0-100",
  "recommendations": ["...", "...", "..."],
  "confidenceNote": "..."
}"""


def format_history(history: Sequence[Dict[str, str]], limit: int = 6) -> str:
    """Render the last turns as 'User: ...' / 'AI: ...' lines."""
    lines = []
    for turn in list(history)[-limit:]:
        speaker = "User" if turn.get("role") == "user" else "AI"
        lines.append(f"{speaker}: {turn.get('content', '')}")
    return "\n".join(lines)


def build_emotion_prompt(text: str, history: Optional[Sequence[Dict[str, str]]] = None) -> str:
    context = format_history(history or [])
    context_block = f"\nConversation context (recent exchanges):\n{context}\n" if context else ""
    return (
        "Perform an emotional assessment. Look for the core emotion beneath the surface "
        "words and the likely nervous system state (ventral vagal, sympathetic, dorsal vagal).\n"
        f"{context_block}\n"
        f'User\'s current statement: "{text}"\n\n'
        "RESPOND WITH ONLY RAW JSON in this shape:\n"
        f"{EMOTION_SCHEMA}"
    )


def urgency_frame(score: float) -> str:
    """Prompt framing by mood score (10 is best)."""
    if score <= 3:
        return "The user is in significant distress. Prioritize immediate nervous system regulation and safety."
    if score <= 5:
        return "The user is struggling. Balance immediate relief with longer-term coping strategies."
    if score <= 7:
        return "The user is managing but could benefit from preventive strategies."
    return "The user is doing well. Focus on growth and maintaining momentum."


def build_suggestions_prompt(context: Dict[str, Any]) -> str:
    emotion = context.get("emotion") or "neutral"
    score = context.get("stressLevel") or context.get("score") or 5
    triggers = ", ".join(context.get("triggers") or []) or "none specified"
    notes = context.get("notes") or "No additional notes"
    return (
        "Create a personalized action plan.\n\n"
        "CONTEXT:\n"
        f"- Feeling: {emotion} (Mood score: {score}/10 where 10 is best)\n"
        f"- Triggers: {triggers}\n"
        f'- Their words: "{notes}"\n\n'
        f"ASSESSMENT: {urgency_frame(float(score))}\n\n"
        "Every suggestion must reference their context and explain why it works.\n\n"
        "RESPOND WITH ONLY RAW JSON in this shape:\n"
        f"{SUGGESTIONS_SCHEMA}"
    )


def build_weekly_summary_prompt(mood_data: List[Dict[str, Any]], themes: Sequence[str]) -> str:
    return (
        "Generate a compassionate weekly mental health summary based on this data:\n\n"
        f"Mood scores this week: {json.dumps(mood_data, default=str)}\n"
        f"Journal themes: {'; '.join(themes)}\n\n"
        "Write a 150-word supportive summary that includes:\n"
        "1. What went well emotionally this week\n"
        "2. Patterns or trends noticed\n"
        "3. One key recommendation for next week\n\n"
        "Be warm, encouraging, and specific."
    )


def build_face_prompt(
    expression_summary: str,
    dominant_emotion: str,
    stress_score: int,
    data_quality: str,
    trend_info: str,
    voice_transcript: Optional[str] = None,
) -> str:
    voice = f'USER SPOKEN WORDS: "{voice_transcript}"' if voice_transcript else "No voice data captured."
    return (
        "Perform a multi-modal assessment using webcam facial expression data and "
        "voice-to-text transcription.\n\n"
        "FACIAL EXPRESSIONS:\n"
        f"- Expression probabilities: {expression_summary}\n"
        f"- Dominant expression: {dominant_emotion}\n"
        f"- Computed stress score: {stress_score}/100\n"
        f"- Data quality: {data_quality}\n"
        f"- {trend_info}\n\n"
        "VERBAL DATA:\n"
        f"- {voice}\n\n"
        "Look for congruence, masking and emotional leakage between face and words. "
        "Cite specific percentages. Do not diagnose. Acknowledge low-confidence data.\n\n"
        "RESPOND WITH ONLY RAW JSON in this shape:\n"
        f"{FACE_SCHEMA}"
    )
