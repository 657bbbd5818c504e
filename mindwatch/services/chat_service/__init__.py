"""Chat Service: classifier-first chat turns.

Components:
- pipeline.py: ChatPipeline (crisis check, therapy reply, emotion analysis)
- handler.py: Flask HTTP endpoints (/health, /ready, /chat/message)
"""

from .pipeline import ChatPipeline, ChatTurnResult, ResponseSource, resolve_stress_level

__all__ = [
    "ChatPipeline",
    "ChatTurnResult",
    "ResponseSource",
    "resolve_stress_level",
]
