"""MindWatch microservices.

Service boundaries:
- crisis_service: Deterministic crisis/stress keyword classifier; runs before any LLM call
- face_service: Smoothed stress scoring from facial-expression frames
- analysis_service: Mood analytics and wellness score
- chat_service: Chat turns (classifier, then LLM reply and emotion analysis)
- llm_service: OpenAI-compatible LLM client with fixed fallbacks
"""
