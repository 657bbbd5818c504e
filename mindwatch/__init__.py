"""MindWatch: mental-wellness backend services.

Deterministic crisis/stress detection on text and smoothed stress
scoring on facial-expression streams, plus the surrounding analytics
and LLM-assisted chat services.
"""

__version__ = "1.0.0"
