"""Analysis Service: wellness reporting over a user's mood history.

This service provides:
- Wellness overview with a composite 0-100 wellness score
- Stress report (stress rate, top triggers, flagged timeline)
- Mood statistics (daily averages, emotion and trigger frequency)
- LLM weekly summary and per-check-in suggestions, with fixed fallbacks

Endpoints:
- GET /health - Health check
- GET /ready - Readiness check
- POST /overview, /stress-report, /mood-stats, /weekly-summary, /mood-insights
"""

from .analytics import (
    STRESSFUL_EMOTIONS,
    STRESS_REPORT_EMOTIONS,
    build_mood_stats,
    build_overview,
    build_stress_report,
    calculate_wellness_score,
    one_decimal,
    within_days,
)
from .handler import (
    AnalysisConfig,
    AnalysisHandler,
    InvalidRecordError,
    app,
    parse_mood_logs,
)

__all__ = [
    "STRESSFUL_EMOTIONS",
    "STRESS_REPORT_EMOTIONS",
    "build_mood_stats",
    "build_overview",
    "build_stress_report",
    "calculate_wellness_score",
    "one_decimal",
    "within_days",
    "AnalysisConfig",
    "AnalysisHandler",
    "InvalidRecordError",
    "app",
    "parse_mood_logs",
]
