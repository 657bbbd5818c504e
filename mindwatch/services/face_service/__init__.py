"""Face Service: smoothed stress scoring from facial-expression frames.

Components:
- processor.py: ExpressionProcessor (sliding window, stress score, label)
- config.py: Smoothing window, expression weights, stress bands
- handler.py: Flask HTTP endpoints (/sessions, /score, /analyze)
"""

from .processor import (
    ExpressionProcessor,
    TimelineSample,
    compute_smoothed_expressions,
    compute_stress_score,
    dominant_expression,
    get_stress_label,
    normalize_frame,
    summarize_trend,
)
from .config import ExpressionConfig, EXPRESSION_WEIGHTS, SMOOTHING_WINDOW, STRESS_BANDS

__all__ = [
    "ExpressionProcessor",
    "TimelineSample",
    "compute_smoothed_expressions",
    "compute_stress_score",
    "dominant_expression",
    "get_stress_label",
    "normalize_frame",
    "summarize_trend",
    "ExpressionConfig",
    "EXPRESSION_WEIGHTS",
    "SMOOTHING_WINDOW",
    "STRESS_BANDS",
]
