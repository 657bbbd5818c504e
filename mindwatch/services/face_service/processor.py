"""Facial-expression signal processor.

Turns the noisy per-frame expression probabilities produced by the
browser-side face detector into a smoothed 0-100 stress score and a
qualitative label.

Pipeline per frame:
- Normalize the frame to the closed label set (missing/bad values -> 0)
- Push onto a bounded FIFO history (oldest evicted past the window)
- Average each label over the retained frames
- Weighted aggregation into a stress score, then bucket into a label

The processor performs no I/O and never raises on detector output.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mindwatch.shared.models import ExpressionLabel, ExpressionReading, StressLevelLabel, utc_now
from mindwatch.shared.utils import bucket, round_half_up
from .config import (
    CALM_AMPLIFICATION,
    EXPRESSION_WEIGHTS,
    MAX_STRESS_SCORE,
    STRESS_AMPLIFICATION,
    STRESS_BANDS,
    ExpressionConfig,
)

logger = logging.getLogger(__name__)

SmoothedExpression = Dict[ExpressionLabel, float]


@dataclass(frozen=True)
class TimelineSample:
    """Stress snapshot recorded periodically during a camera session."""
    recorded_at: datetime
    stress_score: int
    dominant: ExpressionLabel
    expressions: Mapping[ExpressionLabel, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.recorded_at.isoformat(),
            "stress": self.stress_score,
            "dominant": self.dominant.value,
            "expressions": {k.value: round(v, 4) for k, v in self.expressions.items()},
        }


def _coerce_probability(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def normalize_frame(frame: Optional[Mapping[Any, Any]]) -> SmoothedExpression:
    """Project detector output onto the closed label set.

    Keys may be ExpressionLabel members or their string values. Unknown
    keys are dropped; missing, non-numeric, NaN or infinite values
    become 0. Values are not renormalized.
    """
    if not isinstance(frame, Mapping):
        return {label: 0.0 for label in ExpressionLabel}

    normalized = {}
    for label in ExpressionLabel:
        raw = frame.get(label, frame.get(label.value))
        normalized[label] = _coerce_probability(raw)
    return normalized


def compute_smoothed_expressions(history: Sequence[Mapping[ExpressionLabel, float]]) -> SmoothedExpression:
    """Arithmetic mean of each label across the given frames."""
    if not history:
        return {label: 0.0 for label in ExpressionLabel}

    count = len(history)
    return {
        label: sum(frame.get(label, 0.0) for frame in history) / count
        for label in ExpressionLabel
    }


def compute_stress_score(smoothed: Mapping[Any, Any]) -> int:
    """Weighted aggregation of smoothed expressions into 0-100.

    stress = sum(value * weight) over positive weights
    calm   = sum(value * |weight|) over negative weights
    score  = min(100, round(max(0, stress * 120 - calm * 40)))
    """
    values = normalize_frame(smoothed)

    stress = 0.0
    calm = 0.0
    for label, weight in EXPRESSION_WEIGHTS.items():
        if weight > 0:
            stress += values[label] * weight
        else:
            calm += values[label] * abs(weight)

    raw_stress = max(0.0, stress * STRESS_AMPLIFICATION - calm * CALM_AMPLIFICATION)
    return min(MAX_STRESS_SCORE, round_half_up(raw_stress))


def get_stress_label(score: int) -> StressLevelLabel:
    """Bucket a 0-100 stress score (inclusive upper bounds)."""
    return bucket(score, STRESS_BANDS)


def dominant_expression(smoothed: Mapping[ExpressionLabel, float]) -> ExpressionLabel:
    """Label with the highest mean; NEUTRAL when nothing scores above 0.

    Ties keep the label that comes first in ExpressionLabel order.
    """
    best_label, best_value = ExpressionLabel.NEUTRAL, 0.0
    for label in ExpressionLabel:
        value = smoothed.get(label, 0.0)
        if value > best_value:
            best_label, best_value = label, value
    return best_label


def summarize_trend(timeline: Sequence[TimelineSample]) -> Optional[Dict[str, Any]]:
    """Compare mean stress of the first and second half of a session.

    Returns:
        {"direction": "increasing" | "decreasing" | "stable",
         "first_half": float, "second_half": float}
        or None when there are 3 samples or fewer
    """
    return trend_from_scores([sample.stress_score for sample in timeline])


def trend_from_scores(scores: Sequence[float]) -> Optional[Dict[str, Any]]:
    """Same as summarize_trend() for a bare sequence of stress scores."""
    if len(scores) <= 3:
        return None

    middle = len(scores) // 2
    first = scores[:middle]
    second = scores[middle:]
    avg_first = sum(first) / len(first)
    avg_second = sum(second) / len(second)

    if avg_second > avg_first:
        direction = "increasing"
    elif avg_second < avg_first:
        direction = "decreasing"
    else:
        direction = "stable"

    return {
        "direction": direction,
        "first_half": round(avg_first, 1),
        "second_half": round(avg_second, 1),
    }


class ExpressionProcessor:
    """Rolling-window smoother for one camera session.

    Each instance owns its history; create one per session. Not meant
    to be written from more than one thread at a time.
    """

    def __init__(self, config: Optional[ExpressionConfig] = None):
        self.config = config or ExpressionConfig()
        self._history = deque(maxlen=self.config.smoothing_window)
        self._timeline = deque(maxlen=self.config.timeline_length)
        self._frames_seen = 0

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def frames_seen(self) -> int:
        return self._frames_seen

    @property
    def timeline(self) -> List[TimelineSample]:
        return list(self._timeline)

    def ingest(self, frame: Optional[Mapping[Any, Any]]) -> SmoothedExpression:
        """Add a frame and return the smoothed expression vector.

        The deque drops the oldest frame once the window is full.
        """
        self._history.append(normalize_frame(frame))
        self._frames_seen += 1
        return compute_smoothed_expressions(self._history)

    def process(
        self,
        frame: Optional[Mapping[Any, Any]],
        timestamp: Optional[datetime] = None,
    ) -> ExpressionReading:
        """Ingest a frame and derive score, label and dominant expression."""
        smoothed = self.ingest(frame)
        score = compute_stress_score(smoothed)
        dominant = dominant_expression(smoothed)

        if self._frames_seen % self.config.timeline_every_n_frames == 0:
            self._timeline.append(TimelineSample(
                recorded_at=timestamp or utc_now(),
                stress_score=score,
                dominant=dominant,
                expressions=dict(smoothed),
            ))

        logger.debug(
            "EXPRESSION_FRAME_INGESTED",
            extra={
                "history_length": len(self._history),
                "stress_score": score,
                "dominant": dominant.value,
            }
        )

        return ExpressionReading(
            smoothed=smoothed,
            stress_score=score,
            stress_label=get_stress_label(score),
            dominant=dominant,
            sample_count=len(self._history),
        )

    def reset(self) -> None:
        """Forget all frames, e.g. when the camera is restarted."""
        self._history.clear()
        self._timeline.clear()
        self._frames_seen = 0
        logger.info("EXPRESSION_PROCESSOR_RESET")
