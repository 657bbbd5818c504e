"""Face Service configuration and stress-scoring policy.

The weights, amplification factors and band boundaries are a fixed,
hand-tuned calibration. Positive weights contribute to stress, negative
weights to calm. Stress contributions are amplified three times more
than calm ones so that a calm face saturates at 0 rather than going
negative.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from mindwatch.shared.models import ExpressionLabel, StressLevelLabel


SMOOTHING_WINDOW = 12


@dataclass(frozen=True)
class ExpressionConfig:
    """Configuration for one expression processor."""

    # Frames averaged for smoothing (~3s at the 4 Hz detector cadence)
    smoothing_window: int = SMOOTHING_WINDOW

    # Session timeline kept for trend reporting
    timeline_length: int = 40
    timeline_every_n_frames: int = 3

    def __post_init__(self):
        if self.smoothing_window < 1:
            raise ValueError(f"Smoothing window must be >= 1, got {self.smoothing_window}")
        if self.timeline_every_n_frames < 1:
            raise ValueError("Timeline sampling interval must be >= 1")


EXPRESSION_WEIGHTS: Mapping[ExpressionLabel, float] = MappingProxyType({
    ExpressionLabel.HAPPY: -0.30,
    ExpressionLabel.SAD: 0.20,
    ExpressionLabel.ANGRY: 0.25,
    ExpressionLabel.FEARFUL: 0.25,
    ExpressionLabel.DISGUSTED: 0.15,
    ExpressionLabel.SURPRISED: 0.05,
    ExpressionLabel.NEUTRAL: -0.20,
})

STRESS_AMPLIFICATION = 120
CALM_AMPLIFICATION = 40

MAX_STRESS_SCORE = 100

# (inclusive upper bound, label)
STRESS_BANDS: Tuple[Tuple[int, StressLevelLabel], ...] = (
    (15, StressLevelLabel.VERY_RELAXED),
    (30, StressLevelLabel.CALM),
    (45, StressLevelLabel.MILDLY_TENSE),
    (60, StressLevelLabel.MODERATE_STRESS),
    (75, StressLevelLabel.HIGH_STRESS),
    (100, StressLevelLabel.VERY_HIGH_STRESS),
)

# Below this peak probability the detector output is treated as weak
LOW_CONFIDENCE_PEAK = 0.3
