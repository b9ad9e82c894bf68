"""
Signal Types

Shared identifiers, levels and the result record produced by every
signal evaluator.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Union


class SignalType(str, Enum):
    """The closed set of risk signals, valued by display name."""

    LIQUIDITY = 'Liquidity Fragility'
    FLOW = 'Order Flow Imbalance'
    VOLATILITY = 'Volatility Regime Shift'
    FORCED_SELLING = 'Forced Selling'

    @classmethod
    def all_signals(cls) -> List['SignalType']:
        """Return all signals in evaluation order."""
        return [cls.LIQUIDITY, cls.FLOW, cls.VOLATILITY, cls.FORCED_SELLING]

    @property
    def key(self) -> str:
        """Short identifier used in score breakdowns."""
        return _SIGNAL_KEYS[self]


_SIGNAL_KEYS = {
    SignalType.LIQUIDITY: 'liquidity',
    SignalType.FLOW: 'flow',
    SignalType.VOLATILITY: 'volatility',
    SignalType.FORCED_SELLING: 'forced_selling',
}


class StressLevel(str, Enum):
    STABLE = 'STABLE'
    ELEVATED = 'ELEVATED'
    STRESSED = 'STRESSED'
    UNSTABLE = 'UNSTABLE'
    CRITICAL = 'CRITICAL'

    @property
    def rank(self) -> int:
        """Numeric ordering for severity comparison (0-4)."""
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    StressLevel.STABLE: 0,
    StressLevel.ELEVATED: 1,
    StressLevel.STRESSED: 2,
    StressLevel.UNSTABLE: 3,
    StressLevel.CRITICAL: 4,
}


class ConfidenceLevel(str, Enum):
    LOW = 'LOW'
    MEDIUM = 'MEDIUM'
    HIGH = 'HIGH'

    @property
    def points(self) -> int:
        """Score used when fusing confidences (LOW=1, MEDIUM=2, HIGH=3)."""
        return _CONFIDENCE_POINTS[self]


_CONFIDENCE_POINTS = {
    ConfidenceLevel.LOW: 1,
    ConfidenceLevel.MEDIUM: 2,
    ConfidenceLevel.HIGH: 3,
}


@dataclass(frozen=True)
class SignalResult:
    """
    Output of one signal evaluator for one tick.

    ``value`` is the 0-100 risk rounded to an integer; ``severity`` and
    ``triggered`` are derived from the unrounded risk.
    """

    signal: SignalType
    value: int
    severity: StressLevel
    triggered: bool
    confidence: ConfidenceLevel
    explanation: str
    timestamp: int
    raw_metrics: Dict[str, Union[float, str]] = field(default_factory=dict)


def get_severity(risk: float) -> StressLevel:
    """Map a single signal's risk (0-100) to its own four-bucket severity."""
    if risk < 30:
        return StressLevel.STABLE
    elif risk < 50:
        return StressLevel.ELEVATED
    elif risk < 75:
        return StressLevel.STRESSED
    else:
        return StressLevel.CRITICAL


def determine_confidence(value: float, high_threshold: float, medium_threshold: float) -> ConfidenceLevel:
    if value >= high_threshold:
        return ConfidenceLevel.HIGH
    if value >= medium_threshold:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def default_signal(signal: SignalType, timestamp: int) -> SignalResult:
    """Zero-risk, low-confidence result used when a signal lacks data."""
    return SignalResult(
        signal=signal,
        value=0,
        severity=StressLevel.STABLE,
        triggered=False,
        confidence=ConfidenceLevel.LOW,
        explanation='Insufficient data.',
        timestamp=timestamp
    )
