"""
Composite Stress Score Aggregator

Combines the four signal results into a unified stress score (0 → 100).
This is the core output of the detector system.

Pipeline:
1. Weighted sum of signal values (raw score)
2. Shock multiplier for simultaneously triggered signals (target)
3. Asymmetric exponential smoothing against the previous score
4. Level classification and fused confidence
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from signals.base import ConfidenceLevel, SignalResult, SignalType, StressLevel, round_half_up
from .state_label import StateLabeler


@dataclass(frozen=True)
class WeightContribution:
    signal: SignalType
    weight: float
    raw_value: float
    contribution: float
    pct_of_total: float


@dataclass(frozen=True)
class StressScore:
    """Smoothed composite score for one tick."""

    score: int
    raw_score: float
    level: StressLevel
    color: str
    signals_aligned: int
    confidence: ConfidenceLevel
    timestamp: int
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class StressAggregation:
    """
    A stress score together with every intermediate value that produced it.

    ``smoothed_score`` is the unrounded score the engine carries forward
    as the next tick's previous score.
    """

    stress: StressScore
    contributions: List[WeightContribution]
    shock_multiplier: float
    target_score: float
    smoothing_alpha: float
    previous_score: float
    smoothed_score: float


class StressAggregator:
    """
    Calculates a composite market stress score from individual signals.

    Pure: the previous smoothed score is passed in and the new one is
    returned, so identical inputs always give identical output.
    """

    DEFAULT_WEIGHTS = {
        SignalType.LIQUIDITY: 0.35,
        SignalType.FLOW: 0.25,
        SignalType.VOLATILITY: 0.25,
        SignalType.FORCED_SELLING: 0.15,
    }

    def __init__(
        self,
        weights: Optional[Mapping[SignalType, float]] = None,
        shock_step: float = 0.08,
        escalation_alpha: float = 0.35,
        decay_alpha: float = 0.15,
        state_labeler: Optional[StateLabeler] = None
    ):
        """
        Initialize stress aggregator.

        Args:
            weights: Weight per signal; must cover every SignalType and sum to 1.0
            shock_step: Multiplier increment per triggered signal (default: 0.08)
            escalation_alpha: Smoothing alpha when the target rises (default: 0.35)
            decay_alpha: Smoothing alpha when the target falls or holds (default: 0.15)
            state_labeler: Level classifier (default: StateLabeler())
        """
        self.weights = dict(weights or self.DEFAULT_WEIGHTS)

        if set(self.weights) != set(SignalType.all_signals()):
            raise ValueError(
                f"Signal weights must cover exactly {[s.value for s in SignalType.all_signals()]}, "
                f"got {[getattr(s, 'value', s) for s in self.weights]}"
            )

        total_weight = sum(self.weights.values())
        if not np.isclose(total_weight, 1.0):
            raise ValueError(f"Signal weights must sum to 1.0, got {total_weight}")

        self.shock_step = shock_step
        self.escalation_alpha = escalation_alpha
        self.decay_alpha = decay_alpha
        self.state_labeler = state_labeler or StateLabeler()

    def aggregate(
        self,
        signals: Mapping[SignalType, SignalResult],
        previous_score: float,
        timestamp: Optional[int] = None
    ) -> StressAggregation:
        """
        Combine signal results into a smoothed stress score.

        Args:
            signals: One result per SignalType
            previous_score: Previous unrounded smoothed score
            timestamp: Score timestamp (default: latest signal timestamp)

        Returns:
            StressAggregation with the score and its intermediate values
        """
        ordered = [signals[s] for s in SignalType.all_signals()]

        raw_score = sum(r.value * self.weights[r.signal] for r in ordered)

        active_signals = sum(1 for r in ordered if r.triggered)
        shock_multiplier = 1.0 + self.shock_step * active_signals
        target = min(100.0, raw_score * shock_multiplier)

        # Escalate fast, decay slowly; ties decay
        alpha = self.escalation_alpha if target > previous_score else self.decay_alpha
        smoothed = alpha * target + (1 - alpha) * previous_score

        level = self.state_labeler.classify(smoothed)

        contributions = [
            WeightContribution(
                signal=r.signal,
                weight=self.weights[r.signal],
                raw_value=r.value,
                contribution=r.value * self.weights[r.signal],
                pct_of_total=(r.value * self.weights[r.signal]) / raw_score * 100 if raw_score > 0 else 0.0
            )
            for r in ordered
        ]

        if timestamp is None:
            timestamp = max(r.timestamp for r in ordered)

        stress = StressScore(
            score=round_half_up(smoothed),
            raw_score=raw_score,
            level=level,
            color=self.state_labeler.color(level),
            signals_aligned=active_signals,
            confidence=fuse_confidence(r.confidence for r in ordered),
            timestamp=timestamp,
            breakdown={r.signal.key: r.value for r in ordered}
        )

        return StressAggregation(
            stress=stress,
            contributions=contributions,
            shock_multiplier=shock_multiplier,
            target_score=target,
            smoothing_alpha=alpha,
            previous_score=previous_score,
            smoothed_score=smoothed
        )


def fuse_confidence(confidences) -> ConfidenceLevel:
    """
    Average per-signal confidence (LOW=1, MEDIUM=2, HIGH=3) into one level.

    Args:
        confidences: Iterable of ConfidenceLevel

    Returns:
        HIGH above 2.5, MEDIUM above 1.5, else LOW
    """
    points = [c.points for c in confidences]
    if not points:
        return ConfidenceLevel.LOW

    avg = sum(points) / len(points)
    if avg > 2.5:
        return ConfidenceLevel.HIGH
    elif avg > 1.5:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
