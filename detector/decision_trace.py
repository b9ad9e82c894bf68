"""
Decision Trace Builder

Read-only projection of a stress aggregation into an audit record: the
weight contributions, multiplier, smoothing parameters and a narrative
naming the dominant signal. Nothing here feeds back into scoring.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from signals.base import SignalType
from .stress_score import StressAggregation, WeightContribution


@dataclass(frozen=True)
class DecisionTrace:
    weight_contributions: List[WeightContribution]
    raw_score: float
    signals_aligned: int
    shock_multiplier: float
    pre_smooth_score: float
    smoothing_alpha: float
    previous_score: float
    final_score: int
    audit_narrative: str
    timestamp: int
    confidence_reasons: Dict[str, str] = field(default_factory=dict)


class DecisionTraceBuilder:

    def build(
        self,
        aggregation: StressAggregation,
        confidence_reasons: Mapping[SignalType, str]
    ) -> DecisionTrace:
        """
        Assemble the trace for one aggregation.

        Args:
            aggregation: Output of StressAggregator.aggregate
            confidence_reasons: Rationale string per signal

        Returns:
            DecisionTrace
        """
        stress = aggregation.stress

        return DecisionTrace(
            weight_contributions=list(aggregation.contributions),
            raw_score=stress.raw_score,
            signals_aligned=stress.signals_aligned,
            shock_multiplier=aggregation.shock_multiplier,
            pre_smooth_score=aggregation.target_score,
            smoothing_alpha=aggregation.smoothing_alpha,
            previous_score=aggregation.previous_score,
            final_score=stress.score,
            audit_narrative=self.narrate(aggregation),
            timestamp=stress.timestamp,
            confidence_reasons={s.value: confidence_reasons.get(s, '') for s in SignalType.all_signals()}
        )

    @staticmethod
    def dominant(contributions: List[WeightContribution]) -> WeightContribution:
        """Largest contribution; ties resolve to evaluation order."""
        return sorted(contributions, key=lambda c: c.contribution, reverse=True)[0]

    def narrate(self, aggregation: StressAggregation) -> str:
        stress = aggregation.stress
        top = self.dominant(aggregation.contributions)

        parts = [
            f"Dominant contributor: {top.signal.value} ({top.weight * 100:.0f}% weight × "
            f"{top.raw_value} raw = {top.contribution:.1f} pts, "
            f"{top.pct_of_total:.1f}% of raw score).",
            f"Raw weighted score: {stress.raw_score:.1f} pts."
        ]

        if stress.signals_aligned > 0:
            parts.append(
                f"Shock multiplier {aggregation.shock_multiplier:.2f}× applied because "
                f"{stress.signals_aligned} signal(s) triggered simultaneously, "
                f"elevating score to {aggregation.target_score:.1f}."
            )

        rising = aggregation.target_score > aggregation.previous_score
        if rising:
            rationale = 'fast-track — system escalates quickly'
        else:
            rationale = 'slow-decay — system de-escalates conservatively'
        parts.append(
            f"Stress is {'rising' if rising else 'falling'}, so adaptive smoothing "
            f"alpha = {aggregation.smoothing_alpha} ({rationale})."
        )

        parts.append(
            f"Final score: {stress.score} ({stress.level.value}). "
            f"System confidence: {stress.confidence.value}."
        )

        return ' '.join(parts)
