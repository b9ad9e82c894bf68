"""
Order Flow Imbalance Signal

Measures how one-sided aggressive trading is within a single tick.
Only sell-side dominance carries risk.

Score: 0 (balanced or buy-dominated) → 100 (all volume sold)
"""

from market.tick import Tick
from .base import (
    SignalResult,
    SignalType,
    default_signal,
    determine_confidence,
    get_severity,
    round_half_up,
)


class OrderFlowImbalance:
    """
    Scores the sell share of the tick's aggressive volume.

    Stateless across ticks.
    """

    def __init__(
        self,
        trigger_threshold: float = 65.0,
        high_confidence_volume: float = 2.0,
        medium_confidence_volume: float = 0.5
    ):
        self.trigger_threshold = trigger_threshold
        self.high_confidence_volume = high_confidence_volume
        self.medium_confidence_volume = medium_confidence_volume

    def evaluate(self, tick: Tick) -> SignalResult:
        """
        Score the sell share of this tick's aggressive volume.

        Args:
            tick: Current market tick

        Returns:
            SignalResult for FLOW (default signal when there is no volume)
        """
        total_volume = tick.trades.buy_volume + tick.trades.sell_volume
        if total_volume == 0:
            return default_signal(SignalType.FLOW, tick.processing_timestamp)

        sell_ratio = tick.trades.sell_volume / total_volume
        risk = max(0.0, (sell_ratio - 0.5) * 200)
        triggered = risk > self.trigger_threshold

        # All-sell ticks would divide by zero; floor the buy share
        buy_ratio = (1 - sell_ratio) or 0.01

        return SignalResult(
            signal=SignalType.FLOW,
            value=round_half_up(risk),
            severity=get_severity(risk),
            triggered=triggered,
            confidence=determine_confidence(
                total_volume,
                self.high_confidence_volume,
                self.medium_confidence_volume
            ),
            explanation='Aggressive market selling detected.' if triggered else 'Transaction flow is balanced.',
            timestamp=tick.processing_timestamp,
            raw_metrics={
                'Sell %': f"{sell_ratio * 100:.1f}%",
                'Imbalance': f"{sell_ratio / buy_ratio:.2f}"
            }
        )

    def confidence_rationale(self, mean_volume: float = 0.0) -> str:
        """
        Explain the confidence thresholds for the trace.

        Args:
            mean_volume: Recent mean per-tick trade volume

        Returns:
            Rationale string
        """
        return (
            f"Based on volume density — need ≥{self.high_confidence_volume} per tick for HIGH "
            f"(recent mean {mean_volume:.2f})"
        )
