"""
Forced Selling Signal

Detects block-sized sell trades within a tick - liquidations and
stop-outs hitting the book in size.

Score: 0 (no large sells) → 100 (5 or more units sold in blocks)
"""

from market.tick import Tick, TradeSide
from .base import (
    SignalResult,
    SignalType,
    determine_confidence,
    get_severity,
    round_half_up,
)


class ForcedSelling:
    """Scores the total quantity of large sell trades in the tick."""

    def __init__(
        self,
        saturation_quantity: float = 5.0,
        trigger_threshold: float = 45.0,
        high_confidence_trades: int = 50,
        medium_confidence_trades: int = 10
    ):
        self.saturation_quantity = saturation_quantity
        self.trigger_threshold = trigger_threshold
        self.high_confidence_trades = high_confidence_trades
        self.medium_confidence_trades = medium_confidence_trades

    def evaluate(self, tick: Tick) -> SignalResult:
        """
        Sum large sell quantities and score them against the saturation level.

        Args:
            tick: Current market tick

        Returns:
            SignalResult for FORCED_SELLING
        """
        large_sells = [t for t in tick.trades.large_trades if t.side == TradeSide.SELL]
        total_large_volume = sum(t.quantity for t in large_sells)
        risk = min(100.0, (total_large_volume / self.saturation_quantity) * 100)
        triggered = risk > self.trigger_threshold

        if triggered:
            explanation = f"Large seller active: {total_large_volume:.1f} units sold in blocks."
        else:
            explanation = 'No significant whale selling detected.'

        total_trades = tick.trades.buy_count + tick.trades.sell_count

        return SignalResult(
            signal=SignalType.FORCED_SELLING,
            value=round_half_up(risk),
            severity=get_severity(risk),
            triggered=triggered,
            confidence=determine_confidence(
                total_trades,
                self.high_confidence_trades,
                self.medium_confidence_trades
            ),
            explanation=explanation,
            timestamp=tick.processing_timestamp,
            raw_metrics={
                'Whale Vol': f"{total_large_volume:.1f}",
                'Count': len(large_sells)
            }
        )

    def confidence_rationale(self) -> str:
        """Explain the trade-count threshold needed for HIGH confidence."""
        return f"Based on trade frequency — need ≥{self.high_confidence_trades} trades for HIGH"
