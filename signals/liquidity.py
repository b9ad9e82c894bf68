"""
Liquidity Fragility Signal

Detects when order book depth is withdrawn relative to its recent
baseline - the book thinning out ahead of a disorderly move.

Mechanism:
- Rolling baseline: mean total depth over the last 300 ticks
- Depth change: current depth vs baseline, in percent
- Only depth *loss* carries risk; a 40% drop saturates the score

Score: 0 (depth at or above baseline) → 100 (book collapsed)
"""

from market.tick import Tick
from .base import (
    SignalResult,
    SignalType,
    determine_confidence,
    get_severity,
    round_half_up,
)
from .rolling_window import RollingWindow


class LiquidityFragility:
    """
    Measures liquidity fragility from total book depth.

    High fragility indicates that resting liquidity is being pulled,
    so modest flow can move price disproportionately.
    """

    def __init__(
        self,
        window_size: int = 300,
        saturation_drop_pct: float = 40.0,
        trigger_threshold: float = 60.0,
        high_confidence_samples: int = 60,
        medium_confidence_samples: int = 20
    ):
        """
        Initialize liquidity fragility detector.

        Args:
            window_size: Depth samples retained for the baseline (default: 300)
            saturation_drop_pct: Depth drop (%) that maps to risk 100 (default: 40)
            trigger_threshold: Risk above which the signal triggers (default: 60)
            high_confidence_samples: Samples needed for HIGH confidence (default: 60)
            medium_confidence_samples: Samples needed for MEDIUM confidence (default: 20)
        """
        self.window = RollingWindow(window_size)
        self.saturation_drop_pct = saturation_drop_pct
        self.trigger_threshold = trigger_threshold
        self.high_confidence_samples = high_confidence_samples
        self.medium_confidence_samples = medium_confidence_samples

    def evaluate(self, tick: Tick) -> SignalResult:
        """
        Push the tick's depth and score it against the rolling baseline.

        Args:
            tick: Current market tick

        Returns:
            SignalResult for LIQUIDITY
        """
        self.window.push(tick.total_depth)
        baseline = self.window.mean()

        depth_change = 0.0 if baseline == 0 else (tick.total_depth - baseline) / baseline * 100

        if depth_change >= 0:
            risk = 0.0
        else:
            risk = min(100.0, (-depth_change / self.saturation_drop_pct) * 100)

        triggered = risk > self.trigger_threshold

        if triggered:
            explanation = f"Liquidity hole: {abs(depth_change):.1f}% below baseline."
        else:
            explanation = 'Depth within stable range.'

        return SignalResult(
            signal=SignalType.LIQUIDITY,
            value=round_half_up(risk),
            severity=get_severity(risk),
            triggered=triggered,
            confidence=determine_confidence(
                self.window.size(),
                self.high_confidence_samples,
                self.medium_confidence_samples
            ),
            explanation=explanation,
            timestamp=tick.processing_timestamp,
            raw_metrics={
                'Depth': f"{tick.total_depth:.1f}",
                'Δ Mean': f"{depth_change:.1f}%"
            }
        )

    def confidence_rationale(self) -> str:
        return f"{self.window.size()} depth samples (need ≥{self.high_confidence_samples} for HIGH)"

    def reset(self):
        self.window.clear()
