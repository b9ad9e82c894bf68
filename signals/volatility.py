"""
Volatility Regime Shift Signal

Detects when short-term price dispersion breaks out of the longer
regime - the shift from orderly trading to disorderly repricing.

Mechanism:
- Short-term volatility: population std of the last 10 prices
- Long-term volatility: population std of the full 300-tick window
- Ratio above 1 means the recent regime is wider than the baseline

Score: 0 (short ≤ long) → 100 (short-term std three times the long-term)
"""

import numpy as np

from market.tick import Tick
from .base import (
    SignalResult,
    SignalType,
    default_signal,
    determine_confidence,
    get_severity,
    round_half_up,
)
from .rolling_window import RollingWindow


class VolatilityRegimeShift:
    """
    Compares short-window to long-window price volatility.

    Requires ``min_samples`` prices before it produces a score.
    """

    def __init__(
        self,
        window_size: int = 300,
        short_period: int = 10,
        min_samples: int = 20,
        trigger_threshold: float = 55.0,
        high_confidence_samples: int = 50,
        medium_confidence_samples: int = 30
    ):
        """
        Initialize volatility regime detector.

        Args:
            window_size: Price samples retained for the long regime (default: 300)
            short_period: Prices in the short regime (default: 10)
            min_samples: Prices required before scoring (default: 20)
            trigger_threshold: Risk above which the signal triggers (default: 55)
            high_confidence_samples: Samples needed for HIGH confidence (default: 50)
            medium_confidence_samples: Samples needed for MEDIUM confidence (default: 30)
        """
        self.window = RollingWindow(window_size)
        self.short_period = short_period
        self.min_samples = min_samples
        self.trigger_threshold = trigger_threshold
        self.high_confidence_samples = high_confidence_samples
        self.medium_confidence_samples = medium_confidence_samples

    def evaluate(self, tick: Tick) -> SignalResult:
        self.window.push(tick.price)
        if self.window.size() < self.min_samples:
            return default_signal(SignalType.VOLATILITY, tick.processing_timestamp)

        std_short = float(np.std(self.window.get_last(self.short_period)))
        # A flat long regime would divide by zero
        std_long = self.window.standard_deviation() or 1.0

        ratio = std_short / std_long
        risk = float(np.clip((ratio - 1) * 50, 0, 100))
        triggered = risk > self.trigger_threshold

        if triggered:
            explanation = 'Price instability detected via volatility expansion.'
        else:
            explanation = 'Price volatility within regime bounds.'

        return SignalResult(
            signal=SignalType.VOLATILITY,
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
                'Vol Ratio': f"{ratio:.2f}",
                'Price Std': f"{std_short:.2f}"
            }
        )

    def confidence_rationale(self) -> str:
        return f"{self.window.size()} price ticks (need ≥{self.high_confidence_samples} for HIGH)"

    def reset(self):
        self.window.clear()
