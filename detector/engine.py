"""
Stress Engine

Per-tick pipeline: evaluate signals → aggregate stress (+ trace) →
causal chain → critical event.

An engine instance owns all cross-tick state (signal windows, previous
smoothed score, trigger history, previous level/alignment). It is a
synchronous single-writer state machine: ``process_tick`` and ``reset``
must not run concurrently on the same instance. Use one engine per
stream, or serialize access externally.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from market.tick import Tick
from signals import (
    ForcedSelling,
    LiquidityFragility,
    OrderFlowImbalance,
    RollingWindow,
    SignalResult,
    SignalType,
    VolatilityRegimeShift,
)
from .causal_chain import CausalChain, CausalChainTracker
from .critical_event import CriticalEvent, CriticalEventDetector
from .decision_trace import DecisionTrace, DecisionTraceBuilder
from .stress_score import StressAggregator, StressScore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    signals: Dict[SignalType, SignalResult]
    stress: StressScore
    causal: CausalChain
    critical_event: Optional[CriticalEvent]
    trace: DecisionTrace


class StressEngine:
    """
    Stateful microstructure stress engine for a single instrument.

    Example:
        engine = StressEngine()
        for tick in feed:
            result = engine.process_tick(tick)
            if result.critical_event:
                log.append(result.critical_event)
    """

    VOLUME_WINDOW = 60

    def __init__(
        self,
        aggregator: Optional[StressAggregator] = None,
        causal_tracker: Optional[CausalChainTracker] = None,
        event_detector: Optional[CriticalEventDetector] = None,
        trace_builder: Optional[DecisionTraceBuilder] = None
    ):
        self.liquidity = LiquidityFragility()
        self.flow = OrderFlowImbalance()
        self.volatility = VolatilityRegimeShift()
        self.forced_selling = ForcedSelling()
        self.volume_window = RollingWindow(self.VOLUME_WINDOW)

        self.aggregator = aggregator or StressAggregator()
        self.causal_tracker = causal_tracker or CausalChainTracker()
        self.event_detector = event_detector or CriticalEventDetector()
        self.trace_builder = trace_builder or DecisionTraceBuilder()

        self._previous_score = 0.0
        self._last_trace: Optional[DecisionTrace] = None

    def process_tick(self, tick: Tick) -> TickResult:
        """
        Score one tick and advance engine state.

        Args:
            tick: Normalized market tick

        Returns:
            TickResult bundle for this tick
        """
        self.volume_window.push(tick.trades.total_volume)

        signals = {
            SignalType.LIQUIDITY: self.liquidity.evaluate(tick),
            SignalType.FLOW: self.flow.evaluate(tick),
            SignalType.VOLATILITY: self.volatility.evaluate(tick),
            SignalType.FORCED_SELLING: self.forced_selling.evaluate(tick),
        }

        aggregation = self.aggregator.aggregate(signals, self._previous_score, tick.processing_timestamp)
        trace = self.trace_builder.build(aggregation, self._confidence_reasons())

        self._previous_score = aggregation.smoothed_score
        self._last_trace = trace

        stress = aggregation.stress
        causal = self.causal_tracker.update(signals, stress.score)
        critical_event = self.event_detector.detect(tick, stress, causal)

        logger.debug(
            "tick %d: raw=%.2f target=%.2f alpha=%.2f score=%d level=%s aligned=%d",
            tick.processing_timestamp,
            stress.raw_score,
            aggregation.target_score,
            aggregation.smoothing_alpha,
            stress.score,
            stress.level.value,
            stress.signals_aligned
        )

        return TickResult(
            signals=signals,
            stress=stress,
            causal=causal,
            critical_event=critical_event,
            trace=trace
        )

    def reset(self):
        """Clear all market state, e.g. when switching between live and replay."""
        self.liquidity.reset()
        self.volatility.reset()
        self.volume_window.clear()
        self.causal_tracker.reset()
        self.event_detector.reset()
        self._previous_score = 0.0
        self._last_trace = None
        logger.info("Stress engine reset")

    @property
    def last_trace(self) -> Optional[DecisionTrace]:
        return self._last_trace

    @property
    def previous_score(self) -> float:
        return self._previous_score

    def _confidence_reasons(self) -> Dict[SignalType, str]:
        return {
            SignalType.LIQUIDITY: self.liquidity.confidence_rationale(),
            SignalType.FLOW: self.flow.confidence_rationale(self.volume_window.mean()),
            SignalType.VOLATILITY: self.volatility.confidence_rationale(),
            SignalType.FORCED_SELLING: self.forced_selling.confidence_rationale(),
        }
