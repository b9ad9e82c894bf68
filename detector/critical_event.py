"""
Critical Event Detection

Emits a discrete notification when stress severity or signal alignment
escalates, and keeps a bounded log of emitted events for callers.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Union

from market.tick import Tick
from signals.base import SignalType, StressLevel
from .causal_chain import CausalChain
from .stress_score import StressScore

logger = logging.getLogger(__name__)

UNKNOWN_CATALYST = 'Unknown Catalyst'


@dataclass(frozen=True)
class CriticalEvent:
    id: str
    timestamp: int
    price: float
    stress_score: int
    level: StressLevel
    primary_factor: Union[SignalType, str]
    narrative: str
    signals: List[SignalType] = field(default_factory=list)


class CriticalEventDetector:
    """
    Fires when either:
    - the level's rank strictly increases and reaches at least STRESSED, or
    - the aligned-signal count increases while the score is above 60.

    Previous level and alignment are updated on every tick.
    """

    def __init__(self, min_level: StressLevel = StressLevel.STRESSED, alignment_score: float = 60.0):
        self.min_level = min_level
        self.alignment_score = alignment_score
        self._previous_level = StressLevel.STABLE
        self._previous_aligned = 0
        self._sequence = 0

    def detect(self, tick: Tick, stress: StressScore, causal: CausalChain) -> Optional[CriticalEvent]:
        """
        Compare this tick's stress against the previous tick's.

        Args:
            tick: Current market tick
            stress: Current stress score
            causal: Current causal chain

        Returns:
            CriticalEvent if escalation occurred, else None
        """
        level_upgrade = (
            stress.level.rank > self._previous_level.rank
            and stress.level.rank >= self.min_level.rank
        )
        alignment_increase = (
            stress.signals_aligned > self._previous_aligned
            and stress.score > self.alignment_score
        )

        self._previous_level = stress.level
        self._previous_aligned = stress.signals_aligned

        if not (level_upgrade or alignment_increase):
            return None

        self._sequence += 1
        event = CriticalEvent(
            id=f"forensic_{tick.exchange_timestamp}_{self._sequence}",
            timestamp=tick.exchange_timestamp,
            price=tick.price,
            stress_score=stress.score,
            level=stress.level,
            primary_factor=causal.catalyst_id or UNKNOWN_CATALYST,
            narrative=causal.narrative,
            signals=[s.signal for s in causal.steps]
        )

        logger.warning(
            "Critical event %s: %s (score %d) led by %s",
            event.id,
            event.level.value,
            event.stress_score,
            getattr(event.primary_factor, 'value', event.primary_factor)
        )
        return event

    def reset(self):
        """Forget previous level and alignment; the id sequence keeps counting."""
        self._previous_level = StressLevel.STABLE
        self._previous_aligned = 0


class CriticalEventLog:
    """Bounded newest-first log of critical events."""

    def __init__(self, max_events: int = 100):
        if max_events < 1:
            raise ValueError(f"max_events must be positive, got {max_events}")
        self._events: Deque[CriticalEvent] = deque(maxlen=max_events)

    def append(self, event: CriticalEvent):
        self._events.appendleft(event)

    def events(self) -> List[CriticalEvent]:
        return list(self._events)

    def clear(self):
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
