"""
Causal Chain Tracker

Explains *why* the stress score is where it is by recording the order in
which signals first triggered.

The first surviving trigger is the catalyst. Later triggers are
amplifiers, or systemic steps while the composite score is above the
systemic threshold. Classification is recomputed every tick, so a step
can move between AMPLIFIER and SYSTEMIC as the score crosses the line.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional

from signals.base import SignalResult, SignalType, StressLevel


class StepType(str, Enum):
    CATALYST = 'CATALYST'
    AMPLIFIER = 'AMPLIFIER'
    SYSTEMIC = 'SYSTEMIC'


@dataclass(frozen=True)
class CausalStep:
    sequence_id: int
    type: StepType
    signal: SignalType
    description: str
    severity: StressLevel
    timestamp: int


@dataclass(frozen=True)
class CausalChain:
    active: bool
    steps: List[CausalStep] = field(default_factory=list)
    catalyst_id: Optional[SignalType] = None
    narrative: str = ''
    risk_assessment: str = ''

    @classmethod
    def inactive(cls) -> 'CausalChain':
        return cls(active=False)


@dataclass(frozen=True)
class _Trigger:
    signal: SignalType
    timestamp: int
    initial_value: float


class CausalChainTracker:
    """
    Stateful tracker of first-trigger order across ticks.

    Entries are appended when a signal first triggers and dropped when it
    stops triggering; survivors keep their relative order. When nothing
    is triggered the history is discarded, so a later re-trigger starts
    fresh.
    """

    def __init__(self, systemic_threshold: float = 70.0):
        self.systemic_threshold = systemic_threshold
        self._triggers: List[_Trigger] = []

    def update(self, signals: Mapping[SignalType, SignalResult], score: float) -> CausalChain:
        """
        Fold this tick's triggered set into the history and build the chain.

        Args:
            signals: One result per SignalType
            score: Current rounded composite score

        Returns:
            CausalChain for this tick
        """
        active = [signals[s] for s in SignalType.all_signals() if signals[s].triggered]

        if not active:
            self._triggers = []
            return CausalChain.inactive()

        known = {t.signal for t in self._triggers}
        for result in active:
            if result.signal not in known:
                self._triggers.append(_Trigger(result.signal, result.timestamp, result.value))

        self._triggers = [t for t in self._triggers if signals[t.signal].triggered]

        steps = []
        for index, trigger in enumerate(self._triggers):
            if index == 0:
                step_type = StepType.CATALYST
            elif score > self.systemic_threshold:
                step_type = StepType.SYSTEMIC
            else:
                step_type = StepType.AMPLIFIER

            result = signals[trigger.signal]
            steps.append(CausalStep(
                sequence_id=index + 1,
                type=step_type,
                signal=trigger.signal,
                description=result.explanation,
                severity=result.severity,
                timestamp=trigger.timestamp
            ))

        return CausalChain(
            active=True,
            steps=steps,
            catalyst_id=self._triggers[0].signal,
            narrative=generate_narrative(steps),
            risk_assessment=assess_risk(score)
        )

    @property
    def catalyst(self) -> Optional[SignalType]:
        return self._triggers[0].signal if self._triggers else None

    def reset(self):
        self._triggers = []


def generate_narrative(steps: List[CausalStep]) -> str:
    if not steps:
        return ''

    catalyst = steps[0].signal.value
    if len(steps) == 1:
        return f"Event initiated by {catalyst}."

    if any(s.type == StepType.SYSTEMIC for s in steps):
        return (
            f"Systemic breakdown initiated by {catalyst}, "
            f"now exacerbated by {len(steps) - 1} secondary amplifiers."
        )
    return f"Tension detected in {catalyst}, causing feedback in {steps[-1].signal.value}."


def assess_risk(score: float) -> str:
    if score > 80:
        return 'CRITICAL: Structural failure imminent.'
    elif score > 60:
        return 'UNSTABLE: Corrective action likely insufficient.'
    return 'ELEVATED: Monitoring catalyst propagation.'
