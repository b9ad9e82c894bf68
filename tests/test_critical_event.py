"""
Unit tests for critical event detection and the event log.
"""

import pytest

from detector import (
    CausalChain,
    CausalStep,
    CriticalEventDetector,
    CriticalEventLog,
    StepType,
    StressScore,
    UNKNOWN_CATALYST,
)
from signals import ConfidenceLevel, SignalType, StressLevel


def make_stress(score, level, aligned=0):
    return StressScore(
        score=score,
        raw_score=float(score),
        level=level,
        color='#000000',
        signals_aligned=aligned,
        confidence=ConfidenceLevel.MEDIUM,
        timestamp=0
    )


def make_chain(*signals):
    if not signals:
        return CausalChain.inactive()
    steps = [
        CausalStep(
            sequence_id=i + 1,
            type=StepType.CATALYST if i == 0 else StepType.AMPLIFIER,
            signal=s,
            description='',
            severity=StressLevel.STRESSED,
            timestamp=0
        )
        for i, s in enumerate(signals)
    ]
    return CausalChain(
        active=True,
        steps=steps,
        catalyst_id=signals[0],
        narrative=f"Event initiated by {signals[0].value}.",
        risk_assessment=''
    )


class TestCriticalEventDetector:

    def test_fires_once_on_escalation(self, tick_factory):
        detector = CriticalEventDetector()
        chain = make_chain(SignalType.LIQUIDITY, SignalType.FLOW)

        first = detector.detect(tick_factory(ts=1), make_stress(10, StressLevel.STABLE), CausalChain.inactive())
        second = detector.detect(tick_factory(ts=2, price=59000), make_stress(65, StressLevel.STRESSED, 2), chain)
        third = detector.detect(tick_factory(ts=3), make_stress(66, StressLevel.STRESSED, 2), chain)

        assert first is None
        assert second is not None
        assert third is None

        assert second.timestamp == 2
        assert second.price == 59000
        assert second.stress_score == 65
        assert second.level == StressLevel.STRESSED
        assert second.primary_factor == SignalType.LIQUIDITY
        assert second.signals == [SignalType.LIQUIDITY, SignalType.FLOW]
        assert second.narrative == chain.narrative

    def test_upgrade_below_stressed_does_not_fire(self, tick_factory):
        detector = CriticalEventDetector()

        assert detector.detect(tick_factory(), make_stress(30, StressLevel.ELEVATED), CausalChain.inactive()) is None

    def test_alignment_increase_above_60_fires(self, tick_factory):
        detector = CriticalEventDetector()
        detector.detect(tick_factory(ts=1), make_stress(62, StressLevel.STRESSED, 1), make_chain(SignalType.FLOW))
        event = detector.detect(
            tick_factory(ts=2),
            make_stress(63, StressLevel.STRESSED, 2),
            make_chain(SignalType.FLOW, SignalType.VOLATILITY)
        )

        assert event is not None
        assert event.primary_factor == SignalType.FLOW

    def test_alignment_increase_at_60_does_not_fire(self, tick_factory):
        detector = CriticalEventDetector()
        detector.detect(tick_factory(ts=1), make_stress(55, StressLevel.STRESSED, 1), make_chain(SignalType.FLOW))
        event = detector.detect(
            tick_factory(ts=2),
            make_stress(60, StressLevel.STRESSED, 2),
            make_chain(SignalType.FLOW, SignalType.VOLATILITY)
        )

        assert event is None

    def test_state_updates_every_tick(self, tick_factory):
        detector = CriticalEventDetector()
        detector.detect(tick_factory(ts=1), make_stress(80, StressLevel.UNSTABLE), CausalChain.inactive())
        detector.detect(tick_factory(ts=2), make_stress(40, StressLevel.ELEVATED), CausalChain.inactive())
        event = detector.detect(tick_factory(ts=3), make_stress(55, StressLevel.STRESSED), CausalChain.inactive())

        assert event is not None, "Rank rose from ELEVATED to STRESSED"
        assert event.primary_factor == UNKNOWN_CATALYST
        assert event.signals == []

    def test_ids_are_unique_per_engine(self, tick_factory):
        detector = CriticalEventDetector()
        ids = []
        for i in range(3):
            detector.reset()
            event = detector.detect(tick_factory(ts=5), make_stress(95, StressLevel.CRITICAL), CausalChain.inactive())
            ids.append(event.id)

        assert len(set(ids)) == 3
        assert ids[0] == 'forensic_5_1'


class TestCriticalEventLog:

    def test_newest_first_and_bounded(self, tick_factory):
        detector = CriticalEventDetector()
        log = CriticalEventLog(max_events=2)
        for ts in range(3):
            detector.reset()
            log.append(detector.detect(tick_factory(ts=ts), make_stress(95, StressLevel.CRITICAL), CausalChain.inactive()))

        assert len(log) == 2
        assert [e.timestamp for e in log.events()] == [2, 1]

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            CriticalEventLog(max_events=0)
