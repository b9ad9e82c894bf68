"""
Unit tests for stress aggregation, level labeling and the decision trace.
"""

import pytest

from detector import DecisionTraceBuilder, StateLabeler, StressAggregator, fuse_confidence
from signals import ConfidenceLevel, SignalType, StressLevel


class TestStressAggregator:

    def test_all_quiet_from_zero(self, signals_factory):
        agg = StressAggregator().aggregate(signals_factory(), previous_score=0.0)

        assert agg.stress.raw_score == 0
        assert agg.shock_multiplier == 1.0
        assert agg.target_score == 0
        assert agg.smoothing_alpha == 0.15, "Ties decay with the slow alpha"
        assert agg.smoothed_score == 0
        assert agg.stress.score == 0
        assert agg.stress.level == StressLevel.STABLE

    def test_single_triggered_liquidity_signal(self, signals_factory):
        signals = signals_factory(liquidity=(80, True))
        agg = StressAggregator().aggregate(signals, previous_score=0.0)

        assert agg.stress.raw_score == pytest.approx(28.0)
        assert agg.stress.signals_aligned == 1
        assert agg.shock_multiplier == pytest.approx(1.08)
        assert agg.target_score == pytest.approx(30.24)
        assert agg.smoothing_alpha == 0.35
        assert agg.smoothed_score == pytest.approx(10.584)
        assert agg.stress.score == 11
        assert agg.stress.level == StressLevel.STABLE

    def test_decay_uses_slow_alpha(self, signals_factory):
        agg = StressAggregator().aggregate(signals_factory(), previous_score=80.0)

        assert agg.smoothing_alpha == 0.15
        assert agg.smoothed_score == pytest.approx(68.0)
        assert agg.stress.level == StressLevel.STRESSED

    def test_target_capped_at_100(self, signals_factory):
        signals = signals_factory(
            liquidity=(100, True), flow=(100, True), volatility=(100, True), forced_selling=(100, True)
        )
        agg = StressAggregator().aggregate(signals, previous_score=100.0)

        assert agg.shock_multiplier == pytest.approx(1.32)
        assert agg.target_score == 100
        assert agg.stress.score == 100
        assert agg.stress.level == StressLevel.CRITICAL

    def test_breakdown_and_color(self, signals_factory):
        agg = StressAggregator().aggregate(signals_factory(flow=(40, False)), previous_score=0.0)

        assert agg.stress.breakdown == {'liquidity': 0, 'flow': 40, 'volatility': 0, 'forced_selling': 0}
        assert agg.stress.color == StateLabeler.STATES[agg.stress.level]['color']

    def test_is_deterministic(self, signals_factory):
        aggregator = StressAggregator()
        builder = DecisionTraceBuilder()
        signals = signals_factory(liquidity=(70, True), flow=(30, False), volatility=(60, True))

        first = aggregator.aggregate(signals, previous_score=42.5)
        second = aggregator.aggregate(signals, previous_score=42.5)

        assert first == second
        assert builder.build(first, {}) == builder.build(second, {})

    @pytest.mark.parametrize("values", [
        (0, 0, 0, 0),
        (80, 0, 0, 0),
        (13, 57, 91, 4),
        (100, 100, 100, 100),
    ])
    def test_contributions_sum_to_raw_score(self, signals_factory, values):
        keys = ['liquidity', 'flow', 'volatility', 'forced_selling']
        signals = signals_factory(**{k: (v, v > 50) for k, v in zip(keys, values)})
        agg = StressAggregator().aggregate(signals, previous_score=10.0)

        total = sum(c.contribution for c in agg.contributions)
        assert total == pytest.approx(agg.stress.raw_score)
        if agg.stress.raw_score > 0:
            assert sum(c.pct_of_total for c in agg.contributions) == pytest.approx(100.0)
        else:
            assert all(c.pct_of_total == 0 for c in agg.contributions)

    def test_rejects_weights_not_summing_to_one(self):
        weights = {s: 0.3 for s in SignalType.all_signals()}
        with pytest.raises(ValueError, match="sum to 1.0"):
            StressAggregator(weights=weights)

    def test_rejects_incomplete_weight_table(self):
        with pytest.raises(ValueError, match="cover exactly"):
            StressAggregator(weights={SignalType.LIQUIDITY: 0.5, SignalType.FLOW: 0.5})

    def test_custom_weights(self, signals_factory):
        weights = {s: 0.25 for s in SignalType.all_signals()}
        agg = StressAggregator(weights=weights).aggregate(signals_factory(flow=(40, False)), 0.0)

        assert agg.stress.raw_score == pytest.approx(10.0)


class TestFusedConfidence:

    def test_all_high(self):
        assert fuse_confidence([ConfidenceLevel.HIGH] * 4) == ConfidenceLevel.HIGH

    def test_mixed(self):
        levels = [ConfidenceLevel.HIGH, ConfidenceLevel.HIGH, ConfidenceLevel.LOW, ConfidenceLevel.LOW]
        assert fuse_confidence(levels) == ConfidenceLevel.MEDIUM

    def test_boundary_is_exclusive(self):
        # average 2.5 is not above 2.5
        levels = [ConfidenceLevel.HIGH, ConfidenceLevel.HIGH, ConfidenceLevel.MEDIUM, ConfidenceLevel.MEDIUM]
        assert fuse_confidence(levels) == ConfidenceLevel.MEDIUM

    def test_points(self):
        assert [c.points for c in ConfidenceLevel] == [1, 2, 3]

    def test_mostly_low(self):
        levels = [ConfidenceLevel.MEDIUM, ConfidenceLevel.LOW, ConfidenceLevel.LOW, ConfidenceLevel.LOW]
        assert fuse_confidence(levels) == ConfidenceLevel.LOW


class TestStateLabeler:

    @pytest.mark.parametrize("score,expected", [
        (0, StressLevel.STABLE),
        (24.99, StressLevel.STABLE),
        (25, StressLevel.ELEVATED),
        (50, StressLevel.STRESSED),
        (75, StressLevel.UNSTABLE),
        (89.9, StressLevel.UNSTABLE),
        (90, StressLevel.CRITICAL),
    ])
    def test_classify(self, score, expected):
        assert StateLabeler().classify(score) == expected

    def test_rank_order(self):
        ranks = [level.rank for level in StressLevel]
        assert ranks == [0, 1, 2, 3, 4]

    def test_get_state_metadata(self):
        level, info = StateLabeler().get_state(80)

        assert level == StressLevel.UNSTABLE
        assert info['color'] == '#ef4444'

    def test_format_state_alert(self):
        labeler = StateLabeler()

        assert labeler.format_state_alert(92.4) == 'CRITICAL (92) - Critical instability'
        assert labeler.format_state_alert(10) == 'STABLE (10) - Calm market'

    def test_invalid_thresholds(self):
        with pytest.raises(ValueError):
            StateLabeler({'stable_max': 50, 'elevated_max': 40, 'stressed_max': 75, 'unstable_max': 90})


class TestDecisionTrace:

    def test_trace_mirrors_aggregation(self, signals_factory):
        agg = StressAggregator().aggregate(signals_factory(liquidity=(80, True)), previous_score=0.0)
        trace = DecisionTraceBuilder().build(agg, {SignalType.LIQUIDITY: '5 depth samples'})

        assert trace.raw_score == agg.stress.raw_score
        assert trace.signals_aligned == 1
        assert trace.shock_multiplier == agg.shock_multiplier
        assert trace.pre_smooth_score == agg.target_score
        assert trace.smoothing_alpha == 0.35
        assert trace.previous_score == 0.0
        assert trace.final_score == 11
        assert trace.confidence_reasons[SignalType.LIQUIDITY.value] == '5 depth samples'
        assert set(trace.confidence_reasons) == {s.value for s in SignalType.all_signals()}

    def test_narrative_names_dominant_signal(self, signals_factory):
        agg = StressAggregator().aggregate(
            signals_factory(flow=(90, True), liquidity=(20, False)), previous_score=0.0
        )
        narrative = DecisionTraceBuilder().narrate(agg)

        assert narrative.startswith('Dominant contributor: Order Flow Imbalance (25% weight × 90 raw = 22.5 pts')
        assert 'Shock multiplier 1.08× applied because 1 signal(s)' in narrative
        assert 'Stress is rising' in narrative
        assert 'fast-track' in narrative
        assert f"Final score: {agg.stress.score} ({agg.stress.level.value})" in narrative

    def test_narrative_without_triggers_or_rise(self, signals_factory):
        agg = StressAggregator().aggregate(signals_factory(), previous_score=20.0)
        narrative = DecisionTraceBuilder().narrate(agg)

        assert 'Shock multiplier' not in narrative
        assert 'Stress is falling' in narrative
        assert 'slow-decay' in narrative

    def test_dominant_tie_keeps_evaluation_order(self, signals_factory):
        agg = StressAggregator().aggregate(signals_factory(), previous_score=0.0)

        assert DecisionTraceBuilder.dominant(agg.contributions).signal == SignalType.LIQUIDITY
