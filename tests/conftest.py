"""
Shared fixtures for stress engine tests.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from market.tick import Tick, Trade, TradeSide, TradeStats
from signals.base import ConfidenceLevel, SignalResult, SignalType, get_severity


def make_tick(
    ts: int = 1_700_000_000_000,
    price: float = 60000.0,
    depth: float = 50.0,
    buy_volume: float = 1.0,
    sell_volume: float = 1.0,
    buy_count: int = 20,
    sell_count: int = 20,
    large_sells=()
) -> Tick:
    large_trades = tuple(
        Trade(id=ts + i, price=price, quantity=q, timestamp=ts, side=TradeSide.SELL)
        for i, q in enumerate(large_sells)
    )
    return Tick(
        exchange_timestamp=ts,
        received_timestamp=ts,
        processing_timestamp=ts,
        price=price,
        mid_price=price,
        spread=6.0,
        spread_bps=1.0,
        total_depth=depth,
        volume_24h=250000.0,
        trades=TradeStats(
            buy_volume=buy_volume,
            sell_volume=sell_volume,
            buy_count=buy_count,
            sell_count=sell_count,
            large_trades=large_trades
        )
    )


def make_signal(
    signal: SignalType,
    value: float = 0,
    triggered: bool = False,
    confidence: ConfidenceLevel = ConfidenceLevel.LOW,
    ts: int = 1000
) -> SignalResult:
    return SignalResult(
        signal=signal,
        value=value,
        severity=get_severity(value),
        triggered=triggered,
        confidence=confidence,
        explanation=f"{signal.value} test",
        timestamp=ts
    )


def make_signals(**overrides) -> dict:
    """
    Build a full signal map; overrides are keyed by SignalType.key and hold
    (value, triggered) tuples.
    """
    signals = {}
    for signal in SignalType.all_signals():
        value, triggered = overrides.get(signal.key, (0, False))
        signals[signal] = make_signal(signal, value, triggered)
    return signals


@pytest.fixture
def tick_factory():
    return make_tick


@pytest.fixture
def signals_factory():
    return make_signals
