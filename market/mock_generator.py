"""
Mock Tick Generator

Generates a synthetic normalized tick stream for testing and demos when
no live feed or replay data is available.
"""

import pandas as pd
import numpy as np
from typing import List

from .tick import Tick, Trade, TradeSide, TradeStats


def generate_mock_ticks(
    start: str = '2024-01-01',
    ticks: int = 600,
    base_price: float = 60000,
    base_depth: float = 50.0,
    volatility: float = 0.0002,
    interval_ms: int = 1000,
    seed: int = 42
) -> List[Tick]:
    """
    Generate a calm, balanced tick stream.

    Args:
        start: Start date (YYYY-MM-DD)
        ticks: Number of ticks to generate
        base_price: Starting price
        base_depth: Mean total book depth
        volatility: Per-tick return volatility
        interval_ms: Spacing between ticks in milliseconds
        seed: Random seed for reproducibility

    Returns:
        List of Tick
    """
    rng = np.random.RandomState(seed)

    returns = rng.normal(0.0, volatility, ticks)
    prices = base_price * np.cumprod(1 + returns)
    depths = base_depth * (1 + rng.normal(0.0, 0.03, ticks))
    buy_volumes = rng.uniform(0.8, 1.6, ticks)
    sell_volumes = rng.uniform(0.8, 1.6, ticks)

    timestamps = pd.date_range(start=start, periods=ticks, freq=pd.Timedelta(milliseconds=interval_ms))

    return [
        _make_tick(
            timestamp_ms=int(ts.value // 1_000_000),
            price=float(prices[i]),
            depth=float(depths[i]),
            buy_volume=float(buy_volumes[i]),
            sell_volume=float(sell_volumes[i]),
            large_sells=[]
        )
        for i, ts in enumerate(timestamps)
    ]


def generate_stress_event_ticks(
    start: str = '2024-01-15',
    event_tick: int = 400,
    event_length: int = 60,
    ticks: int = 600,
    base_price: float = 60000
) -> List[Tick]:
    """
    Generate a tick stream containing a simulated sell-off.

    The stress event has:
    - Liquidity withdrawal (book depth collapses)
    - Aggressive one-sided selling with block sells
    - Sharp, choppy price drop
    - Recovery after the event

    Args:
        start: Start date
        event_tick: Index of the first stressed tick
        event_length: Number of stressed ticks
        ticks: Total ticks
        base_price: Starting price

    Returns:
        List of Tick with the stress episode embedded
    """
    calm = generate_mock_ticks(start, ticks, base_price, seed=123)
    rng = np.random.RandomState(7)

    out: List[Tick] = []
    price = base_price
    event_end = event_tick + event_length

    for i, tick in enumerate(calm):
        if i < event_tick:
            out.append(tick)
            price = tick.price
            continue

        if i < event_end:
            # Sell-off: thin book, sell-dominated flow, block sells, wide swings
            progress = (i - event_tick + 1) / event_length
            price = price * (1 - 0.002 * progress + rng.normal(0.0, 0.003))
            depth = tick.total_depth * max(0.15, 1.0 - 0.85 * progress)
            buy_volume = rng.uniform(0.1, 0.4)
            sell_volume = rng.uniform(2.5, 5.0)
            large_sells = [rng.uniform(2.0, 6.0)]
        else:
            # Recovery
            price = price * (1 + 0.0004 + rng.normal(0.0, 0.0002))
            depth = tick.total_depth
            buy_volume = tick.trades.buy_volume
            sell_volume = tick.trades.sell_volume
            large_sells = []

        out.append(_make_tick(
            timestamp_ms=tick.exchange_timestamp,
            price=price,
            depth=depth,
            buy_volume=buy_volume,
            sell_volume=sell_volume,
            large_sells=large_sells
        ))

    return out


def _make_tick(
    timestamp_ms: int,
    price: float,
    depth: float,
    buy_volume: float,
    sell_volume: float,
    large_sells: List[float]
) -> Tick:
    spread_bps = 1.0
    spread = price * spread_bps / 10000
    large_trades = tuple(
        Trade(id=timestamp_ms + n, price=price, quantity=qty, timestamp=timestamp_ms, side=TradeSide.SELL)
        for n, qty in enumerate(large_sells)
    )

    return Tick(
        exchange_timestamp=timestamp_ms,
        received_timestamp=timestamp_ms,
        processing_timestamp=timestamp_ms,
        price=price,
        mid_price=price,
        spread=spread,
        spread_bps=spread_bps,
        total_depth=max(depth, 0.1),
        volume_24h=250000.0,
        trades=TradeStats(
            buy_volume=buy_volume,
            sell_volume=sell_volume,
            buy_count=int(round(buy_volume * 14)),
            sell_count=int(round(sell_volume * 14)),
            large_trades=large_trades
        ),
        bids=((price - spread / 2, depth / 2),),
        asks=((price + spread / 2, depth / 2),)
    )


if __name__ == "__main__":
    stream = generate_stress_event_ticks()

    print(f"Generated {len(stream)} ticks")
    prices = [t.price for t in stream]
    print(f"Price range: ${min(prices):.2f} - ${max(prices):.2f}")
    print(f"Min depth: {min(t.total_depth for t in stream):.2f}")
