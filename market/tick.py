"""
Normalized Market Tick

Immutable snapshot of one instrument at a point in time, as produced by
the live feed adapter or the historical replay loader. The stress engine
only reads ticks; it never mutates or re-validates them beyond the
numeric guards in each signal.

All timestamps are epoch milliseconds.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple


class TradeSide(str, Enum):
    BUY = 'buy'
    SELL = 'sell'


class DataQuality(str, Enum):
    GOOD = 'GOOD'
    DEGRADED = 'DEGRADED'
    STALE = 'STALE'


@dataclass(frozen=True)
class Trade:
    """A single large (block) trade reported within a tick."""

    id: int
    price: float
    quantity: float
    timestamp: int
    side: TradeSide


@dataclass(frozen=True)
class TradeStats:
    """Aggregated trade activity since the previous tick."""

    buy_volume: float = 0.0
    sell_volume: float = 0.0
    buy_count: int = 0
    sell_count: int = 0
    large_trades: Tuple[Trade, ...] = ()

    @property
    def total_volume(self) -> float:
        return self.buy_volume + self.sell_volume

    @property
    def total_count(self) -> int:
        return self.buy_count + self.sell_count


@dataclass(frozen=True)
class Tick:
    """
    One normalized market snapshot.

    Numeric fields must be finite; upstream (feed or replay) is
    responsible for normalization.
    """

    exchange_timestamp: int
    received_timestamp: int
    processing_timestamp: int
    price: float
    mid_price: float
    spread: float
    spread_bps: float
    total_depth: float
    volume_24h: float
    trades: TradeStats = field(default_factory=TradeStats)
    bids: Tuple[Tuple[float, float], ...] = ()
    asks: Tuple[Tuple[float, float], ...] = ()
    is_valid: bool = True
    data_quality: DataQuality = DataQuality.GOOD

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'Tick':
        """
        Build a tick from a feed/replay payload.

        Args:
            payload: Mapping with the tick fields; ``trades`` is a nested
                mapping and ``large_trades`` a list of trade mappings.

        Returns:
            Tick

        Raises:
            KeyError: A required field is missing
            ValueError: A side or quality tag is not recognised
        """
        trades_raw = payload.get('trades') or {}
        large_trades = tuple(
            Trade(
                id=int(t['id']),
                price=float(t['price']),
                quantity=float(t['quantity']),
                timestamp=int(t['timestamp']),
                side=TradeSide(t['side'])
            )
            for t in trades_raw.get('large_trades', [])
        )
        trades = TradeStats(
            buy_volume=float(trades_raw.get('buy_volume', 0.0)),
            sell_volume=float(trades_raw.get('sell_volume', 0.0)),
            buy_count=int(trades_raw.get('buy_count', 0)),
            sell_count=int(trades_raw.get('sell_count', 0)),
            large_trades=large_trades
        )

        return cls(
            exchange_timestamp=int(payload['exchange_timestamp']),
            received_timestamp=int(payload['received_timestamp']),
            processing_timestamp=int(payload['processing_timestamp']),
            price=float(payload['price']),
            mid_price=float(payload['mid_price']),
            spread=float(payload['spread']),
            spread_bps=float(payload['spread_bps']),
            total_depth=float(payload['total_depth']),
            volume_24h=float(payload['volume_24h']),
            trades=trades,
            bids=_levels(payload.get('bids', [])),
            asks=_levels(payload.get('asks', [])),
            is_valid=bool(payload.get('is_valid', True)),
            data_quality=DataQuality(payload.get('data_quality', 'GOOD'))
        )


def _levels(raw: List) -> Tuple[Tuple[float, float], ...]:
    """Normalize [[price, size], ...] book levels to tuples of floats."""
    return tuple((float(price), float(size)) for price, size in raw)
