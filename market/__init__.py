"""
Market Data Model

Normalized tick snapshots consumed by the stress engine, plus a synthetic
tick generator for tests and demos. Live feed and replay adapters live
outside this package and only need to produce Tick values.
"""

from .tick import Tick, TradeStats, Trade, TradeSide, DataQuality
from .mock_generator import generate_mock_ticks, generate_stress_event_ticks

__all__ = [
    'Tick',
    'TradeStats',
    'Trade',
    'TradeSide',
    'DataQuality',
    'generate_mock_ticks',
    'generate_stress_event_ticks',
]
