"""
Market Stress Signals

This module contains the rolling window utility and the four independent
signal evaluators that measure different aspects of microstructure stress.
"""

from .rolling_window import RollingWindow
from .base import (
    SignalType,
    StressLevel,
    ConfidenceLevel,
    SignalResult,
    get_severity,
    determine_confidence,
    default_signal,
)
from .liquidity import LiquidityFragility
from .flow import OrderFlowImbalance
from .volatility import VolatilityRegimeShift
from .forced_selling import ForcedSelling

__all__ = [
    'RollingWindow',
    'SignalType',
    'StressLevel',
    'ConfidenceLevel',
    'SignalResult',
    'get_severity',
    'determine_confidence',
    'default_signal',
    'LiquidityFragility',
    'OrderFlowImbalance',
    'VolatilityRegimeShift',
    'ForcedSelling',
]
