"""
Market Stress Detector

Combines individual signals into a composite stress score, explains it
with a causal chain and decision trace, and flags critical escalations.
"""

from .state_label import StateLabeler
from .stress_score import StressAggregator, StressAggregation, StressScore, WeightContribution, fuse_confidence
from .causal_chain import CausalChainTracker, CausalChain, CausalStep, StepType
from .critical_event import CriticalEventDetector, CriticalEvent, CriticalEventLog, UNKNOWN_CATALYST
from .decision_trace import DecisionTraceBuilder, DecisionTrace
from .engine import StressEngine, TickResult

__all__ = [
    'StateLabeler',
    'StressAggregator',
    'StressAggregation',
    'StressScore',
    'WeightContribution',
    'fuse_confidence',
    'CausalChainTracker',
    'CausalChain',
    'CausalStep',
    'StepType',
    'CriticalEventDetector',
    'CriticalEvent',
    'CriticalEventLog',
    'UNKNOWN_CATALYST',
    'DecisionTraceBuilder',
    'DecisionTrace',
    'StressEngine',
    'TickResult',
]
