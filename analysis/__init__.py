"""
Session Analysis

Batch helpers that drive the stress engine over a tick sequence and
summarize the resulting timeline. These are analysis products only; they
do not alter scoring.
"""

from .session import run_session, find_high_stress_periods, level_summary, detect_level_transitions

__all__ = [
    'run_session',
    'find_high_stress_periods',
    'level_summary',
    'detect_level_transitions',
]
