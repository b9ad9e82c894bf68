"""
Session Analysis

Runs the stress engine over a finite tick sequence (a replay or a
recorded session) and summarizes the resulting stress timeline.
"""

import pandas as pd
from typing import Iterable, List, Optional, Tuple

from detector import CriticalEvent, StateLabeler, StressEngine
from market.tick import Tick
from signals.base import SignalType

SESSION_COLUMNS = [
    'timestamp',
    'price',
    'raw_score',
    'target_score',
    'smoothing_alpha',
    'score',
    'level',
    'signals_aligned',
    'confidence',
    'catalyst',
    'critical_event',
]

def run_session(
    ticks: Iterable[Tick],
    engine: Optional[StressEngine] = None
) -> Tuple[pd.DataFrame, List[CriticalEvent]]:
    """
    Process ticks in order and collect one row per tick.

    Args:
        ticks: Tick sequence in chronological order
        engine: Engine to drive (default: a fresh StressEngine)

    Returns:
        Tuple of (per-tick DataFrame, critical events in emission order)
    """
    engine = engine or StressEngine()

    rows = []
    events = []
    for tick in ticks:
        result = engine.process_tick(tick)
        stress = result.stress

        row = {
            'timestamp': tick.exchange_timestamp,
            'price': tick.price,
            'raw_score': stress.raw_score,
            'target_score': result.trace.pre_smooth_score,
            'smoothing_alpha': result.trace.smoothing_alpha,
            'score': stress.score,
            'level': stress.level.value,
            'signals_aligned': stress.signals_aligned,
            'confidence': stress.confidence.value,
            'catalyst': result.causal.catalyst_id.value if result.causal.catalyst_id else None,
            'critical_event': result.critical_event is not None,
        }
        for signal in SignalType.all_signals():
            row[f"signal_{signal.key}"] = result.signals[signal].value
        rows.append(row)

        if result.critical_event is not None:
            events.append(result.critical_event)

    columns = SESSION_COLUMNS + [f"signal_{s.key}" for s in SignalType.all_signals()]
    df = pd.DataFrame(rows, columns=columns)
    if not df.empty:
        df['timestamp'] = pd.to_datetime(df['timestamp'], unit='ms')

    return df, events


def find_high_stress_periods(
    df: pd.DataFrame,
    threshold: float = 75,
    min_duration: int = 1
) -> pd.DataFrame:
    """
    Find periods where the score stayed at or above threshold.

    Args:
        df: Session frame from run_session
        threshold: Score threshold (default: 75, the UNSTABLE boundary)
        min_duration: Minimum tick count (default: 1)

    Returns:
        DataFrame with high-stress periods (start, end, duration, peak_score)
    """
    columns = ['start', 'end', 'duration', 'peak_score']
    if df.empty:
        return pd.DataFrame(columns=columns)

    df = df.copy()
    df['above_threshold'] = df['score'] >= threshold

    # Contiguous runs share an id
    df['period_id'] = (df['above_threshold'] != df['above_threshold'].shift()).cumsum()

    high_stress = df[df['above_threshold']]
    if high_stress.empty:
        return pd.DataFrame(columns=columns)

    periods = high_stress.groupby('period_id').agg(
        start=('timestamp', 'min'),
        end=('timestamp', 'max'),
        duration=('score', 'count'),
        peak_score=('score', 'max')
    ).reset_index(drop=True)

    periods = periods[periods['duration'] >= min_duration]

    return periods[columns].reset_index(drop=True)


def level_summary(df: pd.DataFrame, labeler: Optional[StateLabeler] = None) -> dict:
    """Count and percentage of ticks spent in each level."""
    return (labeler or StateLabeler()).get_state_summary(df)


def detect_level_transitions(df: pd.DataFrame, labeler: Optional[StateLabeler] = None) -> pd.DataFrame:
    """Rows where the level differs from the previous tick's."""
    return (labeler or StateLabeler()).detect_state_transitions(df)
