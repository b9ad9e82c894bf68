"""
State Labeler

Maps continuous stress scores (0 → 100) to discrete labeled levels
for easier interpretation and alerting.
"""

import pandas as pd
from typing import Tuple, Dict, Optional

from signals.base import StressLevel


class StateLabeler:
    """
    Maps stress scores to labeled market levels.

    Levels:
    - STABLE (0 - 25): Calm microstructure
    - ELEVATED (25 - 50): Early stress, monitoring recommended
    - STRESSED (50 - 75): Multiple stress conditions present
    - UNSTABLE (75 - 90): Order book failing to absorb flow
    - CRITICAL (90 - 100): Disorderly market
    """

    STATES = {
        StressLevel.STABLE: {'color': '#10b981', 'description': 'Calm market'},
        StressLevel.ELEVATED: {'color': '#eab308', 'description': 'Elevated stress'},
        StressLevel.STRESSED: {'color': '#f97316', 'description': 'Stressed conditions'},
        StressLevel.UNSTABLE: {'color': '#ef4444', 'description': 'Unstable order book'},
        StressLevel.CRITICAL: {'color': '#dc2626', 'description': 'Critical instability'},
    }

    def __init__(self, thresholds: Optional[Dict[str, float]] = None):
        """
        Initialize state labeler.

        Args:
            thresholds: Custom upper bounds keyed stable_max, elevated_max,
                stressed_max, unstable_max (optional)
        """
        if thresholds:
            self._validate_thresholds(thresholds)
            self.thresholds = thresholds
        else:
            self.thresholds = {
                'stable_max': 25,
                'elevated_max': 50,
                'stressed_max': 75,
                'unstable_max': 90
            }

    def _validate_thresholds(self, thresholds: Dict[str, float]):
        """Validate custom thresholds are valid."""
        if not (0 < thresholds.get('stable_max', 25) <
                thresholds.get('elevated_max', 50) <
                thresholds.get('stressed_max', 75) <
                thresholds.get('unstable_max', 90) <= 100):
            raise ValueError("Thresholds must be strictly increasing and ≤ 100")

    def classify(self, score: float) -> StressLevel:
        """Classify a score into one of the five stress levels."""
        if score < self.thresholds['stable_max']:
            return StressLevel.STABLE
        elif score < self.thresholds['elevated_max']:
            return StressLevel.ELEVATED
        elif score < self.thresholds['stressed_max']:
            return StressLevel.STRESSED
        elif score < self.thresholds['unstable_max']:
            return StressLevel.UNSTABLE
        return StressLevel.CRITICAL

    def get_state(self, score: float) -> Tuple[StressLevel, Dict]:
        """
        Get labeled level for a given stress score.

        Args:
            score: Stress score (0 → 100)

        Returns:
            Tuple of (level, level_metadata)
        """
        level = self.classify(score)
        return level, self.STATES[level]

    def color(self, level: StressLevel) -> str:
        return self.STATES[level]['color']

    def get_state_summary(self, df: pd.DataFrame, level_col: str = 'level') -> Dict:
        """
        Get distribution of levels in a session frame.

        Args:
            df: DataFrame with a level column
            level_col: Name of level column

        Returns:
            Dictionary of level name → count, percentage, description
        """
        if level_col not in df.columns:
            raise ValueError(f"Column '{level_col}' not found in DataFrame")

        labels = df[level_col]

        summary = {}
        for level, info in self.STATES.items():
            count = int((labels == level.value).sum())
            pct = (count / len(labels)) * 100 if len(labels) > 0 else 0
            summary[level.value] = {
                'count': count,
                'percentage': round(pct, 2),
                'color': info['color'],
                'description': info['description']
            }

        return summary

    def detect_state_transitions(self, df: pd.DataFrame, level_col: str = 'level') -> pd.DataFrame:
        """
        Detect when the stress level changes.

        Args:
            df: DataFrame with timestamp, score and level columns

        Returns:
            DataFrame with level transitions (timestamp, from_level, to_level, score)
        """
        if level_col not in df.columns:
            raise ValueError(f"Column '{level_col}' not found in DataFrame")

        columns = ['timestamp', 'from_level', 'to_level', 'score']

        df = df.copy()
        df['from_level'] = df[level_col].shift()
        changed = df[df['from_level'].notna() & (df[level_col] != df['from_level'])].copy()

        if changed.empty:
            return pd.DataFrame(columns=columns)

        changed['to_level'] = changed[level_col]
        return changed[columns].reset_index(drop=True)

    def format_state_alert(self, score: float) -> str:
        """Format a human-readable level alert."""
        level, info = self.get_state(score)
        return f"{level.value} ({score:.0f}) - {info['description']}"
