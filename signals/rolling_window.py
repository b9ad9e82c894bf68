"""
Rolling Window

Fixed-capacity ring buffer with population statistics over its current
contents. Once full, each push overwrites the oldest slot.
"""

import numbers
import numpy as np
from typing import Generic, List, TypeVar

T = TypeVar('T')


class RollingWindow(Generic[T]):
    """
    Circular buffer holding the most recent ``capacity`` items.

    Items are returned in chronological order (oldest first).
    """

    def __init__(self, capacity: int):
        """
        Initialize rolling window.

        Args:
            capacity: Maximum number of items retained

        Raises:
            ValueError: If capacity is not a positive integer
        """
        if capacity < 1:
            raise ValueError(f"Window capacity must be positive, got {capacity}")

        self.capacity = capacity
        self._buffer: List[T] = []
        self._head = 0

    def push(self, item: T) -> None:
        """
        Append an item, overwriting the oldest once full.

        Args:
            item: Value to store
        """
        if len(self._buffer) < self.capacity:
            self._buffer.append(item)
        else:
            self._buffer[self._head] = item
            self._head = (self._head + 1) % self.capacity

    def get_last(self, n: int) -> List[T]:
        """Return the last ``n`` items in chronological order (all if n >= size)."""
        ordered = self.get_all()
        if n >= len(ordered):
            return ordered
        if n <= 0:
            return []
        return ordered[-n:]

    def get_all(self) -> List[T]:
        """Return every item in chronological order."""
        return self._buffer[self._head:] + self._buffer[:self._head]

    def mean(self) -> float:
        """Mean of the numeric items; 0.0 when there are none."""
        values = self._numeric()
        if values.size == 0:
            return 0.0
        return float(np.mean(values))

    def standard_deviation(self) -> float:
        """Population standard deviation of the numeric items; 0.0 below two items."""
        values = self._numeric()
        if values.size < 2:
            return 0.0
        return float(np.std(values))

    def size(self) -> int:
        """Number of items currently held."""
        return len(self._buffer)

    def clear(self) -> None:
        """Empty the window, keeping its capacity."""
        self._buffer = []
        self._head = 0

    def __len__(self) -> int:
        return len(self._buffer)

    def _numeric(self) -> np.ndarray:
        # Booleans are Integral but not meaningful as samples
        return np.array(
            [x for x in self._buffer if isinstance(x, numbers.Real) and not isinstance(x, bool)],
            dtype=float
        )
