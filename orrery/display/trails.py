"""
Trails
======

Bounded history of display positions for Earth and Moon.
"""

import numpy as np
from collections import deque
from typing import Dict, Iterable


class Trail:
    """FIFO of recent display points; oldest points drop off first."""

    def __init__(self, max_points: int = 500):
        assert max_points > 0, "Trail needs room for at least one point"
        self.max_points = max_points
        self._points = deque(maxlen=max_points)

    def __len__(self) -> int:
        return len(self._points)

    def push(self, point: np.ndarray):
        self._points.append(np.asarray(point, dtype=float).copy())

    def clear(self):
        self._points.clear()

    def as_array(self) -> np.ndarray:
        """Points as an (n, 3) array, oldest first."""
        if not self._points:
            return np.zeros((0, 3))
        return np.vstack(self._points)


class TrailSet:
    """
    Named trails that are recorded only while enabled.

    Disabling the set clears every trail.
    """

    def __init__(self, names: Iterable[str] = ('Earth', 'Moon'),
                 max_points: int = 500,
                 enabled: bool = False):
        self.trails: Dict[str, Trail] = {name: Trail(max_points) for name in names}
        self.enabled = enabled

    def __getitem__(self, name: str) -> Trail:
        return self.trails[name]

    def toggle(self) -> bool:
        """Flip recording on/off and return the new state."""
        self.set_enabled(not self.enabled)
        return self.enabled

    def set_enabled(self, enabled: bool):
        self.enabled = enabled
        if not enabled:
            for trail in self.trails.values():
                trail.clear()

    def record(self, points: Dict[str, np.ndarray]):
        """Append one point per named trail when enabled."""
        if not self.enabled:
            return
        for name, point in points.items():
            self.trails[name].push(point)
