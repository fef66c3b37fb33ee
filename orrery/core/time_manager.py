"""
Simulation Clock
================

Accumulates simulated time, one step per rendered frame.
"""

import numpy as np
from datetime import datetime, timedelta

from .config import TIME_STEP, SECONDS_PER_DAY, CONSTANTS


class SimulationClock:
    """
    Cumulative simulated seconds since start.

    Each call to :meth:`advance` adds ``time_step * speed_multiplier``.
    The multiplier is expected to be a finite non-negative number; the
    caller clamps UI input before it reaches the clock.
    """

    def __init__(self,
                 time_step: float = TIME_STEP,
                 start_time: datetime = None):
        """
        Initialize simulation clock.

        Args:
            time_step: Simulated seconds per step at speed 1
            start_time: Calendar epoch matching elapsed time zero
        """
        self.time_step = time_step
        self.start_time = start_time or datetime(2026, 1, 1, 0, 0, 0)
        self.elapsed_seconds = 0.0
        self.step_count = 0

    def reset(self):
        """Reset simulation time to start."""
        self.elapsed_seconds = 0.0
        self.step_count = 0

    def advance(self, speed_multiplier: float = 1.0) -> float:
        """
        Advance time by one scaled step.

        Args:
            speed_multiplier: Non-negative scale applied to the base step

        Returns:
            Time delta applied this step [s]
        """
        dt = self.time_step * speed_multiplier
        self.elapsed_seconds += dt
        self.step_count += 1
        return dt

    @property
    def elapsed_days(self) -> float:
        return self.elapsed_seconds / SECONDS_PER_DAY

    @property
    def day_of_year(self) -> int:
        """Simulated day of year, starting at 1."""
        return int(np.floor(self.elapsed_days % CONSTANTS.DAYS_PER_YEAR)) + 1

    @property
    def current_utc(self) -> datetime:
        """Calendar time corresponding to the elapsed simulated time."""
        return self.start_time + timedelta(seconds=self.elapsed_seconds)

    def copy(self) -> 'SimulationClock':
        clock = SimulationClock(self.time_step, self.start_time)
        clock.elapsed_seconds = self.elapsed_seconds
        clock.step_count = self.step_count
        return clock
