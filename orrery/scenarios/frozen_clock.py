"""
Frozen Clock Scenario
=====================

Zero speed or pause: neither time nor either body may move.
"""

import logging
import numpy as np
from typing import Dict, Optional
from dataclasses import dataclass
from ..core.config import SimulationConfig
from ..core.simulator import Simulator

logger = logging.getLogger(__name__)


@dataclass
class FrozenClockScenarioConfig:
    """Configuration for frozen clock scenario."""
    warmup_steps: int = 48
    frozen_frames: int = 100
    mode: str = 'zero_speed'  # 'zero_speed', 'paused'


class FrozenClockScenario:
    """Runs frames with the clock stopped and compares state before/after."""

    def __init__(self, config: FrozenClockScenarioConfig = None,
                 sim_config: SimulationConfig = None):
        self.config = config or FrozenClockScenarioConfig()
        self.sim_config = sim_config or SimulationConfig()
        self.simulator: Optional[Simulator] = None
        self.results: Dict = {}

    def setup(self):
        """Setup scenario."""
        if self.config.mode not in ('zero_speed', 'paused'):
            raise ValueError(f"Unknown freeze mode: {self.config.mode}")
        self.simulator = Simulator(self.sim_config)
        self.simulator.run(n_steps=self.config.warmup_steps)

    def run(self, progress_callback=None) -> Dict:
        """Run frozen frames."""
        if self.simulator is None:
            self.setup()

        logger.info("Running Frozen Clock Scenario: %d frames (%s)",
                    self.config.frozen_frames, self.config.mode)

        sim = self.simulator
        before = sim.snapshot()

        if self.config.mode == 'zero_speed':
            sim.set_speed(0.0)
        else:
            sim.pause()

        sim.run(n_steps=self.config.frozen_frames, progress_callback=progress_callback)
        after = sim.snapshot()

        self.results = {
            'mode': self.config.mode,
            'frames': self.config.frozen_frames,
            'time_unchanged': after.time_s == before.time_s,
            'earth_unchanged': bool(np.array_equal(after.earth_position_m, before.earth_position_m)),
            'moon_unchanged': bool(np.array_equal(after.moon_position_m, before.moon_position_m)
                                   and np.array_equal(after.moon_velocity_m_s, before.moon_velocity_m_s)),
            'clock_steps_advanced': after.step - before.step,
        }
        return self.results

    def get_summary(self) -> str:
        """Get human-readable summary."""
        if not self.results:
            return "Scenario not yet run."
        r = self.results
        return f"""
Frozen Clock Scenario Summary
=============================
Mode: {r['mode']} ({r['frames']} frames)
Time unchanged: {r['time_unchanged']}
Earth unchanged: {r['earth_unchanged']}
Moon unchanged: {r['moon_unchanged']}
"""
