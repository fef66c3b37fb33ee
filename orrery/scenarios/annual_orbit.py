"""
Annual Orbit Scenario
=====================

Runs the full system for one (or more) Earth revolutions and checks that
the analytic Earth orbit closes on itself.
"""

import logging
import numpy as np
from typing import Dict, List, Optional
from dataclasses import dataclass
from ..core.config import SimulationConfig
from ..core.simulator import Simulator, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class AnnualOrbitScenarioConfig:
    """Configuration for annual orbit scenario."""
    revolutions: float = 1.0
    speed_multiplier: float = 1.0


class AnnualOrbitScenario:
    """
    Full-year scenario.

    Checks:
    - Earth returns to its starting point after one period
    - Earth-Sun distance stays within [a(1-e), a(1+e)]
    - Moon energy over the same run
    """

    def __init__(self, config: AnnualOrbitScenarioConfig = None,
                 sim_config: SimulationConfig = None):
        """
        Initialize annual orbit scenario.

        Args:
            config: Scenario configuration
            sim_config: Simulation configuration (reference defaults if None)
        """
        self.config = config or AnnualOrbitScenarioConfig()
        self.sim_config = sim_config or SimulationConfig()

        self.simulator: Optional[Simulator] = None
        self.results: Dict = {}
        self.history: List[Snapshot] = []
        self.moon_energy_history: List[float] = []

    def setup(self):
        """Setup scenario."""
        assert self.config.speed_multiplier > 0, "Annual scenario needs a running clock"
        self.simulator = Simulator(self.sim_config)
        self.simulator.set_speed(self.config.speed_multiplier)
        self.initial = self.simulator.snapshot()
        self.initial_moon_energy = self.simulator.moon_energy()
        self.moon_energy_history = [self.initial_moon_energy]

        self.simulator.add_step_callback(self._energy_monitor)

    def _energy_monitor(self, sim: Simulator, snapshot: Snapshot):
        self.moon_energy_history.append(sim.moon_energy())

    @property
    def n_steps(self) -> int:
        dt = self.sim_config.time_step_seconds * self.config.speed_multiplier
        period = self.sim_config.effective_earth_period
        return int(round(self.config.revolutions * period / dt))

    def run(self, progress_callback=None) -> Dict:
        """
        Run annual orbit scenario.

        Returns:
            Results dictionary
        """
        if self.simulator is None:
            self.setup()

        logger.info("Running Annual Orbit Scenario: %.2f revolutions (%d steps)",
                    self.config.revolutions, self.n_steps)

        self.history = self.simulator.run(n_steps=self.n_steps, progress_callback=progress_callback)
        self.results = self._analyze_results(self.history)

        return self.results

    def _analyze_results(self, history: List[Snapshot]) -> Dict:
        """Analyze scenario results."""
        if not history:
            return {}

        earth = self.sim_config.earth
        distances = np.array([s.telemetry.earth_sun_distance_m for s in history])
        speeds = np.array([s.telemetry.earth_speed_m_s for s in history])
        closure = np.linalg.norm(history[-1].earth_position_m - self.initial.earth_position_m)

        energies = np.array(self.moon_energy_history)
        drift = np.abs((energies - self.initial_moon_energy) / self.initial_moon_energy)

        return {
            'duration_s': history[-1].time_s,
            'num_steps': len(history),
            'closure_error_m': float(closure),
            'closure_error_relative': float(closure / earth.semi_major_axis_m),
            'distance_min_m': float(distances.min()),
            'distance_max_m': float(distances.max()),
            'periapsis_m': earth.semi_major_axis_m * (1 - earth.eccentricity),
            'apoapsis_m': earth.semi_major_axis_m * (1 + earth.eccentricity),
            'speed_min_km_s': float(speeds.min() / 1000),
            'speed_max_km_s': float(speeds.max() / 1000),
            'final_day_of_year': history[-1].telemetry.day_of_year,
            'moon_energy_max_relative_drift': float(drift.max()),
        }

    def get_summary(self) -> str:
        """Get human-readable summary."""
        if not self.results:
            return "Scenario not yet run."

        r = self.results
        return f"""
Annual Orbit Scenario Summary
=============================
Duration: {r['duration_s']:.0f} s ({r['duration_s']/86400:.2f} days)
Steps: {r['num_steps']}

Earth:
  Closure error: {r['closure_error_m']:.3e} m ({r['closure_error_relative']:.2e} of a)
  Distance: {r['distance_min_m']/1e9:.3f} - {r['distance_max_m']/1e9:.3f} M km
  Speed: {r['speed_min_km_s']:.2f} - {r['speed_max_km_s']:.2f} km/s
  Final day of year: {r['final_day_of_year']}

Moon:
  Max relative energy drift: {r['moon_energy_max_relative_drift']*100:.3f}%
"""
