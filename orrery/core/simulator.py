"""
Main Simulator
==============

Steps the Sun / Earth / Moon system once per rendered frame.
"""

import logging
import numpy as np
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, List, Optional

from .config import SimulationConfig
from .state import SimulationState, create_initial_state
from ..dynamics.gravity import GravityIntegrator
from ..dynamics.kepler import KeplerPropagator

logger = logging.getLogger(__name__)


@dataclass
class Telemetry:
    """Read-only figures for the stats panel."""
    earth_sun_distance_m: float = 0.0
    earth_speed_m_s: float = 0.0
    day_of_year: int = 1
    moon_distance_m: float = 0.0
    moon_speed_m_s: float = 0.0

    @property
    def earth_sun_distance_million_km(self) -> float:
        return self.earth_sun_distance_m / 1e9

    @property
    def earth_speed_km_s(self) -> float:
        return self.earth_speed_m_s / 1000

    @property
    def moon_distance_km(self) -> float:
        return self.moon_distance_m / 1000

    @property
    def moon_speed_km_s(self) -> float:
        return self.moon_speed_m_s / 1000


@dataclass
class Snapshot:
    """Physical-unit output of one step."""
    time_s: float = 0.0
    dt_s: float = 0.0
    step: int = 0
    earth_position_m: np.ndarray = field(default_factory=lambda: np.zeros(3))
    earth_velocity_m_s: np.ndarray = field(default_factory=lambda: np.zeros(3))
    moon_position_m: np.ndarray = field(default_factory=lambda: np.zeros(3))  # relative to Earth
    moon_velocity_m_s: np.ndarray = field(default_factory=lambda: np.zeros(3))  # relative to Earth
    telemetry: Telemetry = field(default_factory=Telemetry)


class Simulator:
    """
    Orrery simulation engine.

    Integrates:
    - Analytic Kepler propagation of Earth around the fixed Sun
    - Numerical propagation of the Moon relative to Earth
    - A shared clock scaled by the speed multiplier

    Earth and Moon are always advanced with the same time delta within
    one step. While paused, nothing advances.
    """

    def __init__(self, config: SimulationConfig = None):
        """
        Initialize simulator.

        Args:
            config: Simulation configuration
        """
        self.config = config or SimulationConfig()

        self.earth_propagator = KeplerPropagator(
            central_mass=self.config.sun.mass_kg,
            semi_major_axis=self.config.earth.semi_major_axis_m,
            eccentricity=self.config.earth.eccentricity,
            period=self.config.effective_earth_period,
            iterations=self.config.kepler_iterations,
            tolerance=self.config.kepler_tolerance,
        )
        self.moon_integrator = GravityIntegrator(
            central_mass=self.config.earth.mass_kg,
            method=self.config.moon_integrator,
        )

        self.state: SimulationState = create_initial_state(self.config)
        self._last_dt = 0.0

        # Data logging
        self.history: Deque[Snapshot] = deque(maxlen=self.config.history_length)

        # Callbacks
        self.step_callbacks: List[Callable] = []

    # ----- controls -----

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def speed_multiplier(self) -> float:
        return self.state.speed_multiplier

    def pause(self):
        self.state.paused = True

    def resume(self):
        self.state.paused = False

    def toggle_pause(self) -> bool:
        """Flip the pause flag and return the new value."""
        self.state.paused = not self.state.paused
        return self.state.paused

    def set_speed(self, multiplier: float) -> float:
        """
        Set the speed multiplier from UI input.

        Values outside the configured slider range are clamped so the
        clock only ever sees a finite non-negative multiplier.

        Args:
            multiplier: Requested speed multiplier

        Returns:
            Multiplier actually applied

        Raises:
            ValueError: If the value is not a finite number
        """
        value = float(multiplier)
        if not np.isfinite(value):
            raise ValueError(f"Speed multiplier must be finite, got {multiplier!r}")

        lo, hi = self.config.display.speed_range
        clamped = min(max(value, lo), hi)
        if clamped != value:
            logger.warning("Speed multiplier %.3f clamped to %.3f", value, clamped)
        self.state.speed_multiplier = clamped
        return clamped

    def add_step_callback(self, callback: Callable):
        """Register ``callback(simulator, snapshot)`` called after each step."""
        self.step_callbacks.append(callback)

    def reset(self):
        """Reset simulation to initial state."""
        self.state = create_initial_state(self.config)
        self._last_dt = 0.0
        self.history.clear()

    # ----- stepping -----

    def step(self) -> Snapshot:
        """
        Advance simulation by one frame.

        Returns:
            Snapshot after the step (unchanged state while paused)
        """
        if self.state.paused:
            return self.snapshot()

        state = self.state
        dt = state.clock.advance(state.speed_multiplier)
        t = state.clock.elapsed_seconds

        # Earth: re-derived from t alone
        earth_pos, earth_vel = self.earth_propagator.state_at(t)
        state.earth.set_state(earth_pos, earth_vel)

        # Moon: integrated with the same dt
        moon_pos, moon_vel = self.moon_integrator.step(
            state.moon.position_m, state.moon.velocity_m_s, dt
        )
        state.moon.set_state(moon_pos, moon_vel)

        self._last_dt = dt
        snapshot = self.snapshot()
        self.history.append(snapshot)

        for callback in self.step_callbacks:
            callback(self, snapshot)

        if self.config.verbose and state.clock.step_count % 24 == 0:
            logger.info("t=%.0f s day=%d r_earth=%.4e m",
                        t, snapshot.telemetry.day_of_year, snapshot.telemetry.earth_sun_distance_m)

        return snapshot

    def run(self,
            n_steps: int = None,
            duration_seconds: float = None,
            progress_callback: Callable = None) -> List[Snapshot]:
        """
        Run several steps.

        Args:
            n_steps: Number of steps to run
            duration_seconds: Simulated duration; converted to steps at
                the current speed multiplier
            progress_callback: Called with progress (0-1)

        Returns:
            Snapshots of every step run
        """
        if n_steps is None:
            if duration_seconds is None:
                raise ValueError("Either n_steps or duration_seconds is required")
            dt = self.config.time_step_seconds * self.state.speed_multiplier
            if dt <= 0:
                raise ValueError("Cannot cover a duration at zero speed")
            n_steps = int(round(duration_seconds / dt))

        snapshots = []
        for i in range(n_steps):
            snapshots.append(self.step())
            if progress_callback and (i % max(1, n_steps // 100) == 0 or i == n_steps - 1):
                progress_callback((i + 1) / n_steps)

        return snapshots

    # ----- read-only outputs -----

    def telemetry(self) -> Telemetry:
        """Derived figures for display."""
        state = self.state
        return Telemetry(
            earth_sun_distance_m=state.earth.distance_m,
            earth_speed_m_s=state.earth.speed_m_s,
            day_of_year=state.clock.day_of_year,
            moon_distance_m=state.moon.distance_m,
            moon_speed_m_s=state.moon.speed_m_s,
        )

    def snapshot(self) -> Snapshot:
        """Copy of the current physical state."""
        state = self.state
        return Snapshot(
            time_s=state.clock.elapsed_seconds,
            dt_s=self._last_dt,
            step=state.clock.step_count,
            earth_position_m=state.earth.position_m.copy(),
            earth_velocity_m_s=state.earth.velocity_m_s.copy(),
            moon_position_m=state.moon.position_m.copy(),
            moon_velocity_m_s=state.moon.velocity_m_s.copy(),
            telemetry=self.telemetry(),
        )

    def moon_energy(self) -> float:
        """Specific orbital energy of the Moon relative to Earth."""
        return self.moon_integrator.energy(self.state.moon.position_m, self.state.moon.velocity_m_s)
