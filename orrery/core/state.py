"""
Simulation State
================

Single explicit value holding the three bodies and the clock, and the
one-time derivation of initial conditions.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Tuple

from .bodies import CelestialBody
from .config import BodyParameters, SimulationConfig, G
from .time_manager import SimulationClock
from ..dynamics.kepler import position_and_velocity_at

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """Sun, Earth, Moon and the shared clock."""
    sun: CelestialBody
    earth: CelestialBody
    moon: CelestialBody
    clock: SimulationClock
    speed_multiplier: float = 1.0
    paused: bool = False

    @property
    def time_s(self) -> float:
        return self.clock.elapsed_seconds

    @property
    def moon_absolute_position_m(self) -> np.ndarray:
        """Heliocentric Moon position without any display exaggeration."""
        return self.earth.position_m + self.moon.position_m

    def copy(self) -> 'SimulationState':
        return SimulationState(
            sun=self.sun.copy(),
            earth=self.earth.copy(),
            moon=self.moon.copy(),
            clock=self.clock.copy(),
            speed_multiplier=self.speed_multiplier,
            paused=self.paused,
        )


def moon_initial_conditions(moon: BodyParameters,
                            earth_mass_kg: float,
                            start_fraction: float = 0.8) -> Tuple[np.ndarray, np.ndarray]:
    """
    Earth-relative starting position and velocity of the Moon.

    The Moon starts on +x at ``start_fraction`` of its semi-major axis
    (closer than the real orbit, for visibility) and moves along +y
    with the vis-viva speed v = sqrt(GM(2/r - 1/a)).

    Args:
        moon: Moon parameters (reference ellipse)
        earth_mass_kg: Mass of Earth [kg]
        start_fraction: Initial distance as a fraction of a

    Returns:
        Tuple of (position [m], velocity [m/s])
    """
    a = moon.semi_major_axis_m
    distance = a * start_fraction
    speed = np.sqrt(G * earth_mass_kg * (2 / distance - 1 / a))

    position = np.array([distance, 0.0, 0.0])
    velocity = np.array([0.0, speed, 0.0])

    logger.debug("Moon relative position: %s m", position)
    logger.debug("Moon relative velocity: %s m/s", velocity)
    logger.debug("Moon orbital speed: %.4f km/s, distance from Earth: %.1f km",
                 speed / 1000, distance / 1000)

    return position, velocity


def create_initial_state(config: SimulationConfig = None) -> SimulationState:
    """
    Build the state at t = 0.

    Sun at the origin, Earth at periapsis from the analytic propagator,
    Moon from :func:`moon_initial_conditions`.
    """
    config = config or SimulationConfig()

    sun = CelestialBody.from_parameters(config.sun)
    earth = CelestialBody.from_parameters(config.earth)
    moon = CelestialBody.from_parameters(config.moon)

    earth_pos, earth_vel = position_and_velocity_at(
        0.0,
        config.sun.mass_kg,
        config.earth.semi_major_axis_m,
        config.earth.eccentricity,
        period=config.effective_earth_period,
        iterations=config.kepler_iterations,
        tolerance=config.kepler_tolerance,
    )
    earth.set_state(earth_pos, earth_vel)

    moon_pos, moon_vel = moon_initial_conditions(
        config.moon, config.earth.mass_kg, config.moon_start_fraction
    )
    moon.set_state(moon_pos, moon_vel)

    clock = SimulationClock(config.time_step_seconds, config.start_time)

    logger.info("Orbital physics initialized (%s)", config.name)

    return SimulationState(
        sun=sun,
        earth=earth,
        moon=moon,
        clock=clock,
        speed_multiplier=config.initial_speed_multiplier,
    )
