"""
Simulation Configuration
========================

Physical constants, body parameters and simulation settings for the
Sun / Earth / Moon orrery.
"""

import numpy as np
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class PhysicalConstants:
    """SI constants shared by the propagators."""
    G: float = 6.674e-11  # m³/kg/s²
    AU: float = 1.496e11  # m
    LUNAR_DISTANCE: float = 3.844e8  # m - mean Earth-Moon distance
    SECONDS_PER_DAY: float = 86400.0
    DAYS_PER_YEAR: float = 365.25


CONSTANTS = PhysicalConstants()

G = CONSTANTS.G
AU = CONSTANTS.AU
LUNAR_DISTANCE = CONSTANTS.LUNAR_DISTANCE
SECONDS_PER_DAY = CONSTANTS.SECONDS_PER_DAY

# One hour of orbital time per rendered frame
TIME_STEP = 3600.0

# Reference orbital periods [s]
EARTH_PERIOD = CONSTANTS.DAYS_PER_YEAR * SECONDS_PER_DAY
MOON_PERIOD = 27.3 * SECONDS_PER_DAY


@dataclass
class BodyParameters:
    """Physical and orbital properties of one celestial body."""
    name: str
    mass_kg: float
    radius_km: float
    semi_major_axis_m: float = 0.0  # reference ellipse (0 for the fixed Sun)
    eccentricity: float = 0.0
    fixed: bool = False

    def __post_init__(self):
        """Validate body parameters."""
        assert self.mass_kg > 0, "Mass must be positive"
        assert 0.0 <= self.eccentricity < 1.0, "Only closed elliptical orbits are supported"
        assert self.semi_major_axis_m >= 0, "Semi-major axis cannot be negative"

    @property
    def mu(self) -> float:
        """Gravitational parameter G·M [m³/s²]."""
        return G * self.mass_kg

    @property
    def semi_minor_axis_m(self) -> float:
        """Semi-minor axis of the reference ellipse."""
        return self.semi_major_axis_m * np.sqrt(1 - self.eccentricity**2)


def sun_parameters() -> BodyParameters:
    return BodyParameters(name="Sun", mass_kg=1.989e30, radius_km=696340.0, fixed=True)


def earth_parameters() -> BodyParameters:
    return BodyParameters(
        name="Earth",
        mass_kg=5.972e24,
        radius_km=6371.0,
        semi_major_axis_m=1.496e11,
        eccentricity=0.0167,
    )


def moon_parameters() -> BodyParameters:
    # Earth-relative ellipse; only used to derive initial conditions
    return BodyParameters(
        name="Moon",
        mass_kg=7.342e22,
        radius_km=1737.0,
        semi_major_axis_m=LUNAR_DISTANCE,
        eccentricity=0.0549,
    )


@dataclass
class DisplayParameters:
    """Scaling and presentation settings for the renderer adapter."""
    # Meters -> display units: 1 AU maps to display_scale units
    distance_scale: float = 1.0 / AU
    display_scale: float = 150.0

    # Non-physical scale-up of the Moon's offset from Earth
    moon_exaggeration: float = 20.0

    # Trails
    max_trail_points: int = 500

    # Background star field, a cube of side star_field_extent around the view
    star_count: int = 10000
    star_field_extent: float = 360.0

    # Reference orbit path resolution
    orbit_path_points: int = 200

    # Cosmetic body spin per frame, scaled by speed multiplier [rad]
    spin_rate: float = 0.02

    # Speed slider range
    speed_range: Tuple[float, float] = (0.0, 5.0)

    @property
    def meters_to_display(self) -> float:
        """Combined linear scale applied to physical positions."""
        return self.distance_scale * self.display_scale


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""
    name: str = "Sun-Earth-Moon"

    # Simulated seconds per step at speed multiplier 1
    time_step_seconds: float = TIME_STEP
    start_time: datetime = field(default_factory=lambda: datetime(2026, 1, 1, 0, 0, 0))
    initial_speed_multiplier: float = 1.0

    # Bodies
    sun: BodyParameters = field(default_factory=sun_parameters)
    earth: BodyParameters = field(default_factory=earth_parameters)
    moon: BodyParameters = field(default_factory=moon_parameters)

    # Earth propagator
    earth_period_seconds: float = EARTH_PERIOD
    derive_earth_period: bool = False  # use Kepler's third law instead of 365.25 days
    kepler_iterations: int = 5
    kepler_tolerance: Optional[float] = None  # None: fixed iteration count

    # Moon integrator
    moon_start_fraction: float = 0.8  # initial distance as a fraction of a
    moon_integrator: str = "symplectic_euler"  # 'symplectic_euler', 'euler', 'rk4'

    # Output options
    history_length: int = 1000
    display: DisplayParameters = field(default_factory=DisplayParameters)
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration."""
        assert self.time_step_seconds > 0, "Time step must be positive"
        assert self.earth_period_seconds > 0, "Earth period must be positive"
        assert self.kepler_iterations > 0, "Kepler solver needs at least one iteration"
        # vis-viva 2/r - 1/a stays positive only inside twice the semi-major axis
        assert 0 < self.moon_start_fraction < 2, "Moon start distance must be in (0, 2a)"
        lo, hi = self.display.speed_range
        assert lo <= self.initial_speed_multiplier <= hi, \
            f"Initial speed multiplier must be within {self.display.speed_range}"
        assert self.history_length > 0, "History length must be positive"

    @property
    def effective_earth_period(self) -> float:
        """Earth period used by the analytic propagator."""
        if self.derive_earth_period:
            a = self.earth.semi_major_axis_m
            return 2 * np.pi * np.sqrt(a**3 / self.sun.mu)
        return self.earth_period_seconds


# Pre-defined configurations
def create_reference_config() -> SimulationConfig:
    """Configuration reproducing the reference visualization exactly."""
    return SimulationConfig()


def create_high_fidelity_config() -> SimulationConfig:
    """Kepler period, converged Kepler solve and RK4 for the Moon."""
    return SimulationConfig(
        derive_earth_period=True,
        kepler_iterations=50,
        kepler_tolerance=1e-14,
        moon_integrator="rk4",
    )
