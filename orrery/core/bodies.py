"""
Celestial Bodies
================

State record for the Sun, Earth and Moon.

Frame conventions:
- Sun: always at the origin, never advanced.
- Earth: heliocentric, absolute.
- Moon: relative to Earth.
"""

import numpy as np
from dataclasses import dataclass, field

from .config import BodyParameters, G


@dataclass
class CelestialBody:
    """Mass, reference ellipse and current state of one body (SI units)."""
    name: str
    mass_kg: float
    radius_km: float = 0.0
    position_m: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity_m_s: np.ndarray = field(default_factory=lambda: np.zeros(3))
    semi_major_axis_m: float = 0.0
    eccentricity: float = 0.0
    fixed: bool = False

    def __post_init__(self):
        self.position_m = np.asarray(self.position_m, dtype=float)
        self.velocity_m_s = np.asarray(self.velocity_m_s, dtype=float)

    @property
    def distance_m(self) -> float:
        """Distance from the frame origin."""
        return float(np.linalg.norm(self.position_m))

    @property
    def speed_m_s(self) -> float:
        """Speed magnitude in the body's frame."""
        return float(np.linalg.norm(self.velocity_m_s))

    @property
    def mu(self) -> float:
        """Gravitational parameter G·M."""
        return G * self.mass_kg

    def to_array(self) -> np.ndarray:
        """Return state as 6-element array."""
        return np.concatenate([self.position_m, self.velocity_m_s])

    def set_state(self, position: np.ndarray, velocity: np.ndarray):
        """Replace position and velocity (fixed bodies stay at the origin)."""
        if self.fixed:
            return
        self.position_m = np.asarray(position, dtype=float).copy()
        self.velocity_m_s = np.asarray(velocity, dtype=float).copy()

    def copy(self) -> 'CelestialBody':
        return CelestialBody(
            name=self.name,
            mass_kg=self.mass_kg,
            radius_km=self.radius_km,
            position_m=self.position_m.copy(),
            velocity_m_s=self.velocity_m_s.copy(),
            semi_major_axis_m=self.semi_major_axis_m,
            eccentricity=self.eccentricity,
            fixed=self.fixed,
        )

    @classmethod
    def from_parameters(cls, params: BodyParameters) -> 'CelestialBody':
        """Create a body at rest at the origin from its parameters."""
        return cls(
            name=params.name,
            mass_kg=params.mass_kg,
            radius_km=params.radius_km,
            semi_major_axis_m=params.semi_major_axis_m,
            eccentricity=params.eccentricity,
            fixed=params.fixed,
        )

    @classmethod
    def from_array(cls, name: str, mass_kg: float, state: np.ndarray) -> 'CelestialBody':
        """Create from 6-element array."""
        state = np.asarray(state, dtype=float)
        return cls(
            name=name,
            mass_kg=mass_kg,
            position_m=state[:3].copy(),
            velocity_m_s=state[3:6].copy(),
        )
