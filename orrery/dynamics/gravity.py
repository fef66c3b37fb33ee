"""
Gravity Integrator
==================

Numerical two-body propagation of a body relative to its primary
(the Moon around Earth). Earth's gravity only: the Sun and the Moon's
own mass play no part.
"""

import numpy as np
from typing import Dict, Optional, Tuple

from ..core.config import G
from .integrators import ExplicitEuler, FixedStepIntegrator, RK4Integrator

# Below this separation the inverse-square law is singular; steps are skipped
MIN_DISTANCE_M = 1e-10


def two_body_acceleration(r: np.ndarray, central_mass: float) -> np.ndarray:
    """
    Gravitational acceleration toward the primary.

    Args:
        r: Position relative to the primary [m]
        central_mass: Primary mass [kg]

    Returns:
        Acceleration [m/s²]; zero inside MIN_DISTANCE_M
    """
    distance = np.linalg.norm(r)
    if distance < MIN_DISTANCE_M:
        return np.zeros_like(r, dtype=float)
    accel = G * central_mass / (distance * distance)
    return -accel * r / distance


def gravity_step(r: np.ndarray,
                 v: np.ndarray,
                 central_mass: float,
                 dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    One semi-implicit Euler step of the relative state.

    The velocity is updated first and the updated velocity moves the
    position. Inputs are not mutated. When the separation is below
    MIN_DISTANCE_M the state is returned unchanged.

    Args:
        r: Relative position [m]
        v: Relative velocity [m/s]
        central_mass: Primary mass [kg]
        dt: Time step [s]

    Returns:
        Tuple of (new_position, new_velocity)
    """
    r = np.asarray(r, dtype=float)
    v = np.asarray(v, dtype=float)

    distance = np.linalg.norm(r)
    if distance < MIN_DISTANCE_M:
        return r.copy(), v.copy()

    accel = G * central_mass / (distance * distance)
    accel_vec = -accel * r / distance

    v_new = v + accel_vec * dt
    r_new = r + v_new * dt
    return r_new, v_new


def specific_energy(r: np.ndarray, v: np.ndarray, central_mass: float) -> float:
    """Specific orbital energy v²/2 - GM/r [J/kg]."""
    r_mag = np.linalg.norm(r)
    v_mag = np.linalg.norm(v)
    return float(0.5 * v_mag**2 - G * central_mass / r_mag)


def orbital_elements(r: np.ndarray, v: np.ndarray, central_mass: float) -> Dict[str, float]:
    """
    Osculating elements of the relative orbit.

    Args:
        r: Relative position [m]
        v: Relative velocity [m/s]
        central_mass: Primary mass [kg]

    Returns:
        Dictionary with semi-major axis, eccentricity, specific energy,
        periapsis/apoapsis and period (inf for unbound orbits)
    """
    mu = G * central_mass
    r = np.asarray(r, dtype=float)
    v = np.asarray(v, dtype=float)
    r_mag = np.linalg.norm(r)
    v_mag = np.linalg.norm(v)

    energy = v_mag**2 / 2 - mu / r_mag

    # Eccentricity vector
    e_vec = ((v_mag**2 - mu / r_mag) * r - np.dot(r, v) * v) / mu
    e = float(np.linalg.norm(e_vec))

    if energy < 0:
        a = -mu / (2 * energy)
        period = 2 * np.pi * np.sqrt(a**3 / mu)
        apoapsis = a * (1 + e)
    else:
        a = float('inf')
        period = float('inf')
        apoapsis = float('inf')

    h = np.linalg.norm(np.cross(r, v))
    periapsis = h**2 / (mu * (1 + e))

    return {
        'semi_major_axis_m': float(a),
        'eccentricity': e,
        'specific_energy_J_kg': float(energy),
        'periapsis_m': float(periapsis),
        'apoapsis_m': float(apoapsis),
        'period_s': float(period),
    }


class GravityIntegrator:
    """
    Moon integrator around a fixed-mass primary.

    Methods:
    - 'symplectic_euler': reference behaviour (velocity then position)
    - 'euler': plain forward Euler, orbit drifts outward
    - 'rk4': higher fidelity, deviates from reference output
    """

    METHODS = ('symplectic_euler', 'euler', 'rk4')

    def __init__(self, central_mass: float, method: str = 'symplectic_euler'):
        """
        Initialize integrator.

        Args:
            central_mass: Primary mass [kg]
            method: Integration method name
        """
        if method not in self.METHODS:
            raise ValueError(f"Unknown integration method: {method}")
        self.central_mass = central_mass
        self.method = method

        # symplectic_euler goes straight through gravity_step
        self._integrator: Optional[FixedStepIntegrator] = None
        if method == 'euler':
            self._integrator = ExplicitEuler(self.acceleration)
        elif method == 'rk4':
            self._integrator = RK4Integrator(self.acceleration)

    def acceleration(self, r: np.ndarray) -> np.ndarray:
        return two_body_acceleration(r, self.central_mass)

    def step(self, r: np.ndarray, v: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Advance the relative state by ``dt``.

        Args:
            r: Relative position [m]
            v: Relative velocity [m/s]
            dt: Time step [s]

        Returns:
            Tuple of (new_position, new_velocity)
        """
        if self.method == 'symplectic_euler':
            return gravity_step(r, v, self.central_mass, dt)

        r = np.asarray(r, dtype=float)
        v = np.asarray(v, dtype=float)
        if np.linalg.norm(r) < MIN_DISTANCE_M:
            return r.copy(), v.copy()
        return self._integrator.step(r, v, dt)

    def integrate(self,
                  r0: np.ndarray,
                  v0: np.ndarray,
                  dt: float,
                  n_steps: int) -> Tuple[np.ndarray, np.ndarray]:
        """Trajectory of ``n_steps`` steps; arrays of shape (n_steps + 1, 3)."""
        positions = np.zeros((n_steps + 1, 3))
        velocities = np.zeros((n_steps + 1, 3))
        r = np.asarray(r0, dtype=float)
        v = np.asarray(v0, dtype=float)
        positions[0] = r
        velocities[0] = v
        for i in range(1, n_steps + 1):
            r, v = self.step(r, v, dt)
            positions[i] = r
            velocities[i] = v
        return positions, velocities

    def energy(self, r: np.ndarray, v: np.ndarray) -> float:
        return specific_energy(r, v, self.central_mass)
