"""
Analytic Elliptical Propagator
==============================

Closed-form position and velocity on a Kepler ellipse as a pure
function of elapsed time. Used for Earth around the fixed Sun, so no
integration error ever accumulates for Earth.
"""

import numpy as np
from typing import Optional, Tuple

from ..core.config import G


def orbital_period(semi_major_axis: float, central_mass: float) -> float:
    """Orbital period from Kepler's third law [s]."""
    return 2 * np.pi * np.sqrt(semi_major_axis**3 / (G * central_mass))


def mean_anomaly(t: float, period: float) -> float:
    """Mean anomaly in [0, 2π) after ``t`` seconds past periapsis."""
    return (2 * np.pi * t / period) % (2 * np.pi)


def solve_kepler(M: float,
                 e: float,
                 iterations: int = 5,
                 tolerance: Optional[float] = None) -> float:
    """
    Solve Kepler's equation M = E - e·sin(E) for the eccentric anomaly.

    Newton-Raphson seeded with E = M. By default exactly ``iterations``
    updates are applied with no convergence check, which keeps output
    reproducible. With a ``tolerance`` the loop stops as soon as the
    update falls below it (still capped at ``iterations``).

    Args:
        M: Mean anomaly [rad]
        e: Eccentricity (0 <= e < 1)
        iterations: Number of Newton-Raphson updates
        tolerance: Optional early-exit threshold on |ΔE|

    Returns:
        Eccentric anomaly E [rad]
    """
    E = M
    for _ in range(iterations):
        f = E - e * np.sin(E) - M
        fp = 1 - e * np.cos(E)
        delta = f / fp
        E = E - delta
        if tolerance is not None and abs(delta) < tolerance:
            break
    return E


def true_anomaly(E: float, e: float) -> float:
    """True anomaly from eccentric anomaly [rad]."""
    return np.arctan2(np.sqrt(1 - e * e) * np.sin(E), np.cos(E) - e)


def position_and_velocity_at(t: float,
                             central_mass: float,
                             semi_major_axis: float,
                             eccentricity: float,
                             period: Optional[float] = None,
                             iterations: int = 5,
                             tolerance: Optional[float] = None
                             ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Position and velocity on a planar ellipse at time ``t``.

    Periapsis lies on +x at t = 0 and the orbit is confined to the XY
    plane. Calling twice with the same arguments gives identical output.

    Velocity is scaled by h/r rather than mu/h, which puts its magnitude
    a factor (1 + e·cos ν) above the vis-viva speed. For Earth that is
    under 2%.

    Args:
        t: Elapsed time since periapsis [s]
        central_mass: Mass of the body at the focus [kg]
        semi_major_axis: Semi-major axis [m]
        eccentricity: Eccentricity (0 <= e < 1)
        period: Orbital period [s]; derived from Kepler's third law if None
        iterations: Newton-Raphson iterations for Kepler's equation
        tolerance: Optional convergence threshold for the Kepler solve

    Returns:
        Tuple of (position [m], velocity [m/s])
    """
    a = semi_major_axis
    e = eccentricity
    if period is None:
        period = orbital_period(a, central_mass)

    M = mean_anomaly(t, period)
    E = solve_kepler(M, e, iterations, tolerance)
    nu = true_anomaly(E, e)
    r = a * (1 - e * np.cos(E))

    position = np.array([r * np.cos(nu), r * np.sin(nu), 0.0])

    # Specific angular momentum
    h = np.sqrt(G * central_mass * a * (1 - e * e))
    velocity = np.array([
        -(h / r) * np.sin(nu),
        (h / r) * (e + np.cos(nu)),
        0.0,
    ])

    return position, velocity


def reference_ellipse(semi_major_axis: float,
                      eccentricity: float,
                      n_points: int = 200) -> np.ndarray:
    """
    Sample the focus-centred ellipse r = a(1-e²)/(1 + e·cos θ).

    Returns:
        Array of shape (n_points + 1, 3); first and last points coincide
    """
    a = semi_major_axis
    e = eccentricity
    theta = np.linspace(0.0, 2 * np.pi, n_points + 1)
    r = a * (1 - e * e) / (1 + e * np.cos(theta))
    return np.column_stack([r * np.cos(theta), r * np.sin(theta), np.zeros_like(theta)])


class KeplerPropagator:
    """
    Analytic propagator bound to one central mass and ellipse.

    Holds no time-dependent state: every query is re-derived from the
    elapsed time alone.
    """

    def __init__(self,
                 central_mass: float,
                 semi_major_axis: float,
                 eccentricity: float,
                 period: Optional[float] = None,
                 iterations: int = 5,
                 tolerance: Optional[float] = None):
        """
        Initialize propagator.

        Args:
            central_mass: Mass at the focus [kg]
            semi_major_axis: Semi-major axis [m]
            eccentricity: Eccentricity (0 <= e < 1)
            period: Fixed period [s], or None for Kepler's third law
            iterations: Newton-Raphson iterations
            tolerance: Optional convergence threshold
        """
        assert 0.0 <= eccentricity < 1.0, "Kepler solver supports elliptical orbits only"
        self.central_mass = central_mass
        self.semi_major_axis = semi_major_axis
        self.eccentricity = eccentricity
        self.period = period if period is not None else orbital_period(semi_major_axis, central_mass)
        self.iterations = iterations
        self.tolerance = tolerance

    @property
    def periapsis(self) -> float:
        return self.semi_major_axis * (1 - self.eccentricity)

    @property
    def apoapsis(self) -> float:
        return self.semi_major_axis * (1 + self.eccentricity)

    def state_at(self, t: float) -> Tuple[np.ndarray, np.ndarray]:
        """Position and velocity at elapsed time ``t``."""
        return position_and_velocity_at(
            t,
            self.central_mass,
            self.semi_major_axis,
            self.eccentricity,
            period=self.period,
            iterations=self.iterations,
            tolerance=self.tolerance,
        )

    def path(self, n_points: int = 200) -> np.ndarray:
        """Reference ellipse for drawing."""
        return reference_ellipse(self.semi_major_axis, self.eccentricity, n_points)
