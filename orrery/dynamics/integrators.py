"""
Numerical Integrators
=====================

Fixed-step integrators for second-order systems r'' = a(r).
"""

import numpy as np
from typing import Callable, Tuple


AccelerationFunc = Callable[[np.ndarray], np.ndarray]


class FixedStepIntegrator:
    """
    Base class for fixed-step position/velocity integrators.

    Subclasses implement :meth:`step`.
    """

    def __init__(self, acceleration_func: AccelerationFunc):
        """
        Initialize integrator.

        Args:
            acceleration_func: a = dv/dt = f(r)
        """
        self.acceleration = acceleration_func

    def step(self, r: np.ndarray, v: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        raise NotImplementedError

    def integrate(self,
                  r0: np.ndarray,
                  v0: np.ndarray,
                  dt: float,
                  n_steps: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Apply ``n_steps`` steps from (r0, v0).

        Args:
            r0: Initial position
            v0: Initial velocity
            dt: Time step
            n_steps: Number of steps

        Returns:
            Tuple of (positions, velocities), each of shape (n_steps + 1, dim)
        """
        positions = np.zeros((n_steps + 1, len(r0)))
        velocities = np.zeros((n_steps + 1, len(v0)))
        positions[0] = r0
        velocities[0] = v0

        r = np.array(r0, dtype=float)
        v = np.array(v0, dtype=float)
        for i in range(1, n_steps + 1):
            r, v = self.step(r, v, dt)
            positions[i] = r
            velocities[i] = v

        return positions, velocities


class SymplecticEuler(FixedStepIntegrator):
    """
    Symplectic (semi-implicit) Euler integrator.

    Velocity is updated first and the new velocity advances the position.
    This ordering keeps orbital energy bounded over long runs.
    """

    def step(self, r: np.ndarray, v: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        v_new = v + self.acceleration(r) * dt
        r_new = r + v_new * dt
        return r_new, v_new


class ExplicitEuler(FixedStepIntegrator):
    """
    Plain forward Euler.

    Position advances with the old velocity; orbits spiral outward.
    Kept as a comparison baseline.
    """

    def step(self, r: np.ndarray, v: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        a = self.acceleration(r)
        r_new = r + v * dt
        v_new = v + a * dt
        return r_new, v_new


class RK4Integrator(FixedStepIntegrator):
    """
    4th order Runge-Kutta integrator on the (r, v) pair.
    """

    def step(self, r: np.ndarray, v: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        k1_r = v
        k1_v = self.acceleration(r)

        k2_r = v + 0.5 * dt * k1_v
        k2_v = self.acceleration(r + 0.5 * dt * k1_r)

        k3_r = v + 0.5 * dt * k2_v
        k3_v = self.acceleration(r + 0.5 * dt * k2_r)

        k4_r = v + dt * k3_v
        k4_v = self.acceleration(r + dt * k3_r)

        r_new = r + (dt / 6) * (k1_r + 2*k2_r + 2*k3_r + k4_r)
        v_new = v + (dt / 6) * (k1_v + 2*k2_v + 2*k3_v + k4_v)
        return r_new, v_new
