"""
Dynamics Module
===============

Analytic Kepler propagation and numerical gravity integration.
"""

from .kepler import KeplerPropagator, position_and_velocity_at, solve_kepler
from .gravity import GravityIntegrator, gravity_step, specific_energy
from .integrators import SymplecticEuler, ExplicitEuler, RK4Integrator

__all__ = [
    'KeplerPropagator',
    'position_and_velocity_at',
    'solve_kepler',
    'GravityIntegrator',
    'gravity_step',
    'specific_energy',
    'SymplecticEuler',
    'ExplicitEuler',
    'RK4Integrator',
]
