"""
Orrery Simulation Framework
===========================

Sun / Earth / Moon orbital visualization core.

Model:
- Sun fixed at the origin
- Earth on an analytically solved Kepler ellipse (no accumulated error)
- Moon integrated numerically under Earth's gravity alone, relative to Earth

Components:
- Simulation clock scaled by a speed multiplier
- Analytic elliptical propagator (Kepler's equation)
- Semi-implicit Euler gravity integrator
- Display adapter, trails and matplotlib viewer
"""

__version__ = "1.0.0"

from orrery.core.simulator import Simulator, Snapshot, Telemetry
from orrery.core.state import SimulationState, create_initial_state
from orrery.core.time_manager import SimulationClock

__all__ = [
    'Simulator',
    'Snapshot',
    'Telemetry',
    'SimulationState',
    'SimulationClock',
    'create_initial_state',
]
