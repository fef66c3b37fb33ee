"""
Simulation Scenarios
====================

End-to-end runs of the orrery core.
"""

from .annual_orbit import AnnualOrbitScenario, AnnualOrbitScenarioConfig
from .lunar_stability import LunarStabilityScenario, LunarStabilityScenarioConfig
from .frozen_clock import FrozenClockScenario, FrozenClockScenarioConfig

__all__ = [
    'AnnualOrbitScenario',
    'AnnualOrbitScenarioConfig',
    'LunarStabilityScenario',
    'LunarStabilityScenarioConfig',
    'FrozenClockScenario',
    'FrozenClockScenarioConfig',
]
