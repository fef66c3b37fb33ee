#!/usr/bin/env python3
"""
Orrery Simulation Example
=========================

Example script demonstrating the simulation core from the console.
"""

import logging
import numpy as np
import time

from orrery.core.config import SimulationConfig
from orrery.core.simulator import Simulator
from orrery.display.scene import format_stats


def run_quick_simulation(days: float = 30.0, speed: float = 1.0):
    """Run a short simulation and print telemetry."""
    print("=" * 60)
    print("Sun / Earth / Moon Quick Simulation")
    print("=" * 60)

    config = SimulationConfig()
    sim = Simulator(config)
    sim.set_speed(speed)

    print(f"\nSimulation Configuration:")
    print(f"  Time step: {config.time_step_seconds:.0f} s x {sim.speed_multiplier:.1f}")
    print(f"  Earth period: {config.effective_earth_period / 86400:.2f} days")
    print(f"  Moon integrator: {config.moon_integrator}")
    print(f"  Kepler iterations: {config.kepler_iterations}")

    moon = sim.state.moon
    print(f"\nInitial Moon state (relative to Earth):")
    print(f"  Distance: {moon.distance_m / 1000:,.0f} km")
    print(f"  Speed: {moon.speed_m_s / 1000:.4f} km/s")

    print("\nRunning simulation...")
    start_time = time.time()

    def progress(p):
        if p > 0:
            print(f"  Progress: {p*100:.0f}%", end='\r')

    history = sim.run(duration_seconds=days * 86400, progress_callback=progress)

    elapsed = time.time() - start_time
    print(f"\nSimulation complete in {elapsed:.2f}s")
    print(f"  Simulated {len(history)} steps")

    final = history[-1]
    stats = format_stats(final.telemetry)
    print(f"\nFinal State:")
    print(f"  Time: {final.time_s:.0f} s ({final.time_s / 86400:.1f} days)")
    print(f"  Day of year: {stats['day_of_year']}")
    print(f"  Earth-Sun distance: {stats['distance']}")
    print(f"  Earth orbital speed: {stats['orbital_speed']}")
    print(f"  Moon distance: {stats['moon_distance']}")
    print(f"  Moon energy: {sim.moon_energy():.1f} J/kg")


def run_annual_orbit():
    """Run one full Earth revolution."""
    print("\n" + "=" * 60)
    print("Annual Orbit Scenario")
    print("=" * 60)

    from orrery.scenarios.annual_orbit import AnnualOrbitScenario

    scenario = AnnualOrbitScenario()
    scenario.run()

    print(scenario.get_summary())


def run_lunar_stability(n_steps: int = 10000):
    """Compare Moon energy drift across integrators."""
    print("\n" + "=" * 60)
    print("Lunar Stability Scenario")
    print("=" * 60)

    from orrery.scenarios.lunar_stability import LunarStabilityScenario, LunarStabilityScenarioConfig

    scenario = LunarStabilityScenario(LunarStabilityScenarioConfig(n_steps=n_steps))
    scenario.run()

    print(scenario.get_summary())


def demonstrate_kepler():
    """Show Kepler solver residuals per iteration count."""
    print("\n" + "=" * 60)
    print("Kepler Solver Demonstration")
    print("=" * 60)

    from orrery.dynamics.kepler import solve_kepler

    e = SimulationConfig().earth.eccentricity
    M = np.linspace(0, 2 * np.pi, 720, endpoint=False)

    print(f"\nEccentricity {e}:")
    print(f"{'Iterations':>10} {'Max residual':>14}")
    for iterations in (1, 2, 3, 5):
        E = np.array([solve_kepler(m, e, iterations) for m in M])
        residual = np.max(np.abs(E - e * np.sin(E) - M))
        print(f"{iterations:>10} {residual:>14.3e}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Orrery Simulation Examples")
    parser.add_argument('--all', action='store_true', help='Run all examples')
    parser.add_argument('--quick', action='store_true', help='Run quick simulation')
    parser.add_argument('--annual', action='store_true', help='Run annual orbit scenario')
    parser.add_argument('--lunar', action='store_true', help='Run lunar stability scenario')
    parser.add_argument('--kepler', action='store_true', help='Demonstrate Kepler solver')

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)-7s  %(message)s")

    # Default to quick if no args
    if not any(vars(args).values()):
        args.quick = True

    if args.all or args.quick:
        run_quick_simulation()

    if args.all or args.annual:
        run_annual_orbit()

    if args.all or args.lunar:
        run_lunar_stability()

    if args.all or args.kepler:
        demonstrate_kepler()

    print("\n" + "=" * 60)
    print("Examples complete!")
    print("=" * 60)
