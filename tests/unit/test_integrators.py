import numpy as np
import pytest

from orrery.dynamics.integrators import ExplicitEuler, FixedStepIntegrator, RK4Integrator, SymplecticEuler


def spring(r):
    return -r


def oscillator_energy(r, v):
    return 0.5 * np.sum(v**2, axis=-1) + 0.5 * np.sum(r**2, axis=-1)


def test_integrate_returns_full_trajectory():
    positions, velocities = SymplecticEuler(spring).integrate(np.array([1.0]), np.array([0.0]), 0.1, 50)
    assert positions.shape == (51, 1)
    assert velocities.shape == (51, 1)
    assert positions[0, 0] == 1.0


def test_symplectic_euler_single_step_order():
    r_new, v_new = SymplecticEuler(spring).step(np.array([1.0]), np.array([0.0]), 0.5)
    assert v_new[0] == pytest.approx(-0.5)
    assert r_new[0] == pytest.approx(0.75)


def test_explicit_euler_single_step_order():
    r_new, v_new = ExplicitEuler(spring).step(np.array([1.0]), np.array([0.0]), 0.5)
    assert v_new[0] == pytest.approx(-0.5)
    assert r_new[0] == pytest.approx(1.0)


def test_symplectic_bounded_where_explicit_grows():
    r0, v0 = np.array([1.0, 0.0]), np.array([0.0, 1.0])
    dt, n = 0.05, 4000

    r_s, v_s = SymplecticEuler(spring).integrate(r0, v0, dt, n)
    r_e, v_e = ExplicitEuler(spring).integrate(r0, v0, dt, n)

    e0 = oscillator_energy(r0, v0)
    assert np.max(np.abs(oscillator_energy(r_s, v_s) - e0)) < 0.05 * e0
    assert oscillator_energy(r_e[-1], v_e[-1]) > 2 * e0


def test_rk4_tracks_exact_solution():
    dt, n = 0.01, 628
    r, v = RK4Integrator(spring).integrate(np.array([1.0]), np.array([0.0]), dt, n)
    t = dt * n
    assert r[-1, 0] == pytest.approx(np.cos(t), abs=1e-8)
    assert v[-1, 0] == pytest.approx(-np.sin(t), abs=1e-8)


def test_base_class_step_not_implemented():
    with pytest.raises(NotImplementedError):
        FixedStepIntegrator(spring).step(np.zeros(1), np.zeros(1), 0.1)
