import numpy as np
import pytest
from phase_sim.types import PhaseState
from phase_sim.core.fields import HarmonicField, DampedField, DoubleWellField
from phase_sim.core.integrators import midpoint_step, midpoint_step_arrays, trajectory
from phase_sim.core.invariants import energy


def test_midpoint_single_step_values():
    """
    Harmonic m = k = 1 from (1, 0) with dt = 0.1:
      k1 = (0, -1), mid = (1, -0.05), k2 = (-0.05, -1)
      y' = (0.995, -0.1)
    """
    nxt = midpoint_step(PhaseState(1.0, 0.0), 0.1, HarmonicField())
    assert nxt.q == pytest.approx(0.995, abs=1e-15)
    assert nxt.p == pytest.approx(-0.1, abs=1e-15)


def test_midpoint_is_deterministic():
    field = DoubleWellField()
    s = PhaseState(1.2, 0.3)
    a = midpoint_step(s, 0.016, field)
    b = midpoint_step(s, 0.016, field)
    assert a == b


def test_zero_dt_is_identity():
    s = PhaseState(0.7, -1.1)
    assert midpoint_step(s, 0.0, HarmonicField(m=2.0, k=3.0)) == s


def test_harmonic_energy_conserved_within_two_percent():
    field = HarmonicField(m=1.0, k=1.0)
    s = PhaseState(1.2, 1.2)
    e0 = energy(s, field)
    for _ in range(1000):
        s = midpoint_step(s, 0.01, field)
    e1 = energy(s, field)
    print("harmonic energy", e0, "->", e1)
    assert abs(e1 - e0) / e0 < 0.02


def test_damped_energy_non_increasing():
    field = DampedField(m=1.0, k=1.0, gamma=0.35)
    s = PhaseState(2.2, 0.0)
    energies = [energy(s, field)]
    for _ in range(2000):
        s = midpoint_step(s, 0.01, field)
        energies.append(energy(s, field))

    for before, after in zip(energies, energies[1:]):
        assert after <= before + 1e-9
    assert energies[-1] < 0.1 * energies[0]


def test_array_step_matches_scalar_step():
    field = DoubleWellField()
    q = np.array([1.2, -0.4, 0.0, 2.5])
    p = np.array([0.0, 0.9, -1.3, 0.2])
    qn, pn = midpoint_step_arrays(q, p, 0.02, field)
    for i in range(len(q)):
        s = midpoint_step(PhaseState(q[i], p[i]), 0.02, field)
        assert qn[i] == pytest.approx(s.q, abs=1e-15)
        assert pn[i] == pytest.approx(s.p, abs=1e-15)


def test_trajectory_shape_and_start():
    field = HarmonicField()
    traj = trajectory(PhaseState(1.0, 0.0), 0.05, 40, field)
    assert traj.shape == (41, 2)
    assert traj[0].tolist() == [1.0, 0.0]
    assert traj[1, 0] == pytest.approx(midpoint_step(PhaseState(1.0, 0.0), 0.05, field).q)


def test_trajectory_drops_non_finite_steps():
    # q³ overflows, so every step would produce inf
    start = PhaseState(1e200, 0.0)
    traj = trajectory(start, 0.01, 5, DoubleWellField())
    assert np.all(np.isfinite(traj))
    assert np.all(traj == traj[0])
