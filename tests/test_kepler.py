import math
from dataclasses import replace
import numpy as np
import pytest
from phase_sim.types import OrbitalElements
from phase_sim.core.kepler import solve_kepler, sample_orbit, gauge_max, ellipse_points


def test_zero_mean_anomaly_gives_zero():
    for e in (0.0, 0.3, 0.55, 0.89):
        assert solve_kepler(0.0, e) == 0.0


def test_circular_orbit_is_identity():
    for M in (0.0, 0.4, 1.7, math.pi, 5.9):
        assert solve_kepler(M, 0.0) == M


@pytest.mark.parametrize("e", [0.1, 0.3, 0.55, 0.7])
def test_kepler_residual_small(e):
    for M in np.linspace(-math.pi, math.pi, 25):
        E = solve_kepler(float(M), e)
        residual = E - e * math.sin(E) - M
        assert abs(residual) < 1e-9


def test_sample_energy_matches_elements():
    el = OrbitalElements(a=1.3, e=0.55, mu=1.0)
    for M in np.linspace(0.0, 2 * math.pi, 17):
        s = sample_orbit(replace(el, M=float(M)))
        assert s.energy == pytest.approx(el.energy, abs=1e-12)
        assert s.kinetic >= 0.0
        assert s.potential < 0.0


def test_perihelion_and_aphelion_distances():
    el = OrbitalElements(a=1.0, e=0.55)
    peri = sample_orbit(el)
    assert peri.r == pytest.approx(0.45)
    assert peri.x == pytest.approx(0.45)
    assert peri.y == pytest.approx(0.0, abs=1e-15)

    aph = sample_orbit(OrbitalElements(a=1.0, e=0.55, M=math.pi))
    assert aph.r == pytest.approx(1.55)


def test_gauge_max_bounds_whole_orbit():
    el = OrbitalElements(a=1.0, e=0.55, mu=1.0)
    top = gauge_max(el)
    for M in np.linspace(0.0, 2 * math.pi, 50):
        s = sample_orbit(OrbitalElements(a=1.0, e=0.55, mu=1.0, M=float(M)))
        assert s.kinetic <= top
        assert abs(s.potential) <= top


def test_ellipse_outline_closed():
    pts = ellipse_points(OrbitalElements(a=2.0, e=0.5), steps=90)
    assert len(pts) == 91
    assert pts[0] == pytest.approx(pts[-1])
    assert pts[0][0] == pytest.approx(2.0 * (1.0 - 0.5))


@pytest.mark.parametrize("kwargs", [{"e": 1.0}, {"e": -0.1}, {"a": 0.0}, {"mu": -1.0}])
def test_invalid_elements_rejected(kwargs):
    with pytest.raises(ValueError):
        OrbitalElements(**kwargs)
