import math
import numpy as np
import pytest
from phase_sim.types import Domain
from phase_sim.core.fields import HarmonicField
from phase_sim.core.sampling import (
    ArrowGrid,
    allowed_interval,
    arrow_scale,
    energy_contour,
    refine_wall,
    sample_arrows,
    turning_points,
    visible_arrows,
    well_potential,
)


def test_arrow_grid_layout():
    grid = sample_arrows(HarmonicField(), Domain(3.2, 3.2), nq=15, np_=9)
    assert grid.q.shape == (135,)
    # q-major: the first column shares q = -q_max
    assert np.all(grid.q[:9] == -3.2)
    assert grid.p[0] == -3.2 and grid.p[8] == 3.2
    assert np.allclose(grid.u, grid.p)
    assert np.allclose(grid.v, -grid.q)


def test_arrow_scale_maps_longest_arrow():
    grid = sample_arrows(HarmonicField(), Domain(3.2, 3.2))
    scale = arrow_scale(grid, target=24.0)
    assert scale * float(np.max(grid.magnitude)) == pytest.approx(24.0)


def test_arrow_scale_vanishing_field_is_finite():
    z = np.zeros(4)
    grid = ArrowGrid(q=z, p=z, u=z, v=z)
    scale = arrow_scale(grid)
    assert math.isfinite(scale)
    assert not visible_arrows(grid, scale).any()


def test_energy_contour_is_level_set():
    pts = energy_contour(0.5, m=1.0, k=1.0, steps=100)
    assert pts.shape == (101, 2)
    H = HarmonicField().hamiltonian(pts[:, 0], pts[:, 1])
    assert np.allclose(H, 0.5)
    assert pts[0] == pytest.approx(pts[-1])


def test_energy_contour_negative_energy():
    pts = energy_contour(-1.0)
    assert np.all(pts == 0.0)


def test_well_potentials():
    assert well_potential(2.0) == 2.0
    assert well_potential(2.0, kind="double_well") == 0.0
    assert well_potential(0.0, kind="double_well") == pytest.approx(0.15 * 16)
    with pytest.raises(ValueError):
        well_potential(1.0, kind="morse")


def test_turning_points_harmonic():
    xs = np.linspace(-3.0, 3.0, 601)
    roots = turning_points(xs, well_potential(xs), 0.5)
    assert len(roots) == 2
    assert roots[0] == pytest.approx(-1.0, abs=1e-3)
    assert roots[1] == pytest.approx(1.0, abs=1e-3)


def test_turning_points_double_well():
    xs = np.linspace(-3.5, 3.5, 1401)
    roots = turning_points(xs, well_potential(xs, kind="double_well"), 0.3)
    expected = sorted([-math.sqrt(4 + math.sqrt(2)), -math.sqrt(4 - math.sqrt(2)),
                       math.sqrt(4 - math.sqrt(2)), math.sqrt(4 + math.sqrt(2))])
    assert roots == pytest.approx(expected, abs=1e-3)


def test_no_turning_points_below_minimum():
    xs = np.linspace(-3.0, 3.0, 61)
    assert turning_points(xs, well_potential(xs), -1.0) == []


def test_refine_wall_stays_on_allowed_side():
    wall = refine_wall(well_potential, 0.9, 1.1, 0.5)
    assert wall == pytest.approx(1.0, abs=1e-9)
    assert well_potential(wall) < 0.5


def test_allowed_interval_first_well():
    def double_well(x):
        return well_potential(x, kind="double_well")

    left, right = allowed_interval(double_well, -4.0, 4.0, 0.3)
    assert left == pytest.approx(-math.sqrt(4 + math.sqrt(2)), abs=1e-6)
    assert right == pytest.approx(-math.sqrt(4 - math.sqrt(2)), abs=1e-6)


def test_allowed_interval_without_turning_points():
    # E above V at both edges: the whole range is allowed
    assert allowed_interval(well_potential, -4.0, 4.0, 10.0) == (-4.0, 4.0)
    # E below the minimum: nothing is allowed, the full range comes back
    assert allowed_interval(well_potential, -4.0, 4.0, -1.0) == (-4.0, 4.0)
