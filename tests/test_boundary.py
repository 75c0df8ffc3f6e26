import numpy as np
import pytest
from phase_sim.types import Domain, PhaseState
from phase_sim.core.boundary import (
    ReflectBoundary,
    ClampBoundary,
    WrapBoundary,
    NoBoundary,
    make_boundary,
)

DOMAIN = Domain(3.2, 3.2)


def test_reflect_mirrors_across_wall():
    out = ReflectBoundary().apply(PhaseState(3.5, 1.0), DOMAIN)
    assert out.q == pytest.approx(2.9)
    assert out.p == 1.0

    out = ReflectBoundary().apply(PhaseState(-3.4, 0.0), DOMAIN)
    assert out.q == pytest.approx(-3.0)


def test_reflect_does_not_invert_momentum():
    """A mirrored positional clamp, not an elastic bounce."""
    out = ReflectBoundary().apply(PhaseState(3.3, 2.0), DOMAIN)
    assert out.p == 2.0

    out = ReflectBoundary().apply(PhaseState(0.5, 3.6), DOMAIN)
    assert out.q == 0.5
    assert out.p == pytest.approx(2.8)


def test_inside_states_untouched():
    s = PhaseState(1.0, -2.0)
    for policy in (ReflectBoundary(), ClampBoundary(), WrapBoundary(), NoBoundary()):
        assert policy.apply(s, DOMAIN) is s


@pytest.mark.parametrize("name", ["reflect", "clamp", "wrap"])
def test_policies_are_idempotent(name):
    policy = make_boundary(name)
    for s in (PhaseState(3.5, -0.2), PhaseState(-4.0, 3.9), PhaseState(0.1, -3.25)):
        once = policy.apply(s, DOMAIN)
        twice = policy.apply(once, DOMAIN)
        assert once == twice


def test_reflect_large_overshoot_stays_inside():
    out = ReflectBoundary().apply(PhaseState(10.0, -25.0), DOMAIN)
    assert DOMAIN.contains(out)


def test_clamp_pins_to_wall():
    out = ClampBoundary().apply(PhaseState(5.0, -5.0), DOMAIN)
    assert (out.q, out.p) == (3.2, -3.2)


def test_wrap_is_periodic():
    out = WrapBoundary().apply(PhaseState(3.3, 0.0), DOMAIN)
    assert out.q == pytest.approx(-3.1)


def test_array_form_matches_scalar_form():
    policy = ReflectBoundary()
    q = np.array([3.5, -3.4, 0.2])
    p = np.array([0.0, 3.7, -3.3])
    qa, pa = policy.apply_arrays(q, p, DOMAIN)
    for i in range(3):
        s = policy.apply(PhaseState(q[i], p[i]), DOMAIN)
        assert qa[i] == pytest.approx(s.q)
        assert pa[i] == pytest.approx(s.p)


def test_no_boundary_passes_through():
    s = PhaseState(100.0, -100.0)
    assert NoBoundary().apply(s, DOMAIN) is s


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        make_boundary("bounce")
