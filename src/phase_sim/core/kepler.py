# MIT License (see LICENSE)
"""
Kepler's equation and bound-orbit geometry.

solve_kepler converts a mean anomaly M into the eccentric anomaly E by
Newton-Raphson on

    f(E) = E - e sin E - M,     f'(E) = 1 - e cos E

seeded with E0 = M and run for a fixed KEPLER_ITERATIONS steps with no
convergence test, so every frame costs the same. Eight iterations are
plenty for e < 0.9. The solver never raises and never reports
non-convergence; for 0 <= e < 1 it returns a converged-enough value.
Behaviour for e >= 1 (unbound orbits) is undefined.

The focus sits at the origin and the major axis lies along x:

    x = a (cos E - e),  y = b sin E,  b = a sqrt(1 - e²)

Speeds and energies are per unit mass, from the vis-viva equation
v² = mu (2/r - 1/a).
"""
from __future__ import annotations
from dataclasses import dataclass
import math

from ..constants import KEPLER_EPS, KEPLER_ITERATIONS
from ..types import OrbitalElements
from ..util import safe_denominator


def solve_kepler(M: float, e: float, iterations: int = KEPLER_ITERATIONS) -> float:
    """
    Eccentric anomaly E solving E - e sin E = M.

    Args:
        M: Mean anomaly in radians.
        e: Eccentricity, valid for 0 <= e < 1.
        iterations: Fixed Newton iteration count.

    Returns:
        E in radians. solve_kepler(0, e) == 0 and solve_kepler(M, 0) == M
        exactly.
    """
    E = M
    for _ in range(iterations):
        f = E - e * math.sin(E) - M
        fp = safe_denominator(1.0 - e * math.cos(E), KEPLER_EPS)
        E = E - f / fp
    return E


@dataclass(frozen=True)
class OrbitSample:
    """
    Derived quantities of an orbit at one mean anomaly.

    Attributes:
        M: Mean anomaly.
        E: Eccentric anomaly.
        x, y: Position relative to the focus.
        r: Distance to the focus.
        speed: Orbital speed from vis-viva.
        kinetic: T = v²/2.
        potential: V = -mu/r.
        energy: T + V (equals -mu/2a up to rounding).
    """
    M: float
    E: float
    x: float
    y: float
    r: float
    speed: float
    kinetic: float
    potential: float
    energy: float


def sample_orbit(elements: OrbitalElements) -> OrbitSample:
    """Recompute position, radius and energy split for the current M."""
    a, e, mu = elements.a, elements.e, elements.mu
    E = solve_kepler(elements.M, e)
    x = a * (math.cos(E) - e)
    y = elements.b * math.sin(E)
    r = math.sqrt(x * x + y * y)
    # r >= a(1 - e) > 0 for a bound orbit
    v2 = max(0.0, mu * (2.0 / r - 1.0 / a))
    kinetic = 0.5 * v2
    potential = -mu / r
    return OrbitSample(
        M=elements.M,
        E=E,
        x=x,
        y=y,
        r=r,
        speed=math.sqrt(v2),
        kinetic=kinetic,
        potential=potential,
        energy=kinetic + potential,
    )


def gauge_max(elements: OrbitalElements) -> float:
    """
    Fixed upper bound for kinetic/potential gauges over a whole orbit.

    Taken at perihelion, where both |V| and T peak, with 15% headroom.
    It depends only on the elements so gauges do not jitter frame to frame.
    """
    mu, a = elements.mu, elements.a
    r_peri = elements.perihelion
    v_peri = mu / r_peri
    t_peri = 0.5 * mu * (2.0 / r_peri - 1.0 / a)
    return max(v_peri, t_peri, abs(elements.energy)) * 1.15


def ellipse_points(elements: OrbitalElements, steps: int = 360) -> list[tuple[float, float]]:
    """Closed outline of the orbit, parameterized by eccentric anomaly."""
    a, e, b = elements.a, elements.e, elements.b
    pts = []
    for i in range(steps + 1):
        t = 2.0 * math.pi * i / steps
        pts.append((a * (math.cos(t) - e), b * math.sin(t)))
    return pts
