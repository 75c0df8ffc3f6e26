# MIT License (see LICENSE)
"""
Static samplings of fields and potentials for display.

Unlike the integrators these do not advance anything; they evaluate a
field or potential on a grid once per parameter change:

- sample_arrows / arrow_scale: the quiver of a phase-space flow.
- energy_contour: level set H = E of the harmonic oscillator.
- well_potential / turning_points / allowed_interval: the energy-landscape
  widget.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import math

import numpy as np

from ..constants import EPS
from ..types import Domain
from .fields import VectorField


@dataclass(frozen=True, eq=False)
class ArrowGrid:
    """
    Field samples on a regular grid, flattened q-major.

    Attributes:
        q, p: Sample positions.
        u, v: Field components (dq/dt, dp/dt) at each sample.
    """
    q: np.ndarray
    p: np.ndarray
    u: np.ndarray
    v: np.ndarray

    @property
    def magnitude(self) -> np.ndarray:
        return np.hypot(self.u, self.v)


def sample_arrows(field: VectorField, domain: Domain, nq: int = 15, np_: int = 9) -> ArrowGrid:
    """Evaluate a field on an nq x np_ grid spanning the domain."""
    qs = np.linspace(-domain.q_max, domain.q_max, nq)
    ps = np.linspace(-domain.p_max, domain.p_max, np_)
    qq, pp = np.meshgrid(qs, ps, indexing="ij")
    q = qq.ravel()
    p = pp.ravel()
    u, v = field.rates(q, p)
    return ArrowGrid(q=q, p=p, u=np.broadcast_to(u, q.shape).astype(np.float64),
                     v=np.broadcast_to(v, q.shape).astype(np.float64))


def arrow_scale(grid: ArrowGrid, target: float = 24.0) -> float:
    """
    Factor that maps the longest arrow to `target` display units.

    A vanishing field is treated as magnitude EPS, so the result is always
    finite.
    """
    max_mag = max(EPS, float(np.max(grid.magnitude)) if grid.magnitude.size else 0.0)
    return target / max_mag


def visible_arrows(grid: ArrowGrid, scale: float) -> np.ndarray:
    """Boolean mask of arrows long enough to draw after scaling."""
    return grid.magnitude * scale >= EPS


def energy_contour(E: float, m: float = 1.0, k: float = 1.0, steps: int = 260) -> np.ndarray:
    """
    Closed level set p²/2m + k q²/2 = E as [steps + 1, 2] points.

    q = sqrt(2E/k) cos t,  p = sqrt(2mE) sin t. Negative energies give a
    single point at the origin.
    """
    E = max(0.0, E)
    q_amp = math.sqrt(2.0 * E / k)
    p_amp = math.sqrt(2.0 * m * E)
    t = 2.0 * np.pi * np.arange(steps + 1) / steps
    return np.column_stack((q_amp * np.cos(t), p_amp * np.sin(t)))


def well_potential(x, kind: str = "harmonic", k: float = 1.0, a: float = 0.15, b: float = 2.0):
    """
    Potential energy V(x) for the landscape widget.

    harmonic:    V = k x² / 2
    double_well: V = a (x² - b²)²
    """
    if kind == "harmonic":
        return 0.5 * k * x * x
    if kind == "double_well":
        u = x * x - b * b
        return a * u * u
    raise ValueError(f"Unknown potential kind: '{kind}'")


def turning_points(xs: np.ndarray, vs: np.ndarray, E: float, min_separation: float = 1e-2) -> list[float]:
    """
    Positions where V(x) = E on a sampled potential.

    Sign changes of V - E between neighbouring samples are located by linear
    interpolation; exact zeros on a sample are taken as is. Roots closer
    than min_separation are merged, keeping the first.
    """
    f = np.asarray(vs, dtype=np.float64) - E
    xs = np.asarray(xs, dtype=np.float64)
    roots: list[float] = []
    for i in range(len(xs) - 1):
        f0, f1 = f[i], f[i + 1]
        if f0 == 0.0:
            roots.append(float(xs[i]))
        if f0 * f1 < 0.0:
            t = f0 / (f0 - f1)
            roots.append(float(xs[i] + t * (xs[i + 1] - xs[i])))
    roots.sort()
    out: list[float] = []
    for r in roots:
        if not out or abs(r - out[-1]) > min_separation:
            out.append(r)
    return out


def refine_wall(potential: Callable[[float], float], inside: float, outside: float, E: float,
                iterations: int = 48) -> float:
    """
    Bisect towards the turning point between an allowed and a forbidden x.

    Requires V(inside) < E <= V(outside). The returned point always has
    V < E, so a ball placed on it still has a non-zero speed.
    """
    for _ in range(iterations):
        mid = 0.5 * (inside + outside)
        if potential(mid) < E:
            inside = mid
        else:
            outside = mid
    return inside


def allowed_interval(potential: Callable[[float], float], x_min: float, x_max: float, E: float,
                     samples: int = 700) -> tuple[float, float]:
    """
    The first interval of [x_min, x_max] where V(x) <= E.

    The walls come from the first two turning points, sharpened with
    refine_wall. With fewer than two turning points (E above V at a domain
    edge) the first contiguous run of allowed samples is used instead, and
    an energy below the whole curve gives back the full range.
    """
    xs = np.linspace(x_min, x_max, samples)
    vs = np.array([potential(float(x)) for x in xs])
    roots = turning_points(xs, vs, E)
    if len(roots) >= 2:
        dx = xs[1] - xs[0]
        left, right = roots[0], roots[1]
        if potential(left + dx) < E < potential(left - dx):
            left = refine_wall(potential, left + dx, left - dx, E)
        if potential(right - dx) < E < potential(right + dx):
            right = refine_wall(potential, right - dx, right + dx, E)
        return left, right

    left, right = x_min, x_max
    found = False
    for x, v in zip(xs, vs):
        if not found and v <= E:
            left = float(x)
            found = True
        if found and v > E:
            right = float(x)
            break
    return left, right
