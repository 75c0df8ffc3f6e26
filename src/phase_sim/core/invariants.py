# MIT License (see LICENSE)
"""
Diagnostics: conserved quantities used to judge integration quality.

Everything here is a pure read of simulation state. Nothing computed in
this module is ever fed back into an integrator.

- energy: Hamiltonian of a state under a given field.
- polygon_area: shoelace area of a Blob (Liouville's theorem says it is
  preserved by Hamiltonian flow; any change is numerical error).
- area_ratio / area_drift / is_drifting: A/A0 readout and the 10% flag.
"""
from __future__ import annotations

import numpy as np

from ..constants import AREA_DRIFT_THRESHOLD, EPS
from ..types import Blob, PhaseState
from .fields import VectorField


def energy(state: PhaseState, field: VectorField) -> float:
    """
    Evaluate the field's Hamiltonian at a state.

    For the harmonic oscillator: H = p²/(2m) + k q²/2.
    """
    return float(field.hamiltonian(state.q, state.p))


def polygon_area(blob: Blob | np.ndarray) -> float:
    """
    Area enclosed by ordered polygon vertices (shoelace formula).

    A = |Σ (q_i p_{i+1} - q_{i+1} p_i)| / 2, with the last vertex joined
    back to the first. Orientation does not matter.

    Args:
        blob: A Blob or an [N, 2] vertex array.
    """
    verts = blob.vertices if isinstance(blob, Blob) else np.asarray(blob, dtype=np.float64)
    q = verts[:, 0]
    p = verts[:, 1]
    q_next = np.roll(q, -1)
    p_next = np.roll(p, -1)
    return float(abs(np.sum(q * p_next - q_next * p)) / 2.0)


def regular_polygon_area(radius: float, n: int) -> float:
    """Exact area of a regular n-gon inscribed in a circle: n r² sin(2π/n) / 2."""
    return 0.5 * n * radius * radius * float(np.sin(2.0 * np.pi / n))


def area_ratio(area: float, area0: float) -> float:
    """A / A0, with A0 floored at EPS so a degenerate start cannot divide by zero."""
    return area / max(area0, EPS)


def area_drift(ratio: float) -> float:
    """Relative deviation |A/A0 - 1|."""
    return abs(ratio - 1.0)


def is_drifting(ratio: float, threshold: float = AREA_DRIFT_THRESHOLD) -> bool:
    """True once the area has drifted past the threshold (numerical error)."""
    return area_drift(ratio) > threshold


def centroid(blob: Blob) -> PhaseState:
    """Mean of the blob vertices (the marker drawn at the blob's center)."""
    return PhaseState(float(np.mean(blob.q)), float(np.mean(blob.p)))
