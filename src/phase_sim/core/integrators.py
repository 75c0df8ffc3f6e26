# MIT License (see LICENSE)
"""
Explicit midpoint (second-order Runge-Kutta) integration.

Every animated system in the package advances through the same scheme:

    k1  = f(y)
    mid = y + (dt/2) k1
    k2  = f(mid)
    y'  = y + dt k2

Local error is O(dt³) per step, global error O(dt²). The scheme is
deterministic: identical (state, dt, field) inputs give bit-identical
outputs.

The integrator does not clamp dt. Callers are expected to pass a frame
delta already truncated by FrameClock (see phase_sim.driver); a raw gap of
several seconds would make any explicit scheme unstable.

Reference:
    https://en.wikipedia.org/wiki/Midpoint_method
"""
from __future__ import annotations

import numpy as np

from ..types import Blob, PhaseState
from .fields import VectorField


def midpoint_step(state: PhaseState, dt: float, field: VectorField) -> PhaseState:
    """
    Advance a single phase-space state by dt.

    Args:
        state: Current (q, p).
        dt: Time step. Not clamped here.
        field: Vector field supplying the derivatives.

    Returns:
        The new state. May contain non-finite values if the field diverges;
        callers decide whether to accept it.
    """
    q, p = state.q, state.p
    dq1, dp1 = field.rates(q, p)
    h = 0.5 * dt
    dq2, dp2 = field.rates(q + h * dq1, p + h * dp1)
    return PhaseState(float(q + dt * dq2), float(p + dt * dp2))


def midpoint_step_arrays(
    q: np.ndarray,
    p: np.ndarray,
    dt: float,
    field: VectorField,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Vectorized midpoint step over many independent points.

    Each element is advanced exactly as midpoint_step would advance it on
    its own; no information flows between elements.
    """
    dq1, dp1 = field.rates(q, p)
    h = 0.5 * dt
    dq2, dp2 = field.rates(q + h * dq1, p + h * dp1)
    return q + dt * dq2, p + dt * dp2


def step_blob(blob: Blob, dt: float, field: VectorField) -> Blob:
    """Advance every Blob vertex independently by one midpoint step."""
    q, p = midpoint_step_arrays(blob.q, blob.p, dt, field)
    return Blob(np.column_stack((q, p)))


def trajectory(
    state: PhaseState,
    dt: float,
    steps: int,
    field: VectorField,
) -> np.ndarray:
    """
    Precompute a trajectory of `steps` midpoint steps.

    Returns:
        Array [steps + 1, 2] starting with the initial state. A step that
        would produce a non-finite sample is dropped and the previous
        state is repeated.
    """
    out = np.empty((steps + 1, 2), dtype=np.float64)
    out[0] = (state.q, state.p)
    current = state
    for i in range(1, steps + 1):
        nxt = midpoint_step(current, dt, field)
        if nxt.is_finite():
            current = nxt
        out[i] = (current.q, current.p)
    return out
