# MIT License (see LICENSE)
"""
Boundary policies that keep a state inside its visualization Domain.

These are display aids, not physics. The default ReflectBoundary mirrors
an escaping coordinate back across the wall:

    q' = q_max - (q - q_max)        if q >  q_max
    q' = -q_max + (-q_max - q)      if q < -q_max

and the same for p, each axis independently. The conjugate momentum is
NOT negated, so this is a mirrored positional clamp rather than an elastic
collision. Widgets depend on the resulting bounce shape; keep it.

A single mirror can still land outside the box when an axis overshoots
by more than a full box width. That only happens for unclamped frame
deltas, and the result is then clamped to the wall.
"""
from __future__ import annotations
from abc import ABC, abstractmethod

import numpy as np

from ..types import Blob, Domain, PhaseState


def _reflect_axis(x, limit: float):
    """Mirror x across +limit / -limit. Elementwise on arrays."""
    if isinstance(x, np.ndarray):
        out = np.where(x > limit, limit - (x - limit), x)
        out = np.where(out < -limit, -limit + (-limit - out), out)
        return np.clip(out, -limit, limit)
    if x > limit:
        x = limit - (x - limit)
    if x < -limit:
        x = -limit + (-limit - x)
    return max(-limit, min(limit, x))


def _wrap_axis(x, limit: float):
    """Periodic wrap into [-limit, limit)."""
    span = 2.0 * limit
    return np.mod(x + limit, span) - limit if isinstance(x, np.ndarray) else ((x + limit) % span) - limit


class BoundaryPolicy(ABC):
    """Maps a state that may have left the domain back into it."""

    name: str = ""

    @abstractmethod
    def apply_arrays(self, q, p, domain: Domain):
        """Apply the policy to coordinates (floats or arrays)."""
        ...

    def apply(self, state: PhaseState, domain: Domain) -> PhaseState:
        """
        Apply the policy to a single state.

        States already inside the domain are returned unchanged.
        """
        if domain.contains(state):
            return state
        q, p = self.apply_arrays(state.q, state.p, domain)
        return PhaseState(float(q), float(p))

    def apply_blob(self, blob: Blob, domain: Domain) -> Blob:
        """Apply the policy to every vertex of a blob."""
        q, p = self.apply_arrays(blob.q, blob.p, domain)
        return Blob(np.column_stack((q, p)))


class ReflectBoundary(BoundaryPolicy):
    """Mirror escaping coordinates back inside (momentum is not inverted)."""

    name = "reflect"

    def apply_arrays(self, q, p, domain: Domain):
        return _reflect_axis(q, domain.q_max), _reflect_axis(p, domain.p_max)


class ClampBoundary(BoundaryPolicy):
    """Pin escaping coordinates to the wall."""

    name = "clamp"

    def apply_arrays(self, q, p, domain: Domain):
        if isinstance(q, np.ndarray):
            return (
                np.clip(q, -domain.q_max, domain.q_max),
                np.clip(p, -domain.p_max, domain.p_max),
            )
        return (
            max(-domain.q_max, min(domain.q_max, q)),
            max(-domain.p_max, min(domain.p_max, p)),
        )


class WrapBoundary(BoundaryPolicy):
    """Treat the domain as a torus."""

    name = "wrap"

    def apply_arrays(self, q, p, domain: Domain):
        return _wrap_axis(q, domain.q_max), _wrap_axis(p, domain.p_max)


class NoBoundary(BoundaryPolicy):
    """Leave states untouched."""

    name = "none"

    def apply(self, state: PhaseState, domain: Domain) -> PhaseState:
        return state

    def apply_arrays(self, q, p, domain: Domain):
        return q, p


BOUNDARY_POLICIES: dict[str, type[BoundaryPolicy]] = {
    cls.name: cls for cls in (ReflectBoundary, ClampBoundary, WrapBoundary, NoBoundary)
}


def make_boundary(name: str) -> BoundaryPolicy:
    """Build a boundary policy by name ("reflect", "clamp", "wrap", "none")."""
    try:
        return BOUNDARY_POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown boundary policy: '{name}'") from None
