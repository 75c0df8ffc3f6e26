# MIT License (see LICENSE)
"""
Core type definitions for the phase-space simulation core.

Defines the fundamental data structures:
- PhaseState: a (position, momentum) pair.
- Domain: the rectangular box a visualization keeps its state inside.
- Trail: bounded FIFO history of past states (rendering only).
- Blob: ordered polygon vertices in phase space, evolved vertex by vertex.
- OrbitalElements: (a, e, M) for a bound two-body Kepler orbit.
- Snapshot: the read-only view a renderer consumes each frame.

States are immutable; simulations replace them every frame instead of
mutating them, so a snapshot handed to a renderer can never change under it.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterator
import math

import numpy as np

from .constants import TRAIL_MAX, TRAIL_MIN
from .util import f64


# =============================================================================
# Phase space
# =============================================================================

@dataclass(frozen=True)
class PhaseState:
    """
    A point (q, p) in a 2-D phase space.

    Attributes:
        q: Generalized position.
        p: Generalized momentum (or any conjugate second coordinate).
    """
    q: float
    p: float

    def is_finite(self) -> bool:
        """True when both components are finite numbers."""
        return math.isfinite(self.q) and math.isfinite(self.p)

    def as_array(self) -> np.ndarray:
        """Return [q, p] as a float64 array."""
        return f64((self.q, self.p))

    def __iter__(self) -> Iterator[float]:
        yield self.q
        yield self.p


@dataclass(frozen=True)
class Domain:
    """
    Symmetric phase-space window [-q_max, q_max] x [-p_max, p_max].

    Attributes:
        q_max: Half-width of the position axis.
        p_max: Half-width of the momentum axis.
    """
    q_max: float = 3.2
    p_max: float = 3.2

    def __post_init__(self) -> None:
        if self.q_max <= 0 or self.p_max <= 0:
            raise ValueError(f"Domain extents must be positive, got ({self.q_max}, {self.p_max})")

    def contains(self, state: PhaseState) -> bool:
        """True when the state lies inside the closed box."""
        return abs(state.q) <= self.q_max and abs(state.p) <= self.p_max


# =============================================================================
# Rendering history
# =============================================================================

class Trail:
    """
    Bounded FIFO of recent PhaseState samples.

    Oldest samples are evicted once capacity is reached. The trail is only
    ever read by renderers; no physics reads it back.
    """

    def __init__(self, capacity: int = TRAIL_MAX):
        if not TRAIL_MIN <= capacity <= TRAIL_MAX:
            raise ValueError(
                f"Trail capacity must be in [{TRAIL_MIN}, {TRAIL_MAX}], got {capacity}"
            )
        self.capacity = capacity
        self._samples: deque[PhaseState] = deque(maxlen=capacity)

    def append(self, state: PhaseState) -> None:
        self._samples.append(state)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[PhaseState]:
        return iter(self._samples)

    def as_array(self) -> np.ndarray:
        """Trail samples as an [N, 2] array, oldest first."""
        if not self._samples:
            return np.zeros((0, 2), dtype=np.float64)
        return f64([(s.q, s.p) for s in self._samples])


# =============================================================================
# Blob (phase-space polygon)
# =============================================================================

@dataclass(frozen=True, eq=False)
class Blob:
    """
    Closed polygon in phase space, stored as ordered vertices.

    Attributes:
        vertices: Array [N, 2] of (q, p) pairs ordered around the boundary.
                  The last vertex connects back to the first.
    """
    vertices: np.ndarray

    def __post_init__(self) -> None:
        verts = f64(self.vertices)
        if verts.ndim != 2 or verts.shape[1] != 2:
            raise ValueError(f"Blob vertices must have shape [N, 2], got {verts.shape}")
        if verts.shape[0] < 3:
            raise ValueError("Blob must have at least 3 vertices")
        verts.setflags(write=False)
        object.__setattr__(self, "vertices", verts)

    @classmethod
    def circle(cls, center: PhaseState, radius: float, n: int) -> "Blob":
        """
        Regular n-gon inscribed in a circle of the given radius.

        Vertices run counter-clockwise starting at angle 0.
        """
        if radius <= 0:
            raise ValueError(f"Blob radius must be positive, got {radius}")
        t = 2.0 * np.pi * np.arange(n) / n
        q = center.q + radius * np.cos(t)
        p = center.p + radius * np.sin(t)
        return cls(np.column_stack((q, p)))

    @property
    def q(self) -> np.ndarray:
        return self.vertices[:, 0]

    @property
    def p(self) -> np.ndarray:
        return self.vertices[:, 1]

    def __len__(self) -> int:
        return int(self.vertices.shape[0])


# =============================================================================
# Kepler orbit
# =============================================================================

@dataclass(frozen=True)
class OrbitalElements:
    """
    Elements of a bound two-body orbit, per unit mass.

    Attributes:
        a: Semi-major axis (> 0).
        e: Eccentricity, 0 <= e < 1. Unbound orbits (e >= 1) are not modelled.
        M: Mean anomaly in radians.
        mu: Gravitational parameter GM.
    """
    a: float = 1.0
    e: float = 0.55
    M: float = 0.0
    mu: float = 1.0

    def __post_init__(self) -> None:
        if self.a <= 0:
            raise ValueError(f"Semi-major axis must be positive, got {self.a}")
        if not 0.0 <= self.e < 1.0:
            raise ValueError(f"Eccentricity must be in [0, 1), got {self.e}")
        if self.mu <= 0:
            raise ValueError(f"Gravitational parameter must be positive, got {self.mu}")

    @property
    def b(self) -> float:
        """Semi-minor axis a * sqrt(1 - e^2)."""
        return self.a * math.sqrt(1.0 - self.e * self.e)

    @property
    def mean_motion(self) -> float:
        """n = sqrt(mu / a^3)."""
        return math.sqrt(self.mu / (self.a * self.a * self.a))

    @property
    def perihelion(self) -> float:
        return self.a * (1.0 - self.e)

    @property
    def aphelion(self) -> float:
        return self.a * (1.0 + self.e)

    @property
    def energy(self) -> float:
        """Specific orbital energy H = -mu / (2a)."""
        return -self.mu / (2.0 * self.a)


# =============================================================================
# Render contract
# =============================================================================

@dataclass(frozen=True, eq=False)
class Snapshot:
    """
    Read-only frame output handed to renderers.

    Attributes:
        name: Name of the simulation that produced it.
        time: Simulation time in seconds.
        state: PhaseState, Blob, OrbitSample or scalar-field array.
        diagnostics: Named scalar readouts (energy, area ratio, ...).
        trail: Optional [N, 2] history array.
    """
    name: str
    time: float
    state: Any
    diagnostics: dict[str, Any] = field(default_factory=dict)
    trail: np.ndarray | None = None
