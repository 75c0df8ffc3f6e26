# MIT License (see LICENSE)
"""
Vector fields: the right-hand side of each simulated system.

A VectorField maps a phase-space point (q, p) to its time derivative
(dq/dt, dp/dt). Fields are frozen dataclasses, so the parameters bound to a
field cannot change while an integrator is evaluating it; changing a
parameter means building a new field (see Simulation.configure).

Available fields:
- HarmonicField:  dq = p/m,   dp = -k q            H = p²/2m + k q²/2
- DampedField:    dq = p/m,   dp = -k q - γ p      (H of the undamped part)
- DoubleWellField: dq = p,    dp = -q³             H = p²/2 + q⁴/4
- MeanMotionField: dM = n,    dp = 0               (Kepler mean anomaly)
- VanDerPolField: dx = y,     dy = μ(1 - x²) y - x

All rate functions are written elementwise, so the same field drives a
single PhaseState or a whole array of Blob vertices.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any
import math

from ..types import PhaseState


class FlowComponent(str, Enum):
    """Which part of the Hamiltonian flow a HarmonicField exposes."""
    FULL = "full"
    QDOT = "qdot"
    PDOT = "pdot"


class VectorField(ABC):
    """
    Abstract base for time-derivative functions of a 2-D state.

    Subclasses implement rates() and hamiltonian(); both must be pure
    functions of their arguments and the field's frozen parameters.
    """

    kind: str = ""

    @abstractmethod
    def rates(self, q, p):
        """
        Return (dq/dt, dp/dt) at (q, p).

        Args:
            q: Position, a float or an array.
            p: Momentum, same shape as q.
        """
        ...

    @abstractmethod
    def hamiltonian(self, q, p):
        """Energy-like scalar at (q, p). Elementwise on arrays."""
        ...

    def derivative(self, state: PhaseState) -> PhaseState:
        """Time derivative of a single state."""
        dq, dp = self.rates(state.q, state.p)
        return PhaseState(float(dq), float(dp))

    def params(self) -> dict[str, Any]:
        """Bound parameters as a plain dict (for presets and display)."""
        out = asdict(self)
        for key, value in out.items():
            if isinstance(value, Enum):
                out[key] = value.value
        return out


@dataclass(frozen=True)
class HarmonicField(VectorField):
    """
    Undamped harmonic oscillator.

    Attributes:
        m: Mass.
        k: Spring constant.
        component: Restrict the flow to its q-dot or p-dot part. Anything
                   other than FULL is a teaching view, not a Hamiltonian flow.
    """
    m: float = 1.0
    k: float = 1.0
    component: FlowComponent = FlowComponent.FULL

    kind = "harmonic"

    def __post_init__(self) -> None:
        if self.m <= 0:
            raise ValueError(f"Mass must be positive, got {self.m}")
        if self.k <= 0:
            raise ValueError(f"Spring constant must be positive, got {self.k}")
        object.__setattr__(self, "component", FlowComponent(self.component))

    @property
    def omega(self) -> float:
        """Angular frequency sqrt(k/m)."""
        return math.sqrt(self.k / self.m)

    def rates(self, q, p):
        qdot = p / self.m
        pdot = -self.k * q
        if self.component is FlowComponent.QDOT:
            return qdot, 0.0 * pdot
        if self.component is FlowComponent.PDOT:
            return 0.0 * qdot, pdot
        return qdot, pdot

    def hamiltonian(self, q, p):
        return p * p / (2.0 * self.m) + 0.5 * self.k * q * q


@dataclass(frozen=True)
class DampedField(VectorField):
    """
    Linearly damped harmonic oscillator.

    The energy reported is that of the undamped oscillator, which decays
    monotonically for gamma > 0.
    """
    m: float = 1.0
    k: float = 1.0
    gamma: float = 0.35

    kind = "damped"

    def __post_init__(self) -> None:
        if self.m <= 0:
            raise ValueError(f"Mass must be positive, got {self.m}")
        if self.k <= 0:
            raise ValueError(f"Spring constant must be positive, got {self.k}")
        if self.gamma < 0:
            raise ValueError(f"Damping must be non-negative, got {self.gamma}")

    def rates(self, q, p):
        return p / self.m, -self.k * q - self.gamma * p

    def hamiltonian(self, q, p):
        return p * p / (2.0 * self.m) + 0.5 * self.k * q * q


@dataclass(frozen=True)
class DoubleWellField(VectorField):
    """Quartic oscillator H = p²/2 + q⁴/4 (the Liouville blob flow)."""

    kind = "double_well"

    def rates(self, q, p):
        return p, -(q * q * q)

    def hamiltonian(self, q, p):
        q2 = q * q
        return 0.5 * p * p + 0.25 * q2 * q2


@dataclass(frozen=True)
class MeanMotionField(VectorField):
    """
    Kepler mean anomaly advancing at the mean motion n = sqrt(mu / a³).

    q carries the mean anomaly M, p is unused. The geometry (eccentric
    anomaly, radius, speed) is derived from M by phase_sim.core.kepler.
    """
    mu: float = 1.0
    a: float = 1.0

    kind = "kepler"

    def __post_init__(self) -> None:
        if self.mu <= 0 or self.a <= 0:
            raise ValueError(f"mu and a must be positive, got mu={self.mu}, a={self.a}")

    @property
    def n(self) -> float:
        return math.sqrt(self.mu / (self.a * self.a * self.a))

    def rates(self, q, p):
        return 0.0 * q + self.n, 0.0 * p

    def hamiltonian(self, q, p):
        return 0.0 * q - self.mu / (2.0 * self.a)


@dataclass(frozen=True)
class VanDerPolField(VectorField):
    """
    Van der Pol oscillator, a non-conservative limit-cycle system.

    hamiltonian() reports (x² + y²)/2, which is not conserved.
    """
    mu: float = 2.0

    kind = "van_der_pol"

    def rates(self, q, p):
        return p, self.mu * (1.0 - q * q) * p - q

    def hamiltonian(self, q, p):
        return 0.5 * (q * q + p * p)


FIELD_KINDS: dict[str, type[VectorField]] = {
    cls.kind: cls
    for cls in (HarmonicField, DampedField, DoubleWellField, MeanMotionField, VanDerPolField)
}


def make_field(kind: str, **params: Any) -> VectorField:
    """
    Build a field by its kind name.

    Raises:
        ValueError: If the kind is unknown.
    """
    try:
        cls = FIELD_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown field kind: '{kind}'") from None
    return cls(**params)
