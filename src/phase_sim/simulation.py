# MIT License (see LICENSE)
"""
State-owning simulations driven one frame at a time.

A Simulation owns its state exclusively. The AnimationDriver hands it a
clamped frame delta through advance(); renderers only ever see immutable
Snapshot objects. Parameter changes coming from the UI go through
configure(), which validates and stages them; the driver calls
apply_pending() between frames so a step never sees a half-applied update.

Changing a physical parameter is a discontinuous change of the system and
resets the state to its initial condition. Changing playback speed does
not.

Available simulations:
- PhaseSimulation: one particle in phase space, with a trail.
- BlobSimulation: a polygon of particles (Liouville's theorem).
- OrbitSimulation: a Kepler orbit advanced by mean anomaly.
- AdvectionSimulation: semi-Lagrangian transport of a 1-D scalar field.
- LandscapeSimulation: a ball rolling between the turning points of V(x).
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any
import logging
import math

import numpy as np

from .constants import (
    KEPLER_ACCURATE_E,
    LANDSCAPE_SAMPLES,
    LANDSCAPE_SPEED_SCALE,
    LANDSCAPE_X_MAX,
    TRAIL_MAX,
)
from .core.advection import AdvectionField, VelocityProfile, gaussian_bump
from .core.boundary import BoundaryPolicy, ClampBoundary, ReflectBoundary
from .core.fields import FIELD_KINDS, DoubleWellField, FlowComponent, MeanMotionField, VectorField
from .core.integrators import midpoint_step, midpoint_step_arrays
from .core.invariants import area_ratio, centroid, energy, is_drifting, polygon_area
from .core.kepler import gauge_max, sample_orbit
from .core.sampling import allowed_interval, turning_points, well_potential
from .types import Blob, Domain, OrbitalElements, PhaseState, Snapshot, Trail
from .util import all_finite, clamp

logger = logging.getLogger(__name__)


class Simulation(ABC):
    """
    Base class for anything an AnimationDriver can tick.

    Attributes:
        name: Label used in snapshots and log messages.
        speed: Playback multiplier applied to the frame delta.
        time: Simulation time advanced so far (speed included).
    """

    #: configure() keys that never reset state
    playback_params: frozenset[str] = frozenset({"speed"})

    def __init__(self, name: str, speed: float = 1.0):
        self.name = name
        self.speed = float(speed)
        self.time = 0.0
        self.rejected_steps = 0
        self._pending: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Parameter updates
    # ------------------------------------------------------------------

    def configure(self, **changes: Any) -> None:
        """
        Stage parameter changes for the next frame boundary.

        Values are validated immediately (invalid input raises here, in
        the UI call, not inside the frame loop). Later calls override
        earlier ones for the same key.
        """
        unknown = set(changes) - self.accepted_params()
        if unknown:
            raise ValueError(f"Unknown parameter(s) for {type(self).__name__}: {sorted(unknown)}")
        self._validate(changes)
        self._pending.update(changes)

    def apply_pending(self) -> bool:
        """
        Apply all staged changes at once.

        Returns:
            True if the changes reset the state.
        """
        if not self._pending:
            return False
        changes, self._pending = self._pending, {}
        if "speed" in changes:
            self.speed = float(changes.pop("speed"))
        if not changes:
            return False
        self._apply(changes)
        self.reset()
        logger.info(f"{self.name}: parameters {sorted(changes)} changed, state reset")
        return True

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def accepted_params(self) -> set[str]:
        return set(self.playback_params)

    def _validate(self, changes: dict[str, Any]) -> None:
        speed = changes.get("speed")
        if speed is not None and (not math.isfinite(speed) or speed < 0):
            raise ValueError(f"Speed must be a non-negative finite number, got {speed}")

    def _apply(self, changes: dict[str, Any]) -> None:
        """Install validated non-playback changes. Subclasses override."""

    @staticmethod
    def _check_types(changes: dict[str, Any], expected: dict[str, type]) -> None:
        for key, cls in expected.items():
            if key in changes and not isinstance(changes[key], cls):
                raise TypeError(
                    f"Parameter '{key}' must be a {cls.__name__}, got {type(changes[key]).__name__}"
                )

    # ------------------------------------------------------------------
    # Frame contract
    # ------------------------------------------------------------------

    @abstractmethod
    def advance(self, dt: float) -> bool:
        """
        Advance by one frame of length dt (already clamped by the driver).

        Returns:
            False if the step was rejected and the state left unchanged.
        """
        ...

    @abstractmethod
    def reset(self) -> None:
        """Return to the configured initial condition."""
        ...

    @abstractmethod
    def snapshot(self) -> Snapshot:
        """Immutable view of the current state and its diagnostics."""
        ...

    def _reject(self, reason: str) -> bool:
        self.rejected_steps += 1
        logger.debug(f"{self.name}: step rejected at t={self.time:.4f} ({reason})")
        return False


class PhaseSimulation(Simulation):
    """
    A single particle moving through phase space under a VectorField.

    Each frame: midpoint step with dt * speed, reject non-finite results,
    apply the boundary policy, record the trail.
    """

    def __init__(
        self,
        field: VectorField,
        initial: PhaseState = PhaseState(1.2, 1.2),
        domain: Domain | None = None,
        boundary: BoundaryPolicy | None = None,
        speed: float = 1.0,
        trail_capacity: int | None = TRAIL_MAX,
        name: str = "particle",
    ):
        super().__init__(name, speed)
        self.field = field
        self.domain = domain or Domain()
        self.boundary = boundary or ReflectBoundary()
        self.initial = initial
        self._check_types(vars(self), self._object_params)
        self.trail = Trail(trail_capacity) if trail_capacity else None
        self.state = initial
        self.reset()

    _field_keys = frozenset(name for cls in FIELD_KINDS.values() for name in cls.__dataclass_fields__)
    _object_params = {"field": VectorField, "initial": PhaseState, "domain": Domain, "boundary": BoundaryPolicy}

    def accepted_params(self) -> set[str]:
        return super().accepted_params() | {"field", "initial", "domain", "boundary"} | self._field_keys

    def _validate(self, changes: dict[str, Any]) -> None:
        super()._validate(changes)
        self._check_types(changes, self._object_params)
        field = changes.get("field", self._pending.get("field", self.field))
        field_params = {k: changes.pop(k) for k in list(changes) if k in self._field_keys}
        if field_params:
            unsupported = set(field_params) - set(field.params())
            if unsupported:
                raise ValueError(f"{field.kind} field has no parameter(s) {sorted(unsupported)}")
            # building the field runs its own validation
            changes["field"] = replace(field, **field_params)

    def _apply(self, changes: dict[str, Any]) -> None:
        if "field" in changes:
            new_field = changes["field"]
            if new_field.kind != self.field.kind:
                logger.info(f"{self.name}: field switched {self.field.kind} -> {new_field.kind}")
            elif self._component(new_field) != self._component(self.field):
                logger.info(
                    f"{self.name}: flow component switched {self._component(self.field)} -> {self._component(new_field)}"
                )
            self.field = new_field
        self.initial = changes.get("initial", self.initial)
        self.domain = changes.get("domain", self.domain)
        self.boundary = changes.get("boundary", self.boundary)

    @staticmethod
    def _component(field: VectorField) -> str:
        return getattr(field, "component", FlowComponent.FULL).value

    def select_field(self, field: VectorField) -> None:
        """Explicit mode switch to another field; resets at the next frame."""
        self.configure(field=field)

    def reset(self) -> None:
        self.state = self.boundary.apply(self.initial, self.domain)
        self.time = 0.0
        if self.trail is not None:
            self.trail.clear()
            self.trail.append(self.state)

    def advance(self, dt: float) -> bool:
        h = dt * self.speed
        nxt = midpoint_step(self.state, h, self.field)
        if not nxt.is_finite():
            return self._reject("non-finite state")
        nxt = self.boundary.apply(nxt, self.domain)
        self.state = nxt
        self.time += h
        if self.trail is not None:
            self.trail.append(nxt)
        return True

    def energy(self) -> float:
        return energy(self.state, self.field)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            name=self.name,
            time=self.time,
            state=self.state,
            diagnostics={
                "energy": self.energy(),
                "field": self.field.kind,
                "component": self._component(self.field),
            },
            trail=self.trail.as_array() if self.trail is not None else None,
        )


class BlobSimulation(Simulation):
    """
    A closed polygon of phase-space points, each advanced independently.

    The area ratio A/A0 is reported every frame. Under a Hamiltonian field
    it should stay near 1; drift past 10% is flagged as numerical error.
    """

    def __init__(
        self,
        field: VectorField | None = None,
        center: PhaseState = PhaseState(1.2, 0.0),
        radius: float = 0.45,
        n_vertices: int = 90,
        domain: Domain | None = None,
        boundary: BoundaryPolicy | None = None,
        speed: float = 1.2,
        name: str = "blob",
    ):
        super().__init__(name, speed)
        self.field = field or DoubleWellField()
        self.domain = domain or Domain()
        self.boundary = boundary or ClampBoundary()
        self.center = center
        self.radius = float(radius)
        self.n_vertices = int(n_vertices)
        self._validate(dict(vars(self)))
        self.reset()

    _object_params = {"field": VectorField, "center": PhaseState, "domain": Domain, "boundary": BoundaryPolicy}

    def accepted_params(self) -> set[str]:
        return super().accepted_params() | {"field", "center", "radius", "n_vertices", "domain", "boundary"}

    def _validate(self, changes: dict[str, Any]) -> None:
        super()._validate(changes)
        self._check_types(changes, self._object_params)
        if "radius" in changes and changes["radius"] <= 0:
            raise ValueError(f"Blob radius must be positive, got {changes['radius']}")
        if "n_vertices" in changes and changes["n_vertices"] < 3:
            raise ValueError(f"Blob must have at least 3 vertices, got {changes['n_vertices']}")

    def _apply(self, changes: dict[str, Any]) -> None:
        for key in ("field", "center", "domain", "boundary"):
            if key in changes:
                setattr(self, key, changes[key])
        if "radius" in changes:
            self.radius = float(changes["radius"])
        if "n_vertices" in changes:
            self.n_vertices = int(changes["n_vertices"])

    def initial_blob(self) -> Blob:
        """Circle around the center, with the center kept within 70% of the domain."""
        c = PhaseState(
            clamp(self.center.q, -0.7 * self.domain.q_max, 0.7 * self.domain.q_max),
            clamp(self.center.p, -0.7 * self.domain.p_max, 0.7 * self.domain.p_max),
        )
        return Blob.circle(c, self.radius, self.n_vertices)

    def reset(self) -> None:
        self.blob = self.initial_blob()
        self.area0 = polygon_area(self.blob)
        self.time = 0.0

    def advance(self, dt: float) -> bool:
        h = dt * self.speed
        q, p = midpoint_step_arrays(self.blob.q, self.blob.p, h, self.field)
        if not all_finite(q, p):
            return self._reject("non-finite vertex")
        q, p = self.boundary.apply_arrays(q, p, self.domain)
        self.blob = Blob(np.column_stack((q, p)))
        self.time += h
        return True

    def area(self) -> float:
        return polygon_area(self.blob)

    def snapshot(self) -> Snapshot:
        area = self.area()
        ratio = area_ratio(area, self.area0)
        return Snapshot(
            name=self.name,
            time=self.time,
            state=self.blob,
            diagnostics={
                "area": area,
                "area0": self.area0,
                "area_ratio": ratio,
                "drifting": is_drifting(ratio),
                "centroid": centroid(self.blob),
            },
        )


class OrbitSimulation(Simulation):
    """
    Two-body Kepler orbit animated through its mean anomaly.

    The mean anomaly is advanced by the shared midpoint integrator under a
    MeanMotionField and wrapped to [0, 2π). Position and energy split are
    recomputed from it every frame by solving Kepler's equation.
    """

    def __init__(self, elements: OrbitalElements | None = None, speed: float = 1.0, name: str = "orbit"):
        super().__init__(name, speed)
        self.elements = elements or OrbitalElements()
        self._check_eccentricity()
        self.reset()

    def accepted_params(self) -> set[str]:
        return super().accepted_params() | {"a", "e", "mu"}

    def _validate(self, changes: dict[str, Any]) -> None:
        super()._validate(changes)
        orbit_params = {k: changes[k] for k in ("a", "e", "mu") if k in changes}
        if orbit_params:
            # raises ValueError for e outside [0, 1) and non-positive a, mu
            replace(self.elements, **orbit_params)

    def _apply(self, changes: dict[str, Any]) -> None:
        self.elements = replace(self.elements, **changes)
        self._check_eccentricity()

    def _check_eccentricity(self) -> None:
        if self.elements.e >= KEPLER_ACCURATE_E:
            logger.warning(f"{self.name}: eccentricity {self.elements.e} is past the Kepler solver's accurate range")

    @property
    def field(self) -> MeanMotionField:
        return MeanMotionField(mu=self.elements.mu, a=self.elements.a)

    def reset(self) -> None:
        self.elements = replace(self.elements, M=0.0)
        self.time = 0.0

    def advance(self, dt: float) -> bool:
        h = dt * self.speed
        nxt = midpoint_step(PhaseState(self.elements.M, 0.0), h, self.field)
        if not nxt.is_finite():
            return self._reject("non-finite mean anomaly")
        self.elements = replace(self.elements, M=math.fmod(nxt.q, 2.0 * math.pi))
        self.time += h
        return True

    def snapshot(self) -> Snapshot:
        sample = sample_orbit(self.elements)
        top = gauge_max(self.elements)
        return Snapshot(
            name=self.name,
            time=self.time,
            state=sample,
            diagnostics={
                "kinetic": sample.kinetic,
                "potential": sample.potential,
                "energy": self.elements.energy,
                "gauge_kinetic": clamp(sample.kinetic / top, 0.0, 1.0),
                "gauge_potential": clamp(abs(sample.potential) / top, 0.0, 1.0),
                "gauge_energy": clamp(abs(self.elements.energy) / top, 0.0, 1.0),
            },
        )


class AdvectionSimulation(Simulation):
    """
    Frame wrapper around an AdvectionField.

    Each frame performs exactly one step of the field's own fixed dt; the
    frame delta only decides whether a frame happened (dt > 0). The
    field's speed multiplies the velocity, so the playback speed here
    stays at 1.
    """

    playback_params = frozenset({"speed", "diffusion"})

    def __init__(
        self,
        n: int = 700,
        profile: VelocityProfile | str = VelocityProfile.SHEAR,
        speed: float = 0.9,
        diffusion: bool = False,
        dt: float = 0.002,
        name: str = "advection",
    ):
        super().__init__(name, 1.0)
        self.field = AdvectionField(n=n, profile=profile, speed=speed, diffusion=diffusion, dt=dt)

    def accepted_params(self) -> set[str]:
        return super().accepted_params() | {"profile"}

    def _validate(self, changes: dict[str, Any]) -> None:
        super()._validate(changes)
        if "profile" in changes and not callable(changes["profile"]):
            changes["profile"] = VelocityProfile(changes["profile"])

    def apply_pending(self) -> bool:
        # speed and diffusion belong to the field, not to playback
        if "diffusion" in self._pending:
            self.field.diffusion = bool(self._pending.pop("diffusion"))
        if "speed" in self._pending:
            self.field.speed = float(self._pending.pop("speed"))
        return super().apply_pending()

    def _apply(self, changes: dict[str, Any]) -> None:
        if "profile" in changes:
            self.field.profile = changes["profile"]

    def reset(self) -> None:
        self.field.c = gaussian_bump(self.field.n)
        self.field.time = 0.0
        self.time = 0.0

    def advance(self, dt: float) -> bool:
        if dt <= 0.0:
            return True
        prev_c, prev_time = self.field.c, self.field.time
        self.field.step()
        if not all_finite(self.field.c):
            self.field.c, self.field.time = prev_c, prev_time
            return self._reject("non-finite concentration")
        self.time = self.field.time
        return True

    def snapshot(self) -> Snapshot:
        return Snapshot(
            name=self.name,
            time=self.time,
            state=self.field.c.copy(),
            diagnostics={
                "mass": self.field.total_mass(),
                "peak": self.field.peak_position(),
                "velocity": self.field.velocity(),
            },
        )


class LandscapeSimulation(Simulation):
    """
    A ball rolling in a 1-D potential well at fixed total energy E.

    The speed comes from energy conservation, |v| = sqrt(2 (E - V(x)) / m),
    scaled by a constant display factor. The ball moves between the walls
    of the first allowed interval and is mirrored back into it when a frame
    would carry it past a wall, reversing direction.

    Attributes:
        x: Ball position.
        direction: +1 moving right, -1 moving left.
        walls: (x_left, x_right) of the interval the ball lives in.
    """

    def __init__(
        self,
        potential: str = "harmonic",
        E: float = 2.0,
        m: float = 1.0,
        speed: float = 1.0,
        name: str = "landscape",
    ):
        super().__init__(name, speed)
        self.potential = potential
        self.E = float(E)
        self.m = float(m)
        self._validate(dict(vars(self)))
        self.reset()

    def accepted_params(self) -> set[str]:
        return super().accepted_params() | {"potential", "E", "m"}

    def _validate(self, changes: dict[str, Any]) -> None:
        super()._validate(changes)
        if "potential" in changes:
            # raises ValueError for an unknown kind
            well_potential(0.0, kind=changes["potential"])
        if "E" in changes and not math.isfinite(changes["E"]):
            raise ValueError(f"Energy must be finite, got {changes['E']}")
        if "m" in changes and not changes["m"] > 0:
            raise ValueError(f"Mass must be positive, got {changes['m']}")

    def _apply(self, changes: dict[str, Any]) -> None:
        if "potential" in changes and changes["potential"] != self.potential:
            logger.info(f"{self.name}: potential switched {self.potential} -> {changes['potential']}")
        self.potential = changes.get("potential", self.potential)
        self.E = float(changes.get("E", self.E))
        self.m = float(changes.get("m", self.m))

    def V(self, x: float) -> float:
        return float(well_potential(x, kind=self.potential))

    def speed_at(self, x: float) -> float:
        """Display speed |v| of the ball at x (zero where V > E)."""
        return math.sqrt(max(0.0, 2.0 * (self.E - self.V(x)) / self.m)) * LANDSCAPE_SPEED_SCALE

    def turning_points(self) -> list[float]:
        xs = np.linspace(-LANDSCAPE_X_MAX, LANDSCAPE_X_MAX, LANDSCAPE_SAMPLES)
        return turning_points(xs, well_potential(xs, kind=self.potential), self.E)

    def reset(self) -> None:
        self.walls = allowed_interval(self.V, -LANDSCAPE_X_MAX, LANDSCAPE_X_MAX, self.E, LANDSCAPE_SAMPLES)
        self.x = clamp(0.0, *self.walls)
        self.direction = 1
        self.time = 0.0

    def advance(self, dt: float) -> bool:
        h = dt * self.speed
        x_left, x_right = self.walls
        nxt = self.x + self.direction * self.speed_at(self.x) * h
        if not math.isfinite(nxt):
            return self._reject("non-finite position")
        if nxt > x_right:
            nxt = x_right - (nxt - x_right)
            self.direction = -1
        elif nxt < x_left:
            nxt = x_left + (x_left - nxt)
            self.direction = 1
        self.x = clamp(nxt, x_left, x_right)
        self.time += h
        return True

    def snapshot(self) -> Snapshot:
        potential = self.V(self.x)
        kinetic = max(0.0, self.E - potential)
        return Snapshot(
            name=self.name,
            time=self.time,
            state=PhaseState(self.x, self.direction * math.sqrt(2.0 * self.m * kinetic)),
            diagnostics={
                "potential": potential,
                "kinetic": kinetic,
                "energy": self.E,
                "kind": self.potential,
                "walls": self.walls,
                "direction": self.direction,
            },
        )
