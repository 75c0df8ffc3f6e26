# MIT License (see LICENSE)
"""
JSON widget presets.

A preset describes how to build a widget's simulations: which field with
which parameters, the domain, the boundary policy, the initial condition
and playback settings. It never stores evolved state; reloading a preset
always starts from the initial condition.

JSON Schema Overview:
---------------------
{
  "name": string,                    # Optional label
  "max_dt": float,                   # Frame delta cap, default 0.05
  "simulations": [
    {
      "type": "particle",
      "name": string,
      "field": {"kind": "harmonic" | "damped" | "double_well" |
                        "kepler" | "van_der_pol", ...parameters},
      "initial": [q, p],             # Default [1.2, 1.2]
      "domain": [q_max, p_max],      # Default [3.2, 3.2]
      "boundary": "reflect" | "clamp" | "wrap" | "none",
      "speed": float,                # Default 1.0
      "trail": int | null            # Trail capacity, default 240
    },
    {
      "type": "blob",
      "field": {...}, "center": [q, p], "radius": float,
      "vertices": int, "domain": [...], "boundary": "clamp", "speed": float
    },
    {
      "type": "orbit",
      "a": float, "e": float, "mu": float, "speed": float
    },
    {
      "type": "advection",
      "n": int, "profile": "uniform" | "shear" | "sine",
      "speed": float, "diffusion": bool, "dt": float
    },
    {
      "type": "landscape",
      "potential": "harmonic" | "double_well", "E": float,
      "m": float, "speed": float
    }
  ]
}
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Any
import copy
import json
import logging

from ..constants import ADVECTION_DT, ADVECTION_N, MAX_FRAME_DT, TRAIL_MAX
from ..core.advection import VelocityProfile
from ..core.boundary import make_boundary
from ..core.fields import VectorField, make_field
from ..simulation import (
    AdvectionSimulation,
    BlobSimulation,
    LandscapeSimulation,
    OrbitSimulation,
    PhaseSimulation,
    Simulation,
)
from ..types import Domain, OrbitalElements, PhaseState

if TYPE_CHECKING:
    from ..driver import AnimationDriver, FrameScheduler
    from ..renderer.adapter import RendererAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# Built-in presets, one per widget
# =============================================================================

BUILTIN_PRESETS: dict[str, dict[str, Any]] = {
    "hamiltonian_flow": {
        "max_dt": 0.05,
        "simulations": [{
            "type": "particle",
            "name": "particle",
            "field": {"kind": "harmonic", "m": 1.0, "k": 1.0, "component": "full"},
            "initial": [1.2, 1.2],
            "domain": [3.2, 3.2],
            "boundary": "reflect",
            "trail": None,
        }],
    },
    "harmonic_portrait": {
        "max_dt": 0.03,
        "simulations": [{
            "type": "particle",
            "name": "oscillator",
            "field": {"kind": "harmonic", "m": 1.0, "k": 1.0},
            # E = 1.5 started at the turning point q = sqrt(2E/k)
            "initial": [1.7320508075688772, 0.0],
            "domain": [2.8284271247461903, 2.8284271247461903],
            "boundary": "reflect",
            "trail": None,
        }],
    },
    "conservative_vs_dissipative": {
        "max_dt": 0.03,
        "simulations": [
            {
                "type": "particle",
                "name": "conservative",
                "field": {"kind": "harmonic", "m": 1.0, "k": 1.0},
                "initial": [2.2, 0.0],
                "domain": [3.2, 3.2],
                "boundary": "reflect",
                "speed": 1.2,
                "trail": 240,
            },
            {
                "type": "particle",
                "name": "dissipative",
                "field": {"kind": "damped", "m": 1.0, "k": 1.0, "gamma": 0.35},
                "initial": [2.2, 0.0],
                "domain": [3.2, 3.2],
                "boundary": "reflect",
                "speed": 1.2,
                "trail": 240,
            },
        ],
    },
    "liouville_blob": {
        "max_dt": 0.025,
        "simulations": [{
            "type": "blob",
            "name": "blob",
            "field": {"kind": "double_well"},
            "center": [1.2, 0.0],
            "radius": 0.45,
            "vertices": 90,
            "domain": [3.2, 3.2],
            "boundary": "clamp",
            "speed": 1.2,
        }],
    },
    "orbit_energy": {
        "max_dt": 0.03,
        "simulations": [{"type": "orbit", "name": "orbit", "a": 1.0, "e": 0.55, "mu": 1.0}],
    },
    "coffee_advection": {
        "max_dt": 0.05,
        "simulations": [{
            "type": "advection",
            "name": "coffee",
            "n": 700,
            "profile": "shear",
            "speed": 0.9,
            "diffusion": False,
            "dt": 0.002,
        }],
    },
    "van_der_pol": {
        "max_dt": 0.05,
        "simulations": [{
            "type": "particle",
            "name": "limit_cycle",
            "field": {"kind": "van_der_pol", "mu": 2.0},
            "initial": [1.0, 0.0],
            "domain": [3.2, 3.2],
            "boundary": "none",
            "trail": 240,
        }],
    },
    "energy_landscape": {
        "max_dt": 0.03,
        "simulations": [{"type": "landscape", "name": "ball", "potential": "harmonic", "E": 2.0}],
    },
}


# =============================================================================
# Loading
# =============================================================================

def load_preset_raw(path: str) -> dict[str, Any]:
    """
    Load raw JSON data from a preset file without building anything.

    Args:
        path: Absolute or relative path to the JSON file.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_preset(
    path: str,
    scheduler: "FrameScheduler | None" = None,
    renderer: "RendererAdapter | None" = None,
) -> "AnimationDriver":
    """
    Load a preset file and build a ready-to-start AnimationDriver.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a simulation definition is invalid.
    """
    logger.info(f"Loading preset from: {path}")
    return preset_from_json(load_preset_raw(path), scheduler=scheduler, renderer=renderer)


def builtin_preset(
    name: str,
    scheduler: "FrameScheduler | None" = None,
    renderer: "RendererAdapter | None" = None,
) -> "AnimationDriver":
    """Build the driver for one of BUILTIN_PRESETS by name."""
    try:
        data = BUILTIN_PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset: '{name}' (known: {sorted(BUILTIN_PRESETS)})") from None
    return preset_from_json(copy.deepcopy(data), scheduler=scheduler, renderer=renderer)


def preset_from_json(
    data: dict[str, Any],
    scheduler: "FrameScheduler | None" = None,
    renderer: "RendererAdapter | None" = None,
) -> "AnimationDriver":
    """Build an AnimationDriver and its simulations from preset data."""
    # Import locally to avoid circular import (driver imports simulation)
    from ..driver import AnimationDriver

    sims_data = data.get("simulations", [])
    if not sims_data:
        raise ValueError("Preset defines no simulations")
    sims = [simulation_from_json(d) for d in sims_data]
    max_dt = float(data.get("max_dt", MAX_FRAME_DT))
    return AnimationDriver(*sims, scheduler=scheduler, renderer=renderer, max_dt=max_dt)


def field_from_json(d: dict[str, Any]) -> VectorField:
    """Parse {"kind": ..., **params} into a VectorField."""
    if "kind" not in d:
        raise ValueError("Field definition missing required 'kind' field.")
    params = {k: v for k, v in d.items() if k != "kind"}
    return make_field(d["kind"], **params)


def simulation_from_json(d: dict[str, Any]) -> Simulation:
    """
    Parse a single simulation definition.

    Raises:
        ValueError: On a missing or unknown type or invalid parameters.
    """
    sim_type = d.get("type")
    name = d.get("name", sim_type)

    if sim_type == "particle":
        if "field" not in d:
            raise ValueError("Particle definition missing required 'field' field.")
        trail = d.get("trail", TRAIL_MAX)
        return PhaseSimulation(
            field=field_from_json(d["field"]),
            initial=PhaseState(*map(float, d.get("initial", [1.2, 1.2]))),
            domain=Domain(*map(float, d.get("domain", [3.2, 3.2]))),
            boundary=make_boundary(d.get("boundary", "reflect")),
            speed=float(d.get("speed", 1.0)),
            trail_capacity=int(trail) if trail is not None else None,
            name=name,
        )

    if sim_type == "blob":
        return BlobSimulation(
            field=field_from_json(d.get("field", {"kind": "double_well"})),
            center=PhaseState(*map(float, d.get("center", [1.2, 0.0]))),
            radius=float(d.get("radius", 0.45)),
            n_vertices=int(d.get("vertices", 90)),
            domain=Domain(*map(float, d.get("domain", [3.2, 3.2]))),
            boundary=make_boundary(d.get("boundary", "clamp")),
            speed=float(d.get("speed", 1.2)),
            name=name,
        )

    if sim_type == "orbit":
        elements = OrbitalElements(
            a=float(d.get("a", 1.0)),
            e=float(d.get("e", 0.55)),
            mu=float(d.get("mu", 1.0)),
        )
        return OrbitSimulation(elements=elements, speed=float(d.get("speed", 1.0)), name=name)

    if sim_type == "advection":
        n = int(d.get("n", ADVECTION_N))
        if n < 2:
            raise ValueError(f"Advection grid size must be at least 2, got {n}")
        return AdvectionSimulation(
            n=n,
            profile=VelocityProfile(d.get("profile", "shear")),
            speed=float(d.get("speed", 0.9)),
            diffusion=bool(d.get("diffusion", False)),
            dt=float(d.get("dt", ADVECTION_DT)),
            name=name,
        )

    if sim_type == "landscape":
        return LandscapeSimulation(
            potential=d.get("potential", "harmonic"),
            E=float(d.get("E", 2.0)),
            m=float(d.get("m", 1.0)),
            speed=float(d.get("speed", 1.0)),
            name=name,
        )

    raise ValueError(f"Unknown simulation type: '{sim_type}'")


# =============================================================================
# Saving
# =============================================================================

def field_to_json(field: VectorField) -> dict[str, Any]:
    return {"kind": field.kind, **field.params()}


def simulation_to_json(sim: Simulation) -> dict[str, Any]:
    """
    Serialize a simulation's configuration (not its evolved state).

    Raises:
        TypeError: For simulation types or velocity profiles that have no
                   JSON form (e.g. a custom velocity callable).
    """
    if isinstance(sim, PhaseSimulation):
        return {
            "type": "particle",
            "name": sim.name,
            "field": field_to_json(sim.field),
            "initial": [sim.initial.q, sim.initial.p],
            "domain": [sim.domain.q_max, sim.domain.p_max],
            "boundary": sim.boundary.name,
            "speed": sim.speed,
            "trail": sim.trail.capacity if sim.trail is not None else None,
        }
    if isinstance(sim, BlobSimulation):
        return {
            "type": "blob",
            "name": sim.name,
            "field": field_to_json(sim.field),
            "center": [sim.center.q, sim.center.p],
            "radius": sim.radius,
            "vertices": sim.n_vertices,
            "domain": [sim.domain.q_max, sim.domain.p_max],
            "boundary": sim.boundary.name,
            "speed": sim.speed,
        }
    if isinstance(sim, OrbitSimulation):
        el = sim.elements
        return {"type": "orbit", "name": sim.name, "a": el.a, "e": el.e, "mu": el.mu, "speed": sim.speed}
    if isinstance(sim, AdvectionSimulation):
        profile = sim.field.profile
        if not isinstance(profile, VelocityProfile):
            raise TypeError("Cannot serialize a custom velocity profile")
        return {
            "type": "advection",
            "name": sim.name,
            "n": sim.field.n,
            "profile": profile.value,
            "speed": sim.field.speed,
            "diffusion": sim.field.diffusion,
            "dt": sim.field.dt,
        }
    if isinstance(sim, LandscapeSimulation):
        return {
            "type": "landscape",
            "name": sim.name,
            "potential": sim.potential,
            "E": sim.E,
            "m": sim.m,
            "speed": sim.speed,
        }
    raise TypeError(f"Cannot serialize unknown simulation type: {type(sim)}")


def preset_to_json(driver: "AnimationDriver", name: str | None = None) -> dict[str, Any]:
    """Serialize a driver's simulations and frame cap to preset data."""
    result: dict[str, Any] = {
        "max_dt": driver.clock.max_dt,
        "simulations": [simulation_to_json(s) for s in driver.simulations],
    }
    if name is not None:
        result["name"] = name
    return result


def save_preset(driver: "AnimationDriver", path: str, indent: int = 2) -> None:
    """Save a driver's preset to a JSON file on disk."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(preset_to_json(driver), f, indent=indent)
    logger.info(f"Preset saved to: {path}")
