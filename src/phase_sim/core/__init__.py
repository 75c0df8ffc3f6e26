# MIT License (see LICENSE)
"""
Numerical core of the simulation package.

This subpackage provides:
    - Vector fields: harmonic, damped, double-well, Kepler mean motion, Van der Pol.
    - Integrators: explicit midpoint (RK2) for states, vertex arrays and trajectories.
    - Boundary policies: reflect, clamp, wrap, none.
    - Kepler solver and orbit geometry.
    - Semi-Lagrangian 1-D advection.
    - Invariants: energy and shoelace polygon area.
    - Samplings for display: arrow grids, energy contours, turning points.

Typical usage:
    from phase_sim.core import HarmonicField, midpoint_step, energy

    field = HarmonicField(m=1.0, k=1.0)
    state = midpoint_step(state, 0.01, field)
    print(energy(state, field))
"""
from .fields import (
    VectorField,
    FlowComponent,
    HarmonicField,
    DampedField,
    DoubleWellField,
    MeanMotionField,
    VanDerPolField,
    make_field,
)
from .integrators import midpoint_step, midpoint_step_arrays, step_blob, trajectory
from .boundary import (
    BoundaryPolicy,
    ReflectBoundary,
    ClampBoundary,
    WrapBoundary,
    NoBoundary,
    make_boundary,
)
from .kepler import solve_kepler, sample_orbit, OrbitSample
from .advection import AdvectionField, VelocityProfile
from .invariants import energy, polygon_area, area_ratio, is_drifting

__all__ = [
    # Fields
    "VectorField",
    "FlowComponent",
    "HarmonicField",
    "DampedField",
    "DoubleWellField",
    "MeanMotionField",
    "VanDerPolField",
    "make_field",
    # Integrators
    "midpoint_step",
    "midpoint_step_arrays",
    "step_blob",
    "trajectory",
    # Boundaries
    "BoundaryPolicy",
    "ReflectBoundary",
    "ClampBoundary",
    "WrapBoundary",
    "NoBoundary",
    "make_boundary",
    # Solvers
    "solve_kepler",
    "sample_orbit",
    "OrbitSample",
    "AdvectionField",
    "VelocityProfile",
    # Diagnostics
    "energy",
    "polygon_area",
    "area_ratio",
    "is_drifting",
]
