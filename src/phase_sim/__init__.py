# MIT License (see LICENSE)
"""
phase_sim - numerical core for interactive physics teaching widgets.

This package advances small physical systems frame by frame inside a host
animation loop and reports the diagnostics the widgets display: harmonic
and damped oscillators, a quartic double well, Kepler orbits, Liouville
blobs, 1-D semi-Lagrangian advection and a ball in an energy landscape.

Main entry points:
    - PhaseSimulation, BlobSimulation, OrbitSimulation, AdvectionSimulation,
      LandscapeSimulation: state-owning simulations.
    - AnimationDriver: ticks simulations from a host frame scheduler.
    - PhaseState, Domain: basic types.

Submodules:
    - core: Fields, integrators, boundaries, solvers and diagnostics.
    - io: JSON widget presets.
    - renderer: Optional snapshot consumers.

Example:
    from phase_sim import AnimationDriver, PhaseSimulation, PhaseState
    from phase_sim.core import HarmonicField

    sim = PhaseSimulation(HarmonicField(), initial=PhaseState(1.2, 1.2))
    driver = AnimationDriver(sim)
    for frame in range(120):
        driver.tick(frame / 60)
"""
from .types import PhaseState, Domain, Blob, Trail, OrbitalElements, Snapshot
from .simulation import (
    Simulation,
    PhaseSimulation,
    BlobSimulation,
    OrbitSimulation,
    AdvectionSimulation,
    LandscapeSimulation,
)
from .driver import AnimationDriver, FrameClock, ManualScheduler

__all__ = [
    # Types
    "PhaseState",
    "Domain",
    "Blob",
    "Trail",
    "OrbitalElements",
    "Snapshot",
    # Simulations
    "Simulation",
    "PhaseSimulation",
    "BlobSimulation",
    "OrbitSimulation",
    "AdvectionSimulation",
    "LandscapeSimulation",
    # Driver
    "AnimationDriver",
    "FrameClock",
    "ManualScheduler",
]
