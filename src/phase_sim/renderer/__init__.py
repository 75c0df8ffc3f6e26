# MIT License (see LICENSE)
"""
Snapshot consumers.

Each frame the AnimationDriver hands every simulation's Snapshot to one
renderer. Drawing (axes, padding, colours, SVG or canvas output) is the
host's job; the adapters here cover headless use:
    - RendererAdapter: begin_frame / draw_snapshot / end_frame contract.
    - DebugRenderer: one text line per snapshot with its diagnostics.
    - NullRenderer: discards everything (benchmarks).
    - BufferedRenderer: keeps frames as plain dicts for plotting.

Typical usage:
    from phase_sim.renderer import BufferedRenderer

    renderer = BufferedRenderer(max_frames=600)
    driver = AnimationDriver(sim, renderer=renderer)
"""
from .adapter import (
    RendererAdapter,
    DebugRenderer,
    NullRenderer,
    BufferedRenderer,
)

__all__ = [
    "RendererAdapter",
    "DebugRenderer",
    "NullRenderer",
    "BufferedRenderer",
]
