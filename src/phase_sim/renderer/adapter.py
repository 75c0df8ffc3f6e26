# MIT License (see LICENSE)
"""
Renderer adapters consuming simulation snapshots.

The core emits numbers; drawing them (axis scaling, padding, strokes,
colours) belongs to the host. These adapters define the hand-off and
provide a few backend-free implementations.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Sequence, TextIO
import sys

import numpy as np

from ..core.kepler import OrbitSample
from ..types import Blob, PhaseState, Snapshot


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Subclasses integrate with a drawing backend (SVG, canvas, matplotlib).

    Usage:
        renderer.begin_frame(time)
        for snap in snapshots:
            renderer.draw_snapshot(snap)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render_frame(snapshots)
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        """
        Begin a new frame.

        Args:
            time: Simulation time of the first snapshot, in seconds.
        """
        ...

    @abstractmethod
    def draw_snapshot(self, snapshot: Snapshot) -> None:
        """Draw one simulation's state and diagnostics."""
        ...

    @abstractmethod
    def end_frame(self) -> None:
        """Finalize the current frame."""
        ...

    def render_frame(self, snapshots: Sequence[Snapshot]) -> None:
        """Draw every snapshot of one tick."""
        self.begin_frame(snapshots[0].time if snapshots else 0.0)
        for snap in snapshots:
            self.draw_snapshot(snap)
        self.end_frame()


def describe_state(state: Any) -> str:
    """Short human-readable form of a snapshot state."""
    if isinstance(state, PhaseState):
        return f"q={state.q:.3f} p={state.p:.3f}"
    if isinstance(state, Blob):
        return f"blob n={len(state)}"
    if isinstance(state, OrbitSample):
        return f"E={state.E:.3f} r={state.r:.3f} @ ({state.x:.3f}, {state.y:.3f})"
    if isinstance(state, np.ndarray):
        return f"field n={state.shape[0]} max={float(np.max(state)):.3f}"
    return repr(state)


class DebugRenderer(RendererAdapter):
    """
    Console/text renderer for development and testing.

    Output:
        === Frame t=0.5000 ===
        [particle] q=1.077 p=-1.314 energy=1.440000
        [blob] blob n=90 area=0.634 area_ratio=1.000 drifting=False
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: Include diagnostics after the state.
        """
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, time: float) -> None:
        self.output.write(f"=== Frame t={time:.4f} ===\n")

    def draw_snapshot(self, snapshot: Snapshot) -> None:
        line = f"[{snapshot.name}] {describe_state(snapshot.state)}"
        if self.verbose:
            for key, value in snapshot.diagnostics.items():
                if isinstance(value, float):
                    line += f" {key}={value:.6g}"
                elif isinstance(value, (bool, int, str)):
                    line += f" {key}={value}"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer, for benchmarks."""

    def begin_frame(self, time: float) -> None:
        pass

    def draw_snapshot(self, snapshot: Snapshot) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Records frames as plain dicts for later inspection or plotting.

    Example:
        renderer = BufferedRenderer()
        driver = AnimationDriver(sim, renderer=renderer)
        ...
        energies = [f["snapshots"][0]["diagnostics"]["energy"] for f in renderer.frames]
    """

    def __init__(self, max_frames: int | None = None):
        self.frames: list[dict] = []
        self.max_frames = max_frames
        self._current_frame: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._current_frame = {"time": time, "snapshots": []}

    def draw_snapshot(self, snapshot: Snapshot) -> None:
        if self._current_frame is None:
            return
        state = snapshot.state
        if isinstance(state, PhaseState):
            data: Any = [state.q, state.p]
        elif isinstance(state, Blob):
            data = state.vertices.tolist()
        elif isinstance(state, np.ndarray):
            data = state.tolist()
        else:
            data = state
        self._current_frame["snapshots"].append({
            "name": snapshot.name,
            "time": snapshot.time,
            "state": data,
            "diagnostics": dict(snapshot.diagnostics),
        })

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None
            if self.max_frames is not None and len(self.frames) > self.max_frames:
                del self.frames[0]

    def clear(self) -> None:
        self.frames.clear()
