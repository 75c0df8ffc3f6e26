# MIT License (see LICENSE)
"""
Frame-driven animation loop glue.

The host UI owns the render loop; this module only defines the contract
with it. A FrameScheduler calls a subscribed callback once per display
refresh with a monotonically increasing timestamp. The AnimationDriver
turns timestamps into clamped frame deltas, applies staged parameter
changes, advances its simulations and forwards snapshots to a renderer.

Structure:
    - Host creates simulations and an AnimationDriver around them.
    - driver.start() subscribes to the scheduler.
    - Each tick(timestamp): apply pending params -> advance -> render.
    - driver.stop() unsubscribes; no callback runs after it returns.

Everything runs on the host's single UI thread. No step runs concurrently
with another and no locking is needed.
"""
from __future__ import annotations
from contextlib import nullcontext
from typing import Any, Callable, Protocol
import logging
import math

from .constants import MAX_FRAME_DT
from .profiler import FrameProfiler
from .renderer.adapter import RendererAdapter
from .simulation import Simulation
from .types import Snapshot

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameClock:
    """
    Converts frame timestamps into clamped deltas.

    The first timestamp after construction or reset() has no predecessor
    and yields dt = 0. Later deltas are scaled by time_scale (use 1e-3 for
    millisecond timestamps) and truncated to max_dt. Non-monotonic or
    non-finite timestamps yield dt = 0.
    """

    def __init__(self, max_dt: float = MAX_FRAME_DT, time_scale: float = 1.0):
        if max_dt <= 0:
            raise ValueError(f"max_dt must be positive, got {max_dt}")
        self.max_dt = max_dt
        self.time_scale = time_scale
        self._last: float | None = None

    def tick(self, timestamp: float) -> float:
        last, self._last = self._last, timestamp
        if last is None:
            return 0.0
        raw = (timestamp - last) * self.time_scale
        if not math.isfinite(raw) or raw <= 0.0:
            return 0.0
        return min(raw, self.max_dt)

    def reset(self) -> None:
        """Forget the previous timestamp; the next tick yields dt = 0."""
        self._last = None


class FrameScheduler(Protocol):
    """Host render loop: calls subscribers once per display refresh."""

    def subscribe(self, callback: FrameCallback) -> Any:
        """Register a per-frame callback and return a token for unsubscribe."""
        ...

    def unsubscribe(self, token: Any) -> None:
        """Stop calling the callback registered under token."""
        ...


class ManualScheduler:
    """
    FrameScheduler driven explicitly by the caller.

    Used for headless hosts, scripts and tests: each run_frame() call is
    one display refresh.
    """

    def __init__(self) -> None:
        self._callbacks: dict[int, FrameCallback] = {}
        self._next_token = 1
        self.now = 0.0

    def subscribe(self, callback: FrameCallback) -> int:
        token = self._next_token
        self._next_token += 1
        self._callbacks[token] = callback
        return token

    def unsubscribe(self, token: int) -> None:
        self._callbacks.pop(token, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def run_frame(self, timestamp: float | None = None) -> None:
        """Invoke every subscriber once with the given (or current) timestamp."""
        if timestamp is not None:
            self.now = timestamp
        # callbacks may unsubscribe themselves
        for callback in list(self._callbacks.values()):
            callback(self.now)

    def run(self, frames: int, fps: float = 60.0) -> None:
        """Run a fixed number of evenly spaced frames."""
        for _ in range(frames):
            self.run_frame()
            self.now += 1.0 / fps


class AnimationDriver:
    """
    Ticks one or more simulations from a frame scheduler.

    All simulations receive the same clamped dt each frame, which is how
    side-by-side comparisons (conservative vs dissipative) stay in step.

    Attributes:
        simulations: The simulations owned by this driver.
        scheduler: Host loop to subscribe to (optional for manual ticking).
        renderer: Receives the snapshots of every frame (optional).
        clock: Converts timestamps into clamped deltas.
        profiler: Optional FrameProfiler for per-section timings.
        frames: Number of ticks processed.
        last_snapshots: Snapshots produced by the latest tick.
    """

    def __init__(
        self,
        *simulations: Simulation,
        scheduler: FrameScheduler | None = None,
        renderer: RendererAdapter | None = None,
        max_dt: float = MAX_FRAME_DT,
        time_scale: float = 1.0,
        profiler: FrameProfiler | None = None,
    ):
        if not simulations:
            raise ValueError("AnimationDriver needs at least one simulation")
        self.simulations = list(simulations)
        self.scheduler = scheduler
        self.renderer = renderer
        self.clock = FrameClock(max_dt=max_dt, time_scale=time_scale)
        self.profiler = profiler
        self.frames = 0
        self.paused = False
        self.last_snapshots: list[Snapshot] = [s.snapshot() for s in self.simulations]
        self._token: Any = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._token is not None

    def start(self) -> None:
        """Subscribe to the scheduler. Calling start twice is a no-op."""
        if self.scheduler is None:
            raise RuntimeError("AnimationDriver has no scheduler to subscribe to")
        if self._token is not None:
            return
        self.clock.reset()
        self._token = self.scheduler.subscribe(self.tick)
        logger.info(f"Animation started for {[s.name for s in self.simulations]}")

    def stop(self) -> None:
        """Unsubscribe from the scheduler. Safe to call more than once."""
        if self._token is None:
            return
        self.scheduler.unsubscribe(self._token)
        self._token = None
        self.clock.reset()
        logger.info(f"Animation stopped after {self.frames} frames")

    def pause(self) -> None:
        """Keep rendering but stop advancing; state is preserved."""
        self.paused = True

    def resume(self) -> None:
        """Continue from the preserved state without a catch-up jump."""
        if self.paused:
            self.paused = False
            self.clock.reset()

    def reset(self) -> None:
        """Reset every simulation to its initial condition."""
        for sim in self.simulations:
            sim.reset()
        self.clock.reset()

    def __enter__(self) -> "AnimationDriver":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Frame callback
    # ------------------------------------------------------------------

    def tick(self, timestamp: float) -> None:
        """
        Process one display refresh.

        1. Apply parameter changes staged since the previous frame.
        2. Advance each simulation by the clamped dt (skipped while paused).
        3. Collect snapshots and hand them to the renderer.
        """
        dt = 0.0 if self.paused else self.clock.tick(timestamp)

        with self._section("params"):
            for sim in self.simulations:
                sim.apply_pending()

        if dt > 0.0:
            with self._section("advance"):
                for sim in self.simulations:
                    sim.advance(dt)

        with self._section("render"):
            self.last_snapshots = [sim.snapshot() for sim in self.simulations]
            if self.renderer is not None:
                self.renderer.render_frame(self.last_snapshots)

        self.frames += 1
        if self.profiler is not None:
            self.profiler.end_frame()

    def _section(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)
