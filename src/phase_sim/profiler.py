# MIT License (see LICENSE)
"""
Per-frame timing against a display budget.

Every operation of the simulation core must fit inside one frame tick.
FrameProfiler records how long each named section of a tick takes and
counts frames whose total exceeded the budget.

Example:
    profiler = FrameProfiler(budget=1/60)
    driver = AnimationDriver(sim, profiler=profiler)
    ...
    print(profiler.stats.summary(), profiler.over_budget)
"""
from __future__ import annotations
import time
from collections import deque
from dataclasses import dataclass, field


@dataclass
class SectionStats:
    """
    Timing samples per named section.

    Only the most recent `window` samples of each section are kept, so a
    widget left mounted does not grow its history. Summary statistics are
    reported in milliseconds over that window.
    """
    window: int = 600
    samples: dict[str, deque[float]] = field(default_factory=dict)

    def add(self, name: str, seconds: float) -> None:
        if name not in self.samples:
            self.samples[name] = deque(maxlen=self.window)
        self.samples[name].append(seconds)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Returns:
            Dict mapping section name to {'n', 'mean_ms', 'max_ms'}.
        """
        out = {}
        for name, times in self.samples.items():
            n = len(times)
            out[name] = {
                "n": n,
                "mean_ms": 1e3 * (sum(times) / n),
                "max_ms": 1e3 * max(times),
            }
        return out


class _Section:
    def __init__(self, profiler: "FrameProfiler", name: str):
        self.profiler = profiler
        self.name = name

    def __enter__(self):
        self.t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        elapsed = time.perf_counter() - self.t0
        self.profiler.stats.add(self.name, elapsed)
        self.profiler._frame_total += elapsed


class FrameProfiler:
    """
    Context-manager timer for the sections of a frame tick.

    Attributes:
        budget: Seconds available per frame (default 1/60).
        stats: Per-section samples over the last `window` frames.
        frames: Frames closed with end_frame().
        over_budget: Frames whose timed sections exceeded the budget.
    """

    def __init__(self, budget: float = 1 / 60, window: int = 600) -> None:
        self.budget = budget
        self.stats = SectionStats(window=window)
        self.frames = 0
        self.over_budget = 0
        self._frame_total = 0.0

    def section(self, name: str) -> _Section:
        """Context manager timing the enclosed code under `name`."""
        return _Section(self, name)

    def end_frame(self) -> None:
        """Close the current frame and compare its total to the budget."""
        self.frames += 1
        if self._frame_total > self.budget:
            self.over_budget += 1
        self._frame_total = 0.0
