# MIT License (see LICENSE)
"""
Numerical constants shared by the simulation core.

Simulation coordinates are dimensionless; time is measured in seconds of
animation time. The values below reproduce the behaviour of the teaching
widgets the core drives.
"""
from __future__ import annotations

# Largest frame delta handed to a simulation. Frame gaps longer than this
# (a backgrounded tab, a debugger pause) are truncated so that a single
# explicit step cannot blow up.
MAX_FRAME_DT: float = 0.05

# Newton-Raphson iterations for Kepler's equation. Fixed cost per frame;
# sufficient for eccentricities below 0.9.
KEPLER_ITERATIONS: int = 8
KEPLER_ACCURATE_E: float = 0.9

# Floor for |1 - e cos E| in the Kepler Newton update.
KEPLER_EPS: float = 1e-12

# Floor for vector magnitudes used as divisors (arrow scaling).
EPS: float = 1e-6

# Relative area drift |A/A0 - 1| above which a blob is flagged as
# numerically corrupted rather than physically evolved.
AREA_DRIFT_THRESHOLD: float = 0.10

# Trail capacity bounds (rendering history only).
TRAIL_MIN: int = 50
TRAIL_MAX: int = 240

# Semi-Lagrangian advection defaults.
ADVECTION_N: int = 700
ADVECTION_DT: float = 0.002
SMOOTHING_WEIGHTS: tuple[float, float, float] = (0.25, 0.5, 0.25)

# Energy landscape: sampled x range, sample count and the visual speed
# factor applied to the ball.
LANDSCAPE_X_MAX: float = 4.0
LANDSCAPE_SAMPLES: int = 700
LANDSCAPE_SPEED_SCALE: float = 0.9
