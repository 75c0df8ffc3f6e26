# MIT License (see LICENSE)
"""
Utility functions for scalar math and numeric safety.

Provides the small helpers shared by the simulation core: array conversion,
clamping, linear interpolation, periodic wrapping on [0, 1) and finite
checks. Everything here works on plain floats; the array-aware helpers
also accept numpy arrays and operate elementwise.
"""
from __future__ import annotations
import math

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for vertices and scalar fields.
    """
    return np.array(x, dtype=np.float64)


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp v into [lo, hi]."""
    return max(lo, min(hi, v))


def lerp(a, b, t):
    """Linear interpolation a + (b - a) * t. Elementwise on arrays."""
    return a + (b - a) * t


def wrap01(x):
    """
    Wrap a coordinate into the periodic interval [0, 1).

    Works for scalars and arrays. Negative inputs wrap from the top,
    e.g. wrap01(-0.25) == 0.75.
    """
    if isinstance(x, np.ndarray):
        out = np.mod(x, 1.0)
        # np.mod can return 1.0 for tiny negative inputs
        out[out >= 1.0] = 0.0
        return out
    y = math.fmod(x, 1.0)
    if y < 0.0:
        y += 1.0
    return 0.0 if y >= 1.0 else y


def all_finite(*values) -> bool:
    """True when every value (scalar or array) is free of NaN and Inf."""
    for v in values:
        if not np.all(np.isfinite(v)):
            return False
    return True


def safe_denominator(d: float, eps: float) -> float:
    """
    Replace a near-zero denominator by eps, keeping its sign.

    Zero itself maps to +eps.
    """
    if abs(d) < eps:
        return -eps if d < 0 else eps
    return d
