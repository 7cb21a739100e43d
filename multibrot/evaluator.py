"""Escape-time evaluation for generalized Mandelbrot and Julia sets."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace

import numpy as np

from .complex_ops import magnitude, magnitude_array, power, power_array

MAX_ITERATIONS = 256
ESCAPE_RADIUS = 2.0

POWER_RANGE = (-10.0, 10.0)
SEED_RANGE = (-1.0, 1.0)


class FractalMode(enum.Enum):
    MANDELBROT = "mandelbrot"
    JULIA = "julia"

    @classmethod
    def parse(cls, text: str) -> "FractalMode":
        try:
            return cls(text.strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise ValueError(f"unknown fractal mode {text!r} (expected one of: {choices})") from None

    def toggled(self) -> "FractalMode":
        return FractalMode.JULIA if self is FractalMode.MANDELBROT else FractalMode.MANDELBROT


@dataclass(frozen=True)
class FractalParameters:
    """Recurrence parameters chosen by the user interface."""

    power: float = 2.0
    julia_seed: complex = complex(0.0, -0.67)

    def clamped(self) -> "FractalParameters":
        """Return a copy restricted to the ranges offered by the UI controls."""

        def clamp(value: float, bounds: tuple[float, float]) -> float:
            return max(bounds[0], min(float(value), bounds[1]))

        seed = complex(clamp(self.julia_seed.real, SEED_RANGE), clamp(self.julia_seed.imag, SEED_RANGE))
        return replace(self, power=clamp(self.power, POWER_RANGE), julia_seed=seed)


def escape_count(point: complex, params: FractalParameters, mode: FractalMode) -> int:
    """Number of iterations ``point`` survives, capped at :data:`MAX_ITERATIONS`.

    A NaN iterate counts as an immediate escape (``0``).
    """

    z = complex(point)
    c = z if mode is FractalMode.MANDELBROT else complex(params.julia_seed)
    for iteration in range(MAX_ITERATIONS):
        if math.isnan(z.real) or math.isnan(z.imag):
            return 0
        if magnitude(z) > ESCAPE_RADIUS:
            return iteration
        z = power(z, params.power) + c
    return MAX_ITERATIONS


def evaluate(point: complex, params: FractalParameters, mode: FractalMode) -> float:
    """Normalized escape value of ``point`` in ``[0, 1]``."""

    return escape_count(point, params, mode) / float(MAX_ITERATIONS)


def escape_counts_grid(re: np.ndarray, im: np.ndarray, params: FractalParameters, mode: FractalMode) -> np.ndarray:
    """Vectorized :func:`escape_count` over a grid of plane coordinates."""

    zr, zi = np.broadcast_arrays(np.asarray(re, dtype=np.float64), np.asarray(im, dtype=np.float64))
    zr = zr.copy()
    zi = zi.copy()
    if mode is FractalMode.MANDELBROT:
        cr = zr.copy()
        ci = zi.copy()
    else:
        cr = np.full(zr.shape, np.float64(params.julia_seed.real))
        ci = np.full(zr.shape, np.float64(params.julia_seed.imag))

    counts = np.zeros(zr.shape, dtype=np.int32)
    active = np.ones(zr.shape, dtype=bool)
    degenerate = np.zeros(zr.shape, dtype=bool)

    for _ in range(MAX_ITERATIONS):
        nan = active & (np.isnan(zr) | np.isnan(zi))
        degenerate |= nan
        active &= ~nan
        active &= magnitude_array(zr, zi) <= ESCAPE_RADIUS
        if not active.any():
            break
        wr, wi = power_array(zr[active], zi[active], params.power)
        zr[active] = wr + cr[active]
        zi[active] = wi + ci[active]
        counts[active] += 1

    counts[degenerate] = 0
    return counts


def evaluate_grid(re: np.ndarray, im: np.ndarray, params: FractalParameters, mode: FractalMode) -> np.ndarray:
    """Vectorized :func:`evaluate`; returns float64 values in ``[0, 1]``."""

    counts = escape_counts_grid(re, im, params, mode)
    return counts.astype(np.float64) / np.float64(MAX_ITERATIONS)
