"""Complex arithmetic primitives used by the escape-time iteration."""

from __future__ import annotations

import math

import numpy as np

PI = math.pi


def magnitude(z: complex) -> float:
    """Euclidean norm of ``z``."""

    return float(np.hypot(np.float64(z.real), np.float64(z.imag)))


def argument(z: complex) -> float:
    """Principal angle of ``z`` using the four-quadrant rule of the iteration kernel.

    The branches are evaluated with ``atan(im / re)`` shifted by ``pi`` in the
    left half-plane rather than ``atan2``; the negative real axis maps to
    ``+pi`` and the origin to ``0``.
    """

    re = np.float64(z.real)
    im = np.float64(z.imag)
    if np.isnan(re) or np.isnan(im):
        return math.nan
    if re > 0.0:
        return float(np.arctan(im / re))
    if re < 0.0 and im >= 0.0:
        return float(np.arctan(im / re) + PI)
    if re < 0.0 and im < 0.0:
        return float(np.arctan(im / re) - PI)
    if re == 0.0 and im > 0.0:
        return PI / 2.0
    if re == 0.0 and im < 0.0:
        return -PI / 2.0
    return 0.0


def power(z: complex, p: float) -> complex:
    """Raise ``z`` to the real exponent ``p`` through its polar form."""

    p = np.float64(p)
    if z.real == 0.0 and z.imag == 0.0:
        if p > 0.0:
            return complex(0.0, 0.0)
        return complex(math.nan, math.nan)

    with np.errstate(all="ignore"):
        r = np.power(np.float64(magnitude(z)), p)
        theta = p * np.float64(argument(z))
        return complex(float(r * np.cos(theta)), float(r * np.sin(theta)))


def magnitude_array(re: np.ndarray, im: np.ndarray) -> np.ndarray:
    return np.hypot(re, im)


def argument_array(re: np.ndarray, im: np.ndarray) -> np.ndarray:
    """Element-wise :func:`argument`."""

    re = np.asarray(re, dtype=np.float64)
    im = np.asarray(im, dtype=np.float64)
    with np.errstate(all="ignore"):
        base = np.arctan(im / re)
    result = np.zeros(np.broadcast(re, im).shape, dtype=np.float64)
    result = np.where(re > 0.0, base, result)
    result = np.where((re < 0.0) & (im >= 0.0), base + PI, result)
    result = np.where((re < 0.0) & (im < 0.0), base - PI, result)
    result = np.where((re == 0.0) & (im > 0.0), PI / 2.0, result)
    result = np.where((re == 0.0) & (im < 0.0), -PI / 2.0, result)
    # NaN components fall through every comparison above; keep them NaN.
    return np.where(np.isnan(re) | np.isnan(im), np.nan, result)


def power_array(re: np.ndarray, im: np.ndarray, p: float) -> tuple[np.ndarray, np.ndarray]:
    """Element-wise :func:`power`, returning the real and imaginary planes."""

    re = np.asarray(re, dtype=np.float64)
    im = np.asarray(im, dtype=np.float64)
    p = np.float64(p)
    with np.errstate(all="ignore"):
        r = np.power(magnitude_array(re, im), p)
        theta = p * argument_array(re, im)
        out_re = r * np.cos(theta)
        out_im = r * np.sin(theta)
    origin = (re == 0.0) & (im == 0.0)
    fill = np.float64(0.0) if p > 0.0 else np.float64(np.nan)
    out_re = np.where(origin, fill, out_re)
    out_im = np.where(origin, fill, out_im)
    return out_re, out_im
