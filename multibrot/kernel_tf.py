"""TensorFlow escape-time kernel, the vectorized analogue of a fragment shader."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import tensorflow as tf

from .evaluator import ESCAPE_RADIUS, MAX_ITERATIONS, FractalMode, FractalParameters

PI = math.pi


def _argument(zr: tf.Tensor, zi: tf.Tensor) -> tf.Tensor:
    zero = tf.zeros_like(zr)
    base = tf.math.atan(zi / zr)
    result = zero
    result = tf.where(zr > 0.0, base, result)
    result = tf.where(tf.logical_and(zr < 0.0, zi >= 0.0), base + PI, result)
    result = tf.where(tf.logical_and(zr < 0.0, zi < 0.0), base - PI, result)
    result = tf.where(tf.logical_and(tf.equal(zr, 0.0), zi > 0.0), zero + PI / 2.0, result)
    result = tf.where(tf.logical_and(tf.equal(zr, 0.0), zi < 0.0), zero - PI / 2.0, result)
    return result


def _power(zr: tf.Tensor, zi: tf.Tensor, power: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    r = tf.pow(tf.math.sqrt(zr * zr + zi * zi), power)
    theta = power * _argument(zr, zi)
    out_re = r * tf.math.cos(theta)
    out_im = r * tf.math.sin(theta)
    origin = tf.logical_and(tf.equal(zr, 0.0), tf.equal(zi, 0.0))
    fill = tf.where(power > 0.0, tf.constant(0.0, tf.float64), tf.constant(np.nan, tf.float64))
    fill = tf.fill(tf.shape(zr), fill)
    return tf.where(origin, fill, out_re), tf.where(origin, fill, out_im)


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
    degenerate: tf.Tensor,
    power: tf.Tensor,
):
    """Apply one iteration to every point that is still bounded."""

    nan = tf.logical_and(active, tf.logical_or(tf.math.is_nan(zr), tf.math.is_nan(zi)))
    degenerate = tf.logical_or(degenerate, nan)
    bounded = tf.math.sqrt(zr * zr + zi * zi) <= tf.cast(ESCAPE_RADIUS, zr.dtype)
    active = tf.logical_and(tf.logical_and(active, tf.logical_not(nan)), bounded)

    wr, wi = _power(zr, zi, power)
    zr = tf.where(active, wr + cr, zr)
    zi = tf.where(active, wi + ci, zi)
    ns = ns + tf.cast(active, tf.int32)
    return zr, zi, ns, active, degenerate


@tf.function
def _escape_run(zr: tf.Tensor, zi: tf.Tensor, cr: tf.Tensor, ci: tf.Tensor, power: tf.Tensor):
    """Iterate until every point escaped or the iteration cap is reached."""

    i = tf.constant(0, dtype=tf.int32)
    ns = tf.zeros_like(zr, tf.int32)
    active = tf.ones_like(zr, tf.bool)
    degenerate = tf.zeros_like(zr, tf.bool)

    def cond(i, zr, zi, ns, active, degenerate):
        return tf.logical_and(tf.less(i, MAX_ITERATIONS), tf.reduce_any(active))

    def body(i, zr, zi, ns, active, degenerate):
        zr, zi, ns, active, degenerate = _escape_step(zr, zi, cr, ci, ns, active, degenerate, power)
        return i + 1, zr, zi, ns, active, degenerate

    _, _, _, ns, _, degenerate = tf.while_loop(cond, body, (i, zr, zi, ns, active, degenerate))
    return tf.where(degenerate, tf.zeros_like(ns), ns)


def escape_counts(
    x: np.ndarray,
    y: np.ndarray,
    params: FractalParameters,
    mode: FractalMode,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Escape counts for the grid spanned by column coordinates ``x`` and row coordinates ``y``."""

    with tf.device(device if device is not None else "/CPU:0"):
        x_tf = tf.convert_to_tensor(x, dtype=tf.float64)
        y_tf = tf.convert_to_tensor(y, dtype=tf.float64)
        zr, zi = tf.meshgrid(x_tf, y_tf)
        if mode is FractalMode.MANDELBROT:
            cr = tf.identity(zr)
            ci = tf.identity(zi)
        else:
            cr = tf.fill(tf.shape(zr), tf.constant(params.julia_seed.real, tf.float64))
            ci = tf.fill(tf.shape(zr), tf.constant(params.julia_seed.imag, tf.float64))
        power = tf.constant(params.power, dtype=tf.float64)
        ns = _escape_run(zr, zi, cr, ci, power)
    return ns.numpy()
