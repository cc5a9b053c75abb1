"""Escape-time evaluators producing smoothed iteration counts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import tensorflow as tf

from .config import MAX_ITERATIONS, RenderConfig
from .errors import UnknownEvaluator
from .geometry import Vector2

ESCAPE_RADIUS_SQUARED = 4.0
# Extra iterations after escape before the smoothing formula is applied.
SMOOTHING_STEPS = 2

MANDELBOX_ITERATIONS = 10
MANDELBOX_SCALE = 2.0
MANDELBOX_BAILOUT_SQUARED = 100.0

_FLOAT64_MAX = float(np.finfo(np.float64).max)


def _still_iterating(t: tf.Tensor, escaped_at: tf.Tensor, extra: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Pixels that either have budget left or have not finished their smoothing steps."""

    pending = tf.logical_and(escaped_at < 0, t < max_iterations)
    settling = tf.logical_and(escaped_at >= 0, extra < SMOOTHING_STEPS)
    return tf.logical_or(pending, settling)


@tf.function
def _mandelbrot_run(
    cx: tf.Tensor,
    cy: tf.Tensor,
    max_iterations: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Iterate ``z <- z**2 + c`` for every lane until it escapes and settles or runs out of budget."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    t = tf.constant(0, dtype=tf.int32)
    zx = tf.zeros_like(cx)
    zy = tf.zeros_like(cy)
    escaped_at = tf.fill(tf.shape(cx), tf.constant(-1, dtype=tf.int32))
    extra = tf.zeros_like(escaped_at)
    limit = max_iterations + SMOOTHING_STEPS

    def cond(t, zx, zy, escaped_at, extra):
        active = _still_iterating(t, escaped_at, extra, max_iterations)
        return tf.logical_and(tf.less(t, limit), tf.reduce_any(active))

    def body(t, zx, zy, escaped_at, extra):
        active = _still_iterating(t, escaped_at, extra, max_iterations)
        zx_new = zx * zx - zy * zy + cx
        zy_new = 2.0 * zx * zy + cy
        zx = tf.where(active, zx_new, zx)
        zy = tf.where(active, zy_new, zy)

        settling = tf.logical_and(active, escaped_at >= 0)
        extra = extra + tf.cast(settling, tf.int32)

        radius_squared = zx * zx + zy * zy
        crossed = tf.logical_and(
            tf.logical_and(active, escaped_at < 0),
            radius_squared > ESCAPE_RADIUS_SQUARED,
        )
        escaped_at = tf.where(crossed, tf.fill(tf.shape(escaped_at), t), escaped_at)
        return t + 1, zx, zy, escaped_at, extra

    return tf.while_loop(cond, body, (t, zx, zy, escaped_at, extra))


@tf.function
def _mandelbox_run(cx: tf.Tensor, cy: tf.Tensor, iterations: tf.Tensor) -> tf.Tensor:
    """Apply the box and ball folds; return the escape step of every lane, or -1."""

    iterations = tf.cast(iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zx = tf.zeros_like(cx)
    zy = tf.zeros_like(cy)
    escaped_at = tf.fill(tf.shape(cx), tf.constant(-1, dtype=tf.int32))

    def box_fold(v):
        return tf.where(v > 1.0, 2.0 - v, tf.where(v < -1.0, -2.0 - v, v))

    def cond(i, zx, zy, escaped_at):
        return tf.logical_and(tf.less(i, iterations), tf.reduce_any(escaped_at < 0))

    def body(i, zx, zy, escaped_at):
        active = escaped_at < 0
        fx = box_fold(zx)
        fy = box_fold(zy)
        mag = tf.sqrt(fx * fx + fy * fy)
        factor = tf.where(mag < 0.5, tf.constant(4.0, dtype=mag.dtype), tf.where(mag < 1.0, mag * mag, tf.ones_like(mag)))
        fx = fx * factor * MANDELBOX_SCALE + cx
        fy = fy * factor * MANDELBOX_SCALE + cy
        zx = tf.where(active, fx, zx)
        zy = tf.where(active, fy, zy)
        crossed = tf.logical_and(active, zx * zx + zy * zy > MANDELBOX_BAILOUT_SQUARED)
        escaped_at = tf.where(crossed, tf.fill(tf.shape(escaped_at), i), escaped_at)
        return i + 1, zx, zy, escaped_at

    _, _, _, escaped_at = tf.while_loop(cond, body, (i, zx, zy, escaped_at))
    return escaped_at


def _as_tensors(cx, cy) -> tuple[tf.Tensor, tf.Tensor]:
    cx = np.asarray(cx, dtype=np.float64)
    cy = np.asarray(cy, dtype=np.float64)
    if cx.shape != cy.shape:
        raise ValueError(f"coordinate grids differ in shape: {cx.shape} != {cy.shape}")
    return tf.convert_to_tensor(cx, dtype=tf.float64), tf.convert_to_tensor(cy, dtype=tf.float64)


@dataclass(frozen=True)
class MandelbrotEvaluator:
    """Classic Mandelbrot recurrence with the normalized iteration count."""

    max_iterations: int = MAX_ITERATIONS

    def escape_ages(self, cx, cy, *, device: Optional[str] = None) -> np.ndarray:
        """Return the smoothed iteration count for every point of the grids ``cx``, ``cy``."""

        with tf.device(device if device is not None else "/CPU:0"):
            cx_tf, cy_tf = _as_tensors(cx, cy)
            max_iterations = tf.constant(self.max_iterations, dtype=tf.int32)
            _, zx, zy, escaped_at, _ = _mandelbrot_run(cx_tf, cy_tf, max_iterations)

            escaped = escaped_at >= 0
            modulus = tf.sqrt(zx * zx + zy * zy)
            # Far-away points overflow during the smoothing steps.
            modulus = tf.where(tf.math.is_finite(modulus), modulus, tf.constant(_FLOAT64_MAX, dtype=tf.float64))
            modulus = tf.where(escaped, modulus, tf.constant(ESCAPE_RADIUS_SQUARED, dtype=tf.float64))
            log2 = tf.math.log(tf.constant(2.0, dtype=tf.float64))
            smooth = tf.cast(escaped_at, tf.float64) - tf.math.log(tf.math.log(modulus)) / log2
            smooth = tf.where(escaped, smooth, tf.zeros_like(smooth))

        return smooth.numpy()


@dataclass(frozen=True)
class MandelboxEvaluator:
    """Folding iteration with a fixed step budget; counts are whole escape steps."""

    iterations: int = MANDELBOX_ITERATIONS

    def escape_ages(self, cx, cy, *, device: Optional[str] = None) -> np.ndarray:
        with tf.device(device if device is not None else "/CPU:0"):
            cx_tf, cy_tf = _as_tensors(cx, cy)
            escaped_at = _mandelbox_run(cx_tf, cy_tf, tf.constant(self.iterations, dtype=tf.int32))
            counts = tf.where(escaped_at >= 0, tf.cast(escaped_at + 1, tf.float64), tf.zeros_like(cx_tf))
        return counts.numpy()


Evaluator = Union[MandelbrotEvaluator, MandelboxEvaluator]


def evaluator_for(config: RenderConfig) -> Evaluator:
    if config.evaluator == "mandelbrot":
        return MandelbrotEvaluator(max_iterations=config.max_iterations)
    if config.evaluator == "mandelbox":
        return MandelboxEvaluator()
    raise UnknownEvaluator(f"Unknown evaluator '{config.evaluator}'.")


def escape_age(c: Vector2, evaluator: Optional[Evaluator] = None) -> float:
    """Smoothed iteration count of a single point; ``0`` means the point is in the set."""

    evaluator = evaluator if evaluator is not None else MandelbrotEvaluator()
    ages = evaluator.escape_ages(np.array([c.x]), np.array([c.y]))
    return float(ages[0])
