"""Mapping from smoothed iteration counts to RGBA pixels."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .config import HUE_MULTIPLIER, LIGHTNESS, SATURATION

OPAQUE = 255


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int = OPAQUE


def hue_for(counts, multiplier: float = HUE_MULTIPLIER) -> np.ndarray:
    """Hue in degrees for each count; non-finite counts take the in-set hue."""

    counts = np.asarray(counts, dtype=np.float64)
    counts = np.where(np.isfinite(counts), counts, 0.0)
    with np.errstate(over="ignore", invalid="ignore"):
        hue = np.mod(counts * multiplier + 360.0, 360.0)
    # Counts near the float64 limit overflow once multiplied.
    return np.where(np.isfinite(hue), hue, 0.0)


def hsl_to_rgb(hue, saturation: float, lightness: float) -> np.ndarray:
    """Convert hues in degrees to RGB channels in ``[0, 1]``, shape ``hue.shape + (3,)``.

    The hue circle is split into six 60 degree sectors, each closed on its
    upper end: ``[0, 1], (1, 2], ..., (5, 6]`` in units of 60 degrees.
    """

    hue = np.asarray(hue, dtype=np.float64)
    chroma = (1.0 - abs(2.0 * lightness - 1.0)) * saturation
    sector = hue / 60.0
    x = chroma * (1.0 - np.abs(np.mod(sector, 2.0) - 1.0))
    c = np.full_like(sector, chroma)
    zero = np.zeros_like(sector)

    conditions = [sector <= 1.0, sector <= 2.0, sector <= 3.0, sector <= 4.0, sector <= 5.0, np.ones_like(sector, dtype=bool)]
    r = np.select(conditions, [c, x, zero, zero, x, c])
    g = np.select(conditions, [x, c, c, x, zero, zero])
    b = np.select(conditions, [zero, zero, x, c, c, x])

    m = lightness - chroma / 2.0
    rgb = np.stack((r, g, b), axis=-1) + m
    return np.clip(rgb, 0.0, 1.0)


def quantize(channels) -> np.ndarray:
    """Round ``[0, 1]`` channels half up to 8 bits."""

    scaled = np.floor(np.clip(channels, 0.0, 1.0) * 255.0 + 0.5)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def colors_for(
    counts,
    *,
    multiplier: float = HUE_MULTIPLIER,
    saturation: float = SATURATION,
    lightness: float = LIGHTNESS,
) -> np.ndarray:
    """Return opaque RGBA ``uint8`` pixels, shape ``counts.shape + (4,)``."""

    rgb = quantize(hsl_to_rgb(hue_for(counts, multiplier), saturation, lightness))
    alpha = np.full(rgb.shape[:-1] + (1,), OPAQUE, dtype=np.uint8)
    return np.concatenate((rgb, alpha), axis=-1)


def color_for(count: float) -> Pixel:
    r, g, b, a = colors_for(np.array([count]))[0]
    return Pixel(int(r), int(g), int(b), int(a))
