"""Rendering of complete map tiles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .color import Pixel, colors_for
from .config import RenderConfig
from .evaluator import evaluator_for
from .geometry import Extent, TileAddress, extent_for


@dataclass(frozen=True, eq=False)
class Tile:
    """A rendered tile; ``pixels`` is a read-only ``(size, size, 4)`` RGBA array indexed by row then column."""

    address: TileAddress
    extent: Extent
    pixels: np.ndarray

    @property
    def size(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, i: int, j: int) -> Pixel:
        """Pixel at column ``i`` and row ``j``."""

        r, g, b, a = self.pixels[j, i]
        return Pixel(int(r), int(g), int(b), int(a))


def sample_grid(extent: Extent, size: int) -> tuple[np.ndarray, np.ndarray]:
    """Plane coordinates of every pixel, as ``(cx, cy)`` arrays indexed ``[j, i]``.

    Pixel ``(i, j)`` samples the corner ``min + (max - min) * (i, j) / size``,
    so a tile never samples its right and bottom edges.
    """

    steps = np.arange(size, dtype=np.float64)
    x = np.float64(extent.min.x) + np.float64(extent.width) * steps / np.float64(size)
    y = np.float64(extent.min.y) + np.float64(extent.height) * steps / np.float64(size)
    cx, cy = np.meshgrid(x, y)
    return cx, cy


def render_tile(address: TileAddress, config: Optional[RenderConfig] = None, *, device: Optional[str] = None) -> Tile:
    """Render the tile at ``address``."""

    config = config if config is not None else RenderConfig()
    extent = extent_for(address, scale=config.extent_scale, max_zoom=config.max_zoom)
    cx, cy = sample_grid(extent, config.tile_size)

    counts = evaluator_for(config).escape_ages(cx, cy, device=device)
    pixels = colors_for(
        counts,
        multiplier=config.hue_multiplier,
        saturation=config.saturation,
        lightness=config.lightness,
    )
    pixels.flags.writeable = False
    return Tile(address=address, extent=extent, pixels=pixels)
