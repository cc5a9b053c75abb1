"""Tile addressing and the mapping from tiles to windows of the complex plane."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .config import EXTENT_SCALE, FLOAT_ZOOM_LIMIT, MAX_ZOOM
from .errors import InvalidTileAddress, ZoomOutOfRange

# ASCII digits only; 19 digits keeps every component well inside int() limits.
_TILE_PATH = re.compile(r"^/?([0-9]{1,19})/([0-9]{1,19})/([0-9]{1,19})\.png$")


@dataclass(frozen=True)
class Vector2:
    """A point or offset in the plane."""

    x: float
    y: float

    def subtract(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> Vector2:
        return Vector2(self.x * factor, self.y * factor)


@dataclass(frozen=True)
class Extent:
    """Axis-aligned rectangle of the complex plane covered by one tile."""

    min: Vector2
    max: Vector2

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y


@dataclass(frozen=True)
class TileAddress:
    """Slippy-map tile coordinates."""

    zoom: int
    x: int
    y: int

    @classmethod
    def parse(cls, path: str) -> TileAddress:
        """Parse ``/{zoom}/{x}/{y}.png`` into an address (range is not checked)."""

        match = _TILE_PATH.match(path)
        if match is None:
            raise InvalidTileAddress(f"path '{path}' does not look like /ZOOM/X/Y.png")
        zoom, x, y = (int(group) for group in match.groups())
        return cls(zoom=zoom, x=x, y=y)

    @property
    def tiles_per_axis(self) -> int:
        return 1 << self.zoom

    def validate(self, max_zoom: int = MAX_ZOOM) -> TileAddress:
        if self.zoom < 0:
            raise InvalidTileAddress(f"zoom must be non-negative, got {self.zoom}")
        if self.zoom > max_zoom:
            raise ZoomOutOfRange(f"zoom {self.zoom} exceeds the maximum of {max_zoom}")
        limit = self.tiles_per_axis
        if not 0 <= self.x < limit:
            raise InvalidTileAddress(f"x={self.x} is outside [0, {limit}) at zoom {self.zoom}")
        if not 0 <= self.y < limit:
            raise InvalidTileAddress(f"y={self.y} is outside [0, {limit}) at zoom {self.zoom}")
        return self

    def __str__(self) -> str:
        return f"{self.zoom}/{self.x}/{self.y}"


_CENTER = Vector2(0.5, 0.5)


def extent_for(address: TileAddress, *, scale: float = EXTENT_SCALE, max_zoom: int = MAX_ZOOM) -> Extent:
    """Return the region of the complex plane covered by ``address``.

    The tiles of a zoom level split the unit square into ``2**zoom`` columns
    and rows. The unit square is recentred on the origin and stretched by
    ``scale`` so the root tile spans ``[-scale/2, scale/2]`` on both axes.
    """

    address.validate(min(max_zoom, FLOAT_ZOOM_LIMIT))
    tiles = float(address.tiles_per_axis)
    min_unit = Vector2(address.x / tiles, address.y / tiles)
    max_unit = Vector2((address.x + 1) / tiles, (address.y + 1) / tiles)
    return Extent(
        min=min_unit.subtract(_CENTER).scale(scale),
        max=max_unit.subtract(_CENTER).scale(scale),
    )
