"""Public API for rendering Mandelbrot map tiles."""

from .color import Pixel, color_for, colors_for, hsl_to_rgb
from .config import RenderConfig, ServerConfig, parse_listen_addr
from .errors import InvalidTileAddress, TileError, UnknownEvaluator, ZoomOutOfRange
from .evaluator import MandelboxEvaluator, MandelbrotEvaluator, escape_age, evaluator_for
from .geometry import Extent, TileAddress, Vector2, extent_for
from .renderer import Tile, render_tile, sample_grid

__all__ = [
    "Extent",
    "InvalidTileAddress",
    "MandelboxEvaluator",
    "MandelbrotEvaluator",
    "Pixel",
    "RenderConfig",
    "ServerConfig",
    "Tile",
    "TileAddress",
    "TileError",
    "UnknownEvaluator",
    "Vector2",
    "ZoomOutOfRange",
    "color_for",
    "colors_for",
    "escape_age",
    "evaluator_for",
    "extent_for",
    "hsl_to_rgb",
    "parse_listen_addr",
    "render_tile",
    "sample_grid",
]
