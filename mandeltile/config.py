"""Immutable configuration for tile rendering and serving."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UnknownEvaluator

TILE_SIZE = 256
MAX_ITERATIONS = 1000
EXTENT_SCALE = 4.0
# Deepest level whose pixel spacing (EXTENT_SCALE / 2**zoom / TILE_SIZE) is
# still above the float64 spacing at |c| = 2.
MAX_ZOOM = 45
# 2**zoom stops being a finite float64 beyond this level.
FLOAT_ZOOM_LIMIT = 1023
HUE_MULTIPLIER = 25.0
SATURATION = 0.5
LIGHTNESS = 0.5

EVALUATORS = ("mandelbrot", "mandelbox")
DEFAULT_LISTEN_ADDR = ":8080"


@dataclass(frozen=True)
class RenderConfig:
    """Parameters shared by every tile render."""

    tile_size: int = TILE_SIZE
    max_iterations: int = MAX_ITERATIONS
    extent_scale: float = EXTENT_SCALE
    max_zoom: int = MAX_ZOOM
    hue_multiplier: float = HUE_MULTIPLIER
    saturation: float = SATURATION
    lightness: float = LIGHTNESS
    evaluator: str = "mandelbrot"

    def __post_init__(self) -> None:
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.extent_scale <= 0:
            raise ValueError(f"extent_scale must be positive, got {self.extent_scale}")
        if not 0 <= self.max_zoom <= FLOAT_ZOOM_LIMIT:
            raise ValueError(f"max_zoom must be in [0, {FLOAT_ZOOM_LIMIT}], got {self.max_zoom}")
        if not 0.0 <= self.saturation <= 1.0:
            raise ValueError(f"saturation must be in [0, 1], got {self.saturation}")
        if not 0.0 <= self.lightness <= 1.0:
            raise ValueError(f"lightness must be in [0, 1], got {self.lightness}")
        if self.evaluator not in EVALUATORS:
            raise UnknownEvaluator(
                f"Unknown evaluator '{self.evaluator}'. Valid choices: {', '.join(EVALUATORS)}."
            )


@dataclass(frozen=True)
class ServerConfig:
    """Address the HTTP tile server binds to."""

    host: str = "0.0.0.0"
    port: int = 8080


def parse_listen_addr(listen_addr: str) -> ServerConfig:
    """Parse a ``host:port`` listen address; an empty host binds all interfaces."""

    host, sep, port_str = listen_addr.rpartition(":")
    if not sep:
        raise ValueError(f"listen address '{listen_addr}' must be of the form [HOST]:PORT")
    try:
        port = int(port_str)
    except ValueError as exc:
        raise ValueError(f"listen address '{listen_addr}' has an invalid port") from exc
    if not 0 <= port <= 65535:
        raise ValueError(f"listen address '{listen_addr}' has an out-of-range port")
    host = host.strip("[]") or "0.0.0.0"
    return ServerConfig(host=host, port=port)
