"""Exceptions raised for tile requests the renderer cannot satisfy."""

from __future__ import annotations


class TileError(ValueError):
    """Base class for rejected tile requests."""


class InvalidTileAddress(TileError):
    """The tile path is malformed or its coordinates are outside the zoom level."""


class ZoomOutOfRange(TileError):
    """The zoom level is deeper than float64 can resolve."""


class UnknownEvaluator(TileError):
    """No escape-time evaluator is registered under the requested name."""
