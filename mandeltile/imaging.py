"""Conversion of rendered tiles to Pillow images and encoded bytes."""

from __future__ import annotations

import io
from pathlib import Path

import PIL.Image

from .renderer import Tile


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def tile_to_image(tile: Tile) -> PIL.Image.Image:
    return PIL.Image.fromarray(tile.pixels)


def encode_png(tile: Tile) -> bytes:
    """Encode ``tile`` as PNG bytes."""

    buffer = io.BytesIO()
    tile_to_image(tile).save(buffer, format="PNG")
    return buffer.getvalue()


def write_single_image(tile: Tile, output_path: Path, image_format: str = "png") -> Path:
    """Write ``tile`` to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    image = tile_to_image(tile)
    if pil_format == "JPEG":
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)
    return output_path
