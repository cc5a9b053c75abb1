"""Flask application serving rendered tiles at ``/{zoom}/{x}/{y}.png``."""

from __future__ import annotations

from typing import Optional

from flask import Flask, Response, current_app, jsonify

from .config import RenderConfig
from .errors import TileError
from .geometry import TileAddress
from .imaging import encode_png
from .renderer import render_tile


def create_app(config: Optional[RenderConfig] = None, *, device: Optional[str] = None) -> Flask:
    app = Flask(__name__)
    app.config["RENDER_CONFIG"] = config if config is not None else RenderConfig()
    app.config["RENDER_DEVICE"] = device

    @app.route("/health")
    def health():
        return jsonify({"ok": True})

    @app.route("/<path:tile_path>")
    def tile(tile_path: str):
        render_config: RenderConfig = current_app.config["RENDER_CONFIG"]
        try:
            address = TileAddress.parse(tile_path).validate(render_config.max_zoom)
        except TileError as exc:
            current_app.logger.warning("rejected /%s: %s", tile_path, exc)
            return Response("bad request\n", status=400, mimetype="text/plain")

        current_app.logger.info("rendering: %s", address)
        rendered = render_tile(address, render_config, device=current_app.config["RENDER_DEVICE"])
        current_app.logger.info("extent: %s", rendered.extent)
        return Response(encode_png(rendered), mimetype="image/png")

    return app
