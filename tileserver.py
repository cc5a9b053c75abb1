import os
import sys
import warnings
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser

from mandeltile import RenderConfig, TileAddress, TileError, parse_listen_addr, render_tile
from mandeltile.config import DEFAULT_LISTEN_ADDR, EVALUATORS, EXTENT_SCALE, MAX_ITERATIONS
from mandeltile.imaging import write_single_image
from mandeltile.server import create_app


def select_device():
    """Use the first GPU when TensorFlow can see one, otherwise the CPU."""

    log("TensorFlow version: %s" % tf.__version__)
    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Serve Mandelbrot map tiles at /ZOOM/X/Y.png.')

    parser.add_argument('--listen-addr', type=str,
                        dest='listen_addr', help='address to listen for tile requests on',
                        metavar='LISTEN_ADDR', default=DEFAULT_LISTEN_ADDR)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration budget before a point counts as inside the set',
                        metavar='MAX_ITERATIONS', default=MAX_ITERATIONS)

    parser.add_argument('--evaluator', choices=EVALUATORS, default='mandelbrot',
                        help='escape-time formula used to render tiles')

    parser.add_argument('--extent-scale', type=float,
                        dest='extent_scale', help='width of the complex plane covered by the zoom 0 tile',
                        metavar='EXTENT_SCALE', default=EXTENT_SCALE)

    parser.add_argument('--render', type=str, dest='render', metavar='Z/X/Y',
                        help='render a single tile to --output instead of serving')

    parser.add_argument('--output', type=str, dest='output',
                        help='destination of the tile written by --render (default: tile_Z_X_Y.FORMAT)')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for --render. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def _tile_path(render: str) -> str:
    """Accept Z/X/Y with or without a leading slash or a .png suffix."""

    path = render.strip("/")
    if path.lower().endswith(".png"):
        path = path[:-len(".png")]
    return path + ".png"


def resolve_output_path(opt, parser: ArgumentParser, address: TileAddress, image_format: str) -> Path:
    if opt.output:
        output_path = Path(opt.output).expanduser()
        if output_path.suffix and output_path.suffix.lower() != f".{image_format}":
            parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
        if not output_path.suffix:
            output_path = output_path.with_suffix(f".{image_format}")
    else:
        output_path = Path(f"tile_{address.zoom}_{address.x}_{address.y}.{image_format}")
    return output_path.resolve()


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    try:
        config = RenderConfig(
            max_iterations=opt.max_iterations,
            extent_scale=opt.extent_scale,
            evaluator=opt.evaluator,
        )
    except ValueError as exc:
        parser.error(str(exc))

    device = select_device()

    if opt.render is not None:
        try:
            address = TileAddress.parse(_tile_path(opt.render)).validate(config.max_zoom)
        except TileError as exc:
            parser.error(f"--render: {exc}")
        image_format = (opt.format or "png").lower().lstrip(".") or "png"
        output_path = resolve_output_path(opt, parser, address, image_format)
        log("rendering: %s" % address)
        tile = render_tile(address, config, device=device)
        log("extent: %s" % (tile.extent,))
        write_single_image(tile, output_path, image_format)
        print(f"wrote {output_path}")
        return

    if opt.output is not None:
        parser.error("--output is only valid together with --render.")

    try:
        server_config = parse_listen_addr(opt.listen_addr)
    except ValueError as exc:
        parser.error(str(exc))

    app = create_app(config, device=device)
    log("listening on %s:%d" % (server_config.host, server_config.port))
    app.run(host=server_config.host, port=server_config.port, threaded=True)


if __name__ == '__main__':
    main()
