import pytest

from mandeltile import RenderConfig, ServerConfig, UnknownEvaluator, parse_listen_addr


def test_defaults():
    config = RenderConfig()
    assert config.tile_size == 256
    assert config.max_iterations == 1000
    assert config.extent_scale == 4.0
    assert config.hue_multiplier == 25.0
    assert (config.saturation, config.lightness) == (0.5, 0.5)
    assert config.evaluator == "mandelbrot"


def test_config_is_immutable():
    config = RenderConfig()
    with pytest.raises(AttributeError):
        config.tile_size = 512


@pytest.mark.parametrize(
    "kwargs",
    [{"tile_size": 0}, {"max_iterations": 0}, {"extent_scale": -1.0}, {"saturation": 1.5}, {"lightness": -0.1}, {"max_zoom": -1}, {"max_zoom": 1024}, {"max_zoom": 2000}],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        RenderConfig(**kwargs)


def test_unknown_evaluator():
    with pytest.raises(UnknownEvaluator):
        RenderConfig(evaluator="julia")


@pytest.mark.parametrize(
    "addr, expected",
    [
        (":8080", ServerConfig("0.0.0.0", 8080)),
        ("127.0.0.1:9000", ServerConfig("127.0.0.1", 9000)),
        ("[::1]:80", ServerConfig("::1", 80)),
    ],
)
def test_parse_listen_addr(addr, expected):
    assert parse_listen_addr(addr) == expected


@pytest.mark.parametrize("addr", ["8080", "localhost:http", ":70000"])
def test_parse_listen_addr_rejects_garbage(addr):
    with pytest.raises(ValueError):
        parse_listen_addr(addr)
