import io

import PIL.Image
import pytest

from mandeltile import RenderConfig
from mandeltile.server import create_app


@pytest.fixture
def client():
    app = create_app(RenderConfig(tile_size=32, max_iterations=60))
    app.testing = True
    with app.test_client() as client:
        yield client


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"]


def test_tile_is_png(client):
    r = client.get("/0/0/0.png")
    assert r.status_code == 200
    assert r.mimetype == "image/png"
    image = PIL.Image.open(io.BytesIO(r.data))
    assert image.format == "PNG"
    assert image.size == (32, 32)
    assert image.mode == "RGBA"
    assert image.getpixel((16, 16)) == (191, 64, 64, 255)


def test_repeated_requests_are_identical(client):
    first = client.get("/3/5/2.png")
    second = client.get("/3/5/2.png")
    assert first.status_code == second.status_code == 200
    assert first.data == second.data


@pytest.mark.parametrize(
    "path",
    [
        "/1/2/0.png",
        "/1/0/2.png",
        "/0/1/0.png",
        "/1/-1/0.png",
        "/60/0/0.png",
        "/1/0/0.jpg",
        "/1/0.png",
        "/favicon.ico",
        "/a/b/c.png",
        "/%D9%A1/0/0.png",
        "/" + "9" * 5000 + "/0/0.png",
    ],
)
def test_bad_addresses_are_rejected(client, path):
    r = client.get(path)
    assert r.status_code == 400
    assert r.data == b"bad request\n"
