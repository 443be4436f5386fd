import pytest

from bg_eraser.core.pixel_buffer import Pixel, PixelBuffer
from bg_eraser.utils import config as config_module


DARK = Pixel(10, 10, 10, 255)
LIGHT = Pixel(200, 200, 200, 255)


def buffer_from_rows(rows):
    h = len(rows)
    w = len(rows[0])
    buf = PixelBuffer(w, h)
    for y, row in enumerate(rows):
        for x, px in enumerate(row):
            buf.set(x, y, px)
    return buf


def alpha_grid(buf):
    return [[buf.get(x, y).a for x in range(buf.width)] for y in range(buf.height)]


@pytest.fixture
def ring_buffer():
    """3x3 dark image with a light center pixel."""
    return buffer_from_rows([
        [DARK, DARK, DARK],
        [DARK, LIGHT, DARK],
        [DARK, DARK, DARK],
    ])


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_module, "DEFAULT_PATH", path)
    return path
