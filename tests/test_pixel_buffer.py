import pytest
from PIL import Image

from bg_eraser.core.pixel_buffer import OutOfRangeError, Pixel, PixelBuffer, Snapshot


def test_new_buffer_is_transparent_black():
    buf = PixelBuffer(2, 3)
    assert buf.size == (2, 3)
    assert buf.get(1, 2) == Pixel(0, 0, 0, 0)


@pytest.mark.parametrize("w,h", [(0, 1), (1, 0), (-2, 4)])
def test_rejects_non_positive_size(w, h):
    with pytest.raises(ValueError):
        PixelBuffer(w, h)


def test_rejects_wrong_data_length():
    with pytest.raises(ValueError):
        PixelBuffer(2, 2, bytes(15))


def test_get_and_set_round_trip():
    buf = PixelBuffer.blank(4, 4, Pixel(1, 2, 3, 255))
    buf.set(3, 1, Pixel(9, 8, 7, 6))
    assert buf.get(3, 1) == Pixel(9, 8, 7, 6)
    assert buf.get(2, 1) == Pixel(1, 2, 3, 255)


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (4, 0), (0, 3), (10, 10)])
def test_out_of_range_access_fails_loudly(x, y):
    buf = PixelBuffer(4, 3)
    with pytest.raises(OutOfRangeError):
        buf.get(x, y)
    with pytest.raises(OutOfRangeError):
        buf.set(x, y, Pixel(0, 0, 0, 0))


def test_out_of_range_is_an_index_error():
    with pytest.raises(IndexError):
        PixelBuffer(1, 1).get(1, 1)


def test_clone_is_independent():
    buf = PixelBuffer.blank(2, 2, Pixel(5, 5, 5, 255))
    copy = buf.clone()
    copy.set(0, 0, Pixel(0, 0, 0, 0))
    assert buf.get(0, 0) == Pixel(5, 5, 5, 255)
    assert copy != buf


def test_snapshot_is_immutable_and_detached():
    buf = PixelBuffer.blank(2, 1, Pixel(5, 5, 5, 255))
    snap = buf.snapshot()
    buf.set(0, 0, Pixel(0, 0, 0, 0))
    assert isinstance(snap.data, bytes)
    assert (snap.width, snap.height) == (2, 1)
    restored = PixelBuffer.from_snapshot(snap)
    assert restored.get(0, 0) == Pixel(5, 5, 5, 255)
    with pytest.raises(AttributeError):
        snap.width = 3


def test_from_snapshot_buffer_does_not_alias():
    snap = Snapshot(1, 1, bytes([1, 2, 3, 255]))
    a = PixelBuffer.from_snapshot(snap)
    b = PixelBuffer.from_snapshot(snap)
    a.set(0, 0, Pixel(0, 0, 0, 0))
    assert b.get(0, 0) == Pixel(1, 2, 3, 255)


def test_image_bridge_converts_to_rgba():
    img = Image.new("RGB", (3, 2), (40, 50, 60))
    buf = PixelBuffer.from_image(img)
    assert buf.size == (3, 2)
    assert buf.get(2, 1) == Pixel(40, 50, 60, 255)

    buf.set(0, 0, Pixel(40, 50, 60, 0))
    out = buf.to_image()
    assert out.mode == "RGBA"
    assert out.getpixel((0, 0)) == (40, 50, 60, 0)
    assert out.getpixel((1, 0)) == (40, 50, 60, 255)


def test_count_transparent():
    buf = PixelBuffer.blank(3, 1, Pixel(1, 1, 1, 255))
    assert buf.count_transparent() == 0
    buf.set(1, 0, Pixel(1, 1, 1, 0))
    assert buf.count_transparent() == 1
