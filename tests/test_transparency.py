from bg_eraser.core.pixel_buffer import Pixel, PixelBuffer
from bg_eraser.core.transparency import create_checkerboard, render_for_display


def test_checkerboard_alternates():
    bg = create_checkerboard((16, 8), square_size=8)
    assert bg.getpixel((0, 0)) != bg.getpixel((8, 0))


def test_render_shows_checkerboard_through_cleared_pixels():
    buf = PixelBuffer.blank(16, 16, Pixel(255, 0, 0, 255))
    buf.set(0, 0, Pixel(255, 0, 0, 0))
    out = render_for_display(buf)
    assert out.getpixel((1, 1)) == (255, 0, 0, 255)
    assert out.getpixel((0, 0)) == (220, 220, 220, 255)


def test_render_scales_with_zoom():
    buf = PixelBuffer.blank(8, 4, Pixel(0, 0, 0, 255))
    assert render_for_display(buf, zoom=2).size == (16, 8)
    assert render_for_display(buf, zoom=0.25).size == (2, 1)
