from PIL import Image

from .pixel_buffer import PixelBuffer


def create_checkerboard(size: tuple[int, int], square_size: int = 8) -> Image.Image:
    w, h = size
    bg = Image.new("RGB", (w, h), (192, 192, 192))
    px = bg.load()
    c1 = (220, 220, 220)
    c2 = (180, 180, 180)
    for y in range(h):
        for x in range(w):
            if ((x // square_size) + (y // square_size)) % 2 == 0:
                px[x, y] = c1
            else:
                px[x, y] = c2
    return bg


def render_for_display(buffer: PixelBuffer, zoom: float = 1.0, square_size: int = 8) -> Image.Image:
    """
    Composite the buffer over a checkerboard so cleared pixels are visible,
    then scale by zoom with nearest-neighbour sampling.
    """
    img = buffer.to_image()
    bg = create_checkerboard(img.size, square_size=square_size)
    composed = Image.alpha_composite(bg.convert("RGBA"), img)
    if zoom != 1:
        size = (max(1, round(img.width * zoom)), max(1, round(img.height * zoom)))
        composed = composed.resize(size, Image.NEAREST)
    return composed
