from dataclasses import dataclass
from typing import NamedTuple

from PIL import Image


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


class OutOfRangeError(IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Pixel ({x}, {y}) outside {width}x{height} buffer")
        self.x = x
        self.y = y


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of a buffer's pixels taken at one instant."""
    width: int
    height: int
    data: bytes


class PixelBuffer:
    """
    Width x height grid of RGBA pixels stored row-major, four bytes per pixel.
    """

    def __init__(self, width: int, height: int, data: bytes | bytearray | None = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid buffer size: {width}x{height}")
        expected = width * height * 4
        if data is None:
            data = bytes(expected)
        if len(data) != expected:
            raise ValueError(f"Expected {expected} bytes for {width}x{height}, got {len(data)}")
        self.width = width
        self.height = height
        self._data = bytearray(data)

    @classmethod
    def blank(cls, width: int, height: int, fill: Pixel = Pixel(0, 0, 0, 0)) -> "PixelBuffer":
        return cls(width, height, bytes(fill) * (width * height))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        img = image.convert("RGBA")
        return cls(img.width, img.height, img.tobytes())

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "PixelBuffer":
        return cls(snapshot.width, snapshot.height, snapshot.data)

    @property
    def pixels(self) -> bytearray:
        """Live row-major RGBA bytes; writes go straight into the buffer."""
        return self._data

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _offset(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise OutOfRangeError(x, y, self.width, self.height)
        return (y * self.width + x) * 4

    def get(self, x: int, y: int) -> Pixel:
        i = self._offset(x, y)
        return Pixel(*self._data[i:i + 4])

    def set(self, x: int, y: int, pixel: Pixel):
        i = self._offset(x, y)
        self._data[i:i + 4] = bytes(pixel)

    def clone(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self._data)

    def snapshot(self) -> Snapshot:
        return Snapshot(self.width, self.height, bytes(self._data))

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", self.size, bytes(self._data))

    def count_transparent(self) -> int:
        return sum(1 for a in self._data[3::4] if a == 0)

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and self._data == other._data

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"
