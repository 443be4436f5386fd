import logging
from collections import deque
from dataclasses import InitVar, dataclass

from .pixel_buffer import PixelBuffer, Snapshot

logger = logging.getLogger(__name__)


def color_matches(candidate, target, tolerance: int) -> bool:
    """
    True when candidate is opaque enough to select and its summed RGB
    distance to target is within tolerance * 3.

    Both colors are indexed as (r, g, b, a), so a Pixel or a raw 4-byte
    slice of a buffer works.
    """
    if candidate[3] == 0:
        return False
    diff = (
        abs(candidate[0] - target[0]) +
        abs(candidate[1] - target[1]) +
        abs(candidate[2] - target[2])
    )
    return diff <= tolerance * 3


def flood_erase(buffer: PixelBuffer, seed: tuple[int, int], tolerance: int) -> int:
    """
    Non-recursive 4-connected flood fill that makes the matching region
    around seed fully transparent. Returns the number of pixels cleared.
    """
    w, h = buffer.size
    target = buffer.get(*seed)
    if target.a == 0:
        return 0

    data = buffer.pixels
    visited = bytearray(w * h)
    stack = [seed]
    count = 0

    while stack:
        x, y = stack.pop()
        if x < 0 or y < 0 or x >= w or y >= h:
            continue
        idx = y * w + x
        if visited[idx]:
            continue

        i = idx * 4
        if not color_matches(data[i:i + 4], target, tolerance):
            continue

        visited[idx] = 1
        data[i + 3] = 0
        count += 1

        stack.append((x + 1, y))
        stack.append((x - 1, y))
        stack.append((x, y + 1))
        stack.append((x, y - 1))

    logger.debug("Flood erase from %s (tolerance %d) cleared %d pixels", seed, tolerance, count)
    return count


@dataclass(eq=False)
class HistoryStack:
    capacity: InitVar[int] = 20

    def __post_init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        # Oldest entries fall off the left end once capacity is reached
        self._stack: deque[Snapshot] = deque(maxlen=capacity)

    @property
    def limit(self) -> int:
        return self._stack.maxlen

    def push(self, snapshot: Snapshot):
        self._stack.append(snapshot)

    def pop(self) -> Snapshot | None:
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self):
        self._stack.clear()

    def can_undo(self) -> bool:
        return len(self._stack) > 0

    def get_stats(self) -> dict:
        return {
            "undo_count": len(self._stack),
            "limit": self.limit,
            "undo_full": len(self._stack) >= self.limit,
        }

    def __len__(self):
        return len(self._stack)
