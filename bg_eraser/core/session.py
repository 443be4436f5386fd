import logging
from enum import Enum

from .editor_tools import HistoryStack, flood_erase
from .pixel_buffer import PixelBuffer, Snapshot
from ..utils.validators import DEFAULT_HISTORY_CAPACITY, DEFAULT_TOLERANCE, clamp_tolerance

logger = logging.getLogger(__name__)


class SessionState(Enum):
    NO_IMAGE = "no_image"
    EDITING = "editing"


class NoImageLoadedError(RuntimeError):
    pass


class EditorSession:
    """
    Live editing context for one image: the working buffer, the original
    it was loaded from, and a bounded undo history of earlier states.

    Out-of-bounds clicks and undo on an empty history are silent no-ops.
    Calling an editing operation before load_image raises NoImageLoadedError.
    """

    def __init__(
        self,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
        default_tolerance: int = DEFAULT_TOLERANCE,
        skip_noop_snapshots: bool = False,
    ):
        self.history = HistoryStack(capacity=history_capacity)
        self.default_tolerance = clamp_tolerance(default_tolerance)
        # When set, a click that clears nothing leaves no undo entry
        self.skip_noop_snapshots = skip_noop_snapshots
        self._buffer: PixelBuffer | None = None
        self._original: Snapshot | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.NO_IMAGE if self._buffer is None else SessionState.EDITING

    @property
    def history_depth(self) -> int:
        return len(self.history)

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def _require_buffer(self) -> PixelBuffer:
        if self._buffer is None:
            raise NoImageLoadedError("No image loaded")
        return self._buffer

    # ---------- Lifecycle ----------
    def load_image(self, buffer: PixelBuffer):
        self._buffer = buffer.clone()
        self._original = buffer.snapshot()
        self.history.clear()
        logger.debug("Loaded %dx%d image", buffer.width, buffer.height)

    def unload(self):
        self._buffer = None
        self._original = None
        self.history.clear()

    # ---------- Editing ----------
    def select_at(self, x: int, y: int, tolerance: int | None = None) -> int:
        buf = self._require_buffer()
        if not buf.in_bounds(x, y):
            return 0
        tol = clamp_tolerance(self.default_tolerance if tolerance is None else tolerance)

        before = buf.snapshot()
        if not self.skip_noop_snapshots:
            self.history.push(before)
        cleared = flood_erase(buf, (x, y), tol)
        if self.skip_noop_snapshots and cleared:
            self.history.push(before)
        logger.debug("Select at (%d, %d) tol=%d cleared %d pixels", x, y, tol, cleared)
        return cleared

    def undo(self) -> bool:
        self._require_buffer()
        snap = self.history.pop()
        if snap is None:
            return False
        self._buffer = PixelBuffer.from_snapshot(snap)
        logger.debug("Undo (%d states left)", len(self.history))
        return True

    def reset_to_original(self):
        self._require_buffer()
        self._buffer = PixelBuffer.from_snapshot(self._original)
        self.history.clear()
        logger.debug("Reset to original")

    def export_buffer(self) -> PixelBuffer:
        return self._require_buffer().clone()
