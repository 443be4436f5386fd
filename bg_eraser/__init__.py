from .core.editor_tools import HistoryStack, color_matches, flood_erase
from .core.pixel_buffer import OutOfRangeError, Pixel, PixelBuffer, Snapshot
from .core.session import EditorSession, NoImageLoadedError, SessionState

__version__ = "1.0.0"

__all__ = [
    "EditorSession",
    "HistoryStack",
    "NoImageLoadedError",
    "OutOfRangeError",
    "Pixel",
    "PixelBuffer",
    "SessionState",
    "Snapshot",
    "color_matches",
    "flood_erase",
]
