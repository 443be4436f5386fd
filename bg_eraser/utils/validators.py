from .helpers import clamp

TOLERANCE_MIN = 0
TOLERANCE_MAX = 100
DEFAULT_TOLERANCE = 32

DEFAULT_HISTORY_CAPACITY = 20

ZOOM_MIN = 0.25
ZOOM_MAX = 3.0
ZOOM_STEP = 0.25


def clamp_tolerance(value) -> int:
    try:
        tol = int(value)
    except (TypeError, ValueError):
        return DEFAULT_TOLERANCE
    return clamp(tol, TOLERANCE_MIN, TOLERANCE_MAX)


def validate_history_capacity(value) -> int:
    try:
        cap = int(value)
    except (TypeError, ValueError):
        return DEFAULT_HISTORY_CAPACITY
    return cap if cap >= 1 else DEFAULT_HISTORY_CAPACITY


def validate_zoom(value: float) -> float:
    return clamp(float(value), ZOOM_MIN, ZOOM_MAX)
