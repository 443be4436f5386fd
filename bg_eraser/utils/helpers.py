import re


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def human_readable_size(bytes_count: int) -> str:
    units = ["B", "KB", "MB", "GB"]
    i = 0
    v = float(bytes_count)
    while v >= 1024 and i < len(units) - 1:
        v /= 1024.0
        i += 1
    return f"{v:.2f} {units[i]}"


def parse_point(s: str) -> tuple[int, int]:
    """Parse an "x,y" pair such as "12,40" into integer pixel coordinates."""
    parts = [p.strip() for p in (s or "").replace(";", ",").split(",")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Expected a point as X,Y, got {s!r}")
    return int(parts[0]), int(parts[1])


def parse_dropped_paths(data: str) -> list[str]:
    """Split a tkdnd drop payload; paths containing spaces arrive wrapped in braces."""
    return [m.strip("{}") for m in re.findall(r"\{.*?\}|\S+", data or "") if m.strip("{}")]
