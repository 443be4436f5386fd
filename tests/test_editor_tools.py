import pytest

from bg_eraser.core.editor_tools import HistoryStack, color_matches, flood_erase
from bg_eraser.core.pixel_buffer import Pixel, PixelBuffer, Snapshot

from conftest import DARK, LIGHT, alpha_grid, buffer_from_rows


# ---------- color_matches ----------

def test_transparent_candidate_never_matches():
    assert not color_matches(Pixel(10, 10, 10, 0), Pixel(10, 10, 10, 255), 100)


def test_exact_color_matches_at_zero_tolerance():
    assert color_matches(Pixel(10, 20, 30, 255), Pixel(10, 20, 30, 255), 0)
    assert not color_matches(Pixel(10, 20, 31, 255), Pixel(10, 20, 30, 255), 0)


def test_tolerance_compares_summed_channel_distance():
    target = Pixel(100, 100, 100, 255)
    # diff = 5 + 5 + 5 = 15 = 5 * 3
    assert color_matches(Pixel(105, 95, 105, 255), target, 5)
    assert not color_matches(Pixel(106, 95, 105, 255), target, 5)


def test_partial_alpha_is_still_selectable():
    assert color_matches(Pixel(10, 10, 10, 1), Pixel(10, 10, 10, 255), 0)


def test_raw_bytes_match_like_pixels():
    target = Pixel(100, 100, 100, 255)
    assert color_matches(bytes([105, 95, 105, 255]), target, 5)
    assert not color_matches(bytearray([100, 100, 100, 0]), target, 100)


# ---------- flood_erase ----------

def test_ring_with_low_tolerance_keeps_center(ring_buffer):
    cleared = flood_erase(ring_buffer, (0, 0), 5)
    assert cleared == 8
    assert alpha_grid(ring_buffer) == [
        [0, 0, 0],
        [0, 255, 0],
        [0, 0, 0],
    ]


def test_ring_with_high_tolerance_clears_everything(ring_buffer):
    cleared = flood_erase(ring_buffer, (0, 0), 200)
    assert cleared == 9
    assert ring_buffer.count_transparent() == 9


def test_only_alpha_changes(ring_buffer):
    flood_erase(ring_buffer, (0, 0), 5)
    assert ring_buffer.get(0, 0) == DARK._replace(a=0)
    assert ring_buffer.get(1, 1) == LIGHT


def test_seed_on_transparent_pixel_is_noop():
    buf = buffer_from_rows([
        [Pixel(1, 1, 1, 0), DARK],
        [DARK, DARK],
    ])
    before = buf.clone()
    assert flood_erase(buf, (0, 0), 100) == 0
    assert buf == before


def test_second_run_from_same_seed_changes_nothing(ring_buffer):
    flood_erase(ring_buffer, (0, 0), 5)
    after_first = ring_buffer.clone()
    assert flood_erase(ring_buffer, (0, 0), 5) == 0
    assert ring_buffer == after_first


def test_diagonal_neighbours_are_not_connected():
    red = Pixel(255, 0, 0, 255)
    blue = Pixel(0, 0, 255, 255)
    buf = buffer_from_rows([
        [red, blue],
        [blue, red],
    ])
    flood_erase(buf, (0, 0), 0)
    assert alpha_grid(buf) == [
        [0, 255],
        [255, 255],
    ]


def test_zero_tolerance_selects_exact_connected_color_only():
    a = Pixel(50, 60, 70, 255)
    near = Pixel(50, 60, 71, 255)
    half = Pixel(50, 60, 70, 128)
    buf = buffer_from_rows([
        [a, a, near, a],
        [half, near, a, a],
        [a, near, near, near],
    ])
    flood_erase(buf, (0, 0), 0)
    assert alpha_grid(buf) == [
        [0, 0, 255, 255],
        [0, 255, 255, 255],
        [0, 255, 255, 255],
    ]


def test_matching_uses_seed_color_not_neighbour_color():
    # Each step differs by 3 per channel sum from its neighbour, but the far end
    # drifts well beyond tolerance from the seed.
    row = [Pixel(v, 0, 0, 255) for v in (0, 3, 6, 9, 12)]
    buf = buffer_from_rows([row])
    flood_erase(buf, (0, 0), 2)
    assert alpha_grid(buf) == [[0, 0, 0, 255, 255]]


def test_previously_transparent_pixels_block_the_region():
    clear = Pixel(10, 10, 10, 0)
    buf = buffer_from_rows([
        [DARK, clear, DARK],
    ])
    flood_erase(buf, (0, 0), 100)
    assert alpha_grid(buf) == [[0, 0, 255]]


def test_large_region_does_not_recurse():
    buf = PixelBuffer.blank(300, 300, DARK)
    assert flood_erase(buf, (150, 150), 0) == 300 * 300


def test_fill_writes_buffer_bytes_directly(ring_buffer, monkeypatch):
    calls = []
    real_get = PixelBuffer.get

    def counting_get(self, x, y):
        calls.append((x, y))
        return real_get(self, x, y)

    def forbidden_set(self, x, y, pixel):
        raise AssertionError("per-pixel set used during fill")

    monkeypatch.setattr(PixelBuffer, "get", counting_get)
    monkeypatch.setattr(PixelBuffer, "set", forbidden_set)
    assert flood_erase(ring_buffer, (0, 0), 5) == 8
    assert calls == [(0, 0)]
    assert ring_buffer.pixels[3] == 0


# ---------- HistoryStack ----------

def _snap(n):
    return Snapshot(1, 1, bytes([n, 0, 0, 255]))


def test_history_is_lifo():
    h = HistoryStack(capacity=5)
    for i in range(3):
        h.push(_snap(i))
    assert [h.pop().data[0] for _ in range(3)] == [2, 1, 0]
    assert h.pop() is None


def test_history_evicts_oldest_past_limit():
    h = HistoryStack(capacity=3)
    for i in range(5):
        h.push(_snap(i))
    assert len(h) == 3
    assert h.get_stats() == {"undo_count": 3, "limit": 3, "undo_full": True}
    assert [h.pop().data[0] for _ in range(3)] == [4, 3, 2]
    assert not h.can_undo()


def test_history_clear():
    h = HistoryStack()
    assert h.limit == 20
    h.push(_snap(1))
    h.clear()
    assert len(h) == 0
    assert h.pop() is None


def test_history_capacity_must_be_positive():
    with pytest.raises(ValueError):
        HistoryStack(capacity=0)


def test_history_equality_is_identity():
    a = HistoryStack(capacity=3)
    b = HistoryStack(capacity=3)
    a.push(_snap(1))
    assert a != b
    assert a == a


def test_history_limit_tracks_the_deque():
    h = HistoryStack(capacity=4)
    assert h.limit == 4
    with pytest.raises(AttributeError):
        h.limit = 10
    for i in range(6):
        h.push(_snap(i))
    assert len(h) == 4
