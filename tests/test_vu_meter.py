import pytest

from otodecks.vu_meter import VUMeter


def test_new_meter_starts_silent():
    assert VUMeter().level == 0.0


@pytest.mark.parametrize("raw, expected", [(2.0, 1.0), (-0.5, 0.0), (1.0, 1.0), (0.0, 0.0)])
def test_set_level_clamps(raw, expected):
    meter = VUMeter()
    meter.set_level(raw)
    assert meter.level == expected


def test_set_level_keeps_in_range_values():
    meter = VUMeter()
    meter.set_level(0.25)
    assert meter.level == 0.25


def test_constructor_clamps():
    assert VUMeter(level=3.0).level == 1.0


def test_silent_bar_is_empty():
    meter = VUMeter()
    x, y, w, h = meter.bar_rect(40, 100)
    assert h == 0.0
    assert x == 5.0
    assert w == 40 - 10
    assert y == 100 - 5


def test_full_bar_fills_inside_margin():
    meter = VUMeter()
    meter.set_level(1.0)
    _, y, _, h = meter.bar_rect(40, 100)
    assert h == 100 - 5
    assert y + h + 5 == 100


def test_bar_grows_with_level():
    heights = []
    for level in (0.0, 0.05, 0.1, 0.15, 0.2, 0.5):
        meter = VUMeter()
        meter.set_level(level)
        heights.append(meter.bar_rect(30, 200)[3])
    assert heights == sorted(heights)
    assert heights[0] < heights[-1]


def test_bar_saturates_above_one_fifth():
    low = VUMeter(level=0.2).bar_rect(30, 200)
    high = VUMeter(level=0.9).bar_rect(30, 200)
    assert low == high


def test_bar_bottom_stays_at_margin():
    for level in (0.01, 0.07, 0.13, 0.3):
        _, y, _, h = VUMeter(level=level).bar_rect(50, 120)
        assert y + h == 120 - 5