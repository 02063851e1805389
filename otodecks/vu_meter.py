"""Level meter showing the loudness of a deck's output."""

from __future__ import annotations

from dataclasses import dataclass

_AMPLIFICATION = 5.0
_MARGIN = 5.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class VUMeter:
    """A vertical bar meter driven by an RMS level between 0 and 1."""

    level: float = 0.0

    def __post_init__(self) -> None:
        self.level = _clamp(float(self.level), 0.0, 1.0)

    def set_level(self, level: float) -> None:
        """Store a new level, clamped to the range 0..1."""
        self.level = _clamp(float(level), 0.0, 1.0)

    def bar_rect(self, width: float, height: float) -> tuple[float, float, float, float]:
        """Return the (x, y, width, height) of the filled bar for a meter of this size."""
        amplified = _clamp(self.level * _AMPLIFICATION, 0.0, 1.0)
        bar_height = height * amplified
        rect_height = max(0.0, bar_height - _MARGIN)
        return (
            _MARGIN,
            height - rect_height - _MARGIN,
            float(width) - 2 * _MARGIN,
            rect_height,
        )