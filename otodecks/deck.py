"""One deck: its controls, file loading, waveform, level meter and layout."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from pathlib import Path

from .player import DJAudioPlayer
from .vu_meter import VUMeter
from .waveform import WaveformDisplay

Box = tuple[int, int, int, int]

SLIDER_RANGES: dict[str, tuple[float, float]] = {
    "volume": (0.0001, 2.0),
    "speed": (0.0001, 2.0),
    "position": (0.000001, 1.0),
}
BUTTONS = ("play", "stop", "load", "fade_in", "fade_out")
RECORD_COVER = "recordCover1.jpg"
_STRIPPED_EXTENSIONS = (".mp3", ".wav")


def clean_file_name(file_name: str) -> str:
    """Remove the first ".mp3" or ".wav" from a name for display.

    Each extension is cut from the original name, so when both occur only
    the cut of ".wav" is kept.
    """
    edited = file_name
    for extension in _STRIPPED_EXTENSIONS:
        pos = file_name.find(extension)
        if pos != -1:
            edited = file_name[:pos] + file_name[pos + len(extension):]
    return edited


def _box(x: float, y: float, w: float, h: float) -> Box:
    return int(x), int(y), int(w), int(h)


class Deck:
    """Controls of one player and the views that follow it."""

    TICK_INTERVAL_MS = 500

    def __init__(
        self,
        player: DJAudioPlayer,
        choose_file: Callable[[], str | os.PathLike[str] | None] | None = None,
        waveform: WaveformDisplay | None = None,
        vu_meter: VUMeter | None = None,
        cover_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        self.player = player
        self.choose_file = choose_file
        self.waveform = waveform if waveform is not None else WaveformDisplay()
        self.vu_meter = vu_meter if vu_meter is not None else VUMeter()
        self.file_label = ""
        self.sliders = {name: low for name, (low, _) in SLIDER_RANGES.items()}
        cover = Path(cover_dir if cover_dir is not None else Path.cwd()) / RECORD_COVER
        self.record_cover: Path | None = cover if cover.is_file() else None
        if player.level_listener is None:
            player.level_listener = self.update_vu_meter
        self.slider_changed("speed", 1.0)
        self.slider_changed("volume", 1.0)

    def _update_file_name(self, file_name: str) -> None:
        self.file_label = "Playing: " + clean_file_name(file_name)

    def button_clicked(self, name: str) -> None:
        """React to one of the deck's buttons: play, stop, load, fade_in or fade_out."""
        if name not in BUTTONS:
            raise ValueError(f"unknown button: {name!r}")
        if name == "play":
            self.player.start()
        elif name == "stop":
            self.player.stop()
        elif name == "fade_in":
            self.player.fade_in()
        elif name == "fade_out":
            self.player.fade_out()
        elif self.choose_file is not None:
            chosen = self.choose_file()
            if chosen is not None:
                self.player.load(chosen)
                self.waveform.load(chosen)
                self._update_file_name(Path(chosen).name)

    def slider_changed(self, name: str, value: float) -> None:
        """Set a slider, kept within its range, and pass the value to the player."""
        if name not in SLIDER_RANGES:
            raise ValueError(f"unknown slider: {name!r}")
        low, high = SLIDER_RANGES[name]
        value = max(low, min(high, float(value)))
        self.sliders[name] = value
        if name == "volume":
            self.player.set_gain(value)
        elif name == "speed":
            self.player.set_speed(value)
        else:
            self.player.set_position_relative(value)

    def files_dropped(self, files: Iterable[str | os.PathLike[str]]) -> bool:
        """Load a single dropped file; returns False when not exactly one was dropped."""
        files = list(files)
        if len(files) != 1:
            return False
        self.player.load(files[0])
        self._update_file_name(Path(files[0]).stem)
        return True

    def load_file(self, path: str | os.PathLike[str]) -> None:
        """Load a track into the player and the waveform view."""
        file = Path(path)
        if not file.is_file():
            raise FileNotFoundError(f"no such file: {file}")
        self.player.load(file)
        self._update_file_name(file.stem)
        self.waveform.load(file)

    def tick(self) -> None:
        """Move the waveform marker to the player's position."""
        self.waveform.set_position_relative(self.player.position_relative())

    def update_vu_meter(self, level: float) -> None:
        """Show a new output level on the meter."""
        self.vu_meter.set_level(level)

    def layout(self, width: int, height: int) -> dict[str, Box]:
        """Return the (x, y, width, height) of each part of a deck of this size."""
        row_h = float(height // 8)
        row_w = float(width // 6)
        button_y = 7 * row_h
        button_h = row_h - 10
        return {
            "file_name": _box(0, 0, width, row_h),
            "waveform": _box(0, row_h, row_w * 4, row_h),
            "vu_meter": _box(4 * row_w, row_h, row_w * 2, row_h),
            "position_slider": _box(row_w, 2 * row_h, row_w * 4, row_h),
            "speed_label": _box(0, 3 * row_h, row_w, row_h),
            "volume_label": _box(5 * row_w, 3 * row_h, row_w, row_h),
            "speed_slider": _box(0, 4 * row_h, row_w, row_h * 3),
            "volume_slider": _box(5 * row_w, 4 * row_h, row_w, row_h * 3),
            "fade_in": _box(row_w / 6, button_y, row_w, button_h),
            "play": _box(row_w + row_w / 6 * 2, button_y, row_w, button_h),
            "stop": _box(2 * row_w + row_w / 6 * 3, button_y, row_w, button_h),
            "fade_out": _box(3 * row_w + row_w / 6 * 4, button_y, row_w, button_h),
            "load": _box(4 * row_w + row_w / 6 * 5, button_y, row_w, button_h),
        }

    def record_geometry(self, width: int, height: int) -> tuple[float, float, float]:
        """Return the centre x, centre y and radius of the record drawn on the deck."""
        radius = float(height // 4 - 10)
        center_x = width / 2.0
        if width > height:
            center_y = float(height // 8 * 3) + radius + 10
        else:
            center_y = float(height // 8 * 5 + 2)
        return center_x, center_y, radius