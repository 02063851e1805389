"""Audio reading, waveform thumbnails and the single and merged waveform views."""

from __future__ import annotations

import os
import wave
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

_SAMPLES_PER_THUMB = 1000

Rect = tuple[float, float, float, float]


@dataclass
class AudioClip:
    """Decoded audio as float samples shaped (channels, frames)."""

    samples: np.ndarray
    sample_rate: float

    def __post_init__(self) -> None:
        self.samples = np.asarray(self.samples, dtype=np.float32)
        if self.samples.ndim != 2:
            raise ValueError("samples must be shaped (channels, frames)")
        if self.sample_rate <= 0:
            raise ValueError(f"sample rate must be positive, got {self.sample_rate}")

    @property
    def num_channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def num_frames(self) -> int:
        return int(self.samples.shape[1])

    @property
    def length_seconds(self) -> float:
        return self.num_frames / self.sample_rate


def _decode(raw: bytes, width: int) -> np.ndarray:
    if width == 1:
        return (np.frombuffer(raw, dtype=np.uint8).astype(np.float32) - 128.0) / 128.0
    if width == 2:
        return np.frombuffer(raw, dtype="<i2").astype(np.float32) / 32768.0
    if width == 3:
        usable = len(raw) // 3 * 3
        triples = np.frombuffer(raw[:usable], dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        values = triples[:, 0] | (triples[:, 1] << 8) | (triples[:, 2] << 16)
        values = np.where(values >= 1 << 23, values - (1 << 24), values)
        return values.astype(np.float32) / float(1 << 23)
    if width == 4:
        return (np.frombuffer(raw, dtype="<i4").astype(np.float64) / float(1 << 31)).astype(
            np.float32
        )
    raise ValueError(f"unsupported sample width: {width} bytes")


def read_audio(path: str | os.PathLike[str]) -> AudioClip:
    """Read a PCM WAV file into an AudioClip; raises ValueError if it is not readable audio."""
    try:
        with wave.open(os.fspath(path), "rb") as wav:
            channels = wav.getnchannels()
            width = wav.getsampwidth()
            rate = wav.getframerate()
            raw = wav.readframes(wav.getnframes())
    except (wave.Error, EOFError) as exc:
        raise ValueError(f"cannot read audio from {path}: {exc}") from exc
    data = _decode(raw, width)
    frames = len(data) // channels
    samples = data[: frames * channels].reshape(frames, channels).T
    return AudioClip(np.ascontiguousarray(samples), float(rate))


@dataclass
class Thumbnail:
    """Per-block minimum and maximum sample values of a clip, shaped (channels, blocks)."""

    mins: np.ndarray
    maxs: np.ndarray
    samples_per_block: int
    sample_rate: float
    num_frames: int

    @classmethod
    def from_clip(cls, clip: AudioClip, resolution: int) -> Thumbnail:
        """Summarise a clip in blocks of `resolution` frames."""
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        samples = clip.samples
        if clip.num_frames == 0:
            empty = np.zeros((clip.num_channels, 0), dtype=np.float32)
            return cls(empty, empty.copy(), resolution, clip.sample_rate, 0)
        starts = np.arange(0, clip.num_frames, resolution)
        mins = np.minimum.reduceat(samples, starts, axis=1)
        maxs = np.maximum.reduceat(samples, starts, axis=1)
        return cls(mins, maxs, resolution, clip.sample_rate, clip.num_frames)

    @property
    def num_blocks(self) -> int:
        return int(self.mins.shape[1])

    @property
    def total_length(self) -> float:
        return self.num_frames / self.sample_rate

    def peaks(self, width: int) -> list[tuple[float, float]]:
        """Return (low, high) of the first channel for each of `width` columns."""
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if self.num_blocks == 0 or self.mins.shape[0] == 0:
            return [(0.0, 0.0)] * width
        starts = (np.arange(width) * self.num_blocks) // width
        lows = np.minimum.reduceat(self.mins[0], starts)
        highs = np.maximum.reduceat(self.maxs[0], starts)
        return list(zip(lows.tolist(), highs.tolist()))


def _load_thumbnail(path: str | os.PathLike[str]) -> Thumbnail | None:
    try:
        clip = read_audio(path)
    except (OSError, ValueError):
        return None
    return Thumbnail.from_clip(clip, _SAMPLES_PER_THUMB)


class WaveformDisplay:
    """Waveform of one deck's track with a marker at the playback position."""

    def __init__(self, on_repaint: Callable[[], None] | None = None) -> None:
        self.thumbnail: Thumbnail | None = None
        self.file_loaded = False
        self.position = 0.0
        self._on_repaint = on_repaint

    def _repaint(self) -> None:
        if self._on_repaint is not None:
            self._on_repaint()

    def load(self, path: str | os.PathLike[str]) -> bool:
        """Load a track's waveform; returns whether it could be read."""
        self.thumbnail = _load_thumbnail(path)
        self.file_loaded = self.thumbnail is not None
        if self.file_loaded:
            self._repaint()
        return self.file_loaded

    def set_position_relative(self, pos: float) -> None:
        """Move the marker; ignored until a file is loaded."""
        if self.file_loaded and self.position != pos:
            self.position = pos
            self._repaint()

    def marker_rect(self, width: int, height: int) -> Rect | None:
        """Return the marker rectangle for a view of this size, or None when not drawn."""
        if self.position != 0 and 0 <= self.position <= width:
            return (self.position * width, 5, width // 100, height - 10)
        return None


class MergedWaveformDisplay:
    """Both decks' waveforms drawn over one another, each with its own marker."""

    def __init__(self, on_repaint: Callable[[], None] | None = None) -> None:
        self.thumbnail1: Thumbnail | None = None
        self.thumbnail2: Thumbnail | None = None
        self.file_loaded1 = False
        self.file_loaded2 = False
        self.position1 = 0.0
        self.position2 = 0.0
        self._first_update = True
        self._on_repaint = on_repaint

    def _repaint(self) -> None:
        if self._on_repaint is not None:
            self._on_repaint()

    def load1(self, path: str | os.PathLike[str]) -> bool:
        """Load the first deck's track; returns whether it could be read."""
        self.thumbnail1 = _load_thumbnail(path)
        self.file_loaded1 = self.thumbnail1 is not None
        self._repaint()
        return self.file_loaded1

    def load2(self, path: str | os.PathLike[str]) -> bool:
        """Load the second deck's track; returns whether it could be read."""
        self.thumbnail2 = _load_thumbnail(path)
        self.file_loaded2 = self.thumbnail2 is not None
        self._repaint()
        return self.file_loaded2

    def set_position_relative(self, pos1: float, pos2: float) -> None:
        """Move both markers; the second moves only when it differs from pos1."""
        if self.file_loaded1 and self.position1 != pos1:
            self.position1 = pos1
            self._repaint()
        if self.file_loaded2 and self.position2 != pos1:
            self.position2 = pos2
            self._repaint()
        self._repaint()

    def update_position(self, pos: float) -> None:
        """Set the first and second marker in turn on successive calls."""
        if self._first_update:
            self.position1 = pos
        else:
            self.position2 = pos
        self._first_update = not self._first_update
        if self.position1 != self.position2:
            self._repaint()

    def marker_rects(self, width: int, height: int) -> tuple[Rect | None, Rect | None]:
        """Return the marker rectangles of both decks, None where one is not drawn."""
        first = (
            (self.position1 * width, 0, 2, height)
            if self.file_loaded1 and 0 <= self.position1 <= width
            else None
        )
        second = (
            (self.position2 * width, 0, 2, height)
            if self.file_loaded2 and 0 <= self.position2 <= width
            else None
        )
        return first, second