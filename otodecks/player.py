"""Playback engine of one deck: transport, speed, gain and fades."""

from __future__ import annotations

import enum
import os
from collections.abc import Callable

import numpy as np

from .waveform import AudioClip, read_audio

_MAX_GAIN = 2.0
_MAX_SPEED = 2.0


def rms_level(block) -> float:
    """Return the root-mean-square level of a sequence of samples; 0.0 when empty."""
    samples = np.asarray(block, dtype=np.float64)
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(samples))))


class FadeState(enum.Enum):
    """What the fade timer is currently doing."""

    NONE = "none"
    FADE_IN = "fade_in"
    FADE_OUT = "fade_out"


class DJAudioPlayer:
    """Plays one loaded clip with adjustable gain, speed and position."""

    TIMER_INTERVAL_MS = 100
    GAIN_STEP = 0.05
    PLAY_VOLUME = 1.0
    OUTPUT_CHANNELS = 2

    def __init__(self, level_listener: Callable[[float], None] | None = None) -> None:
        self.level_listener = level_listener
        self.clip: AudioClip | None = None
        self.gain = 1.0
        self.speed = 1.0
        self.playing = False
        self.sample_rate = 44100.0
        self.block_size = 0
        self.fade_state = FadeState.NONE
        self.current_gain = 0.0
        self.timer_running = False
        self._read_pos = 0.0

    @property
    def length_seconds(self) -> float:
        return self.clip.length_seconds if self.clip is not None else 0.0

    @property
    def position(self) -> float:
        """Current playback position in seconds."""
        if self.clip is None:
            return 0.0
        return self._read_pos / self.clip.sample_rate

    def prepare_to_play(self, samples_per_block: int, sample_rate: float) -> None:
        """Set the block size and output sample rate that blocks will be rendered at."""
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive, got {sample_rate}")
        self.block_size = int(samples_per_block)
        self.sample_rate = float(sample_rate)

    def next_audio_block(self, num_samples: int) -> np.ndarray:
        """Render the next block, shaped (channels, num_samples), and report its level."""
        if num_samples < 0:
            raise ValueError(f"number of samples must not be negative, got {num_samples}")
        out = np.zeros((self.OUTPUT_CHANNELS, num_samples), dtype=np.float32)
        clip = self.clip
        if clip is not None and self.playing and num_samples > 0 and clip.num_channels > 0:
            frames = clip.num_frames
            step = self.speed * clip.sample_rate / self.sample_rate
            positions = self._read_pos + np.arange(num_samples) * step
            valid = positions < frames
            if frames > 0 and valid.any():
                wanted = positions[valid]
                low = np.floor(wanted).astype(np.int64)
                high = np.minimum(low + 1, frames - 1)
                frac = (wanted - low).astype(np.float32)
                channel_map = np.minimum(np.arange(self.OUTPUT_CHANNELS), clip.num_channels - 1)
                source = clip.samples[channel_map]
                mixed = source[:, low] * (1.0 - frac) + source[:, high] * frac
                out[:, valid] = mixed * self.gain
            self._read_pos += num_samples * step
            if self._read_pos >= frames:
                self._read_pos = float(frames)
                self.playing = False
        if self.level_listener is not None and out.shape[0] > 0:
            self.level_listener(rms_level(out[0]))
        return out

    def release_resources(self) -> None:
        """Forget the block size negotiated by prepare_to_play."""
        self.block_size = 0

    def load(self, path: str | os.PathLike[str]) -> bool:
        """Load a track, rewound and stopped; returns False if it cannot be read."""
        try:
            clip = read_audio(path)
        except (OSError, ValueError):
            return False
        self.clip = clip
        self._read_pos = 0.0
        self.playing = False
        return True

    def set_gain(self, gain: float) -> None:
        """Set the output gain, between 0 and 2."""
        if gain < 0 or gain > _MAX_GAIN:
            raise ValueError(f"gain must be between 0 and {_MAX_GAIN}, got {gain}")
        self.gain = float(gain)

    def set_speed(self, ratio: float) -> None:
        """Set the playback speed ratio, between 0 and 2."""
        if ratio < 0 or ratio > _MAX_SPEED:
            raise ValueError(f"speed must be between 0 and {_MAX_SPEED}, got {ratio}")
        self.speed = float(ratio)

    def set_position(self, seconds: float) -> None:
        """Move the playback position, kept within the loaded track."""
        if self.clip is None:
            return
        seconds = max(0.0, min(float(seconds), self.length_seconds))
        self._read_pos = seconds * self.clip.sample_rate

    def set_position_relative(self, pos: float) -> None:
        """Move to a fraction of the track's length, between 0 and 1."""
        if pos < 0 or pos > 1:
            raise ValueError(f"relative position must be between 0 and 1, got {pos}")
        self.set_position(self.length_seconds * pos)

    def start(self) -> None:
        """Start playback if a track is loaded."""
        if self.clip is not None:
            self.playing = True

    def stop(self) -> None:
        """Stop playback, keeping the position."""
        self.playing = False

    def fade_in(self) -> None:
        """Start playing and raise the gain from silence on each timer tick."""
        self.current_gain = 0.0
        self.fade_state = FadeState.FADE_IN
        self.start()
        self.timer_running = True

    def fade_out(self) -> None:
        """Lower the gain on each timer tick, then stop."""
        self.fade_state = FadeState.FADE_OUT
        self.timer_running = True

    def timer_tick(self) -> None:
        """Advance a running fade by one step."""
        if self.fade_state is FadeState.FADE_IN:
            if self.current_gain < self.PLAY_VOLUME:
                self.current_gain = min(self.current_gain + self.GAIN_STEP, self.PLAY_VOLUME)
                self.set_gain(self.current_gain)
            else:
                self.fade_state = FadeState.NONE
                self.timer_running = False
        elif self.fade_state is FadeState.FADE_OUT:
            if self.current_gain > 0.0:
                self.current_gain = max(self.current_gain - self.GAIN_STEP, 0.0)
                self.set_gain(self.current_gain)
            else:
                self.fade_state = FadeState.NONE
                self.timer_running = False
                self.stop()

    def position_relative(self) -> float:
        """Return the position as a fraction of the track length; 0.0 without a track."""
        length = self.length_seconds
        if length == 0:
            return 0.0
        return self.position / length