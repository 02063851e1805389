"""Two decks mixed together with a shared playlist."""

from __future__ import annotations

import argparse
import os
import sys
import wave

import numpy as np

from .deck import Deck
from .player import DJAudioPlayer
from .playlist import Playlist
from .queues import FileQueues, initialize_global_state

Box = tuple[int, int, int, int]

_RENDER_BLOCK = 512


class DJApp:
    """Two players with their decks, summed into one output, and the playlist below them."""

    DEFAULT_SIZE = (800, 600)
    OUTPUT_CHANNELS = DJAudioPlayer.OUTPUT_CHANNELS

    def __init__(
        self,
        directory: str | os.PathLike[str] | None = None,
        queues: FileQueues | None = None,
        choose_file=None,
    ) -> None:
        self.queues = queues if queues is not None else initialize_global_state()
        self.player1 = DJAudioPlayer()
        self.player2 = DJAudioPlayer()
        self.deck1 = Deck(self.player1, choose_file=choose_file, cover_dir=directory)
        self.deck2 = Deck(self.player2, choose_file=choose_file, cover_dir=directory)
        self.playlist = Playlist(self.deck1, self.deck2, queues=self.queues, directory=directory)
        self.width, self.height = self.DEFAULT_SIZE
        self.sample_rate: float | None = None
        self.block_size = 0

    @property
    def players(self) -> tuple[DJAudioPlayer, DJAudioPlayer]:
        return self.player1, self.player2

    def prepare_to_play(self, samples_per_block: int, sample_rate: float) -> None:
        """Prepare both players for the given block size and sample rate."""
        for player in self.players:
            player.prepare_to_play(samples_per_block, sample_rate)
        self.block_size = int(samples_per_block)
        self.sample_rate = float(sample_rate)

    def next_audio_block(self, num_samples: int) -> np.ndarray:
        """Return the sum of both players' next blocks, shaped (channels, num_samples)."""
        mix = np.zeros((self.OUTPUT_CHANNELS, num_samples), dtype=np.float32)
        for player in self.players:
            mix += player.next_audio_block(num_samples)
        return mix

    def release_resources(self) -> None:
        """Release both players' resources."""
        for player in self.players:
            player.release_resources()
        self.block_size = 0

    def layout(self, width: int, height: int) -> dict[str, Box]:
        """Return the (x, y, width, height) of both decks and the playlist."""
        self.width, self.height = width, height
        half = width // 2
        deck_height = height * 2 // 3
        return {
            "deck1": (0, 0, half, deck_height),
            "deck2": (half, 0, half, deck_height),
            "playlist": (0, height // 3 * 2, width, height // 3),
        }


def _render(app: DJApp, seconds: float, sample_rate: int) -> np.ndarray:
    app.prepare_to_play(_RENDER_BLOCK, sample_rate)
    remaining = int(round(seconds * sample_rate))
    chunks = []
    while remaining > 0:
        count = min(_RENDER_BLOCK, remaining)
        chunks.append(app.next_audio_block(count))
        remaining -= count
    app.release_resources()
    if not chunks:
        return np.zeros((app.OUTPUT_CHANNELS, 0), dtype=np.float32)
    return np.concatenate(chunks, axis=1)


def _write_wav(path: str, mix: np.ndarray, sample_rate: int) -> None:
    pcm = (np.clip(mix, -1.0, 1.0) * 32767).astype("<i2").T
    with wave.open(path, "wb") as wav:
        wav.setnchannels(mix.shape[0])
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(np.ascontiguousarray(pcm).tobytes())


def main(argv: list[str] | None = None) -> int:
    """List the playlist, or mix the decks' tracks into a WAV file with --output."""
    parser = argparse.ArgumentParser(prog="otodecks", description="Two-deck audio mixer.")
    parser.add_argument("--directory", help="folder holding the playlist and record cover")
    parser.add_argument("--deck1", help="track to play on deck 1")
    parser.add_argument("--deck2", help="track to play on deck 2")
    parser.add_argument("--output", help="WAV file to write the mix to")
    parser.add_argument("--seconds", type=float, default=10.0, help="length of the mix")
    parser.add_argument("--sample-rate", type=int, default=44100, help="output sample rate")
    args = parser.parse_args(argv)
    if args.seconds < 0:
        parser.error("--seconds must not be negative")
    if args.sample_rate <= 0:
        parser.error("--sample-rate must be positive")

    app = DJApp(directory=args.directory)
    if args.output is None:
        for title in app.playlist.track_titles:
            print(title)
        return 0

    try:
        for deck, track in ((app.deck1, args.deck1), (app.deck2, args.deck2)):
            if track:
                deck.load_file(track)
                deck.player.start()
    except FileNotFoundError as exc:
        print(f"otodecks: {exc}", file=sys.stderr)
        return 1

    _write_wav(args.output, _render(app, args.seconds, args.sample_rate), args.sample_rate)
    return 0