"""A two-deck DJ mixer model: players, decks, playlist, waveform overviews and VU metering."""

__version__ = "0.1.0"