"""Per-deck queues of files sent from the playlist."""

from __future__ import annotations

import os


class FileQueues:
    """An ordered list of file paths for each deck, addressed by deck index."""

    def __init__(self, decks: int = 2) -> None:
        if decks < 0:
            raise ValueError(f"number of decks must not be negative, got {decks}")
        self._queues: list[list[str]] = [[] for _ in range(decks)]

    def __len__(self) -> int:
        return len(self._queues)

    def _queue(self, deck: int) -> list[str]:
        if not 0 <= deck < len(self._queues):
            raise IndexError(f"no queue for deck {deck}")
        return self._queues[deck]

    def add(self, deck: int, path: str | os.PathLike[str]) -> None:
        """Append a file path to the queue of the given deck."""
        self._queue(deck).append(os.fspath(path))

    def tracks(self, deck: int) -> list[str]:
        """Return a copy of the paths queued for the given deck."""
        return list(self._queue(deck))


global_file_queue = FileQueues(0)


def initialize_global_state() -> FileQueues:
    """Add one queue for each of the two decks to the shared queues and return them."""
    global_file_queue._queues.extend([[], []])
    return global_file_queue