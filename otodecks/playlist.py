"""Playlist of tracks that can be renamed, removed, saved and sent to a deck."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .deck import Deck
from .queues import FileQueues, global_file_queue

PLAYLIST_FILE = "playlist.json"
LOAD_BUTTON = "load_playlist"
SAVE_BUTTON = "save_playlist"

_DECK1_COLUMN = 2
_DECK2_COLUMN = 3
_REMOVE_COLUMN = 4


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


class Playlist:
    """Tracks shown in the playlist table, each with an editable title and its file location."""

    COLUMNS = ("Track Title / Description", "", "", "")

    def __init__(
        self,
        deck1: Deck,
        deck2: Deck,
        queues: FileQueues | None = None,
        directory: str | os.PathLike[str] | None = None,
    ) -> None:
        self.decks = (deck1, deck2)
        self.queues = queues if queues is not None else global_file_queue
        self.directory = Path(directory) if directory is not None else Path.cwd()
        self.track_titles: list[str] = []
        self.file_locations: list[str] = []
        self.load()

    @property
    def path(self) -> Path:
        """The file the playlist is saved to and loaded from."""
        return self.directory / PLAYLIST_FILE

    @property
    def num_rows(self) -> int:
        return len(self.track_titles)

    @staticmethod
    def cell_id(row: int, column: int) -> str:
        """Return the component id of the button in a table cell."""
        return f"{row}-{column}"

    def files_dropped(self, files: Iterable[str | os.PathLike[str]]) -> None:
        """Append dropped files, by full path, as new rows."""
        for file in files:
            full_path = os.path.abspath(os.fspath(file))
            self.track_titles.append(full_path)
            self.file_locations.append(full_path)

    def rename(self, row: int, title: str) -> None:
        """Change the title shown for a row; its file location stays the same."""
        if not 0 <= row < len(self.track_titles):
            raise IndexError(f"no playlist row {row}")
        self.track_titles[row] = title

    def push_to_deck(self, row: int, deck: int) -> str:
        """Queue a row's file for deck 1 or 2 and load it there; returns the file path."""
        if deck not in (1, 2):
            raise ValueError(f"deck must be 1 or 2, got {deck}")
        if not 0 <= row < len(self.file_locations):
            raise IndexError(f"no playlist row {row}")
        path = self.file_locations[row]
        self.queues.add(deck - 1, path)
        self.decks[deck - 1].load_file(path)
        return path

    def remove(self, row: int) -> None:
        """Remove a row's file location and title."""
        in_locations = 0 <= row < len(self.file_locations)
        in_titles = 0 <= row < len(self.track_titles)
        if not (in_locations or in_titles):
            raise IndexError(f"no playlist row {row}")
        if in_locations:
            del self.file_locations[row]
        if in_titles:
            del self.track_titles[row]

    def button_clicked(self, component_id: str) -> None:
        """React to a table cell button ("row-column") or the load and save buttons."""
        if component_id == LOAD_BUTTON:
            self.load()
            return
        if component_id == SAVE_BUTTON:
            self.save()
            return
        row_text, sep, column_text = component_id.partition("-")
        try:
            row, column = int(row_text), int(column_text)
        except ValueError:
            raise ValueError(f"malformed button id: {component_id!r}") from None
        if not sep:
            raise ValueError(f"malformed button id: {component_id!r}")
        if column == _DECK1_COLUMN:
            self.push_to_deck(row, 1)
        elif column == _DECK2_COLUMN:
            self.push_to_deck(row, 2)
        elif column == _REMOVE_COLUMN:
            self.remove(row)

    def save(self) -> Path:
        """Write the file locations to the playlist file and return its path."""
        path = self.path
        path.write_text(json.dumps({"tracks": list(self.file_locations)}, indent=2), encoding="utf-8")
        return path

    def load(self) -> bool:
        """Read file locations from the playlist file; returns whether any list was read.

        File locations are replaced, while titles are appended to the ones already shown.
        """
        path = self.path
        if not path.is_file():
            return False
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return False
        if not isinstance(data, dict):
            return False
        tracks = data.get("tracks")
        if not isinstance(tracks, list):
            return False
        self.file_locations.clear()
        for track in tracks:
            text = _as_text(track)
            self.file_locations.append(text)
            self.track_titles.append(text)
        return True