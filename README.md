# otodecks

A two-deck DJ mixer model. Each deck loads a PCM WAV track, plays and stops
it, fades it in or out, changes its speed and volume, and seeks within it.
The outputs of both decks are summed into one stereo stream. A shared playlist
keeps dropped-in tracks, lets you retitle them, push them to either deck,
remove them, and save them to or load them from `playlist.json`.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## The `otodecks` command

```
otodecks [--directory DIR] [--deck1 TRACK] [--deck2 TRACK]
         [--output FILE] [--seconds N] [--sample-rate RATE]
```

- Without `--output`, it prints the titles of the playlist stored in
  `playlist.json` in `--directory` (the working directory by default).
- With `--output`, it loads `--deck1` and `--deck2` (each optional), starts
  them, and writes `--seconds` (default 10) of their mix as a 16-bit stereo
  WAV file at `--sample-rate` (default 44100). A missing track file makes it
  print an error and exit with status 1.

## Using it from Python

- `otodecks.app.DJApp` holds `player1`/`player2`, `deck1`/`deck2` and the
  `playlist`. `prepare_to_play`, `next_audio_block` (an array shaped
  `(2, num_samples)`, the sum of both players) and `release_resources` drive
  the audio; `layout(width, height)` returns the boxes of both decks and the
  playlist.
- `otodecks.player.DJAudioPlayer` plays one loaded track. `set_gain` and
  `set_speed` accept 0 to 2 and `set_position_relative` 0 to 1; values outside
  raise `ValueError`. `load` returns `False` for a file it cannot read.
  `fade_in` starts playback from silence and `fade_out` stops it at silence;
  each `timer_tick` moves the gain by 0.05 (the caller calls it, e.g. every
  `TIMER_INTERVAL_MS` = 100 ms). Every rendered block passes its RMS level
  (`rms_level`) to `level_listener`.
- `otodecks.deck.Deck` handles the buttons `play`, `stop`, `load`, `fade_in`,
  `fade_out` and the sliders `volume`, `speed`, `position` (clamped to their
  ranges). `load` asks the `choose_file` callback for a path. `load_file`
  raises `FileNotFoundError` for a missing file; `files_dropped` loads a
  single dropped file. `tick` moves the waveform marker, `layout` and
  `record_geometry` give the deck's geometry, and `clean_file_name` strips
  `.mp3`/`.wav` from a displayed name.
- `otodecks.playlist.Playlist` holds `track_titles` and `file_locations` with
  `files_dropped`, `rename`, `push_to_deck`, `remove`, `save` and `load`.
  `button_clicked` takes a cell id `"row-column"` (column 2: deck 1, 3:
  deck 2, 4: remove) or `"load_playlist"` / `"save_playlist"`. Loading
  replaces the file locations but appends to the titles already shown.
- `otodecks.waveform` has `read_audio` (PCM WAV into an `AudioClip`),
  `Thumbnail` (per-block minima and maxima, `peaks(width)`), and the
  `WaveformDisplay` and `MergedWaveformDisplay` views with their marker
  rectangles.
- `otodecks.vu_meter.VUMeter` turns a level between 0 and 1 into a bar
  rectangle.
- `otodecks.queues.FileQueues` records which files were sent to each deck;
  `initialize_global_state` adds two deck queues to the shared queues.

## What it does not do

- There is no graphical window: decks, playlist and meters are models whose
  state and geometry you read and drive yourself.
- It does not play through a sound device; audio is only rendered into arrays
  or, by the command, into a WAV file.
- Only uncompressed PCM WAV files can be read; MP3 and other formats are not
  decoded.