import wave

import numpy as np
import pytest

from otodecks.waveform import (
    AudioClip,
    MergedWaveformDisplay,
    Thumbnail,
    WaveformDisplay,
    read_audio,
)


def _write_wav(path, data, rate=8000, width=2):
    data = np.asarray(data)
    if width == 1:
        raw = (data + 128).astype(np.uint8).tobytes()
    elif width == 2:
        raw = data.astype("<i2").tobytes()
    elif width == 3:
        raw = b"".join(int(v).to_bytes(3, "little", signed=True) for v in data.ravel())
    else:
        raw = data.astype("<i4").tobytes()
    with wave.open(str(path), "wb") as w:
        w.setnchannels(data.shape[1])
        w.setsampwidth(width)
        w.setframerate(rate)
        w.writeframes(raw)
    return path


@pytest.fixture
def tone(tmp_path):
    frames = np.arange(5000)
    left = (np.sin(frames / 50.0) * 20000).astype(np.int16)
    right = (left // 2).astype(np.int16)
    data = np.stack([left, right], axis=1)
    return _write_wav(tmp_path / "tone.wav", data), data


def test_read_audio_round_trip_16bit(tone):
    path, data = tone
    clip = read_audio(path)
    assert clip.num_channels == 2
    assert clip.num_frames == len(data)
    assert clip.sample_rate == 8000
    assert np.array_equal(np.round(clip.samples * 32768).astype(np.int32), data.T)


def test_read_audio_24bit(tmp_path):
    data = np.array([[0], [1], [-1], [8388607], [-8388608], [12345]])
    clip = read_audio(_write_wav(tmp_path / "a.wav", data, width=3))
    assert np.array_equal(np.round(clip.samples[0].astype(np.float64) * (1 << 23)), data[:, 0])


def test_read_audio_8bit(tmp_path):
    data = np.array([[-128], [0], [127], [-5]])
    clip = read_audio(_write_wav(tmp_path / "b.wav", data, width=1))
    assert np.array_equal(np.round(clip.samples[0] * 128).astype(np.int32), data[:, 0])


def test_read_audio_rejects_non_wav(tmp_path):
    path = tmp_path / "song.mp3"
    path.write_bytes(b"not audio at all")
    with pytest.raises(ValueError):
        read_audio(path)


def test_clip_length_seconds():
    clip = AudioClip(np.zeros((1, 16000)), 8000)
    assert clip.length_seconds == 16000 / 8000


def test_clip_rejects_bad_shape():
    with pytest.raises(ValueError):
        AudioClip(np.zeros(10), 8000)


def test_thumbnail_blocks_and_bounds(tone):
    clip = read_audio(tone[0])
    thumb = Thumbnail.from_clip(clip, 1000)
    assert thumb.num_blocks == 5
    assert thumb.mins.shape == (2, 5)
    assert np.all(thumb.mins <= thumb.maxs)
    assert thumb.maxs.max() == clip.samples.max()
    assert thumb.mins.min() == clip.samples.min()
    assert thumb.total_length == clip.length_seconds


def test_thumbnail_partial_last_block():
    clip = AudioClip(np.arange(25, dtype=np.float32).reshape(1, 25) / 25, 100)
    thumb = Thumbnail.from_clip(clip, 10)
    assert thumb.num_blocks == 3
    assert thumb.maxs[0, -1] == clip.samples[0, -1]


def test_peaks_single_column_covers_whole_clip(tone):
    clip = read_audio(tone[0])
    thumb = Thumbnail.from_clip(clip, 100)
    assert thumb.peaks(1) == [(float(clip.samples[0].min()), float(clip.samples[0].max()))]


def test_peaks_wider_than_blocks(tone):
    thumb = Thumbnail.from_clip(read_audio(tone[0]), 1000)
    peaks = thumb.peaks(17)
    assert len(peaks) == 17
    assert all(low <= high for low, high in peaks)


def test_peaks_empty_clip():
    thumb = Thumbnail.from_clip(AudioClip(np.zeros((1, 0)), 100), 10)
    assert thumb.peaks(4) == [(0.0, 0.0)] * 4


def test_invalid_resolution_and_width(tone):
    clip = read_audio(tone[0])
    with pytest.raises(ValueError):
        Thumbnail.from_clip(clip, 0)
    with pytest.raises(ValueError):
        Thumbnail.from_clip(clip, 100).peaks(0)


def test_display_ignores_position_until_loaded(tmp_path):
    display = WaveformDisplay()
    assert display.load(tmp_path / "missing.wav") is False
    assert display.file_loaded is False
    display.set_position_relative(0.5)
    assert display.position == 0.0
    assert display.marker_rect(200, 50) is None


def test_display_position_after_load(tone):
    repaints = []
    display = WaveformDisplay(on_repaint=lambda: repaints.append(1))
    assert display.load(tone[0]) is True
    count = len(repaints)
    display.set_position_relative(0.5)
    assert display.position == 0.5
    assert len(repaints) == count + 1
    display.set_position_relative(0.5)
    assert len(repaints) == count + 1


def test_display_marker_rect(tone):
    display = WaveformDisplay()
    display.load(tone[0])
    assert display.marker_rect(200, 50) is None
    display.set_position_relative(0.5)
    assert display.marker_rect(200, 50) == (100.0, 5, 2, 40)


def test_merged_unloaded_has_no_markers():
    merged = MergedWaveformDisplay()
    assert merged.marker_rects(100, 40) == (None, None)


def test_merged_second_marker_follows_first_position_check(tone):
    merged = MergedWaveformDisplay()
    assert merged.load1(tone[0]) and merged.load2(tone[0])
    merged.set_position_relative(0.3, 0.6)
    assert (merged.position1, merged.position2) == (0.3, 0.6)
    merged.set_position_relative(0.6, 0.9)
    assert merged.position1 == 0.6
    assert merged.position2 == 0.6


def test_merged_set_position_always_repaints(tmp_path):
    repaints = []
    merged = MergedWaveformDisplay(on_repaint=lambda: repaints.append(1))
    merged.set_position_relative(0.1, 0.2)
    assert len(repaints) == 1
    assert merged.position1 == 0.0


def test_merged_update_position_alternates():
    merged = MergedWaveformDisplay()
    merged.update_position(0.2)
    merged.update_position(0.7)
    merged.update_position(0.4)
    assert merged.position1 == 0.4
    assert merged.position2 == 0.7


def test_merged_marker_rects_when_loaded(tone):
    merged = MergedWaveformDisplay()
    merged.load1(tone[0])
    merged.load2(tone[0])
    merged.set_position_relative(0.25, 0.75)
    first, second = merged.marker_rects(400, 60)
    assert first[2:] == (2, 60)
    assert second[2:] == (2, 60)
    assert first[0] < second[0]


def test_merged_failed_load(tmp_path):
    merged = MergedWaveformDisplay()
    assert merged.load2(tmp_path / "nothing.wav") is False
    assert merged.file_loaded2 is False