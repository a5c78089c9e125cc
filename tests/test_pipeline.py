"""End-to-end tests for the analysis pipeline."""

import dataclasses
import math

import numpy as np
import pytest

from beatscope import AnalysisParams, AnalysisPipeline, AnalysisResult, Waveform, analyze
from beatscope.core.waveform import Downmixer

from conftest import TEST_FPS, TEST_SR


@pytest.fixture
def pipeline():
    return AnalysisPipeline(fps=TEST_FPS)


# ---------------------------------------------------------------------------
# Synthetic click track
# ---------------------------------------------------------------------------

class TestClickTrack:
    def test_finds_every_burst(self, pipeline, click_track, click_times):
        result = pipeline.analyze(click_track)
        assert len(result.peaks) == len(click_times)
        np.testing.assert_allclose(result.peaks, click_times, atol=1.0 / TEST_FPS)

    def test_bpm_is_folded_octave_of_30(self, pipeline, click_track):
        result = pipeline.analyze(click_track)
        assert result.bpm == 60.0
        assert result.has_tempo

    def test_stereo_copy_gives_same_result(self, pipeline, click_factory):
        y = click_factory(n_bursts=10, noise=0.01)
        mono = pipeline.analyze(Waveform(y, TEST_SR))
        stereo = pipeline.analyze(Waveform([y, y], TEST_SR))
        np.testing.assert_allclose(stereo.intensities, mono.intensities)
        np.testing.assert_array_equal(stereo.peaks, mono.peaks)
        assert stereo.bpm == mono.bpm

    def test_peak_frames_match_burst_frames(self, pipeline, click_track):
        result = pipeline.analyze(click_track)
        np.testing.assert_array_equal(result.peak_frames, 30 + 120 * np.arange(30))
        assert np.all(result.intensities[result.peak_frames] > 0.99)

    def test_min_peaks_above_count_disables_tempo(self, click_track):
        result = analyze(click_track, TEST_FPS, AnalysisParams(min_peaks=50))
        assert len(result.peaks) == 30
        assert result.bpm is None


# ---------------------------------------------------------------------------
# Output invariants
# ---------------------------------------------------------------------------

class TestResultProperties:
    def test_deterministic(self, pipeline, click_track):
        a = pipeline.analyze(click_track)
        b = pipeline.analyze(click_track)
        assert a.intensities.tobytes() == b.intensities.tobytes()
        assert a.peaks.tobytes() == b.peaks.tobytes()
        assert a.bpm == b.bpm

    def test_normalized_maximum(self, pipeline, noise_signal):
        result = pipeline.analyze(noise_signal)
        assert result.intensities.max() == 1.0
        assert result.intensities.min() >= 0.0

    def test_frame_size_and_count(self, pipeline, noise_signal):
        result = pipeline.analyze(noise_signal)
        expected_size = max(1, math.floor(22050 / TEST_FPS + 0.5))
        assert result.frame_size == expected_size == 368
        assert result.n_frames == math.ceil(noise_signal.length / result.frame_size) == 28

    def test_peaks_within_duration(self, pipeline, click_track):
        result = pipeline.analyze(click_track)
        assert np.all(np.diff(result.peaks) > 0)
        assert result.peaks.min() >= 0.0
        assert result.peaks.max() <= result.duration

    def test_duration_from_waveform(self, pipeline, click_track):
        result = pipeline.analyze(click_track)
        assert result.duration == click_track.duration
        assert result.sample_rate == TEST_SR
        assert result.fps == TEST_FPS

    def test_frame_times(self, pipeline, noise_signal):
        result = pipeline.analyze(noise_signal)
        np.testing.assert_allclose(result.frame_times[:3], [0.0, 1 / 60, 2 / 60])
        assert len(result.frame_times) == result.n_frames

    def test_result_is_immutable(self, pipeline, click_track):
        result = pipeline.analyze(click_track)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.bpm = 120.0
        with pytest.raises(ValueError):
            result.intensities[0] = 0.5
        with pytest.raises(ValueError):
            result.peaks[0] = 0.0

    def test_result_leaves_caller_arrays_writeable(self):
        intensities = np.array([0.0, 1.0, 0.5])
        peaks = np.array([1 / 60])
        result = AnalysisResult(
            sample_rate=180.0, duration=0.05, intensities=intensities,
            frame_size=3, peaks=peaks, bpm=None, fps=60.0,
        )
        assert intensities.flags.writeable
        assert peaks.flags.writeable
        assert not result.intensities.flags.writeable
        assert not result.peaks.flags.writeable
        np.testing.assert_array_equal(result.intensities, intensities)

    def test_to_dict_is_plain_python(self, pipeline, click_track):
        d = pipeline.analyze(click_track).to_dict()
        assert isinstance(d["intensities"], list)
        assert isinstance(d["peaks"], list)
        assert d["bpm"] == 60.0
        assert d["frame_size"] == 735


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------

class TestDegenerateInput:
    def test_silence(self, pipeline, silence):
        result = pipeline.analyze(silence)
        assert len(result.peaks) == 0
        assert result.bpm is None
        assert result.n_frames == math.ceil(silence.length / 735)
        assert np.all(result.intensities == 0.0)

    @pytest.mark.parametrize("n, sr", [(1, 8000), (1000, 8000), (12345, 96000)])
    def test_silence_any_length_and_rate(self, n, sr):
        result = analyze(Waveform(np.zeros(n), sr), 60)
        assert len(result.peaks) == 0
        assert result.bpm is None
        assert np.all(result.intensities == 0.0)

    def test_cancelling_stereo_is_silence(self, pipeline, opposite_stereo):
        assert np.all(Downmixer.to_mono(opposite_stereo) == 0.0)
        result = pipeline.analyze(opposite_stereo)
        assert np.all(result.intensities == 0.0)
        assert len(result.peaks) == 0
        assert result.bpm is None

    def test_zero_length(self, pipeline):
        result = pipeline.analyze(Waveform(np.zeros(0), TEST_SR))
        assert result.n_frames == 0
        assert len(result.peaks) == 0
        assert result.bpm is None
        assert result.duration == 0.0

    def test_frame_size_clamped_to_one(self):
        wf = Waveform(np.linspace(0, 1, 50), 100)
        result = analyze(wf, fps=1000)
        assert result.frame_size == 1
        assert result.n_frames == 50

    def test_peak_on_short_last_frame_stays_within_duration(self):
        # 8000 / 60 rounds down to 133, so the final frame starts at
        # 601 / 60 s, after the 10 s of audio.
        y = np.zeros(80000)
        y[-40:] = 1.0
        result = analyze(Waveform(y, 8000), 60)
        assert result.frame_size == 133
        assert result.duration == 10.0
        np.testing.assert_array_equal(result.peaks, [10.0])

    def test_trailing_peaks_clamp_to_one(self):
        # At 70 fps over 100 Hz every frame is one sample, so frame times
        # run 1.4x faster than the audio and both spikes fall past 2 s.
        y = np.zeros(200)
        y[150] = 1.0
        y[199] = 1.0
        result = analyze(Waveform(y, 100), 70)
        assert result.frame_size == 1
        np.testing.assert_array_equal(result.peaks, [2.0])

    def test_few_peaks_gives_no_tempo(self, pipeline, click_factory):
        y = click_factory(n_bursts=3, noise=0.0)
        result = pipeline.analyze(Waveform(y, TEST_SR))
        assert len(result.peaks) == 3
        assert result.bpm is None


# ---------------------------------------------------------------------------
# Call boundary
# ---------------------------------------------------------------------------

class TestBoundary:
    @pytest.mark.parametrize("fps", [0, -1, float("nan"), float("inf")])
    def test_rejects_bad_fps(self, fps):
        with pytest.raises(ValueError, match="fps"):
            AnalysisPipeline(fps=fps)

    def test_module_function_matches_pipeline(self, click_track):
        a = analyze(click_track, TEST_FPS)
        b = AnalysisPipeline(fps=TEST_FPS).analyze(click_track)
        np.testing.assert_array_equal(a.intensities, b.intensities)
        np.testing.assert_array_equal(a.peaks, b.peaks)
        assert a.bpm == b.bpm

    def test_result_type(self, click_track):
        assert isinstance(analyze(click_track), AnalysisResult)
