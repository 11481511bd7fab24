"""Tests for swing segmentation and per-swing feature extraction."""

import random

import pytest

from core.config import ActionWindow
from core.domain import MotionRow, Segment, SwingWindow
from core.services import PeakExtractor, SwingSegmenter


def _row(swing_id, t, **energy):
    return MotionRow(
        swing_id=swing_id,
        time_offset=t,
        energy={Segment(k): v for k, v in energy.items()},
    )


# ============================================================================
# Test: Segmenter
# ============================================================================

class TestSwingSegmenter:

    def test_groups_rows_by_swing(self, swing):
        rows = swing("b") + swing("a")
        windows = SwingSegmenter().segment(rows)

        assert [w.swing_id for w in windows] == ["a", "b"]
        assert all(len(w) == 12 for w in windows)

    def test_rows_outside_window_are_trimmed(self, swing):
        rows = swing("a") + [_row("a", -0.9, legs=999.0), _row("a", 0.3, legs=999.0)]
        window = SwingSegmenter().segment(rows)[0]

        assert len(window) == 12
        assert all(-0.5 <= r.time_offset <= 0.1 for r in window.rows)

    def test_window_bounds_are_inclusive(self):
        rows = [_row("a", -0.5, legs=1.0), _row("a", 0.1, legs=1.0)]
        windows = SwingSegmenter(min_rows=2).segment(rows)

        assert len(windows) == 1
        assert len(windows[0]) == 2

    def test_sparse_swing_is_dropped(self, swing):
        rows = swing("dense") + swing("sparse", n_rows=9)
        windows = SwingSegmenter().segment(rows)

        assert [w.swing_id for w in windows] == ["dense"]

    def test_minimum_density_is_inclusive(self, swing):
        assert len(SwingSegmenter().segment(swing("a", n_rows=10))) == 1

    def test_swing_entirely_outside_window_is_dropped(self):
        rows = [_row("late", 0.5 + i * 0.01, legs=100.0) for i in range(20)]
        assert SwingSegmenter().segment(rows) == []

    def test_rows_are_sorted_by_time(self, swing):
        rows = swing("a")
        shuffled = list(rows)
        random.Random(3).shuffle(shuffled)

        window = SwingSegmenter().segment(shuffled)[0]

        times = [r.time_offset for r in window.rows]
        assert times == sorted(times)

    def test_custom_window(self, swing):
        segmenter = SwingSegmenter(window=ActionWindow(start=-0.2, end=0.0), min_rows=3)
        window = segmenter.segment(swing("a"))[0]

        assert all(-0.2 <= r.time_offset <= 0.0 for r in window.rows)

    def test_empty_input(self):
        assert SwingSegmenter().segment([]) == []


# ============================================================================
# Test: Extractor
# ============================================================================

class TestPeakExtractor:

    def test_peaks_and_times(self, swing):
        window = SwingWindow("a", tuple(swing("a")))
        feature = PeakExtractor.extract(window)

        assert feature.peak_energy(Segment.LEGS) == pytest.approx(200.0)
        assert feature.peak_time(Segment.LEGS) == pytest.approx(-0.28)
        assert feature.peak_energy(Segment.ARMS) == pytest.approx(150.0)
        assert feature.peak_time(Segment.ARMS) == pytest.approx(-0.16)

    def test_non_finite_energies_are_ignored(self):
        rows = (
            _row("a", -0.3, legs=100.0, torso=float("nan")),
            _row("a", -0.2, legs=float("inf"), torso=40.0),
            _row("a", -0.1, legs=50.0, torso=float("-inf")),
        )
        peaks = PeakExtractor.find_peaks(SwingWindow("a", rows))

        assert peaks[Segment.LEGS].energy == pytest.approx(100.0)
        assert peaks[Segment.LEGS].time_offset == pytest.approx(-0.3)
        assert peaks[Segment.TORSO].energy == pytest.approx(40.0)

    def test_ties_keep_first_occurrence(self):
        rows = (
            _row("a", -0.3, legs=100.0),
            _row("a", -0.2, legs=100.0),
            _row("a", -0.1, legs=50.0),
        )
        peaks = PeakExtractor.find_peaks(SwingWindow("a", rows))

        assert peaks[Segment.LEGS].time_offset == pytest.approx(-0.3)

    def test_transfer_ratios(self, swing):
        feature = PeakExtractor.extract(SwingWindow("a", tuple(swing("a"))))

        assert feature.legs_to_torso == pytest.approx(0.5)
        assert feature.torso_to_arms == pytest.approx(1.5)
        assert feature.total_efficiency == pytest.approx(300.0 / 550.0)
        assert feature.bat_instrumented

    def test_zero_denominators_give_zero_ratios(self, swing):
        rows = swing("a", legs=0.0, torso=0.0)
        feature = PeakExtractor.extract(SwingWindow("a", tuple(rows)))

        assert feature.legs_to_torso == 0.0
        assert feature.torso_to_arms == 0.0

    def test_missing_bat_marks_swing_uninstrumented(self, swing):
        feature = PeakExtractor.extract(SwingWindow("a", tuple(swing("a", bat=0.0))))

        assert feature.total_efficiency == 0.0
        assert not feature.bat_instrumented

    def test_proper_sequence(self, swing):
        feature = PeakExtractor.extract(SwingWindow("a", tuple(swing("a"))))
        assert feature.proper_sequence

    def test_simultaneous_peaks_count_as_proper(self, swing):
        rows = swing("a", legs_idx=6, torso_idx=6, arms_idx=6)
        assert PeakExtractor.extract(SwingWindow("a", tuple(rows))).proper_sequence

    def test_arms_before_torso_is_not_proper(self, swing):
        rows = swing("a", torso_idx=8, arms_idx=6)
        feature = PeakExtractor.extract(SwingWindow("a", tuple(rows)))

        assert not feature.proper_sequence
        assert feature.torso_bypass
        assert not feature.late_legs

    def test_late_legs(self, swing):
        rows = swing("a", legs_idx=10, arms_idx=7)
        feature = PeakExtractor.extract(SwingWindow("a", tuple(rows)))

        assert feature.late_legs
        assert not feature.proper_sequence

    def test_legs_torso_gap(self, swing):
        feature = PeakExtractor.extract(SwingWindow("a", tuple(swing("a", legs_idx=2, torso_idx=5))))
        assert feature.legs_torso_gap_ms == pytest.approx(120.0)
