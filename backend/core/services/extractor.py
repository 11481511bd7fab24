"""
Peak & Transfer Extractor Service

Per-swing feature extraction: the peak energy of every segment, when it
happened, and how much of it was handed up the chain.

Pure computation - no scoring or classification decisions are made here.
"""

import math
from typing import Iterable

from ..domain.motion import Segment, SegmentPeak, SwingFeature, SwingWindow


class PeakExtractor:
    """
    Turns windowed swings into SwingFeature records.

    All methods are static - no state needed.
    """

    @staticmethod
    def find_peaks(window: SwingWindow) -> dict[Segment, SegmentPeak]:
        """
        Running maximum per segment in a single pass.

        A later sample only replaces the peak when strictly greater, so
        ties keep the first (earliest) occurrence. A segment that never
        rises above 0 reports a peak of 0 at time offset 0. Non-finite
        readings are ignored.
        """
        best = {segment: (0.0, 0.0) for segment in Segment}

        for row in window.rows:
            for segment in Segment:
                energy = row.energy_of(segment)
                if math.isfinite(energy) and energy > best[segment][0]:
                    best[segment] = (energy, row.time_offset)

        return {
            segment: SegmentPeak(energy=energy, time_offset=time_offset)
            for segment, (energy, time_offset) in best.items()
        }

    @staticmethod
    def safe_ratio(numerator: float, denominator: float) -> float:
        """numerator / denominator, or 0 when the denominator is 0."""
        return numerator / denominator if denominator > 0 else 0.0

    @classmethod
    def extract(cls, window: SwingWindow) -> SwingFeature:
        """
        Extract the features of one swing.

        Args:
            window: In-window rows of a single swing

        Returns:
            Immutable SwingFeature
        """
        peaks = cls.find_peaks(window)

        legs = peaks[Segment.LEGS]
        torso = peaks[Segment.TORSO]
        arms = peaks[Segment.ARMS]
        bat = peaks[Segment.BAT]
        total = peaks[Segment.TOTAL]

        bat_instrumented = bat.energy > 0 and total.energy > 0

        return SwingFeature(
            swing_id=window.swing_id,
            peaks=peaks,
            legs_to_torso=cls.safe_ratio(torso.energy, legs.energy),
            torso_to_arms=cls.safe_ratio(arms.energy, torso.energy),
            total_efficiency=bat.energy / total.energy if bat_instrumented else 0.0,
            bat_instrumented=bat_instrumented,
            proper_sequence=legs.time_offset <= torso.time_offset <= arms.time_offset,
        )

    @classmethod
    def extract_all(cls, windows: Iterable[SwingWindow]) -> list[SwingFeature]:
        return [cls.extract(window) for window in windows]
