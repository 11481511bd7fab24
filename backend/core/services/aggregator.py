"""
Session Aggregator Service

Combines per-swing features into session-level means, coefficients of
variation and sequencing-pattern fractions.
"""

from typing import Sequence

import numpy as np

from ..config import DEFAULT_CONFIG
from ..domain.motion import DataQuality, Segment, SessionFeatureSet, SwingFeature


def coefficient_of_variation(values: Sequence[float]) -> float:
    """
    Population standard deviation over |mean|, in percent.

    Returns 0 for fewer than 2 values or a zero mean.
    """
    if len(values) < 2:
        return 0.0

    arr = np.asarray(values, dtype=float)
    mean = float(np.mean(arr))
    if mean == 0:
        return 0.0

    return float(np.std(arr) / abs(mean) * 100)


def _mean(values: Sequence[float]) -> float:
    return float(np.mean(values)) if len(values) else 0.0


def _fraction(flags: Sequence[bool]) -> float:
    return sum(1 for f in flags if f) / len(flags) if flags else 0.0


class SessionAggregator:
    """
    Builds a SessionFeatureSet from a session's SwingFeatures.

    Usage:
        aggregator = SessionAggregator()
        features = aggregator.aggregate(swing_features)
    """

    def __init__(self, bat_noise_floor: float = DEFAULT_CONFIG.bat_noise_floor):
        self.bat_noise_floor = bat_noise_floor

    def aggregate(self, swings: Sequence[SwingFeature]) -> SessionFeatureSet:
        """
        Aggregate a session.

        Args:
            swings: Features of every surviving swing (may be empty)

        Returns:
            SessionFeatureSet; all-zero for an empty session
        """
        if not swings:
            return self.empty()

        mean_peak = {}
        cv_peak = {}
        for segment in Segment:
            peaks = [s.peak_energy(segment) for s in swings]
            mean_peak[segment] = _mean(peaks)
            cv_peak[segment] = coefficient_of_variation(peaks)

        credible_bat = [s.has_credible_bat(self.bat_noise_floor) for s in swings]

        return SessionFeatureSet(
            swing_count=len(swings),
            data_quality=DataQuality.from_swing_count(len(swings)),
            mean_peak=mean_peak,
            cv_peak=cv_peak,
            mean_legs_to_torso=_mean([s.legs_to_torso for s in swings]),
            mean_torso_to_arms=_mean([s.torso_to_arms for s in swings]),
            mean_total_efficiency=_mean([s.total_efficiency for s in swings]),
            has_bat_energy=any(credible_bat),
            no_bat_fraction=_fraction([not c for c in credible_bat]),
            late_legs_fraction=_fraction([s.late_legs for s in swings]),
            torso_bypass_fraction=_fraction([s.torso_bypass for s in swings]),
            proper_sequence_fraction=_fraction([s.proper_sequence for s in swings]),
            mean_legs_torso_gap_ms=_mean([s.legs_torso_gap_ms for s in swings]),
        )

    @staticmethod
    def empty() -> SessionFeatureSet:
        zeros = {segment: 0.0 for segment in Segment}
        return SessionFeatureSet(
            swing_count=0,
            data_quality=DataQuality.INSUFFICIENT,
            mean_peak=dict(zeros),
            cv_peak=dict(zeros),
            mean_legs_to_torso=0.0,
            mean_torso_to_arms=0.0,
            mean_total_efficiency=0.0,
            has_bat_energy=False,
        )
