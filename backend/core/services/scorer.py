"""
4B Composite Scorer Service

Maps session-level metrics onto the four 20-80 category scores (Brain,
Body, Bat, Ball) and their weighted composite.

Every component goes through the same rescaling primitive, ``to_2080``,
so all scores share one monotone, bounded transformation.
"""

import math
from typing import Mapping

from ..config import Band, DEFAULT_CONFIG, ScoringConfig
from ..domain.motion import SessionFeatureSet
from ..domain.scoring import FlowComponents, FourBScores


SCALE_MIN = 20
SCALE_MAX = 80
SCALE_MID = 50


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always going up (no banker's rounding)."""
    return int(math.floor(value + 0.5))


def to_2080(value: float, band: Band, invert: bool = False) -> int:
    """
    Rescale a raw value onto the 20-80 scale.

    The value's position inside the band is clamped to [0, 1], flipped
    when ``invert`` is set (lower is better), then mapped linearly onto
    20-80 and rounded.

    Examples:
        to_2080(300, Band(min=100, max=500))  -> 50
        to_2080(900, Band(min=100, max=500))  -> 80
        to_2080(5, Band(min=5, max=40), invert=True) -> 80
    """
    fraction = (value - band.min) / (band.max - band.min)
    fraction = min(max(fraction, 0.0), 1.0)
    if invert:
        fraction = 1.0 - fraction
    return round_half_up(SCALE_MIN + fraction * (SCALE_MAX - SCALE_MIN))


class FourBScorer:
    """
    Computes FourBScores from session metrics.

    The scorer reads the flat metric record produced by
    ``SessionFeatureSet.to_raw_metrics()``, so a stored record can be
    re-scored later and must reproduce the same scores.

    Usage:
        scorer = FourBScorer(config)
        scores = scorer.score(session_features)
        same = scorer.score_metrics(session_features.to_raw_metrics())
    """

    def __init__(self, config: ScoringConfig = DEFAULT_CONFIG):
        self.config = config

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def score(self, features: SessionFeatureSet) -> FourBScores:
        return self.score_metrics(features.to_raw_metrics())

    def score_metrics(self, metrics: Mapping[str, float]) -> FourBScores:
        """
        Score a flat metric record.

        Args:
            metrics: Keys as produced by SessionFeatureSet.to_raw_metrics()

        Returns:
            FourBScores; all zeros when the record describes no swings
        """
        swing_count = int(metrics.get("swing_count", 0))
        if swing_count <= 0:
            return FourBScores(brain=0, body=0, bat=0, ball=0, composite=0)

        bands = self.config.bands
        has_bat = metrics.get("has_bat_energy", 0.0) > 0

        # Body: ground flow + core flow
        ground_flow = to_2080(metrics["legs_ke"], bands.legs_ke)
        core_flow = round_half_up((
            to_2080(metrics["torso_ke"], bands.torso_ke)
            + to_2080(metrics["legs_to_torso_pct"], bands.legs_to_torso_pct)
        ) / 2)
        body = round_half_up((ground_flow + core_flow) / 2)

        # Bat: upper flow, plus delivery and efficiency when the bat is instrumented
        upper_flow = round_half_up((
            to_2080(metrics["arms_ke"], bands.arms_ke)
            + to_2080(metrics["torso_to_arms_pct"], bands.torso_to_arms_pct)
        ) / 2)
        if has_bat:
            bat_delivery = to_2080(metrics["bat_ke"], bands.bat_ke)
            bat_efficiency = to_2080(metrics["total_efficiency_pct"], bands.total_efficiency_pct)
            bat = round_half_up((upper_flow + bat_delivery + bat_efficiency) / 3)
        else:
            bat = upper_flow

        # Brain / Ball: repeatability, only meaningful with enough swings
        if swing_count >= self.config.min_swings_for_cv:
            brain = round_half_up((
                to_2080(metrics["cv_legs"], bands.cv, invert=True)
                + to_2080(metrics["cv_torso"], bands.cv, invert=True)
            ) / 2)
            ball_cv = metrics["cv_bat"] if has_bat else metrics["cv_arms"]
            ball = to_2080(ball_cv, bands.cv, invert=True)
        else:
            brain = SCALE_MID
            ball = SCALE_MID

        return FourBScores(
            brain=brain,
            body=body,
            bat=bat,
            ball=ball,
            composite=self.composite(brain=brain, body=body, bat=bat, ball=ball),
            flows=FlowComponents(
                ground_flow=ground_flow,
                core_flow=core_flow,
                upper_flow=upper_flow,
            ),
        )

    def composite(self, brain: int, body: int, bat: int, ball: int) -> int:
        """Weighted sum of the four categories, rounded."""
        w = self.config.weights
        return round_half_up(
            body * w.body + bat * w.bat + brain * w.brain + ball * w.ball
        )
