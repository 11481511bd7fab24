"""
Session Scorer Service

High-level service that runs the full 4B pipeline for one session:

    parse → segment → extract → aggregate → score / classify / project → drills

This is the main entry point for scoring a motion-capture session.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from ..config import DEFAULT_CONFIG, ScoringConfig
from ..domain.motion import MotionRow, SessionFeatureSet
from ..domain.scoring import (
    DrillPrescription,
    MotorProfile,
    ScoreResult,
    consistency_grade_for,
)
from .aggregator import SessionAggregator
from .csv_parser import MotionCsvParser
from .drill_mapper import DrillMapper
from .extractor import PeakExtractor
from .leak_classifier import LeakClassifier
from .motor_profile import MotorProfileClassifier
from .projections import KineticProjector
from .scorer import FourBScorer
from .segmenter import SwingSegmenter

logger = logging.getLogger(__name__)


class SessionScorer:
    """
    Scores motion-capture sessions.

    Stateless between calls: the same rows, in any order, always produce
    the same ScoreResult.

    Usage:
        scorer = SessionScorer(config=load_config(path))

        # From a raw export
        result = scorer.score_csv("session-42", csv_text)
        print(f"Composite: {result.scores.composite}")

        # Or from pre-parsed rows
        result = scorer.score_rows("session-42", rows)
    """

    def __init__(
        self,
        config: ScoringConfig = DEFAULT_CONFIG,
        drill_mapper: Optional[DrillMapper] = None,
    ):
        self.config = config
        self.drill_mapper = drill_mapper if drill_mapper is not None else DrillMapper()

        self.parser = MotionCsvParser()
        self.segmenter = SwingSegmenter(
            window=config.action_window,
            min_rows=config.min_rows_per_swing,
        )
        self.extractor = PeakExtractor()
        self.aggregator = SessionAggregator(bat_noise_floor=config.bat_noise_floor)
        self.scorer = FourBScorer(config)
        self.leak_classifier = LeakClassifier(config.leak)
        self.motor_classifier = MotorProfileClassifier(config.motor_profile)
        self.projector = KineticProjector(config.projections)

    # -------------------------------------------------------------------------
    # Main Scoring Methods
    # -------------------------------------------------------------------------

    def score_csv(
        self,
        session_id: str,
        text: str,
        player_level: Optional[str] = None,
    ) -> ScoreResult:
        """Score a session from raw CSV text."""
        return self.score_rows(session_id, self.parser.parse_text(text), player_level)

    def score_records(
        self,
        session_id: str,
        records: Iterable[Mapping[str, Any]],
        player_level: Optional[str] = None,
    ) -> ScoreResult:
        """Score a session from already-split records (header → value)."""
        return self.score_rows(session_id, self.parser.parse_records(records), player_level)

    def score_rows(
        self,
        session_id: str,
        rows: Iterable[MotionRow],
        player_level: Optional[str] = None,
    ) -> ScoreResult:
        """
        Score a session from parsed rows.

        Args:
            session_id: Stable identifier, echoed in the result
            rows: MotionRows in any order
            player_level: Level the bat-speed projections are clamped to
                          (youth, hs, college, pro; default hs)

        Returns:
            Complete ScoreResult (all-zero "insufficient data" result
            when no swing survives segmentation)
        """
        windows = self.segmenter.segment(rows)
        swings = self.extractor.extract_all(windows)
        features = self.aggregator.aggregate(swings)
        return self.score_features(session_id, features, player_level)

    def score_features(
        self,
        session_id: str,
        features: SessionFeatureSet,
        player_level: Optional[str] = None,
    ) -> ScoreResult:
        """Score an already-aggregated session."""
        scores = self.scorer.score(features)
        leak = self.leak_classifier.classify(features)

        if features.is_empty:
            motor_profile = MotorProfile.UNKNOWN
            consistency = "N/A"
        else:
            motor_profile = self.motor_classifier.classify(features)
            consistency = self._consistency_grade(features)

        warnings = list(self._warnings(features))
        if self.projector.resolve_level(player_level) is None:
            warnings.append(
                f"Unknown player level '{player_level}' - projecting as "
                f"{self.config.projections.default_level}"
            )
        projections = self.projector.project(features, leak.type, player_level)

        result = ScoreResult(
            session_id=session_id,
            swing_count=features.swing_count,
            data_quality=features.data_quality.value,
            scores=scores,
            weakest_category=scores.weakest,
            leak=leak,
            motor_profile=motor_profile,
            consistency_grade=consistency,
            warnings=tuple(warnings),
            raw_metrics={**features.to_raw_metrics(), **projections.to_metrics()},
            projections=projections,
        )

        logger.info(
            f"Session {session_id}: {features.swing_count} swings, "
            f"composite={scores.composite}, leak={leak.type.value}, "
            f"profile={motor_profile.value}"
        )
        return result

    def recommend_drills(self, result: ScoreResult) -> list[DrillPrescription]:
        """Up to three drills for a scored session (none for an empty one)."""
        if result.is_empty:
            return []
        return self.drill_mapper.recommend(
            result.leak.type,
            result.motor_profile,
            result.weakest_category,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _consistency_grade(self, features: SessionFeatureSet) -> str:
        if features.swing_count < self.config.min_swings_for_cv:
            return "N/A"
        metrics = features.to_raw_metrics()
        return consistency_grade_for((metrics["cv_legs"] + metrics["cv_torso"]) / 2)

    def _warnings(self, features: SessionFeatureSet) -> tuple[str, ...]:
        if features.is_empty:
            return ("No valid swings found",)

        warnings = []
        if not features.has_bat_energy:
            warnings.append("Bat KE not available - using upper-body proxy")
        if features.swing_count < self.config.min_swings_for_cv:
            warnings.append(
                f"Need {self.config.min_swings_for_cv}+ swings for consistency scores"
            )
        return tuple(warnings)
