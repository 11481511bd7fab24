"""
Domain Models

Pure data structures representing 4B swing scoring concepts.
No external dependencies - just Python dataclasses and enums.
"""

from .motion import (
    Segment,
    DataQuality,
    MotionRow,
    SwingWindow,
    SegmentPeak,
    SwingFeature,
    SessionFeatureSet,
)
from .scoring import (
    FourBCategory,
    LeakType,
    MotorProfile,
    LeakClassification,
    FlowComponents,
    FourBScores,
    DrillPrescription,
    KineticProjections,
    ScoreResult,
    grade_for,
    consistency_grade_for,
)

__all__ = [
    # Motion
    "Segment",
    "DataQuality",
    "MotionRow",
    "SwingWindow",
    "SegmentPeak",
    "SwingFeature",
    "SessionFeatureSet",
    # Scoring
    "FourBCategory",
    "LeakType",
    "MotorProfile",
    "LeakClassification",
    "FlowComponents",
    "FourBScores",
    "DrillPrescription",
    "KineticProjections",
    "ScoreResult",
    "grade_for",
    "consistency_grade_for",
]
