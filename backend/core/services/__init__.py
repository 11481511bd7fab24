"""
Services Layer

The 4B scoring pipeline, one stage per module.
Each stage is a pure transformation and can be used on its own.
"""

from .csv_parser import MotionCsvParser
from .segmenter import SwingSegmenter
from .extractor import PeakExtractor
from .aggregator import SessionAggregator, coefficient_of_variation
from .scorer import FourBScorer, to_2080, round_half_up
from .leak_classifier import LeakClassifier
from .motor_profile import MotorProfileClassifier
from .projections import KineticProjector
from .drill_mapper import DrillMapper, DrillTableError
from .session_scorer import SessionScorer

__all__ = [
    "MotionCsvParser",
    "SwingSegmenter",
    "PeakExtractor",
    "SessionAggregator",
    "coefficient_of_variation",
    "FourBScorer",
    "to_2080",
    "round_half_up",
    "LeakClassifier",
    "MotorProfileClassifier",
    "KineticProjector",
    "DrillMapper",
    "DrillTableError",
    "SessionScorer",
]
