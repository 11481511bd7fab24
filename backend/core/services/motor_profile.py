"""
Motor Profile Classifier Service

Coarse timing style from the mean legs→torso peak gap.
"""

from ..config import DEFAULT_CONFIG, MotorProfileBands
from ..domain.motion import SessionFeatureSet
from ..domain.scoring import MotorProfile


class MotorProfileClassifier:
    """
    Bands the legs→torso gap (milliseconds):

        tight    → spinner
        moderate → whipper
        wide     → slingshotter
        beyond   → titan
    """

    def __init__(self, bands: MotorProfileBands = DEFAULT_CONFIG.motor_profile):
        self.bands = bands

    def classify(self, features: SessionFeatureSet) -> MotorProfile:
        if features.is_empty or features.mean_legs_torso_gap_ms is None:
            return MotorProfile.UNKNOWN
        return self.classify_gap(features.mean_legs_torso_gap_ms)

    def classify_gap(self, gap_ms: float) -> MotorProfile:
        if gap_ms < self.bands.spinner_max_ms:
            return MotorProfile.SPINNER
        elif gap_ms < self.bands.whipper_max_ms:
            return MotorProfile.WHIPPER
        elif gap_ms <= self.bands.slingshotter_max_ms:
            return MotorProfile.SLINGSHOTTER
        return MotorProfile.TITAN
