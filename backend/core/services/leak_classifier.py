"""
Leak Classifier Service

Rule cascade naming the dominant energy-transfer failure of a session.
"""

from ..config import DEFAULT_CONFIG, LeakThresholds
from ..domain.motion import SessionFeatureSet
from ..domain.scoring import LeakClassification, LeakType


# Fixed caption / corrective instruction per leak type
LEAK_MESSAGES: dict[LeakType, tuple[str, str]] = {
    LeakType.NO_BAT_DELIVERY: (
        "Energy didn't make it to the barrel.",
        "Focus on delivering energy through the hands.",
    ),
    LeakType.LATE_LEGS: (
        "Your legs fired late - the energy showed up after your hands.",
        "Get to the ground earlier. Let the legs lead.",
    ),
    LeakType.TORSO_BYPASS: (
        "Energy jumped from legs to arms, skipping your core.",
        "Let your core catch and redirect the energy.",
    ),
    LeakType.EARLY_ARMS: (
        "Your arms took over before your legs finished.",
        "Let the legs lead. Stay connected longer.",
    ),
    LeakType.CLEAN_TRANSFER: (
        "Energy transferred cleanly through the chain.",
        "Keep doing what you're doing.",
    ),
    LeakType.UNKNOWN: (
        "Mixed pattern detected.",
        "Need more analysis.",
    ),
    LeakType.INSUFFICIENT_DATA: (
        "Not enough data.",
        "Need more swings.",
    ),
}


def classification_for(leak_type: LeakType) -> LeakClassification:
    caption, instruction = LEAK_MESSAGES[leak_type]
    return LeakClassification(type=leak_type, caption=caption, instruction=instruction)


class LeakClassifier:
    """
    First-match-wins cascade over swing-pattern fractions.

    Order:
        1. no bat delivery   (fraction without credible bat energy)
        2. late legs         (legs peak after arms peak)
        3. torso bypass      (arms peak before torso peak)
        4. early arms        (too few properly sequenced swings)
        5. clean transfer    (most swings properly sequenced)
        6. unknown / mixed
    """

    def __init__(self, thresholds: LeakThresholds = DEFAULT_CONFIG.leak):
        self.thresholds = thresholds

    def classify(self, features: SessionFeatureSet) -> LeakClassification:
        return classification_for(self.classify_type(features))

    def classify_type(self, features: SessionFeatureSet) -> LeakType:
        if features.is_empty:
            return LeakType.INSUFFICIENT_DATA

        t = self.thresholds
        if features.no_bat_fraction > t.no_bat_pct:
            return LeakType.NO_BAT_DELIVERY
        if features.late_legs_fraction > t.late_legs_pct:
            return LeakType.LATE_LEGS
        if features.torso_bypass_fraction > t.torso_bypass_pct:
            return LeakType.TORSO_BYPASS
        if features.proper_sequence_fraction < t.proper_sequence_min:
            return LeakType.EARLY_ARMS
        if features.proper_sequence_fraction >= t.clean_transfer_min:
            return LeakType.CLEAN_TRANSFER
        return LeakType.UNKNOWN
