"""
Scoring Domain Models

Data structures for the 4B scoring result: the four category scores,
their flow components, the leak classification, the motor profile and
the drill prescriptions matched against them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FourBCategory(str, Enum):
    """
    The four scored categories.

    Declaration order is the tie-break order for the weakest category.
    """
    BRAIN = "brain"
    BODY = "body"
    BAT = "bat"
    BALL = "ball"


class LeakType(str, Enum):
    """
    Dominant energy-transfer failure pattern of a session.

    CLEAN_TRANSFER is a positive classification, not a leak.
    INSUFFICIENT_DATA is reported when no swing survived segmentation.
    """
    NO_BAT_DELIVERY = "no_bat_delivery"
    LATE_LEGS = "late_legs"
    TORSO_BYPASS = "torso_bypass"
    EARLY_ARMS = "early_arms"
    CLEAN_TRANSFER = "clean_transfer"
    UNKNOWN = "unknown"
    INSUFFICIENT_DATA = "insufficient_data"


class MotorProfile(str, Enum):
    """Coarse swing-timing style, from the legs→torso peak gap."""
    SPINNER = "spinner"
    WHIPPER = "whipper"
    SLINGSHOTTER = "slingshotter"
    TITAN = "titan"
    UNKNOWN = "unknown"


def grade_for(score: int) -> str:
    """Scouting grade label for a 20-80 score."""
    if score <= 0:
        return "N/A"
    if score >= 70:
        return "Plus-Plus"
    elif score >= 60:
        return "Plus"
    elif score >= 55:
        return "Above Avg"
    elif score >= 45:
        return "Average"
    elif score >= 40:
        return "Below Avg"
    elif score >= 30:
        return "Fringe"
    else:
        return "Poor"


def consistency_grade_for(cv_pct: Optional[float]) -> str:
    """Grade for a coefficient of variation in percent (lower is better)."""
    if cv_pct is None:
        return "N/A"
    if cv_pct < 6:
        return "Elite"
    elif cv_pct < 10:
        return "Plus"
    elif cv_pct < 15:
        return "Average"
    elif cv_pct < 20:
        return "Below Avg"
    else:
        return "Poor"


@dataclass(frozen=True)
class LeakClassification:
    """
    A leak verdict with its fixed caption and corrective instruction.

    Attributes:
        type: Which pattern was detected
        caption: What happened, in the athlete's language
        instruction: One-line corrective cue
    """
    type: LeakType
    caption: str
    instruction: str


@dataclass(frozen=True)
class FlowComponents:
    """Intermediate flow terms that feed Body and Bat."""
    ground_flow: int = 0
    core_flow: int = 0
    upper_flow: int = 0


@dataclass(frozen=True)
class FourBScores:
    """
    The four category scores and the weighted composite.

    All values are integers in [20, 80], or all 0 for an empty session.
    """
    brain: int
    body: int
    bat: int
    ball: int
    composite: int
    flows: FlowComponents = field(default_factory=FlowComponents)

    def by_category(self) -> dict[FourBCategory, int]:
        return {
            FourBCategory.BRAIN: self.brain,
            FourBCategory.BODY: self.body,
            FourBCategory.BAT: self.bat,
            FourBCategory.BALL: self.ball,
        }

    @property
    def weakest(self) -> FourBCategory:
        """Lowest category; ties go to the earliest of brain, body, bat, ball."""
        scores = self.by_category()
        return min(FourBCategory, key=lambda c: scores[c])

    @property
    def grades(self) -> dict[str, str]:
        grades = {c.value: grade_for(s) for c, s in self.by_category().items()}
        grades["overall"] = grade_for(self.composite)
        return grades


@dataclass(frozen=True)
class DrillPrescription:
    """
    One row of the drill-prescription table.

    Attributes:
        drill_id: Stable identifier of the drill
        name: Display name
        priority: 1 (first) and up
        leak_type / motor_profile / four_b_weakness: Match keys; a row
            matches when any of its non-empty keys equals the session's
        reason: Why this drill is prescribed
        is_active: Inactive rows are never returned
    """
    drill_id: str
    name: str
    priority: int = 10
    leak_type: Optional[LeakType] = None
    motor_profile: Optional[MotorProfile] = None
    four_b_weakness: Optional[FourBCategory] = None
    reason: str = ""
    is_active: bool = True

    def matches(
        self,
        leak_type: LeakType,
        motor_profile: MotorProfile,
        weakest: FourBCategory,
    ) -> bool:
        return (
            (self.leak_type is not None and self.leak_type == leak_type)
            or (self.motor_profile is not None and self.motor_profile == motor_profile)
            or (self.four_b_weakness is not None and self.four_b_weakness == weakest)
        )


@dataclass(frozen=True)
class KineticProjections:
    """
    Bat speed and exit velocity implied by the session's energy.

    Attributes:
        player_level: Level whose bat-speed band the projections are clamped to
        bat_speed_current_mph: From the energy that actually reached the bat
        bat_speed_ceiling_mph: If delivery matched the target efficiency
        exit_velo_current_mph / exit_velo_ceiling_mph: Linear in bat speed
        delivery_efficiency_pct: Delivered / total energy, one decimal
        potential_delivery_efficiency_pct: The target efficiency
        mph_left_on_table: Ceiling minus current bat speed
        has_projections: False for sessions with no usable energy
    """
    player_level: str = "hs"
    bat_speed_current_mph: int = 0
    bat_speed_ceiling_mph: int = 0
    exit_velo_current_mph: int = 0
    exit_velo_ceiling_mph: int = 0
    delivery_efficiency_pct: float = 0.0
    potential_delivery_efficiency_pct: float = 0.0
    has_projections: bool = False

    @property
    def mph_left_on_table(self) -> int:
        return max(0, self.bat_speed_ceiling_mph - self.bat_speed_current_mph)

    def to_metrics(self) -> dict[str, float]:
        """Numeric projection fields, keyed for the raw metrics record."""
        if not self.has_projections:
            return {}
        return {
            "bat_speed_current_mph": self.bat_speed_current_mph,
            "bat_speed_ceiling_mph": self.bat_speed_ceiling_mph,
            "exit_velo_current_mph": self.exit_velo_current_mph,
            "exit_velo_ceiling_mph": self.exit_velo_ceiling_mph,
            "delivery_efficiency_pct": self.delivery_efficiency_pct,
            "mph_left_on_table": self.mph_left_on_table,
        }

    def to_dict(self) -> dict:
        return {
            "player_level": self.player_level,
            "has_projections": self.has_projections,
            "bat_speed_current_mph": self.bat_speed_current_mph,
            "bat_speed_ceiling_mph": self.bat_speed_ceiling_mph,
            "exit_velo_current_mph": self.exit_velo_current_mph,
            "exit_velo_ceiling_mph": self.exit_velo_ceiling_mph,
            "delivery_efficiency_pct": self.delivery_efficiency_pct,
            "potential_delivery_efficiency_pct": self.potential_delivery_efficiency_pct,
            "mph_left_on_table": self.mph_left_on_table,
        }


@dataclass(frozen=True)
class ScoreResult:
    """
    Complete 4B scoring of one session.

    This is the engine's only externally visible output. It is rebuilt
    identically from identical input: no ids, clocks or randomness.
    """
    session_id: str
    swing_count: int
    data_quality: str

    scores: FourBScores
    weakest_category: FourBCategory
    leak: LeakClassification
    motor_profile: MotorProfile

    consistency_grade: str = "N/A"
    warnings: tuple[str, ...] = ()
    raw_metrics: dict[str, float] = field(default_factory=dict)
    projections: KineticProjections = field(default_factory=KineticProjections)

    @property
    def is_empty(self) -> bool:
        return self.swing_count == 0

    def to_dict(self) -> dict:
        """Flat record for persistence or JSON output."""
        return {
            "session_id": self.session_id,
            "swing_count": self.swing_count,
            "data_quality": self.data_quality,
            "brain_score": self.scores.brain,
            "body_score": self.scores.body,
            "bat_score": self.scores.bat,
            "ball_score": self.scores.ball,
            "composite_score": self.scores.composite,
            "grades": self.scores.grades,
            "ground_flow": self.scores.flows.ground_flow,
            "core_flow": self.scores.flows.core_flow,
            "upper_flow": self.scores.flows.upper_flow,
            "weakest_category": self.weakest_category.value,
            "leak_type": self.leak.type.value,
            "leak_caption": self.leak.caption,
            "leak_instruction": self.leak.instruction,
            "motor_profile": self.motor_profile.value,
            "consistency_grade": self.consistency_grade,
            "warnings": list(self.warnings),
            "raw_metrics": dict(self.raw_metrics),
            "projections": self.projections.to_dict(),
        }
