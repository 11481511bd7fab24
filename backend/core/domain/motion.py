"""
Motion Domain Models

Data structures for motion-capture telemetry and the features derived
from it: raw sampled rows, windowed swings, per-swing features and
session-level aggregates.

MotionRow → SwingWindow → SwingFeature → SessionFeatureSet
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Segment(str, Enum):
    """
    Body regions with a kinetic-energy estimate in the export.

    Ordered up the kinetic chain; TOTAL is the whole-body sum.
    """
    LEGS = "legs"
    TORSO = "torso"
    ARMS = "arms"
    BAT = "bat"
    TOTAL = "total"


class DataQuality(str, Enum):
    """
    Session data-quality label, derived solely from swing count.

    - INSUFFICIENT: no usable swings
    - LIMITED: 1-4 swings
    - GOOD: 5-9 swings
    - EXCELLENT: 10 or more swings
    """
    INSUFFICIENT = "insufficient"
    LIMITED = "limited"
    GOOD = "good"
    EXCELLENT = "excellent"

    @classmethod
    def from_swing_count(cls, count: int) -> "DataQuality":
        if count >= 10:
            return cls.EXCELLENT
        elif count >= 5:
            return cls.GOOD
        elif count >= 1:
            return cls.LIMITED
        return cls.INSUFFICIENT


@dataclass(frozen=True)
class MotionRow:
    """
    One sampled instant of a swing.

    Attributes:
        swing_id: Groups rows belonging to the same swing
        time_offset: Seconds relative to the reference event
                     (peak hand speed); negative = before it
        energy: Kinetic energy per segment (missing segments read as 0)
        extras: Any other columns from the export, passed through as text
    """
    swing_id: str
    time_offset: float
    energy: dict[Segment, float] = field(default_factory=dict)
    extras: dict[str, str] = field(default_factory=dict, compare=False)

    def energy_of(self, segment: Segment) -> float:
        """Energy for a segment, 0 when the export did not carry it."""
        return self.energy.get(segment, 0.0)


@dataclass(frozen=True)
class SwingWindow:
    """
    The in-window rows of a single swing.

    Rows are sorted by time offset so that downstream peak searches do
    not depend on the order the export delivered them in.
    """
    swing_id: str
    rows: tuple[MotionRow, ...]

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class SegmentPeak:
    """Peak energy of one segment and the time offset it occurred at."""
    energy: float
    time_offset: float


@dataclass(frozen=True)
class SwingFeature:
    """
    Features extracted once per swing.

    Ratios are plain fractions (not percentages). ``total_efficiency`` is
    0 whenever bat or total energy is missing, in which case
    ``bat_instrumented`` is False.
    """
    swing_id: str
    peaks: dict[Segment, SegmentPeak]
    legs_to_torso: float
    torso_to_arms: float
    total_efficiency: float
    bat_instrumented: bool
    proper_sequence: bool

    def peak_energy(self, segment: Segment) -> float:
        return self.peaks[segment].energy

    def peak_time(self, segment: Segment) -> float:
        return self.peaks[segment].time_offset

    # -------------------------------------------------------------------------
    # Sequencing patterns used by the leak cascade
    # -------------------------------------------------------------------------

    @property
    def late_legs(self) -> bool:
        """Legs peaked after the arms did."""
        return self.peak_time(Segment.LEGS) > self.peak_time(Segment.ARMS)

    @property
    def torso_bypass(self) -> bool:
        """Arms peaked before the torso did."""
        return self.peak_time(Segment.ARMS) < self.peak_time(Segment.TORSO)

    @property
    def legs_torso_gap_ms(self) -> float:
        """Absolute gap between legs and torso peaks, in milliseconds."""
        return abs(self.peak_time(Segment.TORSO) - self.peak_time(Segment.LEGS)) * 1000

    def has_credible_bat(self, noise_floor: float) -> bool:
        """Bat energy rises above the sensor noise floor."""
        return self.peak_energy(Segment.BAT) > noise_floor


@dataclass(frozen=True)
class SessionFeatureSet:
    """
    Aggregates over every surviving swing of a session.

    CVs are population standard deviation over mean, in percent, and are
    0 when fewer than 2 swings exist or the mean is 0.
    """
    swing_count: int
    data_quality: DataQuality

    mean_peak: dict[Segment, float]
    cv_peak: dict[Segment, float]

    mean_legs_to_torso: float
    mean_torso_to_arms: float
    mean_total_efficiency: float

    has_bat_energy: bool

    # Fractions of swings showing each sequencing pattern
    no_bat_fraction: float = 0.0
    late_legs_fraction: float = 0.0
    torso_bypass_fraction: float = 0.0
    proper_sequence_fraction: float = 0.0

    mean_legs_torso_gap_ms: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.swing_count == 0

    def to_raw_metrics(self) -> dict[str, float]:
        """
        Flatten into the metric record the scorer reads.

        Ratios are exposed as percentages because the configured bands
        are expressed in percent.
        """
        return {
            "swing_count": float(self.swing_count),
            "has_bat_energy": 1.0 if self.has_bat_energy else 0.0,
            "legs_ke": self.mean_peak[Segment.LEGS],
            "torso_ke": self.mean_peak[Segment.TORSO],
            "arms_ke": self.mean_peak[Segment.ARMS],
            "bat_ke": self.mean_peak[Segment.BAT],
            "total_ke": self.mean_peak[Segment.TOTAL],
            "legs_to_torso_pct": self.mean_legs_to_torso * 100,
            "torso_to_arms_pct": self.mean_torso_to_arms * 100,
            "total_efficiency_pct": self.mean_total_efficiency * 100,
            "cv_legs": self.cv_peak[Segment.LEGS],
            "cv_torso": self.cv_peak[Segment.TORSO],
            "cv_arms": self.cv_peak[Segment.ARMS],
            "cv_bat": self.cv_peak[Segment.BAT],
            "cv_total": self.cv_peak[Segment.TOTAL],
            "no_bat_pct": self.no_bat_fraction * 100,
            "late_legs_pct": self.late_legs_fraction * 100,
            "torso_bypass_pct": self.torso_bypass_fraction * 100,
            "proper_sequence_pct": self.proper_sequence_fraction * 100,
            "legs_torso_gap_ms": self.mean_legs_torso_gap_ms or 0.0,
        }
