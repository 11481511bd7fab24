"""
Scoring Configuration

The single constants table for the 4B engine: rescaling bands, composite
weights, leak-cascade thresholds, segmentation window and motor-profile
timing bands, and bat-speed projection constants.

Defaults are the locked production values. A YAML file may override any
subset of them; the whole table is validated once, at load time, so a bad
band fails at startup instead of on some later session.

Usage:
    config = load_config("config/scoring.yaml")
    scorer = SessionScorer(config=config)
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a constants table is malformed or inconsistent."""


# =============================================================================
# Building blocks
# =============================================================================

class Band(BaseModel):
    """
    A [min, max] range a raw metric is rescaled across.

    Values at or below ``min`` map to 20, at or above ``max`` to 80
    (reversed for inverted metrics).
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    min: float
    max: float

    @model_validator(mode="after")
    def _check_order(self) -> "Band":
        if self.min >= self.max:
            raise ValueError(f"band min ({self.min}) must be below max ({self.max})")
        return self


class ScoringBands(BaseModel):
    """
    Rescaling bands per metric.

    Energies are in joules; transfer ratios and efficiency in percent;
    CV in percent (scored inverted).
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    legs_ke: Band = Band(min=100, max=500)
    torso_ke: Band = Band(min=50, max=250)
    legs_to_torso_pct: Band = Band(min=30, max=80)
    arms_ke: Band = Band(min=80, max=250)
    bat_ke: Band = Band(min=100, max=600)
    torso_to_arms_pct: Band = Band(min=50, max=150)
    total_efficiency_pct: Band = Band(min=25, max=65)
    cv: Band = Band(min=5, max=40)


class ActionWindow(BaseModel):
    """Time offsets (seconds, inclusive) kept around the reference event."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    start: float = -0.5
    end: float = 0.1

    @model_validator(mode="after")
    def _check_order(self) -> "ActionWindow":
        if self.start >= self.end:
            raise ValueError(f"action window start ({self.start}) must precede end ({self.end})")
        return self

    def contains(self, time_offset: float) -> bool:
        return self.start <= time_offset <= self.end


class LeakThresholds(BaseModel):
    """Fractions of swings that trigger each rule of the leak cascade."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    no_bat_pct: float = Field(0.5, ge=0.0, le=1.0)
    late_legs_pct: float = Field(0.5, ge=0.0, le=1.0)
    torso_bypass_pct: float = Field(0.5, ge=0.0, le=1.0)
    proper_sequence_min: float = Field(0.4, ge=0.0, le=1.0)
    clean_transfer_min: float = Field(0.8, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sequence_bounds(self) -> "LeakThresholds":
        if self.proper_sequence_min > self.clean_transfer_min:
            raise ValueError("proper_sequence_min cannot exceed clean_transfer_min")
        return self


class CompositeWeights(BaseModel):
    """Weights of the four categories in the composite score."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    body: float = Field(0.35, ge=0.0)
    bat: float = Field(0.30, ge=0.0)
    brain: float = Field(0.20, ge=0.0)
    ball: float = Field(0.15, ge=0.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "CompositeWeights":
        total = self.body + self.bat + self.brain + self.ball
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"composite weights must sum to 1.0, got {total:.4f}")
        return self


class MotorProfileBands(BaseModel):
    """
    Upper edges (ms) of the legs→torso peak-gap bands.

    gap < spinner_max_ms            → spinner
    gap < whipper_max_ms            → whipper
    gap <= slingshotter_max_ms      → slingshotter
    otherwise                       → titan
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    spinner_max_ms: float = Field(30.0, gt=0.0)
    whipper_max_ms: float = Field(55.0, gt=0.0)
    slingshotter_max_ms: float = Field(80.0, gt=0.0)

    @model_validator(mode="after")
    def _check_ascending(self) -> "MotorProfileBands":
        if not (self.spinner_max_ms < self.whipper_max_ms < self.slingshotter_max_ms):
            raise ValueError("motor profile bands must be strictly ascending")
        return self


def _default_bat_speed_bands() -> dict[str, Band]:
    return {
        "youth": Band(min=45, max=85),
        "hs": Band(min=55, max=95),
        "college": Band(min=60, max=105),
        "pro": Band(min=65, max=110),
    }


class ProjectionConstants(BaseModel):
    """
    Bat-speed / exit-velocity projection constants.

    Bat speed (mph) is k_bat_speed * sqrt(delivered energy in joules).
    The ceiling assumes target_delivery_efficiency_pct of total energy
    reaches the bat. Projections are clamped to the player level's band.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    k_bat_speed: float = Field(4.25, gt=0.0)
    target_delivery_efficiency_pct: float = Field(55.0, gt=0.0, le=100.0)
    bat_speed_mph: dict[str, Band] = Field(default_factory=_default_bat_speed_bands)
    default_level: str = "hs"

    # Minimum headroom added to the ceiling for inefficient deliveries
    severe_efficiency_pct: float = Field(30.0, ge=0.0)
    severe_headroom_mph: float = Field(10.0, ge=0.0)
    moderate_efficiency_pct: float = Field(45.0, ge=0.0)
    moderate_headroom_mph: float = Field(6.0, ge=0.0)

    # exit velo = slope * bat speed + offset
    exit_velo_slope: float = Field(1.25, gt=0.0)
    exit_velo_offset: float = 5.0
    exit_velo_current: Band = Band(min=55, max=115)
    exit_velo_ceiling_max: float = 120.0

    @model_validator(mode="after")
    def _check_levels(self) -> "ProjectionConstants":
        if self.default_level not in self.bat_speed_mph:
            raise ValueError(f"default_level '{self.default_level}' has no bat speed band")
        if self.severe_efficiency_pct > self.moderate_efficiency_pct:
            raise ValueError("severe_efficiency_pct cannot exceed moderate_efficiency_pct")
        return self


# =============================================================================
# The constants table
# =============================================================================

class ScoringConfig(BaseModel):
    """Every tunable of the 4B engine."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    bands: ScoringBands = ScoringBands()
    weights: CompositeWeights = CompositeWeights()
    leak: LeakThresholds = LeakThresholds()
    motor_profile: MotorProfileBands = MotorProfileBands()
    action_window: ActionWindow = ActionWindow()
    projections: ProjectionConstants = ProjectionConstants()

    min_rows_per_swing: int = Field(10, ge=1, description="In-window rows a swing needs to be kept")
    min_swings_for_cv: int = Field(3, ge=2, description="Swings needed before variability is scored")
    bat_noise_floor: float = Field(10.0, ge=0.0, description="Bat energy at or below this is sensor noise")


DEFAULT_CONFIG = ScoringConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> ScoringConfig:
    """
    Load and validate a constants table.

    Args:
        path: YAML file overriding any subset of the defaults.
              None returns the locked defaults.

    Returns:
        A validated, immutable ScoringConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Scoring config not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    try:
        config = ScoringConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid scoring config {path}: {e}") from e

    if config != DEFAULT_CONFIG:
        logger.warning(f"Scoring constants overridden from {path}")
    else:
        logger.info(f"Scoring config loaded from {path} (matches defaults)")

    return config
