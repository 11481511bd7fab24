"""
Session Scoring API Schemas

Pydantic models for 4B session scoring requests and responses.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Any, Optional, List


class ScoreSessionRequest(BaseModel):
    """
    A single session to score.

    Send either the raw export as ``csv_text`` or already-split ``rows``
    (one object per sampled instant, keyed by column name).
    """
    session_id: str = Field(..., min_length=1, description="Stable session identifier")
    csv_text: Optional[str] = Field(None, description="Raw CSV export with header line")
    rows: Optional[List[dict[str, Any]]] = Field(None, description="Pre-parsed rows")
    player_level: Optional[str] = Field(
        None, description="youth | hs | college | pro; bounds the bat-speed projections (default hs)"
    )

    @model_validator(mode="after")
    def _require_payload(self) -> "ScoreSessionRequest":
        if self.csv_text is None and self.rows is None:
            raise ValueError("Either csv_text or rows must be provided")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": "session-42",
                "player_level": "college",
                "csv_text": "org_movement_id,time_from_max_hand,legs_kinetic_energy,"
                            "torso_kinetic_energy,arms_kinetic_energy,bat_kinetic_energy,"
                            "total_kinetic_energy\nswing-1,-0.30,180.0,60.0,40.0,10.0,290.0\n...",
            }
        }


class BatchScoreRequest(BaseModel):
    """
    Several sessions scored in one call.

    A session id listed twice is scored once, with its last payload.
    """
    sessions: List[ScoreSessionRequest] = Field(..., description="Sessions to score")


class FourBScoresSchema(BaseModel):
    """
    The four category scores and the composite.

    20-80 scale; all 0 when the session had no usable swings.
    """
    brain: int = Field(..., ge=0, le=80, description="Repeatability of lower-body and core energy")
    body: int = Field(..., ge=0, le=80, description="Energy creation and legs→torso transfer")
    bat: int = Field(..., ge=0, le=80, description="Energy delivery through arms to the barrel")
    ball: int = Field(..., ge=0, le=80, description="Repeatability of delivered energy")
    composite: int = Field(..., ge=0, le=80, description="Weighted composite")
    grades: dict[str, str] = Field(default_factory=dict, description="Scouting grade per score")

    class Config:
        json_schema_extra = {
            "example": {
                "brain": 80,
                "body": 39,
                "bat": 55,
                "ball": 80,
                "composite": 58,
                "grades": {"brain": "Plus-Plus", "body": "Below Avg", "overall": "Above Avg"}
            }
        }


class FlowComponentsSchema(BaseModel):
    """Intermediate flow terms feeding Body and Bat."""
    ground_flow: int = Field(..., description="Legs energy, rescaled")
    core_flow: int = Field(..., description="Torso energy and legs→torso transfer")
    upper_flow: int = Field(..., description="Arms energy and torso→arms transfer")


class LeakSchema(BaseModel):
    """Dominant energy leak with its caption and corrective cue."""
    type: str = Field(..., description="Leak type")
    caption: str = Field(..., description="What happened")
    instruction: str = Field(..., description="What to work on")


class ProjectionsSchema(BaseModel):
    """
    Bat speed and exit velocity implied by the session's energy.

    All 0 when the session had no usable swings.
    """
    player_level: str = Field(..., description="Level the projections are clamped to")
    has_projections: bool = Field(..., description="Whether the session had usable energy")
    bat_speed_current_mph: int = Field(..., ge=0, description="Bat speed from delivered energy")
    bat_speed_ceiling_mph: int = Field(..., ge=0, description="Bat speed at target delivery efficiency")
    exit_velo_current_mph: int = Field(..., ge=0, description="Exit velocity at current bat speed")
    exit_velo_ceiling_mph: int = Field(..., ge=0, description="Exit velocity at ceiling bat speed")
    delivery_efficiency_pct: float = Field(..., ge=0, description="Delivered share of total energy")
    potential_delivery_efficiency_pct: float = Field(..., description="Target delivery efficiency")
    mph_left_on_table: int = Field(..., ge=0, description="Ceiling minus current bat speed")

    class Config:
        json_schema_extra = {
            "example": {
                "player_level": "hs",
                "has_projections": True,
                "bat_speed_current_mph": 74,
                "bat_speed_ceiling_mph": 75,
                "exit_velo_current_mph": 98,
                "exit_velo_ceiling_mph": 99,
                "delivery_efficiency_pct": 54.0,
                "potential_delivery_efficiency_pct": 55.0,
                "mph_left_on_table": 1
            }
        }


class DrillSchema(BaseModel):
    """A recommended corrective drill."""
    drill_id: str = Field(..., description="Drill identifier")
    name: str = Field(..., description="Display name")
    priority: int = Field(..., ge=1, description="Priority (1=first)")
    reason: str = Field("", description="Why this drill was prescribed")


class ScoreResultResponse(BaseModel):
    """
    Complete 4B scoring of one session.

    This is the main response from the scoring endpoints.
    """
    session_id: str = Field(..., description="Session identifier")
    swing_count: int = Field(..., ge=0, description="Swings that survived segmentation")
    data_quality: str = Field(..., description="insufficient | limited | good | excellent")

    scores: FourBScoresSchema = Field(..., description="Category scores")
    flows: FlowComponentsSchema = Field(..., description="Flow components")
    weakest_category: str = Field(..., description="Lowest-scoring category")

    leak: LeakSchema = Field(..., description="Leak classification")
    motor_profile: str = Field(..., description="Motor profile")
    consistency_grade: str = Field(..., description="Grade of legs/torso repeatability")

    warnings: List[str] = Field(default_factory=list, description="Data-quality warnings")
    raw_metrics: dict[str, float] = Field(default_factory=dict, description="Aggregated inputs to the scorer")
    projections: ProjectionsSchema = Field(..., description="Bat speed / exit velocity projections")
    drills: List[DrillSchema] = Field(default_factory=list, description="Up to three drills")


class BatchScoreResponse(BaseModel):
    """Results of a batch, one per distinct session id."""
    results: List[ScoreResultResponse] = Field(default_factory=list)
    count: int = Field(..., ge=0, description="Number of sessions scored")


class HealthResponse(BaseModel):
    """
    Health check response.
    """
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    drills_loaded: bool = Field(..., description="Whether a drill table is loaded")
    drill_count: int = Field(0, ge=0, description="Prescriptions in the drill table")
