"""
API Schemas

Pydantic models for request/response validation.
"""

from .session import (
    ScoreSessionRequest,
    BatchScoreRequest,
    FourBScoresSchema,
    FlowComponentsSchema,
    LeakSchema,
    ProjectionsSchema,
    DrillSchema,
    ScoreResultResponse,
    BatchScoreResponse,
    HealthResponse,
)

__all__ = [
    "ScoreSessionRequest",
    "BatchScoreRequest",
    "FourBScoresSchema",
    "FlowComponentsSchema",
    "LeakSchema",
    "ProjectionsSchema",
    "DrillSchema",
    "ScoreResultResponse",
    "BatchScoreResponse",
    "HealthResponse",
]
