"""
REST API Routes

FastAPI routes for 4B session scoring.
Handles HTTP requests for single and batch session scoring.
"""

import asyncio
import logging
from fastapi import APIRouter, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from .schemas import (
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
from core import __version__
from core.domain import DrillPrescription, ScoreResult
from core.services import SessionScorer

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# Sessions scored concurrently per batch chunk
BATCH_SIZE = 10

_default_scorer = None


def get_session_scorer(request: Request) -> SessionScorer:
    """Scorer built at startup, or a default one when the app has no lifespan state."""
    global _default_scorer
    scorer = getattr(request.app.state, "session_scorer", None)
    if scorer is not None:
        return scorer
    if _default_scorer is None:
        _default_scorer = SessionScorer()
    return _default_scorer


# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check(request: Request) -> HealthResponse:
    """
    Check if the API is running and whether a drill table is loaded.

    Returns:
        Health status and version information
    """
    scorer = get_session_scorer(request)
    drill_count = len(scorer.drill_mapper)

    return HealthResponse(
        status="healthy",
        version=__version__,
        drills_loaded=drill_count > 0,
        drill_count=drill_count,
    )


@router.get(
    "/config",
    tags=["Health"],
    summary="Active scoring constants"
)
async def get_config(request: Request) -> dict:
    """Return the constants table the engine is scoring with."""
    return get_session_scorer(request).config.model_dump()


# =============================================================================
# Session Scoring
# =============================================================================

@router.post(
    "/sessions/score",
    response_model=ScoreResultResponse,
    tags=["Scoring"],
    summary="Score one motion-capture session"
)
async def score_session(payload: ScoreSessionRequest, request: Request) -> ScoreResultResponse:
    """
    Score a single session.

    The session is:
    1. Parsed (bad rows dropped)
    2. Split into swings and windowed
    3. Scored on Brain / Body / Bat / Ball
    4. Classified for leak and motor profile
    5. Projected to bat speed and exit velocity
    6. Matched against the drill table

    Args:
        payload: Session id plus CSV text or rows, optional player level

    Returns:
        Complete score result with recommended drills
    """
    scorer = get_session_scorer(request)

    try:
        return await run_in_threadpool(_score_payload, scorer, payload)
    except Exception as e:
        logger.error(f"Scoring session {payload.session_id} failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/sessions/score-batch",
    response_model=BatchScoreResponse,
    tags=["Scoring"],
    summary="Score several sessions"
)
async def score_batch(payload: BatchScoreRequest, request: Request) -> BatchScoreResponse:
    """
    Score many sessions, at most BATCH_SIZE at a time.

    Session ids are treated as upsert keys: a repeated id is scored
    once, using the last payload submitted for it.
    """
    scorer = get_session_scorer(request)

    unique: dict[str, ScoreSessionRequest] = {}
    for session in payload.sessions:
        unique[session.session_id] = session
    sessions = list(unique.values())

    results = []
    try:
        for start in range(0, len(sessions), BATCH_SIZE):
            chunk = sessions[start:start + BATCH_SIZE]
            results.extend(await asyncio.gather(*(
                run_in_threadpool(_score_payload, scorer, session) for session in chunk
            )))
    except Exception as e:
        logger.error(f"Batch scoring failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return BatchScoreResponse(results=results, count=len(results))


# =============================================================================
# Helper Functions
# =============================================================================

def _score_payload(scorer: SessionScorer, payload: ScoreSessionRequest) -> ScoreResultResponse:
    if payload.csv_text is not None:
        result = scorer.score_csv(payload.session_id, payload.csv_text, payload.player_level)
    else:
        result = scorer.score_records(payload.session_id, payload.rows or [], payload.player_level)

    return _convert_result_to_response(result, scorer.recommend_drills(result))


def _convert_result_to_response(
    result: ScoreResult,
    drills: list[DrillPrescription],
) -> ScoreResultResponse:
    """Convert domain ScoreResult to API response schema."""
    scores = result.scores

    return ScoreResultResponse(
        session_id=result.session_id,
        swing_count=result.swing_count,
        data_quality=result.data_quality,
        scores=FourBScoresSchema(
            brain=scores.brain,
            body=scores.body,
            bat=scores.bat,
            ball=scores.ball,
            composite=scores.composite,
            grades=scores.grades,
        ),
        flows=FlowComponentsSchema(
            ground_flow=scores.flows.ground_flow,
            core_flow=scores.flows.core_flow,
            upper_flow=scores.flows.upper_flow,
        ),
        weakest_category=result.weakest_category.value,
        leak=LeakSchema(
            type=result.leak.type.value,
            caption=result.leak.caption,
            instruction=result.leak.instruction,
        ),
        motor_profile=result.motor_profile.value,
        consistency_grade=result.consistency_grade,
        warnings=list(result.warnings),
        raw_metrics=dict(result.raw_metrics),
        projections=ProjectionsSchema(**result.projections.to_dict()),
        drills=[
            DrillSchema(
                drill_id=d.drill_id,
                name=d.name,
                priority=d.priority,
                reason=d.reason,
            )
            for d in drills
        ],
    )
