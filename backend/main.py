"""
4B Scoring Backend API

FastAPI application scoring baseball-swing motion-capture sessions on
the Brain / Body / Bat / Ball model.

Run with:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

Environment (or a .env file):
    FOURB_CONFIG_PATH   YAML overriding the scoring constants
    FOURB_DRILLS_PATH   YAML drill-prescription table

API docs available at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import __version__
from core.config import load_config
from core.services import DrillMapper, SessionScorer
from api.routes import router as api_router

load_dotenv()

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_session_scorer() -> SessionScorer:
    """
    Build the scorer from the configured constants and drill tables.

    Raises:
        ConfigError / DrillTableError: If either file is invalid
    """
    config = load_config(os.getenv("FOURB_CONFIG_PATH") or None)

    drills_path = os.getenv("FOURB_DRILLS_PATH")
    drill_mapper = DrillMapper.from_yaml(drills_path) if drills_path else DrillMapper()
    if not drills_path:
        logger.warning(" No drill table configured (FOURB_DRILLS_PATH); drills disabled")

    return SessionScorer(config=config, drill_mapper=drill_mapper)


# =============================================================================
# Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Loads and validates the constants and drill tables before the app
    starts accepting requests; a bad table aborts startup.
    """
    # Startup
    logger.info(" 4B Scoring API starting up...")
    logger.info(" API docs: http://localhost:8000/docs")

    app.state.session_scorer = build_session_scorer()
    logger.info(" Scoring engine initialized")

    yield  # App runs here

    # Shutdown
    logger.info(" 4B Scoring API shutting down...")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="4B Scoring API",
    description="""
    **Kinetic-Energy Swing Scoring**

    Converts motion-capture kinetic-energy exports into Brain / Body /
    Bat / Ball scores on the 20-80 scouting scale.

    ## Features

    - **4B Scores** with flow components and grades
    - **Leak Classification** (where energy transfer breaks down)
    - **Motor Profile** from segment peak timing
    - **Drill Prescriptions** matched to the session

    ## Endpoints

    - `GET /api/health` - Health check
    - `GET /api/config` - Active scoring constants
    - `POST /api/sessions/score` - Score one session
    - `POST /api/sessions/score-batch` - Score several sessions
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",      # React dev server
        "http://localhost:5173",      # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Routes
# =============================================================================

app.include_router(api_router, prefix="/api")


# =============================================================================
# Root endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "name": "4B Scoring API",
        "version": __version__,
        "description": "Kinetic-energy swing scoring (Brain / Body / Bat / Ball)",
        "docs": "/docs",
        "health": "/api/health",
    }


# =============================================================================
# Run directly (for development)
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
