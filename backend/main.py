"""
Swing Phase Analyzer Backend API

FastAPI application that turns pose keypoint sequences into swing phases,
metrics and grades.

Run with:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

API docs available at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as api_router
from config import settings

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective analysis defaults on startup.
    """
    # Startup
    logger.info(f" {settings.app_name} starting up...")
    logger.info(" API docs: http://localhost:8000/docs")
    logger.info(
        f" Defaults: quality_mode={settings.quality_mode}, club_type={settings.club_type}, "
        f"benchmark_profile={settings.benchmark_profile}"
    )

    yield  # App runs here

    # Shutdown
    logger.info(f" {settings.app_name} shutting down...")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="""
    **Golf Swing Phase & Metrics Analyzer**

    Segments a golf swing into phases and measures it from pose keypoints
    produced by a pose estimator (33-landmark MediaPipe topology).

    ## Features

    - **Phase Detection** (address, backswing, top, downswing, impact, follow-through)
    - **Metrics** (tempo, rotation, weight transfer, swing plane, power, consistency)
    - **Swing Authenticity Check**
    - **Grading** with tiered coaching recommendations

    ## Endpoints

    - `GET /api/health` - Health check
    - `POST /api/analysis/frames` - Full analysis of pose frames
    - `POST /api/analysis/validate` - Authenticity check only
    """,
    version=settings.version,
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

# Include REST API routes
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
        "name": settings.app_name,
        "version": settings.version,
        "description": "Golf Swing Phase & Metrics Analyzer",
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
