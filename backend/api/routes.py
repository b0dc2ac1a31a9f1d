"""
REST API Routes

FastAPI routes for golf swing analysis.
Handles HTTP requests for swing analysis and authenticity checks.
"""

import time
import logging
from fastapi import APIRouter, HTTPException

from .schemas import (
    AnalyzeFramesRequest,
    AuthenticityReportSchema,
    SwingAnalysisResponse,
    HealthResponse,
)
from config import settings
from swing_core.domain import AnalysisConfig, ConfigurationError, SwingAnalysisError
from swing_core.services import SwingAnalyzer

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check() -> HealthResponse:
    """
    Check if the API is running.

    Returns:
        Health status, version and default quality mode
    """
    return HealthResponse(
        status="healthy",
        version=settings.version,
        quality_mode=settings.quality_mode,
    )


# =============================================================================
# Swing Analysis
# =============================================================================

@router.post(
    "/analysis/frames",
    response_model=SwingAnalysisResponse,
    tags=["Swing Analysis"],
    summary="Analyze a golf swing from pose frames"
)
def analyze_frames(request: AnalyzeFramesRequest) -> SwingAnalysisResponse:
    """
    Analyze a golf swing from pre-detected pose frames.

    The frames will be:
    1. Checked for landmark quality
    2. Segmented into swing phases
    3. Checked for swing authenticity
    4. Measured (tempo, rotation, weight transfer, plane, power, consistency)
    5. Graded with coaching recommendations

    Errors:
        400: unsupported configuration value
        422: not enough usable data, or the clip is not a golf swing
    """
    start_time = time.time()
    config = _resolve_config(request)

    try:
        result = SwingAnalyzer(config).analyze_frames(request.to_frames())
    except SwingAnalysisError as e:
        raise _to_http_error(e)

    processing_time = (time.time() - start_time) * 1000
    logger.info(f"Analysis of {len(request.frames)} frames took {processing_time:.0f}ms")
    return SwingAnalysisResponse.from_domain(result)


@router.post(
    "/analysis/validate",
    response_model=AuthenticityReportSchema,
    tags=["Swing Analysis"],
    summary="Check whether pose frames show a golf swing"
)
def validate_swing(request: AnalyzeFramesRequest) -> AuthenticityReportSchema:
    """
    Run only the swing authenticity check.

    A failing score is returned as a normal report (is_valid=false);
    only unusable input is an error.
    """
    config = _resolve_config(request)
    try:
        report = SwingAnalyzer(config).validate_authenticity(request.to_frames())
    except SwingAnalysisError as e:
        raise _to_http_error(e)
    return AuthenticityReportSchema.from_domain(report)


# =============================================================================
# Helper Functions
# =============================================================================

def _resolve_config(request: AnalyzeFramesRequest) -> AnalysisConfig:
    """Request options over server defaults."""
    try:
        defaults = settings.to_analysis_config()
        if request.config is None:
            return defaults
        return request.config.to_domain(defaults)
    except ConfigurationError as e:
        raise _to_http_error(e)


def _to_http_error(error: SwingAnalysisError) -> HTTPException:
    """Map analysis errors to HTTP errors with structured detail."""
    if isinstance(error, ConfigurationError):
        status_code = 400
    elif error.recoverable:
        status_code = 422
    else:
        status_code = 500
    logger.warning(f"Analysis request failed ({status_code}): {error}")
    return HTTPException(status_code=status_code, detail=error.to_dict())
