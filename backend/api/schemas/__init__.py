"""
API Schemas

Pydantic models for request/response validation.
"""

from .pose import (
    LandmarkSchema,
    PoseFrameSchema,
    AnalysisConfigSchema,
    AnalyzeFramesRequest,
)

from .analysis import (
    SwingPhaseEnum,
    ProvenanceEnum,
    SwingPhaseSchema,
    WeightDistributionSchema,
    SwingMetricsSchema,
    CategoryGradeSchema,
    GolfGradeSchema,
    AuthenticityReportSchema,
    SwingAnalysisResponse,
    HealthResponse,
)

__all__ = [
    # Pose schemas
    "LandmarkSchema",
    "PoseFrameSchema",
    "AnalysisConfigSchema",
    "AnalyzeFramesRequest",
    # Analysis schemas
    "SwingPhaseEnum",
    "ProvenanceEnum",
    "SwingPhaseSchema",
    "WeightDistributionSchema",
    "SwingMetricsSchema",
    "CategoryGradeSchema",
    "GolfGradeSchema",
    "AuthenticityReportSchema",
    "SwingAnalysisResponse",
    "HealthResponse",
]
