"""
Domain Models

Pure data structures representing golf swing analysis concepts.
Plain dataclasses and enums; numpy only for trajectory math.
"""

from .pose import PoseLandmark, PoseFrame, BodyPart, NUM_LANDMARKS
from .trajectory import TrajectoryPoint, Trajectory
from .config import AnalysisConfig, QualityMode, ClubType, BenchmarkProfile
from .errors import (
    SwingAnalysisError,
    InsufficientData,
    PhysicalImplausibility,
    InvalidSwingMotion,
    ConfigurationError,
)
from .analysis import (
    PhaseName,
    PHASE_ORDER,
    SwingPhase,
    Segmentation,
    SegmentationPath,
    Provenance,
    CameraView,
    CameraDistance,
    CameraAngle,
    QualityReport,
    WeightDistribution,
    SwingMetricsBundle,
    GolfGrade,
    AuthenticityReport,
    SwingAnalysis,
)

__all__ = [
    "PoseLandmark",
    "PoseFrame",
    "BodyPart",
    "NUM_LANDMARKS",
    "TrajectoryPoint",
    "Trajectory",
    "AnalysisConfig",
    "QualityMode",
    "ClubType",
    "BenchmarkProfile",
    "SwingAnalysisError",
    "InsufficientData",
    "PhysicalImplausibility",
    "InvalidSwingMotion",
    "ConfigurationError",
    "PhaseName",
    "PHASE_ORDER",
    "SwingPhase",
    "Segmentation",
    "SegmentationPath",
    "Provenance",
    "CameraView",
    "CameraDistance",
    "CameraAngle",
    "QualityReport",
    "WeightDistribution",
    "SwingMetricsBundle",
    "GolfGrade",
    "AuthenticityReport",
    "SwingAnalysis",
]
