"""
Services Layer

Business logic services for golf swing analysis.
These services turn pose frames into phases, metrics and grades.
"""

from .angle_calculator import AngleCalculator
from .quality_gate import LandmarkQualityGate
from .camera_angle import CameraAngleEstimator
from .trajectory import TrajectoryExtractor, hands_center, club_head
from .phase_segmenter import PhaseSegmenter
from .weight_transfer import WeightTransferAnalyzer
from .metrics import MetricContext
from .plausibility import PlausibilityValidator
from .authenticity import SwingAuthenticityValidator
from .grading import GradingAggregator
from .swing_analyzer import SwingAnalyzer

__all__ = [
    "AngleCalculator",
    "LandmarkQualityGate",
    "CameraAngleEstimator",
    "TrajectoryExtractor",
    "hands_center",
    "club_head",
    "PhaseSegmenter",
    "WeightTransferAnalyzer",
    "MetricContext",
    "PlausibilityValidator",
    "SwingAuthenticityValidator",
    "GradingAggregator",
    "SwingAnalyzer",
]
