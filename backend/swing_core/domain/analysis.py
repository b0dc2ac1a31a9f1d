"""
Swing Analysis Domain Models

Data structures for representing golf swing analysis results,
including phases, metrics, grades and diagnostics.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from .config import BenchmarkProfile, ClubType, QualityMode


class PhaseName(Enum):
    """
    The canonical phases of a golf swing, in the only order they can occur.

    - ADDRESS: Setup position, weight balanced
    - BACKSWING: Club moving back, shoulder rotation
    - TOP: Top of backswing, maximum coil
    - DOWNSWING: Transition and acceleration
    - IMPACT: Club meets ball
    - FOLLOW_THROUGH: After impact, deceleration to finish
    """
    ADDRESS = "address"
    BACKSWING = "backswing"
    TOP = "top"
    DOWNSWING = "downswing"
    IMPACT = "impact"
    FOLLOW_THROUGH = "follow_through"

    @property
    def order(self) -> int:
        return PHASE_ORDER.index(self)


PHASE_ORDER: Tuple[PhaseName, ...] = (
    PhaseName.ADDRESS,
    PhaseName.BACKSWING,
    PhaseName.TOP,
    PhaseName.DOWNSWING,
    PhaseName.IMPACT,
    PhaseName.FOLLOW_THROUGH,
)


class SegmentationPath(Enum):
    """Which branch of the phase segmenter produced the phases."""
    DATA_DRIVEN = "data_driven"
    FALLBACK = "fallback"


class Provenance(Enum):
    """Where a value came from; callers must never conflate these."""
    MEASURED = "measured"
    DEGRADED = "degraded"
    REJECTED = "rejected"


class CameraView(Enum):
    FACE_ON = "face_on"
    SIDE_VIEW = "side_view"
    DOWN_THE_LINE = "down_the_line"
    DIAGONAL = "diagonal"
    UNKNOWN = "unknown"


class CameraDistance(Enum):
    CLOSE = "close"
    MEDIUM = "medium"
    FAR = "far"


@dataclass(frozen=True)
class SwingPhase:
    """
    One time-bounded segment of the swing.

    Frame numbers are positions within the analyzed clip (0-based),
    times are the source timestamps in milliseconds.
    """
    name: PhaseName
    start_frame: int
    end_frame: int
    start_time: float
    end_time: float
    duration: float
    confidence: float

    @property
    def frame_count(self) -> int:
        return self.end_frame - self.start_frame + 1

    def contains(self, frame: int) -> bool:
        return self.start_frame <= frame <= self.end_frame


@dataclass(frozen=True)
class Segmentation:
    """Phase segmenter output with the evidence behind it."""
    phases: Tuple[SwingPhase, ...]
    path: SegmentationPath
    top_agreement: float = 0.0
    impact_agreement: float = 0.0

    def get(self, name: PhaseName) -> Optional[SwingPhase]:
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None


@dataclass(frozen=True)
class CameraAngle:
    """Viewpoint classification used to weight downstream estimators."""
    kind: CameraView
    rotation_deg: float
    tilt_deg: float
    distance: CameraDistance
    confidence: float


@dataclass(frozen=True)
class QualityReport:
    """Outcome of the landmark quality gate."""
    acceptable: bool
    frame_count: int
    visible_ratio: float
    motion_magnitude: float
    mode: QualityMode
    issues: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Balance:
    """
    Attributes:
        forward_offset: Hip center ahead of ankle center, -100..100
        lateral_offset: right_pct - left_pct
        stability: 100 when weight is evenly split, 0 when all on one foot
    """
    forward_offset: float
    lateral_offset: float
    stability: float


@dataclass(frozen=True)
class EstimatorReading:
    """One independent weight-split measurement."""
    name: str
    left_pct: float
    right_pct: float
    confidence: float


@dataclass(frozen=True)
class WeightDistribution:
    """Fused left/right weight split for one frame (sums to 100)."""
    left_pct: float
    right_pct: float
    center_of_gravity: Point3D
    balance: Balance
    phase: Optional[PhaseName]
    confidence: float
    provenance: Provenance = Provenance.MEASURED
    estimators: Tuple[EstimatorReading, ...] = ()


# =============================================================================
# Metrics
# =============================================================================

@dataclass(frozen=True)
class TempoMetrics:
    """Times in seconds; ratio is backswing / downswing."""
    backswing_time: Optional[float]
    downswing_time: Optional[float]
    ratio: Optional[float]
    clamped_ratio: Optional[float]
    clamped: bool
    confidence: float
    provenance: Provenance
    total_time: Optional[float] = None


@dataclass(frozen=True)
class RotationMetrics:
    """Turns in degrees between Address and Top."""
    shoulder_turn_deg: Optional[float]
    hip_turn_deg: Optional[float]
    x_factor_deg: Optional[float]
    confidence: float
    provenance: Provenance


@dataclass(frozen=True)
class OverallBalance:
    """
    Balance summary over every frame of the clip.

    Attributes:
        average_stability: Mean Balance.stability
        max_lateral_shift: Largest |lateral_offset|
        max_forward_shift: Largest |forward_offset|
    """
    average_stability: float
    max_lateral_shift: float
    max_forward_shift: float


@dataclass(frozen=True)
class WeightTransferMetrics:
    """Key-frame distributions plus the per-frame series they are taken from."""
    address: Optional[WeightDistribution]
    top: Optional[WeightDistribution]
    impact: Optional[WeightDistribution]
    finish: Optional[WeightDistribution]
    confidence: float
    provenance: Provenance
    frames: Tuple[WeightDistribution, ...] = ()
    overall: Optional[OverallBalance] = None


@dataclass(frozen=True)
class SwingPlaneMetrics:
    angle_deg: Optional[float]
    deviation_deg: Optional[float]
    ideal_angle_deg: float
    smoothness: Optional[float]
    confidence: float
    provenance: Provenance


@dataclass(frozen=True)
class PowerMetrics:
    """Club-head speed estimate in mph."""
    speed_estimate: Optional[float]
    peak_frame: Optional[int]
    club_type: ClubType
    benchmark_mph: float
    confidence: float
    provenance: Provenance


@dataclass(frozen=True)
class ConsistencyMetrics:
    variance: Optional[float]
    variance_score: Optional[float]
    confidence: float
    provenance: Provenance


@dataclass(frozen=True)
class SwingMetricsBundle:
    tempo: TempoMetrics
    rotation: RotationMetrics
    weight_transfer: WeightTransferMetrics
    swing_plane: SwingPlaneMetrics
    power: PowerMetrics
    consistency: ConsistencyMetrics

    def categories(self) -> dict[str, object]:
        """Metric category name -> metric, in grading order."""
        return {
            "tempo": self.tempo,
            "rotation": self.rotation,
            "balance": self.weight_transfer,
            "swing_plane": self.swing_plane,
            "power": self.power,
            "consistency": self.consistency,
        }


# =============================================================================
# Grading
# =============================================================================

@dataclass(frozen=True)
class CategoryGrade:
    score: float
    letter: str
    weight: float
    benchmarks: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Recommendations:
    immediate: Tuple[str, ...] = ()
    short_term: Tuple[str, ...] = ()
    long_term: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GolfGrade:
    overall_score: float
    letter: str
    categories: Mapping[str, CategoryGrade]
    recommendations: Recommendations
    profile: BenchmarkProfile
    provenance: Provenance


# =============================================================================
# Validation & Results
# =============================================================================

@dataclass(frozen=True)
class AuthenticityReport:
    """Outcome of the five-test golf swing authenticity gate."""
    is_valid: bool
    score: float
    results: Mapping[str, bool]
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    details: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Diagnostics:
    segmentation_path: SegmentationPath
    quality_tier: str
    rejected_categories: Tuple[str, ...] = ()
    violations: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SwingAnalysis:
    """
    Complete analysis of a golf swing.

    This is the main result object returned after analyzing a clip.
    """
    phases: Tuple[SwingPhase, ...]
    metrics: SwingMetricsBundle
    grade: GolfGrade
    quality: QualityReport
    camera: CameraAngle
    authenticity: AuthenticityReport
    diagnostics: Diagnostics

    def get_phase(self, name: PhaseName) -> Optional[SwingPhase]:
        """Get a specific phase, if it was detected."""
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None
