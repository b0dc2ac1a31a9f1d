"""
Analysis API Schemas

Pydantic models for swing analysis API responses.

Every schema that mirrors a domain result has from_domain(), and the
metric and grade schemas also have to_domain(), so results survive a
JSON round-trip unchanged.
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional, List
from enum import Enum

from swing_core.domain import (
    AuthenticityReport,
    BenchmarkProfile,
    CameraAngle,
    ClubType,
    GolfGrade,
    PhaseName,
    Provenance,
    QualityReport,
    SwingAnalysis,
    SwingMetricsBundle,
    SwingPhase,
    WeightDistribution,
)
from swing_core.domain.analysis import (
    Balance,
    CategoryGrade,
    ConsistencyMetrics,
    Diagnostics,
    EstimatorReading,
    OverallBalance,
    Point3D,
    PowerMetrics,
    Recommendations,
    RotationMetrics,
    SwingPlaneMetrics,
    TempoMetrics,
    WeightTransferMetrics,
)


# =============================================================================
# Enums
# =============================================================================

class SwingPhaseEnum(str, Enum):
    """Swing phases for API."""
    ADDRESS = "address"
    BACKSWING = "backswing"
    TOP = "top"
    DOWNSWING = "downswing"
    IMPACT = "impact"
    FOLLOW_THROUGH = "follow_through"


class ProvenanceEnum(str, Enum):
    """Whether a value was measured, degraded or rejected."""
    MEASURED = "measured"
    DEGRADED = "degraded"
    REJECTED = "rejected"


class CameraViewEnum(str, Enum):
    FACE_ON = "face_on"
    SIDE_VIEW = "side_view"
    DOWN_THE_LINE = "down_the_line"
    DIAGONAL = "diagonal"
    UNKNOWN = "unknown"


class CameraDistanceEnum(str, Enum):
    CLOSE = "close"
    MEDIUM = "medium"
    FAR = "far"


class ClubTypeEnum(str, Enum):
    """Golf club types for API."""
    DRIVER = "driver"
    IRON = "iron"
    WEDGE = "wedge"


class BenchmarkProfileEnum(str, Enum):
    PROFESSIONAL = "professional"
    AMATEUR = "amateur"
    BEGINNER = "beginner"


# =============================================================================
# Phases & weight distribution
# =============================================================================

class SwingPhaseSchema(BaseModel):
    """
    One detected swing phase.

    Frames are positions in the submitted frame list (0-based).
    """
    name: SwingPhaseEnum = Field(..., description="Swing phase")
    start_frame: int = Field(..., ge=0, description="First frame of the phase")
    end_frame: int = Field(..., ge=0, description="Last frame of the phase")
    start_time: float = Field(..., description="Timestamp of the first frame (ms)")
    end_time: float = Field(..., description="Timestamp of the last frame (ms)")
    duration: float = Field(..., ge=0, description="end_time - start_time (ms)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "backswing",
                "start_frame": 6,
                "end_frame": 26,
                "start_time": 200.0,
                "end_time": 866.6,
                "duration": 666.6,
                "confidence": 0.88,
            }
        }

    @classmethod
    def from_domain(cls, phase: SwingPhase) -> "SwingPhaseSchema":
        return cls(
            name=SwingPhaseEnum(phase.name.value),
            start_frame=phase.start_frame,
            end_frame=phase.end_frame,
            start_time=phase.start_time,
            end_time=phase.end_time,
            duration=phase.duration,
            confidence=phase.confidence,
        )

    def to_domain(self) -> SwingPhase:
        return SwingPhase(
            name=PhaseName(self.name.value),
            start_frame=self.start_frame,
            end_frame=self.end_frame,
            start_time=self.start_time,
            end_time=self.end_time,
            duration=self.duration,
            confidence=self.confidence,
        )


class Point3DSchema(BaseModel):
    x: float
    y: float
    z: float


class BalanceSchema(BaseModel):
    forward_offset: float = Field(..., description="Hip center ahead of ankle center (-100..100)")
    lateral_offset: float = Field(..., description="right_pct - left_pct")
    stability: float = Field(..., description="100 = evenly split")


class EstimatorReadingSchema(BaseModel):
    name: str = Field(..., description="Estimator name")
    left_pct: float
    right_pct: float
    confidence: float


class WeightDistributionSchema(BaseModel):
    """
    Left/right weight split for one key frame (sums to 100).
    """
    left_pct: float = Field(..., ge=0.0, le=100.0, description="Weight on the left foot (%)")
    right_pct: float = Field(..., ge=0.0, le=100.0, description="Weight on the right foot (%)")
    center_of_gravity: Point3DSchema
    balance: BalanceSchema
    phase: Optional[SwingPhaseEnum] = Field(None, description="Phase containing the frame")
    confidence: float = Field(..., ge=0.0, le=1.0)
    provenance: ProvenanceEnum
    estimators: List[EstimatorReadingSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, dist: Optional[WeightDistribution]) -> Optional["WeightDistributionSchema"]:
        if dist is None:
            return None
        return cls(
            left_pct=dist.left_pct,
            right_pct=dist.right_pct,
            center_of_gravity=Point3DSchema(
                x=dist.center_of_gravity.x,
                y=dist.center_of_gravity.y,
                z=dist.center_of_gravity.z,
            ),
            balance=BalanceSchema(
                forward_offset=dist.balance.forward_offset,
                lateral_offset=dist.balance.lateral_offset,
                stability=dist.balance.stability,
            ),
            phase=SwingPhaseEnum(dist.phase.value) if dist.phase is not None else None,
            confidence=dist.confidence,
            provenance=ProvenanceEnum(dist.provenance.value),
            estimators=[
                EstimatorReadingSchema(
                    name=r.name,
                    left_pct=r.left_pct,
                    right_pct=r.right_pct,
                    confidence=r.confidence,
                )
                for r in dist.estimators
            ],
        )

    def to_domain(self) -> WeightDistribution:
        return WeightDistribution(
            left_pct=self.left_pct,
            right_pct=self.right_pct,
            center_of_gravity=Point3D(**self.center_of_gravity.model_dump()),
            balance=Balance(**self.balance.model_dump()),
            phase=PhaseName(self.phase.value) if self.phase is not None else None,
            confidence=self.confidence,
            provenance=Provenance(self.provenance.value),
            estimators=tuple(EstimatorReading(**r.model_dump()) for r in self.estimators),
        )


# =============================================================================
# Metrics
# =============================================================================

class TempoSchema(BaseModel):
    backswing_time: Optional[float] = Field(None, description="Backswing duration (s)")
    downswing_time: Optional[float] = Field(None, description="Downswing duration (s)")
    ratio: Optional[float] = Field(None, description="Backswing / downswing")
    clamped_ratio: Optional[float] = Field(None, description="Ratio limited to 1.0 - 6.0 for scoring")
    clamped: bool = False
    confidence: float
    provenance: ProvenanceEnum
    total_time: Optional[float] = Field(None, description="Whole clip duration (s)")


class RotationSchema(BaseModel):
    shoulder_turn_deg: Optional[float] = Field(None, description="Shoulder turn, address to top")
    hip_turn_deg: Optional[float] = Field(None, description="Hip turn, address to top")
    x_factor_deg: Optional[float] = Field(None, description="|shoulder turn - hip turn|")
    confidence: float
    provenance: ProvenanceEnum


class OverallBalanceSchema(BaseModel):
    average_stability: float = Field(..., description="Mean stability over every frame")
    max_lateral_shift: float = Field(..., description="Largest |lateral offset|")
    max_forward_shift: float = Field(..., description="Largest |forward offset|")


class WeightTransferSchema(BaseModel):
    address: Optional[WeightDistributionSchema] = None
    top: Optional[WeightDistributionSchema] = None
    impact: Optional[WeightDistributionSchema] = None
    finish: Optional[WeightDistributionSchema] = None
    confidence: float
    provenance: ProvenanceEnum
    frames: List[WeightDistributionSchema] = Field(default_factory=list, description="Distribution per frame")
    overall: Optional[OverallBalanceSchema] = None


class SwingPlaneSchema(BaseModel):
    angle_deg: Optional[float] = Field(None, description="Mean shaft angle to horizontal")
    deviation_deg: Optional[float] = Field(None, description="|angle - ideal|")
    ideal_angle_deg: float
    smoothness: Optional[float] = Field(None, description="0-1, 1 = clean arc")
    confidence: float
    provenance: ProvenanceEnum


class PowerSchema(BaseModel):
    speed_estimate: Optional[float] = Field(None, description="Peak club-head speed (mph)")
    peak_frame: Optional[int] = Field(None, description="Frame of peak speed")
    club_type: ClubTypeEnum
    benchmark_mph: float
    confidence: float
    provenance: ProvenanceEnum


class ConsistencySchema(BaseModel):
    variance: Optional[float] = Field(None, description="Head positional variance")
    variance_score: Optional[float] = Field(None, description="0-1, 1 = perfectly still")
    confidence: float
    provenance: ProvenanceEnum


class SwingMetricsSchema(BaseModel):
    """
    All swing metrics with confidence and provenance per category.
    """
    tempo: TempoSchema
    rotation: RotationSchema
    weight_transfer: WeightTransferSchema
    swing_plane: SwingPlaneSchema
    power: PowerSchema
    consistency: ConsistencySchema

    @classmethod
    def from_domain(cls, bundle: SwingMetricsBundle) -> "SwingMetricsSchema":
        tempo = bundle.tempo
        rotation = bundle.rotation
        transfer = bundle.weight_transfer
        plane = bundle.swing_plane
        power = bundle.power
        consistency = bundle.consistency
        return cls(
            tempo=TempoSchema(
                backswing_time=tempo.backswing_time,
                downswing_time=tempo.downswing_time,
                ratio=tempo.ratio,
                clamped_ratio=tempo.clamped_ratio,
                clamped=tempo.clamped,
                confidence=tempo.confidence,
                provenance=ProvenanceEnum(tempo.provenance.value),
                total_time=tempo.total_time,
            ),
            rotation=RotationSchema(
                shoulder_turn_deg=rotation.shoulder_turn_deg,
                hip_turn_deg=rotation.hip_turn_deg,
                x_factor_deg=rotation.x_factor_deg,
                confidence=rotation.confidence,
                provenance=ProvenanceEnum(rotation.provenance.value),
            ),
            weight_transfer=WeightTransferSchema(
                address=WeightDistributionSchema.from_domain(transfer.address),
                top=WeightDistributionSchema.from_domain(transfer.top),
                impact=WeightDistributionSchema.from_domain(transfer.impact),
                finish=WeightDistributionSchema.from_domain(transfer.finish),
                confidence=transfer.confidence,
                provenance=ProvenanceEnum(transfer.provenance.value),
                frames=[WeightDistributionSchema.from_domain(d) for d in transfer.frames],
                overall=(
                    OverallBalanceSchema(
                        average_stability=transfer.overall.average_stability,
                        max_lateral_shift=transfer.overall.max_lateral_shift,
                        max_forward_shift=transfer.overall.max_forward_shift,
                    )
                    if transfer.overall is not None else None
                ),
            ),
            swing_plane=SwingPlaneSchema(
                angle_deg=plane.angle_deg,
                deviation_deg=plane.deviation_deg,
                ideal_angle_deg=plane.ideal_angle_deg,
                smoothness=plane.smoothness,
                confidence=plane.confidence,
                provenance=ProvenanceEnum(plane.provenance.value),
            ),
            power=PowerSchema(
                speed_estimate=power.speed_estimate,
                peak_frame=power.peak_frame,
                club_type=ClubTypeEnum(power.club_type.value),
                benchmark_mph=power.benchmark_mph,
                confidence=power.confidence,
                provenance=ProvenanceEnum(power.provenance.value),
            ),
            consistency=ConsistencySchema(
                variance=consistency.variance,
                variance_score=consistency.variance_score,
                confidence=consistency.confidence,
                provenance=ProvenanceEnum(consistency.provenance.value),
            ),
        )

    def to_domain(self) -> SwingMetricsBundle:
        def distribution(schema: Optional[WeightDistributionSchema]) -> Optional[WeightDistribution]:
            return schema.to_domain() if schema is not None else None

        return SwingMetricsBundle(
            tempo=TempoMetrics(
                backswing_time=self.tempo.backswing_time,
                downswing_time=self.tempo.downswing_time,
                ratio=self.tempo.ratio,
                clamped_ratio=self.tempo.clamped_ratio,
                clamped=self.tempo.clamped,
                confidence=self.tempo.confidence,
                provenance=Provenance(self.tempo.provenance.value),
                total_time=self.tempo.total_time,
            ),
            rotation=RotationMetrics(
                shoulder_turn_deg=self.rotation.shoulder_turn_deg,
                hip_turn_deg=self.rotation.hip_turn_deg,
                x_factor_deg=self.rotation.x_factor_deg,
                confidence=self.rotation.confidence,
                provenance=Provenance(self.rotation.provenance.value),
            ),
            weight_transfer=WeightTransferMetrics(
                address=distribution(self.weight_transfer.address),
                top=distribution(self.weight_transfer.top),
                impact=distribution(self.weight_transfer.impact),
                finish=distribution(self.weight_transfer.finish),
                confidence=self.weight_transfer.confidence,
                provenance=Provenance(self.weight_transfer.provenance.value),
                frames=tuple(d.to_domain() for d in self.weight_transfer.frames),
                overall=(
                    OverallBalance(**self.weight_transfer.overall.model_dump())
                    if self.weight_transfer.overall is not None else None
                ),
            ),
            swing_plane=SwingPlaneMetrics(
                angle_deg=self.swing_plane.angle_deg,
                deviation_deg=self.swing_plane.deviation_deg,
                ideal_angle_deg=self.swing_plane.ideal_angle_deg,
                smoothness=self.swing_plane.smoothness,
                confidence=self.swing_plane.confidence,
                provenance=Provenance(self.swing_plane.provenance.value),
            ),
            power=PowerMetrics(
                speed_estimate=self.power.speed_estimate,
                peak_frame=self.power.peak_frame,
                club_type=ClubType(self.power.club_type.value),
                benchmark_mph=self.power.benchmark_mph,
                confidence=self.power.confidence,
                provenance=Provenance(self.power.provenance.value),
            ),
            consistency=ConsistencyMetrics(
                variance=self.consistency.variance,
                variance_score=self.consistency.variance_score,
                confidence=self.consistency.confidence,
                provenance=Provenance(self.consistency.provenance.value),
            ),
        )


# =============================================================================
# Grade
# =============================================================================

class CategoryGradeSchema(BaseModel):
    """
    Score for one metric category.
    """
    score: float = Field(..., ge=0, le=100, description="Score out of 100")
    letter: str = Field(..., description="Letter grade (A+ to F)")
    weight: float = Field(..., ge=0, le=1, description="Share of the overall score")
    benchmarks: Dict[str, float] = Field(default_factory=dict, description="Target values")

    class Config:
        json_schema_extra = {
            "example": {
                "score": 85.0,
                "letter": "B",
                "weight": 0.2,
                "benchmarks": {"shoulder_turn_deg": 90.0, "hip_turn_deg": 45.0},
            }
        }


class RecommendationsSchema(BaseModel):
    """
    Coaching advice in three tiers.
    """
    immediate: List[str] = Field(default_factory=list, description="Fix first (score < 60)")
    short_term: List[str] = Field(default_factory=list, description="Practice items (60-80)")
    long_term: List[str] = Field(default_factory=list, description="Ongoing work (< 90)")


class GolfGradeSchema(BaseModel):
    """
    Weighted overall grade with per-category breakdown.
    """
    overall_score: float = Field(..., ge=0, le=100, description="Overall swing score")
    letter: str = Field(..., description="Overall letter grade")
    categories: Dict[str, CategoryGradeSchema] = Field(default_factory=dict)
    recommendations: RecommendationsSchema
    profile: BenchmarkProfileEnum
    provenance: ProvenanceEnum

    class Config:
        json_schema_extra = {
            "example": {
                "overall_score": 78.4,
                "letter": "C+",
                "categories": {
                    "tempo": {"score": 82.0, "letter": "B-", "weight": 0.15, "benchmarks": {"ratio": 3.0}}
                },
                "recommendations": {"immediate": [], "short_term": [], "long_term": []},
                "profile": "amateur",
                "provenance": "measured",
            }
        }

    @classmethod
    def from_domain(cls, grade: GolfGrade) -> "GolfGradeSchema":
        return cls(
            overall_score=grade.overall_score,
            letter=grade.letter,
            categories={
                name: CategoryGradeSchema(
                    score=category.score,
                    letter=category.letter,
                    weight=category.weight,
                    benchmarks=dict(category.benchmarks),
                )
                for name, category in grade.categories.items()
            },
            recommendations=RecommendationsSchema(
                immediate=list(grade.recommendations.immediate),
                short_term=list(grade.recommendations.short_term),
                long_term=list(grade.recommendations.long_term),
            ),
            profile=BenchmarkProfileEnum(grade.profile.value),
            provenance=ProvenanceEnum(grade.provenance.value),
        )

    def to_domain(self) -> GolfGrade:
        return GolfGrade(
            overall_score=self.overall_score,
            letter=self.letter,
            categories={
                name: CategoryGrade(
                    score=category.score,
                    letter=category.letter,
                    weight=category.weight,
                    benchmarks=dict(category.benchmarks),
                )
                for name, category in self.categories.items()
            },
            recommendations=Recommendations(
                immediate=tuple(self.recommendations.immediate),
                short_term=tuple(self.recommendations.short_term),
                long_term=tuple(self.recommendations.long_term),
            ),
            profile=BenchmarkProfile(self.profile.value),
            provenance=Provenance(self.provenance.value),
        )


# =============================================================================
# Diagnostics
# =============================================================================

class QualityReportSchema(BaseModel):
    acceptable: bool
    frame_count: int
    visible_ratio: float
    motion_magnitude: float
    mode: str
    issues: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: QualityReport) -> "QualityReportSchema":
        return cls(
            acceptable=report.acceptable,
            frame_count=report.frame_count,
            visible_ratio=report.visible_ratio,
            motion_magnitude=report.motion_magnitude,
            mode=report.mode.value,
            issues=list(report.issues),
        )


class CameraAngleSchema(BaseModel):
    kind: CameraViewEnum
    rotation_deg: float
    tilt_deg: float
    distance: CameraDistanceEnum
    confidence: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_domain(cls, camera: CameraAngle) -> "CameraAngleSchema":
        return cls(
            kind=CameraViewEnum(camera.kind.value),
            rotation_deg=camera.rotation_deg,
            tilt_deg=camera.tilt_deg,
            distance=CameraDistanceEnum(camera.distance.value),
            confidence=camera.confidence,
        )


class AuthenticityReportSchema(BaseModel):
    """
    Result of the golf swing authenticity check.
    """
    is_valid: bool = Field(..., description="score >= 60")
    score: float = Field(..., ge=0, le=100)
    results: Dict[str, bool] = Field(..., description="Sub-test -> passed")
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    details: Dict[str, float] = Field(default_factory=dict, description="Observed values")

    class Config:
        json_schema_extra = {
            "example": {
                "is_valid": False,
                "score": 35.0,
                "results": {
                    "motion": False,
                    "phases": True,
                    "arc": False,
                    "timing": False,
                    "landmarks": True,
                },
                "errors": ["motion: hand movement too small (x 0.000, y 0.000, need 0.15)"],
                "warnings": [],
                "details": {"score": 35.0},
            }
        }

    @classmethod
    def from_domain(cls, report: AuthenticityReport) -> "AuthenticityReportSchema":
        return cls(
            is_valid=report.is_valid,
            score=report.score,
            results=dict(report.results),
            errors=list(report.errors),
            warnings=list(report.warnings),
            details=dict(report.details),
        )


class DiagnosticsSchema(BaseModel):
    segmentation_path: str = Field(..., description="data_driven | fallback")
    quality_tier: str = Field(..., description="normal | degraded")
    rejected_categories: List[str] = Field(default_factory=list)
    violations: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, diagnostics: Diagnostics) -> "DiagnosticsSchema":
        return cls(
            segmentation_path=diagnostics.segmentation_path.value,
            quality_tier=diagnostics.quality_tier,
            rejected_categories=list(diagnostics.rejected_categories),
            violations=list(diagnostics.violations),
            warnings=list(diagnostics.warnings),
        )


# =============================================================================
# Responses
# =============================================================================

class SwingAnalysisResponse(BaseModel):
    """
    Complete swing analysis result.

    This is the main response from the analyze endpoint.
    """
    phases: List[SwingPhaseSchema] = Field(default_factory=list, description="Detected phases")
    metrics: SwingMetricsSchema
    grade: GolfGradeSchema
    quality: QualityReportSchema
    camera: CameraAngleSchema
    authenticity: AuthenticityReportSchema
    diagnostics: DiagnosticsSchema

    @classmethod
    def from_domain(cls, analysis: SwingAnalysis) -> "SwingAnalysisResponse":
        return cls(
            phases=[SwingPhaseSchema.from_domain(p) for p in analysis.phases],
            metrics=SwingMetricsSchema.from_domain(analysis.metrics),
            grade=GolfGradeSchema.from_domain(analysis.grade),
            quality=QualityReportSchema.from_domain(analysis.quality),
            camera=CameraAngleSchema.from_domain(analysis.camera),
            authenticity=AuthenticityReportSchema.from_domain(analysis.authenticity),
            diagnostics=DiagnosticsSchema.from_domain(analysis.diagnostics),
        )


class HealthResponse(BaseModel):
    """
    Health check response.
    """
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    quality_mode: str = Field(..., description="Default quality mode")
