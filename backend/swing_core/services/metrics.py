"""
Metric Calculators

Tempo, rotation, weight transfer, swing plane, power and consistency.

Each calculator is a pure function of a MetricContext, so they can be
run in any order or concurrently once phases are known.
"""

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Sequence

import numpy as np

from ..domain.analysis import (
    CameraAngle,
    ConsistencyMetrics,
    PhaseName,
    PowerMetrics,
    OverallBalance,
    Provenance,
    RotationMetrics,
    Segmentation,
    SwingPhase,
    SwingPlaneMetrics,
    TempoMetrics,
    WeightDistribution,
    WeightTransferMetrics,
)
from ..domain.config import AnalysisConfig, BenchmarkProfile, ClubType
from ..domain.pose import PoseFrame, BodyPart
from ..domain.trajectory import Trajectory
from .angle_calculator import AngleCalculator
from .phase_segmenter import PhaseSegmenter
from .plausibility import BOUNDS
from .weight_transfer import WeightTransferAnalyzer

logger = logging.getLogger(__name__)

# Scoring band for the tempo ratio. The floor is the plausibility floor, so
# it only clamps in degraded runs where that bound is widened.
TEMPO_RATIO_BAND = (BOUNDS["tempo"]["ratio"][0], 6.0)
IDEAL_PLANE_ANGLE = 60.0

# Normalized image units per second -> mph
SPEED_TO_MPH = 22.0

# Club-head speed benchmarks in mph
POWER_BENCHMARKS: Dict[ClubType, Dict[BenchmarkProfile, float]] = {
    ClubType.DRIVER: {
        BenchmarkProfile.PROFESSIONAL: 113.0,
        BenchmarkProfile.AMATEUR: 93.0,
        BenchmarkProfile.BEGINNER: 75.0,
    },
    ClubType.IRON: {
        BenchmarkProfile.PROFESSIONAL: 90.0,
        BenchmarkProfile.AMATEUR: 75.0,
        BenchmarkProfile.BEGINNER: 60.0,
    },
    ClubType.WEDGE: {
        BenchmarkProfile.PROFESSIONAL: 80.0,
        BenchmarkProfile.AMATEUR: 65.0,
        BenchmarkProfile.BEGINNER: 52.0,
    },
}

CONSISTENCY_SCALE = 0.002
DEGRADED_CONFIDENCE_FACTOR = 0.5

ROTATION_PARTS = (
    BodyPart.LEFT_SHOULDER,
    BodyPart.RIGHT_SHOULDER,
    BodyPart.LEFT_HIP,
    BodyPart.RIGHT_HIP,
)


@dataclass(frozen=True)
class MetricContext:
    """
    Everything a metric calculator may look at.

    Attributes:
        frames: The analyzed clip
        segmentation: Phase segmenter output
        trajectories: Named trajectories ("hands", "club_head", "nose", ...)
        camera: Estimated camera angle
        config: Analysis configuration
        degraded: Input quality or segmentation was not trustworthy
    """
    frames: Sequence[PoseFrame]
    segmentation: Segmentation
    trajectories: Mapping[str, Trajectory]
    camera: CameraAngle
    config: AnalysisConfig
    degraded: bool = False

    @property
    def phases(self) -> Sequence[SwingPhase]:
        return self.segmentation.phases

    @property
    def threshold(self) -> float:
        return self.config.visibility_threshold

    @property
    def provenance(self) -> Provenance:
        return Provenance.DEGRADED if self.degraded else Provenance.MEASURED

    def phase(self, name: PhaseName) -> Optional[SwingPhase]:
        return self.segmentation.get(name)

    def trajectory(self, name: str) -> Optional[Trajectory]:
        trajectory = self.trajectories.get(name)
        if trajectory is None or trajectory.is_empty:
            return None
        return trajectory

    def seconds(self, position: int) -> float:
        return self.frames[position].timestamp_ms / 1000.0

    def scale_confidence(self, confidence: float) -> float:
        if self.degraded:
            confidence *= DEGRADED_CONFIDENCE_FACTOR
        return float(min(1.0, max(0.0, confidence)))

    def label(self, distribution: WeightDistribution) -> WeightDistribution:
        """Carry a degraded run into a per-frame distribution."""
        if not self.degraded:
            return distribution
        return dataclasses.replace(
            distribution,
            confidence=self.scale_confidence(distribution.confidence),
            provenance=Provenance.DEGRADED,
        )


# -----------------------------------------------------------------------------
# Key frames
# -----------------------------------------------------------------------------

def _midpoint(phase: SwingPhase) -> int:
    return (phase.start_frame + phase.end_frame) // 2


def key_top_frame(ctx: MetricContext) -> Optional[int]:
    """Middle of Top, or the Backswing/Downswing boundary without one."""
    top = ctx.phase(PhaseName.TOP)
    if top is not None:
        return _midpoint(top)
    downswing = ctx.phase(PhaseName.DOWNSWING)
    if downswing is not None:
        return downswing.start_frame
    backswing = ctx.phase(PhaseName.BACKSWING)
    if backswing is not None:
        return backswing.end_frame
    return None


def key_impact_frame(ctx: MetricContext) -> Optional[int]:
    """Middle of Impact, or the end of Downswing without one."""
    impact = ctx.phase(PhaseName.IMPACT)
    if impact is not None:
        return _midpoint(impact)
    downswing = ctx.phase(PhaseName.DOWNSWING)
    if downswing is not None:
        return downswing.end_frame
    return None


def key_address_frame(ctx: MetricContext) -> int:
    address = ctx.phase(PhaseName.ADDRESS)
    if address is not None:
        return _midpoint(address)
    return 0


def _swing_range(ctx: MetricContext) -> range:
    """Backswing start through Impact end (whole clip when unknown)."""
    backswing = ctx.phase(PhaseName.BACKSWING)
    impact = ctx.phase(PhaseName.IMPACT)
    start = backswing.start_frame if backswing is not None else 0
    end = impact.end_frame if impact is not None else len(ctx.frames) - 1
    return range(start, end + 1)


# -----------------------------------------------------------------------------
# Calculators
# -----------------------------------------------------------------------------

def calculate_tempo(ctx: MetricContext) -> TempoMetrics:
    """
    Backswing and downswing durations and their ratio.

    The ratio is reported raw; clamped_ratio is the value used for
    scoring, limited to TEMPO_RATIO_BAND. A measured ratio below 1.0
    never reaches scoring in a normal run because plausibility rejects
    it, so the lower clamp only fires in degraded runs.

    total_time spans the whole clip, first to last frame.
    """
    total_time = ctx.seconds(len(ctx.frames) - 1) - ctx.seconds(0) if ctx.frames else None
    backswing = ctx.phase(PhaseName.BACKSWING)
    top = key_top_frame(ctx)
    impact = key_impact_frame(ctx)
    if backswing is None or top is None or impact is None:
        logger.info("Tempo unavailable: backswing, top or impact not detected")
        return TempoMetrics(
            backswing_time=None,
            downswing_time=None,
            ratio=None,
            clamped_ratio=None,
            clamped=False,
            confidence=0.0,
            provenance=Provenance.DEGRADED,
            total_time=total_time,
        )

    backswing_time = ctx.seconds(top) - ctx.seconds(backswing.start_frame)
    downswing_time = ctx.seconds(impact) - ctx.seconds(top)

    ratio = backswing_time / downswing_time if downswing_time > 0 else None
    clamped_ratio = None
    clamped = False
    if ratio is not None:
        low, high = TEMPO_RATIO_BAND
        clamped_ratio = min(high, max(low, ratio))
        clamped = clamped_ratio != ratio
        if clamped:
            logger.warning(f"Tempo ratio {ratio:.2f} clamped to {clamped_ratio:.2f}")

    involved = [
        p.confidence for p in ctx.phases
        if p.name in (PhaseName.BACKSWING, PhaseName.TOP, PhaseName.DOWNSWING, PhaseName.IMPACT)
    ]
    return TempoMetrics(
        backswing_time=backswing_time,
        downswing_time=downswing_time,
        ratio=ratio,
        clamped_ratio=clamped_ratio,
        clamped=clamped,
        confidence=ctx.scale_confidence(float(np.mean(involved)) if involved else 0.0),
        provenance=ctx.provenance,
        total_time=total_time,
    )


def calculate_rotation(ctx: MetricContext) -> RotationMetrics:
    """
    Shoulder and hip turn between the address and top key frames.

    Turns are 3D angles between the left -> right line vectors, so a
    line that rotates toward or away from the camera still counts.
    """
    top = key_top_frame(ctx)
    if top is None or not ctx.frames:
        return RotationMetrics(None, None, None, 0.0, Provenance.DEGRADED)

    address_frame = ctx.frames[key_address_frame(ctx)]
    top_frame = ctx.frames[top]

    def turn(start: BodyPart, end: BodyPart) -> Optional[float]:
        before = AngleCalculator.line_vector(address_frame, start, end, ctx.threshold)
        after = AngleCalculator.line_vector(top_frame, start, end, ctx.threshold)
        if before is None or after is None:
            return None
        return AngleCalculator.vector_angle(before, after)

    shoulder_turn = turn(BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER)
    hip_turn = turn(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP)
    x_factor = None
    if shoulder_turn is not None and hip_turn is not None:
        x_factor = abs(shoulder_turn - hip_turn)

    visibility = (
        address_frame.mean_visibility(ROTATION_PARTS) + top_frame.mean_visibility(ROTATION_PARTS)
    ) / 2
    available = sum(v is not None for v in (shoulder_turn, hip_turn))
    return RotationMetrics(
        shoulder_turn_deg=shoulder_turn,
        hip_turn_deg=hip_turn,
        x_factor_deg=x_factor,
        confidence=ctx.scale_confidence(visibility * available / 2),
        provenance=ctx.provenance if available else Provenance.DEGRADED,
    )


def calculate_weight_transfer(ctx: MetricContext) -> WeightTransferMetrics:
    """
    Weight distribution for every frame, read out at address, top, impact
    and finish, with a balance summary over the whole clip.

    In a degraded run each distribution is itself marked degraded with
    reduced confidence, not only the category.
    """
    series = []
    for position, frame in enumerate(ctx.frames):
        phase = PhaseSegmenter.phase_at(ctx.phases, position)
        distribution = WeightTransferAnalyzer.distribution(
            frame,
            ctx.camera,
            phase=phase.name if phase is not None else None,
            threshold=ctx.threshold,
        )
        series.append(ctx.label(distribution))
    n = len(series)

    def at(position: Optional[int]) -> Optional[WeightDistribution]:
        if position is None or not 0 <= position < n:
            return None
        return series[position]

    address = at(key_address_frame(ctx))
    top = at(key_top_frame(ctx))
    impact = at(key_impact_frame(ctx))
    finish = at(n - 1)

    present = [d for d in (address, top, impact, finish) if d is not None]
    confidence = float(np.mean([d.confidence for d in present])) if present else 0.0
    measured = bool(present) and all(d.provenance is Provenance.MEASURED for d in present)
    return WeightTransferMetrics(
        address=address,
        top=top,
        impact=impact,
        finish=finish,
        confidence=float(min(1.0, max(0.0, confidence))),
        provenance=ctx.provenance if measured else Provenance.DEGRADED,
        frames=tuple(series),
        overall=overall_balance(series),
    )


def overall_balance(series: Sequence[WeightDistribution]) -> Optional[OverallBalance]:
    """Average stability and the largest shifts across a distribution series."""
    if not series:
        return None
    return OverallBalance(
        average_stability=float(np.mean([d.balance.stability for d in series])),
        max_lateral_shift=max(abs(d.balance.lateral_offset) for d in series),
        max_forward_shift=max(abs(d.balance.forward_offset) for d in series),
    )


def calculate_swing_plane(ctx: MetricContext) -> SwingPlaneMetrics:
    """
    Mean hands -> club-head line angle over the swing, plus smoothness.

    Smoothness compares the curvature of the vertical hand path with its
    overall movement: 1.0 for a clean arc, lower for a jerky path.
    """
    hands = ctx.trajectory("hands")
    club = ctx.trajectory("club_head")
    positions = _swing_range(ctx)
    empty = SwingPlaneMetrics(
        angle_deg=None,
        deviation_deg=None,
        ideal_angle_deg=IDEAL_PLANE_ANGLE,
        smoothness=None,
        confidence=0.0,
        provenance=Provenance.DEGRADED,
    )
    if hands is None or club is None or not positions:
        return empty

    angles = []
    heights = []
    for position in positions:
        frame_index = ctx.frames[position].frame_index
        hand = hands.point_at(frame_index)
        head = club.point_at(frame_index)
        if hand is not None:
            heights.append(hand.y)
        if hand is None or head is None:
            continue
        angle = AngleCalculator.line_angle_to_horizontal((hand.x, hand.y), (head.x, head.y))
        if angle is not None:
            angles.append(angle)

    if not angles:
        return empty

    angle = float(np.mean(angles))
    smoothness = None
    if len(heights) >= 3:
        y = np.asarray(heights)
        movement = float(np.mean(np.abs(np.diff(y))))
        curvature = float(np.mean(np.abs(np.diff(y, n=2))))
        smoothness = float(np.clip(1.0 - curvature / (movement + 1e-9), 0.0, 1.0))

    coverage = len(angles) / len(positions)
    return SwingPlaneMetrics(
        angle_deg=angle,
        deviation_deg=abs(angle - IDEAL_PLANE_ANGLE),
        ideal_angle_deg=IDEAL_PLANE_ANGLE,
        smoothness=smoothness,
        confidence=ctx.scale_confidence(coverage * min(hands.confidence, club.confidence)),
        provenance=ctx.provenance,
    )


def calculate_power(ctx: MetricContext) -> PowerMetrics:
    """Peak club-head speed during the downswing, in mph."""
    club_type = ctx.config.club_type
    benchmark = POWER_BENCHMARKS[club_type][ctx.config.benchmark_profile]
    club = ctx.trajectory("club_head")
    if club is None or len(club) < 2:
        return PowerMetrics(None, None, club_type, benchmark, 0.0, Provenance.DEGRADED)

    speeds = club.velocities()
    position_of = {frame.frame_index: i for i, frame in enumerate(ctx.frames)}
    positions = [position_of.get(p.frame_index) for p in club.points]

    downswing = ctx.phase(PhaseName.DOWNSWING)
    impact = ctx.phase(PhaseName.IMPACT)
    window = None
    if downswing is not None:
        end = impact.end_frame if impact is not None else downswing.end_frame
        window = range(downswing.start_frame, end + 1)

    candidates = [
        k for k, pos in enumerate(positions)
        if pos is not None and (window is None or pos in window)
    ]
    if not candidates:
        candidates = list(range(len(speeds)))

    peak_k = max(candidates, key=lambda k: speeds[k])
    speed_mph = float(speeds[peak_k]) * SPEED_TO_MPH
    return PowerMetrics(
        speed_estimate=speed_mph,
        peak_frame=positions[peak_k],
        club_type=club_type,
        benchmark_mph=benchmark,
        confidence=ctx.scale_confidence(club.confidence),
        provenance=ctx.provenance,
    )


def calculate_consistency(ctx: MetricContext) -> ConsistencyMetrics:
    """Head stillness: positional variance of the nose around its mean."""
    nose = ctx.trajectory("nose")
    if nose is None or len(nose) < 2:
        return ConsistencyMetrics(None, None, 0.0, Provenance.DEGRADED)

    xy = nose.as_array()[:, :2]
    variance = float(np.mean(np.sum((xy - xy.mean(axis=0)) ** 2, axis=1)))
    score = math.exp(-variance / CONSISTENCY_SCALE)
    return ConsistencyMetrics(
        variance=variance,
        variance_score=score,
        confidence=ctx.scale_confidence(nose.confidence),
        provenance=ctx.provenance,
    )


CALCULATORS: Dict[str, Callable[[MetricContext], object]] = {
    "tempo": calculate_tempo,
    "rotation": calculate_rotation,
    "weight_transfer": calculate_weight_transfer,
    "swing_plane": calculate_swing_plane,
    "power": calculate_power,
    "consistency": calculate_consistency,
}
