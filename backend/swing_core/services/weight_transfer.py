"""
Weight Transfer Analyzer

Estimates how body weight is split between the feet in a single frame.

Seven independent geometric estimators each produce a left/right split
with a confidence. They are fused with a confidence-weighted average,
where each estimator's confidence is also scaled by how reliable it is
from the detected camera view.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..domain.analysis import (
    Balance,
    CameraAngle,
    CameraView,
    EstimatorReading,
    PhaseName,
    Point3D,
    Provenance,
    WeightDistribution,
)
from ..domain.pose import PoseFrame, BodyPart
from .angle_calculator import AngleCalculator

logger = logging.getLogger(__name__)

ANKLE_HEIGHT = "ankle_height"
HIP_OFFSET = "hip_offset"
KNEE_FLEX = "knee_flex"
SHOULDER_OFFSET = "shoulder_offset"
STANCE_RATIO = "stance_ratio"
CENTER_OF_MASS = "center_of_mass"
KNEE_PRESSURE = "knee_pressure"

ESTIMATORS = (
    ANKLE_HEIGHT,
    HIP_OFFSET,
    KNEE_FLEX,
    SHOULDER_OFFSET,
    STANCE_RATIO,
    CENTER_OF_MASS,
    KNEE_PRESSURE,
)

# Reliability of each estimator per camera view. Estimators missing from
# a row keep their own confidence.
CAMERA_WEIGHTS: Dict[CameraView, Dict[str, float]] = {
    CameraView.FACE_ON: {
        ANKLE_HEIGHT: 1.5,
        HIP_OFFSET: 1.3,
        KNEE_FLEX: 0.8,
        SHOULDER_OFFSET: 1.1,
        STANCE_RATIO: 1.2,
    },
    CameraView.SIDE_VIEW: {
        ANKLE_HEIGHT: 1.1,
        HIP_OFFSET: 0.9,
        KNEE_FLEX: 1.4,
        SHOULDER_OFFSET: 1.3,
        STANCE_RATIO: 0.7,
    },
    CameraView.DOWN_THE_LINE: {name: 1.1 for name in ESTIMATORS},
    CameraView.DIAGONAL: {name: 0.9 for name in ESTIMATORS},
    CameraView.UNKNOWN: {},
}

# Base confidence of each estimator before landmark visibility
BASE_CONFIDENCE = {
    ANKLE_HEIGHT: 0.95,
    HIP_OFFSET: 0.9,
    KNEE_FLEX: 0.8,
    SHOULDER_OFFSET: 0.85,
    STANCE_RATIO: 0.7,
    CENTER_OF_MASS: 0.8,
    KNEE_PRESSURE: 0.75,
}

# Five-segment body model for the center of mass
SEGMENT_WEIGHTS = (
    ((BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE), 0.3),
    ((BodyPart.LEFT_KNEE, BodyPart.RIGHT_KNEE), 0.2),
    ((BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP), 0.3),
    ((BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER), 0.15),
    ((BodyPart.NOSE, BodyPart.NOSE), 0.05),
)

KEY_PARTS = (
    BodyPart.LEFT_SHOULDER,
    BodyPart.RIGHT_SHOULDER,
    BodyPart.LEFT_HIP,
    BodyPart.RIGHT_HIP,
    BodyPart.LEFT_KNEE,
    BodyPart.RIGHT_KNEE,
    BodyPart.LEFT_ANKLE,
    BodyPart.RIGHT_ANKLE,
)

COG_PARTS = (BodyPart.NOSE,) + KEY_PARTS

MIN_HALF_STANCE = 0.01


def _clamp_pct(value: float) -> float:
    return float(min(100.0, max(0.0, value)))


class WeightTransferAnalyzer:
    """
    Per-frame weight distribution from body geometry.

    Horizontal estimators project a body point onto the stance: a point
    right above the left ankle means 100% left, halfway between the
    ankles means 50/50.

    Usage:
        readings = WeightTransferAnalyzer.estimate(frame)
        left, right = WeightTransferAnalyzer.fuse(readings, CameraView.FACE_ON)
    """

    # -------------------------------------------------------------------------
    # Individual estimators
    # -------------------------------------------------------------------------

    @staticmethod
    def _stance(frame: PoseFrame, threshold: float) -> Optional[Tuple[float, float]]:
        """Ankle-center x and signed half stance width, or None."""
        left = frame.get_visible_landmark(BodyPart.LEFT_ANKLE, threshold)
        right = frame.get_visible_landmark(BodyPart.RIGHT_ANKLE, threshold)
        if left is None or right is None:
            return None
        half = (left.x - right.x) / 2
        if abs(half) < MIN_HALF_STANCE:
            return None
        return (left.x + right.x) / 2, half

    @classmethod
    def _project(cls, frame: PoseFrame, x: float, threshold: float) -> Optional[float]:
        stance = cls._stance(frame, threshold)
        if stance is None:
            return None
        center, half = stance
        return _clamp_pct(50.0 + 50.0 * (x - center) / half)

    @staticmethod
    def _visibility(frame: PoseFrame, parts: Sequence[BodyPart]) -> float:
        values = [
            lm.visibility
            for lm in (frame.get_landmark(p) for p in parts)
            if lm is not None
        ]
        return min(values) if values else 0.0

    @staticmethod
    def ankle_height(frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        """The trail foot lifting (smaller y) shifts weight to the other foot."""
        left = frame.get_visible_landmark(BodyPart.LEFT_ANKLE, threshold)
        right = frame.get_visible_landmark(BodyPart.RIGHT_ANKLE, threshold)
        if left is None or right is None:
            return None
        return _clamp_pct(50.0 + (left.y - right.y) * 800.0)

    @classmethod
    def hip_offset(cls, frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        hips = frame.midpoint(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP, threshold)
        if hips is None:
            return None
        return cls._project(frame, hips[0], threshold)

    @staticmethod
    def knee_flex(frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        """The more flexed knee is the one carrying more weight."""
        left = AngleCalculator.calculate_knee_flex(frame, "left", threshold)
        right = AngleCalculator.calculate_knee_flex(frame, "right", threshold)
        if left is None or right is None:
            return None
        return _clamp_pct(50.0 + (left - right) * 2.5)

    @classmethod
    def shoulder_offset(cls, frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        shoulders = frame.midpoint(BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER, threshold)
        if shoulders is None:
            return None
        return cls._project(frame, shoulders[0], threshold)

    @staticmethod
    def stance_ratio(frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        """Hip center distance to each ankle; closer ankle carries more."""
        hips = frame.midpoint(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP, threshold)
        left = frame.get_visible_landmark(BodyPart.LEFT_ANKLE, threshold)
        right = frame.get_visible_landmark(BodyPart.RIGHT_ANKLE, threshold)
        if hips is None or left is None or right is None:
            return None
        to_left = abs(hips[0] - left.x)
        to_right = abs(hips[0] - right.x)
        if to_left + to_right < MIN_HALF_STANCE:
            return None
        return _clamp_pct(100.0 * to_right / (to_left + to_right))

    @classmethod
    def center_of_mass(cls, frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        total = 0.0
        weighted_x = 0.0
        for (first, second), weight in SEGMENT_WEIGHTS:
            point = frame.midpoint(first, second, threshold)
            if point is None:
                continue
            weighted_x += point[0] * weight
            total += weight
        if total == 0:
            return None
        return cls._project(frame, weighted_x / total, threshold)

    @staticmethod
    def knee_pressure(frame: PoseFrame, threshold: float = 0.5) -> Optional[float]:
        """Joint-angle pressure proxy: 50 + (flex - 90) * 0.5 per foot."""
        left = AngleCalculator.calculate_knee_flex(frame, "left", threshold)
        right = AngleCalculator.calculate_knee_flex(frame, "right", threshold)
        if left is None or right is None:
            return None
        left_pressure = max(0.0, 50.0 + (left - 90.0) * 0.5)
        right_pressure = max(0.0, 50.0 + (right - 90.0) * 0.5)
        if left_pressure + right_pressure == 0:
            return None
        return _clamp_pct(100.0 * left_pressure / (left_pressure + right_pressure))

    # -------------------------------------------------------------------------
    # Fusion
    # -------------------------------------------------------------------------

    @classmethod
    def estimate(cls, frame: PoseFrame, threshold: float = 0.5) -> List[EstimatorReading]:
        """Run every estimator whose landmarks are visible in the frame."""
        sources = {
            ANKLE_HEIGHT: (cls.ankle_height, (BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE)),
            HIP_OFFSET: (cls.hip_offset, (BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP)),
            KNEE_FLEX: (cls.knee_flex, (BodyPart.LEFT_KNEE, BodyPart.RIGHT_KNEE)),
            SHOULDER_OFFSET: (cls.shoulder_offset, (BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER)),
            STANCE_RATIO: (cls.stance_ratio, (BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE)),
            CENTER_OF_MASS: (cls.center_of_mass, KEY_PARTS),
            KNEE_PRESSURE: (cls.knee_pressure, (BodyPart.LEFT_KNEE, BodyPart.RIGHT_KNEE)),
        }
        readings = []
        for name in ESTIMATORS:
            estimator, parts = sources[name]
            left = estimator(frame, threshold)
            if left is None:
                continue
            readings.append(
                EstimatorReading(
                    name=name,
                    left_pct=left,
                    right_pct=100.0 - left,
                    confidence=BASE_CONFIDENCE[name] * cls._visibility(frame, parts),
                )
            )
        return readings

    @staticmethod
    def fuse(
        readings: Sequence[EstimatorReading],
        camera_kind: CameraView = CameraView.UNKNOWN,
    ) -> Optional[Tuple[float, float]]:
        """
        Confidence and camera weighted average of estimator readings.

        Returns:
            (left_pct, right_pct) summing to exactly 100, or None when no
            reading carries any weight
        """
        table = CAMERA_WEIGHTS.get(camera_kind, {})
        weights = np.array([
            max(0.0, r.confidence) * table.get(r.name, 1.0) for r in readings
        ])
        if weights.size == 0 or weights.sum() <= 0:
            return None
        left = float(np.dot(weights, [r.left_pct for r in readings]) / weights.sum())
        right = float(np.dot(weights, [r.right_pct for r in readings]) / weights.sum())
        if left + right <= 0:
            return None
        left = _clamp_pct(left / (left + right) * 100.0)
        return left, 100.0 - left

    # -------------------------------------------------------------------------
    # Distribution
    # -------------------------------------------------------------------------

    @classmethod
    def distribution(
        cls,
        frame: PoseFrame,
        camera: CameraAngle,
        phase: Optional[PhaseName] = None,
        threshold: float = 0.5,
    ) -> WeightDistribution:
        """
        Full weight distribution for one frame.

        With no usable estimator the split is reported as 50/50 with zero
        confidence and degraded provenance, never as a measurement.
        """
        readings = cls.estimate(frame, threshold)
        fused = cls.fuse(readings, camera.kind)
        if fused is None:
            logger.info(f"No weight estimator usable for frame {frame.frame_index}")
            left, right = 50.0, 50.0
            confidence = 0.0
            provenance = Provenance.DEGRADED
        else:
            left, right = fused
            visible = sum(
                1 for part in KEY_PARTS
                if frame.get_visible_landmark(part, threshold) is not None
            )
            confidence = 0.5 + 0.3 * visible / len(KEY_PARTS) + 0.2 * camera.confidence
            provenance = Provenance.MEASURED

        return WeightDistribution(
            left_pct=left,
            right_pct=right,
            center_of_gravity=cls.center_of_gravity(frame, threshold),
            balance=cls.balance(frame, left, right, threshold),
            phase=phase,
            confidence=float(min(1.0, max(0.0, confidence))),
            provenance=provenance,
            estimators=tuple(readings),
        )

    @staticmethod
    def center_of_gravity(frame: PoseFrame, threshold: float = 0.5) -> Point3D:
        """Mean position of the visible head, torso and leg landmarks."""
        points = [
            lm for lm in (frame.get_visible_landmark(p, threshold) for p in COG_PARTS)
            if lm is not None
        ]
        if not points:
            return Point3D(x=0.5, y=0.5, z=0.0)
        return Point3D(
            x=float(np.mean([p.x for p in points])),
            y=float(np.mean([p.y for p in points])),
            z=float(np.mean([p.z for p in points])),
        )

    @staticmethod
    def balance(frame: PoseFrame, left_pct: float, right_pct: float, threshold: float = 0.5) -> Balance:
        hips = frame.midpoint(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP, threshold)
        ankles = frame.midpoint(BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE, threshold)
        forward = 0.0
        if hips is not None and ankles is not None:
            forward = float(min(100.0, max(-100.0, (hips[0] - ankles[0]) * 100.0)))
        return Balance(
            forward_offset=forward,
            lateral_offset=right_pct - left_pct,
            stability=max(0.0, 100.0 - abs(left_pct - right_pct)),
        )
