"""
Camera Angle Estimator

Classifies the viewpoint from body geometry. The result only weights
downstream estimators; it never rejects a clip.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from ..domain.analysis import CameraAngle, CameraDistance, CameraView
from ..domain.pose import PoseFrame, BodyPart

logger = logging.getLogger(__name__)

TORSO_PARTS = (
    BodyPart.LEFT_SHOULDER,
    BodyPart.RIGHT_SHOULDER,
    BodyPart.LEFT_HIP,
    BodyPart.RIGHT_HIP,
)

# Confidence in the classification itself, before visibility scaling
BASE_CONFIDENCE = {
    CameraView.FACE_ON: 0.9,
    CameraView.SIDE_VIEW: 0.9,
    CameraView.DOWN_THE_LINE: 0.8,
    CameraView.DIAGONAL: 0.6,
    CameraView.UNKNOWN: 0.0,
}


class CameraAngleEstimator:
    """
    Estimates camera viewpoint from the torso axis.

    The angle of the shoulder-center -> hip-center vector relative to
    horizontal decides the view:
    - < 15 degrees: face-on
    - 15-75 degrees: down-the-line
    - 75-105 degrees: side view
    - anything else: diagonal
    """

    CLOSE_SHOULDER_WIDTH = 0.3
    FAR_SHOULDER_WIDTH = 0.15

    @staticmethod
    def classify(angle_deg: float) -> CameraView:
        """Map an absolute torso angle (0-180) to a view."""
        angle = abs(angle_deg)
        if angle < 15:
            return CameraView.FACE_ON
        if angle < 75:
            return CameraView.DOWN_THE_LINE
        if angle <= 105:
            return CameraView.SIDE_VIEW
        return CameraView.DIAGONAL

    @staticmethod
    def _torso_angle(frame: PoseFrame, threshold: float) -> Optional[float]:
        shoulder = frame.midpoint(BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER, threshold)
        hip = frame.midpoint(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP, threshold)
        if shoulder is None or hip is None:
            return None
        dx = hip[0] - shoulder[0]
        dy = hip[1] - shoulder[1]
        if dx == 0 and dy == 0:
            return None
        return math.degrees(math.atan2(dy, dx))

    @staticmethod
    def _tilt(frame: PoseFrame) -> Optional[float]:
        ls, rs = frame.shoulders
        lh, rh = frame.hips
        if None in (ls, rs, lh, rh):
            return None
        hip_width = abs(lh.x - rh.x)
        rise = min(lh.y, rh.y) - min(ls.y, rs.y)
        return math.degrees(math.atan2(rise, hip_width))

    @classmethod
    def estimate(cls, frames: Sequence[PoseFrame], threshold: float = 0.5) -> CameraAngle:
        """
        Estimate the camera angle for the whole clip.

        Per-frame torso angles are reduced with a median so a few bad
        frames cannot flip the classification.
        """
        angles = []
        tilts = []
        widths = []
        visibilities = []
        for frame in frames:
            angle = cls._torso_angle(frame, threshold)
            if angle is None:
                continue
            angles.append(angle)
            visibilities.append(frame.mean_visibility(TORSO_PARTS))
            tilt = cls._tilt(frame)
            if tilt is not None:
                tilts.append(tilt)
            ls, rs = frame.shoulders
            widths.append(abs(ls.x - rs.x))

        if not angles:
            logger.info("Camera angle unknown: no frame with visible shoulders and hips")
            return CameraAngle(
                kind=CameraView.UNKNOWN,
                rotation_deg=0.0,
                tilt_deg=0.0,
                distance=CameraDistance.MEDIUM,
                confidence=0.0,
            )

        rotation = float(np.median(angles))
        kind = cls.classify(float(np.median(np.abs(angles))))

        width = float(np.median(widths))
        if width > cls.CLOSE_SHOULDER_WIDTH:
            distance = CameraDistance.CLOSE
        elif width < cls.FAR_SHOULDER_WIDTH:
            distance = CameraDistance.FAR
        else:
            distance = CameraDistance.MEDIUM

        visibility = float(np.mean(visibilities))
        confidence = float(np.clip(BASE_CONFIDENCE[kind] * visibility, 0.0, 1.0))

        logger.debug(f"Camera angle: {kind.value} ({rotation:.1f} deg), confidence {confidence:.2f}")
        return CameraAngle(
            kind=kind,
            rotation_deg=rotation,
            tilt_deg=float(np.median(tilts)) if tilts else 0.0,
            distance=distance,
            confidence=confidence,
        )
