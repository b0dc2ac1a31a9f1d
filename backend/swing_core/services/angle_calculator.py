"""
Angle Calculator Service

Geometric helpers for body angles used in golf swing analysis.
All angles are in degrees.

This is pure mathematics - no external dependencies except numpy.
"""

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from ..domain.pose import PoseLandmark, PoseFrame, BodyPart


class AngleCalculator:
    """
    Calculates biomechanical angles from pose landmarks.

    Golf-specific angles include:
    - Shoulder and hip line orientation (for turn and X-factor)
    - Knee flex
    - Line angle to horizontal (swing plane)

    All methods are static - no state needed.
    """

    # -------------------------------------------------------------------------
    # Core Angle Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_angle(
        p1: PoseLandmark,
        p2: PoseLandmark,  # Vertex point
        p3: PoseLandmark
    ) -> Optional[float]:
        """
        Calculate angle at p2 formed by p1-p2-p3 in the image plane.

        Returns:
            Angle in degrees (0-180), or None for degenerate segments

        Example:
            For knee angle: hip -> knee -> ankle
            angle = calculate_angle(hip, knee, ankle)
        """
        v1 = np.array([p1.x - p2.x, p1.y - p2.y])
        v2 = np.array([p3.x - p2.x, p3.y - p2.y])
        return AngleCalculator.vector_angle(v1, v2)

    @staticmethod
    def vector_angle(v1: Sequence[float], v2: Sequence[float]) -> Optional[float]:
        """
        Unsigned angle between two vectors of any dimension.

        The result is the minimal angular difference, always within 0-180.
        """
        a = np.asarray(v1, dtype=float)
        b = np.asarray(v2, dtype=float)
        norm = np.linalg.norm(a) * np.linalg.norm(b)
        if norm == 0 or not np.isfinite(norm):
            return None

        # Clamp to valid range (handles floating point errors)
        cos_angle = np.clip(np.dot(a, b) / norm, -1.0, 1.0)
        return float(np.degrees(np.arccos(cos_angle)))

    @staticmethod
    def line_angle_to_horizontal(
        start: Tuple[float, float],
        end: Tuple[float, float],
    ) -> Optional[float]:
        """
        Angle between a 2D line and the horizontal axis (0-90).

        Direction is ignored: a line and its reverse give the same angle.
        """
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        if dx == 0 and dy == 0:
            return None
        return math.degrees(math.atan2(abs(dy), abs(dx)))

    # -------------------------------------------------------------------------
    # Golf-Specific Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def line_vector(
        frame: PoseFrame,
        start: BodyPart,
        end: BodyPart,
        threshold: float = 0.5,
    ) -> Optional[np.ndarray]:
        """
        3D vector from one landmark to another (e.g. left -> right shoulder).

        Returns None when either landmark is missing or not visible.
        """
        a = frame.get_visible_landmark(start, threshold)
        b = frame.get_visible_landmark(end, threshold)
        if a is None or b is None:
            return None
        return np.array([b.x - a.x, b.y - a.y, b.z - a.z])

    @staticmethod
    def calculate_knee_angle(
        frame: PoseFrame,
        side: str = "left",
        threshold: float = 0.5,
    ) -> Optional[float]:
        """
        Calculate the hip-knee-ankle angle.

        Args:
            frame: Pose frame with landmarks
            side: "left" or "right"

        Returns:
            Knee angle in degrees (180 = straight leg, 90 = deep squat)
        """
        if side == "left":
            parts = (BodyPart.LEFT_HIP, BodyPart.LEFT_KNEE, BodyPart.LEFT_ANKLE)
        else:
            parts = (BodyPart.RIGHT_HIP, BodyPart.RIGHT_KNEE, BodyPart.RIGHT_ANKLE)

        hip, knee, ankle = (frame.get_visible_landmark(p, threshold) for p in parts)
        if hip is None or knee is None or ankle is None:
            return None

        return AngleCalculator.calculate_angle(hip, knee, ankle)

    @classmethod
    def calculate_knee_flex(
        cls,
        frame: PoseFrame,
        side: str = "left",
        threshold: float = 0.5,
    ) -> Optional[float]:
        """Knee flexion in degrees (0 = straight leg)."""
        angle = cls.calculate_knee_angle(frame, side, threshold)
        if angle is None:
            return None
        return 180.0 - angle

