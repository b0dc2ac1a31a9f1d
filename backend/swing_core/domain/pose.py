"""
Pose Domain Models

Data structures for representing human body pose landmarks
produced by an external pose estimator (MediaPipe topology).

MediaPipe Pose returns 33 landmarks:
https://developers.google.com/mediapipe/solutions/vision/pose_landmarker
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

NUM_LANDMARKS = 33


class BodyPart(IntEnum):
    """
    MediaPipe Pose landmark indices.

    The index -> body part mapping is fixed by the pose model;
    this core depends on it but never changes it.
    """
    # Face
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10

    # Upper body
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16

    # Hands (for club tracking)
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22

    # Lower body
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28

    # Feet
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


@dataclass(frozen=True)
class PoseLandmark:
    """
    A single body landmark with 3D coordinates and visibility.

    Attributes:
        x: Horizontal position (0.0 = left edge, 1.0 = right edge)
        y: Vertical position (0.0 = top edge, 1.0 = bottom edge)
        z: Depth (smaller = closer to camera)
        visibility: Confidence score (0.0 to 1.0)

    Note:
        Coordinates are normalized to image dimensions, so a smaller
        y means a higher point on the body.
    """
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0

    def is_visible(self, threshold: float = 0.5) -> bool:
        """Check if landmark is visible above confidence threshold."""
        return self.visibility >= threshold


@dataclass(frozen=True)
class PoseFrame:
    """
    A complete pose for a single video frame.

    Attributes:
        landmarks: Tuple of 33 body landmarks
        timestamp_ms: Video timestamp in milliseconds
        frame_index: Frame number in the source video
    """
    landmarks: Tuple[PoseLandmark, ...]
    timestamp_ms: float
    frame_index: int

    def get_landmark(self, body_part: BodyPart) -> Optional[PoseLandmark]:
        """Get a specific landmark by body part."""
        index = int(body_part)
        if 0 <= index < len(self.landmarks):
            return self.landmarks[index]
        return None

    def get_visible_landmark(
        self,
        body_part: BodyPart,
        threshold: float = 0.5,
    ) -> Optional[PoseLandmark]:
        """Get a landmark only if it clears the visibility threshold."""
        landmark = self.get_landmark(body_part)
        if landmark is None or not landmark.is_visible(threshold):
            return None
        return landmark

    def visible_count(self, threshold: float = 0.5) -> int:
        """Number of landmarks above visibility threshold."""
        return sum(1 for lm in self.landmarks if lm.is_visible(threshold))

    def midpoint(
        self,
        first: BodyPart,
        second: BodyPart,
        threshold: float = 0.0,
    ) -> Optional[Tuple[float, float, float]]:
        """Midpoint of two landmarks, or None if either is missing or hidden."""
        a = self.get_visible_landmark(first, threshold)
        b = self.get_visible_landmark(second, threshold)
        if a is None or b is None:
            return None
        return ((a.x + b.x) / 2, (a.y + b.y) / 2, (a.z + b.z) / 2)

    def mean_visibility(self, parts: Tuple[BodyPart, ...]) -> float:
        """Average visibility of a group of landmarks (0 when none exist)."""
        values = [
            lm.visibility
            for lm in (self.get_landmark(p) for p in parts)
            if lm is not None
        ]
        return sum(values) / len(values) if values else 0.0

    # -------------------------------------------------------------------------
    # Convenience methods for common landmark groups
    # -------------------------------------------------------------------------

    @property
    def shoulders(self) -> tuple[Optional[PoseLandmark], ...]:
        """Get shoulder landmarks (left, right)."""
        return (
            self.get_landmark(BodyPart.LEFT_SHOULDER),
            self.get_landmark(BodyPart.RIGHT_SHOULDER),
        )

    @property
    def hips(self) -> tuple[Optional[PoseLandmark], ...]:
        """Get hip landmarks (left, right)."""
        return (
            self.get_landmark(BodyPart.LEFT_HIP),
            self.get_landmark(BodyPart.RIGHT_HIP),
        )
