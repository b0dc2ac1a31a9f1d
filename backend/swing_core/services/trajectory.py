"""
Trajectory Extractor

Builds per-point time series from pose frames, either for a single
landmark or for a point derived from several landmarks.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..domain.pose import PoseFrame, BodyPart
from ..domain.trajectory import Trajectory, TrajectoryPoint

logger = logging.getLogger(__name__)

Position = Tuple[float, float, float]
PointSelector = Callable[[PoseFrame, float], Optional[Position]]

# Club length expressed in shoulder widths
CLUB_LENGTH_RATIO = 1.5


# -----------------------------------------------------------------------------
# Derived point selectors
# -----------------------------------------------------------------------------

def hands_center(frame: PoseFrame, threshold: float) -> Optional[Position]:
    """Midpoint of both wrists."""
    return frame.midpoint(BodyPart.LEFT_WRIST, BodyPart.RIGHT_WRIST, threshold)


def club_head(frame: PoseFrame, threshold: float) -> Optional[Position]:
    """
    Approximate club-head position.

    The hands midpoint pushed along the left -> right shoulder direction
    by 1.5 shoulder widths. Purely geometric, no learned model.
    """
    hands = hands_center(frame, threshold)
    left = frame.get_visible_landmark(BodyPart.LEFT_SHOULDER, threshold)
    right = frame.get_visible_landmark(BodyPart.RIGHT_SHOULDER, threshold)
    if hands is None or left is None or right is None:
        return None
    return (
        hands[0] + CLUB_LENGTH_RATIO * (right.x - left.x),
        hands[1] + CLUB_LENGTH_RATIO * (right.y - left.y),
        hands[2] + CLUB_LENGTH_RATIO * (right.z - left.z),
    )


def landmark_selector(part: BodyPart) -> PointSelector:
    """Selector reading one landmark directly."""

    def select(frame: PoseFrame, threshold: float) -> Optional[Position]:
        landmark = frame.get_visible_landmark(part, threshold)
        if landmark is None:
            return None
        return (landmark.x, landmark.y, landmark.z)

    return select


class TrajectoryExtractor:
    """
    Extracts trajectories from frame sequences.

    Rules:
    - frames where the selected point is not visible are skipped
    - gaps of up to MAX_FILL_GAP frames are linearly interpolated at the
      missing frames' own timestamps; a missing frame whose timestamp
      does not fall strictly between its neighbours is left unfilled
    - longer gaps stay as breaks and lower the trajectory confidence
    - samples whose timestamp does not increase are dropped
    """

    MAX_FILL_GAP = 2

    @classmethod
    def extract(
        cls,
        frames: Sequence[PoseFrame],
        selector: Union[BodyPart, PointSelector],
        visibility_threshold: float = 0.5,
        name: Optional[str] = None,
    ) -> Trajectory:
        """
        Build a trajectory for one point.

        Args:
            frames: Ordered pose frames
            selector: A BodyPart, or a callable (frame, threshold) -> (x, y, z) | None
            visibility_threshold: Minimum landmark visibility
            name: Trajectory name (defaults to the body part / selector name)

        Returns:
            Trajectory over the clip, possibly empty
        """
        if isinstance(selector, BodyPart):
            label = name or selector.name.lower()
            select = landmark_selector(selector)
        else:
            label = name or getattr(selector, "__name__", "derived")
            select = selector

        samples: List[Tuple[int, PoseFrame, Position]] = []
        last_time: Optional[float] = None
        dropped = 0
        for position, frame in enumerate(frames):
            value = select(frame, visibility_threshold)
            if value is None:
                continue
            if last_time is not None and frame.timestamp_ms <= last_time:
                dropped += 1
                continue
            samples.append((position, frame, value))
            last_time = frame.timestamp_ms

        if dropped:
            logger.warning(
                f"Trajectory '{label}': dropped {dropped} samples with non-increasing timestamps"
            )

        points, breaks = cls._fill_gaps(samples, frames)
        return Trajectory(
            name=label,
            points=tuple(points),
            total_frames=len(frames),
            breaks=tuple(breaks),
        )

    @classmethod
    def _fill_gaps(
        cls,
        samples: List[Tuple[int, PoseFrame, Position]],
        frames: Sequence[PoseFrame],
    ) -> Tuple[List[TrajectoryPoint], List[Tuple[int, int]]]:
        points: List[TrajectoryPoint] = []
        breaks: List[Tuple[int, int]] = []
        previous = None
        for position, frame, value in samples:
            if previous is not None:
                prev_position, prev_frame, prev_value = previous
                gap = position - prev_position - 1
                if 0 < gap <= cls.MAX_FILL_GAP:
                    missing = [frames[p] for p in range(prev_position + 1, position)]
                    points.extend(
                        cls._interpolate(prev_frame, prev_value, frame, value, missing)
                    )
                elif gap > cls.MAX_FILL_GAP:
                    breaks.append((prev_position + 1, position - 1))
            points.append(
                TrajectoryPoint(
                    x=float(value[0]),
                    y=float(value[1]),
                    z=float(value[2]),
                    timestamp_ms=float(frame.timestamp_ms),
                    frame_index=frame.frame_index,
                )
            )
            previous = (position, frame, value)
        return points, breaks

    @staticmethod
    def _interpolate(
        start_frame: PoseFrame,
        start_value: Position,
        end_frame: PoseFrame,
        end_value: Position,
        missing_frames: List[PoseFrame],
    ) -> List[TrajectoryPoint]:
        """Time-weighted fill-ins between two valid samples."""
        filled = []
        t0 = start_frame.timestamp_ms
        t1 = end_frame.timestamp_ms
        a = np.asarray(start_value, dtype=float)
        b = np.asarray(end_value, dtype=float)
        last = t0
        for frame in missing_frames:
            timestamp = frame.timestamp_ms
            if not last < timestamp < t1:
                continue
            fraction = (timestamp - t0) / (t1 - t0)
            xyz = a + (b - a) * fraction
            last = timestamp
            filled.append(
                TrajectoryPoint(
                    x=float(xyz[0]),
                    y=float(xyz[1]),
                    z=float(xyz[2]),
                    timestamp_ms=float(timestamp),
                    frame_index=frame.frame_index,
                    interpolated=True,
                )
            )
        return filled
