"""
Phase Segmenter

Splits a clip into the canonical swing phases:
Address -> Backswing -> Top -> Downswing -> Impact -> FollowThrough

Two paths:
- data-driven: Top from the highest hand position, Impact from the
  hand-speed peak, Address from motion onset
- fallback: fixed proportions of the clip when the hand trajectory is
  too short or too patchy to trust
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.ndimage import uniform_filter1d

from ..domain.analysis import (
    PHASE_ORDER,
    PhaseName,
    Segmentation,
    SegmentationPath,
    SwingPhase,
)
from ..domain.errors import InsufficientData
from ..domain.pose import PoseFrame, BodyPart
from ..domain.trajectory import Trajectory
from .trajectory import TrajectoryExtractor, hands_center

logger = logging.getLogger(__name__)

KEY_PARTS = (
    BodyPart.LEFT_WRIST,
    BodyPart.RIGHT_WRIST,
    BodyPart.LEFT_SHOULDER,
    BodyPart.RIGHT_SHOULDER,
    BodyPart.LEFT_HIP,
    BodyPart.RIGHT_HIP,
)

# Start of each phase as a fraction of the clip
FALLBACK_FRACTIONS = {
    PhaseName.ADDRESS: 0.0,
    PhaseName.BACKSWING: 0.1,
    PhaseName.TOP: 0.4,
    PhaseName.DOWNSWING: 0.5,
    PhaseName.IMPACT: 0.8,
    PhaseName.FOLLOW_THROUGH: 0.9,
}


class PhaseSegmenter:
    """
    Detects swing phases from the hand trajectory.

    Phase frames are positions in the analyzed clip (0..n-1). Output
    phases are ordered, contiguous and cover the whole clip; phases
    that collapse to nothing are dropped rather than faked.

    Usage:
        segmentation = PhaseSegmenter.segment(frames)
        phase = PhaseSegmenter.phase_at(segmentation.phases, 42)
    """

    MIN_TRAJECTORY_POINTS = 10
    MIN_COVERAGE = 0.6
    SMOOTHING_WINDOW = 5
    IMPACT_WINDOW = (0.5, 0.8)
    MOTION_ONSET_FRACTION = 0.15

    DATA_DRIVEN_CONFIDENCE = 0.9
    FALLBACK_CONFIDENCE = 0.3

    # -------------------------------------------------------------------------
    # Segmentation
    # -------------------------------------------------------------------------

    @classmethod
    def segment(
        cls,
        frames: Sequence[PoseFrame],
        hand_trajectory: Optional[Trajectory] = None,
        visibility_threshold: float = 0.5,
    ) -> Segmentation:
        """
        Segment a clip into swing phases.

        Args:
            frames: Ordered pose frames of one swing
            hand_trajectory: Hands trajectory; extracted from frames if omitted
            visibility_threshold: Landmark visibility for extraction

        Returns:
            Segmentation with phases, the path taken and cue agreement

        Raises:
            InsufficientData: no frames at all
        """
        if not frames:
            raise InsufficientData("Cannot segment an empty clip")

        if hand_trajectory is None:
            hand_trajectory = TrajectoryExtractor.extract(
                frames, hands_center, visibility_threshold, name="hands"
            )

        if (
            len(hand_trajectory) >= cls.MIN_TRAJECTORY_POINTS
            and hand_trajectory.coverage >= cls.MIN_COVERAGE
        ):
            segmentation = cls._segment_data_driven(frames, hand_trajectory)
            if segmentation is not None:
                return segmentation
        else:
            logger.info(
                f"Hand trajectory too sparse for detection "
                f"({len(hand_trajectory)} points, coverage {hand_trajectory.coverage:.0%})"
            )

        logger.info(f"Using proportional fallback segmentation for {len(frames)} frames")
        return cls._segment_fallback(frames)

    @classmethod
    def _segment_data_driven(
        cls,
        frames: Sequence[PoseFrame],
        trajectory: Trajectory,
    ) -> Optional[Segmentation]:
        n = len(frames)
        position_of = {frame.frame_index: i for i, frame in enumerate(frames)}
        samples = [
            (position_of[p.frame_index], p)
            for p in trajectory.points
            if p.frame_index in position_of
        ]
        if len(samples) < cls.MIN_TRAJECTORY_POINTS:
            return None

        positions = np.array([pos for pos, _ in samples])
        xy = np.array([[p.x, p.y] for _, p in samples], dtype=float)
        times = np.array([p.timestamp_ms for _, p in samples], dtype=float) / 1000.0
        if np.any(np.diff(times) <= 0):
            return None

        window = min(cls.SMOOTHING_WINDOW, len(samples))
        x_smooth = uniform_filter1d(xy[:, 0], size=window, mode="nearest")
        y_smooth = uniform_filter1d(xy[:, 1], size=window, mode="nearest")

        # Top: highest hand position (smallest y)
        top_k = int(np.argmin(y_smooth))
        if top_k == 0 or top_k == len(samples) - 1:
            logger.info("Highest hand position is at a clip edge, no backswing detected")
            return None
        top = int(positions[top_k])

        vx = np.gradient(x_smooth, times)
        vy = np.gradient(y_smooth, times)
        speed = np.hypot(vx, vy)

        # Impact: fastest hands inside the expected window after Top
        low = max(top + 1, int(math.floor(cls.IMPACT_WINDOW[0] * n)))
        high = int(math.ceil(cls.IMPACT_WINDOW[1] * n))
        candidates = np.where((positions >= low) & (positions <= high))[0]
        if candidates.size == 0:
            candidates = np.where((positions > top) & (positions <= n - 2))[0]
        if candidates.size == 0:
            logger.info("No hand samples after Top, cannot place Impact")
            return None
        impact_k = int(candidates[np.argmax(speed[candidates])])
        impact = int(positions[impact_k])

        # Address: everything before the hands start moving
        peak = float(np.max(speed))
        moving = np.where(speed > cls.MOTION_ONSET_FRACTION * peak)[0]
        onset = int(positions[moving[0]]) if moving.size else 0

        top_half = max(1, n // 30)
        impact_half = max(1, n // 60)
        top_start = top - top_half
        onset = min(onset, top_start)

        starts = {
            PhaseName.BACKSWING: onset,
            PhaseName.TOP: top_start,
            PhaseName.DOWNSWING: top + top_half + 1,
            PhaseName.IMPACT: impact - impact_half,
            PhaseName.FOLLOW_THROUGH: impact + impact_half + 1,
        }
        if onset > 0:
            starts[PhaseName.ADDRESS] = 0

        top_agreement = cls._agreement(top, cls._velocity_reversal(positions, vy, top_k), n)
        lowest_after_top = top_k + 1 + int(np.argmax(y_smooth[top_k + 1:]))
        impact_agreement = cls._agreement(impact, int(positions[lowest_after_top]), n)

        phases = cls._build_phases(
            frames,
            starts,
            base_confidence=cls.DATA_DRIVEN_CONFIDENCE,
            agreements={
                PhaseName.TOP: top_agreement,
                PhaseName.IMPACT: impact_agreement,
            },
        )
        logger.debug(
            f"Data-driven segmentation: top={top}, impact={impact}, onset={onset}, "
            f"{len(phases)} phases"
        )
        return Segmentation(
            phases=tuple(phases),
            path=SegmentationPath.DATA_DRIVEN,
            top_agreement=top_agreement,
            impact_agreement=impact_agreement,
        )

    @classmethod
    def _segment_fallback(cls, frames: Sequence[PoseFrame]) -> Segmentation:
        n = len(frames)
        starts = {
            name: int(math.floor(fraction * n + 0.5))
            for name, fraction in FALLBACK_FRACTIONS.items()
        }
        phases = cls._build_phases(frames, starts, base_confidence=cls.FALLBACK_CONFIDENCE)
        return Segmentation(phases=tuple(phases), path=SegmentationPath.FALLBACK)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _velocity_reversal(positions: np.ndarray, vy: np.ndarray, top_k: int) -> Optional[int]:
        """Clip position where the hands stop rising, nearest to top_k."""
        reversals = [
            k for k in range(1, len(vy))
            if vy[k - 1] < 0 <= vy[k]
        ]
        if not reversals:
            return None
        nearest = min(reversals, key=lambda k: abs(k - top_k))
        return int(positions[nearest])

    @staticmethod
    def _agreement(primary: int, secondary: Optional[int], n: int) -> float:
        """1.0 when two cues pick the same frame, falling to 0 with distance."""
        if secondary is None:
            return 0.0
        tolerance = max(3.0, 0.05 * n)
        return float(max(0.0, 1.0 - abs(primary - secondary) / tolerance))

    @classmethod
    def _build_phases(
        cls,
        frames: Sequence[PoseFrame],
        starts: Dict[PhaseName, int],
        base_confidence: float,
        agreements: Optional[Dict[PhaseName, float]] = None,
    ) -> List[SwingPhase]:
        """
        Turn candidate start frames into contiguous phases.

        Starts are clipped to the clip and forced non-decreasing in
        canonical order; a phase whose start equals the next start has
        no frames and is dropped. Each kept phase ends right before the
        next kept one, and the first one is stretched back to frame 0.
        """
        n = len(frames)
        agreements = agreements or {}

        ordered: List[Tuple[PhaseName, int]] = []
        floor = 0
        for name in PHASE_ORDER:
            if name not in starts:
                continue
            start = max(floor, min(n, starts[name]))
            ordered.append((name, start))
            floor = start

        kept: List[Tuple[PhaseName, int]] = []
        for i, (name, start) in enumerate(ordered):
            next_start = ordered[i + 1][1] if i + 1 < len(ordered) else n
            if start < next_start:
                kept.append((name, start))
        if kept:
            kept[0] = (kept[0][0], 0)

        phases = []
        for i, (name, start) in enumerate(kept):
            end = kept[i + 1][1] - 1 if i + 1 < len(kept) else n - 1
            visibility = float(np.mean([
                frames[f].mean_visibility(KEY_PARTS) for f in range(start, end + 1)
            ]))
            confidence = base_confidence * visibility
            if name in agreements:
                confidence *= 0.5 + 0.5 * agreements[name]
            start_time = float(frames[start].timestamp_ms)
            end_time = float(frames[end].timestamp_ms)
            phases.append(
                SwingPhase(
                    name=name,
                    start_frame=start,
                    end_frame=end,
                    start_time=start_time,
                    end_time=end_time,
                    duration=end_time - start_time,
                    confidence=float(np.clip(confidence, 0.0, 1.0)),
                )
            )
        return phases

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @staticmethod
    def phase_at(phases: Sequence[SwingPhase], frame: int) -> Optional[SwingPhase]:
        """Phase containing a frame, or None outside [0, last end frame]."""
        if not phases or frame < 0 or frame > phases[-1].end_frame:
            return None
        for phase in phases:
            if phase.contains(frame):
                return phase
        return None

    @staticmethod
    def progress(phase: SwingPhase, frame: int) -> float:
        """
        How far into a phase a frame is: 0 at start_frame, 1 at end_frame.

        Clamped outside the phase. A single-frame phase is complete from
        its start frame on.
        """
        span = phase.end_frame - phase.start_frame
        if span <= 0:
            return 1.0 if frame >= phase.start_frame else 0.0
        value = (frame - phase.start_frame) / span
        return float(min(1.0, max(0.0, value)))
