"""
Landmark Quality Gate

Decides whether a clip carries enough visible, moving landmarks to be
analyzed at all, before any other component runs.
"""

import logging
from typing import Sequence

import numpy as np

from ..domain.config import AnalysisConfig, QualityMode
from ..domain.errors import InsufficientData
from ..domain.analysis import QualityReport
from ..domain.pose import PoseFrame, BodyPart

logger = logging.getLogger(__name__)


class LandmarkQualityGate:
    """
    Validates input sufficiency.

    Checks:
    - frame count (absolute minimum and the configured minimum)
    - fraction of frames with enough visible landmarks
    - wrist motion across the clip (rules out static scenes)
    """

    ABSOLUTE_MIN_FRAMES = 3
    MIN_VISIBLE_LANDMARKS = 10
    BASE_VISIBLE_FRACTION = 0.5
    STRICT_MULTIPLIER = 1.2
    DEGRADED_MULTIPLIER = 0.5
    MIN_MOTION = 0.02

    @classmethod
    def required_visible_fraction(cls, mode: QualityMode) -> float:
        if mode is QualityMode.STRICT:
            return cls.BASE_VISIBLE_FRACTION * cls.STRICT_MULTIPLIER
        return cls.BASE_VISIBLE_FRACTION * cls.DEGRADED_MULTIPLIER

    @staticmethod
    def motion_magnitude(frames: Sequence[PoseFrame], threshold: float) -> float:
        """
        Diagonal of the bounding box swept by either wrist.

        Only visible samples count; the larger of the two wrists wins.
        """
        best = 0.0
        for part in (BodyPart.LEFT_WRIST, BodyPart.RIGHT_WRIST):
            points = [
                (lm.x, lm.y)
                for lm in (f.get_visible_landmark(part, threshold) for f in frames)
                if lm is not None
            ]
            if len(points) < 2:
                continue
            arr = np.array(points)
            span = arr.max(axis=0) - arr.min(axis=0)
            best = max(best, float(np.hypot(span[0], span[1])))
        return best

    @classmethod
    def validate(
        cls,
        frames: Sequence[PoseFrame],
        config: AnalysisConfig,
    ) -> QualityReport:
        """
        Check a clip against the thresholds of the configured quality mode.

        Raises:
            InsufficientData: empty input, or any failed threshold in
                strict mode
        """
        frame_count = len(frames)
        if frame_count == 0:
            report = QualityReport(
                acceptable=False,
                frame_count=0,
                visible_ratio=0.0,
                motion_magnitude=0.0,
                mode=config.quality_mode,
                issues=("no frames supplied",),
            )
            raise InsufficientData("No frames to analyze", report)

        threshold = config.visibility_threshold
        issues = []

        if frame_count < cls.ABSOLUTE_MIN_FRAMES:
            issues.append(
                f"frame count {frame_count} below absolute minimum {cls.ABSOLUTE_MIN_FRAMES}"
            )
        elif frame_count < config.min_frames:
            issues.append(
                f"frame count {frame_count} below required {config.min_frames}"
            )

        visible_frames = sum(
            1 for f in frames if f.visible_count(threshold) >= cls.MIN_VISIBLE_LANDMARKS
        )
        visible_ratio = visible_frames / frame_count
        required = cls.required_visible_fraction(config.quality_mode)
        if visible_ratio < required:
            issues.append(
                f"only {visible_ratio:.0%} of frames have {cls.MIN_VISIBLE_LANDMARKS}+ "
                f"visible landmarks (need {required:.0%})"
            )

        motion = cls.motion_magnitude(frames, threshold)
        if motion < cls.MIN_MOTION:
            issues.append(
                f"wrist motion {motion:.3f} below minimum {cls.MIN_MOTION} (static scene?)"
            )

        report = QualityReport(
            acceptable=not issues,
            frame_count=frame_count,
            visible_ratio=visible_ratio,
            motion_magnitude=motion,
            mode=config.quality_mode,
            issues=tuple(issues),
        )

        if issues:
            if config.quality_mode is QualityMode.STRICT:
                logger.info(f"Quality gate rejected clip: {'; '.join(issues)}")
                raise InsufficientData(
                    f"Input quality insufficient for strict analysis: {'; '.join(issues)}",
                    report,
                )
            logger.warning(
                f"Quality gate issues, continuing in degraded mode: {'; '.join(issues)}"
            )
        else:
            logger.debug(
                f"Quality gate passed: {frame_count} frames, "
                f"{visible_ratio:.0%} visible, motion {motion:.3f}"
            )

        return report
