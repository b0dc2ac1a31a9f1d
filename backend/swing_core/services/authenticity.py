"""
Swing Authenticity Validator

Independent gate confirming that a clip looks like a real golf swing
before its metrics are trusted for grading.

Five sub-tests with fixed weights (sum 100):
- motion (35): hands rise then fall with enough horizontal and vertical
  range; failing caps the score at 40
- phases (25): Backswing and Downswing detected in order; failing caps
  the score at 50
- arc (20): the tracked path rises above both of its endpoints
- timing (10): backswing/downswing durations and ratio are human
- landmarks (10): enough landmarks visible on average
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..domain.analysis import AuthenticityReport, PhaseName, Segmentation
from ..domain.pose import PoseFrame, NUM_LANDMARKS
from ..domain.trajectory import Trajectory

logger = logging.getLogger(__name__)

TEST_WEIGHTS = {
    "motion": 35,
    "phases": 25,
    "arc": 20,
    "timing": 10,
    "landmarks": 10,
}

SCORE_CAPS = {
    "motion": 40,
    "phases": 50,
}

VALID_SCORE = 60

MIN_HAND_SAMPLES = 10
MIN_HAND_RANGE = 0.15
MIN_RISE_FALL = 0.05
MIN_SIDE_SAMPLES = 3
MIN_ARC_RANGE = 0.05

BACKSWING_SECONDS = (0.4, 2.0)
DOWNSWING_SECONDS = (0.1, 0.5)
TEMPO_RATIO = (1.5, 6.0)

MIN_AVG_VISIBLE = 10
MIN_VISIBLE_RATIO = 0.4


class SwingAuthenticityValidator:
    """
    Scores how much a clip resembles a golf swing.

    Usage:
        report = SwingAuthenticityValidator.validate(frames, segmentation, hands)
        if not report.is_valid:
            ...
    """

    # -------------------------------------------------------------------------
    # Sub-tests
    # -------------------------------------------------------------------------

    @staticmethod
    def motion_pattern(hands: Optional[Trajectory], details: Dict[str, float]) -> Tuple[bool, Optional[str]]:
        """Rise-then-fall of the hands with enough range in x and y."""
        points = [p for p in hands.points if not p.interpolated] if hands else []
        details["hand_samples"] = float(len(points))
        if len(points) < MIN_HAND_SAMPLES:
            return False, f"only {len(points)} hand samples (need {MIN_HAND_SAMPLES})"

        x = np.array([p.x for p in points])
        y = np.array([p.y for p in points])
        x_range = float(x.max() - x.min())
        y_range = float(y.max() - y.min())
        details["hand_x_range"] = x_range
        details["hand_y_range"] = y_range
        if x_range < MIN_HAND_RANGE or y_range < MIN_HAND_RANGE:
            return False, (
                f"hand movement too small (x {x_range:.3f}, y {y_range:.3f}, "
                f"need {MIN_HAND_RANGE})"
            )

        top = int(np.argmin(y))
        if top < MIN_SIDE_SAMPLES or top > len(y) - 1 - MIN_SIDE_SAMPLES:
            return False, "hands never rise and fall again (highest point at clip edge)"

        rise = float(y[0] - y[top])
        fall = float(y[-1] - y[top])
        details["hand_rise"] = rise
        details["hand_fall"] = fall
        if rise < MIN_RISE_FALL or fall < MIN_RISE_FALL:
            return False, f"rise {rise:.3f} / fall {fall:.3f} below {MIN_RISE_FALL}"
        return True, None

    @staticmethod
    def phase_sequence(segmentation: Segmentation) -> Tuple[bool, Optional[str]]:
        backswing = segmentation.get(PhaseName.BACKSWING)
        downswing = segmentation.get(PhaseName.DOWNSWING)
        if backswing is None or downswing is None:
            return False, "backswing and downswing not both detected"
        if backswing.end_frame >= downswing.start_frame:
            return False, "downswing does not follow backswing"
        return True, None

    @staticmethod
    def trajectory_arc(path: Optional[Trajectory], details: Dict[str, float]) -> Tuple[bool, Optional[str]]:
        """The highest point of the path lies above both endpoints."""
        if path is None or len(path) < 3:
            return False, "trajectory too short for an arc"
        y = path.as_array()[:, 1]
        vertical = float(y.max() - y.min())
        details["arc_vertical_range"] = vertical
        peak = float(y.min())
        if vertical <= MIN_ARC_RANGE:
            return False, f"vertical range {vertical:.3f} too small for a swing arc"
        if not (y[0] > peak and y[-1] > peak):
            return False, "path does not rise above both endpoints"
        return True, None

    @staticmethod
    def timing(segmentation: Segmentation, details: Dict[str, float]) -> Tuple[bool, Optional[str]]:
        backswing = segmentation.get(PhaseName.BACKSWING)
        downswing = segmentation.get(PhaseName.DOWNSWING)
        if backswing is None or downswing is None:
            return False, "timing unavailable without backswing and downswing"

        back_s = backswing.duration / 1000.0
        down_s = downswing.duration / 1000.0
        details["backswing_seconds"] = back_s
        details["downswing_seconds"] = down_s
        problems = []
        if not BACKSWING_SECONDS[0] <= back_s <= BACKSWING_SECONDS[1]:
            problems.append(f"backswing {back_s:.2f}s outside {BACKSWING_SECONDS}")
        if not DOWNSWING_SECONDS[0] <= down_s <= DOWNSWING_SECONDS[1]:
            problems.append(f"downswing {down_s:.2f}s outside {DOWNSWING_SECONDS}")
        if down_s > 0:
            ratio = back_s / down_s
            details["timing_ratio"] = ratio
            if not TEMPO_RATIO[0] <= ratio <= TEMPO_RATIO[1]:
                problems.append(f"tempo ratio {ratio:.2f} outside {TEMPO_RATIO}")
        else:
            problems.append("downswing has no duration")
        if problems:
            return False, "; ".join(problems)
        return True, None

    @staticmethod
    def landmark_density(
        frames: Sequence[PoseFrame],
        threshold: float,
        details: Dict[str, float],
    ) -> Tuple[bool, Optional[str]]:
        if not frames:
            return False, "no frames"
        average = float(np.mean([f.visible_count(threshold) for f in frames]))
        ratio = average / NUM_LANDMARKS
        details["avg_visible_landmarks"] = average
        details["visible_landmark_ratio"] = ratio
        if average < MIN_AVG_VISIBLE or ratio < MIN_VISIBLE_RATIO:
            return False, f"average {average:.1f} visible landmarks ({ratio:.0%})"
        return True, None

    # -------------------------------------------------------------------------
    # Aggregate
    # -------------------------------------------------------------------------

    @classmethod
    def validate(
        cls,
        frames: Sequence[PoseFrame],
        segmentation: Segmentation,
        hands: Optional[Trajectory],
        arc_path: Optional[Trajectory] = None,
        visibility_threshold: float = 0.5,
    ) -> AuthenticityReport:
        """
        Run all five sub-tests and combine them into a score.

        Args:
            frames: The analyzed clip
            segmentation: Phase segmenter output
            hands: Hands trajectory for the motion test
            arc_path: Path for the arc test (defaults to the hands)
            visibility_threshold: Landmark visibility for the density test
        """
        details: Dict[str, float] = {}
        outcomes = {
            "motion": cls.motion_pattern(hands, details),
            "phases": cls.phase_sequence(segmentation),
            "arc": cls.trajectory_arc(arc_path if arc_path is not None else hands, details),
            "timing": cls.timing(segmentation, details),
            "landmarks": cls.landmark_density(frames, visibility_threshold, details),
        }

        results = {name: passed for name, (passed, _) in outcomes.items()}
        score = float(sum(TEST_WEIGHTS[name] for name, passed in results.items() if passed))
        for name, cap in SCORE_CAPS.items():
            if not results[name]:
                score = min(score, float(cap))
        details["score"] = score

        errors = []
        warnings = []
        for name, (passed, message) in outcomes.items():
            if passed:
                continue
            text = f"{name}: {message}"
            if name in SCORE_CAPS or name == "arc":
                errors.append(text)
            else:
                warnings.append(text)

        is_valid = score >= VALID_SCORE
        if not is_valid:
            logger.info(f"Swing authenticity score {score:.0f} below {VALID_SCORE}: {errors + warnings}")

        return AuthenticityReport(
            is_valid=is_valid,
            score=score,
            results=results,
            errors=tuple(errors),
            warnings=tuple(warnings),
            details=details,
        )
