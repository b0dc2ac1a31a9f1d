"""
Swing Analyzer Service

High-level service that runs the full analysis pipeline over a clip of
pose frames:

quality gate -> camera angle -> trajectories -> phases -> authenticity
-> metrics -> plausibility -> grade

This is the main entry point for analyzing golf swings.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from ..domain.analysis import (
    AuthenticityReport,
    Diagnostics,
    SegmentationPath,
    SwingAnalysis,
    SwingMetricsBundle,
)
from ..domain.config import AnalysisConfig, QualityMode
from ..domain.errors import InvalidSwingMotion
from ..domain.pose import PoseFrame, BodyPart
from ..domain.trajectory import Trajectory
from .authenticity import SwingAuthenticityValidator
from .camera_angle import CameraAngleEstimator
from .grading import GradingAggregator
from .metrics import CALCULATORS, MetricContext
from .phase_segmenter import PhaseSegmenter
from .plausibility import PlausibilityValidator
from .quality_gate import LandmarkQualityGate
from .trajectory import TrajectoryExtractor, club_head, hands_center

logger = logging.getLogger(__name__)


class SwingAnalyzer:
    """
    Analyzes golf swings from frame sequences.

    This service:
    1. Checks input quality (raises or degrades per quality mode)
    2. Estimates the camera angle
    3. Extracts hand, club-head and head trajectories
    4. Segments the swing into phases
    5. Confirms the clip looks like a golf swing
    6. Calculates and bounds-checks metrics
    7. Grades the swing

    Holds nothing but its default configuration, so one instance can be
    shared freely.

    Usage:
        analyzer = SwingAnalyzer()
        result = analyzer.analyze_frames(frames)
        print(f"Overall score: {result.grade.overall_score}")

        # Poor footage: get a low-confidence result instead of an error
        config = AnalysisConfig(quality_mode=QualityMode.DEGRADED)
        result = analyzer.analyze_frames(frames, config)
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """Initialize the swing analyzer with a default configuration."""
        self.config = config or AnalysisConfig()

    # -------------------------------------------------------------------------
    # Main Analysis Methods
    # -------------------------------------------------------------------------

    def analyze_frames(
        self,
        frames: Sequence[PoseFrame],
        config: Optional[AnalysisConfig] = None,
    ) -> SwingAnalysis:
        """
        Analyze a golf swing from pre-detected pose frames.

        Args:
            frames: Ordered PoseFrame objects for one swing
            config: Overrides the analyzer's default configuration

        Returns:
            Complete SwingAnalysis

        Raises:
            InsufficientData: input below strict-mode thresholds, or empty
            InvalidSwingMotion: strict mode and the clip fails authenticity
        """
        config = config or self.config
        frames = list(frames)
        threshold = config.visibility_threshold

        quality = LandmarkQualityGate.validate(frames, config)
        camera = CameraAngleEstimator.estimate(frames, threshold)
        trajectories = self.extract_trajectories(frames, threshold)
        segmentation = PhaseSegmenter.segment(frames, trajectories["hands"], threshold)

        degraded = (
            not quality.acceptable
            or segmentation.path is SegmentationPath.FALLBACK
        )

        authenticity = SwingAuthenticityValidator.validate(
            frames,
            segmentation,
            trajectories["hands"],
            visibility_threshold=threshold,
        )
        warnings: List[str] = list(quality.issues)
        if not authenticity.is_valid:
            self._handle_invalid_motion(authenticity, config)
            warnings.append(f"authenticity score {authenticity.score:.0f} below threshold")
            degraded = True

        context = MetricContext(
            frames=frames,
            segmentation=segmentation,
            trajectories=trajectories,
            camera=camera,
            config=config,
            degraded=degraded,
        )
        bundle = self.calculate_metrics(context)
        bundle, rejected, violations, plausibility_warnings = (
            PlausibilityValidator.validate_bundle(bundle)
        )
        warnings.extend(plausibility_warnings)

        grade = GradingAggregator.grade(bundle, config.benchmark_profile)

        logger.info(
            f"Analyzed {len(frames)} frames: {len(segmentation.phases)} phases "
            f"({segmentation.path.value}), grade {grade.letter} ({grade.overall_score:.1f})"
        )

        return SwingAnalysis(
            phases=segmentation.phases,
            metrics=bundle,
            grade=grade,
            quality=quality,
            camera=camera,
            authenticity=authenticity,
            diagnostics=Diagnostics(
                segmentation_path=segmentation.path,
                quality_tier="degraded" if degraded else "normal",
                rejected_categories=rejected,
                violations=violations,
                warnings=tuple(warnings),
            ),
        )

    def validate_authenticity(
        self,
        frames: Sequence[PoseFrame],
        config: Optional[AnalysisConfig] = None,
    ) -> AuthenticityReport:
        """
        Run only the authenticity check (no metrics, no grade).

        Never raises for a failing score; the report says why.
        """
        config = config or self.config
        frames = list(frames)
        threshold = config.visibility_threshold

        LandmarkQualityGate.validate(frames, config)
        trajectories = self.extract_trajectories(frames, threshold)
        segmentation = PhaseSegmenter.segment(frames, trajectories["hands"], threshold)
        return SwingAuthenticityValidator.validate(
            frames,
            segmentation,
            trajectories["hands"],
            visibility_threshold=threshold,
        )

    # -------------------------------------------------------------------------
    # Pipeline Steps
    # -------------------------------------------------------------------------

    @staticmethod
    def extract_trajectories(
        frames: Sequence[PoseFrame],
        threshold: float,
    ) -> Dict[str, Trajectory]:
        """Trajectories used by segmentation, metrics and validation."""
        return {
            "left_wrist": TrajectoryExtractor.extract(frames, BodyPart.LEFT_WRIST, threshold),
            "right_wrist": TrajectoryExtractor.extract(frames, BodyPart.RIGHT_WRIST, threshold),
            "hands": TrajectoryExtractor.extract(frames, hands_center, threshold, name="hands"),
            "club_head": TrajectoryExtractor.extract(frames, club_head, threshold, name="club_head"),
            "nose": TrajectoryExtractor.extract(frames, BodyPart.NOSE, threshold),
        }

    @staticmethod
    def calculate_metrics(context: MetricContext) -> SwingMetricsBundle:
        """
        Run every metric calculator.

        Calculators are independent, so with parallel_metrics they run on a
        thread pool that lives only for this call.
        """
        if context.config.parallel_metrics:
            with ThreadPoolExecutor(max_workers=len(CALCULATORS)) as executor:
                futures = {
                    name: executor.submit(calculator, context)
                    for name, calculator in CALCULATORS.items()
                }
                results = {name: future.result() for name, future in futures.items()}
        else:
            results = {name: calculator(context) for name, calculator in CALCULATORS.items()}
        return SwingMetricsBundle(**results)

    @staticmethod
    def _handle_invalid_motion(report: AuthenticityReport, config: AnalysisConfig):
        if config.quality_mode is QualityMode.STRICT:
            raise InvalidSwingMotion(
                f"Clip does not look like a golf swing (score {report.score:.0f})",
                report,
            )
        logger.warning(
            f"Authenticity score {report.score:.0f} below threshold, "
            f"continuing in degraded mode"
        )
