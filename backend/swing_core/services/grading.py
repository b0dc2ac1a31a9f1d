"""
Grading Aggregator

Turns a validated metrics bundle into a weighted overall score, a letter
grade and tiered coaching recommendations.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..domain.analysis import (
    CategoryGrade,
    GolfGrade,
    Provenance,
    Recommendations,
    SwingMetricsBundle,
)
from ..domain.config import BenchmarkProfile

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS = {
    "tempo": 0.15,
    "rotation": 0.20,
    "balance": 0.15,
    "swing_plane": 0.15,
    "power": 0.20,
    "consistency": 0.15,
}

TOLERANCE_MULTIPLIERS = {
    BenchmarkProfile.PROFESSIONAL: 1.0,
    BenchmarkProfile.AMATEUR: 1.5,
    BenchmarkProfile.BEGINNER: 2.0,
}

# (benchmark, tolerance) pairs at professional level
TEMPO_BENCHMARK = (3.0, 0.3)
SHOULDER_TURN_BENCHMARK = (90.0, 10.0)
HIP_TURN_BENCHMARK = (45.0, 10.0)
X_FACTOR_BENCHMARK = (40.0, 10.0)
PLANE_ANGLE_BENCHMARK = (60.0, 5.0)
SMOOTHNESS_BENCHMARK = (85.0, 10.0)

# Right-handed golfer: lead foot is the left one.
# (key frame, side, benchmark pct, tolerance, weight)
BALANCE_BENCHMARKS = (
    ("address", "left", 50.0, 8.0, 0.10),
    ("top", "right", 65.0, 10.0, 0.30),
    ("impact", "left", 80.0, 10.0, 0.35),
    ("finish", "left", 90.0, 10.0, 0.25),
)

POWER_TOLERANCE_FRACTION = 0.1

LETTER_GRADES = (
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (63, "D"),
)

IMMEDIATE_THRESHOLD = 60
SHORT_TERM_THRESHOLD = 80
LONG_TERM_THRESHOLD = 90

CATEGORY_LABELS = {
    "tempo": "tempo",
    "rotation": "body rotation",
    "balance": "weight transfer",
    "swing_plane": "swing plane",
    "power": "club-head speed",
    "consistency": "head stability",
}

IMMEDIATE_TIPS = {
    "tempo": "Slow the takeaway down; aim for a backswing about three times longer than the downswing.",
    "rotation": "Turn your shoulders fully away from the target while keeping the hips quieter.",
    "balance": "Shift weight onto the trail foot going back and firmly onto the lead foot through impact.",
    "swing_plane": "Keep the club on plane: the shaft should point between the ball and your feet at the top.",
    "power": "Build speed from the ground up; let the lower body start the downswing.",
    "consistency": "Keep your head steady over the ball until after impact.",
}

SHORT_TERM_TIPS = {
    "tempo": "Practice with a metronome count to groove a repeatable tempo.",
    "rotation": "Add trunk rotation drills to increase separation between hips and shoulders.",
    "balance": "Hold your finish for three seconds on every practice swing.",
    "swing_plane": "Use an alignment stick along the shaft line to check your plane.",
    "power": "Work on speed training with lighter and heavier clubs.",
    "consistency": "Film face-on swings and check head movement frame by frame.",
}


def score_against(value: float, benchmark: float, tolerance: float) -> float:
    """
    Score a measured value against a benchmark (0-100).

    Within tolerance the score falls linearly from 100 to 85; past it,
    another 25 points are lost per tolerance width, down to 0.
    """
    if tolerance <= 0:
        return 100.0 if value == benchmark else 0.0
    deviation = abs(value - benchmark)
    if deviation <= tolerance:
        return 100.0 - 15.0 * deviation / tolerance
    return max(0.0, 85.0 - 25.0 * (deviation - tolerance) / tolerance)


def letter_for(score: float) -> str:
    for threshold, letter in LETTER_GRADES:
        if score >= threshold:
            return letter
    return "F"


def _weighted(parts: List[Tuple[float, float]]) -> Optional[float]:
    """Weighted mean of (score, weight) pairs, renormalized."""
    total = sum(weight for _, weight in parts)
    if total <= 0:
        return None
    return sum(score * weight for score, weight in parts) / total


class GradingAggregator:
    """
    Weighted composite grade over six categories.

    Categories that were rejected by the plausibility validator, or could
    not be computed, are left out and the remaining weights renormalized.

    Usage:
        grade = GradingAggregator.grade(bundle, BenchmarkProfile.AMATEUR)
    """

    # -------------------------------------------------------------------------
    # Category scoring
    # -------------------------------------------------------------------------

    @staticmethod
    def _tempo(bundle: SwingMetricsBundle, factor: float) -> Optional[Tuple[float, Dict[str, float]]]:
        ratio = bundle.tempo.clamped_ratio
        if ratio is None:
            return None
        benchmark, tolerance = TEMPO_BENCHMARK
        tolerance *= factor
        return score_against(ratio, benchmark, tolerance), {
            "ratio": benchmark,
            "ratio_tolerance": tolerance,
        }

    @staticmethod
    def _rotation(bundle: SwingMetricsBundle, factor: float) -> Optional[Tuple[float, Dict[str, float]]]:
        rotation = bundle.rotation
        parts = []
        benchmarks = {}
        for name, value, (benchmark, tolerance), weight in (
            ("shoulder_turn_deg", rotation.shoulder_turn_deg, SHOULDER_TURN_BENCHMARK, 0.4),
            ("hip_turn_deg", rotation.hip_turn_deg, HIP_TURN_BENCHMARK, 0.3),
            ("x_factor_deg", rotation.x_factor_deg, X_FACTOR_BENCHMARK, 0.3),
        ):
            if value is None:
                continue
            parts.append((score_against(value, benchmark, tolerance * factor), weight))
            benchmarks[name] = benchmark
        score = _weighted(parts)
        if score is None:
            return None
        return score, benchmarks

    @staticmethod
    def _balance(bundle: SwingMetricsBundle, factor: float) -> Optional[Tuple[float, Dict[str, float]]]:
        transfer = bundle.weight_transfer
        parts = []
        benchmarks = {}
        for key, side, benchmark, tolerance, weight in BALANCE_BENCHMARKS:
            distribution = getattr(transfer, key)
            if distribution is None or distribution.provenance is not Provenance.MEASURED:
                continue
            value = distribution.left_pct if side == "left" else distribution.right_pct
            parts.append((score_against(value, benchmark, tolerance * factor), weight))
            benchmarks[f"{key}_{side}_pct"] = benchmark
        score = _weighted(parts)
        if score is None:
            return None
        return score, benchmarks

    @staticmethod
    def _swing_plane(bundle: SwingMetricsBundle, factor: float) -> Optional[Tuple[float, Dict[str, float]]]:
        plane = bundle.swing_plane
        parts = []
        benchmarks = {}
        if plane.angle_deg is not None:
            benchmark, tolerance = PLANE_ANGLE_BENCHMARK
            parts.append((score_against(plane.angle_deg, benchmark, tolerance * factor), 0.6))
            benchmarks["angle_deg"] = benchmark
        if plane.smoothness is not None:
            benchmark, tolerance = SMOOTHNESS_BENCHMARK
            parts.append((score_against(plane.smoothness * 100.0, benchmark, tolerance * factor), 0.4))
            benchmarks["smoothness"] = benchmark / 100.0
        score = _weighted(parts)
        if score is None:
            return None
        return score, benchmarks

    @staticmethod
    def _power(bundle: SwingMetricsBundle, factor: float) -> Optional[Tuple[float, Dict[str, float]]]:
        # Benchmarks are already per profile; factor is not applied again.
        power = bundle.power
        if power.speed_estimate is None:
            return None
        benchmark = power.benchmark_mph
        if power.speed_estimate >= benchmark:
            score = 100.0
        else:
            score = score_against(power.speed_estimate, benchmark, benchmark * POWER_TOLERANCE_FRACTION)
        return score, {"speed_mph": benchmark}

    @staticmethod
    def _consistency(bundle: SwingMetricsBundle, factor: float) -> Optional[Tuple[float, Dict[str, float]]]:
        score = bundle.consistency.variance_score
        if score is None:
            return None
        return score * 100.0, {"variance_score": 1.0}

    # -------------------------------------------------------------------------
    # Aggregate
    # -------------------------------------------------------------------------

    @classmethod
    def grade(
        cls,
        bundle: SwingMetricsBundle,
        profile: BenchmarkProfile = BenchmarkProfile.AMATEUR,
    ) -> GolfGrade:
        """
        Grade a metrics bundle.

        Args:
            bundle: Validated metrics (rejected categories are skipped)
            profile: Skill level that sets the tolerances

        Returns:
            GolfGrade with per-category scores and recommendations
        """
        factor = TOLERANCE_MULTIPLIERS[profile]
        scorers: Dict[str, Callable] = {
            "tempo": cls._tempo,
            "rotation": cls._rotation,
            "balance": cls._balance,
            "swing_plane": cls._swing_plane,
            "power": cls._power,
            "consistency": cls._consistency,
        }
        metrics = bundle.categories()

        scored: Dict[str, Tuple[float, Dict[str, float]]] = {}
        degraded = False
        for name, scorer in scorers.items():
            metric = metrics[name]
            if metric.provenance is Provenance.REJECTED:
                logger.info(f"Category {name} rejected, excluded from grade")
                continue
            result = scorer(bundle, factor)
            if result is None:
                logger.debug(f"Category {name} not computable, excluded from grade")
                continue
            scored[name] = result
            if metric.provenance is Provenance.DEGRADED:
                degraded = True

        provenance = Provenance.DEGRADED if degraded else Provenance.MEASURED

        if not scored:
            logger.warning("No metric category could be graded")
            return GolfGrade(
                overall_score=0.0,
                letter="F",
                categories={},
                recommendations=Recommendations(
                    immediate=("Re-record the swing with the full body in frame and good lighting.",),
                ),
                profile=profile,
                provenance=Provenance.DEGRADED,
            )

        total_weight = sum(CATEGORY_WEIGHTS[name] for name in scored)
        categories = {}
        overall = 0.0
        for name, (score, benchmarks) in scored.items():
            score = float(min(100.0, max(0.0, score)))
            weight = CATEGORY_WEIGHTS[name] / total_weight
            overall += score * weight
            categories[name] = CategoryGrade(
                score=score,
                letter=letter_for(score),
                weight=weight,
                benchmarks=benchmarks,
            )

        overall = float(min(100.0, max(0.0, overall)))
        return GolfGrade(
            overall_score=overall,
            letter=letter_for(overall),
            categories=categories,
            recommendations=cls.recommendations(categories),
            profile=profile,
            provenance=provenance,
        )

    @staticmethod
    def recommendations(categories: Dict[str, CategoryGrade]) -> Recommendations:
        """
        Rule-based coaching tiers.

        - score < 60: immediate fix
        - 60 <= score < 80: short-term practice item
        - score < 90: generic long-term item
        """
        immediate = []
        short_term = []
        long_term = []
        for name, grade in categories.items():
            if grade.score < IMMEDIATE_THRESHOLD:
                immediate.append(IMMEDIATE_TIPS[name])
            elif grade.score < SHORT_TERM_THRESHOLD:
                short_term.append(SHORT_TERM_TIPS[name])
            if grade.score < LONG_TERM_THRESHOLD:
                long_term.append(
                    f"Keep building your {CATEGORY_LABELS[name]} with regular, focused practice."
                )
        return Recommendations(
            immediate=tuple(immediate),
            short_term=tuple(short_term),
            long_term=tuple(long_term),
        )
