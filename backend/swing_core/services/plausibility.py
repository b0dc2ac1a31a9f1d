"""
Plausibility Validator

Bounds-checks metric outputs against physiologically possible ranges.

Two tiers:
- normal: a value outside its range raises PhysicalImplausibility
- degraded: ranges are widened 2x about their center and violations
  are only reported as warnings; values are never altered
"""

import dataclasses
import logging
from typing import Dict, List, Optional, Tuple

from ..domain.analysis import Provenance, SwingMetricsBundle
from ..domain.errors import PhysicalImplausibility

logger = logging.getLogger(__name__)

NORMAL = "normal"
DEGRADED = "degraded"

DEGRADED_WIDENING = 2.0
MAGNITUDE_FACTOR = 10.0

BOUNDS: Dict[str, Dict[str, Tuple[float, float]]] = {
    "tempo": {
        "ratio": (1.0, 10.0),
        "backswing_time": (0.1, 3.0),
        "downswing_time": (0.05, 1.5),
    },
    "rotation": {
        "shoulder_turn_deg": (0.0, 180.0),
        "hip_turn_deg": (0.0, 180.0),
        "x_factor_deg": (0.0, 90.0),
    },
    "balance": {
        "address.left_pct": (0.0, 100.0),
        "top.left_pct": (0.0, 100.0),
        "impact.left_pct": (0.0, 100.0),
        "finish.left_pct": (0.0, 100.0),
    },
    "swing_plane": {
        "angle_deg": (0.0, 90.0),
        "deviation_deg": (0.0, 90.0),
        "smoothness": (0.0, 1.0),
    },
    "power": {
        "speed_estimate": (0.0, 160.0),
    },
    "consistency": {
        "variance_score": (0.0, 1.0),
    },
}


def _read(metric: object, path: str) -> Optional[float]:
    """Follow a dotted attribute path, None when any step is missing."""
    value = metric
    for name in path.split("."):
        value = getattr(value, name, None)
        if value is None:
            return None
    return float(value)


def widen(bounds: Tuple[float, float], factor: float = DEGRADED_WIDENING) -> Tuple[float, float]:
    low, high = bounds
    center = (low + high) / 2
    half = (high - low) / 2 * factor
    return center - half, center + half


class PlausibilityValidator:
    """
    Checks each metric category against BOUNDS.

    Usage:
        warnings = PlausibilityValidator.check("tempo", bundle.tempo)
        bundle, rejected, violations, warnings = PlausibilityValidator.validate_bundle(bundle)
    """

    @staticmethod
    def values(category: str, metric: object) -> Dict[str, float]:
        """The bounded values a metric currently carries."""
        result = {}
        for name in BOUNDS[category]:
            value = _read(metric, name)
            if value is not None:
                result[name] = value
        return result

    @classmethod
    def select_tier(cls, category: str, metric: object) -> str:
        """
        Degraded when the metric is tagged degraded, or carries a value
        that looks synthetic: exactly zero, or an order of magnitude past
        its bound.
        """
        if getattr(metric, "provenance", None) is Provenance.DEGRADED:
            return DEGRADED
        for name, value in cls.values(category, metric).items():
            low, high = BOUNDS[category][name]
            limit = MAGNITUDE_FACTOR * max(abs(low), abs(high))
            if value == 0.0 or abs(value) >= limit:
                return DEGRADED
        return NORMAL

    @classmethod
    def check(cls, category: str, metric: object, tier: Optional[str] = None) -> List[str]:
        """
        Validate one metric category.

        Args:
            category: Key of BOUNDS
            metric: Metric dataclass for that category
            tier: "normal" or "degraded"; auto-selected when omitted

        Returns:
            Warnings for degraded-tier violations

        Raises:
            PhysicalImplausibility: first normal-tier violation
        """
        if category not in BOUNDS:
            raise KeyError(f"Unknown metric category: {category}")
        tier = tier or cls.select_tier(category, metric)

        warnings = []
        for name, value in cls.values(category, metric).items():
            bounds = BOUNDS[category][name]
            low, high = widen(bounds) if tier == DEGRADED else bounds
            if low <= value <= high:
                continue
            if tier == NORMAL:
                raise PhysicalImplausibility(category, name, value, bounds)
            message = (
                f"{category}.{name} = {value:.3f} outside degraded range "
                f"[{low:g}, {high:g}]"
            )
            logger.warning(message)
            warnings.append(message)
        return warnings

    @classmethod
    def validate_bundle(
        cls,
        bundle: SwingMetricsBundle,
    ) -> Tuple[SwingMetricsBundle, Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]:
        """
        Validate every category of a metrics bundle.

        A normal-tier violation only rejects its own category: the metric
        keeps its values but is tagged rejected so grading leaves it out.

        Returns:
            (bundle, rejected categories, violation messages, warnings)
        """
        fields = {
            "tempo": "tempo",
            "rotation": "rotation",
            "balance": "weight_transfer",
            "swing_plane": "swing_plane",
            "power": "power",
            "consistency": "consistency",
        }
        replacements = {}
        rejected = []
        violations = []
        warnings = []
        for category, field_name in fields.items():
            metric = getattr(bundle, field_name)
            try:
                warnings.extend(cls.check(category, metric))
            except PhysicalImplausibility as exc:
                logger.warning(f"Rejecting {category} metrics: {exc}")
                rejected.append(category)
                violations.append(str(exc))
                replacements[field_name] = dataclasses.replace(
                    metric, provenance=Provenance.REJECTED
                )

        if replacements:
            bundle = dataclasses.replace(bundle, **replacements)
        return bundle, tuple(rejected), tuple(violations), tuple(warnings)
