"""
Analysis Configuration

One immutable value threaded through every component of the pipeline.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping

from .errors import ConfigurationError


class QualityMode(Enum):
    """How strictly input quality is enforced."""
    STRICT = "strict"
    DEGRADED = "degraded"


class ClubType(Enum):
    """Club families with their own power benchmarks."""
    DRIVER = "driver"
    IRON = "iron"
    WEDGE = "wedge"


class BenchmarkProfile(Enum):
    """Skill level the swing is graded against."""
    PROFESSIONAL = "professional"
    AMATEUR = "amateur"
    BEGINNER = "beginner"


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Recognized analysis options.

    Attributes:
        quality_mode: strict raises on poor input, degraded proceeds
            with low-confidence tags
        min_frames: Frames required for trustworthy metrics
        visibility_threshold: Landmark visibility needed to count as seen
        club_type: Club used, selects power benchmarks
        benchmark_profile: Skill level for grading tolerances
        parallel_metrics: Run metric calculators on a thread pool
    """
    quality_mode: QualityMode = QualityMode.STRICT
    min_frames: int = 10
    visibility_threshold: float = 0.5
    club_type: ClubType = ClubType.IRON
    benchmark_profile: BenchmarkProfile = BenchmarkProfile.AMATEUR
    parallel_metrics: bool = False

    def __post_init__(self):
        for name, enum_type in (
            ("quality_mode", QualityMode),
            ("club_type", ClubType),
            ("benchmark_profile", BenchmarkProfile),
        ):
            value = getattr(self, name)
            if not isinstance(value, enum_type):
                raise ConfigurationError(name, value, [e.value for e in enum_type])
        if isinstance(self.min_frames, bool) or not isinstance(self.min_frames, int) or self.min_frames < 3:
            raise ConfigurationError("min_frames", self.min_frames, ["integer >= 3"])
        if not 0.0 <= float(self.visibility_threshold) <= 1.0:
            raise ConfigurationError(
                "visibility_threshold", self.visibility_threshold, ["0.0 - 1.0"]
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisConfig":
        """
        Build a config from plain values (e.g. parsed JSON).

        Raises:
            ConfigurationError: unknown key or unsupported value
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ConfigurationError(key, value, sorted(known))
            kwargs[key] = value

        for name, enum_type in (
            ("quality_mode", QualityMode),
            ("club_type", ClubType),
            ("benchmark_profile", BenchmarkProfile),
        ):
            if name in kwargs and not isinstance(kwargs[name], enum_type):
                raw = kwargs[name]
                try:
                    kwargs[name] = enum_type(str(raw).lower())
                except ValueError:
                    raise ConfigurationError(
                        name, raw, [e.value for e in enum_type]
                    ) from None

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "quality_mode": self.quality_mode.value,
            "min_frames": self.min_frames,
            "visibility_threshold": self.visibility_threshold,
            "club_type": self.club_type.value,
            "benchmark_profile": self.benchmark_profile.value,
            "parallel_metrics": self.parallel_metrics,
        }
