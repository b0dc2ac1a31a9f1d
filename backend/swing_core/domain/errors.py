"""
Swing Analysis Errors

Every error carries structured diagnostics so callers can decide whether
to ask for a re-recording or retry in degraded mode.
"""

from typing import Any, Optional, Sequence, Tuple


class SwingAnalysisError(Exception):
    """Base class for all analysis failures."""

    kind = "swing_analysis_error"
    recoverable = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.kind,
            "message": str(self),
            "recoverable": self.recoverable,
        }


class InsufficientData(SwingAnalysisError):
    """Too few frames or visible landmarks for the requested quality mode."""

    kind = "insufficient_data"
    recoverable = True

    def __init__(self, message: str, report: Optional[Any] = None):
        super().__init__(message)
        self.report = report

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.report is not None:
            data["frame_count"] = self.report.frame_count
            data["visible_ratio"] = self.report.visible_ratio
            data["motion_magnitude"] = self.report.motion_magnitude
            data["issues"] = list(self.report.issues)
        return data


class PhysicalImplausibility(SwingAnalysisError):
    """A metric fell outside its allowed physiological range."""

    kind = "physical_implausibility"

    def __init__(
        self,
        category: str,
        metric: str,
        value: float,
        allowed_range: Tuple[float, float],
    ):
        low, high = allowed_range
        super().__init__(
            f"{category}.{metric} = {value:.3f} outside allowed range "
            f"[{low:g}, {high:g}]"
        )
        self.category = category
        self.metric = metric
        self.value = value
        self.allowed_range = allowed_range

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            category=self.category,
            metric=self.metric,
            value=self.value,
            allowed_range=list(self.allowed_range),
        )
        return data


class InvalidSwingMotion(SwingAnalysisError):
    """The clip does not resemble a golf swing (authenticity score < 60)."""

    kind = "invalid_swing_motion"
    recoverable = True

    def __init__(self, message: str, report: Optional[Any] = None):
        super().__init__(message)
        self.report = report

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.report is not None:
            data["score"] = self.report.score
            data["failed_tests"] = [
                name for name, passed in self.report.results.items() if not passed
            ]
            data["errors"] = list(self.report.errors)
            data["details"] = dict(self.report.details)
        return data


class ConfigurationError(SwingAnalysisError):
    """Unsupported configuration value (club, profile, mode...)."""

    kind = "configuration_error"

    def __init__(self, field: str, value: Any, allowed: Sequence[Any] = ()):
        allowed_text = f"; expected one of {list(allowed)}" if allowed else ""
        super().__init__(f"Invalid value for {field}: {value!r}{allowed_text}")
        self.field = field
        self.value = value
        self.allowed = tuple(allowed)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(field=self.field, value=repr(self.value), allowed=list(self.allowed))
        return data
