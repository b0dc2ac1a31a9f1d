import pytest

from swing_core.domain import AnalysisConfig, InsufficientData, QualityMode
from swing_core.services import LandmarkQualityGate

from conftest import make_frame


def test_accepts_full_swing(swing_frames, strict_config):
    """A fully visible moving clip passes without issues."""
    report = LandmarkQualityGate.validate(swing_frames, strict_config)

    assert report.acceptable
    assert report.issues == ()
    assert report.frame_count == 60
    assert report.visible_ratio == 1.0
    assert report.motion_magnitude > LandmarkQualityGate.MIN_MOTION


def test_empty_input_always_raises(degraded_config):
    """No frames is an error even in degraded mode."""
    with pytest.raises(InsufficientData) as exc_info:
        LandmarkQualityGate.validate([], degraded_config)

    assert exc_info.value.report.frame_count == 0
    assert exc_info.value.recoverable


def test_strict_rejects_two_frames(swing_frames, strict_config):
    """Two frames are below the absolute minimum."""
    with pytest.raises(InsufficientData) as exc_info:
        LandmarkQualityGate.validate(swing_frames[:2], strict_config)

    report = exc_info.value.report
    assert not report.acceptable
    assert any("absolute minimum" in issue for issue in report.issues)


def test_degraded_reports_instead_of_raising(swing_frames, degraded_config):
    """Degraded mode returns an unacceptable report."""
    report = LandmarkQualityGate.validate(swing_frames[:2], degraded_config)

    assert not report.acceptable
    assert report.mode is QualityMode.DEGRADED
    assert report.issues


def test_configured_min_frames(swing_frames):
    """Clips shorter than min_frames fail in strict mode."""
    config = AnalysisConfig(min_frames=30)

    with pytest.raises(InsufficientData):
        LandmarkQualityGate.validate(swing_frames[:20], config)


def test_static_scene_is_flagged(static_frames, degraded_config):
    """Wrists that never move are reported as a static scene."""
    report = LandmarkQualityGate.validate(static_frames, degraded_config)

    assert report.motion_magnitude == 0.0
    assert any("static scene" in issue for issue in report.issues)


def test_low_visibility_is_flagged(degraded_config):
    """Frames with almost nothing visible count against the visible ratio."""
    frames = [make_frame(i, visibility=0.1) for i in range(20)]

    report = LandmarkQualityGate.validate(frames, degraded_config)

    assert report.visible_ratio == 0.0
    assert not report.acceptable


def test_strict_needs_more_visibility_than_degraded():
    """Strict mode asks for a larger visible fraction."""
    strict = LandmarkQualityGate.required_visible_fraction(QualityMode.STRICT)
    degraded = LandmarkQualityGate.required_visible_fraction(QualityMode.DEGRADED)

    assert strict == pytest.approx(0.6)
    assert degraded == pytest.approx(0.25)
