import dataclasses

import pytest

from swing_core.domain import (
    AnalysisConfig,
    InsufficientData,
    InvalidSwingMotion,
    PhaseName,
    Provenance,
    QualityMode,
    SegmentationPath,
)
from swing_core.services import SwingAnalyzer


@pytest.fixture
def analyzer():
    return SwingAnalyzer()


def test_full_swing_analysis(analyzer, swing_frames):
    """A clean synthetic swing is segmented, measured and graded."""
    result = analyzer.analyze_frames(swing_frames)

    assert [p.name for p in result.phases] == [
        PhaseName.BACKSWING,
        PhaseName.TOP,
        PhaseName.DOWNSWING,
        PhaseName.IMPACT,
        PhaseName.FOLLOW_THROUGH,
    ]
    assert result.diagnostics.segmentation_path is SegmentationPath.DATA_DRIVEN
    assert result.diagnostics.quality_tier == "normal"
    assert result.diagnostics.rejected_categories == ()
    assert result.authenticity.is_valid
    assert 0 < result.metrics.tempo.ratio < 10
    assert result.metrics.tempo.provenance is Provenance.MEASURED
    assert 0.0 <= result.grade.overall_score <= 100.0
    assert result.get_phase(PhaseName.TOP) is not None
    assert result.get_phase(PhaseName.ADDRESS) is None


def test_two_frames_strict_raises(analyzer, swing_frames):
    """Two frames are not enough for a strict analysis."""
    with pytest.raises(InsufficientData):
        analyzer.analyze_frames([swing_frames[0], swing_frames[30]])


def test_two_frames_degraded_is_labelled(analyzer, swing_frames, degraded_config):
    """Degraded mode returns a result where every metric says so."""
    result = analyzer.analyze_frames([swing_frames[0], swing_frames[30]], degraded_config)

    assert not result.quality.acceptable
    assert result.diagnostics.quality_tier == "degraded"
    assert result.diagnostics.segmentation_path is SegmentationPath.FALLBACK
    assert result.diagnostics.warnings
    for name, metric in result.metrics.categories().items():
        assert metric.provenance is Provenance.DEGRADED, name
    assert result.grade.provenance is Provenance.DEGRADED


def test_static_clip_strict_raises(analyzer, static_frames):
    """A person standing still is rejected before analysis."""
    with pytest.raises(InsufficientData):
        analyzer.analyze_frames(static_frames)


def test_invalid_motion_strict_raises(analyzer, swing_frames):
    """Passing quality but failing authenticity is an invalid swing."""
    # Hands rise but never come down again
    frames = swing_frames[:31]

    with pytest.raises(InvalidSwingMotion) as exc_info:
        analyzer.analyze_frames(frames)

    assert exc_info.value.report.score < 60
    assert exc_info.value.recoverable


def test_invalid_motion_degraded_continues(analyzer, swing_frames, degraded_config):
    """The same clip in degraded mode yields a degraded result."""
    result = analyzer.analyze_frames(swing_frames[:31], degraded_config)

    assert not result.authenticity.is_valid
    assert result.diagnostics.quality_tier == "degraded"
    assert any("authenticity" in w for w in result.diagnostics.warnings)


def test_analysis_is_repeatable(analyzer, swing_frames):
    """Analyzing the same frames twice gives identical results."""
    assert analyzer.analyze_frames(swing_frames) == analyzer.analyze_frames(swing_frames)


def test_parallel_metrics_match_serial(swing_frames):
    """Running calculators on a thread pool changes nothing."""
    serial = SwingAnalyzer(AnalysisConfig(parallel_metrics=False)).analyze_frames(swing_frames)
    parallel = SwingAnalyzer(AnalysisConfig(parallel_metrics=True)).analyze_frames(swing_frames)

    assert parallel.metrics == serial.metrics
    assert parallel.grade == serial.grade


def test_per_call_config_overrides_default(swing_frames):
    """A config passed to analyze_frames wins over the analyzer's own."""
    analyzer = SwingAnalyzer(AnalysisConfig(quality_mode=QualityMode.DEGRADED))
    strict = dataclasses.replace(analyzer.config, quality_mode=QualityMode.STRICT)

    with pytest.raises(InsufficientData):
        analyzer.analyze_frames(swing_frames[:2], strict)


def test_validate_authenticity_never_raises_for_low_score(analyzer, swing_frames):
    """Authenticity-only checks report a failing score instead of raising."""
    report = analyzer.validate_authenticity(swing_frames[:31])

    assert not report.is_valid
    assert report.results["motion"] is False


def test_empty_input_raises(degraded_config):
    """No frames is an error in every mode."""
    with pytest.raises(InsufficientData):
        SwingAnalyzer(degraded_config).analyze_frames([])
