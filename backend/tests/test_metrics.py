import numpy as np
import pytest

from swing_core.domain import (
    AnalysisConfig,
    BodyPart,
    ClubType,
    PhaseName,
    Provenance,
    Segmentation,
    SegmentationPath,
    SwingPhase,
)
from swing_core.services.metrics import (
    POWER_BENCHMARKS,
    TEMPO_RATIO_BAND,
    calculate_consistency,
    calculate_power,
    calculate_rotation,
    calculate_swing_plane,
    calculate_tempo,
    calculate_weight_transfer,
    key_impact_frame,
    key_top_frame,
)
from swing_core.services.plausibility import BOUNDS

from conftest import FRAME_INTERVAL_MS, make_frame, metric_context


def phase(name, start, end, frames):
    start_time = frames[start].timestamp_ms
    end_time = frames[end].timestamp_ms
    return SwingPhase(
        name=name,
        start_frame=start,
        end_frame=end,
        start_time=start_time,
        end_time=end_time,
        duration=end_time - start_time,
        confidence=0.9,
    )


def test_quarter_turn_of_shoulders():
    """Shoulders turning from across the image to along z measure 90 degrees."""
    address = make_frame(0)
    turned = {
        BodyPart.LEFT_SHOULDER: (0.50, 0.35, -0.10),
        BodyPart.RIGHT_SHOULDER: (0.50, 0.35, 0.10),
    }
    frames = [address, make_frame(1, turned), make_frame(2, turned)]
    segmentation = Segmentation(
        phases=(
            phase(PhaseName.BACKSWING, 0, 0, frames),
            phase(PhaseName.TOP, 1, 1, frames),
            phase(PhaseName.DOWNSWING, 2, 2, frames),
        ),
        path=SegmentationPath.DATA_DRIVEN,
    )

    rotation = calculate_rotation(metric_context(frames, segmentation))

    assert rotation.shoulder_turn_deg == pytest.approx(90.0, abs=0.5)
    assert rotation.hip_turn_deg == pytest.approx(0.0, abs=0.5)
    assert rotation.x_factor_deg == pytest.approx(90.0, abs=0.5)
    assert rotation.provenance is Provenance.MEASURED


def test_tempo_of_synthetic_swing(swing_frames):
    """Backswing takes longer than downswing on the synthetic swing."""
    ctx = metric_context(swing_frames)

    tempo = calculate_tempo(ctx)

    assert key_top_frame(ctx) in (29, 30)
    assert key_impact_frame(ctx) == 48
    assert tempo.backswing_time > tempo.downswing_time > 0
    assert 0 < tempo.ratio < 10
    assert tempo.clamped_ratio == tempo.ratio
    assert not tempo.clamped
    assert tempo.provenance is Provenance.MEASURED


def test_tempo_without_phases_is_degraded(swing_frames):
    """Missing key phases give an empty, degraded tempo."""
    segmentation = Segmentation(
        phases=(phase(PhaseName.ADDRESS, 0, 59, swing_frames),),
        path=SegmentationPath.FALLBACK,
    )

    tempo = calculate_tempo(metric_context(swing_frames, segmentation))

    assert tempo.ratio is None
    assert tempo.backswing_time is None
    assert tempo.provenance is Provenance.DEGRADED


def test_degraded_context_halves_confidence(swing_frames):
    """The same clip analyzed as degraded carries half the confidence."""
    normal = calculate_tempo(metric_context(swing_frames))
    degraded = calculate_tempo(metric_context(swing_frames, degraded=True))

    assert degraded.confidence == pytest.approx(normal.confidence * 0.5)
    assert degraded.provenance is Provenance.DEGRADED


def test_weight_transfer_key_frames(swing_frames):
    """Weight is measured at address, top, impact and finish."""
    metrics = calculate_weight_transfer(metric_context(swing_frames))

    for distribution in (metrics.address, metrics.top, metrics.impact, metrics.finish):
        assert distribution is not None
        assert distribution.left_pct + distribution.right_pct == pytest.approx(100.0)
    assert metrics.top.phase is PhaseName.TOP
    assert metrics.impact.phase is PhaseName.IMPACT
    assert metrics.finish.phase is PhaseName.FOLLOW_THROUGH


def test_swing_plane_range(swing_frames):
    """Plane angle and smoothness stay inside their ranges."""
    plane = calculate_swing_plane(metric_context(swing_frames))

    assert 0.0 <= plane.angle_deg <= 90.0
    assert plane.deviation_deg == pytest.approx(abs(plane.angle_deg - 60.0))
    assert 0.0 <= plane.smoothness <= 1.0


def test_power_uses_club_benchmark(swing_frames):
    """Power peaks in the downswing and reports the club's benchmark."""
    config = AnalysisConfig(club_type=ClubType.DRIVER)
    ctx = metric_context(swing_frames, config=config)

    power = calculate_power(ctx)

    assert power.speed_estimate > 0
    assert power.benchmark_mph == POWER_BENCHMARKS[ClubType.DRIVER][config.benchmark_profile]
    downswing = ctx.phase(PhaseName.DOWNSWING)
    impact = ctx.phase(PhaseName.IMPACT)
    assert downswing.start_frame <= power.peak_frame <= impact.end_frame


def test_still_head_is_consistent(swing_frames):
    """A nose that never moves scores perfect consistency."""
    consistency = calculate_consistency(metric_context(swing_frames))

    assert consistency.variance == pytest.approx(0.0, abs=1e-12)
    assert consistency.variance_score == pytest.approx(1.0)


def test_rotation_measures_from_address_key_frame():
    """Turn is measured from the middle of Address, not from the first frame."""
    turned = {
        BodyPart.LEFT_SHOULDER: (0.50, 0.35, -0.10),
        BodyPart.RIGHT_SHOULDER: (0.50, 0.35, 0.10),
    }
    frames = [make_frame(0, turned)] + [make_frame(i) for i in range(1, 6)]
    segmentation = Segmentation(
        phases=(
            phase(PhaseName.ADDRESS, 0, 2, frames),
            phase(PhaseName.BACKSWING, 3, 3, frames),
            phase(PhaseName.TOP, 4, 4, frames),
            phase(PhaseName.DOWNSWING, 5, 5, frames),
        ),
        path=SegmentationPath.DATA_DRIVEN,
    )

    rotation = calculate_rotation(metric_context(frames, segmentation))

    assert rotation.shoulder_turn_deg == pytest.approx(0.0, abs=0.5)


def test_tempo_reports_total_time(swing_frames):
    """Total time spans the whole clip in seconds."""
    tempo = calculate_tempo(metric_context(swing_frames))

    assert tempo.total_time == pytest.approx(59 * FRAME_INTERVAL_MS / 1000.0)


def test_tempo_band_floor_matches_plausibility():
    """Scoring never clamps up a ratio that plausibility would accept."""
    assert TEMPO_RATIO_BAND[0] == BOUNDS["tempo"]["ratio"][0]


def test_fast_backswing_clamped_in_degraded_run(swing_frames):
    """A ratio below the floor is clamped, and the clamp is flagged."""
    segmentation = Segmentation(
        phases=(
            phase(PhaseName.BACKSWING, 0, 9, swing_frames),
            phase(PhaseName.TOP, 10, 10, swing_frames),
            phase(PhaseName.DOWNSWING, 11, 40, swing_frames),
            phase(PhaseName.IMPACT, 41, 41, swing_frames),
        ),
        path=SegmentationPath.FALLBACK,
    )

    tempo = calculate_tempo(metric_context(swing_frames, segmentation, degraded=True))

    assert tempo.ratio < 1.0
    assert tempo.clamped_ratio == TEMPO_RATIO_BAND[0]
    assert tempo.clamped


def test_weight_for_every_frame_sums_to_100(swing_frames):
    """Each frame carries its own split, and key frames are drawn from it."""
    ctx = metric_context(swing_frames)

    metrics = calculate_weight_transfer(ctx)

    assert len(metrics.frames) == len(swing_frames)
    for distribution in metrics.frames:
        assert distribution.left_pct + distribution.right_pct == pytest.approx(100.0, abs=1e-6)
    assert metrics.top == metrics.frames[key_top_frame(ctx)]
    assert metrics.finish == metrics.frames[-1]


def test_overall_balance_summarizes_every_frame(swing_frames):
    """Average stability and largest shifts come from the whole series."""
    metrics = calculate_weight_transfer(metric_context(swing_frames))

    balances = [d.balance for d in metrics.frames]
    assert metrics.overall.average_stability == pytest.approx(
        np.mean([b.stability for b in balances])
    )
    assert metrics.overall.max_lateral_shift == max(abs(b.lateral_offset) for b in balances)
    assert metrics.overall.max_forward_shift == max(abs(b.forward_offset) for b in balances)


def test_degraded_run_marks_each_distribution(swing_frames):
    """No per-frame distribution claims to be measured in a degraded run."""
    frames = [swing_frames[0], swing_frames[30]]

    metrics = calculate_weight_transfer(metric_context(frames, degraded=True))

    assert metrics.provenance is Provenance.DEGRADED
    for distribution in (metrics.address, metrics.top, metrics.impact, metrics.finish):
        if distribution is not None:
            assert distribution.provenance is Provenance.DEGRADED
    for distribution in metrics.frames:
        assert distribution.provenance is Provenance.DEGRADED


def test_degraded_run_halves_distribution_confidence(swing_frames):
    """Per-frame confidence is reduced the same way as the category."""
    normal = calculate_weight_transfer(metric_context(swing_frames))
    degraded = calculate_weight_transfer(metric_context(swing_frames, degraded=True))

    for before, after in zip(normal.frames, degraded.frames):
        assert after.confidence == pytest.approx(before.confidence * 0.5)
        assert after.left_pct == before.left_pct
    assert degraded.confidence == pytest.approx(normal.confidence * 0.5)
