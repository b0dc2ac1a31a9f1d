import pytest
from pydantic import ValidationError

from api.schemas import (
    AnalysisConfigSchema,
    GolfGradeSchema,
    PoseFrameSchema,
    SwingMetricsSchema,
    SwingPhaseSchema,
)
from swing_core.domain import (
    AnalysisConfig,
    BenchmarkProfile,
    ClubType,
    ConfigurationError,
    QualityMode,
)
from swing_core.services import SwingAnalyzer


@pytest.fixture
def analysis(swing_frames):
    return SwingAnalyzer().analyze_frames(swing_frames)


def test_grade_survives_json(analysis):
    """A grade serialized to JSON and back is unchanged."""
    payload = GolfGradeSchema.from_domain(analysis.grade).model_dump_json()

    restored = GolfGradeSchema.model_validate_json(payload).to_domain()

    assert restored == analysis.grade


def test_metrics_survive_json(analysis):
    """A metrics bundle serialized to JSON and back is unchanged."""
    payload = SwingMetricsSchema.from_domain(analysis.metrics).model_dump_json()

    restored = SwingMetricsSchema.model_validate_json(payload).to_domain()

    assert restored == analysis.metrics


def test_phases_survive_json(analysis):
    """Phases keep their names, frames and timing through JSON."""
    for phase in analysis.phases:
        payload = SwingPhaseSchema.from_domain(phase).model_dump_json()
        assert SwingPhaseSchema.model_validate_json(payload).to_domain() == phase


def test_pose_frame_round_trip(swing_frames):
    """Pose frames convert to the wire schema and back."""
    frame = swing_frames[10]

    assert PoseFrameSchema.from_domain(frame).to_domain() == frame


def test_pose_frame_needs_33_landmarks(swing_frames):
    """Frames with a different landmark count are rejected."""
    data = PoseFrameSchema.from_domain(swing_frames[0]).model_dump()
    data["landmarks"] = data["landmarks"][:32]

    with pytest.raises(ValidationError):
        PoseFrameSchema.model_validate(data)


def test_landmark_coordinates_are_normalized(swing_frames):
    """Coordinates outside 0-1 are rejected."""
    data = PoseFrameSchema.from_domain(swing_frames[0]).model_dump()
    data["landmarks"][0]["x"] = 1.5

    with pytest.raises(ValidationError):
        PoseFrameSchema.model_validate(data)


def test_config_merges_over_defaults():
    """Only the supplied options change."""
    defaults = AnalysisConfig(benchmark_profile=BenchmarkProfile.BEGINNER)

    config = AnalysisConfigSchema(club_type="Driver", quality_mode="degraded").to_domain(defaults)

    assert config.club_type is ClubType.DRIVER
    assert config.quality_mode is QualityMode.DEGRADED
    assert config.benchmark_profile is BenchmarkProfile.BEGINNER


def test_unknown_config_key_is_a_configuration_error():
    """Options the core does not know are refused."""
    schema = AnalysisConfigSchema.model_validate({"handedness": "left"})

    with pytest.raises(ConfigurationError) as exc_info:
        schema.to_domain(AnalysisConfig())

    assert exc_info.value.field == "handedness"


def test_unsupported_club_is_a_configuration_error():
    """An unknown club names the field and the accepted values."""
    with pytest.raises(ConfigurationError) as exc_info:
        AnalysisConfigSchema(club_type="putter").to_domain(AnalysisConfig())

    assert exc_info.value.field == "club_type"
    assert "iron" in exc_info.value.allowed
