import numpy as np
import pytest

from swing_core.domain import BodyPart
from swing_core.services import TrajectoryExtractor, club_head, hands_center

from conftest import hands_at, make_frame

WRISTS = (BodyPart.LEFT_WRIST, BodyPart.RIGHT_WRIST)


def test_extracts_every_visible_frame(swing_frames):
    """A fully visible clip yields one point per frame."""
    trajectory = TrajectoryExtractor.extract(swing_frames, BodyPart.LEFT_WRIST)

    assert trajectory.name == "left_wrist"
    assert len(trajectory) == 60
    assert trajectory.coverage == 1.0
    assert trajectory.breaks == ()
    assert trajectory.confidence == 1.0


def test_timestamps_strictly_increase(swing_frames):
    """Trajectory samples are ordered by time."""
    trajectory = TrajectoryExtractor.extract(swing_frames, hands_center, name="hands")

    assert np.all(np.diff(trajectory.timestamps_s()) > 0)


def test_short_gap_is_interpolated():
    """Two missing frames are filled linearly and flagged."""
    frames = [make_frame(0, hands_at(0.3, 0.5))]
    frames += [make_frame(i, hands_at(0.3, 0.5), hidden=WRISTS) for i in (1, 2)]
    frames.append(make_frame(3, hands_at(0.6, 0.5)))

    trajectory = TrajectoryExtractor.extract(frames, hands_center, name="hands")

    assert len(trajectory) == 4
    assert [p.interpolated for p in trajectory.points] == [False, True, True, False]
    assert [p.frame_index for p in trajectory.points] == [0, 1, 2, 3]
    assert trajectory.points[1].x == pytest.approx(0.4)
    assert trajectory.points[2].x == pytest.approx(0.5)
    assert trajectory.breaks == ()


def test_long_gap_becomes_break():
    """Gaps longer than the fill limit stay as breaks."""
    frames = [make_frame(0)]
    frames += [make_frame(i, hidden=WRISTS) for i in range(1, 5)]
    frames.append(make_frame(5))

    trajectory = TrajectoryExtractor.extract(frames, BodyPart.LEFT_WRIST)

    assert len(trajectory) == 2
    assert trajectory.breaks == ((1, 4),)
    assert trajectory.confidence == pytest.approx(2 / 6 - 0.1)


def test_non_increasing_timestamp_is_dropped():
    """A sample that goes back in time is discarded."""
    frames = [
        make_frame(0, timestamp_ms=0.0),
        make_frame(1, timestamp_ms=33.0),
        make_frame(2, timestamp_ms=33.0),
        make_frame(3, timestamp_ms=99.0),
    ]

    trajectory = TrajectoryExtractor.extract(frames, BodyPart.NOSE)

    assert [p.timestamp_ms for p in trajectory.points] == [0.0, 33.0, 99.0]
    assert [p.frame_index for p in trajectory.points] == [0, 1, 3]
    assert np.all(np.diff(trajectory.timestamps_s()) > 0)


def test_first_velocity_is_zero(swing_frames):
    """Speed is a backward difference, so the first sample is zero."""
    trajectory = TrajectoryExtractor.extract(swing_frames, hands_center, name="hands")

    speeds = trajectory.velocities()
    assert speeds[0] == 0.0
    assert np.all(speeds[1:] > 0)
    assert trajectory.accelerations()[0] == 0.0


def test_no_visible_samples_gives_empty_trajectory():
    """An invisible landmark yields an empty trajectory, not an error."""
    frames = [make_frame(i, hidden=(BodyPart.NOSE,)) for i in range(5)]

    trajectory = TrajectoryExtractor.extract(frames, BodyPart.NOSE)

    assert trajectory.is_empty
    assert trajectory.coverage == 0.0
    assert trajectory.velocities().size == 0


def test_club_head_extends_past_hands():
    """The club head sits 1.5 shoulder widths from the hands."""
    frame = make_frame(0, hands_at(0.5, 0.55))

    x, y, _ = club_head(frame, 0.5)

    assert x == pytest.approx(0.5 + 1.5 * (0.40 - 0.60))
    assert y == pytest.approx(0.55)


def test_point_at_looks_up_source_frame(swing_frames):
    """Points are found by source frame index."""
    trajectory = TrajectoryExtractor.extract(swing_frames, BodyPart.NOSE)

    assert trajectory.point_at(10).frame_index == 10
    assert trajectory.point_at(999) is None


def test_fill_in_uses_the_missing_frame_timestamp():
    """An interpolated point keeps the source frame's own time."""
    frames = [
        make_frame(0, hands_at(0.3, 0.5), timestamp_ms=0.0),
        make_frame(1, hands_at(0.3, 0.5), hidden=WRISTS, timestamp_ms=25.0),
        make_frame(2, hands_at(0.7, 0.5), timestamp_ms=100.0),
    ]

    trajectory = TrajectoryExtractor.extract(frames, hands_center, name="hands")

    filled = trajectory.points[1]
    assert filled.interpolated
    assert filled.timestamp_ms == 25.0
    assert filled.x == pytest.approx(0.4)
