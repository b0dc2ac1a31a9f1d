import pytest

from swing_core.domain import BodyPart, CameraDistance, CameraView
from swing_core.services import CameraAngleEstimator

from conftest import make_frame

TORSO = (
    BodyPart.LEFT_SHOULDER,
    BodyPart.RIGHT_SHOULDER,
    BodyPart.LEFT_HIP,
    BodyPart.RIGHT_HIP,
)


@pytest.mark.parametrize(
    "angle, expected",
    [
        (0.0, CameraView.FACE_ON),
        (14.9, CameraView.FACE_ON),
        (45.0, CameraView.DOWN_THE_LINE),
        (75.0, CameraView.SIDE_VIEW),
        (105.0, CameraView.SIDE_VIEW),
        (-90.0, CameraView.SIDE_VIEW),
        (140.0, CameraView.DIAGONAL),
    ],
)
def test_classify(angle, expected):
    """Torso angles map onto the four camera views."""
    assert CameraAngleEstimator.classify(angle) is expected


def test_upright_torso_is_side_view():
    """A vertical shoulder -> hip axis reads as a side view."""
    frames = [make_frame(i) for i in range(5)]

    camera = CameraAngleEstimator.estimate(frames)

    assert camera.kind is CameraView.SIDE_VIEW
    assert camera.rotation_deg == pytest.approx(90.0)
    assert camera.distance is CameraDistance.MEDIUM
    assert camera.confidence == pytest.approx(0.9)


def test_horizontal_torso_is_face_on():
    """Hips level with the shoulders give a face-on estimate."""
    overrides = {
        BodyPart.LEFT_HIP: (0.86, 0.37, 0.0),
        BodyPart.RIGHT_HIP: (0.74, 0.37, 0.0),
    }
    frames = [make_frame(i, overrides) for i in range(5)]

    camera = CameraAngleEstimator.estimate(frames)

    assert camera.kind is CameraView.FACE_ON


def test_wide_shoulders_are_close():
    """Shoulders spanning a third of the image mean a close camera."""
    overrides = {
        BodyPart.LEFT_SHOULDER: (0.70, 0.35, 0.0),
        BodyPart.RIGHT_SHOULDER: (0.30, 0.35, 0.0),
    }

    camera = CameraAngleEstimator.estimate([make_frame(0, overrides)])

    assert camera.distance is CameraDistance.CLOSE


def test_hidden_torso_is_unknown():
    """Without shoulders and hips the view is unknown with zero confidence."""
    frames = [make_frame(i, hidden=TORSO) for i in range(5)]

    camera = CameraAngleEstimator.estimate(frames)

    assert camera.kind is CameraView.UNKNOWN
    assert camera.confidence == 0.0
    assert camera.distance is CameraDistance.MEDIUM
