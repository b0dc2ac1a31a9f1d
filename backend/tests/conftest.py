import math

import pytest
from fastapi.testclient import TestClient

from main import app
from swing_core.domain import (
    AnalysisConfig,
    BodyPart,
    CameraAngle,
    CameraDistance,
    CameraView,
    NUM_LANDMARKS,
    PoseFrame,
    PoseLandmark,
    QualityMode,
)
from swing_core.services import MetricContext, PhaseSegmenter, SwingAnalyzer

FRAME_INTERVAL_MS = 33.33

# Golfer facing the camera: their left side is on the image right.
STANDING_POSE = {
    BodyPart.NOSE: (0.50, 0.20, 0.0),
    BodyPart.LEFT_EYE_INNER: (0.51, 0.19, 0.0),
    BodyPart.LEFT_EYE: (0.52, 0.19, 0.0),
    BodyPart.LEFT_EYE_OUTER: (0.53, 0.19, 0.0),
    BodyPart.RIGHT_EYE_INNER: (0.49, 0.19, 0.0),
    BodyPart.RIGHT_EYE: (0.48, 0.19, 0.0),
    BodyPart.RIGHT_EYE_OUTER: (0.47, 0.19, 0.0),
    BodyPart.LEFT_EAR: (0.54, 0.20, 0.0),
    BodyPart.RIGHT_EAR: (0.46, 0.20, 0.0),
    BodyPart.MOUTH_LEFT: (0.51, 0.23, 0.0),
    BodyPart.MOUTH_RIGHT: (0.49, 0.23, 0.0),
    BodyPart.LEFT_SHOULDER: (0.60, 0.35, 0.0),
    BodyPart.RIGHT_SHOULDER: (0.40, 0.35, 0.0),
    BodyPart.LEFT_ELBOW: (0.60, 0.45, 0.0),
    BodyPart.RIGHT_ELBOW: (0.40, 0.45, 0.0),
    BodyPart.LEFT_WRIST: (0.51, 0.55, 0.0),
    BodyPart.RIGHT_WRIST: (0.49, 0.55, 0.0),
    BodyPart.LEFT_PINKY: (0.51, 0.57, 0.0),
    BodyPart.RIGHT_PINKY: (0.49, 0.57, 0.0),
    BodyPart.LEFT_INDEX: (0.51, 0.57, 0.0),
    BodyPart.RIGHT_INDEX: (0.49, 0.57, 0.0),
    BodyPart.LEFT_THUMB: (0.51, 0.56, 0.0),
    BodyPart.RIGHT_THUMB: (0.49, 0.56, 0.0),
    BodyPart.LEFT_HIP: (0.56, 0.60, 0.0),
    BodyPart.RIGHT_HIP: (0.44, 0.60, 0.0),
    BodyPart.LEFT_KNEE: (0.57, 0.75, 0.0),
    BodyPart.RIGHT_KNEE: (0.43, 0.75, 0.0),
    BodyPart.LEFT_ANKLE: (0.58, 0.90, 0.0),
    BodyPart.RIGHT_ANKLE: (0.42, 0.90, 0.0),
    BodyPart.LEFT_HEEL: (0.58, 0.92, 0.0),
    BodyPart.RIGHT_HEEL: (0.42, 0.92, 0.0),
    BodyPart.LEFT_FOOT_INDEX: (0.60, 0.93, 0.0),
    BodyPart.RIGHT_FOOT_INDEX: (0.40, 0.93, 0.0),
}


def make_frame(index, overrides=None, visibility=1.0, hidden=(), timestamp_ms=None):
    """
    Build a PoseFrame from the standing pose.

    Args:
        index: Frame index (also sets the timestamp unless given)
        overrides: BodyPart -> (x, y, z) replacing the standing position
        visibility: Visibility for every landmark
        hidden: Body parts reported with zero visibility
    """
    positions = dict(STANDING_POSE)
    positions.update(overrides or {})
    landmarks = []
    for i in range(NUM_LANDMARKS):
        x, y, z = positions[BodyPart(i)]
        vis = 0.0 if BodyPart(i) in hidden else visibility
        landmarks.append(PoseLandmark(x=x, y=y, z=z, visibility=vis))
    return PoseFrame(
        landmarks=tuple(landmarks),
        timestamp_ms=index * FRAME_INTERVAL_MS if timestamp_ms is None else timestamp_ms,
        frame_index=index,
    )


def hands_at(x, y):
    """Wrist overrides placing the hands center at (x, y)."""
    return {
        BodyPart.LEFT_WRIST: (x + 0.01, y, 0.0),
        BodyPart.RIGHT_WRIST: (x - 0.01, y, 0.0),
    }


def make_swing(n=60):
    """
    Synthetic swing: hands rise once and fall once (sinusoid) while
    sweeping across the body.
    """
    frames = []
    for i in range(n):
        progress = i / (n - 1)
        y = 0.5 - 0.2 * math.sin(math.pi * progress)
        x = 0.35 + 0.3 * progress
        frames.append(make_frame(i, hands_at(x, y)))
    return frames


@pytest.fixture
def swing_frames():
    return make_swing()


@pytest.fixture
def static_frames():
    return [make_frame(i) for i in range(60)]


@pytest.fixture
def strict_config():
    return AnalysisConfig()


@pytest.fixture
def degraded_config():
    return AnalysisConfig(quality_mode=QualityMode.DEGRADED)


@pytest.fixture(scope="function")
def client():
    with TestClient(app) as test_client:
        yield test_client


SIDE_VIEW = CameraAngle(
    kind=CameraView.SIDE_VIEW,
    rotation_deg=90.0,
    tilt_deg=0.0,
    distance=CameraDistance.MEDIUM,
    confidence=0.9,
)


def metric_context(frames, segmentation=None, config=None, degraded=False):
    """MetricContext over a clip, segmenting it when no segmentation is given."""
    trajectories = SwingAnalyzer.extract_trajectories(frames, 0.5)
    if segmentation is None:
        segmentation = PhaseSegmenter.segment(frames, trajectories["hands"])
    return MetricContext(
        frames=frames,
        segmentation=segmentation,
        trajectories=trajectories,
        camera=SIDE_VIEW,
        config=config or AnalysisConfig(),
        degraded=degraded,
    )
