from api.schemas import PoseFrameSchema


def payload(frames, **config):
    body = {"frames": [PoseFrameSchema.from_domain(f).model_dump() for f in frames]}
    if config:
        body["config"] = config
    return body


def test_root(client):
    """Root endpoint describes the service."""
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/api/health"


def test_health(client):
    """Health check reports status and default quality mode."""
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["quality_mode"] == "strict"


def test_analyze_frames(client, swing_frames):
    """A full swing returns phases, metrics and a grade."""
    response = client.post("/api/analysis/frames", json=payload(swing_frames))

    assert response.status_code == 200
    data = response.json()
    assert [p["name"] for p in data["phases"]] == [
        "backswing",
        "top",
        "downswing",
        "impact",
        "follow_through",
    ]
    assert data["diagnostics"]["segmentation_path"] == "data_driven"
    assert data["metrics"]["tempo"]["provenance"] == "measured"
    assert 0 <= data["grade"]["overall_score"] <= 100
    assert data["authenticity"]["is_valid"] is True


def test_too_few_frames_is_unprocessable(client, swing_frames):
    """Strict analysis of two frames fails with structured detail."""
    response = client.post("/api/analysis/frames", json=payload(swing_frames[:2]))

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "insufficient_data"
    assert detail["recoverable"] is True
    assert detail["frame_count"] == 2


def test_degraded_mode_per_request(client, swing_frames):
    """The same two frames succeed when the request asks for degraded mode."""
    response = client.post(
        "/api/analysis/frames",
        json=payload(swing_frames[:2], quality_mode="degraded"),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["diagnostics"]["quality_tier"] == "degraded"
    assert data["grade"]["provenance"] == "degraded"


def test_invalid_swing_is_unprocessable(client, swing_frames):
    """Hands that never come down fail the authenticity check."""
    response = client.post("/api/analysis/frames", json=payload(swing_frames[:31]))

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "invalid_swing_motion"
    assert "motion" in detail["failed_tests"]


def test_unsupported_club_is_bad_request(client, swing_frames):
    """An unknown club type is a 400 naming the field."""
    response = client.post(
        "/api/analysis/frames",
        json=payload(swing_frames, club_type="putter"),
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "configuration_error"
    assert detail["field"] == "club_type"


def test_malformed_frame_is_rejected(client, swing_frames):
    """Frames without 33 landmarks fail request validation."""
    body = payload(swing_frames[:12])
    body["frames"][0]["landmarks"] = body["frames"][0]["landmarks"][:5]

    response = client.post("/api/analysis/frames", json=body)

    assert response.status_code == 422


def test_validate_reports_failing_score(client, swing_frames):
    """The authenticity endpoint returns a failing report, not an error."""
    response = client.post("/api/analysis/validate", json=payload(swing_frames[:31]))

    assert response.status_code == 200
    data = response.json()
    assert data["is_valid"] is False
    assert data["results"]["motion"] is False
    assert data["score"] < 60


def test_validate_passing_swing(client, swing_frames):
    """A clean swing passes the authenticity endpoint."""
    response = client.post("/api/analysis/validate", json=payload(swing_frames))

    assert response.status_code == 200
    assert response.json()["is_valid"] is True
