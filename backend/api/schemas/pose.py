"""
Pose API Schemas

Pydantic models for pose-related API requests.
These define the JSON structure the pose-estimation frontend sends.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, List

from swing_core.domain import (
    AnalysisConfig,
    NUM_LANDMARKS,
    PoseFrame,
    PoseLandmark,
)


class LandmarkSchema(BaseModel):
    """
    Single body landmark.

    Coordinates are normalized (0.0 to 1.0).
    """
    x: float = Field(..., ge=0.0, le=1.0, description="Horizontal position (0=left, 1=right)")
    y: float = Field(..., ge=0.0, le=1.0, description="Vertical position (0=top, 1=bottom)")
    z: float = Field(0.0, description="Depth (negative=closer to camera)")
    visibility: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")

    class Config:
        json_schema_extra = {
            "example": {
                "x": 0.45,
                "y": 0.32,
                "z": -0.15,
                "visibility": 0.95,
            }
        }

    def to_domain(self) -> PoseLandmark:
        return PoseLandmark(x=self.x, y=self.y, z=self.z, visibility=self.visibility)

    @classmethod
    def from_domain(cls, landmark: PoseLandmark) -> "LandmarkSchema":
        return cls(x=landmark.x, y=landmark.y, z=landmark.z, visibility=landmark.visibility)


class PoseFrameSchema(BaseModel):
    """
    Pose for one video frame.

    Contains all 33 MediaPipe landmarks, in MediaPipe index order.
    """
    landmarks: List[LandmarkSchema] = Field(
        ...,
        min_length=NUM_LANDMARKS,
        max_length=NUM_LANDMARKS,
        description="33 body landmarks",
    )
    timestamp_ms: float = Field(..., ge=0, description="Video timestamp in milliseconds")
    frame_index: int = Field(..., ge=0, description="Frame number in the source video")

    class Config:
        json_schema_extra = {
            "example": {
                "landmarks": [
                    {"x": 0.5, "y": 0.2, "z": 0.0, "visibility": 0.99}
                ],
                "timestamp_ms": 1500.0,
                "frame_index": 45,
            }
        }

    def to_domain(self) -> PoseFrame:
        return PoseFrame(
            landmarks=tuple(lm.to_domain() for lm in self.landmarks),
            timestamp_ms=self.timestamp_ms,
            frame_index=self.frame_index,
        )

    @classmethod
    def from_domain(cls, frame: PoseFrame) -> "PoseFrameSchema":
        return cls(
            landmarks=[LandmarkSchema.from_domain(lm) for lm in frame.landmarks],
            timestamp_ms=frame.timestamp_ms,
            frame_index=frame.frame_index,
        )


class AnalysisConfigSchema(BaseModel):
    """
    Per-request analysis options. Omitted fields use the server defaults.

    Values are checked by the analysis core, so an unsupported club or
    profile is reported as a configuration error rather than a schema
    error.
    """
    quality_mode: Optional[str] = Field(None, description="strict | degraded")
    min_frames: Optional[int] = Field(None, description="Frames required for trustworthy metrics")
    visibility_threshold: Optional[float] = Field(None, description="Landmark visibility threshold")
    club_type: Optional[str] = Field(None, description="driver | iron | wedge")
    benchmark_profile: Optional[str] = Field(None, description="professional | amateur | beginner")
    parallel_metrics: Optional[bool] = Field(None, description="Run metric calculators concurrently")

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "quality_mode": "strict",
                "club_type": "driver",
                "benchmark_profile": "amateur",
            }
        }

    def to_domain(self, defaults: AnalysisConfig) -> AnalysisConfig:
        """Merge the supplied options over a default configuration."""
        values: Dict[str, Any] = defaults.to_dict()
        values.update(self.model_dump(exclude_none=True))
        return AnalysisConfig.from_dict(values)


class AnalyzeFramesRequest(BaseModel):
    """
    Request to analyze pre-extracted pose frames.

    Used when the frontend has already done pose detection.
    """
    frames: List[PoseFrameSchema] = Field(..., description="Ordered pose frames of one swing")
    config: Optional[AnalysisConfigSchema] = Field(None, description="Analysis options")

    def to_frames(self) -> List[PoseFrame]:
        return [frame.to_domain() for frame in self.frames]
