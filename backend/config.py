"""
Service Settings

Server-wide analysis defaults, read from the environment (prefix SWING_)
or a .env file. Requests can override any of them per call.
"""

from pydantic_settings import BaseSettings

from swing_core.domain import AnalysisConfig


class Settings(BaseSettings):
    app_name: str = "Swing Phase Analyzer API"
    version: str = "1.0.0"

    # Analysis defaults
    quality_mode: str = "strict"
    min_frames: int = 10
    visibility_threshold: float = 0.5
    club_type: str = "iron"
    benchmark_profile: str = "amateur"
    parallel_metrics: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "SWING_"

    def to_analysis_config(self) -> AnalysisConfig:
        """Default AnalysisConfig for requests that do not send one."""
        return AnalysisConfig.from_dict({
            "quality_mode": self.quality_mode,
            "min_frames": self.min_frames,
            "visibility_threshold": self.visibility_threshold,
            "club_type": self.club_type,
            "benchmark_profile": self.benchmark_profile,
            "parallel_metrics": self.parallel_metrics,
        })


settings = Settings()
