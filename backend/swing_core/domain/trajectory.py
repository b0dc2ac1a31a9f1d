"""
Trajectory Domain Models

Time series of one tracked landmark or derived point across a clip.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class TrajectoryPoint:
    """Position of one tracked or derived point in a single frame."""
    x: float
    y: float
    z: float
    timestamp_ms: float
    frame_index: int
    interpolated: bool = False


@dataclass(frozen=True)
class Trajectory:
    """
    Ordered positions of one point, strictly increasing by timestamp.

    Attributes:
        name: What is being tracked (e.g. "left_wrist", "club_head")
        points: Samples, one per frame at most
        total_frames: Length of the clip the trajectory was taken from
        breaks: (first_missing, last_missing) frame positions of gaps
            too long to interpolate
    """
    name: str
    points: Tuple[TrajectoryPoint, ...]
    total_frames: int
    breaks: Tuple[Tuple[int, int], ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def coverage(self) -> float:
        """Fraction of clip frames that have a (measured or filled) sample."""
        if self.total_frames <= 0:
            return 0.0
        return min(1.0, len(self.points) / self.total_frames)

    @property
    def confidence(self) -> float:
        """Coverage penalized by every unfilled gap."""
        penalty = 0.1 * len(self.breaks)
        return float(max(0.0, min(1.0, self.coverage - penalty)))

    def as_array(self) -> np.ndarray:
        """Nx3 array of positions."""
        if not self.points:
            return np.zeros((0, 3))
        return np.array([[p.x, p.y, p.z] for p in self.points], dtype=float)

    def timestamps_s(self) -> np.ndarray:
        return np.array([p.timestamp_ms for p in self.points], dtype=float) / 1000.0

    def point_at(self, frame_index: int) -> Optional[TrajectoryPoint]:
        """Sample for a given source frame index, if one exists."""
        for point in self.points:
            if point.frame_index == frame_index:
                return point
        return None

    def velocities(self) -> np.ndarray:
        """
        Instantaneous speed per sample (normalized units per second).

        Backward difference against the previous sample; the first
        sample has speed zero.
        """
        speeds = np.zeros(len(self.points))
        if len(self.points) < 2:
            return speeds
        positions = self.as_array()
        times = self.timestamps_s()
        distances = np.linalg.norm(np.diff(positions, axis=0), axis=1)
        dt = np.diff(times)
        speeds[1:] = np.where(dt > 0, distances / np.where(dt > 0, dt, 1.0), 0.0)
        return speeds

    def accelerations(self) -> np.ndarray:
        """
        Rate of change of speed per sample, using the previous two samples.

        Zero for the first sample (and the second, which only has one
        speed to compare against a zero start).
        """
        accel = np.zeros(len(self.points))
        if len(self.points) < 3:
            return accel
        speeds = self.velocities()
        times = self.timestamps_s()
        dt = np.diff(times)
        dv = np.diff(speeds)
        accel[1:] = np.where(dt > 0, dv / np.where(dt > 0, dt, 1.0), 0.0)
        accel[1] = 0.0
        return accel
