# trackanalytics/analyze/models.py
"""
Value objects shared by the analysis engines.

Every object here is frozen: tracks are immutable snapshots, and results are
computed once per analysis call, consumed and discarded.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from trackanalytics.errors import InvalidTrackError


@dataclass(frozen=True)
class TrackPoint:
    """One GPS sample. Elevation is meters, time is a datetime."""

    lat: float
    lon: float
    ele: Optional[float] = None
    time: Optional[dt.datetime] = None

    def __post_init__(self) -> None:
        for label, value, limit in (("latitude", self.lat, 90.0), ("longitude", self.lon, 180.0)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidTrackError(f"{label} must be a number, got {value!r}")
            if not math.isfinite(value) or abs(value) > limit:
                raise InvalidTrackError(f"{label} out of range: {value!r}")


@dataclass(frozen=True)
class Track:
    """
    A named, ordered, non-empty sequence of points in recording order.

    Recording order is not necessarily time order; timestamps may be missing
    or non-monotonic.
    """

    name: str
    points: tuple[TrackPoint, ...]

    def __post_init__(self) -> None:
        points = tuple(self.points)
        if not points:
            raise InvalidTrackError(f"track {self.name!r} has no points")
        for i, p in enumerate(points):
            if not isinstance(p, TrackPoint):
                raise InvalidTrackError(f"track {self.name!r}: point {i} is not a TrackPoint")

        # Aware and naive datetimes cannot be compared, so a track cannot mix them.
        kinds = {p.time.tzinfo is not None for p in points if p.time is not None}
        if len(kinds) > 1:
            raise InvalidTrackError(
                f"track {self.name!r} mixes timezone-aware and naive timestamps"
            )
        object.__setattr__(self, "points", points)

    @classmethod
    def from_points(cls, name: str, points: Sequence[TrackPoint]) -> Track:
        return cls(name=name, points=tuple(points))

    @property
    def has_elevation(self) -> bool:
        return any(p.ele is not None for p in self.points)

    @property
    def has_timestamps(self) -> bool:
        return any(p.time is not None for p in self.points)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class ElevationMetrics:
    min_elevation: float
    max_elevation: float
    total_ascent: float
    total_descent: float

    @property
    def elevation_range(self) -> float:
        return self.max_elevation - self.min_elevation


@dataclass(frozen=True)
class SpeedMetrics:
    """Speeds in km/h; durations as timedeltas."""

    duration: dt.timedelta
    avg_speed_kmh: float
    max_speed_kmh: float
    moving_time: dt.timedelta
    avg_moving_speed_kmh: float


@dataclass(frozen=True)
class TrackMetrics:
    track_name: str
    total_distance_km: float
    point_count: int
    elevation: Optional[ElevationMetrics] = None
    speed: Optional[SpeedMetrics] = None


@dataclass(frozen=True)
class DirectionalOverlap:
    """Overlap of one track against the other, measured along the first track."""

    total_km: float
    overlap_km: float
    overlap_percent: float
    unique_km: float


@dataclass(frozen=True)
class OverlapResult:
    track_a: DirectionalOverlap
    track_b: DirectionalOverlap
    shared_distance_km: float
    """Average of both directions' overlap lengths, an estimate rather than an exact shared length."""


@dataclass(frozen=True)
class ComparisonResult:
    track_a: Track
    track_b: Track
    metrics_a: TrackMetrics
    metrics_b: TrackMetrics
    overlap: OverlapResult
