# trackanalytics/analyze/track.py
"""
Track analysis entry points for trackanalytics

Everything here is a pure function of its inputs: no I/O, no shared state,
and the same Track always produces the same result. That makes it safe to run
on a worker thread or process without locking.
"""

from __future__ import annotations

from typing import Optional

from trackanalytics.analyze.distance import total_distance
from trackanalytics.analyze.elevation import elevation_metrics
from trackanalytics.analyze.models import ComparisonResult, Track, TrackMetrics
from trackanalytics.analyze.overlap import analyze_overlap
from trackanalytics.analyze.speed import speed_metrics
from trackanalytics.config import AnalysisSettings


def calculate_metrics(track: Track, settings: Optional[AnalysisSettings] = None) -> TrackMetrics:
    """Distance, point count, and (when the data allows) elevation and speed metrics."""
    settings = settings or AnalysisSettings()

    return TrackMetrics(
        track_name=track.name,
        total_distance_km=total_distance(track),
        point_count=len(track.points),
        elevation=elevation_metrics(track, settings.elevation_threshold_m),
        speed=speed_metrics(
            track,
            min_moving_speed_kmh=settings.min_moving_speed_kmh,
            max_speed_kmh=settings.max_speed_kmh,
        ),
    )


def compare_tracks(
    track_a: Track,
    track_b: Track,
    settings: Optional[AnalysisSettings] = None,
) -> ComparisonResult:
    """Metrics for both tracks plus their route overlap."""
    settings = settings or AnalysisSettings()

    return ComparisonResult(
        track_a=track_a,
        track_b=track_b,
        metrics_a=calculate_metrics(track_a, settings),
        metrics_b=calculate_metrics(track_b, settings),
        overlap=analyze_overlap(track_a, track_b, settings.overlap_threshold_m),
    )
