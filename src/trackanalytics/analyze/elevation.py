# trackanalytics/analyze/elevation.py
"""
Elevation gain/loss with a fixed deadband.

Raw GPS and barometric elevation jitters by a meter or two between samples.
Summing every difference turns that jitter into phantom climbing, so a change
only counts once it moves at least `threshold_m` away from the last counted
sample (the reference). Sub-threshold wiggles neither count nor move the
reference, which lets a genuine climb interrupted by small dips still add up.
"""

from __future__ import annotations

from typing import Optional

from trackanalytics.analyze.distance import cumulative_distances
from trackanalytics.analyze.models import ElevationMetrics, Track

# Minimum elevation change (m) treated as real
ELEVATION_THRESHOLD_M = 2.0


def elevation_changes(
    elevations: list[float],
    threshold_m: float = ELEVATION_THRESHOLD_M,
) -> tuple[float, float]:
    """
    Total ascent and descent over an elevation series.

    Returns:
        (ascent_m, descent_m), both non-negative
    """
    if not elevations:
        return 0.0, 0.0

    ascent = 0.0
    descent = 0.0
    reference = elevations[0]

    for ele in elevations[1:]:
        diff = ele - reference
        if abs(diff) < threshold_m:
            continue
        if diff > 0:
            ascent += diff
        else:
            descent += -diff
        reference = ele

    return ascent, descent


def elevation_metrics(
    track: Track,
    threshold_m: float = ELEVATION_THRESHOLD_M,
) -> Optional[ElevationMetrics]:
    """
    Elevation extrema and deadband-filtered ascent/descent.

    Points without elevation are skipped, not interpolated. Returns None when
    no point carries elevation, or when the track is a single point.
    """
    if len(track.points) < 2:
        return None
    elevations = [p.ele for p in track.points if p.ele is not None]
    if not elevations:
        return None

    ascent, descent = elevation_changes(elevations, threshold_m)

    return ElevationMetrics(
        min_elevation=min(elevations),
        max_elevation=max(elevations),
        total_ascent=ascent,
        total_descent=descent,
    )


def elevation_profile(track: Track) -> list[tuple[float, float]]:
    """(cumulative_km, elevation_m) for each point that has an elevation."""
    dists = cumulative_distances(track)
    return [(d, p.ele) for d, p in zip(dists, track.points) if p.ele is not None]
