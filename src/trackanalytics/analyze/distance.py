# trackanalytics/analyze/distance.py
"""
Great-circle distance primitives.

This is the single place distances are computed; the elevation profile,
speed engine and overlap analyzer all build on pairwise_distance.
"""

from __future__ import annotations

import math

from trackanalytics.analyze.models import Track, TrackPoint

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def pairwise_distance(a: TrackPoint, b: TrackPoint) -> float:
    """
    Haversine distance between two points, in kilometers.

    Uses the atan2 form, which stays well-conditioned for both coincident
    and antipodal points (asin(sqrt(h)) breaks down once rounding pushes h past 1).
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lon = math.radians(b.lon - a.lon)

    h = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1) * math.cos(lat2) *
        math.sin(delta_lon / 2) ** 2
    )
    h = min(max(h, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def segment_distances(track: Track) -> list[float]:
    """Distance (km) of every consecutive point pair, in track order."""
    pts = track.points
    return [pairwise_distance(p0, p1) for p0, p1 in zip(pts, pts[1:])]


def total_distance(track: Track) -> float:
    """Sum of consecutive pairwise distances, 0.0 for a single point."""
    # Plain left-to-right accumulation, matching cumulative_distances bit for bit.
    total = 0.0
    for d in segment_distances(track):
        total += d
    return total


def cumulative_distances(track: Track) -> list[float]:
    """
    Running distance from the first point, one entry per point.

    The first entry is always 0.0 and the last equals total_distance(track).
    """
    out = [0.0]
    for d in segment_distances(track):
        out.append(out[-1] + d)
    return out
