# trackanalytics/analyze/overlap.py
"""
Route overlap between two tracks.

Each segment of one track is classified as shared when its midpoint lies
within a threshold of any point of the other track, and as unique otherwise.
The two directions are measured independently; they can differ because the
tracks are sampled at different densities.

The midpoint is the plain average of the two endpoints' latitude and
longitude. At a threshold of tens of meters the difference from the true
geodesic midpoint is negligible, and results depend on this exact rule.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable, Optional

from trackanalytics.analyze.distance import EARTH_RADIUS_KM, pairwise_distance
from trackanalytics.analyze.models import DirectionalOverlap, OverlapResult, Track, TrackPoint
from trackanalytics.errors import AnalysisError

OVERLAP_THRESHOLD_M = 50.0

# Cells are padded so float rounding can never push an in-range point out of the searched block.
_CELL_PAD = 1.0 + 1e-6


def nearest_distance(point: TrackPoint, track: Track) -> float:
    """Distance (km) from `point` to the closest point of `track`, by full scan."""
    return min(pairwise_distance(point, p) for p in track.points)


def segment_midpoint(p0: TrackPoint, p1: TrackPoint) -> TrackPoint:
    return TrackPoint(lat=(p0.lat + p1.lat) / 2, lon=(p0.lon + p1.lon) / 2)


class PointGrid:
    """
    Bucket a track's points into latitude/longitude cells at least one
    threshold wide, so only the 3x3 block around a query needs scanning.

    A point within angular distance theta of a point at latitude phi differs
    from it by at most theta in latitude and asin(sin(theta)/cos(phi)) in
    longitude. Cells are sized from the largest |latitude| in the track, so
    the bound holds for every point. When that bound reaches the poles there
    is no useful longitude cell and `build` returns None.
    """

    def __init__(self, n_lat: int, n_lon: int) -> None:
        self.n_lat = n_lat
        self.n_lon = n_lon
        self.cell_lat = 180.0 / n_lat
        self.cell_lon = 360.0 / n_lon
        self.cells: dict[tuple[int, int], list[TrackPoint]] = defaultdict(list)

    @classmethod
    def build(cls, track: Track, threshold_km: float) -> Optional[PointGrid]:
        if threshold_km <= 0:
            return None
        theta = threshold_km / EARTH_RADIUS_KM
        if theta >= math.pi / 2:
            return None

        phi_max = math.radians(max(abs(p.lat) for p in track.points))
        ratio = math.sin(theta) / math.cos(phi_max) if math.cos(phi_max) > 0 else math.inf
        if ratio >= 1.0:
            return None

        lat_span = math.degrees(theta) * _CELL_PAD
        lon_span = math.degrees(math.asin(ratio)) * _CELL_PAD
        # Whole number of equal cells around the globe, each at least one span wide.
        grid = cls(
            n_lat=max(1, int(180.0 // lat_span)),
            n_lon=max(1, int(360.0 // lon_span)),
        )
        for p in track.points:
            grid.cells[grid.cell_of(p)].append(p)
        return grid

    def cell_of(self, p: TrackPoint) -> tuple[int, int]:
        i = min(self.n_lat - 1, int((p.lat + 90.0) // self.cell_lat))
        j = int((p.lon + 180.0) // self.cell_lon) % self.n_lon
        return i, j

    def candidates(self, p: TrackPoint) -> Iterable[TrackPoint]:
        i, j = self.cell_of(p)
        rows = {r for r in (i - 1, i, i + 1) if 0 <= r < self.n_lat}
        cols = {c % self.n_lon for c in (j - 1, j, j + 1)}
        for r in rows:
            for c in cols:
                yield from self.cells.get((r, c), ())

    def any_within(self, p: TrackPoint, threshold_km: float) -> bool:
        return any(pairwise_distance(p, q) <= threshold_km for q in self.candidates(p))


def directional_overlap(
    track: Track,
    other: Track,
    threshold_km: float,
    *,
    grid: Optional[PointGrid] = None,
) -> DirectionalOverlap:
    """Overlap of `track` measured against `other`, segment by segment."""
    total_km = 0.0
    overlap_km = 0.0

    pts = track.points
    for p0, p1 in zip(pts, pts[1:]):
        seg_km = pairwise_distance(p0, p1)
        total_km += seg_km

        mid = segment_midpoint(p0, p1)
        if grid is not None:
            shared = grid.any_within(mid, threshold_km)
        else:
            shared = nearest_distance(mid, other) <= threshold_km
        if shared:
            overlap_km += seg_km

    percent = overlap_km / total_km * 100 if total_km > 0 else 0.0

    return DirectionalOverlap(
        total_km=total_km,
        overlap_km=overlap_km,
        overlap_percent=percent,
        unique_km=total_km - overlap_km,
    )


def analyze_overlap(
    track_a: Track,
    track_b: Track,
    threshold_m: float = OVERLAP_THRESHOLD_M,
    *,
    use_index: bool = True,
) -> OverlapResult:
    """
    Shared vs unique distance for both tracks.

    Args:
        track_a, track_b: Tracks to compare
        threshold_m: Max midpoint-to-point distance (meters) for a shared segment
        use_index: Search through a PointGrid instead of scanning every point.
            Results are identical either way; the grid only skips points that
            cannot be within the threshold.

    Raises:
        AnalysisError: threshold is negative or not finite
    """
    if not math.isfinite(threshold_m) or threshold_m < 0:
        raise AnalysisError(f"overlap threshold must be a non-negative number of meters, got {threshold_m!r}")

    threshold_km = threshold_m / 1000.0

    grid_a = grid_b = None
    if use_index:
        grid_a = PointGrid.build(track_a, threshold_km)
        grid_b = PointGrid.build(track_b, threshold_km)

    a = directional_overlap(track_a, track_b, threshold_km, grid=grid_b)
    b = directional_overlap(track_b, track_a, threshold_km, grid=grid_a)

    return OverlapResult(
        track_a=a,
        track_b=b,
        shared_distance_km=(a.overlap_km + b.overlap_km) / 2,
    )
