# trackanalytics/analyze/speed.py
"""
Duration and speed statistics for a timestamped track.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from trackanalytics.analyze.distance import pairwise_distance, total_distance
from trackanalytics.analyze.models import SpeedMetrics, Track, TrackPoint

# Below this a segment counts as standing still
MIN_MOVING_SPEED_KMH = 1.0
# Above this a segment is a GPS or timestamp glitch
MAX_REALISTIC_SPEED_KMH = 200.0


def timed_points(track: Track) -> list[TrackPoint]:
    """Points carrying a timestamp, stably sorted by time."""
    return sorted((p for p in track.points if p.time is not None), key=lambda p: p.time)


def compute_step_metrics(
    points: list[TrackPoint],
    *,
    max_speed_kmh: float = MAX_REALISTIC_SPEED_KMH,
) -> tuple[list[float], list[float], list[float]]:
    """
    Per-segment dt (s), distance (km), speed (km/h) over time-sorted points.

    Segments with non-positive elapsed time are dropped, and so are segments
    faster than `max_speed_kmh`.
    """
    dts = []
    ds = []
    vs = []

    for p0, p1 in zip(points, points[1:]):
        dt_s = (p1.time - p0.time).total_seconds()
        if dt_s <= 0:
            continue

        d_km = pairwise_distance(p0, p1)
        v = d_km / dt_s * 3600
        if v > max_speed_kmh:
            continue

        dts.append(dt_s)
        ds.append(d_km)
        vs.append(v)

    return dts, ds, vs


def speed_metrics(
    track: Track,
    *,
    min_moving_speed_kmh: float = MIN_MOVING_SPEED_KMH,
    max_speed_kmh: float = MAX_REALISTIC_SPEED_KMH,
) -> Optional[SpeedMetrics]:
    """
    Speed statistics, or None without at least two distinct timestamps.

    Average speed divides the whole-track distance (untimed points included)
    by the first-to-last timestamp span. Max speed and the moving totals only
    see the accepted segments of the time-sorted subsequence; glitch segments
    are excluded from those but still count towards the overall average.

    Durations keep fractional seconds rather than truncating to whole
    seconds, so sub-second segments still count.
    """
    points = timed_points(track)
    if len(points) < 2:
        return None

    duration = points[-1].time - points[0].time
    duration_s = duration.total_seconds()
    if duration_s <= 0:
        return None

    avg_speed = total_distance(track) / duration_s * 3600

    max_speed = 0.0
    moving_s = 0.0
    moving_km = 0.0
    for dt_s, d_km, v in zip(*compute_step_metrics(points, max_speed_kmh=max_speed_kmh)):
        max_speed = max(max_speed, v)
        if v >= min_moving_speed_kmh:
            moving_s += dt_s
            moving_km += d_km

    avg_moving = moving_km / moving_s * 3600 if moving_s > 0 else 0.0

    return SpeedMetrics(
        duration=duration,
        avg_speed_kmh=avg_speed,
        max_speed_kmh=max_speed,
        moving_time=dt.timedelta(seconds=moving_s),
        avg_moving_speed_kmh=avg_moving,
    )
