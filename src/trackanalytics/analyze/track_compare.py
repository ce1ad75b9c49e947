#!/usr/bin/env python3
"""
track_compare.py: compare two GPX tracks.

Prints distance, elevation and speed metrics for each track, followed by how
much of each route the other one covers.
"""

from __future__ import annotations

import argparse
import math
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from trackanalytics.analyze.models import ComparisonResult, DirectionalOverlap, TrackMetrics
from trackanalytics.analyze.track import compare_tracks
from trackanalytics.config import UNITS, load_config
from trackanalytics.errors import ConfigError, InvalidGpxError
from trackanalytics.formats.gpx import load_track
from trackanalytics.util.logging import log

# Kilometers per unit (international mile, international nautical mile)
KM_PER_UNIT = {"km": 1.0, "mi": 1.609344, "nmi": 1.852}

TSV_HEADER = (
    "track\tpoints\tdistance\tascent_m\tdescent_m\tmin_ele_m\tmax_ele_m\t"
    "duration_s\tmoving_s\tavg_speed\tavg_moving_speed\tmax_speed\t"
    "overlap\toverlap_pct\tunique"
)


def km_factor(units: str) -> float:
    """Multiplier taking kilometers (and km/h) into `units` (and units/h)."""
    return 1.0 / KM_PER_UNIT[units]


def _fmt(v: Optional[float], spec: str) -> str:
    return "" if v is None else format(v, spec)


def _speed_label(units: str) -> str:
    return {"km": "km/h", "mi": "mph", "nmi": "kn"}[units]


def print_report(m: TrackMetrics, ov: DirectionalOverlap, *, units: str, tsv: bool) -> None:
    f = km_factor(units)
    ele = m.elevation
    spd = m.speed

    if tsv:
        print("\t".join([
            m.track_name,
            str(m.point_count),
            f"{m.total_distance_km * f:.3f}",
            _fmt(ele and ele.total_ascent, ".1f"),
            _fmt(ele and ele.total_descent, ".1f"),
            _fmt(ele and ele.min_elevation, ".1f"),
            _fmt(ele and ele.max_elevation, ".1f"),
            _fmt(spd and spd.duration.total_seconds(), ".1f"),
            _fmt(spd and spd.moving_time.total_seconds(), ".1f"),
            _fmt(spd and spd.avg_speed_kmh * f, ".2f"),
            _fmt(spd and spd.avg_moving_speed_kmh * f, ".2f"),
            _fmt(spd and spd.max_speed_kmh * f, ".2f"),
            f"{ov.overlap_km * f:.3f}",
            f"{ov.overlap_percent:.1f}",
            f"{ov.unique_km * f:.3f}",
        ]))
        return

    sp = _speed_label(units)
    print(f"\n{m.track_name}")
    print(f"  points          : {m.point_count}")
    print(f"  distance ({units:<3})  : {m.total_distance_km * f:.3f}")
    if ele is not None:
        print(f"  ascent (m)      : {ele.total_ascent:.1f}")
        print(f"  descent (m)     : {ele.total_descent:.1f}")
        print(f"  elevation (m)   : {ele.min_elevation:.1f} .. {ele.max_elevation:.1f}")
    else:
        print("  elevation       : n/a")
    if spd is not None:
        print(f"  duration        : {spd.duration}")
        print(f"  moving time     : {spd.moving_time}")
        print(f"  avg speed ({sp:<4}): {spd.avg_speed_kmh * f:.2f}")
        print(f"  moving ({sp:<4})   : {spd.avg_moving_speed_kmh * f:.2f}")
        print(f"  max speed ({sp:<4}): {spd.max_speed_kmh * f:.2f}")
    else:
        print("  speed           : n/a")
    print(f"  overlap ({units:<3})   : {ov.overlap_km * f:.3f} ({ov.overlap_percent:.1f}%)")
    print(f"  unique ({units:<3})    : {ov.unique_km * f:.3f}")


def print_comparison(result: ComparisonResult, *, units: str, tsv: bool) -> None:
    if tsv:
        print(TSV_HEADER)
    print_report(result.metrics_a, result.overlap.track_a, units=units, tsv=tsv)
    print_report(result.metrics_b, result.overlap.track_b, units=units, tsv=tsv)
    if not tsv:
        shared = result.overlap.shared_distance_km * km_factor(units)
        print(f"\nshared distance ({units}): {shared:.3f}")


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="trackanalytics: compare two GPX tracks.")
    ap.add_argument("gpx_a", help="First GPX file.")
    ap.add_argument("gpx_b", help="Second GPX file.")
    ap.add_argument("--threshold-m", type=float, default=None,
                    help="Overlap distance threshold in meters (default: from config, 50).")
    ap.add_argument("--units", choices=UNITS, default=None,
                    help="Distance units for the report (default: from config, km).")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated output (good for piping).")
    ap.add_argument("--plot", type=Path, default=None,
                    help="Write an elevation profile chart to this image file.")
    ap.add_argument("--config", type=Path, default=None,
                    help="User config file (default: ~/.config/trackanalytics/config.toml).")

    args = ap.parse_args(argv)

    try:
        cfg = load_config(user_config_path=args.config)
    except ConfigError as e:
        log(f"Config error: {e}", file=sys.stderr)
        return 2

    settings = cfg.analysis
    if args.threshold_m is not None:
        if not math.isfinite(args.threshold_m) or args.threshold_m < 0:
            log(f"--threshold-m must be non-negative, got {args.threshold_m}", file=sys.stderr)
            return 2
        settings = replace(settings, overlap_threshold_m=args.threshold_m)
    units = args.units or cfg.display.units

    tracks = []
    for raw in (args.gpx_a, args.gpx_b):
        path = Path(raw).expanduser()
        if not path.is_file():
            log(f"Not a file: {path}", file=sys.stderr)
            return 2
        try:
            track = load_track(path)
        except InvalidGpxError as e:
            log(str(e), file=sys.stderr)
            return 2
        log(f"Loaded {track.name!r}: {len(track.points)} points", file=sys.stderr)
        tracks.append(track)

    result = compare_tracks(tracks[0], tracks[1], settings)
    print_comparison(result, units=units, tsv=args.tsv)

    if args.plot is not None:
        from trackanalytics.visualize.plot import plot_elevation_profiles

        drawn = plot_elevation_profiles(tracks, out_path=args.plot)
        log(f"Wrote elevation chart ({drawn} profile(s)): {args.plot}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
